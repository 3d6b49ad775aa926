"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.nsresolve/config.yaml)
  3. User config (~/.nsresolve/config.yaml)
  4. Defaults

The resolver itself never reads configuration; callers build a
VerbosityPolicy and a SymbolResolver from the loaded Config.
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union

from .core.classify import VerbosityPolicy, MAXIMAL
from .core.resolver import DIALECT_CORE_NAMESPACES, DEFAULT_MAX_REFERRAL_DEPTH, core_namespace
from .presentation.symbols import get_symbols


logger = logging.getLogger(__name__)


DEFAULT_DIALECT = "clj"
DEFAULT_CACHE_PATH = ".nsresolve/ns-cache.json"


def _as_int(value: Any) -> Any:
    """Integer form of a YAML/env value; anything else is left for validate()."""
    if isinstance(value, bool):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return value


@dataclass
class FontLockConfig:
    """Which symbol kinds get dynamic highlighting."""
    dynamic: Union[str, List[str]] = MAXIMAL  # "maximal" | [macro, function, var, core, deprecated]

    @property
    def policy(self) -> VerbosityPolicy:
        """Parsed policy. Call validate() first; invalid values raise."""
        return VerbosityPolicy.parse(self.dynamic)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        try:
            VerbosityPolicy.parse(self.dynamic)
        except (ValueError, TypeError) as e:
            return str(e)
        return None


@dataclass
class ResolveConfig:
    """Resolution settings."""
    dialect: str = DEFAULT_DIALECT  # "clj" | "cljs"
    max_referral_depth: int = DEFAULT_MAX_REFERRAL_DEPTH

    @property
    def core_ns(self) -> str:
        return core_namespace(self.dialect)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.dialect not in DIALECT_CORE_NAMESPACES:
            valid = ", ".join(DIALECT_CORE_NAMESPACES)
            return f"Unknown dialect '{self.dialect}'. Valid: {valid}"
        if not isinstance(self.max_referral_depth, int) or self.max_referral_depth < 1:
            return f"Invalid max_referral_depth '{self.max_referral_depth}'. Must be an integer >= 1"
        return None


@dataclass
class CacheConfig:
    """Where the namespace cache snapshot lives."""
    path: str = DEFAULT_CACHE_PATH


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    font_lock: FontLockConfig = field(default_factory=FontLockConfig)
    resolve: ResolveConfig = field(default_factory=ResolveConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "font_lock": {
                "dynamic": self.font_lock.dynamic
            },
            "resolve": {
                "dialect": self.resolve.dialect,
                "max_referral_depth": self.resolve.max_referral_depth
            },
            "cache": {
                "path": self.cache.path
            },
            "display": {
                "symbols": self.display.symbols
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        font_lock_data = data.get("font_lock") or {}
        resolve_data = data.get("resolve") or {}
        cache_data = data.get("cache") or {}
        display_data = data.get("display") or {}

        return cls(
            font_lock=FontLockConfig(
                dynamic=font_lock_data.get("dynamic", MAXIMAL)
            ),
            resolve=ResolveConfig(
                dialect=resolve_data.get("dialect", DEFAULT_DIALECT),
                max_referral_depth=_as_int(resolve_data.get("max_referral_depth", DEFAULT_MAX_REFERRAL_DEPTH))
            ),
            cache=CacheConfig(
                path=cache_data.get("path", DEFAULT_CACHE_PATH)
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            )
        )

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.font_lock, self.resolve, self.display):
            error = section.validate()
            if error:
                return error
        return None


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (NSRESOLVE_FONT_LOCK, NSRESOLVE_DIALECT, NSRESOLVE_CACHE)
      2. Project config (.nsresolve/config.yaml)
      3. User config (~/.nsresolve/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".nsresolve"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".nsresolve"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("NSRESOLVE_FONT_LOCK"):
            config_data.setdefault("font_lock", {})["dynamic"] = os.environ["NSRESOLVE_FONT_LOCK"]
        if os.environ.get("NSRESOLVE_DIALECT"):
            config_data.setdefault("resolve", {})["dialect"] = os.environ["NSRESOLVE_DIALECT"]
        if os.environ.get("NSRESOLVE_CACHE"):
            config_data.setdefault("cache", {})["path"] = os.environ["NSRESOLVE_CACHE"]

        self._config = self._with_defaults_for_invalid(Config.from_dict(config_data))
        return self._config

    def _with_defaults_for_invalid(self, config: Config) -> Config:
        """Replace sections that fail validation with their defaults."""
        for name in ("font_lock", "resolve", "display"):
            section = getattr(config, name)
            error = section.validate()
            if error:
                logger.warning("Ignoring invalid %s config (%s), using defaults", name, error)
                setattr(config, name, type(section)())
        return config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "resolve.dialect")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'resolve.dialect')"

        section, setting = parts

        if section == "font_lock":
            if setting == "dynamic":
                try:
                    config.font_lock.dynamic = VerbosityPolicy.parse(value).to_value()
                except ValueError as e:
                    return str(e)
            else:
                return f"Unknown font_lock setting: {setting}. Valid: dynamic"

        elif section == "resolve":
            if setting == "dialect":
                config.resolve.dialect = value.lower()
            elif setting == "max_referral_depth":
                try:
                    config.resolve.max_referral_depth = int(value)
                except ValueError:
                    return f"Invalid max_referral_depth '{value}'. Must be an integer >= 1"
            else:
                return f"Unknown resolve setting: {setting}. Valid: dialect, max_referral_depth"
            error = config.resolve.validate()
            if error:
                return error

        elif section == "cache":
            if setting == "path":
                config.cache.path = value
            else:
                return f"Unknown cache setting: {setting}. Valid: path"

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols"
            error = config.display.validate()
            if error:
                return error
        else:
            return f"Unknown section: {section}. Valid: font_lock, resolve, cache, display"

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "font_lock":
            if setting == "dynamic":
                dynamic = config.font_lock.dynamic
                return dynamic if isinstance(dynamic, str) else ",".join(dynamic)
        elif section == "resolve":
            if setting == "dialect":
                return config.resolve.dialect
            elif setting == "max_referral_depth":
                return str(config.resolve.max_referral_depth)
            elif setting == "core_ns":
                return config.resolve.core_ns
        elif section == "cache":
            if setting == "path":
                return config.cache.path
        elif section == "display":
            if setting == "symbols":
                return config.display.symbols

        return None

    def cache_path(self) -> Path:
        """Snapshot path, relative paths taken from the project directory."""
        path = Path(self.load().cache.path).expanduser()
        return path if path.is_absolute() else self.project_dir / path

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        error = config.validate()
        status = f"{symbols.check_fail} {error}" if error else f"{symbols.check_pass} Valid"
        dynamic = self.get("font_lock.dynamic")

        lines = [
            "Configuration:",
            "",
            "Font lock:",
            f"  Dynamic: {dynamic}",
            "",
            "Resolve:",
            f"  Dialect: {config.resolve.dialect}",
            f"  Core namespace: {config.resolve.core_ns}",
            f"  Max referral depth: {config.resolve.max_referral_depth}",
            "",
            "Cache:",
            f"  Path: {self.cache_path()}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            f"Status: {status}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
