"""
CLI -- Command interface for the namespace resolver

Reads the namespace cache snapshot the runtime integration wrote and
answers resolution and classification questions about it:

    nsresolve resolve str/join --ns my.app
    nsresolve classify when --ns my.app --before "("
    nsresolve symbols --ns my.app
    nsresolve config --set font_lock.dynamic=macro,core

A missing snapshot is not an error: every answer is then "unresolved".
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .core.cache import SnapshotStore
from .core.resolver import SymbolResolver
from .core.classify import Classifier, VerbosityPolicy
from .presentation.symbols import get_symbols
from .commands.resolve_cmd import ResolveCommand
from .commands.classify_cmd import ClassifyCommand
from .commands.symbols_cmd import SymbolsCommand
from .commands.config_cmd import ConfigCommand
from . import __version__


class ResolveCLI:
    """Command-line interface over one namespace cache snapshot."""

    def __init__(self, project_dir: Path, cache_path: Optional[Path] = None):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        # Initialize symbols based on config
        self.symbols = get_symbols(self.config.display.symbols)

        # Snapshot is read once per invocation
        self.cache_path = Path(cache_path) if cache_path else self.config_manager.cache_path()
        self.store = SnapshotStore(self.cache_path)
        self.store.refresh()

        # Initialize command handlers (modular architecture)
        self._resolve_cmd = ResolveCommand(self)
        self._classify_cmd = ClassifyCommand(self)
        self._symbols_cmd = SymbolsCommand(self)
        self._config_cmd = ConfigCommand(self)

    @property
    def has_snapshot(self) -> bool:
        return self.store.current() is not None

    @property
    def resolver(self) -> SymbolResolver:
        """Resolver bound to the current snapshot (None-tolerant)."""
        return SymbolResolver(
            self.store.current(),
            core_ns=self.config.resolve.core_ns,
            max_referral_depth=self.config.resolve.max_referral_depth
        )

    def policy(self, override: Optional[str] = None) -> VerbosityPolicy:
        """Verbosity policy from config, or from an explicit override."""
        if override is not None:
            return VerbosityPolicy.parse(override)
        return self.config.font_lock.policy

    def classifier(self, policy: Optional[str] = None) -> Classifier:
        return Classifier(self.resolver, self.policy(policy))

    def resolve(self, ref: str, ns: str, suggestions: int = 5):
        """Resolve a reference. Delegates to ResolveCommand."""
        return self._resolve_cmd.resolve(ref, ns, suggestions=suggestions)

    def classify(self, text: str, ns: str, before: str = "(", file: Path = None,
                 offset: int = None, static_face: str = None, policy: str = None):
        """Classify a matched symbol. Delegates to ClassifyCommand."""
        return self._classify_cmd.classify(
            text, ns,
            before=before,
            file=file,
            offset=offset,
            static_face=static_face,
            policy=policy
        )

    def list_symbols(self, ns: str, filter_pattern: str = None):
        """List visible symbols. Delegates to SymbolsCommand."""
        return self._symbols_cmd.list_symbols(ns, filter_pattern=filter_pattern)

    def show_config(self):
        """Show current configuration. Delegates to ConfigCommand."""
        return self._config_cmd.show_config()

    def set_config(self, key: str, value: str, scope: str = "project"):
        """Set a configuration value. Delegates to ConfigCommand."""
        return self._config_cmd.set_config(key, value, scope=scope)


def main(argv=None):
    """
    Main entry point for nsresolve CLI.

    Uses command registry pattern for modular command handling.
    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = argparse.ArgumentParser(
        description="nsresolve -- namespace-qualified symbol resolver",
        epilog="Resolves symbols against a namespace cache snapshot."
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("NSRESOLVE_PROJECT_PATH", "."),
        help='Project directory (default: NSRESOLVE_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--cache',
        default=None,
        help='Namespace cache snapshot (default: cache.path from config)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log resolution details to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'nsresolve {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    cli = ResolveCLI(Path(args.project), cache_path=Path(args.cache) if args.cache else None)

    try:
        dispatch(args.command, cli, args)
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()


if __name__ == '__main__':
    main()
