"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through
properties instead of building their own.
"""

from typing import TYPE_CHECKING

from ..presentation.template import OutputTemplate

if TYPE_CHECKING:
    from ..cli import ResolveCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'ResolveCLI'):
        self._cli = cli

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def resolver(self):
        """SymbolResolver over the current snapshot."""
        return self._cli.resolver

    @property
    def store(self):
        """SnapshotStore holding the current snapshot."""
        return self._cli.store

    def template(self) -> OutputTemplate:
        return OutputTemplate(symbols=self.symbols)

    def snapshot_note(self) -> str:
        """Footer note naming the snapshot answers came from."""
        if self._cli.has_snapshot:
            return f"snapshot {self.store.digest} ({self._cli.cache_path})"
        return f"{self.symbols.check_warn} no namespace cache at {self._cli.cache_path}"
