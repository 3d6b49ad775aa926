"""
SymbolsCommand — List the symbols usable from a namespace
"""

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print


COMMAND_NAME = 'symbols'


def symbol_kind(meta) -> str:
    if meta.is_macro:
        return "macro"
    if meta.has_arglist:
        return "function"
    return "var"


class SymbolsCommand(BaseCommand):
    """Command for listing visible symbols."""

    def list_symbols(self, ns: str, filter_pattern: str = None):
        symbols = self.symbols
        visible = self.resolver.visible_symbols(ns)
        if filter_pattern:
            needle = filter_pattern.lower()
            visible = {name: meta for name, meta in visible.items() if needle in name.lower()}

        template = self.template()
        template.header("NSRESOLVE SYMBOLS", ns)

        if not visible:
            template.section("SYMBOLS", "No symbols.")
        else:
            rows = []
            for name in sorted(visible):
                meta = visible[name]
                flags = []
                if meta.is_deprecated:
                    flags.append(symbols.deprecated)
                if meta.is_instrumented:
                    flags.append(symbols.instrumented)
                if meta.is_traced:
                    flags.append(symbols.traced)
                rows.append({"name": name, "kind": symbol_kind(meta), "flags": " ".join(flags)})
            template.section("SYMBOLS", template.format_table(rows, ["NAME", "KIND", "FLAGS"]))

        template.footer(f"{len(visible)} symbol(s) | {self.snapshot_note()}")
        safe_print(template.render())


def register_parser(subparsers):
    """Register symbols command parser."""
    p = subparsers.add_parser('symbols', help='List symbols visible from a namespace')
    p.add_argument('--ns', '-n', required=True, help='Namespace to list')
    p.add_argument('--filter', dest='filter_pattern', help='Only names containing this text')
    return p


def handle(cli, args):
    """Handle symbols command dispatch."""
    cli.list_symbols(args.ns, filter_pattern=args.filter_pattern)
