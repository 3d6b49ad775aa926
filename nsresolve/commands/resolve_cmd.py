"""
ResolveCommand — Show what a reference denotes in a namespace

Prints the definition metadata, the namespace it comes from, the alias
or referral it was reached through, and near names when the reference
does not resolve.
"""

from typing import Optional

from ..commands.base import BaseCommand
from ..core.resolver import SymbolResolver, split_reference
from ..core.suggest import suggest
from ..presentation.symbols import safe_print


COMMAND_NAME = 'resolve'


class ResolveCommand(BaseCommand):
    """Command for single-reference resolution."""

    def resolve(self, ref: str, ns: str, suggestions: int = 5):
        symbols = self.symbols
        resolver = self.resolver

        meta = resolver.resolve_var(ns, ref)
        provenance = resolver.resolve_var_namespace(ns, ref)

        template = self.template()
        template.header("NSRESOLVE RESOLVE", f"{ref} in {ns}")

        if meta is None:
            template.section("RESULT", f"{symbols.unresolved} Unresolved")
            if provenance:
                template.section("NAMESPACE", f"{provenance} (not defined there)")
            near = suggest(resolver, ns, ref, limit=suggestions) if suggestions > 0 else []
            if near:
                template.section(
                    "DID YOU MEAN",
                    template.format_list([f"{s.name} ({s.score:.0%})" for s in near])
                )
        else:
            kind = "macro" if meta.is_macro else "function" if meta.has_arglist else "var"
            marker = getattr(symbols, kind)
            template.section("RESULT", f"{marker} {kind}")
            if provenance:
                core_marker = f" {symbols.core}" if provenance == resolver.core_ns else ""
                template.section("NAMESPACE", f"{provenance}{core_marker}")
            via = self._format_via(resolver, ns, ref)
            if via:
                template.section("VIA", via)
            template.section("METADATA", self._format_meta(meta))

        template.footer(self.snapshot_note())
        safe_print(template.render())

    def _format_via(self, resolver: SymbolResolver, ns: str, ref: str) -> Optional[str]:
        """The alias or referral of `ns` the reference went through, if any."""
        record = resolver.cache.get(ns) if resolver.cache is not None else None
        if record is None:
            return None

        symbols = self.symbols
        prefix, name = split_reference(ref)
        if prefix is not None:
            target = record.aliases.get(prefix)
            if target is None:
                return None
            return f"{symbols.alias} alias {prefix} {symbols.arrow} {target}"
        if name in record.interns or name not in record.refers:
            return None
        return f"{symbols.refer} refer {name} {symbols.arrow} {record.refers[name]}"

    def _format_meta(self, meta) -> str:
        rows = [{"key": key, "value": str(value)} for key, value in sorted(meta.to_dict().items())]
        if not rows:
            return "(no metadata)"
        return self.template().format_table(rows, ["KEY", "VALUE"])


def register_parser(subparsers):
    """Register resolve command parser."""
    p = subparsers.add_parser('resolve', help='Resolve a symbol reference in a namespace')
    p.add_argument('ref', help='Symbol as written (e.g., map, str/join)')
    p.add_argument('--ns', '-n', required=True, help='Namespace the symbol occurs in')
    p.add_argument('--suggestions', type=int, default=5,
                   help='Near names to show when unresolved (0 to disable)')
    return p


def handle(cli, args):
    """Handle resolve command dispatch."""
    cli.resolve(args.ref, args.ns, suggestions=args.suggestions)
