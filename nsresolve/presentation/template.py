"""
OutputTemplate — Consistent CLI output structure

Builder for structured command output with header, sections, and
footer.

Usage:
    from nsresolve.presentation.template import OutputTemplate

    template = OutputTemplate()
    template.header("NSRESOLVE RESOLVE", "str/join in my.app")
    template.section("DEFINITION", details)
    template.footer("resolved via alias")
    print(template.render())
"""

import shutil
from dataclasses import dataclass
from typing import List, Dict, Optional

from .symbols import SymbolSet, get_symbols


HEADER_CHAR = "="
SECTION_CHAR = "-"
DEFAULT_WIDTH = 80
MAX_WIDTH = 100


@dataclass
class TemplateSection:
    """A titled section of output."""
    title: str
    content: str


class OutputTemplate:
    """
    Builder for structured CLI output.

    Creates consistent output with:
    - HEADER: Command identity
    - SECTIONS: Titled content blocks
    - FOOTER: Summary line
    """

    def __init__(self, symbols: Optional[SymbolSet] = None, width: Optional[int] = None):
        self.symbols = symbols or get_symbols()
        terminal = shutil.get_terminal_size((DEFAULT_WIDTH, 24)).columns
        self.width = width or min(terminal or DEFAULT_WIDTH, MAX_WIDTH)

        self._title: Optional[str] = None
        self._subtitle: Optional[str] = None
        self._sections: List[TemplateSection] = []
        self._summary: Optional[str] = None

    # =========================================================================
    # Builder Methods
    # =========================================================================

    def header(self, title: str, subtitle: Optional[str] = None) -> "OutputTemplate":
        self._title = title
        self._subtitle = subtitle
        return self

    def section(self, title: str, content: str) -> "OutputTemplate":
        self._sections.append(TemplateSection(title=title, content=content))
        return self

    def footer(self, summary: Optional[str] = None) -> "OutputTemplate":
        self._summary = summary
        return self

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self) -> str:
        """Render template to formatted string."""
        lines: List[str] = []

        if self._title:
            border = HEADER_CHAR * self.width
            lines.append(border)
            if self._subtitle:
                lines.append(f"{self._title} - {self._subtitle}")
            else:
                lines.append(self._title)
            lines.append(border)
            lines.append("")

        for section in self._sections:
            if section.title:
                lines.append(section.title)
                lines.append(SECTION_CHAR * len(section.title))
            if section.content:
                lines.append(section.content)
            lines.append("")

        lines.append(SECTION_CHAR * self.width)
        if self._summary:
            lines.append(f"Summary: {self._summary}")
        lines.append(HEADER_CHAR * self.width)

        return "\n".join(lines)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def format_table(
        self,
        rows: List[Dict[str, str]],
        columns: List[str],
        keys: Optional[List[str]] = None
    ) -> str:
        """
        Format data as simple aligned table (grep-parseable).

        Args:
            rows: List of dicts with data
            columns: Column headers
            keys: Dict keys for columns (defaults to lowercase headers)
        """
        if not rows:
            return ""

        keys = keys or [c.lower().replace(" ", "_") for c in columns]

        widths = [len(c) for c in columns]
        for row in rows:
            for i, key in enumerate(keys):
                widths[i] = max(widths[i], len(str(row.get(key, ""))))

        lines = ["  ".join(col.ljust(widths[i]) for i, col in enumerate(columns)).rstrip()]
        for row in rows:
            lines.append("  ".join(str(row.get(key, "")).ljust(widths[i]) for i, key in enumerate(keys)).rstrip())

        return "\n".join(lines)

    def format_list(self, items: List[str], bullet: Optional[str] = None) -> str:
        """Format items as bulleted list."""
        if not items:
            return ""

        bullet = bullet or self.symbols.bullet
        return "\n".join(f"{bullet} {item}" for item in items)
