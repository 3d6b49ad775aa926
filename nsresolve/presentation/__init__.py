"""
Presentation — Display layer for nsresolve CLI

Contains display and formatting:
- Symbols: Visual vocabulary (unicode/ascii)
- Template: Structured output with header/section/footer
"""

from .symbols import (
    SymbolSet, get_symbols, safe_print,
    symbol_for_classification, UNICODE, ASCII
)
from .template import OutputTemplate, TemplateSection

__all__ = [
    # Symbols
    "SymbolSet", "get_symbols", "safe_print",
    "symbol_for_classification", "UNICODE", "ASCII",
    # Template
    "OutputTemplate", "TemplateSection",
]
