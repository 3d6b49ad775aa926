"""
Symbols — Visual vocabulary for classification results

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe_print(): encoding-safe printing for text that came
from a cache snapshot (docstrings, arglists) and may hold any Unicode.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '←': '<-',
    '⇢': '=>',
    '↔': '<->',
    '…': '...',
    '–': '-',
    '—': '--',
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
    '•': '*',
    '·': '.',
    '≈': '~',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


@dataclass(frozen=True)
class SymbolSet:
    """Complete set of symbols for classifications and states."""
    # Classifications
    macro: str
    function: str
    var: str
    unresolved: str

    # Overlays
    instrumented: str
    traced: str
    deprecated: str

    # Provenance
    core: str
    alias: str
    refer: str

    # Status markers
    check_pass: str
    check_warn: str
    check_fail: str
    arrow: str
    bullet: str


UNICODE = SymbolSet(
    macro='◆',
    function='ƒ',
    var='◇',
    unresolved='?',
    instrumented='●',
    traced='↻',
    deprecated='⊘',
    core='◎',
    alias='↔',
    refer='⇢',
    check_pass='✓',
    check_warn='⚠',
    check_fail='❌',
    arrow='→',
    bullet='•',
)

ASCII = SymbolSet(
    macro='[M]',
    function='[F]',
    var='[V]',
    unresolved='[?]',
    instrumented='[*]',
    traced='[T]',
    deprecated='[DEP]',
    core='[C]',
    alias='<->',
    refer='=>',
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[ERR]',
    arrow='->',
    bullet='*',
)


# Mapping from classification value to symbol attribute
CLASSIFICATION_TO_SYMBOL = {
    'macro': 'macro',
    'function': 'function',
    'var': 'var',
    'unresolved': 'unresolved',
}


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    if os.environ.get('NSRESOLVE_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('NSRESOLVE_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang:
        return True
    if 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    if os.environ.get('WT_SESSION'):
        return True

    if stdout_encoding and 'utf' in stdout_encoding.lower():
        return True

    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII


def symbol_for_classification(symbols: SymbolSet, classification: str) -> str:
    """Get symbol for a classification value."""
    attr = CLASSIFICATION_TO_SYMBOL.get(classification, 'unresolved')
    return getattr(symbols, attr)
