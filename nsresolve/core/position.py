"""
Macro positions — Where a macro invocation can syntactically appear

Macros cannot be taken as values, so a symbol naming a macro only
invokes it right after an opening paren, `(when ...)`, or when it is
var-quoted, `#'when`. Anywhere else the token is just a symbol.
"""

from typing import Sequence


OPEN_LIST = "("
FUNCTION_QUOTE = "#"
QUOTE = "'"


def char_before(buffer: Sequence[str], pos: int) -> str:
    """
    Character immediately before `pos`.

    Raises:
        IndexError: `pos` is at or before the start of the buffer, or past its end
    """
    if pos < 1 or pos > len(buffer):
        raise IndexError(f"position {pos} outside buffer of length {len(buffer)}")
    return buffer[pos - 1]


def is_valid_macro_position(buffer: Sequence[str], pos: int) -> bool:
    """
    Whether a symbol starting at `pos` may be a macro invocation.

    True after `(` or after `#'`. Positions outside the buffer (or a
    buffer that cannot be indexed) are simply not valid.

    Examples:
        >>> is_valid_macro_position("(foo", 1)
        True
        >>> is_valid_macro_position("bar foo", 4)
        False
        >>> is_valid_macro_position("#'foo", 2)
        True
    """
    try:
        before = char_before(buffer, pos)
        if before == OPEN_LIST:
            return True
        return before == QUOTE and char_before(buffer, pos - 1) == FUNCTION_QUOTE
    except (IndexError, TypeError):
        return False
