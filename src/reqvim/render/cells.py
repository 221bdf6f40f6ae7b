"""Terminal cell widths for single characters."""

from __future__ import annotations

from functools import lru_cache

import wcwidth as _wcwidth

REPLACEMENT_GLYPH = "\N{REPLACEMENT CHARACTER}"


@lru_cache(maxsize=1024)
def char_width(ch: str) -> int:
    """Cells taken by ``ch``: 2 for wide, 0 for combining marks.

    Characters wcwidth cannot measure (controls, ``-1``) take one cell so
    the cursor always has somewhere to sit; see ``display_char``.
    """

    if ch == "\t":
        return 1
    width = _wcwidth.wcwidth(ch)
    if width < 0:
        return 1
    return width


def display_char(ch: str) -> str:
    """Printable stand-in for ``ch``; tabs become a space."""

    if ch == "\t":
        return " "
    if _wcwidth.wcwidth(ch) < 0:
        return REPLACEMENT_GLYPH
    return ch


__all__ = ["REPLACEMENT_GLYPH", "char_width", "display_char"]
