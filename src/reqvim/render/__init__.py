"""Wrap-and-cursor cache: styled lines to display rows."""

from .cache import RenderResult, WrapCache
from .cells import char_width, display_char
from .viewport import Viewport
from .wrap import (
    DEFAULT_HIGHLIGHT,
    WrapOutput,
    line_length,
    plain_lines,
    row_text,
    wrap_lines,
)

__all__ = [
    "DEFAULT_HIGHLIGHT",
    "RenderResult",
    "Viewport",
    "WrapCache",
    "WrapOutput",
    "char_width",
    "display_char",
    "line_length",
    "plain_lines",
    "row_text",
    "wrap_lines",
]
