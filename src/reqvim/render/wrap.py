"""Greedy column wrapping of styled lines with cursor and selection tracking.

Lines are sequences of rich ``Segment`` runs. Each logical line is walked
character by character; a display row is closed before a character that
would overflow ``width``, never after. Coordinates going in are logical
``(row, col)`` character positions, the cursor coming out is display
``(x, y)`` in cells and rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from rich.segment import Segment
from rich.style import Style

from reqvim.buffer import Cursor, Selection

from .cells import char_width, display_char

StyledLine = Sequence[Segment]
Row = Tuple[Segment, ...]
DisplayPos = Tuple[int, int]

DEFAULT_HIGHLIGHT = Style(reverse=True)


@dataclass(frozen=True, slots=True)
class WrapOutput:
    rows: Tuple[Row, ...]
    cursor: Optional[DisplayPos] = None


class _RowBuilder:
    """Accumulates characters into merged runs for one display row."""

    __slots__ = ("runs", "text", "style", "chars", "cells")

    def __init__(self) -> None:
        self.runs: List[Segment] = []
        self.text: List[str] = []
        self.style: Optional[Style] = None
        self.chars = 0
        self.cells = 0

    def add(self, ch: str, style: Optional[Style], cells: int) -> None:
        if self.text and style != self.style:
            self._flush()
        self.style = style
        self.text.append(ch)
        self.chars += 1
        self.cells += cells

    def _flush(self) -> None:
        if self.text:
            self.runs.append(Segment("".join(self.text), self.style))
            self.text = []

    def close(self) -> Row:
        self._flush()
        return tuple(self.runs)


def plain_lines(
    lines: Iterable[str], style: Optional[Style] = None
) -> List[List[Segment]]:
    """Lift plain strings into single-run styled lines."""

    return [[Segment(line, style)] if line else [] for line in lines]


def line_length(line: StyledLine) -> int:
    return sum(len(segment.text) for segment in line)


def row_text(row: Row) -> str:
    return "".join(segment.text for segment in row)


def _selection_span(
    selection: Optional[Selection], line_index: int
) -> Tuple[int, Optional[int]]:
    """Selected ``[lo, hi)`` character range on one line; ``hi=None`` is open."""

    if selection is None:
        return (0, 0)
    (sr, sc), (er, ec) = selection
    if line_index < sr or line_index > er:
        return (0, 0)
    lo = sc if line_index == sr else 0
    hi = ec if line_index == er else None
    return (lo, hi)


def wrap_lines(
    lines: Sequence[StyledLine],
    width: int,
    *,
    cursor: Optional[Cursor] = None,
    selection: Optional[Selection] = None,
    highlight: Style = DEFAULT_HIGHLIGHT,
) -> WrapOutput:
    width = max(width, 1)
    rows: List[Row] = []
    cursor_pos: Optional[DisplayPos] = None

    for line_index, line in enumerate(lines):
        lo, hi = _selection_span(selection, line_index)
        cursor_col = cursor[1] if cursor and cursor[0] == line_index else None
        builder = _RowBuilder()
        index = 0

        for segment in line:
            for ch in segment.text:
                cells = char_width(ch)
                if builder.chars and builder.cells + cells > width:
                    rows.append(builder.close())
                    builder = _RowBuilder()
                if cursor_col == index:
                    cursor_pos = (builder.cells, len(rows))
                selected = lo <= index and (hi is None or index < hi)
                style = highlight if selected else segment.style
                builder.add(display_char(ch), style, cells)
                index += 1

        if cursor_col is not None and cursor_col >= index:
            # End-of-line cursor; a full row pins it to the last cell.
            cursor_pos = (min(builder.cells, width - 1), len(rows))
        rows.append(builder.close())

    if not rows:
        rows.append(())
        if cursor is not None:
            cursor_pos = (0, 0)
    return WrapOutput(rows=tuple(rows), cursor=cursor_pos)


__all__ = [
    "DEFAULT_HIGHLIGHT",
    "DisplayPos",
    "Row",
    "StyledLine",
    "WrapOutput",
    "line_length",
    "plain_lines",
    "row_text",
    "wrap_lines",
]
