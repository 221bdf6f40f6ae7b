"""Cursor and selection coordinates shared by buffers and render caches."""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple, TypeVar

Cursor = Tuple[int, int]  # (row, column) in characters
Selection = Tuple[Cursor, Cursor]

LineT = TypeVar("LineT")


def clamp_cursor(
    lines: Sequence[LineT],
    cursor: Cursor,
    length: Callable[[LineT], int] = len,  # type: ignore[assignment]
) -> Cursor:
    """Pull ``cursor`` back inside ``lines``; never raises.

    ``length`` measures a line in characters, so styled lines can be
    clamped the same way as plain strings.
    """

    if not lines:
        return (0, 0)
    row, col = cursor
    row = max(0, min(row, len(lines) - 1))
    col = max(0, min(col, length(lines[row])))
    return (row, col)


def normalize_selection(anchor: Cursor, cursor: Cursor) -> Selection:
    if anchor <= cursor:
        return anchor, cursor
    return cursor, anchor


def clamp_selection(
    lines: Sequence[LineT],
    selection: Optional[Selection],
    length: Callable[[LineT], int] = len,  # type: ignore[assignment]
) -> Optional[Selection]:
    if selection is None:
        return None
    start, end = selection
    return normalize_selection(
        clamp_cursor(lines, start, length), clamp_cursor(lines, end, length)
    )


def step_forward(lines: Sequence[str], cursor: Cursor) -> Cursor:
    """One character right, onto the next line at a line end."""

    if not lines:
        return (0, 0)
    row, col = clamp_cursor(lines, cursor)
    if col < len(lines[row]):
        return (row, col + 1)
    if row < len(lines) - 1:
        return (row + 1, 0)
    return (row, col)


__all__ = [
    "Cursor",
    "Selection",
    "clamp_cursor",
    "clamp_selection",
    "normalize_selection",
    "step_forward",
]
