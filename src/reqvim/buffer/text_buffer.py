"""Line-oriented text buffer driven by the modal engine."""

from __future__ import annotations

from enum import Enum, auto
from typing import List, Optional, Sequence

from .clipboard import YankSlot
from .document import BufferDocument, split_lines
from .state import (
    Cursor,
    Selection,
    clamp_cursor,
    clamp_selection,
    normalize_selection,
    step_forward,
)
from .undo import UndoEntry, UndoTimeline


class CursorMove(Enum):
    BACK = auto()
    FORWARD = auto()
    UP = auto()
    DOWN = auto()
    WORD_FORWARD = auto()
    WORD_BACK = auto()
    WORD_END = auto()
    HEAD = auto()
    END = auto()
    TOP = auto()
    BOTTOM = auto()


class _CharKind(Enum):
    SPACE = auto()
    PUNCT = auto()
    WORD = auto()


def _kind(ch: str) -> _CharKind:
    if ch.isspace():
        return _CharKind.SPACE
    if ch.isalnum() or ch == "_":
        return _CharKind.WORD
    return _CharKind.PUNCT


def find_word_start_forward(line: str, col: int) -> Optional[int]:
    n = len(line)
    if col >= n:
        return None
    current = _kind(line[col])
    i = col + 1
    while i < n and _kind(line[i]) == current:
        i += 1
    while i < n and _kind(line[i]) == _CharKind.SPACE:
        i += 1
    return i if i < n else None


def find_word_start_backward(line: str, col: int) -> Optional[int]:
    i = min(col, len(line)) - 1
    while i >= 0 and _kind(line[i]) == _CharKind.SPACE:
        i -= 1
    if i < 0:
        return None
    current = _kind(line[i])
    while i > 0 and _kind(line[i - 1]) == current:
        i -= 1
    return i


def find_word_end_forward(line: str, col: int) -> Optional[int]:
    """Index of the last character of the next word ending after ``col``."""

    n = len(line)
    i = col + 1
    while i < n and _kind(line[i]) == _CharKind.SPACE:
        i += 1
    if i >= n:
        return None
    current = _kind(line[i])
    while i + 1 < n and _kind(line[i + 1]) == current:
        i += 1
    return i


class TextBuffer:
    """Lines of text, a cursor, an optional selection anchor and history.

    Every coordinate handed in is clamped to the buffer; no method raises
    for out-of-range input. ``generation`` advances once per real change to
    the lines, which is what render caches key on.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "buffer",
        undo_limit: int = 50,
        yank: Optional[YankSlot] = None,
    ) -> None:
        self.name = name
        self.document = BufferDocument.from_text(text)
        self.history = UndoTimeline(undo_limit)
        self.yank = yank or YankSlot()
        self._cursor: Cursor = (0, 0)
        self._anchor: Optional[Cursor] = None

    # -- inspection ----------------------------------------------------------

    @property
    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def generation(self) -> int:
        return self.document.generation

    def set_cursor(self, row: int, col: int) -> None:
        self._cursor = clamp_cursor(self.lines, (row, col))

    def set_text(self, text: str) -> None:
        """Replace the whole content; clears history and selection."""

        self.document.replace(split_lines(text))
        self.history.clear()
        self._anchor = None
        self._cursor = clamp_cursor(self.lines, self._cursor)

    # -- motions -------------------------------------------------------------

    def move_cursor(self, move: CursorMove) -> None:
        lines = self.lines
        row, col = self._cursor
        line = lines[row]
        last_row = len(lines) - 1

        if move is CursorMove.BACK:
            if col > 0:
                target = (row, col - 1)
            elif row > 0:
                target = (row - 1, len(lines[row - 1]))
            else:
                target = (row, col)
        elif move is CursorMove.FORWARD:
            target = step_forward(lines, (row, col))
        elif move is CursorMove.UP:
            target = (max(row - 1, 0), col)
        elif move is CursorMove.DOWN:
            target = (min(row + 1, last_row), col)
        elif move is CursorMove.HEAD:
            target = (row, 0)
        elif move is CursorMove.END:
            target = (row, len(line))
        elif move is CursorMove.TOP:
            target = (0, col)
        elif move is CursorMove.BOTTOM:
            target = (last_row, col)
        elif move is CursorMove.WORD_FORWARD:
            found = find_word_start_forward(line, col)
            if found is not None:
                target = (row, found)
            elif row < last_row:
                target = (row + 1, 0)
            else:
                target = (row, len(line))
        elif move is CursorMove.WORD_BACK:
            found = find_word_start_backward(line, col)
            if found is not None:
                target = (row, found)
            elif row > 0:
                target = (row - 1, len(lines[row - 1]))
            else:
                target = (row, 0)
        else:
            target = self._word_end_target(lines, row, col)

        self._cursor = clamp_cursor(lines, target)

    def _word_end_target(self, lines: Sequence[str], row: int, col: int) -> Cursor:
        found = find_word_end_forward(lines[row], col)
        if found is not None:
            return (row, found)
        for next_row in range(row + 1, len(lines)):
            found = find_word_end_forward(lines[next_row], -1)
            if found is not None:
                return (next_row, found)
        return (row, len(lines[row]))

    # -- selection -----------------------------------------------------------

    def start_selection(self) -> None:
        self._anchor = self._cursor

    def cancel_selection(self) -> None:
        self._anchor = None

    def is_selecting(self) -> bool:
        return self._anchor is not None

    def selection_range(self, *, include_cursor: bool = False) -> Optional[Selection]:
        """Ordered anchor-to-cursor range.

        ``include_cursor`` also covers the character under the cursor, which
        is what Visual mode operators act on.
        """

        if self._anchor is None:
            return None
        lines = self.lines
        anchor = clamp_cursor(lines, self._anchor)
        cursor = step_forward(lines, self._cursor) if include_cursor else self._cursor
        return normalize_selection(anchor, cursor)

    # -- yank / clipboard ----------------------------------------------------

    def yank_text(self) -> str:
        return self.yank.text

    def set_yank_text(self, text: str) -> None:
        self.yank.text = text

    def copy(self) -> bool:
        selection = self._take_selection()
        if selection is None:
            return False
        self.yank.push(self.text_range(*selection))
        return True

    def cut(self) -> bool:
        selection = self._take_selection()
        if selection is None:
            return False
        start, end = selection
        self.yank.push(self.text_range(start, end))
        lines = _delete_range(list(self.lines), start, end)
        return self._commit("cut", lines, start)

    def paste(self) -> bool:
        text = self.yank.text
        if not text:
            return False
        lines = list(self.lines)
        position = self._cursor
        selection = self._take_selection()
        if selection is not None:
            lines = _delete_range(lines, *selection)
            position = selection[0]
        lines, cursor = _insert_text(lines, position, text)
        return self._commit("paste", lines, cursor)

    def text_range(self, start: Cursor, end: Cursor) -> str:
        lines = self.lines
        (sr, sc), (er, ec) = clamp_selection(lines, (start, end))  # type: ignore[misc]
        if sr == er:
            return lines[sr][sc:ec]
        parts = [lines[sr][sc:], *lines[sr + 1 : er], lines[er][:ec]]
        return "\n".join(parts)

    def _take_selection(self) -> Optional[Selection]:
        selection = self.selection_range()
        self._anchor = None
        if selection is None or selection[0] == selection[1]:
            return None
        return selection

    # -- raw edits -----------------------------------------------------------

    def insert_str(self, text: str) -> bool:
        if not text:
            return False
        self._anchor = None
        lines, cursor = _insert_text(list(self.lines), self._cursor, text)
        return self._commit("insert", lines, cursor)

    def insert_char(self, ch: str) -> bool:
        return self.insert_str(ch)

    def insert_newline(self) -> bool:
        return self.insert_str("\n")

    def delete_char(self) -> bool:
        """Delete the character before the cursor (backspace)."""

        self._anchor = None
        row, col = self._cursor
        if col > 0:
            start = (row, col - 1)
        elif row > 0:
            start = (row - 1, len(self.lines[row - 1]))
        else:
            return False
        lines = _delete_range(list(self.lines), start, (row, col))
        return self._commit("delete_char", lines, start)

    def delete_next_char(self) -> bool:
        self._anchor = None
        lines = self.lines
        row, col = self._cursor
        if col < len(lines[row]):
            end = (row, col + 1)
        elif row < len(lines) - 1:
            end = (row + 1, 0)
        else:
            return False
        return self._commit(
            "delete_next_char", _delete_range(list(lines), (row, col), end), (row, col)
        )

    # -- history -------------------------------------------------------------

    def undo(self) -> bool:
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry.before_lines, entry.cursor_before)
        return True

    def redo(self) -> bool:
        entry = self.history.redo()
        if entry is None:
            return False
        self._restore(entry.after_lines, entry.cursor_after)
        return True

    def _restore(self, lines: Sequence[str], cursor: Cursor) -> None:
        self._anchor = None
        self.document.replace(lines)
        self._cursor = clamp_cursor(self.lines, cursor)

    def _commit(self, label: str, lines: List[str], cursor: Cursor) -> bool:
        before = tuple(self.lines)
        cursor_before = self._cursor
        if not self.document.replace(lines):
            self._cursor = clamp_cursor(self.lines, cursor)
            return False
        self._cursor = clamp_cursor(self.lines, cursor)
        self.history.push(
            UndoEntry(
                label=label,
                before_lines=before,
                after_lines=tuple(self.lines),
                cursor_before=cursor_before,
                cursor_after=self._cursor,
            )
        )
        return True


def _delete_range(lines: List[str], start: Cursor, end: Cursor) -> List[str]:
    (sr, sc), (er, ec) = start, end
    lines[sr : er + 1] = [lines[sr][:sc] + lines[er][ec:]]
    return lines


def _insert_text(
    lines: List[str], position: Cursor, text: str
) -> tuple[List[str], Cursor]:
    row, col = position
    before, after = lines[row][:col], lines[row][col:]
    parts = split_lines(text)
    if len(parts) == 1:
        lines[row] = before + text + after
        return lines, (row, col + len(text))
    inserted = [before + parts[0], *parts[1:-1], parts[-1] + after]
    lines[row : row + 1] = inserted
    return lines, (row + len(parts) - 1, len(parts[-1]))


__all__ = [
    "CursorMove",
    "TextBuffer",
    "find_word_end_forward",
    "find_word_start_backward",
    "find_word_start_forward",
]
