"""Bounded undo/redo history of whole-buffer snapshots."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

from .state import Cursor


@dataclass(frozen=True, slots=True)
class UndoEntry:
    label: str
    before_lines: Tuple[str, ...]
    after_lines: Tuple[str, ...]
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Two stacks: edits that can be undone and edits that can be redone.

    Only the newest ``limit`` edits are kept; ``limit=0`` disables history.
    Pushing a new edit forgets everything that could have been redone.
    """

    def __init__(self, limit: int = 50) -> None:
        self.limit = limit
        self._done: Deque[UndoEntry] = deque(maxlen=limit)
        self._undone: List[UndoEntry] = []

    def __len__(self) -> int:
        return len(self._done) + len(self._undone)

    def push(self, entry: UndoEntry) -> None:
        self._undone.clear()
        if self.limit:
            self._done.append(entry)

    def undo(self) -> Optional[UndoEntry]:
        if not self._done:
            return None
        entry = self._done.pop()
        self._undone.append(entry)
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if not self._undone:
            return None
        entry = self._undone.pop()
        self._done.append(entry)
        return entry

    def clear(self) -> None:
        self._done.clear()
        self._undone.clear()


__all__ = ["UndoEntry", "UndoTimeline"]
