"""Scroll state for a wrapped view."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Viewport:
    """Window of ``height`` display rows starting at ``scroll_offset``."""

    height: int = 1
    scroll_offset: int = 0

    def __post_init__(self) -> None:
        self.height = max(self.height, 1)
        self.scroll_offset = max(self.scroll_offset, 0)

    def resize(self, height: int) -> None:
        self.height = max(height, 1)

    def visible(self, row: int) -> bool:
        return self.scroll_offset <= row < self.scroll_offset + self.height

    def ensure_visible(self, row: int) -> bool:
        """Shift by the least amount that puts ``row`` on screen."""

        if row < self.scroll_offset:
            self.scroll_offset = max(row, 0)
            return True
        bottom = self.scroll_offset + self.height
        if row >= bottom:
            self.scroll_offset = row - self.height + 1
            return True
        return False

    def clamp(self, total_rows: int) -> None:
        limit = max(total_rows - self.height, 0)
        self.scroll_offset = min(max(self.scroll_offset, 0), limit)

    def scroll_by(self, delta: int, total_rows: int) -> bool:
        before = self.scroll_offset
        self.scroll_offset += delta
        self.clamp(total_rows)
        return self.scroll_offset != before

    def scroll_page(self, direction: int, total_rows: int, page_rows: int) -> bool:
        """Ctrl-d / Ctrl-u: move by ``page_rows`` in ``direction`` (+1 / -1)."""

        if direction == 0:
            return False
        step = max(page_rows, 1)
        return self.scroll_by(step if direction > 0 else -step, total_rows)


__all__ = ["Viewport"]
