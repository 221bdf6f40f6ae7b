"""List-of-lines storage behind ``TextBuffer``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence


@dataclass(slots=True)
class BufferDocument:
    """Plain list-of-lines text storage with a content generation.

    ``generation`` only moves forward and only when the lines actually
    change; render caches key on it instead of hashing the text.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    generation: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=split_lines(text))

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def replace(self, lines: Iterable[str]) -> bool:
        """Swap in ``lines``; return whether anything changed."""

        new_lines = list(lines) or [""]
        if new_lines == self._lines:
            return False
        self._lines = new_lines
        self.generation += 1
        return True


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` keeping a trailing empty line, as an editor shows it."""

    return text.replace("\r\n", "\n").split("\n")


__all__ = ["BufferDocument", "split_lines"]
