"""Cursor motions; each one may complete a pending operator."""

from __future__ import annotations

from reqvim.buffer import CursorMove
from reqvim.modes.types import EditContext, ModeKind, Transition

from .operators import after_motion


def move(context: EditContext, *, motion: CursorMove) -> Transition:
    context.buffer.move_cursor(motion)
    return after_motion(context)


def word_end(context: EditContext) -> Transition:
    buffer = context.buffer
    buffer.move_cursor(CursorMove.WORD_END)
    if context.mode.kind is ModeKind.OPERATOR_PENDING:
        # ``de`` / ``ce`` / ``ye`` include the last character of the word.
        buffer.move_cursor(CursorMove.FORWARD)
    return after_motion(context)


__all__ = ["move", "word_end"]
