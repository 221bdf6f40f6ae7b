"""Operators, Visual mode and the operator completion rule.

Operators run in two phases: ``enter_operator`` anchors a selection at the
cursor and switches to operator-pending; the next motion (or a doubled
operator key) extends that selection and hands over to
``complete_operator``, the only place yank/delete/change are applied.
"""

from __future__ import annotations

from reqvim.buffer import CursorMove
from reqvim.modes.types import (
    INSERT,
    NORMAL,
    VISUAL,
    EditContext,
    EditorMode,
    Operator,
    Transition,
)


def enter_operator(context: EditContext, operator: Operator) -> Transition:
    context.buffer.start_selection()
    return Transition.mode_changed(EditorMode.operator_pending(operator))


def complete_operator(context: EditContext, operator: Operator) -> Transition:
    buffer = context.buffer
    if operator is Operator.YANK:
        buffer.copy()
        return Transition.mode_changed(NORMAL)
    buffer.cut()
    if operator is Operator.CHANGE:
        return Transition.mode_changed(INSERT)
    return Transition.mode_changed(NORMAL)


def after_motion(context: EditContext) -> Transition:
    """Finish a pending operator once its motion has moved the cursor."""

    operator = context.mode.operator
    if operator is None:
        return Transition.noop()
    return complete_operator(context, operator)


def begin_operator(context: EditContext, *, operator: Operator) -> Transition:
    return enter_operator(context, operator)


def operate_on_line(context: EditContext, *, operator: Operator) -> Transition:
    """``dd`` / ``yy`` / ``cc``: act on the whole current line."""

    buffer = context.buffer
    buffer.move_cursor(CursorMove.HEAD)
    buffer.start_selection()
    line_head = buffer.cursor
    buffer.move_cursor(CursorMove.DOWN)
    if buffer.cursor == line_head:
        buffer.move_cursor(CursorMove.END)
    return complete_operator(context, operator)


def visual_operator(context: EditContext, *, operator: Operator) -> Transition:
    # Selections end before the cursor; include the character under it.
    context.buffer.move_cursor(CursorMove.FORWARD)
    return complete_operator(context, operator)


def enter_visual(context: EditContext) -> Transition:
    context.buffer.start_selection()
    return Transition.mode_changed(VISUAL)


def enter_visual_line(context: EditContext) -> Transition:
    buffer = context.buffer
    buffer.move_cursor(CursorMove.HEAD)
    buffer.start_selection()
    buffer.move_cursor(CursorMove.END)
    return Transition.mode_changed(VISUAL)


def exit_visual(context: EditContext) -> Transition:
    context.buffer.cancel_selection()
    return Transition.mode_changed(NORMAL)


__all__ = [
    "after_motion",
    "begin_operator",
    "complete_operator",
    "enter_operator",
    "enter_visual",
    "enter_visual_line",
    "exit_visual",
    "operate_on_line",
    "visual_operator",
]
