"""Normal-mode editing verbs: deletes, paste, history, insert entry, scroll."""

from __future__ import annotations

from reqvim.buffer import CursorMove, TextBuffer
from reqvim.modes.types import INSERT, NORMAL, EditContext, Transition


def _select_to_line_end(buffer: TextBuffer) -> None:
    buffer.start_selection()
    before = buffer.cursor
    buffer.move_cursor(CursorMove.END)
    if buffer.cursor == before:
        buffer.move_cursor(CursorMove.FORWARD)


def delete_char_under(context: EditContext) -> Transition:
    buffer = context.buffer
    buffer.start_selection()
    buffer.move_cursor(CursorMove.FORWARD)
    buffer.cut()
    return Transition.mode_changed(NORMAL)


def delete_char_before(context: EditContext) -> Transition:
    buffer = context.buffer
    buffer.start_selection()
    buffer.move_cursor(CursorMove.BACK)
    buffer.cut()
    return Transition.mode_changed(NORMAL)


def delete_to_line_end(context: EditContext) -> Transition:
    _select_to_line_end(context.buffer)
    context.buffer.cut()
    return Transition.mode_changed(NORMAL)


def change_to_line_end(context: EditContext) -> Transition:
    _select_to_line_end(context.buffer)
    context.buffer.cut()
    return Transition.mode_changed(INSERT)


def paste(context: EditContext) -> Transition:
    context.buffer.paste()
    return Transition.mode_changed(NORMAL)


def undo(context: EditContext) -> Transition:
    context.buffer.undo()
    return Transition.mode_changed(NORMAL)


def redo(context: EditContext) -> Transition:
    context.buffer.redo()
    return Transition.mode_changed(NORMAL)


def insert_before(context: EditContext) -> Transition:
    context.buffer.cancel_selection()
    return Transition.mode_changed(INSERT)


def insert_after(context: EditContext) -> Transition:
    context.buffer.cancel_selection()
    context.buffer.move_cursor(CursorMove.FORWARD)
    return Transition.mode_changed(INSERT)


def insert_line_end(context: EditContext) -> Transition:
    context.buffer.cancel_selection()
    context.buffer.move_cursor(CursorMove.END)
    return Transition.mode_changed(INSERT)


def insert_line_head(context: EditContext) -> Transition:
    context.buffer.cancel_selection()
    context.buffer.move_cursor(CursorMove.HEAD)
    return Transition.mode_changed(INSERT)


def open_line_below(context: EditContext) -> Transition:
    buffer = context.buffer
    buffer.move_cursor(CursorMove.END)
    buffer.insert_newline()
    return Transition.mode_changed(INSERT)


def open_line_above(context: EditContext) -> Transition:
    buffer = context.buffer
    buffer.move_cursor(CursorMove.HEAD)
    buffer.insert_newline()
    buffer.move_cursor(CursorMove.UP)
    return Transition.mode_changed(INSERT)


def scroll_page_down(context: EditContext) -> Transition:
    del context
    return Transition.noop(scroll=1)


def scroll_page_up(context: EditContext) -> Transition:
    del context
    return Transition.noop(scroll=-1)


def exit_field(context: EditContext) -> Transition:
    del context
    return Transition.exit_field()


def cancel_to_normal(context: EditContext) -> Transition:
    context.buffer.cancel_selection()
    return Transition.mode_changed(NORMAL)


# -- insert mode -------------------------------------------------------------


def leave_insert(context: EditContext) -> Transition:
    del context
    return Transition.mode_changed(NORMAL)


def insert_newline(context: EditContext) -> Transition:
    context.buffer.insert_newline()
    return Transition.mode_changed(INSERT)


def ignore_newline(context: EditContext) -> Transition:
    del context
    return Transition.noop()


def backspace(context: EditContext) -> Transition:
    context.buffer.delete_char()
    return Transition.mode_changed(INSERT)


def delete_forward(context: EditContext) -> Transition:
    context.buffer.delete_next_char()
    return Transition.mode_changed(INSERT)


def insert_tab(context: EditContext) -> Transition:
    context.buffer.insert_str(" " * context.tab_size)
    return Transition.mode_changed(INSERT)


def insert_cursor(context: EditContext, *, motion: CursorMove) -> Transition:
    context.buffer.move_cursor(motion)
    return Transition.mode_changed(INSERT)


__all__ = [
    "backspace",
    "cancel_to_normal",
    "change_to_line_end",
    "delete_char_before",
    "delete_char_under",
    "delete_forward",
    "delete_to_line_end",
    "exit_field",
    "ignore_newline",
    "insert_after",
    "insert_before",
    "insert_cursor",
    "insert_line_end",
    "insert_line_head",
    "insert_newline",
    "insert_tab",
    "leave_insert",
    "open_line_above",
    "open_line_below",
    "paste",
    "redo",
    "scroll_page_down",
    "scroll_page_up",
    "undo",
]
