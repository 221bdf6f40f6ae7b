"""Built-in keymaps for the command table and the insert table.

``normal`` is the single dispatch table shared by Normal, Visual and
Operator-Pending; guards on the bindings decide which of those
modes a key applies in. ``insert`` only holds the keys that are not typed
into the buffer verbatim.
"""

from __future__ import annotations

from functools import partial
from typing import Iterable, Sequence

from reqvim.actions import editing, motions, operators
from reqvim.buffer import CursorMove
from reqvim.modes.types import Operator

from .models import Action, Binding, Chord, Guard
from .registry import KeymapRegistry

COMMAND_TABLE = "normal"
INSERT_TABLE = "insert"

_MOTIONS: tuple[tuple[str, CursorMove, str], ...] = (
    ("back", CursorMove.BACK, "Move left"),
    ("forward", CursorMove.FORWARD, "Move right"),
    ("up", CursorMove.UP, "Move up"),
    ("down", CursorMove.DOWN, "Move down"),
    ("word_forward", CursorMove.WORD_FORWARD, "Start of next word"),
    ("word_back", CursorMove.WORD_BACK, "Start of previous word"),
    ("line_head", CursorMove.HEAD, "Start of line"),
    ("line_end", CursorMove.END, "End of line"),
    ("top", CursorMove.TOP, "First line"),
    ("bottom", CursorMove.BOTTOM, "Last line"),
)

_INSERT_CURSOR: tuple[tuple[str, CursorMove], ...] = (
    ("LEFT", CursorMove.BACK),
    ("RIGHT", CursorMove.FORWARD),
    ("UP", CursorMove.UP),
    ("DOWN", CursorMove.DOWN),
    ("HOME", CursorMove.HEAD),
    ("END", CursorMove.END),
)


def default_actions() -> tuple[Action, ...]:
    """Action table; built on demand since handlers live in ``reqvim.actions``."""

    actions: list[Action] = [
        Action(
            id=f"motion.{name}",
            handler=partial(motions.move, motion=motion),
            description=description,
        )
        for name, motion, description in _MOTIONS
    ]
    actions.append(
        Action(
            id="motion.word_end",
            handler=motions.word_end,
            description="End of word",
        )
    )
    for op in Operator:
        label = op.name.lower()
        actions.extend(
            (
                Action(
                    id=f"operator.begin_{label}",
                    handler=partial(operators.begin_operator, operator=op),
                    description=f"Start a {label} operator",
                ),
                Action(
                    id=f"operator.line_{label}",
                    handler=partial(operators.operate_on_line, operator=op),
                    description=f"Apply {label} to the current line",
                ),
                Action(
                    id=f"visual.{label}",
                    handler=partial(operators.visual_operator, operator=op),
                    description=f"Apply {label} to the selection",
                ),
            )
        )
    actions.extend(
        (
            Action("visual.enter", operators.enter_visual, "Enter visual mode"),
            Action(
                "visual.enter_line", operators.enter_visual_line, "Select whole line"
            ),
            Action("visual.exit", operators.exit_visual, "Leave visual mode"),
            Action("edit.delete_char", editing.delete_char_under, "Delete char"),
            Action(
                "edit.delete_char_before",
                editing.delete_char_before,
                "Delete char before cursor",
            ),
            Action(
                "edit.delete_to_end", editing.delete_to_line_end, "Delete to line end"
            ),
            Action(
                "edit.change_to_end", editing.change_to_line_end, "Change to line end"
            ),
            Action("edit.paste", editing.paste, "Paste yanked text"),
            Action("edit.undo", editing.undo, "Undo"),
            Action("edit.redo", editing.redo, "Redo"),
            Action("edit.insert", editing.insert_before, "Insert at cursor"),
            Action("edit.append", editing.insert_after, "Insert after cursor"),
            Action(
                "edit.append_line", editing.insert_line_end, "Insert at line end"
            ),
            Action(
                "edit.insert_line", editing.insert_line_head, "Insert at line head"
            ),
            Action("edit.open_below", editing.open_line_below, "Open line below"),
            Action("edit.open_above", editing.open_line_above, "Open line above"),
            Action("view.page_down", editing.scroll_page_down, "Scroll down"),
            Action("view.page_up", editing.scroll_page_up, "Scroll up"),
            Action("field.exit", editing.exit_field, "Stop editing the field"),
            Action("field.cancel", editing.cancel_to_normal, "Back to normal"),
            Action("insert.leave", editing.leave_insert, "Leave insert mode"),
            Action("insert.newline", editing.insert_newline, "Insert newline"),
            Action(
                "insert.ignore_newline", editing.ignore_newline, "Swallow Enter"
            ),
            Action("insert.backspace", editing.backspace, "Delete backwards"),
            Action("insert.delete", editing.delete_forward, "Delete forwards"),
            Action("insert.tab", editing.insert_tab, "Insert soft tab"),
        )
    )
    actions.extend(
        Action(
            id=f"insert.cursor_{key.lower()}",
            handler=partial(editing.insert_cursor, motion=motion),
            description=f"Move cursor ({key.lower()})",
        )
        for key, motion in _INSERT_CURSOR
    )
    return tuple(actions)


def _command(
    binding_id: str, keys: Sequence[str], action_id: str, *guards: str
) -> Binding:
    return Binding(
        id=f"{COMMAND_TABLE}.{binding_id}",
        table=COMMAND_TABLE,
        chord=Chord(tuple(keys)),
        action_id=action_id,
        guards=tuple(Guard.parse(guard) for guard in guards),
    )


def _insert(binding_id: str, key: str, action_id: str, *guards: str) -> Binding:
    return Binding(
        id=f"{INSERT_TABLE}.{binding_id}",
        table=INSERT_TABLE,
        chord=Chord.of(key),
        action_id=action_id,
        guards=tuple(Guard.parse(guard) for guard in guards),
    )


_OPERATOR_KEYS = {Operator.YANK: "y", Operator.DELETE: "d", Operator.CHANGE: "c"}

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _command("escape_exit", ("ESC",), "field.exit", "normal"),
    _command("escape_cancel", ("ESC",), "field.cancel", "!normal"),
    _command("h", ("h",), "motion.back"),
    _command("j", ("j",), "motion.down"),
    _command("k", ("k",), "motion.up"),
    _command("l", ("l",), "motion.forward"),
    _command("w", ("w",), "motion.word_forward"),
    _command("b", ("b",), "motion.word_back"),
    _command("e", ("e",), "motion.word_end"),
    _command("zero", ("0",), "motion.line_head"),
    _command("caret", ("^",), "motion.line_head"),
    _command("dollar", ("$",), "motion.line_end"),
    _command("gg", ("g", "g"), "motion.top"),
    _command("G", ("G",), "motion.bottom"),
    _command("x", ("x",), "edit.delete_char"),
    _command("X", ("X",), "edit.delete_char_before"),
    _command("D", ("D",), "edit.delete_to_end"),
    _command("C", ("C",), "edit.change_to_end"),
    _command("p", ("p",), "edit.paste"),
    _command("u", ("u",), "edit.undo"),
    _command("redo", ("ctrl+r",), "edit.redo"),
    _command("i", ("i",), "edit.insert", "normal"),
    _command("a", ("a",), "edit.append", "normal"),
    _command("A", ("A",), "edit.append_line", "normal"),
    _command("I", ("I",), "edit.insert_line", "normal"),
    _command("o", ("o",), "edit.open_below", "normal", "!single_line"),
    _command("O", ("O",), "edit.open_above", "normal", "!single_line"),
    _command("v", ("v",), "visual.enter", "normal"),
    _command("V", ("V",), "visual.enter_line", "normal"),
    _command("v_exit", ("v",), "visual.exit", "visual"),
    _command("page_down", ("ctrl+d",), "view.page_down"),
    _command("page_up", ("ctrl+u",), "view.page_up"),
    *(
        binding
        for op, key in _OPERATOR_KEYS.items()
        for binding in (
            _command(
                f"{key}_begin",
                (key,),
                f"operator.begin_{op.name.lower()}",
                "normal",
            ),
            _command(
                f"{key}{key}",
                (key,),
                f"operator.line_{op.name.lower()}",
                f"operator.{op.name.lower()}",
            ),
            _command(
                f"{key}_visual",
                (key,),
                f"visual.{op.name.lower()}",
                "visual",
            ),
        )
    ),
    _insert("escape", "ESC", "insert.leave"),
    _insert("enter", "ENTER", "insert.newline", "!single_line"),
    _insert("enter_single_line", "ENTER", "insert.ignore_newline", "single_line"),
    _insert("backspace", "BACKSPACE", "insert.backspace"),
    _insert("delete", "DELETE", "insert.delete"),
    _insert("tab", "TAB", "insert.tab"),
    *(
        _insert(key.lower(), key, f"insert.cursor_{key.lower()}")
        for key, _ in _INSERT_CURSOR
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    skip: Iterable[str] = (),
    overrides: Iterable[Binding] = (),
) -> None:
    """Register the built-in actions and bindings into ``registry``.

    Bindings whose id is in ``skip`` are left out. ``overrides`` are
    registered last and replace any default with the same id or the same
    table, chord and guards.
    """

    skipped = set(skip)
    for action in default_actions():
        registry.add_action(action)
    for binding in DEFAULT_BINDINGS:
        if binding.id not in skipped:
            registry.bind(binding)
    for binding in overrides:
        if binding.table not in (COMMAND_TABLE, INSERT_TABLE):
            raise ValueError(
                f"override '{binding.id}' targets unknown table '{binding.table}'"
            )
        registry.bind(binding, replace=True)


__all__ = [
    "COMMAND_TABLE",
    "DEFAULT_BINDINGS",
    "INSERT_TABLE",
    "default_actions",
    "load_default_keymaps",
]
