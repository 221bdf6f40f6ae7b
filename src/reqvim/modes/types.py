"""Modes, key events and transitions exchanged by the modal engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from reqvim.buffer import TextBuffer
from reqvim.keymaps.models import make_token


class ModeKind(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    OPERATOR_PENDING = "operator"


class Operator(str, Enum):
    YANK = "y"
    DELETE = "d"
    CHANGE = "c"

    @classmethod
    def from_key(cls, key: str) -> Optional["Operator"]:
        try:
            return cls(key)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class EditorMode:
    """Tagged mode value; ``operator`` is only set for operator-pending."""

    kind: ModeKind
    operator: Optional[Operator] = None

    def __post_init__(self) -> None:
        if (self.kind is ModeKind.OPERATOR_PENDING) != (self.operator is not None):
            raise ValueError("operator must be given exactly for OPERATOR_PENDING")

    @classmethod
    def operator_pending(cls, operator: Operator) -> "EditorMode":
        return cls(ModeKind.OPERATOR_PENDING, operator)

    def __str__(self) -> str:
        if self.operator is not None:
            return f"OPERATOR({self.operator.value})"
        return self.kind.name


NORMAL = EditorMode(ModeKind.NORMAL)
INSERT = EditorMode(ModeKind.INSERT)
VISUAL = EditorMode(ModeKind.VISUAL)


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Normalized key event passed to the engine.

    Printable keys use the character itself as ``key`` (``"w"``, ``"$"``);
    named keys are upper-case (``"ESC"``, ``"ENTER"``, ``"BACKSPACE"``).
    ``text`` carries what should be typed in Insert mode, if anything.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def token(self) -> str:
        return make_token(self.key, self.modifiers)

    @property
    def ctrl(self) -> bool:
        return any(mod.lower() == "ctrl" for mod in self.modifiers)

    @classmethod
    def char(cls, ch: str) -> "KeyInput":
        return cls(key=ch, text=ch)

    @classmethod
    def with_ctrl(cls, key: str) -> "KeyInput":
        return cls(key=key, modifiers=("ctrl",))


class TransitionKind(str, Enum):
    NOOP = "noop"
    MODE_CHANGED = "mode_changed"
    PENDING_KEY = "pending_key"
    EXIT_FIELD = "exit_field"


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of feeding one key to the engine.

    ``scroll`` is a page-scroll hint (+1 down, -1 up) for the owning view;
    it never implies a cursor move.
    """

    kind: TransitionKind
    mode: Optional[EditorMode] = None
    key: Optional[KeyInput] = None
    scroll: int = 0

    @classmethod
    def noop(cls, *, scroll: int = 0) -> "Transition":
        return cls(TransitionKind.NOOP, scroll=scroll)

    @classmethod
    def mode_changed(cls, mode: EditorMode) -> "Transition":
        return cls(TransitionKind.MODE_CHANGED, mode=mode)

    @classmethod
    def pending(cls, key: KeyInput) -> "Transition":
        return cls(TransitionKind.PENDING_KEY, key=key)

    @classmethod
    def exit_field(cls) -> "Transition":
        return cls(TransitionKind.EXIT_FIELD)


@dataclass(frozen=True, slots=True)
class ModalEngineState:
    """Everything the engine remembers between keys for one field."""

    mode: EditorMode = NORMAL
    pending: Optional[KeyInput] = None

    def after(self, transition: Transition) -> "ModalEngineState":
        """State to carry into the next call once ``transition`` happened."""

        if transition.kind is TransitionKind.MODE_CHANGED and transition.mode:
            return ModalEngineState(mode=transition.mode)
        if transition.kind is TransitionKind.PENDING_KEY:
            return replace(self, pending=transition.key)
        return ModalEngineState(mode=self.mode)


@dataclass(slots=True)
class EditContext:
    """Per-call view handed to keymap actions."""

    buffer: TextBuffer
    state: ModalEngineState
    single_line: bool = False
    tab_size: int = 4

    @property
    def mode(self) -> EditorMode:
        return self.state.mode

    def flags(self) -> Dict[str, bool]:
        mode = self.state.mode
        flags = {
            "normal": mode.kind is ModeKind.NORMAL,
            "visual": mode.kind is ModeKind.VISUAL,
            "operator": mode.kind is ModeKind.OPERATOR_PENDING,
            "single_line": self.single_line,
        }
        for op in Operator:
            flags[f"operator.{op.name.lower()}"] = mode.operator is op
        return flags


__all__ = [
    "EditContext",
    "EditorMode",
    "INSERT",
    "KeyInput",
    "ModalEngineState",
    "ModeKind",
    "NORMAL",
    "Operator",
    "Transition",
    "TransitionKind",
    "VISUAL",
]
