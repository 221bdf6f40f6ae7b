"""Editor modes and the modal command engine."""

from .types import (
    INSERT,
    NORMAL,
    VISUAL,
    EditContext,
    EditorMode,
    KeyInput,
    ModalEngineState,
    ModeKind,
    Operator,
    Transition,
    TransitionKind,
)
from .engine import ModalEngine, default_engine, transition

__all__ = [
    "EditContext",
    "EditorMode",
    "INSERT",
    "KeyInput",
    "ModalEngine",
    "ModalEngineState",
    "ModeKind",
    "NORMAL",
    "Operator",
    "Transition",
    "TransitionKind",
    "VISUAL",
    "default_engine",
    "transition",
]
