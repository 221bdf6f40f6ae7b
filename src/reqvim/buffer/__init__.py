"""Text buffer, history and clipboard plumbing used by the modal engine."""

from .clipboard import (
    ClipboardError,
    ClipboardErrorKind,
    ClipboardProvider,
    SystemClipboard,
    YankSlot,
)
from .document import BufferDocument
from .state import Cursor, Selection, clamp_cursor, clamp_selection
from .text_buffer import CursorMove, TextBuffer
from .undo import UndoEntry, UndoTimeline

__all__ = [
    "BufferDocument",
    "ClipboardError",
    "ClipboardErrorKind",
    "ClipboardProvider",
    "Cursor",
    "CursorMove",
    "Selection",
    "SystemClipboard",
    "TextBuffer",
    "UndoEntry",
    "UndoTimeline",
    "YankSlot",
    "clamp_cursor",
    "clamp_selection",
]
