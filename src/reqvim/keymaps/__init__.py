"""Keymap tables: chords bound to editing actions under mode guards.

Default bindings live in ``reqvim.keymaps.defaults``; that module pulls in
the action handlers, so it is not imported here.
"""

from .models import Action, Binding, Chord, Guard, make_token
from .registry import KeymapConflictError, KeymapRegistry
from .resolver import KeymapResolver, Resolution

__all__ = [
    "Action",
    "Binding",
    "Chord",
    "Guard",
    "KeymapConflictError",
    "KeymapRegistry",
    "KeymapResolver",
    "Resolution",
    "make_token",
]
