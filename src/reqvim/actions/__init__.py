"""Editing verbs bound to keys by ``reqvim.keymaps.defaults``."""

from . import editing, motions, operators
from .operators import after_motion, complete_operator, enter_operator

__all__ = [
    "editing",
    "motions",
    "operators",
    "after_motion",
    "complete_operator",
    "enter_operator",
]
