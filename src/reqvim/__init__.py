"""Vi-style modal text fields and a wrap-and-cursor render cache for TUIs."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "keymaps",
    "modes",
    "render",
    "runtime",
]

__version__ = "0.1.0"
