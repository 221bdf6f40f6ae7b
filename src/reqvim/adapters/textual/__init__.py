"""Textual host: field controller, widgets and the request editor app.

``app`` is not imported here so the controller can be used without
starting a Textual application.
"""

from .controller import FieldController, FieldHooks

__all__ = ["FieldController", "FieldHooks"]
