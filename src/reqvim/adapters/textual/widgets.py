"""Textual widgets painting text through the wrap cache."""

from __future__ import annotations

from typing import List, Optional, Tuple

from rich.segment import Segment
from rich.style import Style
from textual import events
from textual.message import Message
from textual.reactive import reactive
from textual.strip import Strip
from textual.widget import Widget

from reqvim.buffer import SystemClipboard, TextBuffer, YankSlot
from reqvim.buffer.document import split_lines
from reqvim.config import EditorSettings
from reqvim.modes import ModalEngine
from reqvim.render import RenderResult, Viewport, WrapCache, plain_lines

from .controller import FieldController, FieldHooks

_NAMED_KEYS = {
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "ctrl+h": "BACKSPACE",
    "delete": "DELETE",
    "tab": "TAB",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
}

NormalizedKey = Tuple[str, Optional[str], Tuple[str, ...]]


def normalize_key(event: events.Key) -> Optional[NormalizedKey]:
    """Map a Textual key event onto engine ``(key, text, modifiers)``."""

    key = event.key
    if key in _NAMED_KEYS:
        return (_NAMED_KEYS[key], None, ())
    if key.startswith("ctrl+"):
        return (key[len("ctrl+") :], None, ("ctrl",))
    if event.is_printable and event.character:
        return (event.character, event.character, ())
    return None


def shared_yank(settings: EditorSettings) -> YankSlot:
    provider = SystemClipboard() if settings.use_system_clipboard else None
    return YankSlot(provider)


def _paint_row(
    result: RenderResult, y: int, width: int, cursor_style: Optional[Style]
) -> Strip:
    if y >= len(result.lines):
        return Strip.blank(width)
    strip = Strip(list(result.lines[y]))
    cursor = result.cursor
    if cursor_style is not None and cursor is not None and cursor[1] == y:
        x = cursor[0]
        under = strip.crop(x, x + 1)
        if not under.cell_length:
            under = Strip([Segment(" ")])
        strip = Strip.join(
            [strip.crop(0, x), under.apply_style(cursor_style), strip.crop(x + 1)]
        )
    return strip.extend_cell_length(width).crop(0, width)


class EditorField(Widget, can_focus=True):
    """Focusable text field; Enter starts modal editing, Escape in Normal ends it."""

    DEFAULT_CSS = """
    EditorField {
        height: 6;
        border: round $panel;
        padding: 0 1;
    }
    EditorField.single-line {
        height: 3;
    }
    EditorField:focus {
        border: round $accent;
    }
    EditorField.-editing {
        border: round $warning;
    }
    """

    editing: reactive[bool] = reactive(False)

    class Changed(Message):
        def __init__(self, field: "EditorField", text: str) -> None:
            super().__init__()
            self.field = field
            self.text = text

    class StatusChanged(Message):
        def __init__(self, field: "EditorField", status: str, color: str) -> None:
            super().__init__()
            self.field = field
            self.status = status
            self.color = color

    def __init__(
        self,
        text: str = "",
        *,
        label: str = "",
        single_line: bool = False,
        settings: Optional[EditorSettings] = None,
        engine: Optional[ModalEngine] = None,
        yank: Optional[YankSlot] = None,
        id: Optional[str] = None,
    ) -> None:
        super().__init__(id=id, classes="single-line" if single_line else "")
        self.settings = settings or EditorSettings()
        buffer = TextBuffer(
            text,
            name=label or id or "field",
            undo_limit=self.settings.undo_limit,
            yank=yank,
        )
        self.controller = FieldController(
            buffer,
            single_line=single_line,
            engine=engine,
            settings=self.settings,
            hooks=FieldHooks(
                refresh=self.refresh,
                update_status=self._status_changed,
                exit_field=self._exited,
                content_changed=self._content_changed,
            ),
        )
        self._cursor_style = Style.parse(self.settings.cursor_style)
        if label:
            self.border_title = label

    @property
    def text(self) -> str:
        return self.controller.buffer.text

    def start_editing(self) -> None:
        self.controller.begin_editing()
        self.editing = True

    def watch_editing(self, editing: bool) -> None:
        self.set_class(editing, "-editing")

    def on_blur(self, event: events.Blur) -> None:
        del event
        if self.controller.editing:
            self.controller.end_editing()
            self.editing = False

    def on_key(self, event: events.Key) -> None:
        if not self.controller.editing:
            if event.key == "enter":
                self.start_editing()
                event.stop()
                event.prevent_default()
            return
        normalized = normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.controller.handle_key(key, text=text, modifiers=modifiers)
        event.stop()
        event.prevent_default()

    def render_line(self, y: int) -> Strip:
        width = self.content_size.width
        result = self.controller.render(width, self.content_size.height)
        cursor_style = self._cursor_style if self.controller.editing else None
        return _paint_row(result, y, width, cursor_style)

    def _status_changed(self, status: str) -> None:
        self.post_message(
            self.StatusChanged(self, status, self.controller.mode_color)
        )

    def _content_changed(self, text: str) -> None:
        self.post_message(self.Changed(self, text))

    def _exited(self) -> None:
        self.editing = False


class TextPane(Widget, can_focus=True):
    """Read-only wrapped text; the owner replaces content with ``load``."""

    DEFAULT_CSS = """
    TextPane {
        height: 1fr;
        border: round $panel;
        padding: 0 1;
    }
    TextPane:focus {
        border: round $accent;
    }
    """

    def __init__(
        self,
        text: str = "",
        *,
        label: str = "",
        settings: Optional[EditorSettings] = None,
        id: Optional[str] = None,
    ) -> None:
        super().__init__(id=id)
        self.settings = settings or EditorSettings()
        self.generation = 0
        self.viewport = Viewport()
        self.cache = WrapCache(highlight=Style.parse(self.settings.selection_style))
        self._lines: List[List[Segment]] = plain_lines(split_lines(text))
        if label:
            self.border_title = label

    def load(self, text: str) -> None:
        self._lines = plain_lines(split_lines(text))
        self.generation += 1
        self.refresh()

    def on_key(self, event: events.Key) -> None:
        total = len(self.cache.wrapped_lines)
        page = self.settings.page_rows(self.viewport.height)
        moves = {"down": 1, "j": 1, "up": -1, "k": -1}
        if event.key in moves:
            moved = self.viewport.scroll_by(moves[event.key], total)
        elif event.key in ("ctrl+d", "ctrl+u"):
            direction = 1 if event.key == "ctrl+d" else -1
            moved = self.viewport.scroll_page(direction, total, page)
        else:
            return
        event.stop()
        if moved:
            self.refresh()

    def render_line(self, y: int) -> Strip:
        width = self.content_size.width
        self.viewport.resize(self.content_size.height)
        result = self.cache.render(
            self._lines,
            width=width,
            generation=self.generation,
            viewport=self.viewport,
        )
        return _paint_row(result, y, width, None)


__all__ = ["EditorField", "NormalizedKey", "TextPane", "normalize_key", "shared_yank"]
