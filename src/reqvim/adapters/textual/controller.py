"""Host loop for one editable field: engine state, scroll and UI callbacks.

Nothing in here imports Textual; widgets drive a ``FieldController`` and
receive updates through ``FieldHooks``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from rich.segment import Segment
from rich.style import Style

from reqvim.buffer import TextBuffer
from reqvim.config import MODE_CONFIGS, EditorSettings
from reqvim.modes import (
    KeyInput,
    ModalEngine,
    ModalEngineState,
    ModeKind,
    Transition,
    TransitionKind,
    default_engine,
)
from reqvim.render import RenderResult, Viewport, WrapCache, plain_lines
from reqvim.runtime import telemetry


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class FieldHooks:
    """Callbacks a host widget supplies to hear about field changes."""

    refresh: Callable[[], None] = _noop
    update_status: Callable[[str], None] = _noop
    exit_field: Callable[[], None] = _noop
    content_changed: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class FieldController:
    """Owns the engine state of one field while it is being edited.

    ``state`` is ``None`` whenever the field is not in editing mode; a
    fresh Normal-mode state is created each time editing starts.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        *,
        single_line: bool = False,
        engine: Optional[ModalEngine] = None,
        settings: Optional[EditorSettings] = None,
        hooks: Optional[FieldHooks] = None,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self.buffer = buffer
        self.single_line = single_line
        self.engine = engine or default_engine()
        self.settings = settings or EditorSettings()
        self.hooks = hooks or FieldHooks()
        self.viewport = viewport or Viewport()
        self.cache = WrapCache(highlight=Style.parse(self.settings.selection_style))
        self.state: Optional[ModalEngineState] = None
        self._styled: Tuple[int, List[List[Segment]]] = (-1, [])

    @property
    def editing(self) -> bool:
        return self.state is not None

    @property
    def mode_label(self) -> str:
        if self.state is None:
            return ""
        return MODE_CONFIGS[self.state.mode.kind].label

    @property
    def mode_color(self) -> str:
        if self.state is None:
            return ""
        return MODE_CONFIGS[self.state.mode.kind].color

    def begin_editing(self) -> None:
        self.state = ModalEngineState()
        self._log_state("begin")
        self._publish_status()
        self.hooks.refresh()

    def end_editing(self) -> None:
        if self.state is None:
            return
        self.state = None
        self.buffer.cancel_selection()
        self._log_state("end")
        self._publish_status()
        self.hooks.refresh()

    def handle_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> Transition:
        """Translate a host key into a ``KeyInput`` and dispatch it."""

        if self.state is None:
            return Transition.noop()

        key_input = KeyInput(key=key, modifiers=tuple(modifiers), text=text)
        self._log_state("key ->", key=key_input.token)
        if key_input.token == "p" and self.state.mode.kind is not ModeKind.INSERT:
            self.buffer.yank.pull()

        generation = self.buffer.generation
        result, self.state = self.engine.handle_key(
            self.state, key_input, self.buffer, single_line=self.single_line
        )
        self._log_state("result <-", transition=result.kind.value)

        if result.scroll:
            self.scroll_page(result.scroll)
        if self.buffer.generation != generation:
            self.hooks.content_changed(self.buffer.text)
        if result.kind is TransitionKind.EXIT_FIELD:
            self.end_editing()
            self.hooks.exit_field()
            return result

        self._publish_status()
        self.hooks.refresh()
        return result

    def scroll_page(self, direction: int) -> bool:
        rows = self.settings.page_rows(self.viewport.height)
        return self.viewport.scroll_page(
            direction, len(self.cache.wrapped_lines), rows
        )

    def styled_lines(self) -> Sequence[Sequence[Segment]]:
        generation = self.buffer.generation
        if self._styled[0] != generation:
            self._styled = (generation, plain_lines(self.buffer.lines))
        return self._styled[1]

    def render(self, width: int, height: int) -> RenderResult:
        self.viewport.resize(height)
        visual = self.state is not None and self.state.mode.kind is ModeKind.VISUAL
        return self.cache.render(
            self.styled_lines(),
            width=width,
            generation=self.buffer.generation,
            cursor=self.buffer.cursor if self.editing else None,
            selection=self.buffer.selection_range(include_cursor=visual),
            viewport=self.viewport,
        )

    def status_text(self) -> str:
        if self.state is None:
            return ""
        parts = [f"-- {self.mode_label} --"]
        if self.state.mode.operator is not None:
            parts.append(self.state.mode.operator.value)
        if self.state.pending is not None:
            parts.append(self.state.pending.token)
        return " ".join(parts)

    def _publish_status(self) -> None:
        self.hooks.update_status(self.status_text())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        line = " ".join([prefix, *(f"{k}={v!r}" for k, v in snapshot.items())])
        self.hooks.log(line)
        telemetry.record_event(
            f"field.{prefix.split()[0]}", data=snapshot, logger_name="reqvim.host"
        )

    def _state_metadata(self) -> Dict[str, object]:
        return {
            "buffer": self.buffer.name,
            "mode": str(self.state.mode) if self.state else None,
            "cursor": self.buffer.cursor,
            "generation": self.buffer.generation,
        }


__all__ = ["FieldController", "FieldHooks"]
