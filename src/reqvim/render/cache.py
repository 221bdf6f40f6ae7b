"""Memoised wrap results, one cache per renderable view."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from rich.style import Style

from reqvim.buffer import Cursor, Selection, clamp_cursor, clamp_selection
from reqvim.runtime import telemetry

from .viewport import Viewport
from .wrap import (
    DEFAULT_HIGHLIGHT,
    DisplayPos,
    Row,
    StyledLine,
    line_length,
    wrap_lines,
)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Rows to paint plus the cursor relative to the first painted row."""

    lines: Tuple[Row, ...]
    cursor: Optional[DisplayPos]
    scroll_offset: int
    total_rows: int


@dataclass(slots=True)
class WrapCache:
    """Wrapped lines keyed on width, content generation, cursor and selection.

    The cache never looks at line content to decide staleness; the owner
    bumps ``generation`` whenever its lines change. ``recompute_count``
    counts actual re-wraps.
    """

    highlight: Style = DEFAULT_HIGHLIGHT
    width: Optional[int] = None
    content_generation: Optional[int] = None
    cursor_snapshot: Optional[Cursor] = None
    selection_snapshot: Optional[Selection] = None
    wrapped_lines: Tuple[Row, ...] = ()
    cursor_display_pos: Optional[DisplayPos] = None
    recompute_count: int = 0
    _primed: bool = field(default=False, repr=False)
    _result: Optional[RenderResult] = field(default=None, repr=False)
    _result_key: Optional[Tuple[int, Optional[int]]] = field(default=None, repr=False)
    _ensured_height: Optional[int] = field(default=None, repr=False)

    def is_fresh(
        self,
        width: int,
        generation: int,
        cursor: Optional[Cursor],
        selection: Optional[Selection],
    ) -> bool:
        return (
            self._primed
            and self.width == width
            and self.content_generation == generation
            and self.cursor_snapshot == cursor
            and self.selection_snapshot == selection
        )

    def invalidate(self) -> None:
        self._primed = False
        self._result = None
        self._result_key = None
        self._ensured_height = None

    def wrap(
        self,
        lines: Sequence[StyledLine],
        *,
        width: int,
        generation: int,
        cursor: Optional[Cursor] = None,
        selection: Optional[Selection] = None,
    ) -> bool:
        """Re-wrap when any key changed; returns whether it did."""

        if self.is_fresh(width, generation, cursor, selection):
            return False

        with telemetry.span(
            "render::wrap",
            component="render",
            metadata={"width": width, "lines": len(lines), "generation": generation},
        ):
            output = wrap_lines(
                lines,
                width,
                cursor=(
                    clamp_cursor(lines, cursor, line_length)
                    if cursor is not None
                    else None
                ),
                selection=clamp_selection(lines, selection, line_length),
                highlight=self.highlight,
            )

        self.width = width
        self.content_generation = generation
        self.cursor_snapshot = cursor
        self.selection_snapshot = selection
        self.wrapped_lines = output.rows
        self.cursor_display_pos = output.cursor
        self.recompute_count += 1
        self._primed = True
        self._result = None
        self._result_key = None
        return True

    def render(
        self,
        lines: Sequence[StyledLine],
        *,
        width: int,
        generation: int,
        cursor: Optional[Cursor] = None,
        selection: Optional[Selection] = None,
        viewport: Optional[Viewport] = None,
    ) -> RenderResult:
        """Visible rows for ``viewport`` (all rows when omitted).

        The viewport follows the cursor on a re-wrap or a height change, so
        an explicit scroll stays put until the cursor, selection, content or
        viewport size changes.
        """

        recomputed = self.wrap(
            lines,
            width=width,
            generation=generation,
            cursor=cursor,
            selection=selection,
        )
        total = len(self.wrapped_lines)
        position = self.cursor_display_pos

        if viewport is None:
            key: Tuple[int, Optional[int]] = (0, None)
        else:
            resized = viewport.height != self._ensured_height
            if (recomputed or resized) and position is not None:
                viewport.ensure_visible(position[1])
            self._ensured_height = viewport.height
            viewport.clamp(total)
            key = (viewport.scroll_offset, viewport.height)

        if self._result is not None and self._result_key == key:
            return self._result

        if viewport is None:
            visible = self.wrapped_lines
            on_screen = position
            offset = 0
        else:
            offset = viewport.scroll_offset
            visible = self.wrapped_lines[offset : offset + viewport.height]
            on_screen = None
            if position is not None and viewport.visible(position[1]):
                on_screen = (position[0], position[1] - offset)

        self._result = RenderResult(
            lines=visible,
            cursor=on_screen,
            scroll_offset=offset,
            total_rows=total,
        )
        self._result_key = key
        return self._result


__all__ = ["RenderResult", "WrapCache"]
