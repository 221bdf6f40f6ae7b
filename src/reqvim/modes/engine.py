"""Modal command engine: turns key presses into buffer edits and transitions."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Tuple

from reqvim.buffer import TextBuffer
from reqvim.keymaps import KeymapRegistry, KeymapResolver, Resolution
from reqvim.keymaps.defaults import COMMAND_TABLE, INSERT_TABLE, load_default_keymaps
from reqvim.runtime import telemetry

from .types import (
    INSERT,
    EditContext,
    KeyInput,
    ModalEngineState,
    ModeKind,
    Transition,
    TransitionKind,
)


class ModalEngine:
    """Dispatches keys through the keymap tables for one mode at a time.

    The engine keeps no per-field state. Callers own a
    ``ModalEngineState`` per focused field and pass the buffer in on every
    call, then carry ``state.after(transition)`` into the next one.
    """

    def __init__(
        self,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        tab_size: int = 4,
    ) -> None:
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="reqvim.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="reqvim.keymaps"
        )
        self.tab_size = tab_size

    def transition(
        self,
        state: ModalEngineState,
        key: KeyInput,
        buffer: TextBuffer,
        single_line: bool = False,
    ) -> Transition:
        if not key.key:
            return Transition.noop()

        context = EditContext(
            buffer=buffer,
            state=state,
            single_line=single_line,
            tab_size=self.tab_size,
        )
        with telemetry.span(
            name=f"mode::{state.mode.kind.value}",
            component=True,
            metadata={"key": key.token, "mode": str(state.mode)},
        ):
            if state.mode.kind is ModeKind.INSERT:
                result = self._handle_insert(context, key)
            else:
                result = self._handle_command(context, key)

        if result.kind is TransitionKind.MODE_CHANGED and result.mode != state.mode:
            telemetry.record_event(
                "mode.switch",
                data={"from": str(state.mode), "to": str(result.mode)},
                logger_name="reqvim.modes",
            )
        return result

    def handle_key(
        self,
        state: ModalEngineState,
        key: KeyInput,
        buffer: TextBuffer,
        *,
        single_line: bool = False,
    ) -> Tuple[Transition, ModalEngineState]:
        """``transition`` plus the state to use for the next key."""

        result = self.transition(state, key, buffer, single_line)
        return result, state.after(result)

    def _handle_insert(self, context: EditContext, key: KeyInput) -> Transition:
        resolution = self.keymap_resolver.resolve(
            INSERT_TABLE, (key.token,), context.flags()
        )
        if resolution is not None:
            return self._execute(context, resolution)
        if key.text and not key.ctrl:
            context.buffer.insert_str(key.text)
        return Transition.mode_changed(INSERT)

    def _handle_command(self, context: EditContext, key: KeyInput) -> Transition:
        flags = context.flags()
        pending = context.state.pending
        if pending is not None:
            chord = self.keymap_resolver.resolve(
                COMMAND_TABLE, (pending.token, key.token), flags
            )
            if chord is not None:
                return self._execute(context, chord)

        single = self.keymap_resolver.resolve(COMMAND_TABLE, (key.token,), flags)
        if single is not None:
            return self._execute(context, single)
        return Transition.pending(key)

    def _execute(self, context: EditContext, resolution: Resolution) -> Transition:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={
                "binding_id": resolution.binding.id,
                "action": resolution.action.id,
            },
        ):
            outcome = resolution.action(context)

        if isinstance(outcome, Transition):
            return outcome
        return Transition.noop()


@lru_cache(maxsize=None)
def default_engine() -> ModalEngine:
    return ModalEngine()


def transition(
    state: ModalEngineState,
    key: KeyInput,
    buffer: TextBuffer,
    single_line: bool = False,
    *,
    engine: Optional[ModalEngine] = None,
) -> Transition:
    """Feed one key to ``engine`` (the default keymap engine when omitted)."""

    return (engine or default_engine()).transition(state, key, buffer, single_line)


__all__ = ["ModalEngine", "default_engine", "transition"]
