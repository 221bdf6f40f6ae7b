"""Stores actions and the bindings of every keymap table."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from reqvim.runtime.telemetry import span

from .models import Action, Binding, Chord

ChordKey = Tuple[str, Chord]


class KeymapConflictError(ValueError):
    """Two bindings share a table, chord and guard set."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        names = ", ".join(conflict.id for conflict in self.conflicts)
        super().__init__(
            f"binding '{binding.id}' ({binding.table}: {binding.chord}) "
            f"collides with {names}"
        )


class KeymapRegistry:
    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, Action] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_chord: Dict[ChordKey, List[str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    @property
    def revision(self) -> int:
        """Bumped whenever the set of bindings changes."""
        return self._revision

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, binding_id: object) -> bool:
        return binding_id in self._bindings

    def add_action(self, action: Action, *, replace: bool = False) -> Action:
        if not replace and action.id in self._actions:
            raise ValueError(f"action '{action.id}' is already registered")
        self._actions[action.id] = action
        return action

    def action(self, action_id: str) -> Action:
        try:
            return self._actions[action_id]
        except KeyError:
            raise KeyError(f"unknown action '{action_id}'") from None

    def binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError:
            raise KeyError(f"unknown binding '{binding_id}'") from None

    def bind(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts whatever it collides with."""

        with span(
            "keymaps::bind",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "table": binding.table},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.fail("unknown_action")
                raise KeyError(
                    f"binding '{binding.id}' points at unknown action "
                    f"'{binding.action_id}'"
                )

            clashes = self.conflicts(binding)
            if binding.id in self._bindings:
                clashes.append(self._bindings[binding.id])
            if clashes and not replace:
                handle.add_metadata("conflicts", ",".join(b.id for b in clashes))
                raise KeymapConflictError(binding, clashes)
            for clash in clashes:
                self._drop(clash.id)

            self._bindings[binding.id] = binding
            self._by_chord.setdefault((binding.table, binding.chord), []).append(
                binding.id
            )
            self._revision += 1
            return binding

    def unbind(self, binding_id: str) -> Optional[Binding]:
        if binding_id not in self._bindings:
            return None
        removed = self._drop(binding_id)
        self._revision += 1
        return removed

    def conflicts(self, binding: Binding) -> List[Binding]:
        candidates = self._by_chord.get((binding.table, binding.chord), ())
        return [
            self._bindings[other_id]
            for other_id in candidates
            if other_id != binding.id
            and binding.collides_with(self._bindings[other_id])
        ]

    def bindings(self, table: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if table is None or binding.table == table:
                yield binding

    def tables(self) -> Tuple[str, ...]:
        return tuple(sorted({binding.table for binding in self._bindings.values()}))

    def _drop(self, binding_id: str) -> Binding:
        binding = self._bindings.pop(binding_id)
        key = (binding.table, binding.chord)
        remaining = [other for other in self._by_chord[key] if other != binding_id]
        if remaining:
            self._by_chord[key] = remaining
        else:
            del self._by_chord[key]
        return binding


__all__ = ["ChordKey", "KeymapConflictError", "KeymapRegistry"]
