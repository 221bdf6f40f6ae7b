"""Chord lookup over the registry, honouring guards and priority."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from reqvim.runtime.telemetry import span

from .models import Action, Binding, Chord
from .registry import ChordKey, KeymapRegistry


@dataclass(frozen=True, slots=True)
class Resolution:
    binding: Binding
    action: Action


class KeymapResolver:
    """Finds the binding a chord triggers under the current flags.

    Candidates for each chord are kept sorted by descending priority, then
    id, and the index is rebuilt whenever the registry revision moves.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self.registry = registry
        self._logger_name = logger_name
        self._index: Dict[ChordKey, List[Binding]] = {}
        self._indexed_revision: Optional[int] = None

    def resolve(
        self,
        table: str,
        keys: Sequence[str],
        flags: Optional[Mapping[str, bool]] = None,
    ) -> Optional[Resolution]:
        chord = Chord(tuple(keys))
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"table": table, "chord": str(chord)},
        ) as handle:
            for binding in self._candidates(table, chord):
                if binding.applies(flags or {}):
                    handle.add_metadata("binding_id", binding.id)
                    return Resolution(
                        binding, self.registry.action(binding.action_id)
                    )
            handle.add_metadata("binding_id", "")
            return None

    def _candidates(self, table: str, chord: Chord) -> Tuple[Binding, ...]:
        if self._indexed_revision != self.registry.revision:
            index: Dict[ChordKey, List[Binding]] = {}
            for binding in self.registry.bindings():
                index.setdefault((binding.table, binding.chord), []).append(binding)
            for bucket in index.values():
                bucket.sort(key=lambda b: (-b.priority, b.id))
            self._index = index
            self._indexed_revision = self.registry.revision
        return tuple(self._index.get((table, chord), ()))


__all__ = ["KeymapResolver", "Resolution"]
