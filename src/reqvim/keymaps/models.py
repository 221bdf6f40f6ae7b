"""Chords, guards and bindings that make up a keymap table.

A chord is what the engine looks up: a single key, or the pending key
followed by the key just pressed. Guards are boolean flags (``normal``,
``visual``, ``operator.delete``, ``single_line``) computed from the edit
context; a binding applies only when all of its guards hold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from reqvim.modes.types import EditContext

MAX_CHORD_LENGTH = 2


def make_token(key: str, modifiers: Iterable[str] = ()) -> str:
    """Canonical text for a key press, e.g. ``ctrl+r``."""

    names = sorted({m.strip().lower() for m in modifiers if m.strip()})
    return "+".join((*names, key))


def parse_token(text: str) -> str:
    head, _, key = text.rpartition("+")
    if not key and head.endswith("+"):  # ctrl++
        head, key = head[:-1], "+"
    if not head:
        return text
    if not key:
        raise ValueError(f"malformed key token {text!r}")
    return make_token(key, head.split("+"))


@dataclass(frozen=True, slots=True)
class Chord:
    """One key, or a pending key followed by one more (``g g``)."""

    tokens: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not 1 <= len(self.tokens) <= MAX_CHORD_LENGTH:
            raise ValueError(
                f"chord needs 1 to {MAX_CHORD_LENGTH} keys, got {len(self.tokens)}"
            )
        if not all(self.tokens):
            raise ValueError("chord keys cannot be empty")
        object.__setattr__(
            self, "tokens", tuple(parse_token(token) for token in self.tokens)
        )

    @classmethod
    def of(cls, *keys: str) -> "Chord":
        return cls(tuple(keys))

    @property
    def leader(self) -> Optional[str]:
        """The key that has to be pending for this chord, if any."""
        return self.tokens[0] if len(self.tokens) > 1 else None

    def __str__(self) -> str:
        return " ".join(self.tokens)


@dataclass(frozen=True, slots=True)
class Guard:
    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("guard flag cannot be empty")

    @classmethod
    def parse(cls, text: str) -> "Guard":
        """``"visual"`` requires the flag, ``"!visual"`` forbids it."""

        cleaned = text.strip()
        negated = cleaned.startswith("!")
        return cls(cleaned[1:] if negated else cleaned, not negated)

    def holds(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) is self.expected

    def __str__(self) -> str:
        return self.flag if self.expected else f"!{self.flag}"


ActionHandler = Callable[["EditContext"], object]


@dataclass(frozen=True, slots=True)
class Action:
    """Named editing verb a binding points at."""

    id: str
    handler: ActionHandler
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("action id cannot be empty")
        if not callable(self.handler):
            raise TypeError(f"handler for action '{self.id}' must be callable")

    def __call__(self, context: "EditContext") -> object:
        return self.handler(context)


@dataclass(frozen=True, slots=True)
class Binding:
    id: str
    table: str
    chord: Chord
    action_id: str
    guards: Tuple[Guard, ...] = ()
    priority: int = 0
    description: str = ""

    def __post_init__(self) -> None:
        for name in ("id", "table", "action_id"):
            if not getattr(self, name):
                raise ValueError(f"binding {name} cannot be empty")
        guards = tuple(
            guard if isinstance(guard, Guard) else Guard.parse(str(guard))
            for guard in self.guards
        )
        object.__setattr__(self, "guards", guards)

    @property
    def guard_set(self) -> frozenset[str]:
        return frozenset(str(guard) for guard in self.guards)

    def applies(self, flags: Mapping[str, bool]) -> bool:
        return all(guard.holds(flags) for guard in self.guards)

    def collides_with(self, other: "Binding") -> bool:
        """Same table, chord and guards: the two can never be told apart."""

        return (
            self.table == other.table
            and self.chord == other.chord
            and self.guard_set == other.guard_set
        )


__all__ = [
    "MAX_CHORD_LENGTH",
    "Action",
    "ActionHandler",
    "Binding",
    "Chord",
    "Guard",
    "make_token",
    "parse_token",
]
