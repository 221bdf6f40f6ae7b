import pytest

from reqvim.keymaps import (
    Action,
    Binding,
    Chord,
    Guard,
    KeymapConflictError,
    KeymapRegistry,
    make_token,
)
from reqvim.keymaps.defaults import DEFAULT_BINDINGS, load_default_keymaps


def make_action(action_id: str = "motion.test") -> Action:
    return Action(id=action_id, handler=lambda context: None)


def make_binding(
    binding_id: str,
    *,
    table: str = "normal",
    keys: tuple[str, ...] = ("g", "g"),
    action_id: str = "motion.test",
    guards: tuple[str, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        table=table,
        chord=Chord(keys),
        action_id=action_id,
        guards=tuple(Guard.parse(guard) for guard in guards),
    )


def make_registry() -> KeymapRegistry:
    registry = KeymapRegistry()
    registry.add_action(make_action())
    return registry


def test_chord_normalises_modifier_order() -> None:
    assert Chord.of("shift+ctrl+r").tokens == ("ctrl+shift+r",)
    assert Chord.of("ctrl++").tokens == ("ctrl++",)
    assert Chord.of("+").tokens == ("+",)
    assert make_token("r", ("Ctrl",)) == "ctrl+r"


def test_chord_length_is_limited() -> None:
    with pytest.raises(ValueError):
        Chord(())
    with pytest.raises(ValueError):
        Chord.of("g", "g", "g")


def test_chord_leader_is_the_pending_key() -> None:
    assert Chord.of("g", "g").leader == "g"
    assert Chord.of("x").leader is None


def test_guard_parse_and_holds() -> None:
    guard = Guard.parse("!single_line")

    assert guard == Guard("single_line", expected=False)
    assert str(guard) == "!single_line"
    assert guard.holds({}) is True
    assert guard.holds({"single_line": True}) is False


def test_bind_and_lookup() -> None:
    registry = make_registry()
    binding = make_binding("normal.gg")

    registry.bind(binding)

    assert len(registry) == 1
    assert "normal.gg" in registry
    assert list(registry.bindings("normal")) == [binding]
    assert registry.binding("normal.gg") is binding


def test_bind_detects_collisions() -> None:
    registry = make_registry()
    registry.bind(make_binding("normal.gg"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.bind(make_binding("normal.gg.again"))

    assert [b.id for b in excinfo.value.conflicts] == ["normal.gg"]


def test_bind_rejects_duplicate_id() -> None:
    registry = make_registry()
    registry.bind(make_binding("binding"))

    with pytest.raises(KeymapConflictError):
        registry.bind(make_binding("binding", keys=("x",)))


def test_bind_unknown_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.bind(make_binding("normal.gg"))


def test_mode_guards_do_not_collide() -> None:
    registry = make_registry()

    registry.bind(make_binding("esc.exit", keys=("ESC",), guards=("normal",)))
    registry.bind(make_binding("esc.cancel", keys=("ESC",), guards=("!normal",)))
    registry.bind(make_binding("esc.any", keys=("ESC",)))

    assert len(registry) == 3


def test_same_chord_in_other_table_does_not_collide() -> None:
    registry = make_registry()

    registry.bind(make_binding("normal.esc", keys=("ESC",)))
    registry.bind(make_binding("insert.esc", table="insert", keys=("ESC",)))

    assert registry.tables() == ("insert", "normal")


def test_bind_with_replace_evicts_collisions() -> None:
    registry = make_registry()
    registry.bind(make_binding("first"))
    before = registry.revision

    second = registry.bind(make_binding("second"), replace=True)

    assert list(registry.bindings()) == [second]
    assert registry.revision > before


def test_unbind() -> None:
    registry = make_registry()
    binding = registry.bind(make_binding("binding"))

    assert registry.unbind("binding") == binding
    assert registry.unbind("binding") is None
    assert len(registry) == 0

    registry.bind(make_binding("again"))
    assert len(registry) == 1


def test_load_default_keymaps_registers_every_binding() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert len(registry) == len(DEFAULT_BINDINGS)
    assert registry.tables() == ("insert", "normal")
    assert registry.binding("normal.gg").chord == Chord.of("g", "g")
    assert registry.binding("normal.redo").chord.tokens == ("ctrl+r",)


def test_load_default_keymaps_skip() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, skip=("normal.x", "normal.X"))

    assert "normal.x" not in registry
    assert len(registry) == len(DEFAULT_BINDINGS) - 2


def test_load_default_keymaps_override_replaces_by_id() -> None:
    registry = KeymapRegistry()
    custom = Binding(
        id="normal.i",
        table="normal",
        chord=Chord.of("ctrl+i"),
        action_id="edit.insert",
        guards=(Guard("normal"),),
    )

    load_default_keymaps(registry, overrides=(custom,))

    assert registry.binding("normal.i").chord.tokens == ("ctrl+i",)
    assert len(registry) == len(DEFAULT_BINDINGS)


def test_load_default_keymaps_rejects_unknown_table() -> None:
    registry = KeymapRegistry()
    stray = Binding(
        id="visual.i",
        table="visual",
        chord=Chord.of("i"),
        action_id="edit.insert",
    )

    with pytest.raises(ValueError):
        load_default_keymaps(registry, overrides=(stray,))
