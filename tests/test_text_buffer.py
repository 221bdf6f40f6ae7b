from __future__ import annotations

from reqvim.buffer import CursorMove, TextBuffer, UndoEntry, UndoTimeline, YankSlot
from reqvim.buffer.clipboard import ClipboardError, ClipboardErrorKind


def make_buffer(text: str = "", cursor: tuple[int, int] = (0, 0)) -> TextBuffer:
    buffer = TextBuffer(text)
    buffer.set_cursor(*cursor)
    return buffer


def make_entry(label: str) -> UndoEntry:
    return UndoEntry(label, ("a",), ("b",), (0, 0), (0, 0))


class FlakyClipboard:
    def __init__(self, text: str = "") -> None:
        self.text = text
        self.fail = False

    def get_text(self) -> str:
        if self.fail:
            raise ClipboardError(ClipboardErrorKind.READ, OSError("no display"))
        return self.text

    def set_text(self, text: str) -> None:
        if self.fail:
            raise ClipboardError(ClipboardErrorKind.WRITE, OSError("no display"))
        self.text = text


def test_text_round_trips_lines() -> None:
    buffer = make_buffer("abc\r\ndef\n")

    assert list(buffer.lines) == ["abc", "def", ""]
    assert buffer.text == "abc\ndef\n"


def test_empty_buffer_has_one_line() -> None:
    buffer = make_buffer()

    assert list(buffer.lines) == [""]
    assert buffer.cursor == (0, 0)


def test_set_cursor_clamps() -> None:
    buffer = make_buffer("abc\nde")

    buffer.set_cursor(9, 9)

    assert buffer.cursor == (1, 2)


def test_back_and_forward_cross_line_boundaries() -> None:
    buffer = make_buffer("abc\ndef", (1, 0))

    buffer.move_cursor(CursorMove.BACK)
    assert buffer.cursor == (0, 3)

    buffer.move_cursor(CursorMove.FORWARD)
    assert buffer.cursor == (1, 0)


def test_motions_stop_at_buffer_bounds() -> None:
    buffer = make_buffer("ab")

    buffer.move_cursor(CursorMove.BACK)
    assert buffer.cursor == (0, 0)

    buffer.set_cursor(0, 2)
    buffer.move_cursor(CursorMove.FORWARD)
    assert buffer.cursor == (0, 2)


def test_vertical_motion_clamps_column() -> None:
    buffer = make_buffer("abcdef\nab", (0, 5))

    buffer.move_cursor(CursorMove.DOWN)

    assert buffer.cursor == (1, 2)


def test_top_and_bottom() -> None:
    buffer = make_buffer("one\ntwo\nthree", (1, 1))

    buffer.move_cursor(CursorMove.BOTTOM)
    assert buffer.cursor == (2, 1)

    buffer.move_cursor(CursorMove.TOP)
    assert buffer.cursor == (0, 1)


def test_word_motions() -> None:
    buffer = make_buffer("hello world")

    buffer.move_cursor(CursorMove.WORD_FORWARD)
    assert buffer.cursor == (0, 6)

    buffer.move_cursor(CursorMove.WORD_BACK)
    assert buffer.cursor == (0, 0)

    buffer.move_cursor(CursorMove.WORD_END)
    assert buffer.cursor == (0, 4)


def test_word_forward_treats_punctuation_as_its_own_word() -> None:
    buffer = make_buffer("foo.bar")

    buffer.move_cursor(CursorMove.WORD_FORWARD)

    assert buffer.cursor == (0, 3)


def test_word_forward_moves_to_next_line() -> None:
    buffer = make_buffer("last\nnext", (0, 1))

    buffer.move_cursor(CursorMove.WORD_FORWARD)

    assert buffer.cursor == (1, 0)


def test_copy_keeps_cursor_and_fills_yank() -> None:
    buffer = make_buffer("hello world")
    buffer.start_selection()
    buffer.set_cursor(0, 5)

    assert buffer.copy() is True
    assert buffer.yank_text() == "hello"
    assert buffer.cursor == (0, 5)
    assert buffer.is_selecting() is False
    assert buffer.text == "hello world"


def test_cut_moves_cursor_to_selection_start() -> None:
    buffer = make_buffer("hello world", (0, 6))
    buffer.start_selection()
    buffer.set_cursor(0, 0)

    assert buffer.cut() is True
    assert buffer.text == "world"
    assert buffer.yank_text() == "hello "
    assert buffer.cursor == (0, 0)


def test_cut_without_selection_is_a_no_op() -> None:
    buffer = make_buffer("abc")
    generation = buffer.generation

    assert buffer.cut() is False
    assert buffer.generation == generation


def test_cut_across_lines_joins_them() -> None:
    buffer = make_buffer("abc\ndef", (0, 1))
    buffer.start_selection()
    buffer.set_cursor(1, 1)

    buffer.cut()

    assert list(buffer.lines) == ["aef"]
    assert buffer.yank_text() == "bc\nd"


def test_paste_inserts_and_places_cursor_after() -> None:
    buffer = make_buffer("abc", (0, 1))
    buffer.set_yank_text("XY")

    assert buffer.paste() is True
    assert buffer.text == "aXYbc"
    assert buffer.cursor == (0, 3)


def test_paste_multiline_text() -> None:
    buffer = make_buffer("ab", (0, 1))
    buffer.set_yank_text("1\n2")

    buffer.paste()

    assert list(buffer.lines) == ["a1", "2b"]
    assert buffer.cursor == (1, 1)


def test_paste_replaces_selection() -> None:
    buffer = make_buffer("abcd", (0, 1))
    buffer.set_yank_text("Z")
    buffer.start_selection()
    buffer.set_cursor(0, 3)

    buffer.paste()

    assert buffer.text == "aZd"


def test_backspace_at_line_head_joins_lines() -> None:
    buffer = make_buffer("abc\ndef", (1, 0))

    assert buffer.delete_char() is True
    assert list(buffer.lines) == ["abcdef"]
    assert buffer.cursor == (0, 3)


def test_delete_next_char_at_end_of_buffer() -> None:
    buffer = make_buffer("ab", (0, 2))

    assert buffer.delete_next_char() is False
    assert buffer.text == "ab"


def test_insert_newline_splits_line() -> None:
    buffer = make_buffer("abcd", (0, 2))

    buffer.insert_newline()

    assert list(buffer.lines) == ["ab", "cd"]
    assert buffer.cursor == (1, 0)


def test_generation_only_moves_on_real_changes() -> None:
    buffer = make_buffer("abc")
    start = buffer.generation

    buffer.insert_str("")
    buffer.delete_char()
    buffer.move_cursor(CursorMove.END)
    assert buffer.generation == start

    buffer.insert_char("d")
    assert buffer.generation == start + 1


def test_undo_and_redo_restore_text_and_cursor() -> None:
    buffer = make_buffer("abc", (0, 3))
    buffer.insert_str("def")

    assert buffer.undo() is True
    assert buffer.text == "abc"
    assert buffer.cursor == (0, 3)

    assert buffer.redo() is True
    assert buffer.text == "abcdef"
    assert buffer.cursor == (0, 6)

    assert buffer.redo() is False


def test_new_edit_drops_redo_history() -> None:
    buffer = make_buffer("a", (0, 1))
    buffer.insert_str("b")
    buffer.undo()
    buffer.insert_str("c")

    assert buffer.redo() is False
    assert buffer.text == "ac"


def test_set_text_clears_history() -> None:
    buffer = make_buffer("a", (0, 1))
    buffer.insert_str("b")

    buffer.set_text("fresh")

    assert buffer.undo() is False
    assert buffer.text == "fresh"


def test_undo_timeline_is_bounded() -> None:
    timeline = UndoTimeline(limit=2)
    for label in ("one", "two", "three"):
        timeline.push(make_entry(label))

    assert len(timeline) == 2
    assert [timeline.undo().label, timeline.undo().label] == ["three", "two"]
    assert timeline.undo() is None


def test_yank_slot_mirrors_provider() -> None:
    provider = FlakyClipboard("from os")
    slot = YankSlot(provider)

    assert slot.pull() == "from os"

    slot.push("mine")
    assert provider.text == "mine"


def test_yank_slot_keeps_local_text_when_provider_fails() -> None:
    provider = FlakyClipboard()
    slot = YankSlot(provider)
    slot.push("kept")
    provider.fail = True

    slot.push("local")

    assert slot.pull() == "local"
    assert provider.text == "kept"


def test_selection_range_can_include_cursor_character() -> None:
    buffer = make_buffer("ab\ncd")
    buffer.start_selection()
    buffer.move_cursor(CursorMove.END)

    assert buffer.selection_range() == ((0, 0), (0, 2))
    assert buffer.selection_range(include_cursor=True) == ((0, 0), (1, 0))


def test_backwards_selection_including_cursor() -> None:
    buffer = make_buffer("ab\ncd", (1, 1))
    buffer.start_selection()
    buffer.move_cursor(CursorMove.UP)

    assert buffer.selection_range(include_cursor=True) == ((0, 2), (1, 1))
