from __future__ import annotations

from rich.segment import Segment
from rich.style import Style

from reqvim.render import (
    DEFAULT_HIGHLIGHT,
    Viewport,
    WrapCache,
    char_width,
    plain_lines,
    row_text,
    wrap_lines,
)


def make_lines(*lines: str) -> list[list[Segment]]:
    return plain_lines(lines)


def texts(rows) -> list[str]:
    return [row_text(row) for row in rows]


def test_wrap_breaks_before_overflowing_char() -> None:
    output = wrap_lines(make_lines("abc", "def"), 2, cursor=(1, 2))

    assert texts(output.rows) == ["ab", "c", "de", "f"]
    assert output.cursor == (0, 3)


def test_wrap_cursor_inside_first_row() -> None:
    output = wrap_lines(make_lines("abc", "def"), 2, cursor=(0, 1))

    assert output.cursor == (1, 0)


def test_empty_line_yields_one_empty_row() -> None:
    output = wrap_lines(make_lines("a", "", "b"), 4)

    assert texts(output.rows) == ["a", "", "b"]
    assert output.rows[1] == ()


def test_no_lines_yields_single_empty_row() -> None:
    output = wrap_lines([], 10, cursor=(0, 0))

    assert output.rows == ((),)
    assert output.cursor == (0, 0)


def test_wide_characters_take_two_cells() -> None:
    assert char_width("日") == 2

    output = wrap_lines(make_lines("日本"), 3, cursor=(0, 1))

    assert texts(output.rows) == ["日", "本"]
    assert output.cursor == (0, 1)


def test_combining_marks_take_no_cells() -> None:
    output = wrap_lines(make_lines("e\u0301x"), 2, cursor=(0, 2))

    assert texts(output.rows) == ["e\u0301x"]
    assert output.cursor == (1, 0)


def test_wide_char_wider_than_view_still_placed() -> None:
    output = wrap_lines(make_lines("日a"), 1)

    assert texts(output.rows) == ["日", "a"]


def test_control_characters_shown_as_replacement() -> None:
    output = wrap_lines(make_lines("a\x01b\tc"), 10)

    assert texts(output.rows) == ["a\ufffdb c"]


def test_end_of_line_cursor() -> None:
    output = wrap_lines(make_lines("ab"), 5, cursor=(0, 2))

    assert output.cursor == (2, 0)


def test_end_of_line_cursor_on_full_row_stays_in_view() -> None:
    output = wrap_lines(make_lines("ab"), 2, cursor=(0, 2))

    assert output.cursor == (1, 0)


def test_selection_overrides_style_and_merges_runs() -> None:
    base = Style(color="green")
    lines = plain_lines(["abcdef"], base)

    output = wrap_lines(lines, 10, selection=((0, 1), (0, 3)))

    assert output.rows[0] == (
        Segment("a", base),
        Segment("bc", DEFAULT_HIGHLIGHT),
        Segment("def", base),
    )


def test_selection_spanning_lines() -> None:
    output = wrap_lines(make_lines("abc", "def"), 10, selection=((0, 1), (1, 1)))

    assert output.rows[0] == (Segment("a"), Segment("bc", DEFAULT_HIGHLIGHT))
    assert output.rows[1] == (Segment("d", DEFAULT_HIGHLIGHT), Segment("ef"))


def test_adjacent_equal_styles_merge_across_segments() -> None:
    style = Style(bold=True)
    lines = [[Segment("ab", style), Segment("cd", style), Segment("ef")]]

    output = wrap_lines(lines, 10)

    assert output.rows[0] == (Segment("abcd", style), Segment("ef"))


def test_cache_is_idempotent() -> None:
    cache = WrapCache()
    lines = make_lines("abc", "def")

    first = cache.render(lines, width=2, generation=1, cursor=(1, 2))
    second = cache.render(lines, width=2, generation=1, cursor=(1, 2))

    assert cache.recompute_count == 1
    assert first is second
    assert first.cursor == (0, 3)
    assert texts(first.lines) == ["ab", "c", "de", "f"]


def test_cache_recomputes_when_any_key_changes() -> None:
    cache = WrapCache()
    lines = make_lines("abc", "def")
    cache.render(lines, width=2, generation=1)

    cache.render(lines, width=3, generation=1)
    cache.render(lines, width=3, generation=2)
    cache.render(lines, width=3, generation=2, cursor=(0, 1))
    cache.render(
        lines, width=3, generation=2, cursor=(0, 1), selection=((0, 0), (0, 1))
    )

    assert cache.recompute_count == 5
    assert cache.width == 3
    assert cache.content_generation == 2
    assert cache.cursor_snapshot == (0, 1)
    assert cache.selection_snapshot == ((0, 0), (0, 1))


def test_cache_trusts_generation_over_content() -> None:
    cache = WrapCache()
    cache.render(make_lines("old"), width=10, generation=7)

    result = cache.render(make_lines("new"), width=10, generation=7)

    assert cache.recompute_count == 1
    assert texts(result.lines) == ["old"]


def test_cache_invalidate_forces_recompute() -> None:
    cache = WrapCache()
    lines = make_lines("abc")
    cache.render(lines, width=10, generation=1)

    cache.invalidate()
    cache.render(lines, width=10, generation=1)

    assert cache.recompute_count == 2


def test_cache_clamps_out_of_range_coordinates() -> None:
    cache = WrapCache()

    result = cache.render(
        make_lines("abc", "def"),
        width=10,
        generation=1,
        cursor=(9, 9),
        selection=((5, 0), (-1, 1)),
    )

    assert result.cursor == (3, 1)
    assert result.lines[0] == (Segment("a"), Segment("bc", DEFAULT_HIGHLIGHT))


def test_viewport_minimum_shift() -> None:
    viewport = Viewport(height=3)

    assert viewport.ensure_visible(5) is True
    assert viewport.scroll_offset == 3

    assert viewport.ensure_visible(4) is False
    assert viewport.scroll_offset == 3

    assert viewport.ensure_visible(1) is True
    assert viewport.scroll_offset == 1


def test_viewport_scroll_is_clamped() -> None:
    viewport = Viewport(height=4)

    assert viewport.scroll_by(-3, total_rows=10) is False
    assert viewport.scroll_page(1, total_rows=10, page_rows=5) is True
    assert viewport.scroll_offset == 5
    viewport.scroll_page(1, total_rows=10, page_rows=5)
    assert viewport.scroll_offset == 6


def test_render_follows_cursor_into_view() -> None:
    cache = WrapCache()
    viewport = Viewport(height=3)
    lines = make_lines(*(str(i) for i in range(10)))

    result = cache.render(
        lines, width=5, generation=1, cursor=(7, 0), viewport=viewport
    )

    assert result.scroll_offset == 5
    assert texts(result.lines) == ["5", "6", "7"]
    assert result.cursor == (0, 2)
    assert result.total_rows == 10


def test_explicit_scroll_persists_until_cursor_moves() -> None:
    cache = WrapCache()
    viewport = Viewport(height=3)
    lines = make_lines(*(str(i) for i in range(10)))
    cache.render(lines, width=5, generation=1, cursor=(7, 0), viewport=viewport)

    viewport.scroll_page(-1, total_rows=10, page_rows=2)
    scrolled = cache.render(
        lines, width=5, generation=1, cursor=(7, 0), viewport=viewport
    )

    assert cache.recompute_count == 1
    assert texts(scrolled.lines) == ["3", "4", "5"]
    assert scrolled.cursor is None

    moved = cache.render(
        lines, width=5, generation=1, cursor=(8, 0), viewport=viewport
    )

    assert texts(moved.lines) == ["6", "7", "8"]
    assert moved.cursor == (0, 2)


def test_shrinking_viewport_keeps_cursor_on_screen() -> None:
    cache = WrapCache()
    viewport = Viewport(height=10)
    lines = make_lines(*(str(i) for i in range(20)))

    tall = cache.render(lines, width=5, generation=1, cursor=(9, 0), viewport=viewport)
    assert tall.scroll_offset == 0
    assert tall.cursor == (0, 9)

    viewport.resize(5)
    short = cache.render(lines, width=5, generation=1, cursor=(9, 0), viewport=viewport)

    assert cache.recompute_count == 1
    assert short.scroll_offset == 5
    assert short.cursor == (0, 4)
    assert texts(short.lines) == ["5", "6", "7", "8", "9"]
