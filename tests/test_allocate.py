from __future__ import annotations

import pytest

from curriculum.config import LAYOUT
from curriculum.pipeline.allocate import LayoutCursor, allocate, notes_only, paginate, split_surplus
from curriculum.pipeline.grid import SectionRow


def _row(natural: int) -> SectionRow:
    return SectionRow(categories=(), column_width=100.0, plans=(), natural_rows=natural)


def test_layout_constants_are_frozen() -> None:
    with pytest.raises(Exception):
        LAYOUT.row_height = 6.0  # type: ignore[misc]
    assert LAYOUT.bottom_limit == pytest.approx(197.9)
    assert LAYOUT.content_width == pytest.approx(263.4)


def test_cursor_is_immutable_and_threaded() -> None:
    start = LayoutCursor(page=0, y=30.0)
    moved = start.advance(5.5)
    assert start.y == 30.0
    assert moved.y == 35.5
    fresh = moved.next_page()
    assert (fresh.page, fresh.y) == (1, LAYOUT.margin)
    assert fresh.at_page_top()
    assert not moved.at_page_top()


def test_surplus_is_split_between_grid_and_notes() -> None:
    counts, notes = split_surplus([_row(2), _row(3)], 100.0)
    # 34mm spare -> 17mm per side -> 3 rows each
    assert counts == [4, 4]
    assert notes == 7


def test_no_surplus_keeps_natural_rows() -> None:
    counts, notes = split_surplus([_row(20), _row(30)], 50.0)
    assert counts == [20, 30]
    assert notes == LAYOUT.notes_base_rows


def test_remainder_rows_go_to_earliest_rows() -> None:
    counts, _ = split_surplus([_row(1), _row(1), _row(1)], 27.5 + 16.5 + 3 + 2 * 5.5 * 5)
    assert counts[0] >= counts[1] >= counts[2]
    assert counts[0] - counts[2] <= 1


def test_everything_fits_on_first_page() -> None:
    rows = [_row(2), _row(3)]
    layout = allocate(rows, LayoutCursor(page=0, y=30.0))
    assert layout.page_count == 1
    assert [p.page for p in layout.sections] == [0, 0]
    assert layout.notes.page == 0
    assert layout.notes.row_count >= layout.notes_rows
    assert layout.end.y <= LAYOUT.bottom_limit


def test_row_that_does_not_fit_moves_and_refills() -> None:
    rows = [_row(10), _row(10)]
    cursor = LayoutCursor(page=0, y=150.0)
    counts, notes_rows = split_surplus(rows, LAYOUT.bottom_limit - cursor.y - 1)
    layout = paginate(rows, counts, notes_rows, cursor)

    first, second = layout.sections
    assert (first.page, first.y) == (1, LAYOUT.margin)
    assert first.line_count == 17
    assert (second.page, second.line_count) == (1, 10)
    assert layout.notes.page == 1
    assert layout.notes.row_count == 4
    assert layout.page_count == 2


def test_oversized_row_is_sliced_across_pages() -> None:
    rows = [_row(50)]
    layout = allocate(rows, LayoutCursor(page=0, y=30.0))
    slices = layout.sections
    assert [(s.page, s.first_line, s.line_count) for s in slices] == [(1, 0, 33), (2, 33, 17)]
    assert layout.rows_rendered(0) == 50
    assert layout.notes.page == 2


def test_every_row_renders_at_least_its_natural_rows() -> None:
    for naturals in ([3, 8, 2], [40, 5], [12, 12, 12], [1]):
        rows = [_row(n) for n in naturals]
        layout = allocate(rows, LayoutCursor(page=0, y=60.0))
        for index, row in enumerate(rows):
            assert layout.rows_rendered(index) >= row.natural_rows
        for placement in layout.sections:
            bottom = placement.y + (1 + placement.line_count) * LAYOUT.row_height
            assert bottom <= LAYOUT.bottom_limit + 1e-6


def test_notes_only_fills_the_page() -> None:
    layout = notes_only(LayoutCursor(page=0, y=30.0))
    assert layout.sections == ()
    assert layout.notes.row_count == 29
    assert layout.end.y <= LAYOUT.bottom_limit


def test_notes_only_breaks_when_page_is_full() -> None:
    layout = allocate([], LayoutCursor(page=0, y=185.0))
    assert layout.notes.page == 1
    assert layout.notes.row_count >= LAYOUT.notes_base_rows
