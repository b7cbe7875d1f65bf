from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from ..config import LAYOUT, LayoutConstants
from .grid import SectionRow


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutCursor:
    page: int = 0
    y: float = LAYOUT.margin

    def advance(self, dy: float) -> "LayoutCursor":
        return replace(self, y=self.y + dy)

    def next_page(self, layout: LayoutConstants = LAYOUT) -> "LayoutCursor":
        return LayoutCursor(page=self.page + 1, y=layout.margin)

    def at_page_top(self, layout: LayoutConstants = LAYOUT) -> bool:
        return self.y <= layout.page_top_slack

    def fits(self, height: float, layout: LayoutConstants = LAYOUT) -> bool:
        return self.y + height <= layout.bottom_limit

    def needs_break(self, height: float, layout: LayoutConstants = LAYOUT) -> bool:
        return not self.fits(height, layout) and not self.at_page_top(layout)


@dataclass(frozen=True)
class SectionPlacement:
    """A slice of grid row `row_index`: visual lines [first_line, first_line + line_count)."""

    row_index: int
    page: int
    y: float
    first_line: int
    line_count: int


@dataclass(frozen=True)
class NotesPlacement:
    page: int
    y: float
    row_count: int


@dataclass(frozen=True)
class PageLayout:
    sections: Tuple[SectionPlacement, ...]
    notes: NotesPlacement
    row_counts: Tuple[int, ...]
    notes_rows: int
    end: LayoutCursor

    @property
    def page_count(self) -> int:
        return self.end.page + 1

    def rows_rendered(self, row_index: int) -> int:
        return sum(p.line_count for p in self.sections if p.row_index == row_index)


def _rows_that_fit(space: float, layout: LayoutConstants) -> int:
    return int(math.floor(space / layout.row_height))


def split_surplus(
    rows: Sequence[SectionRow],
    available: float,
    layout: LayoutConstants = LAYOUT,
) -> Tuple[List[int], int]:
    """
    Share leftover page height evenly between the grid and Notes. The grid's
    half is spread over the section rows, earliest rows taking the remainder.
    """
    row_h = layout.row_height
    header_h = layout.row_height
    min_table = sum(r.natural_rows for r in rows) * row_h + len(rows) * header_h
    min_notes = header_h + layout.notes_base_rows * row_h
    extra = max(0.0, available - min_table - min_notes)
    half = _rows_that_fit(extra / 2, layout)

    if not rows:
        return [], layout.notes_base_rows + half

    per_row, remainder = divmod(half, len(rows))
    counts = [
        max(1, row.natural_rows + per_row + (1 if index < remainder else 0))
        for index, row in enumerate(rows)
    ]
    logger.debug("Surplus %.1fmm -> %d grid rows, %d notes rows", extra, half, half)
    return counts, layout.notes_base_rows + half


def _place_notes(
    cursor: LayoutCursor,
    notes_rows: int,
    layout: LayoutConstants,
) -> Tuple[NotesPlacement, LayoutCursor]:
    row_h = layout.row_height
    if cursor.needs_break(row_h + notes_rows * row_h, layout):
        logger.debug("Notes move to page %d", cursor.page + 2)
        cursor = cursor.next_page(layout)

    top = cursor.y
    cursor = cursor.advance(row_h)
    wanted = max(notes_rows, _rows_that_fit(layout.bottom_limit - cursor.y - 1, layout))
    drawn = 0
    while drawn < wanted and cursor.fits(row_h, layout):
        cursor = cursor.advance(row_h)
        drawn += 1
    return NotesPlacement(page=cursor.page, y=top, row_count=drawn), cursor


def paginate(
    rows: Sequence[SectionRow],
    row_counts: Sequence[int],
    notes_rows: int,
    cursor: LayoutCursor,
    layout: LayoutConstants = LAYOUT,
) -> PageLayout:
    """
    Walk the grid rows top to bottom and decide where each one lands.

    A row that does not fit below other content moves to a new page and is
    re-filled from that page's free space, keeping room for the later rows at
    their natural height and for Notes. A row taller than a whole page is cut
    into consecutive slices so every item still gets printed.
    """
    row_h = layout.row_height
    header_h = layout.row_height
    counts = list(row_counts)
    placements: List[SectionPlacement] = []

    for index, row in enumerate(rows):
        count = counts[index]
        if cursor.needs_break(header_h + count * row_h, layout):
            cursor = cursor.next_page(layout)
            later = rows[index + 1:]
            reserved = (
                len(later) * header_h
                + sum(r.natural_rows for r in later) * row_h
                + header_h
                + notes_rows * row_h
            )
            free = layout.bottom_limit - cursor.y - header_h - 1 - reserved
            count = max(row.natural_rows, _rows_that_fit(free, layout))
            logger.debug("Grid row %d breaks to page %d with %d rows", index, cursor.page + 1, count)
        counts[index] = count

        first = 0
        remaining = count
        while not cursor.fits(header_h + remaining * row_h, layout) and cursor.at_page_top(layout):
            take = max(1, _rows_that_fit(layout.bottom_limit - cursor.y - header_h, layout))
            if take >= remaining:
                break
            placements.append(SectionPlacement(index, cursor.page, cursor.y, first, take))
            cursor = cursor.next_page(layout)
            first += take
            remaining -= take

        placements.append(SectionPlacement(index, cursor.page, cursor.y, first, remaining))
        cursor = cursor.advance(header_h + remaining * row_h)

    notes, cursor = _place_notes(cursor, notes_rows, layout)
    return PageLayout(
        sections=tuple(placements),
        notes=notes,
        row_counts=tuple(counts),
        notes_rows=notes_rows,
        end=cursor,
    )


def notes_only(cursor: LayoutCursor, layout: LayoutConstants = LAYOUT) -> PageLayout:
    """Without grid categories the Notes block alone fills the page."""
    notes, cursor = _place_notes(cursor, layout.notes_base_rows, layout)
    return PageLayout(
        sections=(),
        notes=notes,
        row_counts=(),
        notes_rows=layout.notes_base_rows,
        end=cursor,
    )


def allocate(
    rows: Sequence[SectionRow],
    cursor: LayoutCursor,
    layout: LayoutConstants = LAYOUT,
) -> PageLayout:
    if not rows:
        return notes_only(cursor, layout)
    available = layout.bottom_limit - cursor.y - 1
    counts, notes_rows = split_surplus(rows, available, layout)
    return paginate(rows, counts, notes_rows, cursor, layout)
