from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..config import LAYOUT, LayoutConstants
from ..models import Category, Item
from .allocate import LayoutCursor
from .measure import TextMeasurer
from .richtext import LogicalLine, logical_lines


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KnowledgeLine:
    text: str
    bold: bool = False
    link: Optional[str] = None


def slice_height(line_count: int, layout: LayoutConstants = LAYOUT) -> float:
    return (
        layout.knowledge_top_padding
        + line_count * layout.knowledge_line_height
        + layout.knowledge_bottom_padding
    )


@dataclass(frozen=True)
class KnowledgeItem:
    title_lines: Tuple[str, ...]
    body_lines: Tuple[LogicalLine, ...]
    video_url: Optional[str] = None

    @property
    def line_count(self) -> int:
        return len(self.title_lines) + len(self.body_lines) + (1 if self.video_url else 0)

    def lines(self) -> Tuple[KnowledgeLine, ...]:
        out: List[KnowledgeLine] = [KnowledgeLine(text, True) for text in self.title_lines]
        out.extend(KnowledgeLine(line.text, line.bold) for line in self.body_lines)
        if self.video_url:
            out.append(KnowledgeLine("", False, self.video_url))
        return tuple(out)

    def height(self, layout: LayoutConstants = LAYOUT) -> float:
        return slice_height(self.line_count, layout)


@dataclass(frozen=True)
class KnowledgeBlock:
    name: str
    items: Tuple[KnowledgeItem, ...]


@dataclass(frozen=True)
class BarPlacement:
    page: int
    y: float
    name: str


@dataclass(frozen=True)
class ItemPlacement:
    """A slice of one Q&A item: lines [first_line, first_line + line_count)."""

    page: int
    y: float
    item: KnowledgeItem
    index: int
    first_line: int = 0
    line_count: int = 0

    def height(self, layout: LayoutConstants = LAYOUT) -> float:
        return slice_height(self.line_count, layout)

    def lines(self) -> Tuple[KnowledgeLine, ...]:
        return self.item.lines()[self.first_line: self.first_line + self.line_count]


KnowledgePlacement = Union[BarPlacement, ItemPlacement]


def measure_item(item: Item, measurer: TextMeasurer, layout: LayoutConstants = LAYOUT) -> KnowledgeItem:
    """
    Physical lines of one Q&A block. Bold is decided per logical line, and
    blank lines are kept so paragraph spacing survives.
    """
    size = layout.detail_size
    width = layout.content_width - 2 * layout.knowledge_inset

    title_lines: List[str] = []
    if item.show_title:
        title_lines = measurer.wrap(item.name, width, size, bold=True)

    body: List[LogicalLine] = []
    for line in logical_lines(item.description or ""):
        if line.is_blank:
            body.append(LogicalLine("", False))
            continue
        for wrapped in measurer.wrap(line.text, width, size, bold=line.bold):
            body.append(LogicalLine(wrapped, line.bold))

    return KnowledgeItem(
        title_lines=tuple(title_lines),
        body_lines=tuple(body),
        video_url=item.video_url or None,
    )


def measure_blocks(
    categories: Sequence[Category],
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> List[KnowledgeBlock]:
    return [
        KnowledgeBlock(
            name=category.name,
            items=tuple(measure_item(item, measurer, layout) for item in category.items),
        )
        for category in categories
        if category.is_knowledge
    ]


def _lines_that_fit(cursor: LayoutCursor, layout: LayoutConstants) -> int:
    space = layout.bottom_limit - cursor.y - slice_height(0, layout)
    return int(math.floor(space / layout.knowledge_line_height))


def _place_item(
    item: KnowledgeItem,
    index: int,
    cursor: LayoutCursor,
    layout: LayoutConstants,
) -> Tuple[List[ItemPlacement], LayoutCursor]:
    """
    Place one Q&A item, moving it to a new page when it does not fit. An item
    taller than a whole page is cut into slices that fill each page in turn.
    """
    oversized = item.height(layout) > layout.bottom_limit - layout.margin
    if not oversized and cursor.needs_break(item.height(layout), layout):
        cursor = cursor.next_page(layout)

    placements: List[ItemPlacement] = []
    first = 0
    remaining = item.line_count
    while not cursor.fits(slice_height(remaining, layout), layout):
        take = _lines_that_fit(cursor, layout)
        if take < 1:
            cursor = cursor.next_page(layout)
            continue
        if take >= remaining:
            break
        placements.append(ItemPlacement(cursor.page, cursor.y, item, index, first, take))
        logger.debug("Q&A item %d continues on page %d", index, cursor.page + 2)
        cursor = cursor.next_page(layout)
        first += take
        remaining -= take

    placements.append(ItemPlacement(cursor.page, cursor.y, item, index, first, remaining))
    return placements, cursor.advance(slice_height(remaining, layout))


def place_blocks(
    blocks: Sequence[KnowledgeBlock],
    cursor: LayoutCursor,
    layout: LayoutConstants = LAYOUT,
) -> Tuple[List[KnowledgePlacement], LayoutCursor]:
    """
    Stack the Q&A section. A category bar stays with its first item, and an
    item that would cross the bottom margin starts a new page.
    """
    bar_h = layout.knowledge_bar_height
    placements: List[KnowledgePlacement] = []

    for block in blocks:
        first_h = block.items[0].height(layout) if block.items else 0.0
        if cursor.needs_break(bar_h + first_h, layout):
            cursor = cursor.next_page(layout)
            logger.debug("Q&A category %r starts page %d", block.name, cursor.page + 1)
        placements.append(BarPlacement(cursor.page, cursor.y, block.name))
        cursor = cursor.advance(bar_h)

        for index, item in enumerate(block.items):
            slices, cursor = _place_item(item, index, cursor, layout)
            placements.extend(slices)

    return placements, cursor
