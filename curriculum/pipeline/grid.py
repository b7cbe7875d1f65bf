from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..config import LAYOUT, LayoutConstants
from ..models import Category
from .items import RenderPlan, plan_item
from .measure import TextMeasurer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionRow:
    """One band of the grid: up to three categories side by side."""

    categories: Tuple[Category, ...]
    column_width: float
    plans: Tuple[Tuple[RenderPlan, ...], ...]
    natural_rows: int

    @property
    def column_count(self) -> int:
        return len(self.categories)

    def column_lines(self, column: int) -> int:
        return sum(plan.line_count for plan in self.plans[column])


def partition(count: int, max_columns: int = LAYOUT.max_grid_columns) -> List[int]:
    """
    Column counts per grid row. Rows are as even as possible and earlier rows
    never hold fewer categories than later ones.
    """
    if count <= 0:
        return []
    rows = math.ceil(count / max_columns)
    layout: List[int] = []
    remaining = count
    for r in range(rows):
        cols = math.ceil(remaining / (rows - r))
        layout.append(cols)
        remaining -= cols
    return layout


def table_categories(categories: Sequence[Category], layout: LayoutConstants = LAYOUT) -> List[Category]:
    tables = [c for c in categories if c.is_table]
    if len(tables) > layout.max_table_categories:
        dropped = [c.name for c in tables[layout.max_table_categories:]]
        logger.warning("Only %d table categories fit the sheet, dropping: %s", layout.max_table_categories, ", ".join(dropped))
    return tables[: layout.max_table_categories]


def group_categories(categories: Sequence[Category], layout: LayoutConstants = LAYOUT) -> List[List[Category]]:
    tables = table_categories(categories, layout)
    groups: List[List[Category]] = []
    offset = 0
    for cols in partition(len(tables), layout.max_grid_columns):
        groups.append(list(tables[offset: offset + cols]))
        offset += cols
    return groups


def measure_row(
    categories: Sequence[Category],
    content_width: float,
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> SectionRow:
    column_width = content_width / len(categories)
    plans = tuple(
        tuple(plan_item(item, column_width, measurer, layout) for item in category.items)
        for category in categories
    )
    natural = max(sum(plan.line_count for plan in column) for column in plans)
    return SectionRow(
        categories=tuple(categories),
        column_width=column_width,
        plans=plans,
        natural_rows=natural,
    )


def measure_rows(
    groups: Sequence[Sequence[Category]],
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> List[SectionRow]:
    """Measurement pass: natural row count of every grid row, nothing drawn."""
    return [measure_row(group, layout.content_width, measurer, layout) for group in groups if group]
