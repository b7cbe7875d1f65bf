from __future__ import annotations

import pytest

from curriculum.models import Category, Item
from curriculum.pipeline.grid import group_categories, measure_row, measure_rows, partition, table_categories


def _table(name: str, count: int = 1) -> Category:
    return Category(id=name, name=name, items=[Item(name=f"{name} {i}") for i in range(count)])


def _knowledge(name: str) -> Category:
    return Category(id=name, name=name, items=[Item(name="Why bow?", kind="knowledge")])


@pytest.mark.parametrize(
    "count, expected",
    [
        (0, []),
        (1, [1]),
        (2, [2]),
        (3, [3]),
        (4, [2, 2]),
        (5, [3, 2]),
        (6, [3, 3]),
        (7, [3, 2, 2]),
        (8, [3, 3, 2]),
        (9, [3, 3, 3]),
    ],
)
def test_partition_layouts(count: int, expected: list) -> None:
    assert partition(count) == expected


def test_partition_is_balanced_and_front_loaded() -> None:
    for count in range(1, 10):
        layout = partition(count)
        assert sum(layout) == count
        assert max(layout) - min(layout) <= 1
        assert all(1 <= cols <= 3 for cols in layout)
        assert layout == sorted(layout, reverse=True)


def test_only_non_empty_table_categories_are_gridded() -> None:
    categories = [_table("Kicks"), _knowledge("Terms"), Category(id="e", name="Empty"), _table("Blocks")]
    assert [c.name for c in table_categories(categories)] == ["Kicks", "Blocks"]


def test_mixed_category_counts_as_table() -> None:
    mixed = Category(name="Mixed", items=[Item(name="Q", kind="knowledge"), Item(name="Kick")])
    assert mixed.is_table
    assert not mixed.is_knowledge


def test_tenth_table_category_is_dropped() -> None:
    categories = [_table(f"Cat {i}") for i in range(1, 11)]
    groups = group_categories(categories)
    names = [c.name for group in groups for c in group]
    assert names == [f"Cat {i}" for i in range(1, 10)]
    assert [len(group) for group in groups] == [3, 3, 3]


def test_natural_rows_come_from_tallest_column(measurer) -> None:
    row = measure_row([_table("Kicks", 3), _table("Blocks", 1)], 263.4, measurer)
    assert row.column_count == 2
    assert row.column_width == pytest.approx(131.7)
    assert row.column_lines(0) == 3
    assert row.column_lines(1) == 1
    assert row.natural_rows == 3


def test_wrapped_items_add_rows(measurer) -> None:
    long_item = Item(name="Jumping spinning hook kick to the back of the heavy bag", sets=3, reps=10)
    row = measure_row([Category(name="A", items=[long_item]), _table("B"), _table("C")], 90, measurer)
    assert row.column_lines(0) > 1
    assert row.natural_rows == row.column_lines(0)


def test_measure_rows_follows_groups(measurer) -> None:
    groups = group_categories([_table("A"), _table("B", 2), _table("C"), _table("D", 4)])
    rows = measure_rows(groups, measurer)
    assert [r.column_count for r in rows] == [2, 2]
    assert [r.natural_rows for r in rows] == [2, 4]
