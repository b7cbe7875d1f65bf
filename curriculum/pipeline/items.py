from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..config import LAYOUT, LayoutConstants
from ..models import Item
from .measure import TextMeasurer


LINK_LABEL = "Link"
LINK_SUFFIX = f"- {LINK_LABEL}"

# code -> (drawn glyph, underline, plain-text form)
# "eq" draws like "lt" on the single-line layout but wraps as "<=": both match the published sheets.
OPERATORS: Dict[str, Tuple[str, bool, str]] = {
    "lte": ("<", True, "<="),
    "lt": ("<", False, "<"),
    "eq": ("<", False, "<="),
    "gte": (">", True, ">="),
    "gt": (">", False, ">"),
}

OPERATOR_ALIASES: Dict[str, str] = {
    "≤": "lte",
    "<=": "lte",
    "<": "lt",
    "=": "eq",
    "==": "eq",
    "≥": "gte",
    ">=": "gte",
    ">": "gt",
}


@dataclass(frozen=True)
class Run:
    """One piece of text on a cell line, x relative to the column's left edge."""

    text: str
    x: float
    size: float
    underline: bool = False
    link: Optional[str] = None

    @property
    def is_link(self) -> bool:
        return self.link is not None


@dataclass(frozen=True)
class RenderPlan:
    lines: Tuple[str, ...]
    has_link: bool = False

    @property
    def line_count(self) -> int:
        return max(1, len(self.lines))

    @property
    def fancy(self) -> bool:
        return self.line_count == 1


def normalize_operator(op: Optional[str]) -> str:
    key = str(op or "").strip().lower()
    key = OPERATOR_ALIASES.get(key, key)
    return key if key in OPERATORS else "lte"


def requirements_text(item: Item) -> str:
    reqs: List[str] = []
    if item.sets and item.reps:
        reqs.append(f"{item.sets} sets x {item.reps} reps")
    else:
        if item.sets:
            reqs.append(f"{item.sets} sets")
        if item.reps:
            reqs.append(f"{item.reps} reps")
    if item.duration:
        reqs.append(f"{item.duration} duration")
    if item.distance:
        reqs.append(f"{item.distance} distance")
    return " / ".join(reqs)


def time_limit_parts(item: Item) -> Tuple[str, bool, str]:
    """(glyph, underline, value) for the time-limit clause, empty when unset."""
    if not item.time_limit:
        return "", False, ""
    glyph, underline, _ = OPERATORS[normalize_operator(item.time_limit_operator)]
    return glyph, underline, str(item.time_limit)


def item_text(item: Item, with_link: bool = True) -> str:
    text = item.name if item.show_title else ""
    reqs = requirements_text(item)
    time_part = ""
    if item.time_limit:
        _, _, plain = OPERATORS[normalize_operator(item.time_limit_operator)]
        time_part = f"{plain} {item.time_limit}"
    if reqs or time_part:
        if item.show_title:
            text += " - "
        text += reqs
        if time_part:
            text += (" " if reqs else "") + time_part
    if with_link and item.video_url:
        text += f" {LINK_SUFFIX}"
    return text


def plan_item(
    item: Item,
    column_width: float,
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> RenderPlan:
    """
    Wrap an item for a grid column. The first line gets the full cell width,
    continuation lines are indented. The link token is appended after wrapping
    so "- Link" is never split across two lines.
    """
    size = layout.body_size
    cell_w = column_width - 2 * layout.cell_padding
    cont_w = cell_w - layout.continuation_indent
    has_link = bool(item.video_url)

    first = measurer.wrap(item_text(item, with_link=False), cell_w, size) or [""]
    lines = [first[0]]
    if len(first) > 1:
        lines.extend(measurer.wrap(" ".join(first[1:]), cont_w, size))

    if has_link:
        max_w = cell_w if len(lines) == 1 else cont_w
        with_link = f"{lines[-1]} {LINK_SUFFIX}"
        if measurer.width(with_link, size) <= max_w:
            lines[-1] = with_link
        else:
            lines.append(LINK_SUFFIX)

    return RenderPlan(lines=tuple(lines), has_link=has_link)


def fancy_runs(
    item: Item,
    column_width: float,
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> List[Run]:
    """
    Single-line layout: name at body size, then requirements, an underlined
    comparison glyph for inclusive limits and the link, left to right.
    The name only gives up width down to a floor share of the cell.
    """
    name_size = layout.body_size
    size = layout.detail_size
    left = layout.cell_padding
    cell_w = column_width - 2 * layout.cell_padding
    right = left + cell_w

    reqs = requirements_text(item)
    glyph, underline, limit = time_limit_parts(item)
    runs: List[Run] = []
    cursor = left

    if item.show_title:
        needed = 0.0
        if reqs or limit:
            needed += measurer.width("- ", size)
            if reqs:
                needed += measurer.width(reqs, size)
            if limit:
                if reqs:
                    needed += measurer.width(" ", size)
                needed += measurer.width(f"{glyph} {limit}", size)
        if item.video_url:
            needed += measurer.width(f" {LINK_SUFFIX}", size)
        name_max = max(cell_w - needed - 2, cell_w * layout.name_floor_ratio)
        name = (measurer.wrap(item.name, name_max, name_size) or [""])[0] or item.name
        runs.append(Run(name, cursor, name_size))
        cursor += measurer.width(name, name_size) + 1

    if reqs or limit:
        if right - cursor - 1 > 5:
            if item.show_title:
                runs.append(Run("- ", cursor, size))
                cursor += measurer.width("- ", size)
            if reqs:
                clipped = (measurer.wrap(reqs, right - cursor, size) or [""])[0]
                if clipped:
                    runs.append(Run(clipped, cursor, size))
                    cursor += measurer.width(clipped, size)
            if limit:
                if reqs:
                    cursor += measurer.width(" ", size)
                runs.append(Run(glyph, cursor, size, underline=underline))
                cursor += measurer.width(glyph, size) + measurer.width(" ", size)
                runs.append(Run(limit, cursor, size))
                cursor += measurer.width(limit, size) + 1
            else:
                cursor += 1

    if item.video_url and cursor + 12 < right:
        runs.append(Run("- ", cursor, size))
        cursor += measurer.width("- ", size)
        runs.append(Run(LINK_LABEL, cursor, size, underline=True, link=item.video_url))

    return runs


def wrapped_runs(
    item: Item,
    plan: RenderPlan,
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> List[List[Run]]:
    size = layout.body_size
    out: List[List[Run]] = []
    last = len(plan.lines) - 1
    for index, line in enumerate(plan.lines):
        x = layout.cell_padding + (layout.continuation_indent if index else 0)
        if index != last or not plan.has_link or not line.endswith(LINK_SUFFIX):
            out.append([Run(line, x, size)])
            continue

        before = line[: -len(LINK_SUFFIX)]
        runs: List[Run] = []
        if before:
            runs.append(Run(before, x, size))
            x += measurer.width(before, size)
        runs.append(Run("- ", x, size))
        x += measurer.width("- ", size)
        runs.append(Run(LINK_LABEL, x, size, underline=True, link=item.video_url))
        out.append(runs)
    return out


def item_runs(
    item: Item,
    column_width: float,
    measurer: TextMeasurer,
    layout: LayoutConstants = LAYOUT,
) -> List[List[Run]]:
    """Runs for every physical line of an item cell."""
    plan = plan_item(item, column_width, measurer, layout)
    if plan.fancy:
        return [fancy_runs(item, column_width, measurer, layout)]
    return wrapped_runs(item, plan, measurer, layout)
