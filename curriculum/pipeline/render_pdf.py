from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ..config import LAYOUT, LayoutConstants
from ..models import Category, GymInfo, format_phone
from .allocate import LayoutCursor, PageLayout, SectionPlacement, allocate
from .grid import SectionRow, group_categories, measure_rows
from .items import Run, item_runs
from .knowledge import BarPlacement, KnowledgePlacement, measure_blocks, place_blocks
from .measure import ReportLabMeasurer, TextMeasurer, font_name
from .theme import RGB, Theme, resolve_theme


logger = logging.getLogger(__name__)

BLACK: RGB = (0, 0, 0)
LINK_BLUE: RGB = (0, 0, 200)
FOOTER_GREY: RGB = (80, 80, 80)


class PdfSurface:
    """
    Millimetre, top-left origin drawing calls over a reportlab canvas.
    Pages are opened lazily: asking for a later page closes the current one
    with its footer first.
    """

    def __init__(self, canv: canvas.Canvas, layout: LayoutConstants, footer) -> None:
        self.canv = canv
        self.layout = layout
        self.page = 0
        self._footer = footer

    def _x(self, x: float) -> float:
        return x * mm

    def _y(self, y: float) -> float:
        return (self.layout.page_height - y) * mm

    def goto_page(self, page: int) -> None:
        while self.page < page:
            self._footer(self)
            self.canv.showPage()
            self.page += 1

    def finish(self) -> None:
        self._footer(self)
        self.canv.showPage()

    def fill_rect(self, x: float, y: float, w: float, h: float, fill: RGB) -> None:
        self.canv.setFillColorRGB(*(c / 255 for c in fill))
        self.canv.rect(self._x(x), self._y(y + h), w * mm, h * mm, stroke=0, fill=1)

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.canv.setStrokeColorRGB(0, 0, 0)
        self.canv.setLineWidth(self.layout.line_width * mm)
        self.canv.rect(self._x(x), self._y(y + h), w * mm, h * mm, stroke=1, fill=0)

    def cell(self, x: float, y: float, w: float, h: float, fill: RGB) -> None:
        self.fill_rect(x, y, w, h, fill)
        self.stroke_rect(x, y, w, h)

    def text(
        self,
        x: float,
        y: float,
        value: str,
        size: float,
        bold: bool = False,
        color: RGB = BLACK,
        align: str = "left",
    ) -> None:
        self.canv.setFont(font_name(bold), size)
        self.canv.setFillColorRGB(*(c / 255 for c in color))
        if align == "center":
            self.canv.drawCentredString(self._x(x), self._y(y), value)
        elif align == "right":
            self.canv.drawRightString(self._x(x), self._y(y), value)
        else:
            self.canv.drawString(self._x(x), self._y(y), value)

    def line(self, x1: float, y1: float, x2: float, y2: float, color: RGB, width: float) -> None:
        self.canv.setStrokeColorRGB(*(c / 255 for c in color))
        self.canv.setLineWidth(width * mm)
        self.canv.line(self._x(x1), self._y(y1), self._x(x2), self._y(y2))

    def link(self, x: float, y: float, w: float, h: float, url: str) -> None:
        rect = (self._x(x), self._y(y + h), self._x(x + w), self._y(y))
        self.canv.linkURL(url, rect, relative=0, thickness=0)

    def image(self, image: Any, x: float, y: float, w: float, h: float) -> None:
        self.canv.drawImage(image, self._x(x), self._y(y + h), width=w * mm, height=h * mm, mask="auto")


@dataclass(frozen=True)
class HeaderBlock:
    title: str
    info_lines: Tuple[Tuple[str, bool], ...]
    info_left: float
    height: float


def format_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _measure_header(
    style_name: str,
    rank_name: str,
    gym: GymInfo,
    measurer: TextMeasurer,
    layout: LayoutConstants,
) -> HeaderBlock:
    info: List[Tuple[str, bool]] = [(f"{style_name} / {gym.name}", True)]
    if gym.address:
        info.append((gym.address, False))
    if gym.city_line:
        info.append((gym.city_line, False))
    if gym.phone:
        info.append((format_phone(gym.phone), False))

    widest = max(measurer.width(text, layout.info_size, bold) for text, bold in info)
    block_h = len(info) * layout.info_line_height
    return HeaderBlock(
        title=f"{rank_name} Techniques",
        info_lines=tuple(info),
        info_left=layout.page_width - layout.margin - widest,
        height=max(layout.logo_height + 2, block_h + 2),
    )


def _draw_header(surface: PdfSurface, header: HeaderBlock, logo: Optional[Any], cursor: LayoutCursor) -> LayoutCursor:
    layout = surface.layout
    y = cursor.y

    if logo is not None:
        img_w, img_h = logo.getSize()
        logo_w = layout.logo_height * (img_w / img_h) if img_h else layout.logo_height
        surface.image(logo, layout.margin, y + (header.height - layout.logo_height) / 2, logo_w, layout.logo_height)

    surface.text(layout.page_width / 2, y + header.height / 2 + 1, header.title, layout.title_size, bold=True, align="center")

    line_y = y + (header.height - len(header.info_lines) * layout.info_line_height) / 2 + 2.5
    for text, bold in header.info_lines:
        surface.text(header.info_left, line_y, text, layout.info_size, bold=bold)
        line_y += layout.info_line_height

    return cursor.advance(header.height + 0.5)


def _draw_footer(surface: PdfSurface, gym: GymInfo, today: date) -> None:
    layout = surface.layout
    y = layout.footer_y
    size = layout.footer_size
    if gym.website:
        surface.text(layout.margin, y, gym.website, size, color=FOOTER_GREY)
    if gym.email:
        surface.text(layout.page_width / 2, y, gym.email, size, color=FOOTER_GREY, align="center")
    surface.text(layout.page_width - layout.margin, y, format_date(today), size, color=FOOTER_GREY, align="right")


def _draw_bar(surface: PdfSurface, x: float, y: float, w: float, h: float, label: str, theme: Theme, baseline: float) -> None:
    surface.cell(x, y, w, h, theme.bar)
    surface.text(x + w / 2, y + baseline, label, surface.layout.bar_size, bold=True, color=theme.bar_text, align="center")


def _draw_link(
    surface: PdfSurface,
    measurer: TextMeasurer,
    x: float,
    baseline: float,
    size: float,
    url: str,
    gap: float,
    width: float,
) -> None:
    surface.text(x, baseline, "Link", size, color=LINK_BLUE)
    link_w = measurer.width("Link", size)
    surface.line(x, baseline + gap, x + link_w, baseline + gap, LINK_BLUE, width)
    surface.link(x, baseline - 3, link_w + 1, 4, url)


def _draw_knowledge(
    surface: PdfSurface,
    placements: Sequence[KnowledgePlacement],
    theme: Theme,
    measurer: TextMeasurer,
) -> None:
    layout = surface.layout
    x = layout.margin
    w = layout.content_width
    size = layout.detail_size
    step = layout.knowledge_line_height

    for placement in placements:
        surface.goto_page(placement.page)
        if isinstance(placement, BarPlacement):
            _draw_bar(surface, x, placement.y, w, layout.knowledge_bar_height, placement.name, theme, layout.bar_baseline_offset)
            continue

        # each slice of a split item gets its own bordered cell
        surface.cell(x, placement.y, w, placement.height(layout), theme.row_fill(placement.index))
        y = placement.y + layout.knowledge_top_padding
        for line in placement.lines():
            if line.link:
                _draw_link(surface, measurer, x + layout.knowledge_inset, y, size, line.link, 0.5, 0.15)
            elif line.text:
                surface.text(x + layout.knowledge_inset, y, line.text, size, bold=line.bold)
            y += step


def _draw_runs(surface: PdfSurface, runs: Sequence[Run], col_x: float, baseline: float, measurer: TextMeasurer) -> None:
    for run in runs:
        x = col_x + run.x
        if run.is_link:
            _draw_link(surface, measurer, x, baseline, run.size, run.link or "", 0.4, 0.1)
            continue
        surface.text(x, baseline, run.text, run.size)
        if run.underline:
            surface.line(x, baseline + 0.5, x + measurer.width(run.text, run.size), baseline + 0.5, BLACK, 0.15)


def _draw_section(
    surface: PdfSurface,
    row: SectionRow,
    placement: SectionPlacement,
    theme: Theme,
    measurer: TextMeasurer,
) -> None:
    layout = surface.layout
    row_h = layout.row_height
    col_w = row.column_width
    surface.goto_page(placement.page)

    for ci, category in enumerate(row.categories):
        col_x = layout.margin + ci * col_w
        _draw_bar(surface, col_x, placement.y, col_w, row_h, category.name, theme, layout.bar_baseline_offset)

    top = placement.y + row_h
    first = placement.first_line
    end = first + placement.line_count

    for ci, category in enumerate(row.categories):
        col_x = layout.margin + ci * col_w
        line_index = 0
        for item, plan in zip(category.items, row.plans[ci]):
            count = plan.line_count
            lo, hi = max(line_index, first), min(line_index + count, end)
            if lo < hi:
                for li in range(lo, hi):
                    surface.fill_rect(col_x, top + (li - first) * row_h, col_w, row_h, theme.row_fill(li))
                # one border around every line of the same item
                surface.stroke_rect(col_x, top + (lo - first) * row_h, col_w, (hi - lo) * row_h)
                lines = item_runs(item, col_w, measurer, layout)
                for li in range(lo, hi):
                    baseline = top + (li - first) * row_h + layout.baseline_offset
                    _draw_runs(surface, lines[li - line_index], col_x, baseline, measurer)
            line_index += count

        for li in range(max(line_index, first), end):
            surface.cell(col_x, top + (li - first) * row_h, col_w, row_h, theme.row_fill(li))


def _draw_notes(surface: PdfSurface, page_layout: PageLayout, theme: Theme) -> None:
    layout = surface.layout
    notes = page_layout.notes
    row_h = layout.row_height
    surface.goto_page(notes.page)
    _draw_bar(surface, layout.margin, notes.y, layout.content_width, row_h, "Notes", theme, layout.baseline_offset)
    y = notes.y + row_h
    for i in range(notes.row_count):
        surface.cell(layout.margin, y, layout.content_width, row_h, theme.row_fill(i))
        y += row_h


def generate(
    style_name: str,
    rank_name: str,
    categories: Sequence[Category],
    theme_color: str,
    gym: GymInfo,
    logo: Optional[Any] = None,
    today: Optional[date] = None,
) -> bytes:
    """
    Lay out one rank's curriculum sheet and return the finished PDF bytes.

    Everything is measured first (header, Q&A blocks, grid rows), the
    vertical space is then split and paginated, and only after that is
    anything drawn. `logo` is an already decoded image (reportlab
    ImageReader or anything with getSize()).
    """
    layout = LAYOUT
    measurer = ReportLabMeasurer()
    theme = resolve_theme(theme_color)
    today = today or date.today()
    ordered = sorted(categories, key=lambda c: c.sort_order)

    # measure + allocate
    header = _measure_header(style_name, rank_name, gym, measurer, layout)
    start = LayoutCursor(page=0, y=layout.margin)
    after_header = start.advance(header.height + 0.5)
    knowledge, cursor = place_blocks(measure_blocks(ordered, measurer, layout), after_header, layout)
    rows = measure_rows(group_categories(ordered, layout), measurer, layout)
    page_layout = allocate(rows, cursor, layout)
    logger.debug(
        "Layout for %s: %d grid rows, %d notes rows, %d pages",
        rank_name,
        len(rows),
        page_layout.notes.row_count,
        page_layout.page_count,
    )

    # render
    buffer = io.BytesIO()
    canv = canvas.Canvas(
        buffer,
        pagesize=(layout.page_width * mm, layout.page_height * mm),
        invariant=1,
    )
    canv.setTitle(f"{style_name} - {rank_name} Curriculum")
    surface = PdfSurface(canv, layout, footer=lambda s: _draw_footer(s, gym, today))

    _draw_header(surface, header, logo, start)
    _draw_knowledge(surface, knowledge, theme, measurer)
    for placement in page_layout.sections:
        _draw_section(surface, rows[placement.row_index], placement, theme, measurer)
    _draw_notes(surface, page_layout, theme)

    surface.finish()
    canv.save()
    return buffer.getvalue()


def render_pdf(
    style_name: str,
    rank_name: str,
    categories: Sequence[Category],
    theme_color: str,
    gym: GymInfo,
    output_path: Path,
    logo: Optional[Any] = None,
) -> Path:
    output_path.write_bytes(generate(style_name, rank_name, categories, theme_color, gym, logo=logo))
    return output_path
