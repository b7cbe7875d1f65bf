from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from reportlab.lib.pagesizes import LETTER, landscape
from reportlab.lib.units import mm


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "curriculum.db"


@dataclass(frozen=True)
class LayoutConstants:
    # All lengths in millimetres, y grows downward from the top edge.
    page_width: float = landscape(LETTER)[0] / mm
    page_height: float = landscape(LETTER)[1] / mm
    margin: float = 8.0
    footer_offset: float = 12.0
    disclaimer_gap: float = 6.0
    row_height: float = 5.5
    line_width: float = 0.2

    title_size: float = 14.0
    bar_size: float = 10.0
    body_size: float = 10.0
    detail_size: float = 9.0
    info_size: float = 8.0
    footer_size: float = 9.0

    # grid cells
    cell_padding: float = 2.0
    continuation_indent: float = 8.0
    baseline_offset: float = 3.8
    bar_baseline_offset: float = 4.2
    name_floor_ratio: float = 0.3

    # header band
    logo_height: float = 16.0
    info_line_height: float = 3.0

    # Q&A blocks
    knowledge_bar_height: float = 6.0
    knowledge_line_height: float = 3.5
    knowledge_top_padding: float = 4.0
    knowledge_bottom_padding: float = 1.0
    knowledge_inset: float = 3.0

    max_table_categories: int = 9
    max_grid_columns: int = 3
    notes_base_rows: int = 4

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def footer_y(self) -> float:
        return self.page_height - self.footer_offset

    @property
    def bottom_limit(self) -> float:
        """Lowest y any section may reach before the footer band."""
        return self.footer_y - self.disclaimer_gap

    @property
    def page_top_slack(self) -> float:
        # content starting within this distance of the margin counts as top of page
        return self.margin + 5.0


LAYOUT = LayoutConstants()


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "curriculum.db"
