from __future__ import annotations

import logging
from pathlib import Path

import fitz  # PyMuPDF


logger = logging.getLogger(__name__)

# landscape sheets: the long edge sets the scale
PREVIEW_WIDTH_PX = 2000


def render_preview(pdf_path: Path, out_path: Path, width_px: int = PREVIEW_WIDTH_PX, page_index: int = 0) -> Path:
    """One page of a curriculum sheet as PNG, for the rank documents list."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with fitz.open(pdf_path) as doc:
        page = doc.load_page(page_index)
        zoom = width_px / float(page.rect.width)
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        pix.save(str(out_path))
    logger.debug("Preview of %s page %d -> %s", pdf_path.name, page_index + 1, out_path)
    return out_path


def page_count(pdf_path: Path) -> int:
    with fitz.open(pdf_path) as doc:
        return doc.page_count
