from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from reportlab.lib.utils import ImageReader

from .. import config
from ..models import CurriculumDocument, CurriculumExport, GymInfo, init_db
from ..storage import artifact_path, document_name, record_documents
from .ingest import publishable_ranks
from .render_pdf import render_pdf
from .render_preview import page_count, render_preview


logger = logging.getLogger(__name__)


def load_logo(gym: GymInfo, base_dir: Path | None = None) -> Optional[Any]:
    """Decode the gym logo once; a logo that cannot be read is left out."""
    if not gym.logo:
        return None
    path = Path(gym.logo)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    try:
        logo = ImageReader(str(path))
        logo.getSize()
        return logo
    except Exception:
        logger.warning("Could not load logo %s, publishing without it", path, exc_info=True)
        return None


def _write_error(path: Path, message: str) -> None:
    path.write_text(message, encoding="utf-8")


def publish_rank(
    export: CurriculumExport,
    rank_index: int,
    logo: Optional[Any],
    preview: bool = True,
) -> CurriculumDocument:
    rank = export.ranks[rank_index]
    pdf_path = render_pdf(
        export.style_name,
        rank.rank_name,
        rank.categories,
        rank.belt_color,
        export.gym,
        output_path=artifact_path(export.style_name, rank.rank_name, "pdf"),
        logo=logo,
    )
    if preview:
        render_preview(pdf_path, artifact_path(export.style_name, rank.rank_name, "preview"))
    return CurriculumDocument(
        style_name=export.style_name,
        rank_name=rank.rank_name,
        path=str(pdf_path.relative_to(config.OUT_DIR)),
        page_count=page_count(pdf_path),
    )


def publish_curriculum(
    export: CurriculumExport,
    preview: bool = True,
    asset_dir: Path | None = None,
) -> Dict[str, List[str]]:
    """
    One curriculum PDF per rank that has items. A rank that fails is logged
    and reported; the remaining ranks are still published.
    """
    init_db()
    results: Dict[str, List[str]] = {"PUBLISHED": [], "FAILED": []}
    ranks = publishable_ranks(export)
    if not ranks:
        return results

    ready = export.model_copy(update={"ranks": ranks})
    logo = load_logo(export.gym, base_dir=asset_dir)
    documents: List[CurriculumDocument] = []

    for index, rank in enumerate(ranks):
        name = document_name(export.style_name, rank.rank_name)
        try:
            documents.append(publish_rank(ready, index, logo, preview=preview))
        except Exception as exc:
            logger.exception("Publishing failed for %s", name)
            _write_error(artifact_path(export.style_name, rank.rank_name, "error"), str(exc))
            results["FAILED"].append(name)
            continue
        results["PUBLISHED"].append(name)

    record_documents(documents)
    return results
