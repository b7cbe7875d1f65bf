from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from ..models import CurriculumExport, RankCurriculum


logger = logging.getLogger(__name__)

# keys used by the curriculum editor's JSON export
KEY_ALIASES: Dict[str, str] = {
    "styleName": "style_name",
    "rankName": "rank_name",
    "beltColor": "belt_color",
    "fabricColor": "belt_color",
    "sortOrder": "sort_order",
    "type": "kind",
    "showTitleInPdf": "show_title",
    "timeLimit": "time_limit",
    "timeLimitOperator": "time_limit_operator",
    "videoUrl": "video_url",
    "zipCode": "zip_code",
}

TEXT_FIELDS = {"duration", "distance", "time_limit"}


def _normalize(value: Any) -> Any:
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    if not isinstance(value, dict):
        return value
    out: Dict[str, Any] = {}
    for key, raw in value.items():
        name = KEY_ALIASES.get(key, key)
        item = _normalize(raw)
        if name in TEXT_FIELDS and isinstance(item, (int, float)) and not isinstance(item, bool):
            item = str(item)
        if name == "show_title" and item is None:
            continue
        out[name] = item
    return out


def load_export(path: Path) -> CurriculumExport:
    if not path.exists():
        raise FileNotFoundError(f"Curriculum export not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Curriculum export is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError("Curriculum export must be a JSON object")
    try:
        return CurriculumExport.model_validate(_normalize(raw))
    except ValidationError as exc:
        raise ValueError(f"Curriculum export is invalid: {exc}") from exc


def publishable_ranks(export: CurriculumExport) -> List[RankCurriculum]:
    """Ranks with at least one non-empty category, categories in sort order."""
    ranks: List[RankCurriculum] = []
    for rank in export.ranks:
        categories = sorted((c for c in rank.categories if c.items), key=lambda c: c.sort_order)
        if not categories:
            logger.info("Skipping %s: no curriculum items", rank.rank_name)
            continue
        ranks.append(rank.model_copy(update={"categories": categories}))
    return ranks
