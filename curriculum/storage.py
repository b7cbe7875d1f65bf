from __future__ import annotations

from pathlib import Path
from typing import Iterable

from slugify import slugify

from . import config
from .models import CurriculumDocument, get_session


ARTIFACT_SUFFIXES = {
    "pdf": ".pdf",
    "preview": ".png",
    "error": ".error.log",
}


def document_name(style_name: str, rank_name: str) -> str:
    return f"{style_name} - {rank_name} Curriculum"


def style_dir(style_name: str, base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    path = root / (slugify(style_name) or "style")
    path.mkdir(parents=True, exist_ok=True)
    return path


def artifact_path(
    style_name: str,
    rank_name: str,
    artifact_type: str,
    base_dir: Path | None = None,
) -> Path:
    stem = slugify(document_name(style_name, rank_name))
    if not stem or ".." in stem or "/" in stem or "\\" in stem:
        raise ValueError(f"Invalid file name for rank: {rank_name!r}")
    return style_dir(style_name, base_dir=base_dir) / f"{stem}{ARTIFACT_SUFFIXES[artifact_type]}"


def record_documents(documents: Iterable[CurriculumDocument]) -> None:
    with get_session() as session:
        session.add_all(list(documents))
        session.commit()
