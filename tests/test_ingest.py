from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from curriculum.models import CurriculumExport
from curriculum.pipeline.ingest import load_export, publishable_ranks


EXPORT = {
    "styleName": "Karate",
    "gym": {"name": "Riverside Dojo", "zipCode": "62701", "phone": "2175550123"},
    "ranks": [
        {
            "rankName": "Yellow Belt",
            "beltColor": "#ffd700",
            "categories": [
                {
                    "id": "kicks",
                    "name": "Kicks",
                    "sortOrder": 2,
                    "items": [{"name": "Front kick", "type": "technique", "timeLimit": 30, "timeLimitOperator": "lte"}],
                },
                {
                    "id": "terms",
                    "name": "Terms",
                    "sortOrder": 1,
                    "items": [{"name": "Dojo?", "type": "knowledge", "showTitleInPdf": None, "videoUrl": "https://v"}],
                },
                {"id": "empty", "name": "Empty", "sortOrder": 0, "items": []},
            ],
        },
        {"rankName": "Orange Belt", "categories": [{"id": "x", "name": "Nothing", "items": []}]},
    ],
}


def _write(data: object) -> Path:
    handle = tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8")
    with handle:
        json.dump(data, handle)
    return Path(handle.name)


def test_camel_case_export_is_normalized() -> None:
    export = load_export(_write(EXPORT))
    assert export.style_name == "Karate"
    assert export.gym.zip_code == "62701"
    yellow = export.ranks[0]
    assert yellow.belt_color == "#ffd700"
    kick = yellow.categories[0].items[0]
    assert kick.time_limit == "30"
    assert kick.time_limit_operator == "lte"
    question = yellow.categories[1].items[0]
    assert question.is_knowledge
    assert question.show_title is True
    assert question.video_url == "https://v"
    assert export.ranks[1].belt_color == "#ffffff"


def test_publishable_ranks_sorts_and_skips_empty() -> None:
    export = load_export(_write(EXPORT))
    ranks = publishable_ranks(export)
    assert [r.rank_name for r in ranks] == ["Yellow Belt"]
    assert [c.name for c in ranks[0].categories] == ["Terms", "Kicks"]


def test_fabric_color_alias() -> None:
    export = CurriculumExport.model_validate({"style_name": "Judo", "ranks": []})
    assert export.ranks == []
    data = {"styleName": "Judo", "ranks": [{"rankName": "Brown", "fabricColor": "#8b4513"}]}
    assert load_export(_write(data)).ranks[0].belt_color == "#8b4513"


def test_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        load_export(Path("/nonexistent/curriculum.json"))


def test_bad_json_raises_value_error() -> None:
    handle = tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8")
    with handle:
        handle.write("{not json")
    with pytest.raises(ValueError):
        load_export(Path(handle.name))


def test_invalid_shape_raises_value_error() -> None:
    with pytest.raises(ValueError):
        load_export(_write(["not", "an", "object"]))
    with pytest.raises(ValueError):
        load_export(_write({"ranks": []}))
