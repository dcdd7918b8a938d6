from __future__ import annotations

import json
from pathlib import Path

import pytest

from scriptforge.io import load_brief
from scriptforge.screenplay import Brief


def test_load_brief_json_accepts_camel_case(tmp_path: Path) -> None:
    path = tmp_path / "brief.json"
    path.write_text(
        json.dumps(
            {
                "title": "Nova",
                "genre": "sci-fi",
                "plot": "A stranded engineer.",
                "mainCharacters": "Ava",
                "tone": "dramatic",
                "setting": "Mars",
                "budget": "ignored",
            }
        ),
        encoding="utf-8",
    )

    brief = load_brief(path)

    assert brief == Brief(
        title="Nova",
        genre="sci-fi",
        plot="A stranded engineer.",
        main_characters="Ava",
        tone="dramatic",
        setting="Mars",
    )


def test_load_brief_toml_with_nested_table(tmp_path: Path) -> None:
    path = tmp_path / "brief.toml"
    path.write_text(
        '[brief]\ntitle = "Tide"\ngenre = "drama"\nmain_characters = "Rosa, Ines"\n',
        encoding="utf-8",
    )

    brief = load_brief(path)

    assert brief.title == "Tide"
    assert brief.main_characters == "Rosa, Ines"
    assert brief.setting == ""


def test_load_brief_allows_empty_fields(tmp_path: Path) -> None:
    path = tmp_path / "brief.json"
    path.write_text("{}", encoding="utf-8")
    assert load_brief(path) == Brief()


def test_load_brief_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_brief(tmp_path / "absent.json")


def test_load_brief_unsupported_suffix(tmp_path: Path) -> None:
    path = tmp_path / "brief.yaml"
    path.write_text("title: Nova", encoding="utf-8")
    with pytest.raises(ValueError):
        load_brief(path)


def test_load_brief_rejects_non_object_payload(tmp_path: Path) -> None:
    path = tmp_path / "brief.json"
    path.write_text('["Nova"]', encoding="utf-8")
    with pytest.raises(ValueError):
        load_brief(path)


def test_load_brief_rejects_non_string_values(tmp_path: Path) -> None:
    path = tmp_path / "brief.json"
    path.write_text('{"title": 42}', encoding="utf-8")
    with pytest.raises(ValueError, match="title"):
        load_brief(path)
