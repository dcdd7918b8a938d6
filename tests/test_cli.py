from __future__ import annotations

import json
from pathlib import Path

import pytest

from scriptforge.cli import main


@pytest.fixture
def brief_file(tmp_path: Path) -> Path:
    path = tmp_path / "brief.json"
    path.write_text(
        json.dumps(
            {
                "title": "Nova",
                "genre": "sci-fi",
                "plot": "A stranded engineer races to restore contact with Earth.",
                "main_characters": "Ava",
                "tone": "dramatic",
                "setting": "Mars",
            }
        ),
        encoding="utf-8",
    )
    return path


def test_generate_with_mock_provider_writes_artefacts(
    tmp_path: Path, brief_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_dir = tmp_path / "out"

    exit_code = main(
        ["generate", "--brief", str(brief_file), "--output", str(output_dir), "--provider", "mock"]
    )

    assert exit_code == 0
    assert (output_dir / "Nova.txt").read_text(encoding="utf-8").count("FADE IN:") == 5
    assert (output_dir / "Nova.docx").exists()
    summary = json.loads((output_dir / "run.json").read_text(encoding="utf-8"))
    assert [entry["status"] for entry in summary["sections"]] == ["completed"] * 5
    assert summary["usage"]["total"]["calls"] == 5

    captured = capsys.readouterr()
    assert "1. Opening & Setup (pages 1-24): completed" in captured.out
    assert "[section 5] generating -> completed" in captured.err


def test_generate_can_skip_docx(tmp_path: Path, brief_file: Path) -> None:
    output_dir = tmp_path / "out"

    exit_code = main(
        ["generate", "--brief", str(brief_file), "--output", str(output_dir), "--provider", "mock", "--no-docx"]
    )

    assert exit_code == 0
    assert not (output_dir / "Nova.docx").exists()
    assert "docx" not in json.loads((output_dir / "run.json").read_text(encoding="utf-8"))["artefacts"]


def test_generate_requires_credentials_for_remote_provider(
    tmp_path: Path, brief_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(
        ["generate", "--brief", str(brief_file), "--output", str(tmp_path / "out"), "--provider", "gemini"]
    )

    assert exit_code == 1
    assert "Credential table" in capsys.readouterr().err
    assert not (tmp_path / "out" / "Nova.txt").exists()


def test_generate_reports_missing_brief(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["generate", "--brief", str(tmp_path / "missing.json"), "--provider", "mock"])

    assert exit_code == 1
    assert "Error:" in capsys.readouterr().err


def test_classify_prints_block_kinds(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "section.txt"
    source.write_text("INT. LAB - NIGHT\nAVA\n(softly)\nIt works.", encoding="utf-8")

    assert main(["classify", "--input", str(source)]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in lines] == ["scene_heading", "character_cue", "parenthetical", "dialogue"]
    assert lines[3].endswith("It works.")


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "generate" in capsys.readouterr().out
