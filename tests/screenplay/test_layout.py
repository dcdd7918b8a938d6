from __future__ import annotations

import pytest

from scriptforge.screenplay.layout import (
    BlockKind,
    classify_line,
    classify_lines,
    classify_script,
)


def _kinds(lines: list[str]) -> list[BlockKind]:
    return [block.kind for block in classify_lines(lines)]


def test_basic_screenplay_structure():
    lines = ["INT. ROOM - DAY", "JOHN", "(quietly)", "Hello there.", ""]
    assert _kinds(lines) == [
        BlockKind.SCENE_HEADING,
        BlockKind.CHARACTER_CUE,
        BlockKind.PARENTHETICAL,
        BlockKind.DIALOGUE,
        BlockKind.BLANK,
    ]


@pytest.mark.parametrize(
    "line",
    ["EXT. DESERT - NIGHT", "INT. DOME - DAY", "FADE IN:", "FADE OUT.", "CUT TO:"],
)
def test_scene_heading_prefixes(line: str):
    block = classify_line(line, has_prior_block=True)
    assert block.kind is BlockKind.SCENE_HEADING
    assert block.style.bold and block.style.all_caps


def test_scene_heading_match_is_case_sensitive():
    assert classify_line("int. kitchen - day", has_prior_block=False).kind is BlockKind.ACTION


def test_character_cue_length_boundary():
    assert classify_line("A" * 49, has_prior_block=True).kind is BlockKind.CHARACTER_CUE
    assert classify_line("A" * 50, has_prior_block=True).kind is BlockKind.DIALOGUE
    assert classify_line("A" * 50, has_prior_block=False).kind is BlockKind.ACTION


@pytest.mark.parametrize("line", ["DR. SMITH", "AVA 2", "O'BRIEN", "AVA (V.O.)", "NOVA-7"])
def test_character_cue_rejects_punctuation_and_digits(line: str):
    assert classify_line(line, has_prior_block=True).kind is not BlockKind.CHARACTER_CUE


def test_parenthetical_and_dialogue_styles():
    cue = classify_line("AVA", has_prior_block=True)
    paren = classify_line("(whispering)", has_prior_block=True)
    dialogue = classify_line("We are not alone.", has_prior_block=True)

    assert paren.kind is BlockKind.PARENTHETICAL
    assert paren.style.italic
    assert paren.style.indent_left == cue.style.indent_left - 1
    assert dialogue.style.indent_left == dialogue.style.indent_right > 0
    assert cue.style.bold


def test_first_unmatched_line_is_action_then_dialogue():
    kinds = _kinds(["The dust storm rolls in.", "It swallows the rover."])
    assert kinds == [BlockKind.ACTION, BlockKind.DIALOGUE]


def test_leading_blank_counts_as_prior_block():
    assert _kinds(["", "The dust storm rolls in."]) == [BlockKind.BLANK, BlockKind.DIALOGUE]


def test_lines_are_trimmed_and_order_preserved():
    blocks = classify_script("  FADE IN:\r\n\n    AVA   \nHello.")
    assert [block.text for block in blocks] == ["FADE IN:", "", "AVA", "Hello."]
    assert [block.kind for block in blocks] == [
        BlockKind.SCENE_HEADING,
        BlockKind.BLANK,
        BlockKind.CHARACTER_CUE,
        BlockKind.DIALOGUE,
    ]


def test_empty_content_yields_single_blank_block():
    blocks = classify_script("")
    assert len(blocks) == 1
    assert blocks[0].kind is BlockKind.BLANK
