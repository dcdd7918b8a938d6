from __future__ import annotations

from dataclasses import replace

from scriptforge.screenplay.prompts import (
    CONTEXT_HEADER,
    DEFAULT_FOCUS,
    SECTION_FOCUS,
    build_section_prompt,
    section_focus,
)
from scriptforge.screenplay.state import SECTION_SPECS, Brief


def test_prompt_contains_brief_and_section_metadata(nova_brief: Brief):
    section = SECTION_SPECS[2]
    prompt = build_section_prompt(nova_brief, section, "", 2)

    for value in ("Nova", "sci-fi", "Mars", "Ava", "dramatic", nova_brief.plot):
        assert value in prompt
    assert "- Section: Midpoint & Complications (Pages 49-72)" in prompt
    assert "This is section 3 of 5 total sections" in prompt
    assert "Write approximately 24 pages" in prompt
    assert f"Focus on: {SECTION_FOCUS[2]}" in prompt
    assert "Scene headings: EXT./INT. LOCATION - TIME" in prompt
    assert "Character names in ALL CAPS" in prompt
    assert "CUT TO:" in prompt


def test_prompt_is_deterministic(nova_brief: Brief):
    first = build_section_prompt(nova_brief, SECTION_SPECS[0], "Earlier text", 0)
    second = build_section_prompt(nova_brief, SECTION_SPECS[0], "Earlier text", 0)
    assert first == second


def test_no_continuity_block_without_previous_content(nova_brief: Brief):
    prompt = build_section_prompt(nova_brief, SECTION_SPECS[1], "", 1)
    assert CONTEXT_HEADER not in prompt


def test_continuity_excerpt_is_bounded(nova_brief: Brief):
    previous = "".join(chr(ord("a") + index % 26) for index in range(2500))
    prompt = build_section_prompt(nova_brief, SECTION_SPECS[1], previous, 1)

    assert CONTEXT_HEADER in prompt
    assert previous[:1000] in prompt
    assert previous[:1001] not in prompt


def test_short_previous_content_is_included_whole(nova_brief: Brief):
    prompt = build_section_prompt(nova_brief, SECTION_SPECS[1], "INT. DOME - NIGHT", 1)
    assert "INT. DOME - NIGHT..." in prompt


def test_focus_lookup_falls_back_outside_table():
    assert section_focus(0) == SECTION_FOCUS[0]
    assert section_focus(4) == SECTION_FOCUS[4]
    assert section_focus(5) == DEFAULT_FOCUS
    assert section_focus(-1) == DEFAULT_FOCUS


def test_inputs_are_not_mutated(nova_brief: Brief):
    snapshot = replace(nova_brief)
    section = SECTION_SPECS[0]
    build_section_prompt(nova_brief, section, "context", 0)
    assert nova_brief == snapshot
    assert section == SECTION_SPECS[0]


def test_multiline_plot_is_rendered_verbatim():
    brief = Brief(title="Tide", plot="Line one.\nLine two.")
    prompt = build_section_prompt(brief, SECTION_SPECS[0], "", 0)
    assert "- Plot: Line one.\nLine two." in prompt
    assert prompt.startswith("You are a professional screenplay writer.")
