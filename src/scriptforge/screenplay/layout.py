"""Line-by-line classification of generated screenplay text into layout blocks.

Classification is a line-local heuristic rather than a grammar. Each trimmed
line is tested against the rules below and the first match wins:

1. empty line                                  -> ``blank``
2. starts with ``EXT.``, ``INT.``, ``FADE IN:``, ``FADE OUT.`` or ``CUT TO:``
                                               -> ``scene_heading``
3. upper-case letters and whitespace only, shorter than 50 characters
                                               -> ``character_cue``
4. wrapped in parentheses                      -> ``parenthetical``
5. any other line once a block exists          -> ``dialogue``
6. otherwise                                   -> ``action``

Rule 5 deliberately does not check that a character cue precedes the line;
every unmatched line after the first block is laid out as dialogue.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

__all__ = [
    "BlockKind",
    "StyleHints",
    "LayoutBlock",
    "CHARACTER_CUE_MAX_LENGTH",
    "classify_line",
    "classify_lines",
    "classify_script",
]

SCENE_HEADING_PATTERN = re.compile(r"^(EXT\.|INT\.|FADE IN:|FADE OUT\.|CUT TO:)")
CHARACTER_CUE_PATTERN = re.compile(r"^[A-Z\s]+$")
CHARACTER_CUE_MAX_LENGTH = 50

# Indent levels are multiples of a quarter inch.
DIALOGUE_INDENT = 4
PARENTHETICAL_INDENT = 5
CHARACTER_CUE_INDENT = 6


class BlockKind(str, Enum):
    SCENE_HEADING = "scene_heading"
    CHARACTER_CUE = "character_cue"
    PARENTHETICAL = "parenthetical"
    DIALOGUE = "dialogue"
    ACTION = "action"
    BLANK = "blank"


@dataclass(frozen=True, slots=True)
class StyleHints:
    """Semantic formatting hints; renderers decide what they mean physically."""

    bold: bool = False
    italic: bool = False
    all_caps: bool = False
    indent_left: int = 0
    indent_right: int = 0


@dataclass(frozen=True, slots=True)
class LayoutBlock:
    kind: BlockKind
    text: str
    style: StyleHints = field(default_factory=StyleHints)


_STYLES: dict[BlockKind, StyleHints] = {
    BlockKind.BLANK: StyleHints(),
    BlockKind.SCENE_HEADING: StyleHints(bold=True, all_caps=True),
    BlockKind.CHARACTER_CUE: StyleHints(bold=True, indent_left=CHARACTER_CUE_INDENT),
    BlockKind.PARENTHETICAL: StyleHints(italic=True, indent_left=PARENTHETICAL_INDENT),
    BlockKind.DIALOGUE: StyleHints(indent_left=DIALOGUE_INDENT, indent_right=DIALOGUE_INDENT),
    BlockKind.ACTION: StyleHints(),
}


def _is_character_cue(line: str) -> bool:
    return (
        line == line.upper()
        and len(line) < CHARACTER_CUE_MAX_LENGTH
        and "." not in line
        and not line.startswith("(")
        and CHARACTER_CUE_PATTERN.match(line) is not None
    )


def classify_line(line: str, *, has_prior_block: bool) -> LayoutBlock:
    """Classify one source line given whether the section already has blocks."""

    trimmed = line.strip()
    if not trimmed:
        kind = BlockKind.BLANK
    elif SCENE_HEADING_PATTERN.match(trimmed):
        kind = BlockKind.SCENE_HEADING
    elif _is_character_cue(trimmed):
        kind = BlockKind.CHARACTER_CUE
    elif trimmed.startswith("(") and trimmed.endswith(")"):
        kind = BlockKind.PARENTHETICAL
    elif has_prior_block:
        kind = BlockKind.DIALOGUE
    else:
        kind = BlockKind.ACTION
    return LayoutBlock(kind=kind, text=trimmed, style=_STYLES[kind])


def classify_lines(lines: Iterable[str]) -> list[LayoutBlock]:
    blocks: list[LayoutBlock] = []
    for line in lines:
        blocks.append(classify_line(line, has_prior_block=bool(blocks)))
    return blocks


def classify_script(content: str) -> list[LayoutBlock]:
    """Produce one block per source line of a section, preserving order."""

    return classify_lines(content.split("\n"))
