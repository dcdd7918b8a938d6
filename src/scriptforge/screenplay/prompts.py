"""Deterministic prompt rendering for screenplay sections."""

from __future__ import annotations

from .state import Brief, SectionSpec

__all__ = [
    "CONTEXT_EXCERPT_CHARS",
    "CONTEXT_HEADER",
    "SECTION_FOCUS",
    "DEFAULT_FOCUS",
    "section_focus",
    "continuity_excerpt",
    "build_section_prompt",
]

CONTEXT_EXCERPT_CHARS = 1000
TOTAL_SECTIONS = 5
CONTEXT_HEADER = "PREVIOUS SECTION CONTEXT:"

SECTION_FOCUS: tuple[str, ...] = (
    "Character introductions, world-building, and inciting incident",
    "Plot development, character relationships, and rising tension",
    "Major plot twist, character development, and escalating conflicts",
    "Climax, major confrontations, and turning points",
    "Resolution, character arcs completion, and satisfying conclusion",
)
DEFAULT_FOCUS = "Story development and character progression"


def section_focus(section_index: int) -> str:
    if 0 <= section_index < len(SECTION_FOCUS):
        return SECTION_FOCUS[section_index]
    return DEFAULT_FOCUS


def continuity_excerpt(previous_content: str, limit: int = CONTEXT_EXCERPT_CHARS) -> str:
    return previous_content[:limit]


def build_section_prompt(
    brief: Brief,
    section: SectionSpec,
    previous_content: str,
    section_index: int,
) -> str:
    """Render the instruction sent to the generation service for one section.

    Pure function of its inputs. When ``previous_content`` is non-empty its
    first ``CONTEXT_EXCERPT_CHARS`` characters are embedded as continuity
    context; otherwise no context block is emitted.
    """

    page_range = section.page_range
    lines = [
        f"You are a professional screenplay writer. Write a {page_range.label} page section of a movie script.",
        "",
        "MOVIE DETAILS:",
        f"- Title: {brief.title}",
        f"- Genre: {brief.genre}",
        f"- Setting: {brief.setting}",
        f"- Main Characters: {brief.main_characters}",
        f"- Tone: {brief.tone}",
        f"- Plot: {brief.plot}",
        "",
        "SECTION REQUIREMENTS:",
        f"- Section: {section.title} (Pages {page_range.label})",
        f"- This is section {section_index + 1} of {TOTAL_SECTIONS} total sections",
        f"- Write approximately {page_range.page_count} pages of screenplay content",
        "- Use proper screenplay formatting (FADE IN, character names in caps, scene headings, etc.)",
        "- Maintain continuity with previous sections",
        f"- Focus on: {section_focus(section_index)}",
        "",
    ]
    if previous_content:
        lines += [CONTEXT_HEADER, f"{continuity_excerpt(previous_content)}...", ""]
    lines += [
        "FORMATTING GUIDELINES:",
        "- Use standard screenplay format",
        "- Scene headings: EXT./INT. LOCATION - TIME",
        "- Character names in ALL CAPS when speaking",
        "- Action lines in present tense",
        "- Proper spacing and indentation",
        "- Include scene transitions (FADE IN, FADE OUT, CUT TO:)",
        "",
        "Write the complete section now:",
    ]
    return "\n".join(lines)
