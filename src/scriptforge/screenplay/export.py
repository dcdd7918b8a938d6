"""Plain-text and Word exports of a finished screenplay run."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from ..llm.usage import UsageTracker
from .layout import BlockKind, LayoutBlock, classify_script
from .state import Brief, SectionState

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_SCRIPT_NAME",
    "DocumentAssemblyError",
    "DocxScriptRenderer",
    "ScriptExporter",
    "export_plain_text",
    "script_filename",
]

DEFAULT_SCRIPT_NAME = "Movie_Script"
SECTION_SEPARATOR = "\n\n"
INDENT_STEP_INCHES = 0.25
PAGE_MARGIN = Inches(1)
UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class DocumentAssemblyError(RuntimeError):
    """Raised when the Word document cannot be built or written."""


def export_plain_text(sections: Sequence[SectionState]) -> str:
    """Join every section's raw content, whatever its status."""

    return SECTION_SEPARATOR.join(section.content for section in sections)


def script_filename(brief: Brief, suffix: str) -> str:
    stem = UNSAFE_FILENAME_CHARS.sub("", brief.title).strip() or DEFAULT_SCRIPT_NAME
    return f"{stem}.{suffix.lstrip('.')}"


@dataclass(frozen=True, slots=True)
class BlockFormat:
    size: float | None
    space_before: float = 0
    space_after: float = 0


_BLOCK_FORMATS: dict[BlockKind, BlockFormat] = {
    BlockKind.BLANK: BlockFormat(size=None, space_after=6),
    BlockKind.SCENE_HEADING: BlockFormat(size=12, space_before=12, space_after=12),
    BlockKind.CHARACTER_CUE: BlockFormat(size=12, space_before=12, space_after=6),
    BlockKind.PARENTHETICAL: BlockFormat(size=11, space_after=6),
    BlockKind.DIALOGUE: BlockFormat(size=11, space_after=6),
    BlockKind.ACTION: BlockFormat(size=11, space_after=12),
}


class DocxScriptRenderer:
    """Lay out a title page plus classified section blocks with python-docx."""

    def render(self, brief: Brief, sections: Sequence[SectionState]):
        document = Document()
        for doc_section in document.sections:
            doc_section.top_margin = PAGE_MARGIN
            doc_section.bottom_margin = PAGE_MARGIN
            doc_section.left_margin = PAGE_MARGIN
            doc_section.right_margin = PAGE_MARGIN

        self._add_title_page(document, brief)
        for index, section in enumerate(sections):
            heading = document.add_paragraph(style="Heading 2")
            heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
            heading.paragraph_format.space_before = Pt(24)
            heading.paragraph_format.space_after = Pt(24)
            if index == 0:
                heading.paragraph_format.page_break_before = True
            run = heading.add_run(f"{section.title.upper()} (Pages {section.page_range.label})")
            run.bold = True
            run.font.size = Pt(12)

            for block in classify_script(section.content):
                self._add_block(document, block)
        return document

    def _add_title_page(self, document, brief: Brief) -> None:
        self._centred(document, brief.title.upper(), size=16, bold=True, space_after=24)
        self._centred(document, f"A {brief.genre} Screenplay", size=12, space_after=48)
        self._centred(document, f"Genre: {brief.genre}", size=10, space_after=12)
        self._centred(document, f"Setting: {brief.setting}", size=10, space_after=12)
        self._centred(document, f"Main Characters: {brief.main_characters}", size=10, space_after=12)
        self._centred(document, f"Tone: {brief.tone}", size=10, space_after=24)
        self._centred(document, "PLOT SUMMARY", size=12, bold=True, space_after=12)

        plot = document.add_paragraph()
        plot.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
        plot.paragraph_format.space_after = Pt(48)
        plot.add_run(brief.plot).font.size = Pt(10)

    @staticmethod
    def _centred(document, text: str, *, size: float, bold: bool = False, space_after: float = 0) -> None:
        paragraph = document.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.paragraph_format.space_after = Pt(space_after)
        run = paragraph.add_run(text)
        run.bold = bold
        run.font.size = Pt(size)

    @staticmethod
    def _add_block(document, block: LayoutBlock) -> None:
        fmt = _BLOCK_FORMATS[block.kind]
        paragraph = document.add_paragraph()
        paragraph_format = paragraph.paragraph_format
        paragraph_format.space_before = Pt(fmt.space_before)
        paragraph_format.space_after = Pt(fmt.space_after)
        if block.style.indent_left:
            paragraph_format.left_indent = Inches(INDENT_STEP_INCHES * block.style.indent_left)
        if block.style.indent_right:
            paragraph_format.right_indent = Inches(INDENT_STEP_INCHES * block.style.indent_right)

        run = paragraph.add_run(block.text)
        run.bold = block.style.bold
        run.italic = block.style.italic
        run.font.all_caps = block.style.all_caps
        if fmt.size is not None:
            run.font.size = Pt(fmt.size)


class ScriptExporter:
    """Write run artefacts below a single output directory."""

    def __init__(
        self,
        output_dir: Path,
        *,
        renderer: Optional[DocxScriptRenderer] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.output_dir = Path(output_dir).expanduser()
        self.renderer = renderer or DocxScriptRenderer()
        self.encoding = encoding

    def _target(self, filename: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / filename

    def write_text(self, brief: Brief, sections: Sequence[SectionState]) -> Path:
        path = self._target(script_filename(brief, "txt"))
        path.write_text(export_plain_text(sections), encoding=self.encoding)
        return path

    def write_docx(self, brief: Brief, sections: Sequence[SectionState]) -> Path:
        path = self._target(script_filename(brief, "docx"))
        try:
            document = self.renderer.render(brief, sections)
            document.save(str(path))
        except Exception as exc:
            raise DocumentAssemblyError(f"Failed to build Word document {path.name}: {exc}") from exc
        logger.info("Wrote %s", path)
        return path

    def write_run_summary(
        self,
        brief: Brief,
        sections: Sequence[SectionState],
        *,
        usage: Optional[UsageTracker] = None,
        artefacts: Optional[dict[str, str]] = None,
    ) -> Path:
        payload: dict[str, Any] = {
            "brief": brief.to_dict(),
            "finished_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "sections": [section.to_dict() for section in sections],
            "artefacts": artefacts or {},
        }
        if usage is not None:
            payload["usage"] = usage.snapshot()
        path = self._target("run.json")
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding=self.encoding)
        return path
