"""Screenplay generation workflow components."""

from .export import (
    DocumentAssemblyError,
    DocxScriptRenderer,
    ScriptExporter,
    export_plain_text,
    script_filename,
)
from .layout import BlockKind, LayoutBlock, StyleHints, classify_line, classify_lines, classify_script
from .orchestrator import GenerationOrchestrator, SectionListener
from .prompts import build_section_prompt, section_focus
from .retry import RetryPolicy, is_retryable
from .section_generator import SectionDraft, SectionGenerationError, SectionGenerator
from .state import (
    SECTION_SPECS,
    Brief,
    PageRange,
    SectionEvent,
    SectionSpec,
    SectionState,
    SectionStatus,
)

__all__ = [
    "DocumentAssemblyError",
    "DocxScriptRenderer",
    "ScriptExporter",
    "export_plain_text",
    "script_filename",
    "BlockKind",
    "LayoutBlock",
    "StyleHints",
    "classify_line",
    "classify_lines",
    "classify_script",
    "GenerationOrchestrator",
    "SectionListener",
    "build_section_prompt",
    "section_focus",
    "RetryPolicy",
    "is_retryable",
    "SectionDraft",
    "SectionGenerationError",
    "SectionGenerator",
    "SECTION_SPECS",
    "Brief",
    "PageRange",
    "SectionEvent",
    "SectionSpec",
    "SectionState",
    "SectionStatus",
]
