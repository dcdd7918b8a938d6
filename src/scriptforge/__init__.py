"""Sectioned screenplay generation from a short creative brief."""

from .config import (
    ConfigurationError,
    CredentialTable,
    GenerationParameters,
    RetryConfig,
    ScriptForgeConfig,
    ServiceConfig,
)
from .io import load_brief
from .paths import ScriptPathConfig, resolve_output_path
from .screenplay import (
    SECTION_SPECS,
    Brief,
    GenerationOrchestrator,
    LayoutBlock,
    RetryPolicy,
    SectionGenerator,
    SectionState,
    SectionStatus,
    classify_script,
    export_plain_text,
)

__all__ = [
    "ConfigurationError",
    "CredentialTable",
    "GenerationParameters",
    "RetryConfig",
    "ScriptForgeConfig",
    "ServiceConfig",
    "load_brief",
    "ScriptPathConfig",
    "resolve_output_path",
    "SECTION_SPECS",
    "Brief",
    "GenerationOrchestrator",
    "LayoutBlock",
    "RetryPolicy",
    "SectionGenerator",
    "SectionState",
    "SectionStatus",
    "classify_script",
    "export_plain_text",
]
