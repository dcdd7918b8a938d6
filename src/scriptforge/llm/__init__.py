"""Generation backends and usage accounting for scriptforge."""

from .gemini import DEFAULT_GEMINI_MODEL, GeminiBackend
from .providers import (
    GenerationBackend,
    GenerationError,
    GenerationResult,
    LangChainBackend,
    MalformedResponseError,
    MockScreenplayBackend,
    ProviderDependencyError,
    ServiceConnectionError,
    ServiceStatusError,
    build_backend,
    is_retryable_status,
)
from .usage import MODEL_RATES, ModelRate, SectionUsage, UsageTracker

__all__ = [
    "DEFAULT_GEMINI_MODEL",
    "GeminiBackend",
    "GenerationBackend",
    "GenerationError",
    "GenerationResult",
    "LangChainBackend",
    "MalformedResponseError",
    "MockScreenplayBackend",
    "ProviderDependencyError",
    "ServiceConnectionError",
    "ServiceStatusError",
    "build_backend",
    "is_retryable_status",
    "MODEL_RATES",
    "ModelRate",
    "SectionUsage",
    "UsageTracker",
]
