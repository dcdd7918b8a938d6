"""Generation backends for screenplay sections and their error taxonomy."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx
from langchain_core.messages import HumanMessage

from ..config import GENERATION_PARAMETERS, ConfigurationError, GenerationParameters, ServiceConfig

try:  # pragma: no cover - import guard for optional dependency
    import openai
    from langchain_openai import ChatOpenAI
except ImportError:  # pragma: no cover - gracefully degrade when dependency missing
    openai = None  # type: ignore[assignment]
    ChatOpenAI = None  # type: ignore[assignment]

__all__ = [
    "GenerationError",
    "ServiceConnectionError",
    "ServiceStatusError",
    "MalformedResponseError",
    "ProviderDependencyError",
    "GenerationResult",
    "GenerationBackend",
    "LangChainBackend",
    "MockScreenplayBackend",
    "build_backend",
    "is_retryable_status",
]

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
RETRYABLE_STATUSES = frozenset({429, 503})

# Failures before any response arrives; everything else is a status error or a bug.
CONNECTION_ERRORS: tuple[type[BaseException], ...] = (httpx.TransportError, ConnectionError, TimeoutError)
if openai is not None:
    CONNECTION_ERRORS += (openai.APIConnectionError,)


def is_retryable_status(status_code: int) -> bool:
    """Rate limiting, unavailability and any 5xx response are worth retrying."""

    return status_code in RETRYABLE_STATUSES or status_code >= 500


class GenerationError(RuntimeError):
    """Base error for a failed call to the generation service."""

    retryable: bool = False

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ServiceConnectionError(GenerationError):
    """The call failed before any response was received."""

    retryable = True


class ServiceStatusError(GenerationError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        message = f"API request failed: {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, status_code=status_code)
        self.retryable = is_retryable_status(status_code)


class MalformedResponseError(GenerationError):
    """A success response that carries no extractable text."""


class ProviderDependencyError(ConfigurationError):
    """Raised when the optional LangChain OpenAI integration is unavailable."""


@dataclass(slots=True)
class GenerationResult:
    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    model_name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


class GenerationBackend(Protocol):
    """Protocol for the external content-generation service."""

    def generate(self, prompt: str, *, api_key: str | None = None) -> GenerationResult:  # pragma: no cover - interface
        ...


class LangChainBackend:
    """OpenAI-compatible chat model reached through ``langchain_openai.ChatOpenAI``."""

    def __init__(
        self,
        *,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str | None = None,
        timeout: float | None = None,
        parameters: GenerationParameters = GENERATION_PARAMETERS,
    ) -> None:
        if ChatOpenAI is None:
            raise ProviderDependencyError("langchain-openai is required for the 'openai' provider")
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self.parameters = parameters
        self._clients: dict[str | None, Any] = {}

    def client_kwargs(self, api_key: str | None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "temperature": self.parameters.temperature,
            "top_p": self.parameters.top_p,
            "max_tokens": self.parameters.max_output_tokens,
            # retries are owned by RetryPolicy
            "max_retries": 0,
        }
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if api_key:
            kwargs["api_key"] = api_key
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    def _client_for(self, api_key: str | None):
        client = self._clients.get(api_key)
        if client is None:
            client = ChatOpenAI(**self.client_kwargs(api_key))  # type: ignore[misc]
            self._clients[api_key] = client
        return client

    def generate(self, prompt: str, *, api_key: str | None = None) -> GenerationResult:
        client = self._client_for(api_key)
        try:
            response = client.invoke([HumanMessage(content=prompt)])
        except CONNECTION_ERRORS as exc:
            raise ServiceConnectionError(f"{type(exc).__name__}: {exc}") from exc
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            if not isinstance(status_code, int):
                raise
            raise ServiceStatusError(status_code, type(exc).__name__) from exc

        text = self._extract_content(response).strip()
        if not text:
            raise MalformedResponseError(f"Model '{self.model}' returned an empty message")
        usage = getattr(response, "usage_metadata", None) or {}
        return GenerationResult(
            text=text,
            prompt_tokens=int(usage.get("input_tokens") or 0),
            completion_tokens=int(usage.get("output_tokens") or 0),
            model_name=getattr(response, "response_metadata", {}).get("model_name", self.model),
        )

    @staticmethod
    def _extract_content(response: Any) -> str:
        content = getattr(response, "content", "")
        if isinstance(content, list):
            pieces = [segment.get("text", "") for segment in content if isinstance(segment, dict)]
            return "".join(pieces)
        return str(content or "")


_PROMPT_FIELD = re.compile(r"^- (Title|Genre|Setting|Main Characters|Tone|Plot): (.*)$", re.MULTILINE)
_PROMPT_SECTION = re.compile(r"^- Section: (.+) \(Pages (\d+-\d+)\)$", re.MULTILINE)
_PROMPT_ORDINAL = re.compile(r"This is section (\d+) of")


class MockScreenplayBackend:
    """Deterministic offline backend used for development and tests."""

    model_name = "mock-screenplay"

    def __init__(self) -> None:
        self.prompts: list[str] = []

    def generate(self, prompt: str, *, api_key: str | None = None) -> GenerationResult:
        self.prompts.append(prompt)
        details = dict(_PROMPT_FIELD.findall(prompt))
        section_match = _PROMPT_SECTION.search(prompt)
        ordinal_match = _PROMPT_ORDINAL.search(prompt)
        section_title, page_range = section_match.groups() if section_match else ("Section", "1-1")
        ordinal = ordinal_match.group(1) if ordinal_match else "?"

        setting = details.get("Setting", "").upper() or "LOCATION"
        genre = details.get("Genre", "").lower()
        characters = details.get("Main Characters") or "the cast"
        manner = "(dramatically)" if details.get("Tone") == "dramatic" else "(confidently)"
        lines = [
            "FADE IN:",
            "",
            f"EXT. {setting} - DAY",
            "",
            section_title.upper(),
            "",
            f"The {genre} story unfolds as {characters} navigate the challenges of pages {page_range}.",
            "",
            "MAIN CHARACTER",
            manner,
            f"This is where the {section_title.lower()} begins to take shape, "
            f"building upon the foundation of {details.get('Title', '')}.",
            "",
            f"The plot thickens as {details.get('Plot', '')[:100]}...",
            "",
            f"[Mock generation for section {ordinal}, pages {page_range}.]",
            "",
            "FADE OUT.",
        ]
        text = "\n".join(lines)
        return GenerationResult(
            text=text,
            prompt_tokens=max(1, len(prompt.split())),
            completion_tokens=max(1, len(text.split())),
            model_name=self.model_name,
            metadata={"provider": "mock"},
        )


def build_backend(service: ServiceConfig) -> GenerationBackend:
    """Factory selecting a backend by provider name."""

    provider_key = (service.provider or "").lower()
    if provider_key in {"mock", "stub", "test"}:
        return MockScreenplayBackend()
    if provider_key == "gemini":
        from .gemini import GeminiBackend

        kwargs: dict[str, Any] = {"timeout": service.timeout}
        if service.model:
            kwargs["model"] = service.model
        if service.base_url:
            kwargs["base_url"] = service.base_url
        return GeminiBackend(**kwargs)
    if provider_key in {"openai", "langchain"}:
        return LangChainBackend(
            model=service.model or DEFAULT_OPENAI_MODEL,
            base_url=service.base_url,
            timeout=service.timeout,
        )
    raise ConfigurationError(f"Unsupported provider '{service.provider}'")
