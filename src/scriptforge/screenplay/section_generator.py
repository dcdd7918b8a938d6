"""Resolve one screenplay section's text from the generation service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import CredentialTable
from ..llm.providers import GenerationBackend, GenerationError, GenerationResult
from ..llm.usage import UsageTracker
from .prompts import build_section_prompt
from .retry import RetryPolicy
from .state import Brief, SectionSpec

logger = logging.getLogger(__name__)

__all__ = ["SectionDraft", "SectionGenerationError", "SectionGenerator"]

PromptBuilder = Callable[[Brief, SectionSpec, str, int], str]


class SectionGenerationError(RuntimeError):
    """A section could not be resolved within the retry budget."""

    def __init__(self, ordinal: int, last_error: GenerationError, attempts: int) -> None:
        super().__init__(f"Section {ordinal} failed after {attempts} attempt(s): {last_error}")
        self.ordinal = ordinal
        self.last_error = last_error
        self.attempts = attempts


@dataclass(slots=True)
class SectionDraft:
    text: str
    prompt: str
    attempts: int
    result: GenerationResult


class SectionGenerator:
    """Combine prompt rendering, credential lookup and retry for one section."""

    def __init__(
        self,
        backend: GenerationBackend,
        *,
        credentials: Optional[CredentialTable] = None,
        retry_policy: Optional[RetryPolicy] = None,
        usage: Optional[UsageTracker] = None,
        prompt_builder: PromptBuilder = build_section_prompt,
    ) -> None:
        self.backend = backend
        self.credentials = credentials
        self.retry_policy = retry_policy or RetryPolicy()
        self.usage = usage
        self._prompt_builder = prompt_builder

    def resolve(
        self,
        brief: Brief,
        section: SectionSpec,
        previous_content: str,
        section_index: int,
    ) -> SectionDraft:
        prompt = self._prompt_builder(brief, section, previous_content, section_index)
        ordinal = section_index + 1
        api_key = self.credentials.for_ordinal(ordinal) if self.credentials is not None else None

        attempts = 0

        def _count(attempt: int) -> None:
            nonlocal attempts
            attempts = attempt

        try:
            result = self.retry_policy.call(
                lambda: self.backend.generate(prompt, api_key=api_key),
                label=f"section {ordinal}",
                on_attempt=_count,
            )
        except GenerationError as exc:
            raise SectionGenerationError(ordinal, exc, attempts) from exc

        if self.usage is not None:
            self.usage.record(ordinal, result.model_name, result.prompt_tokens, result.completion_tokens)
        logger.info("Section %d resolved after %d attempt(s) (%d chars)", ordinal, attempts, len(result.text))
        return SectionDraft(text=result.text, prompt=prompt, attempts=attempts, result=result)

    def generate_section(
        self,
        brief: Brief,
        section: SectionSpec,
        previous_content: str,
        section_index: int,
    ) -> str:
        return self.resolve(brief, section, previous_content, section_index).text
