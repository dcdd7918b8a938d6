"""HTTP backend for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import GENERATION_PARAMETERS, GenerationParameters
from .providers import (
    GenerationResult,
    MalformedResponseError,
    ServiceConnectionError,
    ServiceStatusError,
)
from .schema import GeminiResponse, GeminiUsage

logger = logging.getLogger(__name__)

__all__ = ["GeminiBackend", "DEFAULT_GEMINI_MODEL", "DEFAULT_GEMINI_BASE_URL"]

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"


class GeminiBackend:
    """Single-shot ``generateContent`` calls; retries are left to the caller."""

    def __init__(
        self,
        *,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout: float = 120.0,
        parameters: GenerationParameters = GENERATION_PARAMETERS,
        client: httpx.Client | None = None,
    ) -> None:
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.parameters = parameters
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.parameters.as_gemini_payload(),
        }

    def generate(self, prompt: str, *, api_key: str | None = None) -> GenerationResult:
        params = {"key": api_key} if api_key else None
        try:
            if self._client is not None:
                response = self._post(self._client, prompt, params)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = self._post(client, prompt, params)
        except httpx.DecodingError as exc:
            raise MalformedResponseError(f"Gemini response body could not be decoded: {exc}") from exc
        except httpx.RequestError as exc:
            logger.debug("Gemini request failure: %s", exc)
            raise ServiceConnectionError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise ServiceStatusError(response.status_code, response.reason_phrase)

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Gemini returned a non-JSON body") from exc
        return self._parse(data)

    def _post(self, client: httpx.Client, prompt: str, params: dict[str, str] | None) -> httpx.Response:
        return client.post(
            self.endpoint,
            params=params,
            json=self.build_payload(prompt),
            headers={"Content-Type": "application/json"},
        )

    def _parse(self, data: Any) -> GenerationResult:
        try:
            response = GeminiResponse.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError("Invalid response format from Gemini API") from exc
        text = response.first_text()
        if not text or not text.strip():
            raise MalformedResponseError("Gemini response candidate carries no text")

        usage = response.usage_metadata or GeminiUsage()
        return GenerationResult(
            text=text,
            prompt_tokens=usage.prompt_token_count,
            completion_tokens=usage.candidates_token_count,
            model_name=response.model_version or self.model,
            metadata={"finish_reason": response.candidates[0].finish_reason},
        )
