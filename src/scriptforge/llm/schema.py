"""Structured schema for Gemini ``generateContent`` responses."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "GeminiCandidate",
    "GeminiContent",
    "GeminiPart",
    "GeminiResponse",
    "GeminiUsage",
]


class FrozenBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class GeminiPart(FrozenBaseModel):
    text: Optional[str] = None


class GeminiContent(FrozenBaseModel):
    parts: List[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(FrozenBaseModel):
    content: Optional[GeminiContent] = None
    finish_reason: Optional[str] = Field(default=None, alias="finishReason")


class GeminiUsage(FrozenBaseModel):
    prompt_token_count: int = Field(default=0, alias="promptTokenCount")
    candidates_token_count: int = Field(default=0, alias="candidatesTokenCount")


class GeminiResponse(FrozenBaseModel):
    """Only the fields the backend reads; everything else is ignored."""

    candidates: List[GeminiCandidate] = Field(default_factory=list)
    usage_metadata: Optional[GeminiUsage] = Field(default=None, alias="usageMetadata")
    model_version: Optional[str] = Field(default=None, alias="modelVersion")

    def first_text(self) -> Optional[str]:
        """Text of the first part of the first candidate, if there is one."""

        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text
