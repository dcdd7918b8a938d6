"""Dataclass-driven configuration for the screenplay generator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .paths import ScriptPathConfig, resolve_output_path

__all__ = [
    "ConfigurationError",
    "GenerationParameters",
    "GENERATION_PARAMETERS",
    "CredentialTable",
    "ServiceConfig",
    "RetryConfig",
    "ScriptForgeConfig",
]

CREDENTIAL_ENV_TEMPLATE = "SCRIPTFORGE_API_KEY_{ordinal}"
DEFAULT_PROVIDER = "gemini"
DEFAULT_TIMEOUT_SECONDS = 120.0


class ConfigurationError(RuntimeError):
    """Raised when startup configuration is missing or inconsistent."""


def _env_float(name: str, default: float | None = None) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:  # pragma: no cover - malformed env value
        return default


def _env_int(name: str, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:  # pragma: no cover - malformed env value
        return default


@dataclass(frozen=True, slots=True)
class GenerationParameters:
    """Fixed sampling parameters sent with every generation request."""

    temperature: float = 0.7
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 8192

    def as_gemini_payload(self) -> dict[str, float | int]:
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
        }


GENERATION_PARAMETERS = GenerationParameters()


class CredentialTable:
    """One credential per section ordinal, fixed for the lifetime of the process."""

    def __init__(self, credentials: Mapping[int, str]) -> None:
        self._credentials = MappingProxyType(dict(credentials))

    @classmethod
    def from_env(cls, section_count: int, *, template: str = CREDENTIAL_ENV_TEMPLATE) -> "CredentialTable":
        credentials: dict[int, str] = {}
        for ordinal in range(1, section_count + 1):
            value = os.getenv(template.format(ordinal=ordinal))
            if value:
                credentials[ordinal] = value
        return cls(credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def __contains__(self, ordinal: object) -> bool:
        return ordinal in self._credentials

    def ordinals(self) -> tuple[int, ...]:
        return tuple(sorted(self._credentials))

    def validate(self, section_count: int) -> "CredentialTable":
        expected = tuple(range(1, section_count + 1))
        if self.ordinals() != expected:
            missing = sorted(set(expected) - set(self._credentials))
            extra = sorted(set(self._credentials) - set(expected))
            raise ConfigurationError(
                f"Credential table must hold exactly one credential per section 1..{section_count}"
                f" (missing: {missing or 'none'}, unexpected: {extra or 'none'})"
            )
        empty = [ordinal for ordinal, value in self._credentials.items() if not value]
        if empty:
            raise ConfigurationError(f"Empty credentials for sections {sorted(empty)}")
        return self

    def for_ordinal(self, ordinal: int) -> str:
        try:
            return self._credentials[ordinal]
        except KeyError:
            raise ConfigurationError(f"No credential configured for section {ordinal}") from None


@dataclass(slots=True)
class ServiceConfig:
    """Which generation backend to talk to and how."""

    provider: str = field(default_factory=lambda: os.getenv("SCRIPTFORGE_PROVIDER", DEFAULT_PROVIDER))
    model: str | None = field(default_factory=lambda: os.getenv("SCRIPTFORGE_MODEL"))
    base_url: str | None = field(default_factory=lambda: os.getenv("SCRIPTFORGE_BASE_URL"))
    timeout: float = field(default_factory=lambda: _env_float("SCRIPTFORGE_TIMEOUT", DEFAULT_TIMEOUT_SECONDS))

    @property
    def requires_credentials(self) -> bool:
        return self.provider.lower() not in {"mock", "stub", "test"}


@dataclass(slots=True)
class RetryConfig:
    """Bounded exponential backoff settings for outbound calls."""

    max_attempts: int = field(default_factory=lambda: _env_int("SCRIPTFORGE_MAX_ATTEMPTS", 5))
    base_delay: float = field(default_factory=lambda: _env_float("SCRIPTFORGE_BACKOFF_SECONDS", 1.0))

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")


@dataclass(slots=True)
class ScriptForgeConfig:
    """Primary configuration entry point for a generation run."""

    paths: ScriptPathConfig = field(default_factory=ScriptPathConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    credentials: CredentialTable | None = None

    def with_output(self, output_path: Path | str) -> "ScriptForgeConfig":
        new_paths = replace(
            self.paths,
            output_path=resolve_output_path(output_path, create=self.paths.create_output),
        )
        return replace(self, paths=new_paths)

    @property
    def output_path(self) -> Path:
        return resolve_output_path(self.paths.output_path, create=self.paths.create_output)

    def resolve_credentials(self, section_count: int) -> CredentialTable | None:
        """Build and validate the credential table once, at startup."""

        if not self.service.requires_credentials:
            return self.credentials
        table = self.credentials or CredentialTable.from_env(section_count)
        self.credentials = table.validate(section_count)
        return self.credentials
