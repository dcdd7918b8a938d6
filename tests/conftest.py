"""Shared fixtures for the test suite."""
from __future__ import annotations

import os
from typing import Any, Callable, Iterable

import pytest

from scriptforge.llm.providers import GenerationResult
from scriptforge.screenplay import Brief


@pytest.fixture(autouse=True)
def _clear_scriptforge_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure configuration environment variables do not leak between tests."""

    for name in list(os.environ):
        if name.startswith("SCRIPTFORGE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def nova_brief() -> Brief:
    return Brief(
        title="Nova",
        genre="sci-fi",
        plot="A stranded engineer races to restore contact with Earth.",
        main_characters="Ava",
        tone="dramatic",
        setting="Mars",
    )


class ScriptedBackend:
    """Backend stub that replays queued outcomes and records every call.

    Outcomes are strings (returned as text) or exceptions (raised). Once the
    queue is empty the ``default`` outcome is used.
    """

    def __init__(self, outcomes: Iterable[object] = (), *, default: object = "Generated text") -> None:
        self._outcomes = list(outcomes)
        self.default = default
        self.calls: list[tuple[str, str | None]] = []

    def generate(self, prompt: str, *, api_key: str | None = None) -> GenerationResult:
        self.calls.append((prompt, api_key))
        outcome = self._outcomes.pop(0) if self._outcomes else self.default
        if callable(outcome) and not isinstance(outcome, BaseException):
            outcome = outcome(prompt)
        if isinstance(outcome, BaseException):
            raise outcome
        return GenerationResult(
            text=str(outcome),
            prompt_tokens=10,
            completion_tokens=20,
            model_name="stub-model",
        )

    @property
    def prompts(self) -> list[str]:
        return [prompt for prompt, _ in self.calls]


@pytest.fixture
def scripted_backend() -> Callable[..., ScriptedBackend]:
    return ScriptedBackend


@pytest.fixture
def dummy_chat_model(monkeypatch: pytest.MonkeyPatch):
    """Patch the LangChain chat client used by the OpenAI-compatible backend."""

    from langchain_core.messages import AIMessage

    from scriptforge.llm import providers

    class DummyChatModel:
        instances: list["DummyChatModel"] = []
        reply: object = AIMessage(
            content="FADE IN:",
            usage_metadata={"input_tokens": 12, "output_tokens": 34, "total_tokens": 46},
            response_metadata={"model_name": "gpt-4o-mini-2024"},
        )

        def __init__(self, **kwargs: Any) -> None:
            self.kwargs = kwargs
            self.invocations: list[list[Any]] = []
            DummyChatModel.instances.append(self)

        def invoke(self, messages: Iterable[Any], **kwargs: Any) -> Any:
            self.invocations.append(list(messages))
            if isinstance(self.reply, BaseException):
                raise self.reply
            return self.reply

    DummyChatModel.instances = []
    monkeypatch.setattr(providers, "ChatOpenAI", DummyChatModel)
    return DummyChatModel


@pytest.fixture
def recorded_sleeps() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps: list[float]) -> Callable[[float], None]:
    return recorded_sleeps.append
