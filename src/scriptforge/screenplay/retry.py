"""Bounded exponential-backoff retry around a single outbound call."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar

from ..config import RetryConfig
from ..llm.providers import GenerationError

logger = logging.getLogger(__name__)

__all__ = ["RetryPolicy", "is_retryable"]

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Only service failures flagged as transient are retried."""

    return isinstance(exc, GenerationError) and exc.retryable


@dataclass
class RetryPolicy:
    """Retry transient failures with delays of ``base_delay * 2**n``.

    The delay before attempt ``n + 1`` is ``base_delay * 2**n``; there is no
    delay after the final attempt. Non-retryable errors propagate at once,
    and once the budget is spent the last observed error is re-raised.
    """

    max_attempts: int = 5
    base_delay: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be positive")

    @classmethod
    def from_config(cls, config: RetryConfig, *, sleep: Callable[[float], None] | None = None) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay,
            sleep=sleep or time.sleep,
        )

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * (2**attempt)

    def call(
        self,
        operation: Callable[[], T],
        *,
        label: str = "call",
        on_attempt: Optional[Callable[[int], None]] = None,
    ) -> T:
        last_error: BaseException | None = None
        for attempt in range(self.max_attempts):
            if on_attempt is not None:
                on_attempt(attempt + 1)
            try:
                return operation()
            except GenerationError as exc:
                if not is_retryable(exc):
                    logger.error("%s failed with a terminal error: %s", label, exc)
                    raise
                last_error = exc
                if attempt < self.max_attempts - 1:
                    delay = self.delay_for(attempt)
                    logger.warning(
                        "Attempt %d/%d for %s failed (%s); retrying in %.1fs",
                        attempt + 1,
                        self.max_attempts,
                        label,
                        exc,
                        delay,
                    )
                    self.sleep(delay)

        logger.error("All %d attempts for %s failed: %s", self.max_attempts, label, last_error)
        if last_error is None:  # pragma: no cover - max_attempts is validated
            raise RuntimeError("retry loop exited without an outcome")
        raise last_error
