"""Per-section token accounting for generation calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

__all__ = [
    "MODEL_RATES",
    "ModelRate",
    "SectionUsage",
    "UsageTracker",
]


@dataclass(frozen=True, slots=True)
class ModelRate:
    """Published list price in USD per million tokens."""

    input_per_million: float
    output_per_million: float

    def price(self, input_tokens: int, output_tokens: int) -> float:
        return (input_tokens * self.input_per_million + output_tokens * self.output_per_million) / 1_000_000


# Informational only; nothing is enforced against these figures.
MODEL_RATES: Dict[str, ModelRate] = {
    "gemini-2.0-flash-exp": ModelRate(0.0, 0.0),
    "gemini-2.0-flash": ModelRate(0.10, 0.40),
    "gpt-4o-mini": ModelRate(0.15, 0.60),
    "gpt-4o": ModelRate(2.50, 10.00),
}


@dataclass(slots=True)
class SectionUsage:
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost_usd: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def merge(self, other: "SectionUsage") -> None:
        self.calls += other.calls
        self.input_tokens += other.input_tokens
        self.output_tokens += other.output_tokens
        self.estimated_cost_usd += other.estimated_cost_usd

    def to_dict(self) -> dict[str, float | int]:
        return {
            "calls": self.calls,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "estimated_cost_usd": round(self.estimated_cost_usd, 6),
        }


@dataclass(slots=True)
class UsageTracker:
    """Running tally of successful generation calls keyed by section ordinal."""

    rates: Mapping[str, ModelRate] = field(default_factory=lambda: MODEL_RATES)
    _sections: Dict[int, SectionUsage] = field(default_factory=dict, init=False, repr=False)

    def record(self, ordinal: int, model: str, input_tokens: int, output_tokens: int) -> SectionUsage:
        rate = self.rates.get(model)
        call = SectionUsage(
            calls=1,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            estimated_cost_usd=rate.price(input_tokens, output_tokens) if rate else 0.0,
        )
        usage = self._sections.setdefault(ordinal, SectionUsage())
        usage.merge(call)
        return usage

    def for_section(self, ordinal: int) -> SectionUsage | None:
        return self._sections.get(ordinal)

    def total(self) -> SectionUsage:
        total = SectionUsage()
        for usage in self._sections.values():
            total.merge(usage)
        return total

    def clear(self) -> None:
        self._sections.clear()

    def snapshot(self) -> dict[str, object]:
        return {
            "total": self.total().to_dict(),
            "sections": {str(ordinal): self._sections[ordinal].to_dict() for ordinal in sorted(self._sections)},
        }
