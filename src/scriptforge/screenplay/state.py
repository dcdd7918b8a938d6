"""Data model shared by the screenplay generation workflow."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional

__all__ = [
    "Brief",
    "PageRange",
    "SectionSpec",
    "SECTION_SPECS",
    "SectionStatus",
    "SectionState",
    "SectionEvent",
]

_BRIEF_ALIASES = {"mainCharacters": "main_characters"}


@dataclass(frozen=True, slots=True)
class Brief:
    """User-supplied creative parameters driving every generation request."""

    title: str = ""
    genre: str = ""
    plot: str = ""
    main_characters: str = ""
    tone: str = ""
    setting: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Brief":
        known = {field.name for field in fields(cls)}
        values: dict[str, str] = {}
        for key, value in payload.items():
            name = _BRIEF_ALIASES.get(key, key)
            if name not in known:
                continue
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"Brief field '{key}' must be a string, got {type(value).__name__}")
            values[name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


@dataclass(frozen=True, slots=True)
class PageRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start <= 0 or self.end < self.start:
            raise ValueError(f"Invalid page range {self.start}-{self.end}")

    @classmethod
    def parse(cls, value: str) -> "PageRange":
        left, sep, right = value.partition("-")
        if not sep:
            raise ValueError(f"Page range must look like 'start-end': {value!r}")
        return cls(int(left), int(right))

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def page_count(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True, slots=True)
class SectionSpec:
    """Static description of one of the fixed screenplay sections."""

    ordinal: int
    title: str
    page_range: PageRange
    focus: str


SECTION_SPECS: tuple[SectionSpec, ...] = (
    SectionSpec(1, "Opening & Setup", PageRange(1, 24), "Character introduction and story setup"),
    SectionSpec(2, "Rising Action", PageRange(25, 48), "Conflict development and plot advancement"),
    SectionSpec(3, "Midpoint & Complications", PageRange(49, 72), "Major plot point and character challenges"),
    SectionSpec(4, "Climax & Final Act", PageRange(73, 96), "Climax and resolution buildup"),
    SectionSpec(5, "Resolution", PageRange(97, 120), "Conclusion and character arcs completion"),
)


class SectionStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (SectionStatus.COMPLETED, SectionStatus.ERROR)


@dataclass(slots=True)
class SectionState:
    """Mutable per-run record owned by the orchestrator."""

    ordinal: int
    title: str
    page_range: PageRange
    content: str = ""
    status: SectionStatus = SectionStatus.PENDING
    error: Optional[str] = None
    attempts: int = 0

    @classmethod
    def pending(cls, spec: SectionSpec) -> "SectionState":
        return cls(ordinal=spec.ordinal, title=spec.title, page_range=spec.page_range)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ordinal": self.ordinal,
            "title": self.title,
            "page_range": self.page_range.label,
            "status": self.status.value,
            "error": self.error,
            "attempts": self.attempts,
            "characters": len(self.content),
        }


@dataclass(frozen=True, slots=True)
class SectionEvent:
    """Notification emitted after every section status transition."""

    ordinal: int
    previous_status: SectionStatus
    status: SectionStatus
    error: Optional[str] = None
