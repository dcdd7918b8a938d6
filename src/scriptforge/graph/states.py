"""Typed state definitions for the screenplay LangGraph workflow."""

from __future__ import annotations

from typing import TypedDict


class ScreenplayRunState(TypedDict, total=False):
    """State threaded between section nodes."""

    # resolved text of the most recent section, or "" after a failure
    previous_content: str

    resolved: list[int]
    failed: list[int]


__all__ = ["ScreenplayRunState"]
