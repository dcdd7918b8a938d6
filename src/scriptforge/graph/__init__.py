"""LangGraph state types."""

from .states import ScreenplayRunState

__all__ = ["ScreenplayRunState"]
