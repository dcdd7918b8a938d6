"""Input loading utilities for screenplay briefs."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from .screenplay.state import Brief

__all__ = ["load_brief"]

JSON_SUFFIXES = {".json"}
TOML_SUFFIXES = {".toml"}


def load_brief(source: Path | str, *, encoding: str = "utf-8") -> Brief:
    """Load a brief from a JSON or TOML file."""

    source_path = Path(source).expanduser()
    if not source_path.exists():
        raise FileNotFoundError(f"Brief not found: {source_path}")

    suffix = source_path.suffix.lower()
    payload: Any
    if suffix in JSON_SUFFIXES:
        payload = json.loads(source_path.read_text(encoding=encoding))
    elif suffix in TOML_SUFFIXES:
        payload = tomllib.loads(source_path.read_text(encoding=encoding))
    else:
        raise ValueError(f"Unsupported brief format for {source_path}; use .json or .toml")

    if isinstance(payload, dict) and isinstance(payload.get("brief"), dict):
        payload = payload["brief"]
    if not isinstance(payload, dict):
        raise ValueError(f"Brief file {source_path} must contain a table/object of fields")
    return Brief.from_mapping(payload)
