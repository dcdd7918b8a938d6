"""Path helpers for screenplay artefacts."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__all__ = [
    "ScriptPathConfig",
    "default_output_root",
    "resolve_output_path",
]


def default_output_root() -> Path:
    """``$SCRIPTFORGE_OUTPUT_ROOT/scripts``, read at call time so ``.env`` values apply."""

    return Path(os.getenv("SCRIPTFORGE_OUTPUT_ROOT", "outputs")) / "scripts"


def resolve_output_path(path: Path | str | None = None, *, create: bool = True) -> Path:
    candidate = Path(path or default_output_root()).expanduser()
    if create:
        candidate.mkdir(parents=True, exist_ok=True)
    return candidate


@dataclass(slots=True)
class ScriptPathConfig:
    # None means default_output_root() at resolution time
    output_path: Optional[Path] = None
    create_output: bool = True
