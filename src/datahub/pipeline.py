"""High-level entry points for acquiring and reading the raw table."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from .config import DEFAULT_RAW_ROOT, default_source_path
from .download import download_owid
from .loader import SourceLike, load_observations
from .projection import project_columns


def prepare_source(raw_root: Path = DEFAULT_RAW_ROOT, force: bool = False) -> Path:
    """Ensure the OWID CSV exists locally and return its path."""
    raw_root.mkdir(parents=True, exist_ok=True)
    return download_owid(raw_root, force=force)


def resolve_source(source: Optional[SourceLike], raw_root: Path = DEFAULT_RAW_ROOT) -> SourceLike:
    """Use ``source`` when given, otherwise the cached download under ``raw_root``."""
    if source is not None:
        return source
    cached = default_source_path(raw_root)
    if not cached.exists():
        raise FileNotFoundError(
            f"No source given and no cached table at {cached}. Run `python main.py datahub` to download it first."
        )
    return cached


def load_projected(source: SourceLike) -> pd.DataFrame:
    """Read ``source`` and project it onto the analysis columns."""
    return project_columns(load_observations(source))


__all__ = ["load_projected", "prepare_source", "resolve_source"]
