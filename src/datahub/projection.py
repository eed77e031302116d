"""Restrict the raw table to the fields the analysis needs."""

from __future__ import annotations

from typing import Mapping

import pandas as pd

from src.errors import SchemaError

from .config import SOURCE_COLUMNS


def project_columns(frame: pd.DataFrame, columns: Mapping[str, str] = SOURCE_COLUMNS) -> pd.DataFrame:
    """Select ``columns`` (source -> target) and rename them, in mapping order."""
    missing = [name for name in columns if name not in frame.columns]
    if missing:
        raise SchemaError(missing, list(frame.columns))

    projected = frame.loc[:, list(columns)].rename(columns=dict(columns))
    return projected.reset_index(drop=True)


__all__ = ["project_columns"]
