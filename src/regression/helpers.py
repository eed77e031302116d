"""Array conversion helpers for cohort regressions."""

from __future__ import annotations

import numpy as np
import pandas as pd

from src.cohorts.records import rate_column


def resolve_rate_field(field: str) -> str:
    """Accept either ``deaths_total`` or ``deaths_per_100k`` and return the rate column."""
    if field.endswith("_per_100k"):
        return field
    return rate_column(field)


def column_array(frame: pd.DataFrame, column: str) -> np.ndarray:
    """Extract ``column`` as a finite 1-D float64 array."""
    if column not in frame.columns:
        raise KeyError(f"Column '{column}' not in cohort; available: {list(frame.columns)}")
    arr = frame[column].to_numpy(dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"{column} must be 1-D, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{column} contains non-finite entries.")
    return arr
