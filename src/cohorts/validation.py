"""Data-quality gate: each country must report a single population value."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Tuple

import pandas as pd

from src.errors import InconsistentPopulationError


def find_population_mismatches(frame: pd.DataFrame) -> Dict[str, Tuple[float, ...]]:
    """Map every country with more than one distinct population to those values.

    A missing population counts as its own distinct value, so a country mixing
    reported and blank populations is flagged as well.
    """
    distinct = frame.groupby("country", sort=True)["population"].unique()
    mismatches: Dict[str, Tuple[float, ...]] = {}
    for country, values in distinct.items():
        if len(values) != 1:
            mismatches[str(country)] = _ordered(values)
    return mismatches


def validate_population(frame: pd.DataFrame) -> None:
    """Raise `InconsistentPopulationError` listing every offending country."""
    mismatches = find_population_mismatches(frame)
    if mismatches:
        raise InconsistentPopulationError(mismatches)
    print(f"[cohorts] Population constant for all {frame['country'].nunique()} countries.")


def _ordered(values: Iterable[float]) -> Tuple[float, ...]:
    floats = [float(value) for value in values]
    reported = sorted(value for value in floats if not math.isnan(value))
    missing = [value for value in floats if math.isnan(value)]
    return tuple(reported + missing)


__all__ = ["find_population_mismatches", "validate_population"]
