"""Per-capita normalization of cohort totals."""

from __future__ import annotations

from dataclasses import replace

from src.errors import InvalidPopulationError

from .config import PER_CAPITA_SCALE
from .records import TESTS, AnalysisCohort, rate_column


def normalize_rates(cohort: AnalysisCohort, scale: int = PER_CAPITA_SCALE) -> AnalysisCohort:
    """Return a copy of ``cohort`` with ``tests_per_100k`` and the outcome's rate column.

    ``x_per_100k = x_total / population_estimate * scale``.
    """
    frame = cohort.frame
    population = frame["population_estimate"]
    # NaN compares False, so missing populations are rejected too.
    invalid = ~(population > 0)
    if invalid.any():
        raise InvalidPopulationError(frame.loc[invalid, "country"].astype(str))

    normalized = frame.copy()
    for total_field in (TESTS, cohort.outcome_field):
        normalized[rate_column(total_field)] = normalized[total_field] / population * scale
    return replace(cohort, frame=normalized)


__all__ = ["normalize_rates"]
