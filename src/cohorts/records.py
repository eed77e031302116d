"""Shared data records for per-country summaries and analysis cohorts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional, Tuple

import pandas as pd

from .config import NO_DATA

SUMMARY_COLUMNS: Tuple[str, ...] = (
    "country",
    "earliest_date",
    "latest_date",
    "population_estimate",
    "tests_total",
    "deaths_total",
    "hospitalizations_total",
)

HOSPITALIZATIONS = "hospitalizations_total"
DEATHS = "deaths_total"
TESTS = "tests_total"


def rate_column(total_field: str) -> str:
    """``tests_total`` -> ``tests_per_100k``."""
    if not total_field.endswith("_total"):
        raise ValueError(f"Expected a '*_total' column, got '{total_field}'.")
    return total_field[: -len("_total")] + "_per_100k"


@dataclass(frozen=True)
class CountrySummary:
    """One country's date range, population and outcome totals."""

    country: str
    earliest_date: date
    latest_date: date
    population_estimate: Optional[float]
    tests_total: float
    deaths_total: float
    hospitalizations_total: float

    @property
    def has_test_data(self) -> bool:
        return self.tests_total != NO_DATA


@dataclass(frozen=True, eq=False)
class AnalysisCohort:
    """Countries retained for one outcome, plus the reasons others were dropped."""

    name: str
    outcome_field: str
    frame: pd.DataFrame
    excluded: Mapping[str, str] = field(default_factory=dict)

    @property
    def outcome_rate_field(self) -> str:
        return rate_column(self.outcome_field)

    @property
    def countries(self) -> Tuple[str, ...]:
        return tuple(self.frame["country"])

    @property
    def is_normalized(self) -> bool:
        return rate_column(TESTS) in self.frame.columns and self.outcome_rate_field in self.frame.columns

    def __len__(self) -> int:
        return len(self.frame)


@dataclass(frozen=True, eq=False)
class CohortSelection:
    """Result of running every cohort filter step over the country summaries."""

    valid: pd.DataFrame
    rejected: Mapping[str, str]
    anomalies: Tuple[str, ...]
    hospitalizations: AnalysisCohort
    deaths: AnalysisCohort

    @property
    def cohorts(self) -> Tuple[AnalysisCohort, AnalysisCohort]:
        return (self.hospitalizations, self.deaths)
