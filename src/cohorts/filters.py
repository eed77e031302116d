"""Exclusion rules turning country summaries into the two analysis cohorts."""

from __future__ import annotations

import warnings
from typing import AbstractSet, Dict, Optional, Tuple

import pandas as pd

from src.errors import ZeroOutcomeAnomaly, ZeroOutcomeError

from .config import CONTINENTS, NO_DATA, AnalysisConfig, ZeroOutcomePolicy
from .records import DEATHS, HOSPITALIZATIONS, TESTS, AnalysisCohort, CohortSelection

REASON_AGGREGATE = "continent-level aggregate"
REASON_NO_TESTS = "no testing data"

COHORT_BASE_COLUMNS: Tuple[str, ...] = ("country", "population_estimate", TESTS)


def filter_summaries(
    summaries: pd.DataFrame,
    excluded: AbstractSet[str] = CONTINENTS,
) -> Tuple[pd.DataFrame, Dict[str, str]]:
    """Drop aggregate locations, then countries without any testing data.

    Returns the surviving rows and a mapping of dropped country -> reason.
    """
    rejected: Dict[str, str] = {}

    is_aggregate = summaries["country"].isin(sorted(excluded))
    for country in summaries.loc[is_aggregate, "country"]:
        rejected[str(country)] = REASON_AGGREGATE
    in_scope = summaries.loc[~is_aggregate]

    no_tests = in_scope["tests_total"] == NO_DATA
    for country in in_scope.loc[no_tests, "country"]:
        rejected[str(country)] = REASON_NO_TESTS
    valid = in_scope.loc[~no_tests].reset_index(drop=True)

    print(
        f"[cohorts] Kept {len(valid)} of {len(summaries)} locations "
        f"({int(is_aggregate.sum())} aggregates, {int(no_tests.sum())} without testing data)."
    )
    return valid, rejected


def find_zero_outcome_countries(valid: pd.DataFrame) -> Tuple[str, ...]:
    """Countries reporting zero hospitalizations and zero deaths."""
    both_zero = (valid[HOSPITALIZATIONS] == 0) & (valid[DEATHS] == 0)
    return tuple(str(country) for country in valid.loc[both_zero, "country"])


def check_zero_outcomes(valid: pd.DataFrame, policy: ZeroOutcomePolicy = "warn") -> Tuple[str, ...]:
    """Surface zero-outcome countries without changing ``valid``.

    Under ``"warn"`` the rows are kept and a `ZeroOutcomeAnomaly` warning is
    emitted; under ``"raise"`` a `ZeroOutcomeError` is raised instead.
    """
    countries = find_zero_outcome_countries(valid)
    if not countries:
        return countries
    if policy == "raise":
        raise ZeroOutcomeError(countries)
    print(f"[cohorts] WARNING: zero hospitalizations and zero deaths for {', '.join(countries)}.")
    warnings.warn(ZeroOutcomeAnomaly(countries), stacklevel=2)
    return countries


def build_cohorts(valid: pd.DataFrame) -> Tuple[AnalysisCohort, AnalysisCohort]:
    """Split the validated base into the hospitalization and death cohorts.

    Each cohort drops its own zero-outcome rows independently of the other.
    """
    return (
        _outcome_cohort(valid, "hospitalizations", HOSPITALIZATIONS),
        _outcome_cohort(valid, "deaths", DEATHS),
    )


def apply_cohort_filter(summaries: pd.DataFrame, config: Optional[AnalysisConfig] = None) -> CohortSelection:
    """Run every filter step and return the validated base with both cohorts."""
    cfg = config or AnalysisConfig()
    cfg.validate()

    valid, rejected = filter_summaries(summaries, excluded=cfg.excluded_locations)
    anomalies = check_zero_outcomes(valid, cfg.zero_outcome_policy)
    hospitalizations, deaths = build_cohorts(valid)
    return CohortSelection(
        valid=valid,
        rejected=rejected,
        anomalies=anomalies,
        hospitalizations=hospitalizations,
        deaths=deaths,
    )


def _outcome_cohort(valid: pd.DataFrame, name: str, outcome_field: str) -> AnalysisCohort:
    outcome = valid[outcome_field]
    zero = outcome == 0
    no_data = outcome == NO_DATA

    excluded: Dict[str, str] = {}
    for country in valid.loc[zero, "country"]:
        excluded[str(country)] = f"zero {name}"
    for country in valid.loc[no_data, "country"]:
        excluded[str(country)] = f"no {name} data"

    columns = list(COHORT_BASE_COLUMNS) + [outcome_field]
    frame = valid.loc[~(zero | no_data), columns].reset_index(drop=True)
    print(f"[cohorts] {name} cohort: {len(frame)} countries ({len(excluded)} excluded).")
    return AnalysisCohort(name=name, outcome_field=outcome_field, frame=frame, excluded=excluded)


__all__ = [
    "REASON_AGGREGATE",
    "REASON_NO_TESTS",
    "apply_cohort_filter",
    "build_cohorts",
    "check_zero_outcomes",
    "filter_summaries",
    "find_zero_outcome_countries",
]
