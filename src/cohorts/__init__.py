"""Validation, summarization and cohort construction for the testing/outcomes analysis."""

from .config import CONTINENTS, NO_DATA, PER_CAPITA_SCALE, AnalysisConfig
from .filters import (
    apply_cohort_filter,
    build_cohorts,
    check_zero_outcomes,
    filter_summaries,
    find_zero_outcome_countries,
)
from .rates import normalize_rates
from .records import AnalysisCohort, CohortSelection, CountrySummary, rate_column
from .summary import summarize_countries, to_country_summaries
from .validation import find_population_mismatches, validate_population

__all__ = [
    "AnalysisCohort",
    "AnalysisConfig",
    "CONTINENTS",
    "CohortSelection",
    "CountrySummary",
    "NO_DATA",
    "PER_CAPITA_SCALE",
    "apply_cohort_filter",
    "build_cohorts",
    "check_zero_outcomes",
    "filter_summaries",
    "find_population_mismatches",
    "find_zero_outcome_countries",
    "normalize_rates",
    "rate_column",
    "summarize_countries",
    "to_country_summaries",
    "validate_population",
]
