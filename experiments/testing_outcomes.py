from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from src.cohorts import (
    AnalysisCohort,
    AnalysisConfig,
    CohortSelection,
    apply_cohort_filter,
    find_population_mismatches,
    normalize_rates,
    summarize_countries,
    validate_population,
)
from src.datahub import load_projected
from src.datahub.loader import SourceLike
from src.errors import InsufficientDataError, InvalidPopulationError
from src.regression import RegressionResult, fit_outcome_regression


@dataclass(frozen=True, eq=False)
class OutcomeReport:
    """Everything the testing/outcomes analysis produces for one source table."""

    n_observations: int
    summaries: pd.DataFrame
    selection: CohortSelection
    cohorts: Dict[str, AnalysisCohort]
    results: Dict[str, RegressionResult]
    failures: Dict[str, str]
    population_mismatches: Dict[str, Tuple[float, ...]] = field(default_factory=dict)


def run_testing_outcomes(source: SourceLike, config: Optional[AnalysisConfig] = None) -> OutcomeReport:
    """Load ``source`` and run every stage through both regressions.

    Gate failures (source, schema, population) abort before any rate is
    computed. Normalization and regression failures only cost the affected
    cohort; the other cohort's result is still reported.
    """
    cfg = config or AnalysisConfig()
    cfg.validate()
    print("[report] Starting testing/outcomes pipeline.")

    frame = load_projected(source)
    mismatches: Dict[str, Tuple[float, ...]] = {}
    if cfg.allow_inconsistent_population:
        mismatches = find_population_mismatches(frame)
        if mismatches:
            print(
                f"[cohorts] WARNING: population varies for {len(mismatches)} country(ies) "
                f"({', '.join(mismatches)}); per-100k rates for them use the earliest value."
            )
    else:
        validate_population(frame)

    summaries = summarize_countries(frame)
    selection = apply_cohort_filter(summaries, cfg)

    cohorts: Dict[str, AnalysisCohort] = {}
    results: Dict[str, RegressionResult] = {}
    failures: Dict[str, str] = {}
    for cohort in selection.cohorts:
        try:
            normalized = normalize_rates(cohort)
            cohorts[cohort.name] = normalized
            results[cohort.name] = fit_outcome_regression(normalized)
        except (InvalidPopulationError, InsufficientDataError) as exc:
            failures[cohort.name] = f"{type(exc).__name__}: {exc}"
            print(f"[regression] Skipping {cohort.name}: {exc}")

    print(f"[report] Finished ({len(results)} regression(s), {len(failures)} failure(s)).")
    return OutcomeReport(
        n_observations=len(frame),
        summaries=summaries,
        selection=selection,
        cohorts=cohorts,
        results=results,
        failures=failures,
        population_mismatches=mismatches,
    )


def results_frame(report: OutcomeReport) -> pd.DataFrame:
    """One row per cohort: the fitted statistics, or the error that prevented them."""
    rows: List[Dict[str, object]] = []
    for cohort in report.selection.cohorts:
        row: Dict[str, object] = {"cohort": cohort.name}
        result = report.results.get(cohort.name)
        if result is not None:
            row.update(asdict(result))
        row["error"] = report.failures.get(cohort.name)
        rows.append(row)
    return pd.DataFrame(rows)


def rejected_frame(report: OutcomeReport) -> pd.DataFrame:
    """Every location dropped along the way, with the stage that dropped it."""
    rows = [
        {"country": country, "stage": "filter", "reason": reason}
        for country, reason in report.selection.rejected.items()
    ]
    for cohort in report.selection.cohorts:
        rows.extend(
            {"country": country, "stage": f"{cohort.name} cohort", "reason": reason}
            for country, reason in cohort.excluded.items()
        )
    return pd.DataFrame(rows, columns=["country", "stage", "reason"])


def export_report(report: OutcomeReport, directory: Path) -> List[Path]:
    """Write the summary table, exclusions, normalized cohorts and regressions as CSV."""
    directory.mkdir(parents=True, exist_ok=True)
    tables: Dict[str, pd.DataFrame] = {
        "country_summary": report.summaries,
        "rejected": rejected_frame(report),
        "regressions": results_frame(report),
    }
    for name, cohort in report.cohorts.items():
        tables[f"cohort_{name}"] = cohort.frame

    written: List[Path] = []
    for name, table in tables.items():
        path = directory / f"{name}.csv"
        table.to_csv(path, index=False)
        written.append(path)
    print(f"[report] Wrote {len(written)} tables → {directory}")
    return written


__all__ = ["OutcomeReport", "export_report", "rejected_frame", "results_frame", "run_testing_outcomes"]
