"""Collapse per-date observations into one summary row per country."""

from __future__ import annotations

from typing import List, Optional

import pandas as pd

from .config import NO_DATA
from .records import SUMMARY_COLUMNS, CountrySummary


def summarize_countries(frame: pd.DataFrame) -> pd.DataFrame:
    """Aggregate a projected observation table into `SUMMARY_COLUMNS`.

    Reduction policies (all ignore missing values):

    * ``total_tests`` and ``total_deaths`` are cumulative counters, reduced with
      ``max``. A country with no reported value gets `NO_DATA`, not zero.
    * ``weekly_hosp_admissions`` is a per-week quantity, reduced with ``sum``.
      A country with no reported value gets ``0.0``.
    * ``population_estimate`` is the population on the earliest-dated record.
    """
    ordered = frame.sort_values(["country", "date"], kind="mergesort")
    grouped = ordered.groupby("country", sort=True)

    # drop_duplicates keeps a missing population; groupby().first() would skip it.
    earliest_rows = ordered.drop_duplicates("country", keep="first").set_index("country")

    summary = pd.DataFrame(
        {
            "earliest_date": grouped["date"].min(),
            "latest_date": grouped["date"].max(),
            "population_estimate": earliest_rows["population"],
            "tests_total": grouped["total_tests"].max().fillna(NO_DATA),
            "deaths_total": grouped["total_deaths"].max().fillna(NO_DATA),
            "hospitalizations_total": grouped["weekly_hosp_admissions"].sum(min_count=0),
        }
    )
    summary.index.name = "country"
    summary = summary.reset_index().loc[:, list(SUMMARY_COLUMNS)]
    print(f"[cohorts] Summarized {len(frame)} observations into {len(summary)} countries.")
    return summary


def to_country_summaries(summary: pd.DataFrame) -> List[CountrySummary]:
    """Convert a summary table into immutable records."""
    records: List[CountrySummary] = []
    for row in summary.itertuples(index=False):
        records.append(
            CountrySummary(
                country=str(row.country),
                earliest_date=pd.Timestamp(row.earliest_date).date(),
                latest_date=pd.Timestamp(row.latest_date).date(),
                population_estimate=_optional_float(row.population_estimate),
                tests_total=float(row.tests_total),
                deaths_total=float(row.deaths_total),
                hospitalizations_total=float(row.hospitalizations_total),
            )
        )
    return records


def _optional_float(value: object) -> Optional[float]:
    if pd.isna(value):
        return None
    return float(value)  # type: ignore[arg-type]


__all__ = ["summarize_countries", "to_country_summaries"]
