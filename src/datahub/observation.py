from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class RawObservation:
    """One country on one date, as reported by the source table."""

    country: str
    date: date
    total_tests: Optional[float]
    weekly_hosp_admissions: Optional[float]
    total_deaths: Optional[float]
    population: Optional[float]
