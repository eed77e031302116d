"""Static configuration for the OWID download and the raw table layout."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple, TypedDict


class OwidSourceConfig(TypedDict):
    url: str
    file_name: str
    folder_name: str


# Default directories used by the Typer CLI; callers may override these.
DEFAULT_RAW_ROOT = Path("data/raw")
DEFAULT_OUTPUT_ROOT = Path("data/analysis")

OWID_COVID: OwidSourceConfig = {
    "url": "https://covid.ourworldindata.org/data/owid-covid-data.csv",
    "file_name": "owid-covid-data.csv",
    "folder_name": "owid",
}

# ---------------------------------------------------------------------------
# Raw table layout.

# Source column -> pipeline column. Insertion order is the projected order.
SOURCE_COLUMNS: Dict[str, str] = {
    "location": "country",
    "date": "date",
    "total_tests": "total_tests",
    "weekly_hosp_admissions": "weekly_hosp_admissions",
    "total_deaths": "total_deaths",
    "population": "population",
}

NUMERIC_COLUMNS: Tuple[str, ...] = (
    "total_tests",
    "weekly_hosp_admissions",
    "total_deaths",
    "population",
)

DATE_COLUMN = "date"
DATE_FORMAT = "%Y-%m-%d"


def default_source_path(raw_root: Path = DEFAULT_RAW_ROOT) -> Path:
    """Location of the downloaded OWID CSV under ``raw_root``."""
    return raw_root / OWID_COVID["folder_name"] / OWID_COVID["file_name"]


__all__ = [
    "DATE_COLUMN",
    "DATE_FORMAT",
    "DEFAULT_OUTPUT_ROOT",
    "DEFAULT_RAW_ROOT",
    "NUMERIC_COLUMNS",
    "OWID_COVID",
    "OwidSourceConfig",
    "SOURCE_COLUMNS",
    "default_source_path",
]
