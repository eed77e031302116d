from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Union

import pandas as pd

from src.errors import DataSourceError

from .config import DATE_COLUMN, DATE_FORMAT, NUMERIC_COLUMNS
from .observation import RawObservation

SourceLike = Union[str, Path]


def load_observations(source: SourceLike) -> pd.DataFrame:
    """Read the raw per-country, per-date table and coerce the columns the pipeline uses.

    Empty cells become ``NaN``; they are never filled with zero. Rows with
    more or fewer fields than the header are rejected. Columns the pipeline
    does not use are kept as strings.
    """
    try:
        # No NA parsing here: blank cells stay "" so that only the padding of
        # short rows shows up as NaN.
        frame = pd.read_csv(source, dtype=str, keep_default_na=False)
    except FileNotFoundError as exc:
        raise DataSourceError(f"Source not found: {source}") from exc
    except pd.errors.EmptyDataError as exc:
        raise DataSourceError(f"Source is empty: {source}") from exc
    except pd.errors.ParserError as exc:
        raise DataSourceError(f"Malformed rows in {source}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DataSourceError(f"Cannot read {source}: {exc}") from exc

    short_rows = frame.isna().any(axis=1)
    if short_rows.any():
        # +2: one for the header, one for 1-based line numbers.
        lines = (frame.index[short_rows] + 2).tolist()[:5]
        raise DataSourceError(
            f"Rows with fewer than {len(frame.columns)} fields in {source} (lines {lines})"
        )
    frame = frame.mask(frame == "")

    if DATE_COLUMN in frame.columns:
        frame[DATE_COLUMN] = _coerce_dates(frame[DATE_COLUMN], source)
    for column in NUMERIC_COLUMNS:
        if column in frame.columns:
            frame[column] = _coerce_numeric(frame[column], source)

    print(f"[datahub] Loaded {len(frame)} rows × {len(frame.columns)} columns from {source}")
    return frame


def iter_observations(frame: pd.DataFrame) -> Iterator[RawObservation]:
    """Yield immutable records from a projected table, mapping NaN to None."""
    for row in frame.itertuples(index=False):
        yield RawObservation(
            country=str(row.country),
            date=pd.Timestamp(row.date).date(),
            total_tests=_optional_float(row.total_tests),
            weekly_hosp_admissions=_optional_float(row.weekly_hosp_admissions),
            total_deaths=_optional_float(row.total_deaths),
            population=_optional_float(row.population),
        )


def _coerce_dates(values: pd.Series, source: SourceLike) -> pd.Series:
    if values.isna().any():
        rows = values.index[values.isna()].tolist()[:5]
        raise DataSourceError(f"Missing '{values.name}' values in {source} (rows {rows})")
    parsed = pd.to_datetime(values, format=DATE_FORMAT, errors="coerce")
    bad = parsed.isna()
    if bad.any():
        samples = values[bad].unique().tolist()[:5]
        raise DataSourceError(f"Unparseable '{values.name}' values in {source}: {samples}")
    return parsed


def _coerce_numeric(values: pd.Series, source: SourceLike) -> pd.Series:
    parsed = pd.to_numeric(values, errors="coerce").astype("float64")
    bad = values.notna() & parsed.isna()
    if bad.any():
        samples = values[bad].unique().tolist()[:5]
        raise DataSourceError(f"Non-numeric '{values.name}' values in {source}: {samples}")
    return parsed


def _optional_float(value: object) -> Optional[float]:
    if pd.isna(value):
        return None
    return float(value)  # type: ignore[arg-type]
