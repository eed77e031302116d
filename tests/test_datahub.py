"""Tests for the datahub loader, projection, and download helpers."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import sys

import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.datahub.config import default_source_path
from src.datahub.download import download_owid
from src.datahub.io import (
    cache_record,
    download_stream,
    metadata_path,
    needs_download,
    read_metadata,
    sha256sum,
    write_metadata,
)
from src.datahub.loader import iter_observations, load_observations
from src.datahub.observation import RawObservation
from src.datahub.pipeline import load_projected, resolve_source
from src.datahub.projection import project_columns
from src.errors import DataSourceError, SchemaError


HEADER = "iso_code,continent,location,date,total_tests,weekly_hosp_admissions,total_deaths,population,new_cases"


# ---------------------------------------------------------------------------
# Helper fixtures and utilities


def _write_csv(tmp_path: Path, lines: list[str], header: str = HEADER, name: str = "owid.csv") -> Path:
    path = tmp_path / name
    path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
    return path


def _sample_csv(tmp_path: Path) -> Path:
    return _write_csv(
        tmp_path,
        [
            "NAM,Africa,Namibia,2021-01-01,100,,0,2500000,3",
            "NAM,Africa,Namibia,2021-01-08,,12,1,2500000,",
            "FRA,Europe,France,2021-01-01,5000,300,,67000000,100",
        ],
    )


# ---------------------------------------------------------------------------
# Loader tests


def test_load_observations_coerces_types(tmp_path: Path) -> None:
    frame = load_observations(_sample_csv(tmp_path))

    assert len(frame) == 3
    assert pd.api.types.is_datetime64_any_dtype(frame["date"])
    for column in ("total_tests", "weekly_hosp_admissions", "total_deaths", "population"):
        assert frame[column].dtype == np.float64
    assert frame.loc[0, "date"] == pd.Timestamp("2021-01-01")
    assert frame.loc[0, "iso_code"] == "NAM"


def test_load_observations_keeps_missing_distinct_from_zero(tmp_path: Path) -> None:
    frame = load_observations(_sample_csv(tmp_path))

    assert frame.loc[0, "total_deaths"] == 0.0
    assert pd.isna(frame.loc[2, "total_deaths"])
    assert pd.isna(frame.loc[0, "weekly_hosp_admissions"])
    assert pd.isna(frame.loc[1, "total_tests"])


def test_load_observations_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DataSourceError):
        load_observations(tmp_path / "absent.csv")


def test_load_observations_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(DataSourceError):
        load_observations(path)


def test_load_observations_rejects_extra_fields(tmp_path: Path) -> None:
    path = _write_csv(
        tmp_path,
        ["Chile,2021-01-01,10", "Peru,2021-01-02,10,99,100"],
        header="location,date,population",
    )
    with pytest.raises(DataSourceError):
        load_observations(path)


def test_load_observations_rejects_short_rows(tmp_path: Path) -> None:
    path = _write_csv(
        tmp_path,
        ["Chile,2021-01-01,10,1,1,100", "Chile,2021-01-02,20"],
        header="location,date,total_tests,weekly_hosp_admissions,total_deaths,population",
    )
    with pytest.raises(DataSourceError, match="fewer than 6 fields"):
        load_observations(path)


def test_load_observations_accepts_trailing_blank_cells(tmp_path: Path) -> None:
    path = _write_csv(
        tmp_path,
        ["Chile,2021-01-01,10,,,"],
        header="location,date,total_tests,weekly_hosp_admissions,total_deaths,population",
    )
    frame = load_observations(path)
    assert frame.loc[0, "total_tests"] == 10.0
    assert frame[["weekly_hosp_admissions", "total_deaths", "population"]].isna().to_numpy().all()


def test_load_observations_rejects_bad_dates(tmp_path: Path) -> None:
    path = _write_csv(tmp_path, ["CHL,South America,Chile,2021-13-45,1,1,1,19000000,1"])
    with pytest.raises(DataSourceError, match="date"):
        load_observations(path)


def test_load_observations_rejects_missing_dates(tmp_path: Path) -> None:
    path = _write_csv(tmp_path, ["CHL,South America,Chile,,1,1,1,19000000,1"])
    with pytest.raises(DataSourceError, match="date"):
        load_observations(path)


def test_load_observations_rejects_non_numeric(tmp_path: Path) -> None:
    path = _write_csv(tmp_path, ["CHL,South America,Chile,2021-01-01,lots,1,1,19000000,1"])
    with pytest.raises(DataSourceError, match="total_tests"):
        load_observations(path)


def test_load_observations_ignores_unused_columns(tmp_path: Path) -> None:
    path = _write_csv(tmp_path, ["CHL,South America,Chile,2021-01-01,1,1,1,19000000,not-a-number"])
    frame = load_observations(path)
    assert frame.loc[0, "new_cases"] == "not-a-number"


# ---------------------------------------------------------------------------
# Projection tests


def test_project_columns_renames_and_orders(tmp_path: Path) -> None:
    projected = project_columns(load_observations(_sample_csv(tmp_path)))

    assert list(projected.columns) == [
        "country",
        "date",
        "total_tests",
        "weekly_hosp_admissions",
        "total_deaths",
        "population",
    ]
    assert projected["country"].tolist() == ["Namibia", "Namibia", "France"]


def test_project_columns_does_not_mutate_input(tmp_path: Path) -> None:
    raw = load_observations(_sample_csv(tmp_path))
    before = raw.copy()
    project_columns(raw)
    pd.testing.assert_frame_equal(raw, before)


def test_project_columns_reports_every_missing_column() -> None:
    frame = pd.DataFrame({"location": ["Chile"], "date": [pd.Timestamp("2021-01-01")]})
    with pytest.raises(SchemaError) as excinfo:
        project_columns(frame)
    assert set(excinfo.value.missing) == {"total_tests", "weekly_hosp_admissions", "total_deaths", "population"}


def test_load_projected_round_trip(tmp_path: Path) -> None:
    projected = load_projected(_sample_csv(tmp_path))
    assert "location" not in projected.columns
    assert len(projected) == 3


def test_iter_observations_maps_nan_to_none(tmp_path: Path) -> None:
    observations = list(iter_observations(load_projected(_sample_csv(tmp_path))))

    assert all(isinstance(obs, RawObservation) for obs in observations)
    first = observations[0]
    assert first.country == "Namibia"
    assert first.date == date(2021, 1, 1)
    assert first.total_tests == 100.0
    assert first.weekly_hosp_admissions is None
    assert first.total_deaths == 0.0
    assert observations[1].total_tests is None


# ---------------------------------------------------------------------------
# IO and download tests


def test_metadata_round_trip(tmp_path: Path) -> None:
    target = tmp_path / "table.csv"
    meta = metadata_path(target)
    assert meta.name == "table.csv.meta.json"

    write_metadata(meta, {"sha256": "abc"})
    assert read_metadata(meta) == {"sha256": "abc"}


def test_read_metadata_tolerates_corruption(tmp_path: Path) -> None:
    meta = tmp_path / "broken.meta.json"
    meta.write_text("{not json", encoding="utf-8")
    assert read_metadata(meta) == {}
    assert read_metadata(tmp_path / "missing.meta.json") == {}

    meta.write_text("[1, 2]", encoding="utf-8")
    assert read_metadata(meta) == {}


def test_needs_download_checks_url_and_checksum(tmp_path: Path) -> None:
    url = "https://example.org/owid.csv"
    target = tmp_path / "table.csv"
    assert needs_download(target, {}, url) is True

    target.write_text("a,b\n1,2\n", encoding="utf-8")
    # A hand-placed copy without a sidecar is trusted.
    assert needs_download(target, {}, url) is False

    recorded = cache_record(url, sha256sum(target))
    assert needs_download(target, recorded, url) is False
    assert needs_download(target, recorded, "https://mirror.example.org/owid.csv") is True
    assert needs_download(target, cache_record(url, "0" * 64), url) is True


class _FakeResponse:
    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def raise_for_status(self) -> None:
        return None

    def iter_content(self, chunk_size: int) -> list[bytes]:
        return self._chunks


def test_download_stream_returns_digest_of_written_bytes(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    chunks = [b"location,date\n", b"", b"Chile,2021-01-01\n"]
    monkeypatch.setattr("src.datahub.io.requests.get", lambda url, stream, timeout: _FakeResponse(chunks))

    dest = tmp_path / "owid" / "table.csv"
    digest = download_stream("https://example.org/owid.csv", dest)

    assert dest.read_bytes() == b"location,date\nChile,2021-01-01\n"
    assert digest == sha256sum(dest)
    assert list(dest.parent.glob("*.part")) == []


def test_download_owid_writes_metadata(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[str] = []

    def fake_download(url: str, dest: Path) -> str:
        calls.append(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(HEADER + "\n", encoding="utf-8")
        return sha256sum(dest)

    monkeypatch.setattr("src.datahub.download.download_stream", fake_download)

    target = download_owid(tmp_path, url="https://example.org/owid.csv")
    assert target == default_source_path(tmp_path)
    meta = json.loads(metadata_path(target).read_text())
    assert meta["url"] == "https://example.org/owid.csv"
    assert meta["sha256"] == sha256sum(target)
    assert "downloaded_at" in meta

    # A verified copy is reused unless forced or fetched from elsewhere.
    download_owid(tmp_path, url="https://example.org/owid.csv")
    assert len(calls) == 1
    download_owid(tmp_path, force=True, url="https://example.org/owid.csv")
    assert len(calls) == 2
    download_owid(tmp_path, url="https://mirror.example.org/owid.csv")
    assert calls[-1] == "https://mirror.example.org/owid.csv"
    assert json.loads(metadata_path(target).read_text())["url"] == "https://mirror.example.org/owid.csv"


def test_download_owid_wraps_failures(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def failing_download(url: str, dest: Path) -> str:
        raise ConnectionError("offline")


    monkeypatch.setattr("src.datahub.download.download_stream", failing_download)
    with pytest.raises(RuntimeError):
        download_owid(tmp_path)


def test_resolve_source_prefers_explicit_path(tmp_path: Path) -> None:
    explicit = tmp_path / "mine.csv"
    assert resolve_source(explicit, raw_root=tmp_path) == explicit

    with pytest.raises(FileNotFoundError):
        resolve_source(None, raw_root=tmp_path)

    cached = default_source_path(tmp_path)
    cached.parent.mkdir(parents=True)
    cached.write_text(HEADER + "\n", encoding="utf-8")
    assert resolve_source(None, raw_root=tmp_path) == cached
