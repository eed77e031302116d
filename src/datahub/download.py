"""Download helper for the Our World in Data COVID-19 table."""

from __future__ import annotations

from pathlib import Path

from .config import OWID_COVID, default_source_path
from .io import cache_record, download_stream, metadata_path, needs_download, read_metadata, write_metadata


def download_owid(raw_root: Path, force: bool = False, url: str = OWID_COVID["url"]) -> Path:
    """
    Fetch the OWID CSV once and keep it under ``data/raw/owid``.

    Parameters
    ----------
    raw_root:
        Directory used to store raw data (default: ``data/raw``).
    force:
        If True, download again even when a verified copy exists. A copy fetched
        from a different ``url`` is always replaced.
    url:
        Override for the OWID endpoint (mirrors, pinned snapshots).

    Returns
    -------
    Path
        Location of the CSV on disk.
    """
    target = default_source_path(raw_root)
    meta_file = metadata_path(target)
    meta = read_metadata(meta_file)

    if not force and not needs_download(target, meta, url):
        print(f"[datahub] OWID table present at {target}; skipping download.")
        return target

    print(f"[datahub] Downloading OWID COVID-19 table from {url} ...")
    try:
        sha256 = download_stream(url, target)
    except Exception as exc:
        raise RuntimeError(
            "Failed to download the OWID COVID-19 table. "
            "Check your network connection or place the CSV manually under "
            f"{target.parent}."
        ) from exc

    write_metadata(meta_file, cache_record(url, sha256))
    print(f"[datahub] Saved OWID table → {target}")
    return target
