"""Cache bookkeeping for the raw OWID CSV: sidecar metadata, checksums, streamed fetch."""

from __future__ import annotations

import hashlib
import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

import requests

METADATA_SUFFIX = ".meta.json"
CHUNK_SIZE = 1024 * 1024


def metadata_path(target: Path) -> Path:
    """Sidecar JSON stored next to ``target`` (``foo.csv`` -> ``foo.csv.meta.json``)."""
    return target.with_name(target.name + METADATA_SUFFIX)


def sha256sum(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def cache_record(url: str, sha256: str) -> Dict[str, str]:
    """Metadata written beside a fresh download: where it came from, its digest, and when."""
    return {
        "url": url,
        "sha256": sha256,
        "downloaded_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }


def read_metadata(path: Path) -> Mapping[str, Any]:
    """Load the sidecar JSON, returning an empty mapping when absent, corrupt, or not an object."""
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return {}
    return payload if isinstance(payload, dict) else {}


def write_metadata(path: Path, payload: Mapping[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def needs_download(target: Path, metadata: Mapping[str, Any], url: str) -> bool:
    """Decide whether the cached CSV must be fetched again.

    A copy is reused only when it exists, was fetched from ``url`` and still
    matches its recorded checksum. A CSV placed by hand (no sidecar) is
    trusted as is.
    """
    if not target.exists():
        return True
    if not metadata:
        return False
    if metadata.get("url") != url:
        return True
    expected = metadata.get("sha256")
    return bool(expected) and sha256sum(target) != expected


def download_stream(url: str, dest: Path, timeout: int = 60) -> str:
    """Stream ``url`` into ``dest`` and return the SHA256 of the bytes written.

    The transfer goes to a ``.part`` file in the same directory; ``dest`` is
    replaced only after the last chunk arrives, so an interrupted download
    never clobbers a good cache.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    digest = hashlib.sha256()
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with tempfile.NamedTemporaryFile(delete=False, dir=dest.parent, suffix=".part") as tmp:
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        tmp.write(chunk)
                        digest.update(chunk)
            except BaseException:
                tmp.close()
                os.unlink(tmp.name)
                raise
    os.replace(tmp.name, dest)
    return digest.hexdigest()


__all__ = [
    "METADATA_SUFFIX",
    "cache_record",
    "download_stream",
    "metadata_path",
    "needs_download",
    "read_metadata",
    "sha256sum",
    "write_metadata",
]
