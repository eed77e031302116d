"""Where regression figures are written on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PlotSaveDestinations:
    """Resolved output paths for one figure."""

    directory: Path
    slug: str
    save_static: bool
    save_html: bool

    def ensure_dir(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    @property
    def png_path(self) -> Path:
        return self.directory / f"{self.slug}.png"

    @property
    def html_path(self) -> Path:
        return self.directory / f"{self.slug}.html"


@dataclass(frozen=True)
class PlotSaveConfig:
    """Groups every figure of one analysis run under ``base_dir/run_tag``."""

    base_dir: Path
    run_tag: str
    save_static: bool = True
    save_html: bool = True

    @property
    def run_dir(self) -> Path:
        return self.base_dir / self.run_tag

    def for_cohort(self, cohort_name: str) -> PlotSaveDestinations:
        return PlotSaveDestinations(
            directory=self.run_dir,
            slug=f"{cohort_name}_vs_tests",
            save_static=self.save_static,
            save_html=self.save_html,
        )


__all__ = ["PlotSaveConfig", "PlotSaveDestinations"]
