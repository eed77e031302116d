"""Error taxonomy shared by every stage of the testing/outcomes pipeline."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple


class AnalysisError(Exception):
    """Marker base class for failures raised by the pipeline."""


class DataSourceError(AnalysisError, RuntimeError):
    """The raw CSV could not be read or its cells could not be coerced."""


class SchemaError(AnalysisError, ValueError):
    """Required source columns are absent."""

    def __init__(self, missing: Sequence[str], available: Sequence[str]) -> None:
        self.missing = tuple(missing)
        self.available = tuple(available)
        super().__init__(
            f"Missing required column(s): {', '.join(self.missing)}. Available: {list(self.available)}"
        )


class InconsistentPopulationError(AnalysisError, ValueError):
    """One or more countries report more than one population value."""

    def __init__(self, mismatches: Mapping[str, Tuple[float, ...]]) -> None:
        self.mismatches: Dict[str, Tuple[float, ...]] = dict(mismatches)
        details = "; ".join(f"{country}: {list(values)}" for country, values in self.mismatches.items())
        super().__init__(f"Population is not constant for {len(self.mismatches)} country(ies): {details}")

    @property
    def countries(self) -> Tuple[str, ...]:
        return tuple(self.mismatches)


class ZeroOutcomeAnomaly(UserWarning):
    """Countries with zero hospitalizations and zero deaths survived filtering."""

    def __init__(self, countries: Iterable[str]) -> None:
        self.countries = tuple(countries)
        super().__init__(
            "Countries report zero hospitalizations and zero deaths; inspect manually: "
            + ", ".join(self.countries)
        )


class ZeroOutcomeError(AnalysisError, ValueError):
    """Raised instead of `ZeroOutcomeAnomaly` under the strict policy."""

    def __init__(self, countries: Iterable[str]) -> None:
        self.countries = tuple(countries)
        super().__init__("Zero hospitalizations and zero deaths for: " + ", ".join(self.countries))


class InvalidPopulationError(AnalysisError, ValueError):
    """A cohort row has a non-positive or missing population estimate."""

    def __init__(self, countries: Iterable[str]) -> None:
        self.countries = tuple(countries)
        super().__init__("Population estimate must be positive for: " + ", ".join(self.countries))


class InsufficientDataError(AnalysisError, ValueError):
    """The cohort cannot support a slope-and-intercept regression."""


__all__ = [
    "AnalysisError",
    "DataSourceError",
    "InconsistentPopulationError",
    "InsufficientDataError",
    "InvalidPopulationError",
    "SchemaError",
    "ZeroOutcomeAnomaly",
    "ZeroOutcomeError",
]
