"""Domain constants and run-time knobs for cohort construction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Literal, Tuple

ZeroOutcomePolicy = Literal["warn", "raise"]
ZERO_OUTCOME_POLICIES: Tuple[ZeroOutcomePolicy, ...] = ("warn", "raise")

# Continent-level aggregates published alongside countries in the OWID table.
# "Australia" is a country and stays in scope even though it is also a landmass.
CONTINENTS: FrozenSet[str] = frozenset(
    {
        "Africa",
        "Asia",
        "Europe",
        "North America",
        "Oceania",
        "South America",
    }
)

# Marker for "every value was missing" on max-reduced cumulative counters.
NO_DATA = float("-inf")

PER_CAPITA_SCALE = 100_000


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for `apply_cohort_filter` and the report runner."""

    extra_exclusions: Tuple[str, ...] = ()
    zero_outcome_policy: ZeroOutcomePolicy = "warn"
    allow_inconsistent_population: bool = False

    def validate(self) -> None:
        if self.zero_outcome_policy not in ZERO_OUTCOME_POLICIES:
            raise ValueError(
                f"zero_outcome_policy must be one of {ZERO_OUTCOME_POLICIES}, got {self.zero_outcome_policy!r}."
            )

    @property
    def excluded_locations(self) -> FrozenSet[str]:
        return CONTINENTS | frozenset(self.extra_exclusions)


__all__ = [
    "AnalysisConfig",
    "CONTINENTS",
    "NO_DATA",
    "PER_CAPITA_SCALE",
    "ZERO_OUTCOME_POLICIES",
    "ZeroOutcomePolicy",
]
