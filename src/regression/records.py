"""Shared data records for regression outputs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RegressionResult:
    """Simple linear regression of an outcome rate on the testing rate."""

    outcome: str
    predictor: str
    slope: float
    intercept: float
    p_value: float
    r_squared: float
    std_err: float
    n_observations: int

    def is_significant(self, alpha: float = 0.05) -> bool:
        """True if the slope differs from zero at level ``alpha``."""
        if not 0 < alpha < 1:
            raise ValueError("alpha must fall within (0, 1).")
        return self.p_value < alpha
