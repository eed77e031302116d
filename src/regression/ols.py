"""Ordinary least squares of an outcome rate on the testing rate."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import stats
from sklearn.linear_model import LinearRegression
from sklearn.metrics import r2_score

from src.cohorts.records import AnalysisCohort, rate_column
from src.errors import InsufficientDataError

from .helpers import column_array, resolve_rate_field
from .records import RegressionResult


@dataclass
class OutcomeRegressionConfig:
    predictor: str = rate_column("tests_total")
    # Slope and intercept leave n - 2 degrees of freedom; the t test needs at least one.
    min_observations: int = 3

    def validate(self) -> None:
        if self.min_observations < 3:
            raise ValueError("min_observations must be at least 3.")


class OutcomeRegression:
    """Simple linear regression (one predictor, with intercept) over a normalized cohort."""

    def __init__(self, config: Optional[OutcomeRegressionConfig] = None) -> None:
        self.config = config or OutcomeRegressionConfig()
        self.config.validate()

    def fit(self, cohort: AnalysisCohort, outcome_field: Optional[str] = None) -> RegressionResult:
        """Fit ``<outcome>_per_100k ~ tests_per_100k`` and report slope, intercept, p-value and R²."""
        predictor = self.config.predictor
        outcome = resolve_rate_field(outcome_field or cohort.outcome_field)
        n_obs = len(cohort.frame)
        if n_obs < self.config.min_observations:
            raise InsufficientDataError(
                f"Cohort '{cohort.name}' has {n_obs} row(s); at least {self.config.min_observations} are required."
            )

        x = column_array(cohort.frame, predictor)
        y = column_array(cohort.frame, outcome)
        if np.ptp(x) == 0:
            raise InsufficientDataError(f"'{predictor}' is constant in cohort '{cohort.name}'; slope is undefined.")
        if np.ptp(y) == 0:
            # r2_score reports a perfect fit for a constant target.
            raise InsufficientDataError(f"'{outcome}' is constant in cohort '{cohort.name}'; no variance to explain.")

        X = x.reshape(-1, 1)
        model = LinearRegression(fit_intercept=True)
        model.fit(X, y)
        fitted = model.predict(X)

        slope = float(model.coef_[0])
        intercept = float(model.intercept_)
        dof = n_obs - 2
        residuals = y - fitted
        sxx = float(np.sum((x - x.mean()) ** 2))
        std_err = math.sqrt(float(residuals @ residuals) / dof / sxx)

        result = RegressionResult(
            outcome=outcome,
            predictor=predictor,
            slope=slope,
            intercept=intercept,
            p_value=_two_sided_p_value(slope, std_err, dof),
            r_squared=float(r2_score(y, fitted)),
            std_err=std_err,
            n_observations=n_obs,
        )
        print(
            f"[regression] {cohort.name}: slope={result.slope:.6g} intercept={result.intercept:.6g} "
            f"p={result.p_value:.3g} R²={result.r_squared:.3f} (n={n_obs})"
        )
        return result


def fit_outcome_regression(
    cohort: AnalysisCohort,
    outcome_field: Optional[str] = None,
    config: Optional[OutcomeRegressionConfig] = None,
) -> RegressionResult:
    """Fit a fresh `OutcomeRegression` and return its result in one call."""
    return OutcomeRegression(config).fit(cohort, outcome_field)


def _two_sided_p_value(slope: float, std_err: float, dof: int) -> float:
    if std_err == 0:
        # Residuals vanish: any nonzero slope is exact.
        return 0.0 if slope != 0 else 1.0
    t_stat = slope / std_err
    return float(2.0 * stats.t.sf(abs(t_stat), dof))


__all__ = ["OutcomeRegression", "OutcomeRegressionConfig", "fit_outcome_regression"]
