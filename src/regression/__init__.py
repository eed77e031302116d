"""Regression of outcome rates on testing rates."""

from .ols import OutcomeRegression, OutcomeRegressionConfig, fit_outcome_regression
from .records import RegressionResult

__all__ = [
    "OutcomeRegression",
    "OutcomeRegressionConfig",
    "RegressionResult",
    "fit_outcome_regression",
]
