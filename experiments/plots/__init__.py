"""Plotting utilities for regression results."""

from .regression_scatter import build_outcome_figure, plot_outcome_regression
from .save_config import PlotSaveConfig, PlotSaveDestinations

__all__ = [
    "build_outcome_figure",
    "plot_outcome_regression",
    "PlotSaveConfig",
    "PlotSaveDestinations",
]
