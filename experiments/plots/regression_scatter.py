"""Scatter of an outcome rate against the testing rate, with the fitted line."""

from __future__ import annotations

from typing import Optional

import numpy as np
import plotly.express as px
import plotly.graph_objects as go

from src.cohorts.records import AnalysisCohort
from src.regression.records import RegressionResult
from .save_config import PlotSaveDestinations


def build_outcome_figure(cohort: AnalysisCohort, result: RegressionResult) -> go.Figure:
    df = cohort.frame
    fig = px.scatter(
        df,
        x=result.predictor,
        y=result.outcome,
        hover_name="country",
        title=f"{cohort.name.capitalize()} per 100k vs. tests per 100k (R²={result.r_squared:.3f}, p={result.p_value:.3g})",
        labels={result.predictor: "Tests per 100k", result.outcome: f"{cohort.name.capitalize()} per 100k"},
    )
    x_line = np.linspace(float(df[result.predictor].min()), float(df[result.predictor].max()), 2)
    fig.add_trace(
        go.Scatter(
            x=x_line,
            y=result.intercept + result.slope * x_line,
            mode="lines",
            name="OLS fit",
        )
    )
    return fig


def plot_outcome_regression(
    cohort: AnalysisCohort,
    result: RegressionResult,
    save_to: Optional[PlotSaveDestinations] = None,
) -> go.Figure:
    """Draw the cohort scatter and either save it or open it in the browser."""
    fig = build_outcome_figure(cohort, result)

    if save_to:
        save_to.ensure_dir()
        if save_to.save_static:
            fig.write_image(str(save_to.png_path), engine="kaleido")
        if save_to.save_html:
            fig.write_html(str(save_to.html_path), include_plotlyjs="cdn", full_html=True)
        print(f"[report] Saved {cohort.name} figure → {save_to.directory / save_to.slug}")
    else:
        fig.show()
    return fig
