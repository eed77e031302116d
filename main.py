from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from experiments.plots import PlotSaveConfig, plot_outcome_regression
from experiments.testing_outcomes import export_report, results_frame, run_testing_outcomes
from src.cohorts import AnalysisConfig
from src.cohorts.config import ZERO_OUTCOME_POLICIES
from src.datahub import prepare_source, resolve_source
from src.errors import AnalysisError

app = typer.Typer()


@app.command("datahub")
def datahub(
    force: bool = typer.Option(False, "--force", help="Redownload even if the file exists."),
    raw_root: Path = typer.Option(
        Path("data/raw"),
        "--raw-root",
        exists=False,
        file_okay=False,
        dir_okay=True,
        writable=True,
        help="Directory to store the raw OWID table.",
    ),
) -> None:
    """
    Download the Our World in Data COVID-19 table.
    """
    prepare_source(raw_root, force=force)


@app.command()
def analyze(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        help="CSV path or URL (defaults to the table downloaded by `datahub`).",
    ),
    raw_root: Path = typer.Option(Path("data/raw"), "--raw-root", help="Where `datahub` stored the table."),
    exclude: List[str] = typer.Option(
        [],
        "--exclude",
        help="Additional locations to drop alongside the continent aggregates (repeatable).",
    ),
    zero_outcome_policy: str = typer.Option(
        "warn",
        "--zero-outcome-policy",
        help="What to do with countries reporting zero hospitalizations and zero deaths (warn, raise).",
        show_default=True,
    ),
    allow_inconsistent_population: bool = typer.Option(
        False,
        "--allow-inconsistent-population",
        help="Proceed with a warning when a country reports more than one population.",
    ),
    export_dir: Optional[Path] = typer.Option(
        None,
        "--export-dir",
        help="Directory where summary, cohort and regression CSVs should be written.",
    ),
    plots_root: Optional[Path] = typer.Option(
        None,
        "--plots-root",
        help="Directory where plots should be saved (subfolders are created automatically).",
    ),
    plots_tag: Optional[str] = typer.Option(
        None,
        "--plots-tag",
        help="Folder suffix for this run (defaults to timestamp).",
    ),
    show_plots: bool = typer.Option(False, help="Open figures in the browser when --plots-root is not set."),
    save_static: bool = typer.Option(True, help="Write static PNG snapshots when saving plots."),
    save_html: bool = typer.Option(True, help="Write interactive HTML plots when saving."),
) -> None:
    """
    Regress hospitalization and death rates on testing rates, one row per country.
    """
    if zero_outcome_policy not in ZERO_OUTCOME_POLICIES:
        raise typer.BadParameter(
            f"Expected one of {', '.join(ZERO_OUTCOME_POLICIES)}.", param_hint="--zero-outcome-policy"
        )
    config = AnalysisConfig(
        extra_exclusions=tuple(exclude),
        zero_outcome_policy=zero_outcome_policy,  # type: ignore[arg-type]
        allow_inconsistent_population=allow_inconsistent_population,
    )

    try:
        report = run_testing_outcomes(resolve_source(source, raw_root), config)
    except (AnalysisError, FileNotFoundError) as exc:
        print(f"[report] Aborted: {exc}")
        raise typer.Exit(code=1) from exc

    print(results_frame(report).to_string(index=False))

    if export_dir:
        export_report(report, export_dir)

    save_config: Optional[PlotSaveConfig] = None
    if plots_root:
        tag = plots_tag or datetime.utcnow().strftime("%Y%m%d-%H%M%S")
        save_config = PlotSaveConfig(base_dir=plots_root, run_tag=tag, save_static=save_static, save_html=save_html)
        print(f"[plots] Saving figures under {save_config.run_dir}")
    if save_config or show_plots:
        for name, result in report.results.items():
            plot_outcome_regression(
                report.cohorts[name],
                result,
                save_to=save_config.for_cohort(name) if save_config else None,
            )


if __name__ == "__main__":
    app()
