#!filepath: cypred/cli.py
import math
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from cypred import AppConfig, __version__, init_logging, logs
from cypred.training.engines.registry import default_registry
from cypred.training.run import TrainingRun
from cypred.utils.errors import PipelineError
from cypred.workflows.submission import (
    build_submission_pipeline,
    run_compare,
    run_submission,
)

app = typer.Typer(help="cypred: CYP3A4 inhibition prediction pipeline")

ConfigOption = typer.Option(None, "--config", "-c", help="YAML config path")
TrainFileArg = typer.Argument(..., exists=True, dir_okay=False, help="training CSV")


def _load_config(config: Optional[Path]) -> AppConfig:
    cfg = AppConfig.load(str(config) if config else None)
    init_logging(cfg.log)
    return cfg


def _fmt(value: float) -> str:
    return "nan" if math.isnan(value) else f"{value:.4f}"


def _metrics_table(run: TrainingRun) -> Table:
    frame = run.to_frame()
    metric_cols = [c for c in frame.columns if c not in ("model", "primary")]

    table = Table(title=f"Model comparison ({run.run_id})")
    table.add_column("Model")
    for col in metric_cols:
        table.add_column(col)

    # rows already ranked by RMSE
    for row in frame.itertuples(index=False):
        name = f"{row.model} *" if row.primary else row.model
        table.add_row(name, *(_fmt(getattr(row, c)) for c in metric_cols))
    return table


def _print_progress(pct: int) -> None:
    print(f"[blue]Training progress: {pct}%[/blue]")


def _report_run(run: TrainingRun) -> None:
    print(_metrics_table(run))
    if run.best() is not None:
        print(f"Lowest RMSE: [bold]{run.best()}[/bold]")
    for w in run.warnings:
        print(f"[yellow]{w.model_id} failed at {w.stage}: {escape(w.message)}[/yellow]")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def models():
    """
    列出已注册模型（声明顺序）
    """
    for model_id in default_registry().ids():
        print(model_id)


@app.command()
def compare(train: Path = TrainFileArg, config: Optional[Path] = ConfigOption):
    """
    Train and compare every registered model on TRAIN.
    """
    try:
        pipeline = build_submission_pipeline(_load_config(config))
        run = run_compare(train, pipeline=pipeline, on_progress=_print_progress)
    except PipelineError as e:
        logs.error(f"[CLI] {e}")
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    _report_run(run)


@app.command()
def run(
    train: Path = TrainFileArg,
    test: Path = typer.Argument(..., exists=True, dir_okay=False, help="test CSV"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="submission file"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="primary model id"),
    config: Optional[Path] = ConfigOption,
):
    """
    train.csv + test.csv -> submission.csv
    """
    try:
        pipeline = build_submission_pipeline(_load_config(config))
        result = run_submission(
            train,
            test,
            out,
            model=model,
            pipeline=pipeline,
            on_progress=_print_progress,
        )
    except PipelineError as e:
        logs.error(f"[CLI] {e}")
        print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    _report_run(result.run)
    print(
        f"[green]Wrote {len(result.predictions)} predictions "
        f"(primary={result.run.primary}) -> {result.output}[/green]"
    )


if __name__ == "__main__":
    app()

# python -m cypred.cli run train.csv test.csv -o submission.csv
