# cypred/workflows/submission.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from cypred import logs
from cypred.config.app_config import AppConfig
from cypred.data.records import Prediction
from cypred.observability.instrumentation import Instrumentation
from cypred.pipeline.pipeline import SubmissionPipeline
from cypred.training.engines.registry import ModelRegistry
from cypred.training.orchestrator import ProgressCallback
from cypred.training.run import TrainingRun


@dataclass(frozen=True)
class SubmissionResult:
    run: TrainingRun
    predictions: Tuple[Prediction, ...]
    output: Path


def build_submission_pipeline(
    cfg: AppConfig | None = None,
    registry: ModelRegistry | None = None,
) -> SubmissionPipeline:
    if cfg is None:
        cfg = AppConfig.load()
    return SubmissionPipeline(cfg=cfg, registry=registry, inst=Instrumentation())


def run_compare(
    train_path: str | Path,
    *,
    pipeline: SubmissionPipeline,
    on_progress: Optional[ProgressCallback] = None,
) -> TrainingRun:
    """Load training data from disk and train every registered model."""
    pipeline.load_training_data(Path(train_path).read_text(encoding="utf-8-sig"))
    return pipeline.start_training(on_progress)


def run_submission(
    train_path: str | Path,
    test_path: str | Path,
    output: str | Path | None = None,
    *,
    model: str | None = None,
    pipeline: SubmissionPipeline,
    on_progress: Optional[ProgressCallback] = None,
) -> SubmissionResult:
    """
    Offline workflow: train.csv + test.csv -> submission.csv
    """
    cfg = pipeline.ctx.cfg
    output = Path(output) if output is not None else Path(cfg.io.submission_file)

    logs.info(f"[Workflow] START train={train_path} test={test_path} out={output}")

    run_compare(train_path, pipeline=pipeline, on_progress=on_progress)
    pipeline.load_test_data(Path(test_path).read_text(encoding="utf-8-sig"))

    if model is not None:
        pipeline.select_primary(model)

    predictions = pipeline.generate_predictions()
    pipeline.export_submission(output)

    logs.info(f"[Workflow] DONE primary={pipeline.run.primary} rows={len(predictions)}")
    return SubmissionResult(run=pipeline.run, predictions=predictions, output=output)
