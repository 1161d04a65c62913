#!filepath: cypred/pipeline/pipeline.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

from cypred import logs
from cypred.config.app_config import AppConfig
from cypred.data.parser import parse_test_set, parse_training_set
from cypred.data.records import Prediction, TestRecord, TrainRecord
from cypred.data.store import StoreEvent
from cypred.export.submission import SubmissionExporter
from cypred.observability.instrumentation import Instrumentation
from cypred.pipeline.context import PipelineContext
from cypred.pipeline.state import PipelineStage
from cypred.prediction.generator import PredictionGenerator
from cypred.training.engines.registry import ModelRegistry, default_registry
from cypred.training.orchestrator import (
    ProgressCallback,
    TrainingOrchestrator,
    TrainingSession,
)
from cypred.training.run import TrainingRun


class SubmissionPipeline:
    """
    SubmissionPipeline = 调度器（Scheduler）

    The six commands the presentation layer issues. Each one either
    updates the context or raises a cypred.utils.errors error, leaving the
    last valid state in place.

    设计铁律：
    - PipelineStateMachine 决定命令是否合法
    - 上游替换 → 下游清空（不允许 stale）
    """

    def __init__(
        self,
        cfg: AppConfig | None = None,
        registry: ModelRegistry | None = None,
        inst: Instrumentation | None = None,
    ):
        cfg = cfg or AppConfig()
        inst = inst if inst is not None else Instrumentation()
        registry = registry if registry is not None else default_registry()

        self.ctx = PipelineContext(cfg=cfg, inst=inst)
        self.orchestrator = TrainingOrchestrator(registry, cfg.training, inst)
        self.generator = PredictionGenerator(registry, cfg.training)
        self.exporter = SubmissionExporter(cfg.io)

        self.ctx.store.subscribe(self._on_store_event)
        self.orchestrator.subscribe(self._on_run_published)

    # --------------------------------------------------
    # read-only views
    # --------------------------------------------------
    @property
    def training_set(self) -> Optional[Tuple[TrainRecord, ...]]:
        return self.ctx.store.training_set

    @property
    def test_set(self) -> Optional[Tuple[TestRecord, ...]]:
        return self.ctx.store.test_set

    @property
    def run(self) -> Optional[TrainingRun]:
        return self.orchestrator.current_run

    @property
    def predictions(self) -> Optional[Tuple[Prediction, ...]]:
        return self.ctx.predictions

    @property
    def stage(self) -> PipelineStage:
        return self.ctx.state.stage

    @property
    def progress(self) -> int:
        return self.ctx.progress

    def preview(self, n: int = 5) -> pd.DataFrame:
        """First n training records, for the data preview table."""
        cols = self.ctx.cfg.io.columns
        records = (self.training_set or ())[:n]
        return pd.DataFrame(
            [(r.identifier, r.feature_payload, r.label) for r in records],
            columns=[cols.identifier, cols.feature_payload, cols.label],
        )

    # --------------------------------------------------
    # commands
    # --------------------------------------------------
    def load_training_data(self, text: str) -> Tuple[TrainRecord, ...]:
        # parse first: a parse error leaves the old snapshot in place
        records = parse_training_set(text, self.ctx.cfg.io)
        self.ctx.store.set_training_set(records)
        return records

    def load_test_data(self, text: str) -> Tuple[TestRecord, ...]:
        records = parse_test_set(text, self.ctx.cfg.io)
        self.ctx.store.set_test_set(records)
        return records

    def begin_training(self, on_progress: ProgressCallback | None = None) -> TrainingSession:
        """
        Steppable training: the caller drives session.advance().
        """
        self.ctx.state.require_trainable()
        self.ctx.progress = 0

        def _progress(pct: int) -> None:
            self.ctx.progress = pct
            if on_progress is not None:
                on_progress(pct)

        return self.orchestrator.start(self.ctx.store.training_set, _progress)

    def start_training(self, on_progress: ProgressCallback | None = None) -> Optional[TrainingRun]:
        return self.begin_training(on_progress).run()

    def select_primary(self, model_id: str) -> TrainingRun:
        previous = self.run.primary if self.run is not None else None
        run = self.orchestrator.select_primary(model_id)

        if run.primary != previous:
            self.ctx.predictions = None
            self.ctx.state.primary_changed()
        return run

    def generate_predictions(self) -> Tuple[Prediction, ...]:
        self.ctx.state.require_predictable()

        with self.ctx.inst.timer("predict"):
            predictions = self.generator.predict(self.run, self.ctx.store.test_set)

        self.ctx.predictions = predictions
        self.ctx.state.predicted()
        return predictions

    def export_submission(self, path: str | Path | None = None) -> str:
        """
        Serialized submission text; also written to `path` when given.
        """
        self.ctx.state.require_exportable()

        text = self.exporter.serialize(self.ctx.predictions)
        if path is not None:
            self.exporter.write(self.ctx.predictions, path)

        self.ctx.state.exported()
        return text

    # --------------------------------------------------
    # invalidation
    # --------------------------------------------------
    def _on_store_event(self, event: StoreEvent) -> None:
        if event is StoreEvent.TRAINING_REPLACED:
            self.orchestrator.invalidate()
            self.ctx.predictions = None
            self.ctx.progress = 0
            self.ctx.state.training_loaded()
        elif event is StoreEvent.TEST_REPLACED:
            self.ctx.predictions = None
            self.ctx.state.test_data_loaded()
        logs.info(f"[SubmissionPipeline] {event.value} -> stage={self.stage.name}")

    def _on_run_published(self, run: TrainingRun) -> None:
        # a new run replaces the model the predictions came from
        self.ctx.predictions = None
        self.ctx.state.trained()
