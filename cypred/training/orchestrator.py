# cypred/training/orchestrator.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from cypred import logs
from cypred.config.training_config import TrainingConfig
from cypred.data.records import TrainRecord
from cypred.observability.instrumentation import Instrumentation, NoOpInstrumentation
from cypred.training.engines.model_train_engine import FittedModel, ModelTrainEngine
from cypred.training.engines.registry import ModelRegistry
from cypred.training.holdout import HoldoutSplit, HoldoutSplitter
from cypred.training.run import ModelMetrics, TrainingRun, TrainingWarning
from cypred.utils.errors import (
    NoDataError,
    PredictionFailedError,
    TrainingFailedError,
    UnknownModelError,
)

ProgressCallback = Callable[[int], None]

# per-model failures that must not abort the comparison
_MODEL_FAILURES = (TrainingFailedError, PredictionFailedError)


class TrainingSession:
    """
    One in-flight pass over the registry, one model per advance().

    Semantics:
    - advance() trains + scores the next model and reports progress
    - a session superseded by a newer start() does no further work,
      fires no callbacks and never publishes its run
    - cancel() stops it; a cancelled session can not be resumed
    """

    def __init__(
        self,
        *,
        orchestrator: "TrainingOrchestrator",
        generation: int,
        split: HoldoutSplit,
        full_set: Sequence[TrainRecord],
        engines: List[tuple[str, ModelTrainEngine]],
        on_progress: Optional[ProgressCallback],
    ):
        self._orchestrator = orchestrator
        self.generation = generation
        self.run_id = f"run-{generation:04d}"
        self._split = split
        self._full_set = tuple(full_set)
        self._pending = list(engines)
        self._total = len(engines)
        self._on_progress = on_progress

        self._metrics: Dict[str, ModelMetrics] = {}
        self._fitted: Dict[str, FittedModel] = {}
        self._warnings: List[TrainingWarning] = []

        self.completed = 0
        self.progress = 0
        self.cancelled = False
        self.result: Optional[TrainingRun] = None

    # --------------------------------------------------
    # state
    # --------------------------------------------------
    @property
    def is_current(self) -> bool:
        return self._orchestrator.generation == self.generation

    @property
    def done(self) -> bool:
        return self.result is not None or self.cancelled or not self.is_current

    def cancel(self) -> None:
        if not self.done:
            logs.info(f"[TrainingSession] {self.run_id} cancelled at {self.progress}%")
        self.cancelled = True

    # --------------------------------------------------
    # stepping
    # --------------------------------------------------
    def advance(self) -> int:
        if self.done:
            return self.progress

        if self._pending:
            model_id, engine = self._pending.pop(0)
            self._train_one(model_id, engine)
            self.completed += 1

        # on_progress may start a newer run or cancel this one
        self.progress = self.completed * 100 // self._total if self._total else 100
        self._report()

        if not self._pending and self.is_current and not self.cancelled:
            self._finalize()

        return self.progress

    def run(self) -> Optional[TrainingRun]:
        """
        Drive to completion. None if superseded or cancelled.
        """
        while not self.done:
            self.advance()
        return self.result

    # --------------------------------------------------
    # internals
    # --------------------------------------------------
    def _report(self) -> None:
        if not self.is_current or self.cancelled:
            return
        inst = self._orchestrator.inst
        inst.progress.update("training", self.completed, self._total, "models")
        if self._on_progress is not None:
            self._on_progress(self.progress)

    def _train_one(self, model_id: str, engine: ModelTrainEngine) -> None:
        inst = self._orchestrator.inst
        split = self._split

        stage = "train"
        try:
            with inst.timer(f"train:{model_id}"):
                fitted = engine.train(split.fit)

            stage = "score"
            metrics = engine.score(fitted, split.holdout)
        except _MODEL_FAILURES as e:
            self._record_failure(model_id, stage, e)
            return

        self._metrics[model_id] = metrics
        self._fitted[model_id] = fitted

        if not self._orchestrator.cfg.refit_on_full_set or split.resubstitution:
            return

        # refit failure keeps the holdout-validated model
        try:
            with inst.timer(f"refit:{model_id}"):
                self._fitted[model_id] = engine.train(self._full_set)
        except _MODEL_FAILURES as e:
            self._record_failure(model_id, "refit", e)

    def _record_failure(self, model_id: str, stage: str, error: Exception) -> None:
        logs.warning(f"[TrainingOrchestrator] {model_id} failed at {stage}: {error}")
        self._warnings.append(TrainingWarning(model_id, stage, str(error)))

    def _finalize(self) -> None:
        inst = self._orchestrator.inst

        for model_id, m in self._metrics.items():
            inst.metrics.record_model(model_id, m)

        preferred = self._orchestrator.preferred_primary
        primary = preferred if preferred in self._fitted else None
        if primary is None and self._metrics:
            logs.warning(
                f"[TrainingOrchestrator] preferred primary {preferred!r} "
                f"not available; select one of {list(self._metrics)}"
            )

        run = TrainingRun(
            run_id=self.run_id,
            metrics=self._metrics,
            fitted=self._fitted,
            primary=primary,
            progress=self.progress,
            warnings=tuple(self._warnings),
        )
        self.result = run
        inst.progress.done("training")
        self._orchestrator._publish(self, run)


class TrainingOrchestrator:
    """
    TrainingOrchestrator

    Semantics:
    - owns the current TrainingRun
    - iterates registry models in declaration order
    - newest start() wins; older sessions are discarded
    - primary selection is an explicit choice, independent of ranking
    """

    def __init__(
        self,
        registry: ModelRegistry,
        cfg: TrainingConfig | None = None,
        inst: Instrumentation | None = None,
    ):
        self.registry = registry
        self.cfg = cfg or TrainingConfig()
        self.inst = inst if inst is not None else NoOpInstrumentation()
        self.splitter = HoldoutSplitter(self.cfg)

        self.generation = 0
        self.preferred_primary: str = self.cfg.primary_model
        self._current_run: Optional[TrainingRun] = None
        self._listeners: List[Callable[[TrainingRun], None]] = []

    def subscribe(self, listener: Callable[[TrainingRun], None]) -> None:
        """listener(run) fires each time a run is published."""
        self._listeners.append(listener)

    @property
    def current_run(self) -> Optional[TrainingRun]:
        return self._current_run

    # --------------------------------------------------
    # commands
    # --------------------------------------------------
    def start(
        self,
        training_set: Optional[Sequence[TrainRecord]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> TrainingSession:
        if not training_set:
            raise NoDataError("training set is empty; load training data first")

        self.generation += 1
        engines = self.registry.engines(self.cfg)

        logs.info(
            f"[TrainingOrchestrator] START run-{self.generation:04d} "
            f"records={len(training_set)} models={[m for m, _ in engines]}"
        )
        self.inst.reset_timeline()
        self.inst.progress.start("training", len(engines), "models")

        session = TrainingSession(
            orchestrator=self,
            generation=self.generation,
            split=self.splitter.split(training_set),
            full_set=training_set,
            engines=engines,
            on_progress=on_progress,
        )

        # empty registry: nothing to step, complete right away
        if not engines:
            session.advance()

        return session

    def run_training(
        self,
        training_set: Optional[Sequence[TrainRecord]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> Optional[TrainingRun]:
        """
        Train + score every registered model.

        Returns None only if a newer run superseded this one mid-way
        (e.g. started from on_progress).
        """
        return self.start(training_set, on_progress).run()

    def select_primary(self, model_id: str) -> TrainingRun:
        run = self._current_run
        if run is None or model_id not in run.metrics:
            available = list(run.metrics) if run is not None else []
            raise UnknownModelError(model_id, available)

        self.preferred_primary = model_id
        self._current_run = run.with_primary(model_id)
        logs.info(f"[TrainingOrchestrator] primary -> {model_id}")
        return self._current_run

    def invalidate(self) -> None:
        """Drop the current run and supersede any in-flight session."""
        self.generation += 1
        if self._current_run is not None:
            logs.info(f"[TrainingOrchestrator] {self._current_run.run_id} invalidated")
        self._current_run = None

    # --------------------------------------------------
    # internals
    # --------------------------------------------------
    def _publish(self, session: TrainingSession, run: TrainingRun) -> None:
        if not session.is_current:
            return
        self._current_run = run
        logs.info(
            f"[TrainingOrchestrator] DONE {run.run_id} "
            f"scored={list(run.metrics)} failed={[w.model_id for w in run.warnings]} "
            f"primary={run.primary}"
        )
        self.inst.generate_timeline_report(run.run_id)

        for listener in self._listeners:
            listener(run)
