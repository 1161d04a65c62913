# cypred/prediction/generator.py
from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from cypred import logs
from cypred.config.training_config import TrainingConfig
from cypred.data.records import Prediction, TestRecord
from cypred.training.engines.registry import ModelRegistry
from cypred.training.run import TrainingRun
from cypred.utils.errors import ModelNotReadyError, NoDataError


class PredictionGenerator:
    """
    PredictionGenerator

    Contract:
    - consumes the fitted primary model of a TrainingRun + test snapshot
    - produces exactly one Prediction per TestRecord, same order
    - every value clamped into [clamp_min, clamp_max]
    """

    def __init__(self, registry: ModelRegistry, cfg: TrainingConfig | None = None):
        self.registry = registry
        self.cfg = cfg or TrainingConfig()

    def predict(
        self,
        run: Optional[TrainingRun],
        test_set: Optional[Sequence[TestRecord]],
    ) -> Tuple[Prediction, ...]:
        if run is None:
            raise ModelNotReadyError("no training run; train models first")
        if run.primary is None:
            raise ModelNotReadyError("no primary model selected")

        fitted = run.primary_model()
        if fitted is None:
            raise ModelNotReadyError(f"primary model {run.primary!r} has no fitted model")

        if not test_set:
            raise NoDataError("test set is empty; load test data first")

        engine = self.registry.resolve(fitted.model_id, self.cfg)
        raw = engine.predict(fitted, [r.feature_payload for r in test_set])

        # +0.0: -0.0 -> 0.0
        values = np.clip(raw, self.cfg.clamp_min, self.cfg.clamp_max) + 0.0
        clamped = int(np.sum(values != raw))
        if clamped:
            logs.info(f"[PredictionGenerator] clamped {clamped}/{len(raw)} values")

        predictions = tuple(
            Prediction(rec.identifier, rec.feature_payload, float(v))
            for rec, v in zip(test_set, values)
        )
        logs.info(
            f"[PredictionGenerator] model={fitted.model_id} predictions={len(predictions)}"
        )
        return predictions
