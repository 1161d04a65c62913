from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from cypred.data.records import TrainRecord
from cypred.training.engines.metric_engine import MetricEngine
from cypred.training.run import ModelMetrics
from cypred.utils.errors import PredictionFailedError, TrainingFailedError


@dataclass(frozen=True)
class FittedModel:
    """
    FittedModel（FROZEN）

    - model_id: registry identifier that produced it
    - estimator: engine-private fitted state
    - n_samples: number of records it was fitted on
    """
    model_id: str
    estimator: Any
    n_samples: int


class ModelTrainEngine(ABC):
    """
    Abstract ModelTrainEngine

    Contract:
    - train(records)           -> FittedModel, raises TrainingFailedError
    - predict(fitted, payloads) -> one float per payload, raises PredictionFailedError
    - score(fitted, holdout)   -> ModelMetrics

    Engines own ALL numerical semantics; orchestration never looks inside
    a FittedModel.
    """

    def __init__(self, model_id: str, min_train_samples: int = 2):
        self.model_id = model_id
        self.min_train_samples = min_train_samples
        self.metric_engine = MetricEngine()

    def train(self, records: Sequence[TrainRecord]) -> FittedModel:
        if len(records) < self.min_train_samples:
            raise TrainingFailedError(
                self.model_id,
                f"need at least {self.min_train_samples} records, got {len(records)}",
            )

        payloads = [r.feature_payload for r in records]
        labels = np.asarray([r.label for r in records], dtype=float)

        try:
            estimator = self._fit(payloads, labels)
        except Exception as e:
            raise TrainingFailedError(self.model_id, str(e)) from e

        return FittedModel(self.model_id, estimator, len(records))

    def predict(self, fitted: FittedModel, payloads: Sequence[str]) -> np.ndarray:
        if not payloads:
            return np.empty(0, dtype=float)

        try:
            raw = self._predict(fitted.estimator, list(payloads))
        except Exception as e:
            raise PredictionFailedError(self.model_id, str(e)) from e

        preds = np.asarray(raw, dtype=float).reshape(-1)
        if len(preds) != len(payloads):
            raise PredictionFailedError(
                self.model_id,
                f"expected {len(payloads)} predictions, got {len(preds)}",
            )
        # infinities pass through; the prediction stage clamps them
        if np.any(np.isnan(preds)):
            raise PredictionFailedError(self.model_id, "NaN prediction")
        return preds

    def score(self, fitted: FittedModel, holdout: Sequence[TrainRecord]) -> ModelMetrics:
        preds = self.predict(fitted, [r.feature_payload for r in holdout])
        if not np.all(np.isfinite(preds)):
            raise PredictionFailedError(self.model_id, "non-finite prediction on holdout")
        y_true = np.asarray([r.label for r in holdout], dtype=float)
        return self.metric_engine.evaluate(y_true, preds)

    # ------------------------------------------------------------------
    # hook methods
    # ------------------------------------------------------------------
    @abstractmethod
    def _fit(self, payloads: list[str], labels: np.ndarray) -> Any:
        raise NotImplementedError

    @abstractmethod
    def _predict(self, estimator: Any, payloads: list[str]) -> Sequence[float]:
        raise NotImplementedError
