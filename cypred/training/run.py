# cypred/training/run.py
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional, Tuple

import pandas as pd

if TYPE_CHECKING:
    from cypred.training.engines.model_train_engine import FittedModel


@dataclass(frozen=True)
class ModelMetrics:
    rmse: float
    mae: float
    r2: float
    mape: float

    def as_dict(self) -> dict:
        return {"RMSE": self.rmse, "MAE": self.mae, "R2": self.r2, "MAPE": self.mape}


@dataclass(frozen=True)
class TrainingWarning:
    """Non-fatal per-model failure recorded on a run."""
    model_id: str
    stage: str  # "train" | "score" | "refit"
    message: str


@dataclass(frozen=True)
class TrainingRun:
    """
    TrainingRun（FROZEN）

    Semantics:
    - result bundle of one full pass over the registry
    - metrics keys are in registry declaration order
    - a model that failed is absent from metrics and listed in warnings
    - select_primary produces a NEW run (see TrainingOrchestrator)
    """

    run_id: str
    metrics: Mapping[str, ModelMetrics]
    fitted: Mapping[str, "FittedModel"]
    primary: Optional[str] = None
    progress: int = 100
    warnings: Tuple[TrainingWarning, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))
        object.__setattr__(self, "fitted", MappingProxyType(dict(self.fitted)))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    # --------------------------------------------------
    # display ranking (never drives primary selection)
    # --------------------------------------------------
    def ranking(self) -> list[str]:
        """
        Model ids by ascending RMSE.

        sorted() is stable, so equal RMSE keeps declaration order; NaN last.
        """
        def _key(model_id: str):
            rmse = self.metrics[model_id].rmse
            if math.isnan(rmse):
                return (1, 0.0)
            return (0, rmse)

        return sorted(self.metrics, key=_key)

    def best(self) -> Optional[str]:
        ranked = self.ranking()
        return ranked[0] if ranked else None

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {"model": m, **self.metrics[m].as_dict(), "primary": m == self.primary}
            for m in self.ranking()
        ]
        return pd.DataFrame(rows, columns=["model", "RMSE", "MAE", "R2", "MAPE", "primary"])

    # --------------------------------------------------
    # primary
    # --------------------------------------------------
    def primary_model(self) -> Optional["FittedModel"]:
        if self.primary is None:
            return None
        return self.fitted.get(self.primary)

    def with_primary(self, model_id: Optional[str]) -> "TrainingRun":
        return replace(self, primary=model_id)
