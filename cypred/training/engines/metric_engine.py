# cypred/training/engines/metric_engine.py
from __future__ import annotations

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from cypred.training.run import ModelMetrics


class MetricEngine:
    """
    MetricEngine（FINAL）

    Responsibility:
    - Own the regression metric definitions

    Contract:
    - y_true / y_pred are aligned 1-d float arrays of equal length
    - MAPE is a fraction (not percent); NaN if any y_true == 0
    - never raises on degenerate holdouts
    """

    def evaluate(self, y_true: np.ndarray, y_pred: np.ndarray) -> ModelMetrics:
        y_true = np.asarray(y_true, dtype=float)
        y_pred = np.asarray(y_pred, dtype=float)

        if len(y_true) == 0:
            nan = float("nan")
            return ModelMetrics(rmse=nan, mae=nan, r2=nan, mape=nan)

        rmse = float(np.sqrt(mean_squared_error(y_true, y_pred)))
        mae = float(mean_absolute_error(y_true, y_pred))
        r2 = self._r2(y_true, y_pred)
        mape = self._mape(y_true, y_pred)

        return ModelMetrics(rmse=rmse, mae=mae, r2=r2, mape=mape)

    @staticmethod
    def _r2(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        # r2 is undefined on a single sample
        if len(y_true) < 2:
            return float("nan")
        return float(r2_score(y_true, y_pred))

    @staticmethod
    def _mape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        if np.any(y_true == 0.0):
            return float("nan")
        return float(np.mean(np.abs(y_true - y_pred) / np.abs(y_true)))
