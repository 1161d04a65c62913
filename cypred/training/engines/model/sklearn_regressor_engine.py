# cypred/training/engines/model/sklearn_regressor_engine.py
from __future__ import annotations

from typing import Any, Callable, Dict

import numpy as np

from cypred.training.engines.featurizer import SmilesFeaturizer
from cypred.training.engines.model_train_engine import ModelTrainEngine

EstimatorFactory = Callable[..., Any]


class SklearnRegressorEngine(ModelTrainEngine):
    """
    Batch regressor engine（fit(X, y) semantics）

    - a fresh estimator per train() call, nothing carried between runs
    - any estimator with sklearn's fit / predict API works
      (BayesianRidge, RandomForestRegressor, Lasso, LGBMRegressor ...)
    """

    def __init__(
        self,
        model_id: str,
        estimator_factory: EstimatorFactory,
        *,
        params: Dict[str, Any] | None = None,
        featurizer: SmilesFeaturizer | None = None,
        min_train_samples: int = 2,
    ):
        super().__init__(model_id, min_train_samples=min_train_samples)
        self.estimator_factory = estimator_factory
        self.params = dict(params or {})
        self.featurizer = featurizer or SmilesFeaturizer()

    def _fit(self, payloads: list[str], labels: np.ndarray):
        estimator = self.estimator_factory(**self.params)
        estimator.fit(self.featurizer.transform(payloads), labels)
        return estimator

    def _predict(self, estimator, payloads: list[str]):
        return estimator.predict(self.featurizer.transform(payloads))
