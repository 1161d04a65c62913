from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from lightgbm import LGBMRegressor
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import BayesianRidge, Lasso

from cypred.config.training_config import TrainingConfig
from cypred.training.engines.featurizer import SmilesFeaturizer
from cypred.training.engines.model.sklearn_regressor_engine import SklearnRegressorEngine
from cypred.training.engines.model_train_engine import ModelTrainEngine
from cypred.utils.errors import UnknownModelError

EngineFactory = Callable[[TrainingConfig], ModelTrainEngine]


class ModelRegistry:
    """
    ModelRegistry（capability lookup table）

    - model_id -> engine factory, kept in declaration order
    - performs no numerical work
    - orchestration iterates engines() and never hardcodes model counts
    """

    def __init__(self):
        self._factories: Dict[str, EngineFactory] = {}

    def register(self, model_id: str, factory: EngineFactory) -> None:
        if model_id in self._factories:
            raise ValueError(f"model already registered: {model_id}")
        self._factories[model_id] = factory

    def ids(self) -> List[str]:
        return list(self._factories)

    def __contains__(self, model_id: str) -> bool:
        return model_id in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def resolve(self, model_id: str, cfg: TrainingConfig) -> ModelTrainEngine:
        if model_id not in self._factories:
            raise UnknownModelError(model_id, self._factories)
        return self._factories[model_id](cfg)

    def engines(self, cfg: TrainingConfig) -> List[Tuple[str, ModelTrainEngine]]:
        return [(model_id, factory(cfg)) for model_id, factory in self._factories.items()]


# ------------------------------------------------------------------
# Built-in catalog
# ------------------------------------------------------------------
_BUILTIN_DEFAULTS: Dict[str, Tuple[Callable, Dict]] = {
    "bayesian_ridge": (BayesianRidge, {}),
    "random_forest": (RandomForestRegressor, {"n_estimators": 100, "n_jobs": -1}),
    "lasso": (Lasso, {"alpha": 0.1, "max_iter": 10000}),
    "lightgbm": (LGBMRegressor, {"n_estimators": 100, "verbose": -1}),
}

# estimators that take a seed
_SEEDED = {"random_forest", "lasso", "lightgbm"}


def _sklearn_factory(model_id: str) -> EngineFactory:
    estimator_cls, defaults = _BUILTIN_DEFAULTS[model_id]

    def _build(cfg: TrainingConfig) -> ModelTrainEngine:
        params = dict(defaults)
        if model_id in _SEEDED:
            params["random_state"] = cfg.random_state
        params.update(cfg.model_params.get(model_id, {}))

        return SklearnRegressorEngine(
            model_id,
            estimator_cls,
            params=params,
            featurizer=SmilesFeaturizer(cfg.featurizer),
            min_train_samples=cfg.min_train_samples,
        )

    return _build


def default_registry() -> ModelRegistry:
    registry = ModelRegistry()
    for model_id in _BUILTIN_DEFAULTS:
        registry.register(model_id, _sklearn_factory(model_id))
    return registry
