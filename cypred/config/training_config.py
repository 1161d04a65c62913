# cypred/config/training_config.py
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class FeaturizerConfig(BaseModel):
    n_features: int = 1024
    ngram_min: int = 1
    ngram_max: int = 3


class TrainingConfig(BaseModel):
    """
    TrainingConfig

    model_params: model_id -> estimator kwargs（覆盖内置默认值）
    """

    # holdout
    holdout_fraction: float = Field(default=0.2, gt=0.0, lt=1.0)
    min_holdout_samples: int = Field(default=2, ge=1)
    min_train_samples: int = Field(default=2, ge=1)
    random_state: int = 42

    # model
    primary_model: str = "bayesian_ridge"
    refit_on_full_set: bool = True
    model_params: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    featurizer: FeaturizerConfig = Field(default_factory=FeaturizerConfig)

    # prediction
    clamp_min: float = 0.0
    clamp_max: float = 100.0
