from __future__ import annotations

import pytest

from cypred.config.training_config import TrainingConfig
from cypred.training.engines.model.sklearn_regressor_engine import SklearnRegressorEngine
from cypred.training.engines.registry import ModelRegistry, default_registry
from cypred.utils.errors import UnknownModelError


def test_default_catalog_in_declaration_order():
    assert default_registry().ids() == [
        "bayesian_ridge",
        "random_forest",
        "lasso",
        "lightgbm",
    ]


def test_resolve_builds_engine_with_config_params():
    cfg = TrainingConfig(
        random_state=7,
        model_params={"random_forest": {"n_estimators": 5}},
    )
    engine = default_registry().resolve("random_forest", cfg)

    assert isinstance(engine, SklearnRegressorEngine)
    assert engine.model_id == "random_forest"
    assert engine.params["n_estimators"] == 5
    assert engine.params["random_state"] == 7


def test_unknown_model():
    with pytest.raises(UnknownModelError) as ei:
        default_registry().resolve("svm", TrainingConfig())

    assert "bayesian_ridge" in ei.value.available


def test_duplicate_registration_rejected(make_registry):
    reg = make_registry(a={})
    with pytest.raises(ValueError):
        reg.register("a", lambda cfg: None)


def test_any_number_of_models(make_registry):
    reg = make_registry(**{f"m{i}": {} for i in range(7)})

    assert len(reg) == 7
    assert [m for m, _ in reg.engines(TrainingConfig())] == [f"m{i}" for i in range(7)]


def test_empty_registry():
    reg = ModelRegistry()
    assert reg.ids() == []
    assert reg.engines(TrainingConfig()) == []
