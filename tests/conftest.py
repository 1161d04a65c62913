# tests/conftest.py
from __future__ import annotations

from typing import Sequence

import numpy as np
import pytest
from loguru import logger

from cypred.config.app_config import AppConfig
from cypred.config.log_config import LogConfig
from cypred.observability.instrumentation import Instrumentation
from cypred.training.engines.model_train_engine import ModelTrainEngine
from cypred.training.engines.registry import ModelRegistry


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


TRAIN_TEXT = (
    "ID,Canonical_Smiles,Inhibition\n"
    "A1,CCO,45.2\n"
    "A2,CCN,30.1\n"
    "A3,CCCO,52.0\n"
    "A4,c1ccccc1,12.5\n"
    "A5,CC(=O)O,77.7\n"
    "A6,CCOC(=O)C,20.0\n"
)

TEST_TEXT = (
    "ID,Canonical_Smiles\n"
    "B1,CCC\n"
    "B2,CCCN\n"
    "B3,c1ccncc1\n"
)


@pytest.fixture
def train_text() -> str:
    return TRAIN_TEXT


@pytest.fixture
def test_text() -> str:
    return TEST_TEXT


# ============================================================
# Stub engines：只测试 orchestration 契约，不测试 sklearn
# ============================================================
class StubEngine(ModelTrainEngine):
    """
    Predicts a constant (`value`) or, when value is None, the mean of the
    labels it was fitted on. `fail_on` = "train" | "predict" | None.
    """

    def __init__(self, model_id, value=None, fail_on=None, min_train_samples=2):
        super().__init__(model_id, min_train_samples=min_train_samples)
        self.value = value
        self.fail_on = fail_on

    def _fit(self, payloads, labels):
        if self.fail_on == "train":
            raise RuntimeError("boom")
        return float(np.mean(labels)) if self.value is None else self.value

    def _predict(self, estimator, payloads: Sequence[str]):
        if self.fail_on == "predict":
            raise RuntimeError("boom")
        return [estimator] * len(payloads)


@pytest.fixture
def stub_engine_cls():
    return StubEngine


@pytest.fixture
def make_registry():
    """
    Factory fixture:

        reg = make_registry(a={}, b={"value": 150.0}, c={"fail_on": "train"})
    """

    def _make(**specs) -> ModelRegistry:
        reg = ModelRegistry()
        for model_id, kwargs in specs.items():
            reg.register(
                model_id,
                lambda cfg, _id=model_id, _kw=kwargs: StubEngine(
                    _id, min_train_samples=cfg.min_train_samples, **_kw
                ),
            )
        return reg

    return _make


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(log=LogConfig(dir=None))


@pytest.fixture
def inst() -> Instrumentation:
    return Instrumentation(enabled=False)
