#!filepath: tests/observability/test_instrumentation.py

import time

import pytest
from loguru import logger

from cypred.config.training_config import TrainingConfig
from cypred.data.parser import parse_training_set
from cypred.observability.instrumentation import Instrumentation, NoOpInstrumentation
from cypred.observability.metrics import MetricRecorder
from cypred.observability.timeline_reporter import TimelineReporter
from cypred.observability.timer import Timer
from cypred.training.orchestrator import TrainingOrchestrator
from cypred.training.run import ModelMetrics


def _capture(fn):
    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))
    try:
        fn()
    finally:
        logger.remove(sink_id)
    return "\n".join(captured)


# ============================================================
# Timer
# ============================================================
def test_timer_basic():
    t = Timer(enabled=True)
    t.start("train:lasso")
    time.sleep(0.01)
    elapsed = t.end("train:lasso")

    assert elapsed > 0
    assert isinstance(elapsed, float)


def test_timer_disabled_or_unknown():
    assert Timer(enabled=False).end("x") == 0.0
    assert Timer(enabled=True).end("never-started") == 0.0


# ============================================================
# Instrumentation
# ============================================================
def test_leaf_timer_writes_timeline():
    inst = Instrumentation(enabled=True)

    with inst.timer("train:bayesian_ridge"):
        time.sleep(0.005)

    assert inst.timeline["train:bayesian_ridge"] > 0


def test_parent_scope_does_not_pollute_timeline():
    inst = Instrumentation(enabled=True)

    with inst.timer("training", record=False):
        with inst.timer("refit:lasso"):
            pass

    assert list(inst.timeline) == ["refit:lasso"]


def test_timer_records_even_when_body_raises():
    inst = Instrumentation(enabled=True)

    try:
        with inst.timer("predict"):
            raise ValueError("x")
    except ValueError:
        pass

    assert "predict" in inst.timeline


def test_reset_timeline():
    inst = Instrumentation(enabled=True)
    with inst.timer("a"):
        pass
    inst.reset_timeline()

    assert inst.timeline == {}


def test_disabled_instrumentation_records_nothing():
    inst = Instrumentation(enabled=False)
    with inst.timer("a"):
        pass
    inst.metrics.record("rows", 3)

    assert inst.timeline == {}
    assert inst.metrics.metrics == {}


def test_noop_instrumentation():
    inst = NoOpInstrumentation()
    with inst.timer("a"):
        pass
    inst.progress.update("training", 1, 2)
    inst.generate_timeline_report("run-0001")

    assert inst.timeline == {}


# ============================================================
# metrics / timeline report
# ============================================================
def test_metric_record():
    m = MetricRecorder(enabled=True)
    m.record("lasso.rmse", 1.5)

    assert m.metrics == {"lasso.rmse": 1.5}


def test_record_model_scores():
    m = MetricRecorder(enabled=True)

    output = _capture(
        lambda: m.record_model(
            "lasso", ModelMetrics(rmse=2.0, mae=1.5, r2=0.25, mape=float("nan"))
        )
    )

    assert m.for_model("lasso") == pytest.approx(
        {"rmse": 2.0, "mae": 1.5, "r2": 0.25, "mape": float("nan")}, nan_ok=True
    )
    assert "lasso rmse=2.0000 mae=1.5000 r2=0.2500 mape=nan" in output


def test_record_model_disabled():
    m = MetricRecorder(enabled=False)
    m.record_model("lasso", ModelMetrics(1.0, 1.0, 1.0, 1.0))

    assert m.for_model("lasso") == {}


def test_training_run_records_every_scored_model(make_registry, train_text):
    inst = Instrumentation(enabled=True)
    registry = make_registry(a={}, b={"fail_on": "train"})
    orch = TrainingOrchestrator(registry, TrainingConfig(primary_model="a"), inst)

    orch.run_training(parse_training_set(train_text))

    assert set(inst.metrics.for_model("a")) == {"rmse", "mae", "r2", "mape"}
    assert inst.metrics.for_model("b") == {}
    assert "train:a" in inst.timeline


def test_timeline_log_output():
    reporter = TimelineReporter({"train:lasso": 1.23, "score:lasso": 0.5}, "run-0003")

    output = _capture(reporter.print)

    assert "Timeline for run-0003" in output
    assert "train:lasso" in output
    assert "1.230" in output
    assert "1.730" in output


def test_generate_timeline_report():
    inst = Instrumentation(enabled=True)
    with inst.timer("train:random_forest"):
        pass

    output = _capture(lambda: inst.generate_timeline_report("run-0001"))

    assert "train:random_forest" in output
    assert "run-0001" in output
