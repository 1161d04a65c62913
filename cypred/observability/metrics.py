#!filepath: cypred/observability/metrics.py
import math
from dataclasses import dataclass, field
from typing import Dict, Any
from cypred import logs


@dataclass
class MetricRecorder:
    """
    flat name -> value store

    per-model scores are recorded as "<model_id>.<metric>" (lower-case)
    """

    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")

    def record_model(self, model_id: str, scores) -> None:
        """scores: ModelMetrics (anything with as_dict())"""
        if not self.enabled:
            return
        values = {f"{model_id}.{k.lower()}": v for k, v in scores.as_dict().items()}
        self.metrics.update(values)

        shown = " ".join(
            f"{k.lower()}={'nan' if math.isnan(v) else f'{v:.4f}'}"
            for k, v in scores.as_dict().items()
        )
        logs.info(f"[Metric] {model_id} {shown}")

    def for_model(self, model_id: str) -> Dict[str, Any]:
        prefix = f"{model_id}."
        return {k[len(prefix):]: v for k, v in self.metrics.items() if k.startswith(prefix)}
