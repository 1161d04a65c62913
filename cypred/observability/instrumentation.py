#!filepath: cypred/observability/instrumentation.py
from __future__ import annotations

from dataclasses import dataclass
from contextlib import contextmanager
from collections import OrderedDict
from typing import Dict

from cypred.observability.progress import ProgressReporter
from cypred.observability.timer import Timer
from cypred.observability.metrics import MetricRecorder
from cypred.observability.timeline_reporter import TimelineReporter


@dataclass
class Instrumentation:
    """
    Instrumentation（Leaf-only accounting + Parent scope）。

    设计铁律：
    1. Timeline 只记录【叶子节点】（record=True）
    2. 父级 timer 仅作为时间语义边界（record=False）
    3. record=False 的 timer 不产生任何副作用
    """

    enabled: bool = True

    def __post_init__(self):
        self.progress = ProgressReporter(enabled=self.enabled)
        self._timer = Timer(enabled=self.enabled)
        self.metrics = MetricRecorder(enabled=self.enabled)

        # timeline: OrderedDict[leaf_name, elapsed_seconds]
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        """
        Context-manager timer.

        Parameters
        ----------
        name : str
            计时名称
        record : bool
            - True  : 叶子节点，记录到 timeline
            - False : 父级 scope，仅定义 wall-time（不产生副作用）
        """
        inst = self

        @contextmanager
        def _ctx():
            if not inst.enabled:
                yield
                return

            inst._timer.start(name)
            try:
                yield
            finally:
                elapsed = inst._timer.end(name)
                if record:
                    inst.timeline[name] = elapsed

        return _ctx()

    def reset_timeline(self):
        self.timeline.clear()

    def generate_timeline_report(self, label: str):
        TimelineReporter(self.timeline, label).print()


class NoOpInstrumentation:
    """Instrumentation disabled 时使用。"""

    enabled = False

    def __init__(self):
        self.progress = ProgressReporter(enabled=False)
        self.metrics = MetricRecorder(enabled=False)
        self.timeline: Dict[str, float] = OrderedDict()

    def timer(self, name: str, *, record: bool = True):
        return _NoOpTimer()

    def reset_timeline(self):
        pass

    def generate_timeline_report(self, label: str):
        pass


class _NoOpTimer:
    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc, tb):
        pass
