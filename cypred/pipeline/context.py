#!filepath: cypred/pipeline/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from cypred.config.app_config import AppConfig
from cypred.data.records import Prediction
from cypred.data.store import RecordStore
from cypred.observability.instrumentation import Instrumentation
from cypred.pipeline.state import PipelineStateMachine


@dataclass
class PipelineContext:
    """
    PipelineContext = 一个 pipeline 会话的唯一上下文

    设计原则：
    - SubmissionPipeline 负责构造与修改
    - 表现层只读
    - TrainingRun 由 TrainingOrchestrator 持有，不在这里复制
    """

    # -------------------------
    # static bindings
    # -------------------------
    cfg: AppConfig
    inst: Instrumentation

    # -------------------------
    # artifacts
    # -------------------------
    store: RecordStore = field(default_factory=RecordStore)
    state: PipelineStateMachine = field(default_factory=PipelineStateMachine)
    predictions: Optional[Tuple[Prediction, ...]] = None

    # -------------------------
    # last training progress (0-100)
    # -------------------------
    progress: int = 0
