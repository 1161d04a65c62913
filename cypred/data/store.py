# cypred/data/store.py
from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from cypred import logs
from cypred.data.records import TestRecord, TrainRecord


class StoreEvent(str, Enum):
    TRAINING_REPLACED = "training_replaced"
    TEST_REPLACED = "test_replaced"


StoreListener = Callable[[StoreEvent], None]


class RecordStore:
    """
    RecordStore（immutable snapshots）

    Semantics:
    - owns the current train / test snapshots
    - a snapshot is a tuple, replaced by ONE attribute assignment
    - listeners are told after the swap; they clear downstream artifacts
    """

    def __init__(self):
        self._training: Optional[Tuple[TrainRecord, ...]] = None
        self._test: Optional[Tuple[TestRecord, ...]] = None
        self._listeners: List[StoreListener] = []

    # --------------------------------------------------
    # listeners
    # --------------------------------------------------
    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def _emit(self, event: StoreEvent) -> None:
        for listener in self._listeners:
            listener(event)

    # --------------------------------------------------
    # snapshots
    # --------------------------------------------------
    def set_training_set(self, records: Iterable[TrainRecord]) -> None:
        snapshot = tuple(records)
        self._training = snapshot
        logs.info(f"[RecordStore] training set replaced rows={len(snapshot)}")
        self._emit(StoreEvent.TRAINING_REPLACED)

    def set_test_set(self, records: Iterable[TestRecord]) -> None:
        snapshot = tuple(records)
        self._test = snapshot
        logs.info(f"[RecordStore] test set replaced rows={len(snapshot)}")
        self._emit(StoreEvent.TEST_REPLACED)

    @property
    def training_set(self) -> Optional[Tuple[TrainRecord, ...]]:
        return self._training

    @property
    def test_set(self) -> Optional[Tuple[TestRecord, ...]]:
        return self._test
