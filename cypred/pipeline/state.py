# cypred/pipeline/state.py
from __future__ import annotations

from enum import IntEnum

from cypred import logs
from cypred.utils.errors import EmptyPredictionsError, ModelNotReadyError, NoDataError


class PipelineStage(IntEnum):
    EMPTY = 0
    TRAINING_DATA_LOADED = 1
    MODELS_TRAINED = 2
    PREDICTIONS_GENERATED = 3
    EXPORTED = 4


class PipelineStateMachine:
    """
    PipelineStateMachine（single source of truth for stage legality）

    - stage follows the training chain EMPTY → ... → EXPORTED
    - test data is order-independent of training data: tracked as
      test_loaded, required only by prediction
    - guards raise; a transition runs its guard first, so a failed
      command leaves the stage untouched
    """

    def __init__(self):
        self.stage = PipelineStage.EMPTY
        self.test_loaded = False

    def _move(self, stage: PipelineStage) -> None:
        if stage != self.stage:
            logs.debug(f"[PipelineState] {self.stage.name} -> {stage.name}")
        self.stage = stage

    # --------------------------------------------------
    # guards
    # --------------------------------------------------
    def require_trainable(self) -> None:
        if self.stage < PipelineStage.TRAINING_DATA_LOADED:
            raise NoDataError("load training data before training")

    def require_predictable(self) -> None:
        if self.stage < PipelineStage.MODELS_TRAINED:
            raise ModelNotReadyError("train models before predicting")
        if not self.test_loaded:
            raise NoDataError("load test data before predicting")

    def require_exportable(self) -> None:
        if self.stage < PipelineStage.PREDICTIONS_GENERATED:
            raise EmptyPredictionsError("generate predictions before exporting")

    # --------------------------------------------------
    # transitions
    # --------------------------------------------------
    def training_loaded(self) -> None:
        # metrics and predictions are invalid from here on
        self._move(PipelineStage.TRAINING_DATA_LOADED)

    def test_data_loaded(self) -> None:
        self.test_loaded = True
        if self.stage > PipelineStage.MODELS_TRAINED:
            self._move(PipelineStage.MODELS_TRAINED)

    def primary_changed(self) -> None:
        # predictions came from the previous primary
        if self.stage > PipelineStage.MODELS_TRAINED:
            self._move(PipelineStage.MODELS_TRAINED)

    def trained(self) -> None:
        self.require_trainable()
        self._move(PipelineStage.MODELS_TRAINED)

    def predicted(self) -> None:
        self.require_predictable()
        self._move(PipelineStage.PREDICTIONS_GENERATED)

    def exported(self) -> None:
        self.require_exportable()
        self._move(PipelineStage.EXPORTED)
