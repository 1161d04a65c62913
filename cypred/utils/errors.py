# cypred/utils/errors.py
from __future__ import annotations


class PipelineError(RuntimeError):
    """
    Base class of every user-visible pipeline failure.
    Should NOT print traceback.
    """


# ------------------------------------------------------------------
# Input shape
# ------------------------------------------------------------------
class MalformedInputError(PipelineError):
    """Delimited text does not have the expected shape."""


class MissingColumnError(MalformedInputError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"required column missing from header: {column!r}")


class InvalidValueError(MalformedInputError):
    def __init__(self, identifier: str, field: str, value: str | None):
        self.identifier = identifier
        self.field = field
        self.value = value
        super().__init__(
            f"invalid value for field {field!r} of record {identifier!r}: {value!r}"
        )


# ------------------------------------------------------------------
# Stage preconditions
# ------------------------------------------------------------------
class NoDataError(PipelineError):
    """A stage was invoked without the records it consumes."""


class ModelNotReadyError(PipelineError):
    """Prediction requested without a fitted primary model."""


class EmptyPredictionsError(PipelineError):
    """Export requested with nothing to export."""


class UnknownModelError(PipelineError):
    def __init__(self, model_id: str, available=()):
        self.model_id = model_id
        self.available = tuple(available)
        super().__init__(
            f"unknown model {model_id!r}. Available: {', '.join(self.available) or '-'}"
        )


# ------------------------------------------------------------------
# Model capability
# ------------------------------------------------------------------
class TrainingFailedError(PipelineError):
    def __init__(self, model_id: str, reason: str):
        self.model_id = model_id
        self.reason = reason
        super().__init__(f"[{model_id}] training failed: {reason}")


class PredictionFailedError(PipelineError):
    def __init__(self, model_id: str, reason: str):
        self.model_id = model_id
        self.reason = reason
        super().__init__(f"[{model_id}] prediction failed: {reason}")
