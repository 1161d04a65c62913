# cypred/export/submission.py
from __future__ import annotations

from pathlib import Path
from typing import Sequence

from cypred import logs
from cypred.config.io_config import IOConfig
from cypred.data.records import Prediction
from cypred.utils.errors import EmptyPredictionsError


class SubmissionExporter:
    """
    Two-column submission text:

        ID,Inhibition
        <identifier>,<value with 6 decimals>
    """

    def __init__(self, io: IOConfig | None = None):
        self.io = io or IOConfig()

    def serialize(self, predictions: Sequence[Prediction]) -> str:
        if not predictions:
            raise EmptyPredictionsError("no predictions to export; generate predictions first")

        digits = self.io.submission_decimals
        lines = [self.io.submission_header]
        lines.extend(f"{p.identifier},{p.value:.{digits}f}" for p in predictions)
        return "\n".join(lines)

    def write(self, predictions: Sequence[Prediction], path: str | Path) -> Path:
        text = self.serialize(predictions)

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")

        logs.info(f"[SubmissionExporter] wrote {len(predictions)} rows -> {path}")
        return path
