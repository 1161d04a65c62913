from __future__ import annotations

import pytest

from cypred.data.parser import TabularParser
from cypred.data.records import Prediction
from cypred.export.submission import SubmissionExporter
from cypred.utils.errors import EmptyPredictionsError


def test_exact_format():
    text = SubmissionExporter().serialize(
        [Prediction("B1", "CCC", 42.5), Prediction("B2", "CCN", 0.0)]
    )
    assert text == "ID,Inhibition\nB1,42.500000\nB2,0.000000"


def test_six_decimals_rounding():
    text = SubmissionExporter().serialize([Prediction("B1", "C", 33.123456789)])
    assert text.splitlines()[1] == "B1,33.123457"


@pytest.mark.parametrize("predictions", [[], ()])
def test_empty_predictions(predictions):
    with pytest.raises(EmptyPredictionsError):
        SubmissionExporter().serialize(predictions)


def test_reparse_recovers_ids_and_values():
    preds = [Prediction(f"B{i}", "C", i * 7.3456789) for i in range(1, 6)]
    text = SubmissionExporter().serialize(preds)

    rows = TabularParser().parse(text, ["ID", "Inhibition"])

    assert [r["ID"] for r in rows] == [p.identifier for p in preds]
    for row, p in zip(rows, preds):
        assert float(row["Inhibition"]) == pytest.approx(p.value, abs=1e-6)


def test_write_creates_file(tmp_path):
    out = tmp_path / "nested" / "submission.csv"
    path = SubmissionExporter().write([Prediction("B1", "CCC", 12.0)], out)

    assert path == out
    assert out.read_text(encoding="utf-8") == "ID,Inhibition\nB1,12.000000"


def test_write_empty_creates_nothing(tmp_path):
    out = tmp_path / "submission.csv"
    with pytest.raises(EmptyPredictionsError):
        SubmissionExporter().write([], out)

    assert not out.exists()
