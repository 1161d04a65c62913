from __future__ import annotations

import pytest

from cypred.config.io_config import IOConfig
from cypred.data.parser import TabularParser, parse_test_set, parse_training_set
from cypred.data.records import TestRecord, TrainRecord
from cypred.utils.errors import (
    InvalidValueError,
    MalformedInputError,
    MissingColumnError,
)


# ============================================================
# 1. TabularParser.parse：结构
# ============================================================
def test_parse_preserves_line_order():
    text = "ID,Canonical_Smiles\nX3,C\nX1,CC\nX2,CCC"
    rows = TabularParser().parse(text, ["ID"])

    assert [r["ID"] for r in rows] == ["X3", "X1", "X2"]


def test_parse_is_idempotent(train_text):
    parser = TabularParser()
    cols = ["ID", "Canonical_Smiles", "Inhibition"]

    assert parser.parse(train_text, cols) == parser.parse(train_text, cols)


def test_parse_skips_blank_lines_and_leading_blanks():
    text = "\n\n  \nID,Canonical_Smiles\n\nA,C\n   \nB,CC\n\n"
    rows = TabularParser().parse(text, ["ID", "Canonical_Smiles"])

    assert len(rows) == 2


def test_parse_trims_header_and_fields():
    text = " ID , Canonical_Smiles \r\n A1 , CCO \r\n"
    rows = TabularParser().parse(text, ["ID", "Canonical_Smiles"])

    assert rows == [{"ID": "A1", "Canonical_Smiles": "CCO"}]


def test_short_line_leaves_fields_absent():
    text = "ID,Canonical_Smiles,Inhibition\nA1,CCO"
    rows = TabularParser().parse(text, ["ID", "Canonical_Smiles", "Inhibition"])

    assert rows == [{"ID": "A1", "Canonical_Smiles": "CCO"}]
    assert "Inhibition" not in rows[0]


def test_extra_fields_are_ignored():
    rows = TabularParser().parse("ID\nA1,extra,more", ["ID"])
    assert rows == [{"ID": "A1"}]


def test_custom_delimiter():
    text = "ID;Canonical_Smiles\nA1;CCO"
    rows = TabularParser(";").parse(text, ["ID", "Canonical_Smiles"])

    assert rows[0]["Canonical_Smiles"] == "CCO"


def test_missing_column_names_the_column():
    with pytest.raises(MissingColumnError) as ei:
        TabularParser().parse("ID,Canonical_Smiles\nA1,C", ["ID", "Inhibition"])

    assert ei.value.column == "Inhibition"
    # MissingColumnError is a MalformedInputError
    assert isinstance(ei.value, MalformedInputError)


@pytest.mark.parametrize("text", ["", "\n\n", "   \n  "])
def test_no_header_is_malformed(text):
    with pytest.raises(MalformedInputError):
        TabularParser().parse(text, ["ID"])


def test_header_only_yields_no_rows():
    assert TabularParser().parse("ID,Canonical_Smiles\n", ["ID"]) == []


# ============================================================
# 2. typed builders
# ============================================================
def test_training_scenario_two_records():
    text = "ID,Canonical_Smiles,Inhibition\nA1,CCO,45.2\nA2,CCN,30.1"
    records = parse_training_set(text)

    assert records == (
        TrainRecord("A1", "CCO", 45.2),
        TrainRecord("A2", "CCN", 30.1),
    )


def test_training_set_n_lines_n_records(train_text):
    assert len(parse_training_set(train_text)) == 6


def test_test_set_scenario():
    records = parse_test_set("ID,Canonical_Smiles\nB1,CCC")
    assert records == (TestRecord("B1", "CCC"),)


def test_test_set_does_not_require_label():
    records = parse_test_set("ID,Canonical_Smiles,Other\nB1,CCC,x")
    assert records[0].identifier == "B1"


@pytest.mark.parametrize("label", ["abc", "", "nan", "inf"])
def test_unparseable_label_names_record_and_field(label):
    text = f"ID,Canonical_Smiles,Inhibition\nA1,CCO,{label}"

    with pytest.raises(InvalidValueError) as ei:
        parse_training_set(text)

    assert ei.value.identifier == "A1"
    assert ei.value.field == "Inhibition"


def test_missing_label_field_is_invalid_value():
    with pytest.raises(InvalidValueError) as ei:
        parse_training_set("ID,Canonical_Smiles,Inhibition\nA1,CCO")

    assert ei.value.identifier == "A1"


def test_empty_identifier_is_invalid():
    with pytest.raises(InvalidValueError):
        parse_test_set("ID,Canonical_Smiles\n,CCO")


def test_empty_payload_is_invalid():
    with pytest.raises(InvalidValueError) as ei:
        parse_test_set("ID,Canonical_Smiles\nB1,")

    assert ei.value.field == "Canonical_Smiles"


def test_duplicate_identifier_is_malformed():
    with pytest.raises(MalformedInputError, match="duplicate"):
        parse_test_set("ID,Canonical_Smiles\nB1,C\nB1,CC")


def test_out_of_range_label_is_accepted():
    records = parse_training_set("ID,Canonical_Smiles,Inhibition\nA1,C,120\nA2,CC,-3")
    assert [r.label for r in records] == [120.0, -3.0]


def test_column_names_come_from_config():
    io = IOConfig(
        delimiter="\t",
        columns={"identifier": "cid", "feature_payload": "smiles", "label": "y"},
    )
    records = parse_training_set("cid\tsmiles\ty\nM1\tCCO\t1.5", io)

    assert records == (TrainRecord("M1", "CCO", 1.5),)


def test_byte_order_mark_before_header_is_ignored():
    records = parse_training_set("\ufeffID,Canonical_Smiles,Inhibition\nA1,CCO,45.2")

    assert records == (TrainRecord("A1", "CCO", 45.2),)
