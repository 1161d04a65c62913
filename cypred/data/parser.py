# cypred/data/parser.py
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Tuple

from cypred import logs
from cypred.config.io_config import IOConfig
from cypred.data.records import TestRecord, TrainRecord
from cypred.utils.errors import (
    InvalidValueError,
    MalformedInputError,
    MissingColumnError,
)


class TabularParser:
    """
    TabularParser（pure）

    Contract:
    - first non-empty line is the header
    - every following non-blank line -> one field mapping, in line order
    - short lines leave trailing fields absent (validated later)
    - no I/O, no state: the same text always parses to an equal sequence
    """

    def __init__(self, delimiter: str = ","):
        if not delimiter:
            raise ValueError("delimiter must be non-empty")
        self.delimiter = delimiter

    def parse(
        self,
        text: str,
        expected_columns: Iterable[str],
    ) -> List[Dict[str, str]]:
        # spreadsheet exports prefix a UTF-8 byte order mark
        lines = text.removeprefix("\ufeff").split("\n")

        header_pos = next(
            (i for i, line in enumerate(lines) if line.strip()),
            None,
        )
        if header_pos is None:
            raise MalformedInputError("input has no header line")

        header = [name.strip() for name in lines[header_pos].split(self.delimiter)]

        for column in expected_columns:
            if column not in header:
                raise MissingColumnError(column)

        rows: List[Dict[str, str]] = []
        for line in lines[header_pos + 1:]:
            if not line.strip():
                continue

            values = line.split(self.delimiter)
            # zip() stops at the shorter side: missing fields stay absent,
            # extra fields are dropped
            rows.append(
                {name: value.strip() for name, value in zip(header, values)}
            )

        return rows


# ------------------------------------------------------------------
# Typed builders
# ------------------------------------------------------------------
def parse_training_set(text: str, io: IOConfig | None = None) -> Tuple[TrainRecord, ...]:
    io = io or IOConfig()
    cols = io.columns
    rows = TabularParser(io.delimiter).parse(
        text, (cols.identifier, cols.feature_payload, cols.label)
    )

    records = []
    for row in rows:
        identifier, payload = _identity(row, cols.identifier, cols.feature_payload)
        label = _parse_label(row.get(cols.label), identifier, cols.label)
        records.append(TrainRecord(identifier, payload, label))

    _check_unique(r.identifier for r in records)

    out_of_range = sum(1 for r in records if not 0.0 <= r.label <= 100.0)
    if out_of_range:
        logs.warning(
            f"[TabularParser] {out_of_range} training labels outside [0, 100]"
        )

    logs.info(f"[TabularParser] parsed training set rows={len(records)}")
    return tuple(records)


def parse_test_set(text: str, io: IOConfig | None = None) -> Tuple[TestRecord, ...]:
    io = io or IOConfig()
    cols = io.columns
    rows = TabularParser(io.delimiter).parse(
        text, (cols.identifier, cols.feature_payload)
    )

    records = [
        TestRecord(*_identity(row, cols.identifier, cols.feature_payload))
        for row in rows
    ]
    _check_unique(r.identifier for r in records)

    logs.info(f"[TabularParser] parsed test set rows={len(records)}")
    return tuple(records)


def _identity(row: Dict[str, str], id_col: str, payload_col: str) -> Tuple[str, str]:
    identifier = row.get(id_col)
    if not identifier:
        raise InvalidValueError(identifier or "", id_col, identifier)

    payload = row.get(payload_col)
    if not payload:
        raise InvalidValueError(identifier, payload_col, payload)

    return identifier, payload


def _parse_label(raw: str | None, identifier: str, field: str) -> float:
    if raw is None or raw == "":
        raise InvalidValueError(identifier, field, raw)
    try:
        value = float(raw)
    except ValueError:
        raise InvalidValueError(identifier, field, raw) from None
    if not math.isfinite(value):
        raise InvalidValueError(identifier, field, raw)
    return value


def _check_unique(identifiers: Iterable[str]) -> None:
    seen = set()
    for identifier in identifiers:
        if identifier in seen:
            raise MalformedInputError(f"duplicate identifier: {identifier!r}")
        seen.add(identifier)
