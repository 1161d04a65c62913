# cypred/data/records.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TrainRecord:
    """
    One labeled compound.

    feature_payload is opaque (e.g. a canonical SMILES string); only
    model engines interpret it.
    """
    identifier: str
    feature_payload: str
    label: float


@dataclass(frozen=True)
class TestRecord:
    identifier: str
    feature_payload: str

    # keep pytest from collecting this dataclass
    __test__ = False


@dataclass(frozen=True)
class Prediction:
    identifier: str
    feature_payload: str
    value: float
