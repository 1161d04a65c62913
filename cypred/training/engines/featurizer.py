# cypred/training/engines/featurizer.py
from __future__ import annotations

from typing import Sequence

import numpy as np
from sklearn.feature_extraction.text import HashingVectorizer

from cypred.config.training_config import FeaturizerConfig


class SmilesFeaturizer:
    """
    Opaque payload -> fixed-width numeric matrix.

    Hashes character n-grams of the payload string. Stateless (no fit),
    so the same payload always maps to the same row. No chemistry is
    interpreted here.
    """

    def __init__(self, cfg: FeaturizerConfig | None = None):
        cfg = cfg or FeaturizerConfig()
        self._vectorizer = HashingVectorizer(
            analyzer="char",
            ngram_range=(cfg.ngram_min, cfg.ngram_max),
            n_features=cfg.n_features,
            lowercase=False,
            alternate_sign=False,
            norm="l2",
        )

    def transform(self, payloads: Sequence[str]) -> np.ndarray:
        return self._vectorizer.transform(list(payloads)).toarray()
