# cypred/training/holdout.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from sklearn.model_selection import train_test_split

from cypred import logs
from cypred.config.training_config import TrainingConfig
from cypred.data.records import TrainRecord


@dataclass(frozen=True)
class HoldoutSplit:
    fit: Tuple[TrainRecord, ...]
    holdout: Tuple[TrainRecord, ...]
    resubstitution: bool = False


class HoldoutSplitter:
    """
    Fit / holdout partition of a training snapshot.

    - holdout size = max(min_holdout_samples, ceil(n * holdout_fraction))
    - if that leaves fewer than min_train_samples to fit, the whole set
      is used for fit AND score (resubstitution, flagged on the split)
    - deterministic for a given random_state
    """

    def __init__(self, cfg: TrainingConfig):
        self.cfg = cfg

    def split(self, records: Sequence[TrainRecord]) -> HoldoutSplit:
        records = tuple(records)
        n = len(records)
        n_holdout = max(self.cfg.min_holdout_samples, math.ceil(n * self.cfg.holdout_fraction))

        if n - n_holdout < self.cfg.min_train_samples:
            logs.warning(
                f"[HoldoutSplitter] n={n} too small for a holdout, "
                f"scoring on the fitted records"
            )
            return HoldoutSplit(fit=records, holdout=records, resubstitution=True)

        fit, holdout = train_test_split(
            list(records),
            test_size=n_holdout,
            random_state=self.cfg.random_state,
            shuffle=True,
        )
        logs.info(f"[HoldoutSplitter] fit={len(fit)} holdout={len(holdout)}")
        return HoldoutSplit(fit=tuple(fit), holdout=tuple(holdout))
