# bagging_ensemble/training/member_trainer.py
from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from bagging_ensemble import logs
from bagging_ensemble.data.dataset import Dataset
from bagging_ensemble.learners.base import BaseLearner, FittedModel


def slice_features(features_col: str, subspace: Sequence[int]):
    """
    Dataset -> Dataset with `features_col` restricted to `subspace`,
    in subspace order.
    """
    idx = np.asarray(subspace, dtype=np.int64)

    def _transform(ds: Dataset) -> Dataset:
        X = ds.features_matrix(features_col)
        if X.shape[0] == 0:
            return ds
        return ds.with_column(features_col, X[:, idx])

    return _transform


class MemberTrainer:
    """
    MemberTrainer (stateless)

    Fits ONE ensemble member on its bag, seeing only its subspace.
    Errors raised by the base learner propagate unchanged.
    """

    def fit(
            self,
            bag: Dataset,
            subspace: Sequence[int],
            learner: BaseLearner,
            *,
            label_col: str,
            features_col: str,
            prediction_col: str,
            weight_col: Optional[str] = None,
    ) -> FittedModel:
        if weight_col is not None and not learner.supports_weight:
            logs.warning(
                f"[MemberTrainer] weight_col={weight_col} dropped, "
                f"{learner!r} does not support weights"
            )
            weight_col = None

        reduced = bag.transform(slice_features(features_col, subspace))

        return learner.clone().fit(
            reduced,
            label_col=label_col,
            features_col=features_col,
            prediction_col=prediction_col,
            weight_col=weight_col,
        )
