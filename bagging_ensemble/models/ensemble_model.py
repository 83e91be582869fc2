# bagging_ensemble/models/ensemble_model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from bagging_ensemble.config.bagging_config import BaggingConfig
from bagging_ensemble.data.dataset import Dataset
from bagging_ensemble.learners.base import BaseLearner, FittedModel
from bagging_ensemble.sampling.sampler import Subspace
from bagging_ensemble.utils.identifiable import random_uid


@dataclass(frozen=True)
class Member:
    subspace: Subspace
    model: FittedModel


@dataclass(frozen=True)
class BaggingRegressionModel:
    """
    BaggingRegressionModel (FINAL / FROZEN)

    Semantics:
    - members are ordered; index i pairs subspaces[i] with models[i]
      and addresses model-<i> / data-<i> on disk
    - prediction = unweighted mean of member predictions
    - immutable, safe for concurrent predict without locking
    """

    subspaces: Tuple[Subspace, ...]
    models: Tuple[FittedModel, ...]
    config: BaggingConfig = field(default_factory=BaggingConfig)
    learner: Optional[BaseLearner] = None
    uid: str = field(default_factory=lambda: random_uid("BaggingRegressionModel"))
    parent: Optional[str] = None

    def __post_init__(self):
        # freeze whatever sequence types the caller passed
        object.__setattr__(self, "subspaces", tuple(tuple(int(j) for j in s) for s in self.subspaces))
        object.__setattr__(self, "models", tuple(self.models))

        if len(self.subspaces) != len(self.models):
            raise ValueError(
                f"{len(self.subspaces)} subspaces for {len(self.models)} models"
            )
        if not self.models:
            raise ValueError("an ensemble needs at least one member")

    # ============================================================
    # Introspection
    # ============================================================
    @property
    def num_base_models(self) -> int:
        return len(self.models)

    @property
    def members(self) -> Tuple[Member, ...]:
        return tuple(Member(s, m) for s, m in zip(self.subspaces, self.models))

    # ============================================================
    # Prediction
    # ============================================================
    def predict(self, features: Sequence[float]) -> float:
        """
        Mean over members of model_i.predict(features[subspace_i]).
        """
        x = np.asarray(features, dtype=np.float64)
        total = 0.0
        for subspace, model in zip(self.subspaces, self.models):
            total += model.predict(x[list(subspace)])
        return total / self.num_base_models

    def predict_batch(self, data: Union[Dataset, np.ndarray]) -> np.ndarray:
        if isinstance(data, Dataset):
            X = data.features_matrix(self.config.features_col)
        else:
            X = np.asarray(data, dtype=np.float64)

        if X.shape[0] == 0:
            return np.empty(0, dtype=np.float64)

        total = np.zeros(X.shape[0], dtype=np.float64)
        for subspace, model in zip(self.subspaces, self.models):
            total += model.predict_matrix(X[:, list(subspace)])
        return total / self.num_base_models

    def transform(self, dataset: Dataset) -> Dataset:
        """
        Append `prediction_col` to the dataset.
        """
        return dataset.with_column(self.config.prediction_col, self.predict_batch(dataset))

    # ============================================================
    # Persistence
    # ============================================================
    def save(self, path, *, overwrite: bool = False) -> None:
        from bagging_ensemble.persistence.codec import save_model

        save_model(self, path, overwrite=overwrite)

    @staticmethod
    def load(path) -> "BaggingRegressionModel":
        from bagging_ensemble.persistence.codec import load_model

        return load_model(path)

    def __repr__(self) -> str:
        return (
            f"BaggingRegressionModel(uid={self.uid}, "
            f"num_base_models={self.num_base_models})"
        )
