from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import numpy as np

from bagging_ensemble.data.dataset import Dataset


class FittedModel(ABC):
    """
    Abstract FittedModel (FINAL)

    Output of one BaseLearner.fit. Must be safe to call predict from
    several threads at once.
    """

    kind: str = ""

    @abstractmethod
    def predict(self, features: np.ndarray) -> float:
        raise NotImplementedError

    def predict_matrix(self, X: np.ndarray) -> np.ndarray:
        return np.array([self.predict(row) for row in X], dtype=np.float64)

    @abstractmethod
    def save(self, path: str | Path) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def load(cls, path: str | Path) -> "FittedModel":
        raise NotImplementedError


class BaseLearner(ABC):
    """
    Abstract BaseLearner (FINAL)

    A template: `fit` never mutates the learner, it fits a fresh clone.
    """

    kind: str = ""

    @property
    def supports_weight(self) -> bool:
        return False

    @abstractmethod
    def clone(self, **overrides) -> "BaseLearner":
        raise NotImplementedError

    @abstractmethod
    def fit(
        self,
        dataset: Dataset,
        *,
        label_col: str,
        features_col: str,
        prediction_col: str,
        weight_col: Optional[str] = None,
    ) -> FittedModel:
        raise NotImplementedError

    @abstractmethod
    def save(self, path: str | Path) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def load(cls, path: str | Path) -> "BaseLearner":
        raise NotImplementedError
