# tests/conftest.py
from __future__ import annotations

import threading
from pathlib import Path

import numpy as np
import pytest
from loguru import logger
from sklearn.linear_model import LinearRegression

from bagging_ensemble.data.dataset import Dataset
from bagging_ensemble.learners.base import BaseLearner, FittedModel
from bagging_ensemble.learners.registry import register_codec
from bagging_ensemble.learners.sklearn_learner import SklearnRegressorLearner
from bagging_ensemble.utils.filesystem import FileSystem


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def log_messages():
    """
    Collect loguru messages emitted during the test.
    """
    captured: list[str] = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)), level="DEBUG")
    yield captured
    logger.remove(sink_id)


# ============================================================
# Data
# ============================================================
def make_regression(n_rows: int = 100, n_features: int = 4, seed: int = 7):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n_rows, n_features))
    coef = np.arange(1, n_features + 1, dtype=np.float64)
    y = X @ coef + 0.1 * rng.normal(size=n_rows)
    w = rng.uniform(0.5, 2.0, size=n_rows)
    return X, y, w


@pytest.fixture
def regression_arrays():
    return make_regression()


@pytest.fixture
def dataset(regression_arrays) -> Dataset:
    X, y, w = regression_arrays
    return Dataset.from_numpy(X, y, weights=w)


@pytest.fixture
def linear_learner() -> SklearnRegressorLearner:
    return SklearnRegressorLearner(LinearRegression())


# ============================================================
# Stub learners
# ============================================================
class ConstantModel(FittedModel):
    kind = "stub"

    def __init__(self, value: float, n_features: int | None = None):
        self.value = float(value)
        self.n_features = n_features

    def predict(self, features) -> float:
        return self.value

    def save(self, path) -> None:
        path = FileSystem.ensure_dir(path)
        FileSystem.write_json(
            Path(path) / "metadata.json",
            {"kind": self.kind, "value": self.value, "n_features": self.n_features},
        )

    @classmethod
    def load(cls, path) -> "ConstantModel":
        meta = FileSystem.read_json(Path(path) / "metadata.json")
        return cls(meta["value"], meta["n_features"])


class MeanLearner(BaseLearner):
    """
    Predicts the (weighted) label mean; records what every fit saw.
    """

    kind = "stub"

    def __init__(self, weighted: bool = False, calls=None, lock=None):
        self.weighted = weighted
        self.calls = calls if calls is not None else []
        self.lock = lock or threading.Lock()

    @property
    def supports_weight(self) -> bool:
        return self.weighted

    def clone(self, **overrides) -> "MeanLearner":
        return MeanLearner(overrides.get("weighted", self.weighted), self.calls, self.lock)

    def fit(self, dataset, *, label_col, features_col, prediction_col, weight_col=None):
        X = dataset.features_matrix(features_col)
        y = dataset.column_numpy(label_col)
        w = dataset.column_numpy(weight_col) if weight_col else np.ones_like(y)
        with self.lock:
            self.calls.append({"X": X, "y": y, "weight_col": weight_col})
        return ConstantModel(float(np.average(y, weights=w)), X.shape[1])

    def save(self, path) -> None:
        path = FileSystem.ensure_dir(path)
        FileSystem.write_json(
            Path(path) / "metadata.json", {"kind": self.kind, "weighted": self.weighted}
        )

    @classmethod
    def load(cls, path) -> "MeanLearner":
        return cls(FileSystem.read_json(Path(path) / "metadata.json")["weighted"])

    def __repr__(self) -> str:
        return f"MeanLearner(weighted={self.weighted})"


class FailingLearner(MeanLearner):
    def clone(self, **overrides) -> "FailingLearner":
        return FailingLearner(self.weighted, self.calls, self.lock)

    def fit(self, dataset, **kwargs):
        raise RuntimeError("boom")


register_codec(MeanLearner, ConstantModel)


@pytest.fixture
def mean_learner() -> MeanLearner:
    return MeanLearner()


@pytest.fixture
def weighted_mean_learner() -> MeanLearner:
    return MeanLearner(weighted=True)


@pytest.fixture
def failing_learner() -> FailingLearner:
    return FailingLearner()


@pytest.fixture
def constant_model():
    """factory: constant_model(10.0) -> FittedModel predicting 10.0"""
    return ConstantModel
