# bagging_ensemble/learners/sklearn_learner.py
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import joblib
import numpy as np
import sklearn
from sklearn.base import RegressorMixin, clone
from sklearn.linear_model import SGDRegressor
from sklearn.utils.validation import has_fit_parameter

from bagging_ensemble import logs
from bagging_ensemble.data.dataset import Dataset
from bagging_ensemble.learners.base import BaseLearner, FittedModel
from bagging_ensemble.utils.errors import ArtifactFormatError
from bagging_ensemble.utils.filesystem import FileSystem

KIND = "sklearn"


def _write_meta(path: Path, role: str, estimator: Any) -> None:
    FileSystem.write_json(
        path / "metadata.json",
        {
            "kind": KIND,
            "role": role,
            "estimator": type(estimator).__name__,
            "sklearn_version": sklearn.__version__,
            "created_at": datetime.now(timezone.utc).isoformat(),
        },
    )


def _read_estimator(path: Path, role: str) -> Any:
    meta_path = path / "metadata.json"
    obj_path = path / "estimator.joblib"
    if not meta_path.exists() or not obj_path.exists():
        raise FileNotFoundError(f"[SklearnLearner] incomplete {role} artifact: {path}")

    meta = FileSystem.read_json(meta_path)
    if meta.get("kind") != KIND or meta.get("role") != role:
        raise ArtifactFormatError(
            f"[SklearnLearner] expected kind={KIND} role={role} at {path}, "
            f"got kind={meta.get('kind')} role={meta.get('role')}"
        )
    return joblib.load(obj_path)


class SklearnRegressionModel(FittedModel):
    """
    Fitted scikit-learn regressor.
    """

    kind = KIND

    def __init__(self, estimator: RegressorMixin):
        self.estimator = estimator

    def predict(self, features: np.ndarray) -> float:
        x = np.asarray(features, dtype=np.float64).reshape(1, -1)
        return float(self.estimator.predict(x)[0])

    def predict_matrix(self, X: np.ndarray) -> np.ndarray:
        return np.asarray(self.estimator.predict(np.asarray(X, dtype=np.float64)), dtype=np.float64)

    def save(self, path: str | Path) -> None:
        path = FileSystem.ensure_dir(path)
        joblib.dump(self.estimator, path / "estimator.joblib")
        _write_meta(path, "model", self.estimator)

    @classmethod
    def load(cls, path: str | Path) -> "SklearnRegressionModel":
        return cls(_read_estimator(Path(path), "model"))

    def __repr__(self) -> str:
        return f"SklearnRegressionModel({self.estimator!r})"


class SklearnRegressorLearner(BaseLearner):
    """
    SklearnRegressorLearner (Batch)

    Template around any scikit-learn regressor. Every fit works on
    `sklearn.base.clone(template)`, so the template is never fitted.
    """

    kind = KIND

    def __init__(self, estimator: Optional[RegressorMixin] = None):
        self.estimator = estimator if estimator is not None else SGDRegressor()

    @property
    def supports_weight(self) -> bool:
        return has_fit_parameter(self.estimator, "sample_weight")

    def clone(self, **overrides) -> "SklearnRegressorLearner":
        est = clone(self.estimator)
        if overrides:
            est.set_params(**overrides)
        return SklearnRegressorLearner(est)

    def fit(
        self,
        dataset: Dataset,
        *,
        label_col: str,
        features_col: str,
        prediction_col: str,
        weight_col: Optional[str] = None,
    ) -> SklearnRegressionModel:
        X = dataset.features_matrix(features_col)
        y = dataset.column_numpy(label_col)

        est = clone(self.estimator)
        if weight_col is not None and self.supports_weight:
            est.fit(X, y, sample_weight=dataset.column_numpy(weight_col))
        else:
            if weight_col is not None:
                logs.warning(
                    f"[SklearnLearner] {type(est).__name__} has no sample_weight, "
                    f"ignoring weight_col={weight_col}"
                )
            est.fit(X, y)

        return SklearnRegressionModel(est)

    def save(self, path: str | Path) -> None:
        path = FileSystem.ensure_dir(path)
        joblib.dump(self.estimator, path / "estimator.joblib")
        _write_meta(path, "learner", self.estimator)

    @classmethod
    def load(cls, path: str | Path) -> "SklearnRegressorLearner":
        return cls(_read_estimator(Path(path), "learner"))

    def __repr__(self) -> str:
        return f"SklearnRegressorLearner({self.estimator!r})"
