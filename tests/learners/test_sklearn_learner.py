# tests/learners/test_sklearn_learner.py
import numpy as np
import pytest
from sklearn.linear_model import LinearRegression, SGDRegressor
from sklearn.neighbors import KNeighborsRegressor

from bagging_ensemble.config.learner_config import LearnerConfig
from bagging_ensemble.data.dataset import Dataset
from bagging_ensemble.learners.registry import resolve_base_learner
from bagging_ensemble.learners.sklearn_learner import (
    SklearnRegressionModel,
    SklearnRegressorLearner,
)
from bagging_ensemble.utils.errors import ArtifactFormatError, ConfigurationError


def _fit(learner, ds, weight_col=None):
    return learner.fit(
        ds,
        label_col="label",
        features_col="features",
        prediction_col="prediction",
        weight_col=weight_col,
    )


def test_fit_does_not_touch_template(dataset):
    template = LinearRegression()
    learner = SklearnRegressorLearner(template)

    model = _fit(learner, dataset)

    assert not hasattr(template, "coef_")
    assert hasattr(model.estimator, "coef_")


def test_weight_support_detection():
    assert SklearnRegressorLearner(LinearRegression()).supports_weight
    assert not SklearnRegressorLearner(KNeighborsRegressor()).supports_weight


def test_weighted_fit_differs():
    X = np.array([[0.0], [1.0], [2.0]])
    ds = Dataset.from_numpy(X, [0.0, 1.0, 5.0], weights=[1.0, 1.0, 100.0])
    learner = SklearnRegressorLearner(LinearRegression())

    plain = _fit(learner, ds)
    weighted = _fit(learner, ds, weight_col="weight")

    assert plain.predict(np.array([2.0])) != pytest.approx(weighted.predict(np.array([2.0])))


def test_clone_with_overrides():
    learner = SklearnRegressorLearner(SGDRegressor(alpha=0.1))
    other = learner.clone(alpha=0.5)

    assert other.estimator.alpha == 0.5
    assert learner.estimator.alpha == 0.1


def test_model_save_load(dataset, tmp_path):
    model = _fit(SklearnRegressorLearner(LinearRegression()), dataset)
    model.save(tmp_path / "m")

    loaded = SklearnRegressionModel.load(tmp_path / "m")
    x = dataset.features_matrix("features")[0]
    assert loaded.predict(x) == model.predict(x)


def test_learner_artifact_is_not_a_model(tmp_path):
    SklearnRegressorLearner(LinearRegression()).save(tmp_path / "l")
    with pytest.raises(ArtifactFormatError):
        SklearnRegressionModel.load(tmp_path / "l")


@pytest.mark.parametrize("name", ["sgd", "linear", "ridge", "tree", "extra_tree"])
def test_resolve_base_learner(name):
    learner = resolve_base_learner(LearnerConfig(estimator=name))
    assert isinstance(learner, SklearnRegressorLearner)


def test_resolve_base_learner_params():
    learner = resolve_base_learner(LearnerConfig(estimator="tree", params={"max_depth": 2}))
    assert learner.estimator.max_depth == 2


def test_resolve_unknown_learner():
    with pytest.raises(ConfigurationError):
        resolve_base_learner(LearnerConfig(estimator="xgboost"))
