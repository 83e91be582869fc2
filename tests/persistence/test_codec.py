# tests/persistence/test_codec.py
import json
import shutil

import numpy as np
import pytest

from bagging_ensemble.config.bagging_config import BaggingConfig
from bagging_ensemble.models.ensemble_model import BaggingRegressionModel
from bagging_ensemble.persistence.codec import (
    load_estimator,
    load_model,
    save_estimator,
    save_model,
)
from bagging_ensemble.training.bagging_regressor import BaggingRegressor
from bagging_ensemble.utils.errors import ArtifactFormatError, MissingArtifactError


@pytest.fixture
def fitted(dataset, linear_learner):
    cfg = BaggingConfig(num_base_learners=5, sample_ratio=0.8, subspace_ratio=0.5, seed=42)
    return BaggingRegressor(linear_learner, cfg).fit(dataset)


def test_layout(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)

    meta = json.loads((root / "metadata.json").read_text())
    assert meta["class"].endswith("BaggingRegressionModel")
    assert meta["uid"] == fitted.uid
    assert meta["numBaseModels"] == 5
    assert meta["paramMap"]["seed"] == 42
    assert (root / "learner").is_dir()

    for i in range(5):
        assert (root / f"model-{i}").is_dir()
        data = json.loads((root / f"data-{i}" / "subspace.json").read_text())
        assert data["subspace"] == list(fitted.subspaces[i])


def test_round_trip_predict_equivalent(fitted, dataset, tmp_path):
    save_model(fitted, tmp_path / "model")
    loaded = load_model(tmp_path / "model")

    assert loaded is not fitted
    assert loaded.uid == fitted.uid
    assert loaded.subspaces == fitted.subspaces
    assert loaded.config == fitted.config
    assert loaded.parent == fitted.parent

    X = dataset.features_matrix("features")
    boundary = np.array([
        np.zeros(4),
        np.full(4, np.finfo(np.float64).max / 1e6),
        np.full(4, -np.finfo(np.float64).max / 1e6),
    ])
    for row in np.vstack([X[:10], boundary]):
        assert loaded.predict(row) == fitted.predict(row)


def test_round_trip_stub_learner(dataset, mean_learner, tmp_path):
    cfg = BaggingConfig(num_base_learners=3, seed=1)
    model = BaggingRegressor(mean_learner, cfg).fit(dataset)

    model.save(tmp_path / "stub")
    loaded = model.load(tmp_path / "stub")

    x = np.ones(4)
    assert loaded.predict(x) == model.predict(x)
    assert repr(loaded.learner) == "MeanLearner(weighted=False)"


def test_missing_model_artifact(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)
    shutil.rmtree(root / "model-3")

    with pytest.raises(MissingArtifactError) as err:
        load_model(root)

    assert err.value.index == 3
    assert "model-3" in str(err.value.path)


def test_missing_subspace_artifact(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)
    shutil.rmtree(root / "data-1")

    with pytest.raises(MissingArtifactError) as err:
        load_model(root)

    assert err.value.index == 1
    assert err.value.what == "subspace"


def test_missing_model_payload(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)
    (root / "model-3" / "estimator.joblib").unlink()

    with pytest.raises(MissingArtifactError) as err:
        load_model(root)

    assert err.value.index == 3
    assert err.value.what == "model"
    assert "model-3" in str(err.value.path)


def test_missing_learner_template(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)
    assert json.loads((root / "metadata.json").read_text())["hasLearner"] is True
    shutil.rmtree(root / "learner")

    with pytest.raises(MissingArtifactError) as err:
        load_model(root)

    assert err.value.index is None
    assert err.value.what == "learner"


def test_model_without_learner_round_trips(fitted, tmp_path):
    bare = BaggingRegressionModel(fitted.subspaces, fitted.models, config=fitted.config)
    root = tmp_path / "bare"
    save_model(bare, root)

    assert json.loads((root / "metadata.json").read_text())["hasLearner"] is False
    assert not (root / "learner").exists()
    assert load_model(root).learner is None


def test_existing_location_requires_overwrite(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)

    with pytest.raises(FileExistsError):
        save_model(fitted, root)

    save_model(fitted, root, overwrite=True)
    assert load_model(root).num_base_models == 5


def test_wrong_class_rejected(fitted, tmp_path):
    root = tmp_path / "model"
    save_model(fitted, root)

    with pytest.raises(ArtifactFormatError):
        load_estimator(root)


def test_missing_metadata(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_model(tmp_path)


def test_estimator_round_trip(linear_learner, tmp_path):
    est = BaggingRegressor(linear_learner, BaggingConfig(num_base_learners=4, seed=5))
    save_estimator(est, tmp_path / "est")

    loaded = load_estimator(tmp_path / "est")

    assert loaded.uid == est.uid
    assert loaded.config == est.config
    assert type(loaded.base_learner.estimator).__name__ == "LinearRegression"
    assert not (tmp_path / "est" / "model-0").exists()
