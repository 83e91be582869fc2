#!filepath: tests/config/test_app_config.py
import yaml
import pytest

from bagging_ensemble.config import AppConfig
from bagging_ensemble.config.bagging_config import BaggingConfig
from bagging_ensemble.config.learner_config import LearnerConfig
from bagging_ensemble.config.log_config import LogConfig


@pytest.fixture
def sample_config_file(tmp_path):
    data = {
        "log": {"level": "DEBUG"},
        "bagging": {
            "num_base_learners": 3,
            "sample_ratio": 0.8,
            "subspace_ratio": 0.5,
            "seed": 42,
            "parallelism": 2,
        },
        "learner": {"estimator": "tree", "params": {"max_depth": 3}},
    }
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump(data), encoding="utf-8")
    return config_file


def test_app_config_load(sample_config_file):
    cfg = AppConfig.load(path=str(sample_config_file))

    assert isinstance(cfg.log, LogConfig)
    assert isinstance(cfg.bagging, BaggingConfig)
    assert isinstance(cfg.learner, LearnerConfig)

    assert cfg.log.level == "DEBUG"
    assert cfg.bagging.num_base_learners == 3
    assert cfg.bagging.parallelism == 2
    assert cfg.learner.params == {"max_depth": 3}


def test_missing_sections_use_defaults(tmp_path):
    f = tmp_path / "empty.yaml"
    f.write_text("", encoding="utf-8")

    cfg = AppConfig.load(path=str(f))
    assert cfg.bagging == BaggingConfig()


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        AppConfig.load(path="/nonexistent/config.yaml")


def test_bad_field_should_fail(tmp_path):
    f = tmp_path / "bad.yaml"
    f.write_text(yaml.safe_dump({"bagging": {"num_base_learner": 3}}))

    with pytest.raises(Exception):
        AppConfig.load(path=str(f))


def test_repo_base_config_loads():
    cfg = AppConfig.load()
    cfg.bagging.check()
