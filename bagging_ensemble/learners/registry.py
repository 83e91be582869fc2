# bagging_ensemble/learners/registry.py
from typing import Callable, Dict, Type

from sklearn.linear_model import LinearRegression, Ridge, SGDRegressor
from sklearn.tree import DecisionTreeRegressor, ExtraTreeRegressor

from bagging_ensemble.config.learner_config import LearnerConfig
from bagging_ensemble.learners.base import BaseLearner, FittedModel
from bagging_ensemble.learners.sklearn_learner import (
    SklearnRegressionModel,
    SklearnRegressorLearner,
)
from bagging_ensemble.utils.errors import ArtifactFormatError, ConfigurationError

_ESTIMATOR_REGISTRY: Dict[str, Callable[..., object]] = {
    "sgd": SGDRegressor,
    "linear": LinearRegression,
    "ridge": Ridge,
    "tree": DecisionTreeRegressor,
    "extra_tree": ExtraTreeRegressor,
}

_LEARNER_CODECS: Dict[str, Type[BaseLearner]] = {
    SklearnRegressorLearner.kind: SklearnRegressorLearner,
}

_MODEL_CODECS: Dict[str, Type[FittedModel]] = {
    SklearnRegressionModel.kind: SklearnRegressionModel,
}


def resolve_base_learner(cfg: LearnerConfig) -> BaseLearner:
    if cfg.estimator not in _ESTIMATOR_REGISTRY:
        available = ", ".join(sorted(_ESTIMATOR_REGISTRY))
        raise ConfigurationError(
            f"No base learner named {cfg.estimator!r}. Available: {available}"
        )

    return SklearnRegressorLearner(_ESTIMATOR_REGISTRY[cfg.estimator](**cfg.params))


def learner_codec(kind: str) -> Type[BaseLearner]:
    if kind not in _LEARNER_CODECS:
        raise ArtifactFormatError(f"No learner codec for kind={kind!r}")
    return _LEARNER_CODECS[kind]


def model_codec(kind: str) -> Type[FittedModel]:
    if kind not in _MODEL_CODECS:
        raise ArtifactFormatError(f"No model codec for kind={kind!r}")
    return _MODEL_CODECS[kind]


def register_codec(learner_cls: Type[BaseLearner], model_cls: Type[FittedModel]) -> None:
    """
    Make a third-party learner / fitted model loadable from disk.
    """
    if not learner_cls.kind or learner_cls.kind != model_cls.kind:
        raise ValueError(
            f"learner and model must share a non-empty kind, "
            f"got {learner_cls.kind!r} / {model_cls.kind!r}"
        )
    _LEARNER_CODECS[learner_cls.kind] = learner_cls
    _MODEL_CODECS[model_cls.kind] = model_cls
