"""
Base learner capability.

A base learner is an opaque, swappable template: the ensemble only ever
calls clone / fit / save / load on it, and predict / save / load on
what fit returns. Concrete adapters register a codec `kind` in
`registry` so persisted artifacts can be read back.
"""
from .base import BaseLearner, FittedModel
from .sklearn_learner import SklearnRegressionModel, SklearnRegressorLearner
from .registry import resolve_base_learner

__all__ = [
    "BaseLearner",
    "FittedModel",
    "SklearnRegressionModel",
    "SklearnRegressorLearner",
    "resolve_base_learner",
]
