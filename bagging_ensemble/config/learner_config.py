#!filepath: bagging_ensemble/config/learner_config.py
from typing import Any, Dict

from pydantic import BaseModel, Field


class LearnerConfig(BaseModel):
    """
    Base learner template selection.

    estimator: registry name, see learners.registry
    params:    forwarded verbatim to the sklearn estimator
    """

    estimator: str = "sgd"
    params: Dict[str, Any] = Field(default_factory=dict)
