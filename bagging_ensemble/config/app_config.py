#!filepath: bagging_ensemble/config/app_config.py
import os

import yaml
from pydantic import BaseModel, Field

from .bagging_config import BaggingConfig
from .learner_config import LearnerConfig
from .log_config import LogConfig


def project_root() -> str:
    """
    Project root derived from this file:
    bagging_ensemble/config/app_config.py -> bagging_ensemble/config -> bagging_ensemble -> root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    bagging: BaggingConfig = Field(default_factory=BaggingConfig)
    learner: LearnerConfig = Field(default_factory=LearnerConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load a YAML config.
        - defaults to <project_root>/config/base.yml
        - independent of the current working directory
        """
        if path is None:
            path = os.path.join(project_root(), "config/base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        return cls(**raw)
