from .app_config import AppConfig
from .bagging_config import BaggingConfig, validate_config
from .learner_config import LearnerConfig
from .log_config import LogConfig

__all__ = [
    "AppConfig",
    "BaggingConfig",
    "validate_config",
    "LearnerConfig",
    "LogConfig",
]
