# bagging_ensemble/config/bagging_config.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from bagging_ensemble.utils.errors import ConfigurationError


class BaggingConfig(BaseModel):
    """
    BaggingConfig (FROZEN)

    Enumerated hyperparameters of a bagging ensemble. The base learner
    template is NOT part of this struct: it is an opaque capability
    handed to the estimator separately and persisted by its own codec.

    Range checks live in `validate_config`, which the estimator calls
    before touching any data.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # columns
    label_col: str = "label"
    features_col: str = "features"
    prediction_col: str = "prediction"
    weight_col: Optional[str] = None

    # resampling
    replacement: bool = False
    sample_ratio: float = 1.0
    subspace_ratio: float = 1.0
    num_base_learners: int = 10
    seed: int = 0

    # execution
    parallelism: int = 1
    # reserved: member fits are awaited without a bound, only None is accepted
    member_fit_timeout: Optional[float] = None

    def with_overrides(self, **overrides) -> "BaggingConfig":
        """
        New config with `overrides` applied; unknown names and bad types
        raise ConfigurationError.
        """
        try:
            return BaggingConfig.model_validate({**self.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigurationError(f"invalid config override {sorted(overrides)}: {e}") from e

    def check(self) -> "BaggingConfig":
        validate_config(self)
        return self


def validate_config(cfg: BaggingConfig) -> None:
    """
    Raise ConfigurationError on the first invalid field.
    """
    if not 0.0 < cfg.sample_ratio <= 1.0:
        raise ConfigurationError(
            f"sample_ratio must be in (0, 1], got {cfg.sample_ratio}"
        )
    if not 0.0 < cfg.subspace_ratio <= 1.0:
        raise ConfigurationError(
            f"subspace_ratio must be in (0, 1], got {cfg.subspace_ratio}"
        )
    if cfg.num_base_learners < 1:
        raise ConfigurationError(
            f"num_base_learners must be >= 1, got {cfg.num_base_learners}"
        )
    if cfg.parallelism < 1:
        raise ConfigurationError(
            f"parallelism must be >= 1, got {cfg.parallelism}"
        )
    if cfg.member_fit_timeout is not None:
        raise ConfigurationError(
            "member_fit_timeout is reserved; member fits are awaited without a bound"
        )
    for name in ("label_col", "features_col", "prediction_col"):
        if not getattr(cfg, name):
            raise ConfigurationError(f"{name} must be a non-empty column name")
