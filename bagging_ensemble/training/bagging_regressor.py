# bagging_ensemble/training/bagging_regressor.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from bagging_ensemble import logs
from bagging_ensemble.config.bagging_config import BaggingConfig, validate_config
from bagging_ensemble.data.dataset import Dataset
from bagging_ensemble.learners.base import BaseLearner
from bagging_ensemble.learners.sklearn_learner import SklearnRegressorLearner
from bagging_ensemble.models.ensemble_model import BaggingRegressionModel
from bagging_ensemble.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)
from bagging_ensemble.sampling.sampler import plan_bag, plan_subspace
from bagging_ensemble.training.executor import ParallelExecutor
from bagging_ensemble.training.member_trainer import MemberTrainer
from bagging_ensemble.utils.identifiable import random_uid


class BaggingRegressor:
    """
    BaggingRegressor (orchestrator)

    Contract:
    - consumes a Dataset with label [, weight], features columns
    - produces a NEW BaggingRegressionModel; the estimator is never mutated
    - member i: bag drawn from (seed, i), subspace drawn from seed + i
    - at most `parallelism` member fits run at once
    - the working projection is cached for the fit and ALWAYS released
    """

    def __init__(
            self,
            base_learner: Optional[BaseLearner] = None,
            config: Optional[BaggingConfig] = None,
            *,
            inst: Instrumentation | None = None,
            uid: Optional[str] = None,
    ):
        self.base_learner: BaseLearner = (
            base_learner if base_learner is not None else SklearnRegressorLearner()
        )
        self.config: BaggingConfig = config if config is not None else BaggingConfig()
        self.inst: Instrumentation | NoOpInstrumentation = (
            inst if inst is not None else NoOpInstrumentation()
        )
        self.uid = uid or random_uid("BaggingRegressor")
        self.member_trainer = MemberTrainer()

    # --------------------------------------------------
    # copy / persistence
    # --------------------------------------------------
    def copy(self, **overrides) -> "BaggingRegressor":
        """
        Same uid, config fields overridden, base learner cloned.
        """
        return BaggingRegressor(
            self.base_learner.clone(),
            self.config.with_overrides(**overrides),
            inst=None if isinstance(self.inst, NoOpInstrumentation) else self.inst,
            uid=self.uid,
        )

    def save(self, path: str | Path, *, overwrite: bool = False) -> None:
        from bagging_ensemble.persistence.codec import save_estimator

        save_estimator(self, path, overwrite=overwrite)

    @staticmethod
    def load(path: str | Path) -> "BaggingRegressor":
        from bagging_ensemble.persistence.codec import load_estimator

        return load_estimator(path)

    # --------------------------------------------------
    # fit
    # --------------------------------------------------
    def resolve_weight_col(self) -> Optional[str]:
        weight_col = self.config.weight_col
        if not weight_col:
            return None
        if not self.base_learner.supports_weight:
            logs.warning(
                f"[BaggingRegressor] weight_col is ignored, as it is not supported "
                f"by {self.base_learner!r}"
            )
            return None
        return weight_col

    @logs.catch(msg="bagging fit failed")
    def fit(self, dataset: Dataset) -> BaggingRegressionModel:
        cfg = self.config
        validate_config(cfg)
        self.inst.reset()

        weight_col = self.resolve_weight_col()

        if weight_col is not None:
            df = dataset.select(cfg.label_col, weight_col, cfg.features_col)
        else:
            df = dataset.select(cfg.label_col, cfg.features_col)

        logs.info(
            f"[BaggingRegressor] fit uid={self.uid} rows={df.count()} "
            f"num_base_learners={cfg.num_base_learners} "
            f"sample_ratio={cfg.sample_ratio} replacement={cfg.replacement} "
            f"subspace_ratio={cfg.subspace_ratio} parallelism={cfg.parallelism} "
            f"seed={cfg.seed} weighted={weight_col is not None}"
        )

        handle_persistence = not dataset.is_cached and not df.is_cached
        if handle_persistence:
            df.persist()

        try:
            num_features = df.num_features(cfg.features_col)

            plan = plan_bag(
                num_rows=df.count(),
                replacement=cfg.replacement,
                sample_ratio=cfg.sample_ratio,
                num_base_learners=cfg.num_base_learners,
                seed=cfg.seed,
            )

            def _fit_member(i: int):
                with self.inst.timer(f"member-{i}"):
                    subspace = plan_subspace(
                        subspace_ratio=cfg.subspace_ratio,
                        num_features=num_features,
                        seed=cfg.seed + i,
                    )
                    bag = df.take(plan.indices(i))
                    model = self.member_trainer.fit(
                        bag,
                        subspace,
                        self.base_learner,
                        label_col=cfg.label_col,
                        features_col=cfg.features_col,
                        prediction_col=cfg.prediction_col,
                        weight_col=weight_col,
                    )
                logs.debug(
                    f"[BaggingRegressor] member={i} rows={bag.count()} subspace={list(subspace)}"
                )
                return subspace, model

            results = ParallelExecutor.run(
                items=range(cfg.num_base_learners),
                handler=_fit_member,
                max_workers=cfg.parallelism,
                name="member",
            )
        finally:
            if handle_persistence:
                df.unpersist()

        subspaces = [s for s, _ in results]
        models = [m for _, m in results]

        self.inst.generate_timeline_report(
            f"BaggingRegressor {self.uid}",
            names=[f"member-{i}" for i in range(cfg.num_base_learners)],
        )

        return BaggingRegressionModel(
            subspaces=tuple(subspaces),
            models=tuple(models),
            config=cfg,
            learner=self.base_learner,
            parent=self.uid,
        )

    def __repr__(self) -> str:
        return f"BaggingRegressor(uid={self.uid}, learner={self.base_learner!r})"
