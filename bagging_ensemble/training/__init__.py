"""
Ensemble training.

BaggingRegressor drives the Sampler, fans member fits out over a
ParallelExecutor and fans them back in, in member order. MemberTrainer
fits exactly one member and knows nothing about the others.
"""
from .bagging_regressor import BaggingRegressor
from .executor import ParallelExecutor
from .member_trainer import MemberTrainer

__all__ = ["BaggingRegressor", "ParallelExecutor", "MemberTrainer"]
