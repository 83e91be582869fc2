# bagging_ensemble/sampling/sampler.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

Subspace = Tuple[int, ...]

_U64 = (1 << 64) - 1


def to_entropy(seed: int) -> int:
    """
    Map a signed 64-bit seed onto the non-negative range numpy accepts.
    """
    return int(seed) & _U64


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def member_rng(seed: int, member: int) -> np.random.Generator:
    """
    Row-sampling generator of one member: pure function of (seed, member).
    """
    return np.random.default_rng([to_entropy(seed), int(member)])


# ============================================================
# Bag plan
# ============================================================
@dataclass(frozen=True)
class BagPlan:
    """
    BagPlan (FROZEN)

    counts[i, r] = how many times row r appears in member i's bag.
    - replacement=True  -> Poisson(sample_ratio) counts (>= 0)
    - replacement=False -> Bernoulli(sample_ratio) inclusion (0 / 1)

    Rows are never duplicated here; the trainer expands a member's view
    on demand with `indices(i)`.
    """

    counts: np.ndarray
    replacement: bool
    sample_ratio: float
    seed: int

    @property
    def num_members(self) -> int:
        return int(self.counts.shape[0])

    @property
    def num_rows(self) -> int:
        return int(self.counts.shape[1])

    def bag_size(self, member: int) -> int:
        return int(self.counts[member].sum())

    def indices(self, member: int) -> np.ndarray:
        """
        Row positions of member's bag, row r repeated counts[member, r] times.
        """
        return np.repeat(np.arange(self.num_rows, dtype=np.int64), self.counts[member])


def draw_bag_counts(
        *,
        num_rows: int,
        replacement: bool,
        sample_ratio: float,
        seed: int,
        member: int,
) -> np.ndarray:
    rng = member_rng(seed, member)
    if replacement:
        return rng.poisson(lam=sample_ratio, size=num_rows).astype(np.int32)
    return (rng.random(num_rows) < sample_ratio).astype(np.int32)


def plan_bag(
        *,
        num_rows: int,
        replacement: bool,
        sample_ratio: float,
        num_base_learners: int,
        seed: int,
) -> BagPlan:
    """
    One row-count vector per member, computed once for the whole fit.
    """
    if num_rows < 0:
        raise ValueError(f"num_rows must be >= 0, got {num_rows}")

    counts = np.empty((num_base_learners, num_rows), dtype=np.int32)
    for i in range(num_base_learners):
        counts[i] = draw_bag_counts(
            num_rows=num_rows,
            replacement=replacement,
            sample_ratio=sample_ratio,
            seed=seed,
            member=i,
        )
    counts.setflags(write=False)

    return BagPlan(
        counts=counts,
        replacement=replacement,
        sample_ratio=sample_ratio,
        seed=seed,
    )


# ============================================================
# Subspace
# ============================================================
def subspace_size(subspace_ratio: float, num_features: int) -> int:
    return min(num_features, max(1, round_half_up(subspace_ratio * num_features)))


def plan_subspace(*, subspace_ratio: float, num_features: int, seed: int) -> Subspace:
    """
    Draw k distinct feature indices from [0, num_features).

    The draw order IS the positional layout of the member's input
    vector, at fit and at predict time.
    """
    if num_features < 1:
        raise ValueError(f"num_features must be >= 1, got {num_features}")

    k = subspace_size(subspace_ratio, num_features)
    rng = np.random.default_rng(to_entropy(seed))
    drawn = rng.choice(num_features, size=k, replace=False)
    return tuple(int(j) for j in drawn)
