from .sampler import BagPlan, Subspace, plan_bag, plan_subspace, subspace_size

__all__ = ["BagPlan", "Subspace", "plan_bag", "plan_subspace", "subspace_size"]
