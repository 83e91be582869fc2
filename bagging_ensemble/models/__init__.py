from .ensemble_model import BaggingRegressionModel, Member

__all__ = ["BaggingRegressionModel", "Member"]
