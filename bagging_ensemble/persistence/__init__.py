from .codec import load_estimator, load_model, save_estimator, save_model

__all__ = ["save_model", "load_model", "save_estimator", "load_estimator"]
