# bagging_ensemble/utils/identifiable.py
import uuid


def random_uid(prefix: str) -> str:
    """
    `<prefix>_<12 hex chars>`, e.g. BaggingRegressor_4c1f0a9e2b7d
    """
    return f"{prefix}_{uuid.uuid4().hex[-12:]}"
