# bagging_ensemble/utils/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Optional


class BaggingError(RuntimeError):
    """
    Root of every error raised by this package itself.

    Errors raised by a base learner's own fit are NOT wrapped.
    """


class ConfigurationError(BaggingError, ValueError):
    """
    Raised for invalid user-provided config (ratios, member count, ...).
    Always raised before any dataset work.
    """


class ArtifactFormatError(BaggingError):
    """
    Persisted metadata is unreadable or belongs to another class.
    """


class MissingArtifactError(BaggingError, FileNotFoundError):
    """
    A persisted artifact (model-<i> / data-<i> / learner) is absent on load.
    `index` is None for artifacts shared by all members.
    """

    def __init__(self, index: Optional[int], path: str | Path, what: str = "model"):
        self.index = index
        self.path = Path(path)
        self.what = what
        owner = "ensemble" if index is None else f"member {index}"
        super().__init__(f"missing {what} artifact for {owner} at {self.path}")
