# bagging_ensemble/persistence/codec.py
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Tuple

from bagging_ensemble import logs, __version__
from bagging_ensemble.config.bagging_config import BaggingConfig
from bagging_ensemble.learners.base import BaseLearner, FittedModel
from bagging_ensemble.learners.registry import learner_codec, model_codec
from bagging_ensemble.models.ensemble_model import BaggingRegressionModel
from bagging_ensemble.training.bagging_regressor import BaggingRegressor
from bagging_ensemble.utils.errors import ArtifactFormatError, MissingArtifactError
from bagging_ensemble.utils.filesystem import FileSystem

# ============================================================
# Layout (FROZEN)
#
#   <root>/metadata.json
#   <root>/learner/            base learner template (own codec)
#   <root>/model-<i>/          fitted member i (own codec)
#   <root>/data-<i>/subspace.json   {"subspace": [...]}
# ============================================================
METADATA_FILE = "metadata.json"
LEARNER_DIR = "learner"
SUBSPACE_FILE = "subspace.json"

MODEL_CLASS = "bagging_ensemble.models.ensemble_model.BaggingRegressionModel"
ESTIMATOR_CLASS = "bagging_ensemble.training.bagging_regressor.BaggingRegressor"


def model_dir(root: str | Path, idx: int) -> Path:
    return Path(root) / f"model-{idx}"


def data_dir(root: str | Path, idx: int) -> Path:
    return Path(root) / f"data-{idx}"


# ============================================================
# Shared metadata + learner
# ============================================================
def _prepare_root(path: str | Path, overwrite: bool) -> Path:
    root = Path(path)
    if root.exists() and not FileSystem.is_empty_dir(root):
        if not overwrite:
            raise FileExistsError(
                f"[Persistence] {root} already exists; use overwrite=True to replace it"
            )
        logs.warning(f"[Persistence] overwriting {root}")
        FileSystem.remove(root)
    return FileSystem.ensure_dir(root)


def _save_metadata(
        root: Path,
        *,
        cls_name: str,
        uid: str,
        config: BaggingConfig,
        extra: Dict[str, Any] | None = None,
) -> None:
    meta = {
        "class": cls_name,
        "uid": uid,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "paramMap": config.model_dump(),
    }
    if extra:
        meta.update(extra)
    FileSystem.write_json(root / METADATA_FILE, meta)


def _load_metadata(root: Path, expected_class: str) -> Dict[str, Any]:
    meta_path = root / METADATA_FILE
    if not meta_path.exists():
        raise FileNotFoundError(f"[Persistence] {METADATA_FILE} not found in {root}")

    try:
        meta = FileSystem.read_json(meta_path)
    except ValueError as e:
        raise ArtifactFormatError(f"[Persistence] unreadable metadata at {meta_path}: {e}") from e

    if meta.get("class") != expected_class:
        raise ArtifactFormatError(
            f"[Persistence] expected class {expected_class}, got {meta.get('class')} at {root}"
        )
    return meta


def _save_learner(root: Path, learner: BaseLearner) -> None:
    learner.save(root / LEARNER_DIR)


def _load_learner(root: Path) -> BaseLearner:
    path = root / LEARNER_DIR
    meta_path = path / METADATA_FILE
    if not meta_path.exists():
        raise MissingArtifactError(None, path, what="learner")
    kind = FileSystem.read_json(meta_path).get("kind", "")
    try:
        return learner_codec(kind).load(path)
    except FileNotFoundError as e:
        raise MissingArtifactError(None, path, what="learner") from e


def _config_from(meta: Dict[str, Any]) -> BaggingConfig:
    return BaggingConfig(**meta.get("paramMap", {}))


# ============================================================
# Members
# ============================================================
def _save_member(root: Path, idx: int, subspace, model: FittedModel) -> None:
    model.save(model_dir(root, idx))
    FileSystem.write_json(
        data_dir(root, idx) / SUBSPACE_FILE,
        {"subspace": [int(j) for j in subspace]},
    )


def _load_member(root: Path, idx: int) -> Tuple[Tuple[int, ...], FittedModel]:
    m_dir = model_dir(root, idx)
    m_meta = m_dir / METADATA_FILE
    if not m_meta.exists():
        raise MissingArtifactError(idx, m_dir, what="model")

    d_file = data_dir(root, idx) / SUBSPACE_FILE
    if not d_file.exists():
        raise MissingArtifactError(idx, data_dir(root, idx), what="subspace")

    kind = FileSystem.read_json(m_meta).get("kind", "")
    try:
        model = model_codec(kind).load(m_dir)
    except FileNotFoundError as e:
        # metadata present but the payload is not
        raise MissingArtifactError(idx, m_dir, what="model") from e

    payload = FileSystem.read_json(d_file)
    if "subspace" not in payload:
        raise ArtifactFormatError(f"[Persistence] no 'subspace' field in {d_file}")
    subspace = tuple(int(j) for j in payload["subspace"])

    return subspace, model


# ============================================================
# Public API: model
# ============================================================
def save_model(
        model: BaggingRegressionModel,
        path: str | Path,
        *,
        overwrite: bool = False,
) -> None:
    """
    Write metadata, the learner template, then every member by index.

    Not atomic across members: an interrupted save leaves fewer member
    artifacts than numBaseModels, which load_model rejects.
    """
    root = _prepare_root(path, overwrite)

    _save_metadata(
        root,
        cls_name=MODEL_CLASS,
        uid=model.uid,
        config=model.config,
        extra={
            "numBaseModels": model.num_base_models,
            "parent": model.parent,
            "hasLearner": model.learner is not None,
        },
    )
    if model.learner is not None:
        _save_learner(root, model.learner)

    for idx, (subspace, member) in enumerate(zip(model.subspaces, model.models)):
        _save_member(root, idx, subspace, member)

    logs.info(
        f"[Persistence] saved {model.uid} members={model.num_base_models} -> {root}"
    )


def load_model(path: str | Path) -> BaggingRegressionModel:
    root = Path(path)
    meta = _load_metadata(root, MODEL_CLASS)

    if "numBaseModels" not in meta:
        raise ArtifactFormatError(f"[Persistence] numBaseModels missing in {root}")
    num_models = int(meta["numBaseModels"])

    has_learner = meta.get("hasLearner", (root / LEARNER_DIR).exists())
    learner = _load_learner(root) if has_learner else None

    # every member must be present before anything is returned
    members = [_load_member(root, idx) for idx in range(num_models)]

    logs.info(f"[Persistence] loaded {meta['uid']} members={num_models} <- {root}")

    return BaggingRegressionModel(
        subspaces=tuple(s for s, _ in members),
        models=tuple(m for _, m in members),
        config=_config_from(meta),
        learner=learner,
        uid=meta["uid"],
        parent=meta.get("parent"),
    )


# ============================================================
# Public API: estimator
# ============================================================
def save_estimator(
        estimator: BaggingRegressor,
        path: str | Path,
        *,
        overwrite: bool = False,
) -> None:
    root = _prepare_root(path, overwrite)
    _save_metadata(root, cls_name=ESTIMATOR_CLASS, uid=estimator.uid, config=estimator.config)
    _save_learner(root, estimator.base_learner)
    logs.info(f"[Persistence] saved estimator {estimator.uid} -> {root}")


def load_estimator(path: str | Path) -> BaggingRegressor:
    root = Path(path)
    meta = _load_metadata(root, ESTIMATOR_CLASS)
    return BaggingRegressor(
        _load_learner(root),
        _config_from(meta),
        uid=meta["uid"],
    )
