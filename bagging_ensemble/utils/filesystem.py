#!filepath: bagging_ensemble/utils/filesystem.py
import json
import shutil
from pathlib import Path
from typing import Any

from bagging_ensemble import logs


class FileSystem:
    """
    Filesystem helpers used by the persistence codec
    - create directories
    - atomic JSON writes (tmp file -> rename)
    - remove files / directories
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] mkdir: {p}")
        return p

    @staticmethod
    def is_empty_dir(path: str | Path) -> bool:
        p = Path(path)
        return p.is_dir() and not any(p.iterdir())

    @staticmethod
    def safe_write(path: str | Path, data: bytes) -> None:
        """
        Atomic write:
            1) write a tmp file next to the target
            2) rename -> target
        """
        path = Path(path)
        FileSystem.ensure_dir(path.parent)

        tmp_path = path.with_suffix(path.suffix + ".tmp")

        with open(tmp_path, "wb") as f:
            f.write(data)

        tmp_path.replace(path)
        logs.debug(f"[FS] atomic write done: {path}")

    @staticmethod
    def write_json(path: str | Path, payload: Any) -> None:
        FileSystem.safe_write(
            path, json.dumps(payload, indent=2, sort_keys=True).encode("utf-8")
        )

    @staticmethod
    def read_json(path: str | Path) -> Any:
        return json.loads(Path(path).read_text(encoding="utf-8"))

    @staticmethod
    def remove(path: str | Path) -> None:
        p = Path(path)
        if not p.exists():
            return
        if p.is_dir():
            shutil.rmtree(p)
        else:
            p.unlink()
        logs.debug(f"[FS] removed: {p}")
