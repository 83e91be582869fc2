# bagging_ensemble/data/dataset.py
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

import numpy as np
import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from bagging_ensemble import logs


class Dataset:
    """
    Dataset (in-memory, columnar)

    Thin wrapper over a pyarrow.Table exposing the operations the ensemble
    trainer needs from its host data engine:
      - select / with_column / take / transform
      - persist / unpersist (idempotent)
      - count / num_features

    Feature vectors live in ONE column of type list<double>.
    Every transformation returns a NEW, uncached Dataset.
    """

    def __init__(self, table: pa.Table):
        self._table = table
        self._cached = False

    # ======================================================================
    # Constructors
    # ======================================================================
    @classmethod
    def from_numpy(
            cls,
            features: np.ndarray,
            labels: Optional[Sequence[float]] = None,
            *,
            weights: Optional[Sequence[float]] = None,
            features_col: str = "features",
            label_col: str = "label",
            weight_col: str = "weight",
    ) -> "Dataset":
        X = np.asarray(features, dtype=np.float64)
        if X.ndim != 2:
            raise ValueError(f"features must be 2-D, got shape={X.shape}")

        columns = {}
        if labels is not None:
            columns[label_col] = pa.array(np.asarray(labels, dtype=np.float64))
        if weights is not None:
            columns[weight_col] = pa.array(np.asarray(weights, dtype=np.float64))
        columns[features_col] = _vector_array(X)

        return cls(pa.table(columns))

    @classmethod
    def from_pandas(
            cls,
            df: pd.DataFrame,
            *,
            feature_columns: Iterable[str],
            features_col: str = "features",
    ) -> "Dataset":
        """
        Assemble scalar feature columns into a single vector column.
        Remaining columns are kept as-is.
        """
        feature_columns = list(feature_columns)
        missing = [c for c in feature_columns if c not in df.columns]
        if missing:
            raise KeyError(f"feature columns not found: {missing}")

        X = df[feature_columns].to_numpy(dtype=np.float64)
        rest = df.drop(columns=feature_columns)

        table = pa.Table.from_pandas(rest, preserve_index=False)
        table = table.append_column(features_col, _vector_array(X))
        return cls(table)

    @classmethod
    def read_parquet(
            cls,
            path: str | Path,
            *,
            feature_columns: Optional[Iterable[str]] = None,
            features_col: str = "features",
    ) -> "Dataset":
        """
        feature_columns=None: the file already holds a vector column.
        """
        if feature_columns is None:
            return cls(pq.read_table(path))
        return cls.from_pandas(
            pd.read_parquet(path),
            feature_columns=feature_columns,
            features_col=features_col,
        )

    # ======================================================================
    # Introspection
    # ======================================================================
    @property
    def table(self) -> pa.Table:
        return self._table

    @property
    def columns(self) -> list[str]:
        return list(self._table.column_names)

    @property
    def is_cached(self) -> bool:
        return self._cached

    def count(self) -> int:
        return self._table.num_rows

    def __len__(self) -> int:
        return self._table.num_rows

    def num_features(self, features_col: str) -> int:
        """
        Feature dimensionality, read from the first row.
        """
        if self._table.num_rows == 0:
            raise ValueError("cannot infer number of features from an empty dataset")
        first = self._table.column(features_col)[0].as_py()
        if first is None:
            raise ValueError(f"first row of {features_col!r} is null")
        return len(first)

    # ======================================================================
    # Column access
    # ======================================================================
    def column_numpy(self, name: str) -> np.ndarray:
        return self._table.column(name).to_numpy().astype(np.float64, copy=False)

    def features_matrix(self, features_col: str) -> np.ndarray:
        """
        (N, D) float64 matrix of the vector column.
        """
        n = self._table.num_rows
        if n == 0:
            return np.empty((0, 0), dtype=np.float64)
        col = self._table.column(features_col).combine_chunks()
        flat = col.flatten().to_numpy(zero_copy_only=False).astype(np.float64, copy=False)
        if flat.size % n != 0:
            raise ValueError(f"{features_col!r} holds vectors of unequal length")
        return flat.reshape(n, flat.size // n)

    # ======================================================================
    # Transformations
    # ======================================================================
    def select(self, *names: str) -> "Dataset":
        missing = [c for c in names if c not in self._table.column_names]
        if missing:
            raise KeyError(f"columns not found: {missing}")
        return Dataset(self._table.select(list(names)))

    def with_column(self, name: str, values) -> "Dataset":
        """
        Add or replace a column. 2-D numpy input becomes a vector column.
        """
        if isinstance(values, np.ndarray) and values.ndim == 2:
            arr = _vector_array(values)
        elif isinstance(values, (pa.Array, pa.ChunkedArray)):
            arr = values
        else:
            arr = pa.array(np.asarray(values))

        if name in self._table.column_names:
            idx = self._table.column_names.index(name)
            return Dataset(self._table.set_column(idx, name, arr))
        return Dataset(self._table.append_column(name, arr))

    def take(self, indices: np.ndarray) -> "Dataset":
        """
        Rows by position; repeated positions repeat rows.
        """
        return Dataset(self._table.take(pa.array(np.asarray(indices, dtype=np.int64))))

    def transform(self, fn: Callable[["Dataset"], "Dataset"]) -> "Dataset":
        return fn(self)

    # ======================================================================
    # Caching
    # ======================================================================
    def persist(self) -> "Dataset":
        if not self._cached:
            self._table = self._table.combine_chunks()
            self._cached = True
            logs.debug(f"[Dataset] persisted rows={self.count()} cols={self.columns}")
        return self

    def unpersist(self) -> "Dataset":
        if self._cached:
            self._cached = False
            logs.debug("[Dataset] unpersisted")
        return self

    # ======================================================================
    # Output
    # ======================================================================
    def to_pandas(self) -> pd.DataFrame:
        return self._table.to_pandas()

    def write_parquet(self, path: str | Path) -> None:
        pq.write_table(self._table, path)

    def __repr__(self) -> str:
        return f"Dataset(rows={self.count()}, columns={self.columns}, cached={self._cached})"


def _vector_array(X: np.ndarray) -> pa.ListArray:
    X = np.ascontiguousarray(X, dtype=np.float64)
    n, d = X.shape
    offsets = pa.array(np.arange(n + 1, dtype=np.int32) * d)
    return pa.ListArray.from_arrays(offsets, pa.array(X.reshape(-1)))
