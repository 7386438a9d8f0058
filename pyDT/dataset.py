from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .metrics import class_counts as _class_counts
from .metrics import entropy_from_counts, purity_from_counts
from .utils import ensure_numpy

FEATURE_DTYPE = np.float32


class Dataset:
    """Row-major numeric feature matrix with an optional label vector.

    Features and labels are stored in ``float32`` buffers that grow by
    doubling as rows are appended; statistics accumulate in ``float64``.
    Labels are class identifiers compared by equality.

    Parameters
    ----------
    column_count : int
        Number of feature columns. Every row must have exactly this many values.
    has_labels : bool
        Whether each row carries a label.
    """

    def __init__(self, column_count: int, has_labels: bool = True) -> None:
        if column_count < 0:
            raise ValueError("column_count must be non-negative")
        self.column_count = int(column_count)
        self.has_labels = bool(has_labels)
        self.row_count = 0
        self._features = np.empty((0, self.column_count), dtype=FEATURE_DTYPE)
        self._labels: Optional[np.ndarray] = (
            np.empty(0, dtype=FEATURE_DTYPE) if self.has_labels else None
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_arrays(cls, features, labels=None) -> "Dataset":
        """Bulk-load a dataset from a 2-D array-like and optional labels."""
        X_arr, y_arr, _ = ensure_numpy(features, labels)
        return cls._from_buffers(X_arr, y_arr)

    @classmethod
    def from_table(cls, table, last_column_is_label: bool) -> "Dataset":
        """Bulk-load from an ingested table (see :class:`pyDT.io.CSVTable`).

        When ``last_column_is_label`` is true the final column becomes the
        label vector and the rest the features.
        """
        data = np.asarray(table.data, dtype=FEATURE_DTYPE).reshape(
            table.row_count, table.column_count
        )
        if last_column_is_label:
            if table.column_count < 1:
                raise ValueError("A labeled table needs at least one column.")
            return cls._from_buffers(data[:, :-1], data[:, -1])
        return cls._from_buffers(data, None)

    @classmethod
    def _from_buffers(cls, features: np.ndarray, labels: Optional[np.ndarray]) -> "Dataset":
        ds = cls(features.shape[1], has_labels=labels is not None)
        ds._features = np.array(features, dtype=FEATURE_DTYPE, copy=True)
        if labels is not None:
            ds._labels = np.array(labels, dtype=FEATURE_DTYPE, copy=True).reshape(-1)
        ds.row_count = features.shape[0]
        return ds

    def add_row(self, values, label: Optional[float] = None) -> None:
        """Append one row. ``label`` is ignored when the dataset has no labels."""
        row = np.asarray(values, dtype=FEATURE_DTYPE).reshape(-1)
        if row.shape[0] != self.column_count:
            raise ValueError(
                f"Expected {self.column_count} values, got {row.shape[0]}."
            )
        if self.has_labels and label is None:
            raise ValueError("A labeled dataset requires a label for every row.")

        self._reserve(self.row_count + 1)
        self._features[self.row_count] = row
        if self.has_labels:
            self._labels[self.row_count] = label
        self.row_count += 1

    def take(self, indices) -> "Dataset":
        """Return a new dataset holding the selected rows, in order."""
        indices = np.asarray(indices, dtype=np.intp)
        labels = self.labels[indices] if self.has_labels else None
        return Dataset._from_buffers(self.features[indices], labels)

    def _reserve(self, needed: int) -> None:
        capacity = self.capacity
        if needed <= capacity:
            return
        new_capacity = max(needed, 2 * capacity, 1)
        features = np.empty((new_capacity, self.column_count), dtype=FEATURE_DTYPE)
        features[: self.row_count] = self._features[: self.row_count]
        self._features = features
        if self.has_labels:
            labels = np.empty(new_capacity, dtype=FEATURE_DTYPE)
            labels[: self.row_count] = self._labels[: self.row_count]
            self._labels = labels

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def capacity(self) -> int:
        return self._features.shape[0]

    @property
    def features(self) -> np.ndarray:
        return self._features[: self.row_count]

    @property
    def labels(self) -> Optional[np.ndarray]:
        if not self.has_labels:
            return None
        return self._labels[: self.row_count]

    def __len__(self) -> int:
        return self.row_count

    def __repr__(self) -> str:
        return (
            f"Dataset(rows={self.row_count}, columns={self.column_count}, "
            f"has_labels={self.has_labels})"
        )

    # ------------------------------------------------------------------
    # Column statistics
    # ------------------------------------------------------------------
    def _column(self, col: int) -> Optional[np.ndarray]:
        if not 0 <= col < self.column_count:
            logger.warning(
                "Column {} out of range for dataset with {} columns", col, self.column_count
            )
            return None
        if self.row_count == 0:
            logger.debug("Column statistic requested on an empty dataset")
            return None
        return self.features[:, col]

    def min(self, col: int) -> float:
        values = self._column(col)
        return 0.0 if values is None else float(values.min())

    def max(self, col: int) -> float:
        values = self._column(col)
        return 0.0 if values is None else float(values.max())

    def mean(self, col: int) -> float:
        values = self._column(col)
        if values is None:
            return 0.0
        return float(values.sum(dtype=np.float64) / self.row_count)

    def variance(self, col: int) -> float:
        """Population variance of a column."""
        values = self._column(col)
        if values is None:
            return 0.0
        diff = values.astype(np.float64) - self.mean(col)
        return float(np.mean(diff * diff))

    # ------------------------------------------------------------------
    # Class distribution
    # ------------------------------------------------------------------
    def _require_labels(self, what: str) -> bool:
        if not self.has_labels:
            logger.warning("{} calculation requires labels", what)
            return False
        return True

    def class_counts(self) -> Tuple[List[float], np.ndarray]:
        """Distinct classes (first-seen order) and how many rows hold each."""
        if not self._require_labels("Class count"):
            return [], np.zeros(0, dtype=np.int64)
        values, counts = _class_counts(self.labels)
        return [float(v) for v in values], counts

    def distinct_classes(self) -> List[float]:
        return self.class_counts()[0]

    def entropy(self) -> float:
        if not self._require_labels("Entropy"):
            return 0.0
        return entropy_from_counts(_class_counts(self.labels)[1])

    def gini_index(self) -> float:
        """Population purity: sum of squared class proportions (higher is purer)."""
        if not self._require_labels("Gini index"):
            return 0.0
        return purity_from_counts(_class_counts(self.labels)[1])

    gini_purity = gini_index

    def is_pure(self) -> bool:
        """True when every label is identical (vacuously true when empty)."""
        labels = self.labels
        if labels is None or labels.size == 0:
            return True
        return bool(np.all(labels == labels[0]))
