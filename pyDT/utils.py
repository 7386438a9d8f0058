from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

import numpy as np

from .metrics import information_gain, weighted_purity

if TYPE_CHECKING:
    from .dataset import Dataset


class Criterion(enum.Enum):
    """Impurity criterion used to score candidate splits."""

    GINI = "gini"
    ENTROPY = "entropy"

    @classmethod
    def parse(cls, value: Union["Criterion", str]) -> "Criterion":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown criterion {value!r}; use 'entropy' or 'gini'"
            ) from None


def ensure_numpy(X, y=None) -> Tuple[np.ndarray, Optional[np.ndarray], List[str]]:
    """Convert inputs to contiguous numpy arrays and extract feature names."""
    feature_names: List[str]
    if hasattr(X, "to_numpy"):
        feature_names = [str(c) for c in getattr(X, "columns", [])]
        X_arr = X.to_numpy(dtype=float)
    else:
        X_arr = np.asarray(X, dtype=float)
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        feature_names = [f"x{i}" for i in range(X_arr.shape[1])]
    if X_arr.ndim != 2:
        raise ValueError("X must be a 2-D array.")
    if y is None:
        return np.ascontiguousarray(X_arr, dtype=float), None, feature_names
    y_arr = np.asarray(y, dtype=float).reshape(-1)
    if X_arr.shape[0] != y_arr.shape[0]:
        raise ValueError("X and y must have the same number of rows.")
    return np.ascontiguousarray(X_arr, dtype=float), y_arr, feature_names


@dataclass
class SplitCandidate:
    column: int
    threshold: float
    score: float
    lesser_indices: np.ndarray
    greater_indices: np.ndarray


def partition(values: np.ndarray, threshold: float) -> Tuple[np.ndarray, np.ndarray]:
    """Row indices with ``value < threshold`` and ``value >= threshold``."""
    mask = values < threshold
    return np.flatnonzero(mask), np.flatnonzero(~mask)


def split_score(dataset: "Dataset", column: int, threshold: float, criterion: Criterion) -> float:
    """Score the split of ``dataset`` on ``column`` at ``threshold``.

    For entropy this is the information gain over the parent population.
    For gini it is the size-weighted purity of the two children alone; the
    parent's purity is not subtracted.
    """
    lesser_idx, greater_idx = partition(dataset.features[:, column], threshold)
    lesser = dataset.take(lesser_idx)
    greater = dataset.take(greater_idx)
    lesser_frac = len(lesser_idx) / dataset.row_count
    greater_frac = len(greater_idx) / dataset.row_count

    if criterion is Criterion.ENTROPY:
        return information_gain(
            dataset.entropy(), lesser.entropy(), greater.entropy(), lesser_frac, greater_frac
        )
    return weighted_purity(lesser.gini_index(), greater.gini_index(), lesser_frac, greater_frac)


def column_threshold(dataset: "Dataset", column: int) -> float:
    """Column mean, rounded to the storage precision of the features."""
    return float(np.float32(dataset.mean(column)))


def find_best_split(dataset: "Dataset", criterion: Criterion) -> Optional[SplitCandidate]:
    """Pick the column whose mean-threshold split scores best.

    Every column is split at its mean. Columns whose split leaves one side
    empty are skipped. Ties keep the lowest column index. Returns ``None``
    when no column separates the rows (including a dataset without rows or
    columns).
    """
    if dataset.row_count == 0 or dataset.column_count == 0:
        return None

    best: Optional[SplitCandidate] = None
    for column in range(dataset.column_count):
        threshold = column_threshold(dataset, column)
        lesser_idx, greater_idx = partition(dataset.features[:, column], threshold)
        if len(lesser_idx) == 0 or len(greater_idx) == 0:
            continue
        score = split_score(dataset, column, threshold, criterion)
        if best is None or score > best.score:
            best = SplitCandidate(
                column=column,
                threshold=threshold,
                score=float(score),
                lesser_indices=lesser_idx,
                greater_indices=greater_idx,
            )
    return best
