from __future__ import annotations

from typing import List, Tuple

import numpy as np


def class_counts(labels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Distinct labels in first-seen order and their counts."""
    labels = np.asarray(labels).reshape(-1)
    if labels.size == 0:
        return labels[:0].copy(), np.zeros(0, dtype=np.int64)
    values, first_index, inverse = np.unique(labels, return_index=True, return_inverse=True)
    counts = np.bincount(inverse.reshape(-1), minlength=len(values))
    order = np.argsort(first_index, kind="stable")
    return values[order], counts[order]


def entropy_from_counts(counts: np.ndarray) -> float:
    """Shannon entropy (bits) of a class-count vector; empty classes add 0."""
    total = counts.sum()
    if total <= 0:
        return 0.0
    p = counts / total
    p = p[p > 0]
    return float(-np.sum(p * np.log2(p)))


def purity_from_counts(counts: np.ndarray) -> float:
    """Population purity sum(p_c^2). 1.0 for a single class."""
    total = counts.sum()
    if total <= 0:
        return 0.0
    p = counts / total
    return float(np.sum(p * p))


def information_gain(
    parent: float, lesser: float, greater: float, lesser_frac: float, greater_frac: float
) -> float:
    """Reduction of entropy achieved by a binary split."""
    return float(parent - (lesser_frac * lesser + greater_frac * greater))


def weighted_purity(lesser: float, greater: float, lesser_frac: float, greater_frac: float) -> float:
    """Size-weighted purity of the two children of a split."""
    return float(lesser_frac * lesser + greater_frac * greater)


def accuracy(predicted: np.ndarray, actual: np.ndarray) -> float:
    """Fraction of exact label matches; 0.0 for empty input."""
    predicted = np.asarray(predicted)
    actual = np.asarray(actual)
    if actual.size == 0:
        return 0.0
    return float(np.count_nonzero(predicted == actual) / actual.size)


def majority_class(classes: List[float], counts: np.ndarray) -> float:
    """Class with the highest count; the first one listed wins ties."""
    # np.argmax returns the first maximal index
    return float(classes[int(np.argmax(counts))])
