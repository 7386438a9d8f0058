from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional, Union

import numpy as np
from loguru import logger

from .dataset import Dataset
from .metrics import accuracy, majority_class
from .pruning import prune_tree
from .tree import UNDEFINED_CLASS, Node, count_nodes, format_label, tree_depth
from .utils import Criterion, find_best_split


class DecisionTree:
    """Binary decision-tree classifier over numeric features.

    Each internal node splits one column at the mean of the rows that reach
    it; the column is chosen by the impurity criterion. Growth stops only
    when a population is pure (or cannot be separated), so there is no depth
    limit. A trained tree can be pruned against a validation set with
    :meth:`prune`.

    Parameters
    ----------
    seed : Optional[int]
        Seed recorded on the tree as ``seed_``. ``None`` or ``0`` uses the
        current clock reading. Training is deterministic and draws no
        random numbers.
    criterion : {'gini', 'entropy'} or Criterion
        ``'entropy'`` ranks splits by information gain, ``'gini'`` by the
        weighted purity of the two children.
    store_history : bool
        If True, keeps a log of chosen splits for diagnostics.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        criterion: Union[Criterion, str] = Criterion.GINI,
        store_history: bool = False,
    ) -> None:
        self.seed = seed
        self.criterion = Criterion.parse(criterion)
        self.store_history = store_history

        self.seed_: int = int(seed) if seed else time.time_ns()
        self.root_: Node = Node()
        self.dataset_: Optional[Dataset] = None
        self.history_: List[Dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------
    def train(self, dataset: Dataset) -> int:
        """Grow the tree on a labeled dataset and return its node count.

        The tree keeps a reference to ``dataset``; pruning uses it to relabel
        nodes, so it must stay unchanged until pruning is done.
        """
        if not dataset.has_labels:
            logger.error("Training data must have labels")
            return 0

        self.root_ = Node()
        self.dataset_ = dataset
        self.history_ = []
        count = self._split(self.root_, dataset, depth=0)
        logger.info("Decision tree has {} nodes", count)
        return count

    def _split(self, node: Node, population: Dataset, depth: int) -> int:
        if population.row_count == 0:
            logger.error("No rows left in training population at depth {}", depth)
            return 0

        node.depth = depth
        node.n_samples = population.row_count
        if population.is_pure():
            node.make_leaf(population.labels[0])
            return 1

        candidate = find_best_split(population, self.criterion)
        if candidate is None:
            # no column separates these rows; splitting would never terminate
            classes, counts = population.class_counts()
            node.make_leaf(majority_class(classes, counts))
            logger.debug(
                "No column separates {} rows at depth {}; made a majority leaf",
                population.row_count,
                depth,
            )
            return 1

        n_lesser = len(candidate.lesser_indices)
        n_greater = len(candidate.greater_indices)
        node.split_column = candidate.column
        node.split_threshold = candidate.threshold
        if self.store_history:
            self.history_.append(
                {
                    "depth": depth,
                    "column": candidate.column,
                    "threshold": candidate.threshold,
                    "score": candidate.score,
                    "n_lesser": n_lesser,
                    "n_greater": n_greater,
                }
            )

        count = 1
        for indices, attach in (
            (candidate.lesser_indices, node.attach_left),
            (candidate.greater_indices, node.attach_right),
        ):
            if len(indices) == 0:
                continue
            child = attach(Node())
            count += self._split(child, population.take(indices), depth + 1)
        return count

    # ------------------------------------------------------------------
    # Classification and scoring
    # ------------------------------------------------------------------
    def classify(self, row) -> float:
        """Predicted class of one feature row, or ``UNDEFINED_CLASS``."""
        return self.root_.classify_row(row)

    def predict(self, dataset: Dataset) -> np.ndarray:
        """Predicted class for every row of ``dataset``."""
        preds = np.full(dataset.row_count, UNDEFINED_CLASS, dtype=float)
        if self.dataset_ is not None and dataset.column_count != self.dataset_.column_count:
            logger.warning(
                "Dataset has {} columns but the tree was trained on {}",
                dataset.column_count,
                self.dataset_.column_count,
            )
            return preds
        self._predict_recursive(
            self.root_, dataset.features, np.arange(dataset.row_count), preds
        )
        return preds

    def _predict_recursive(
        self, node: Node, X: np.ndarray, indices: np.ndarray, results: np.ndarray
    ) -> None:
        if len(indices) == 0:
            return

        if node.is_leaf:
            results[indices] = node.prediction_value
            return

        left, right = node.left, node.right
        if left is None and right is None:
            logger.debug("Internal node without children; {} rows unclassified", len(indices))
            results[indices] = UNDEFINED_CLASS
            return

        goes_left = X[indices, node.split_column] < node.split_threshold
        self._predict_recursive(
            left if left is not None else right, X, indices[goes_left], results
        )
        self._predict_recursive(
            right if right is not None else left, X, indices[~goes_left], results
        )

    def score(self, dataset: Dataset) -> float:
        """Fraction of rows whose predicted class equals the label."""
        if not dataset.has_labels:
            logger.warning("Scoring data must have labels")
            return 0.0
        return accuracy(self.predict(dataset), dataset.labels)

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------
    def prune(self, validation: Dataset) -> int:
        """Prune subtrees that do not help on ``validation``; returns nodes removed."""
        return prune_tree(self, validation)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    def node_count(self) -> int:
        return count_nodes(self.root_)

    def depth(self) -> int:
        return tree_depth(self.root_)

    def summary(self) -> List[Dict[str, Any]]:
        """Return split history for diagnostics."""
        return list(self.history_)

    def to_dict(self) -> Dict[str, Any]:
        if self.dataset_ is None:
            raise RuntimeError("Model is not trained.")
        return self.root_.to_dict()

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    def export_text(self, max_depth: Optional[int] = None) -> str:
        """Indented text rendering of the tree."""
        lines = [f"Splitting Criterion: {self.criterion.value.upper()}"]

        def walk(node: Optional[Node], depth: int, prefix: str) -> None:
            if node is None:
                return
            if max_depth is not None and depth > max_depth:
                return
            indent = "  " * depth
            if node.is_leaf:
                lines.append(
                    f"{indent}{prefix}Leaf: class={format_label(node.prediction_value)}, "
                    f"n={node.n_samples}"
                )
                return
            lines.append(
                f"{indent}{prefix}x{node.split_column} < {node.split_threshold:.4f} "
                f"(n={node.n_samples})"
            )
            walk(node.left, depth + 1, "< ")
            walk(node.right, depth + 1, ">= ")

        walk(self.root_, 0, "")
        return "\n".join(lines)

    def print_tree(self, max_depth: Optional[int] = None) -> None:
        print(self.export_text(max_depth=max_depth))

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "criterion": self.criterion.value,
            "store_history": self.store_history,
        }

    def set_params(self, **params) -> "DecisionTree":
        for key, value in params.items():
            if key not in self.get_params():
                raise ValueError(f"Unknown parameter {key}")
            if key == "criterion":
                value = Criterion.parse(value)
            setattr(self, key, value)
            if key == "seed":
                self.seed_ = int(value) if value else time.time_ns()
        return self
