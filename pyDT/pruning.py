"""Validation-driven post-pruning.

Pruning walks the tree top-down. At each node it detaches a child subtree
and rescores the whole tree on the validation set; the removal is kept when
the score does not drop, otherwise the subtree is reattached and pruning
continues inside it. A node that loses both children becomes a leaf whose
class is the majority of the training rows that would still reach it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

import numpy as np
from loguru import logger

from .metrics import majority_class
from .tree import Node, ancestry, count_nodes

if TYPE_CHECKING:
    from .dataset import Dataset
    from .decision_tree import DecisionTree

# Accepted removals are reported when they gain at least this much score
# or drop more than REPORT_MIN_NODES nodes.
REPORT_MIN_GAIN = 0.0002
REPORT_MIN_NODES = 10


def prune_tree(tree: "DecisionTree", validation: "Dataset") -> int:
    """Prune ``tree`` in place against ``validation``; returns nodes removed."""
    if not validation.has_labels:
        logger.warning("Pruning requires validation data with labels")
        return 0
    if validation.row_count == 0:
        logger.warning("Pruning requires a non-empty validation set")
        return 0
    if tree.dataset_ is None:
        logger.warning("Cannot prune a tree that has not been trained")
        return 0

    pruned = prune_node(tree, tree.root_, validation)
    logger.info("Pruned {} nodes", pruned)
    return pruned


def prune_node(tree: "DecisionTree", node: Node, validation: "Dataset") -> int:
    removed = _prune_side(
        tree, validation, node.left, node.detach_left, node.attach_left
    )
    # the right side is judged against the tree as the left side left it
    removed += _prune_side(
        tree, validation, node.right, node.detach_right, node.attach_right
    )

    if not node.has_children:
        node.make_leaf(guess_node_class(tree, node))
    return removed


def _prune_side(
    tree: "DecisionTree",
    validation: "Dataset",
    child: Optional[Node],
    detach: Callable[[], Optional[Node]],
    attach: Callable[[Node], Node],
) -> int:
    if child is None:
        return 0

    baseline = tree.score(validation)
    subtree = detach()

    pruned_score = tree.score(validation)
    if pruned_score >= baseline:
        dropped = count_nodes(subtree)
        diff = pruned_score - baseline
        if diff > REPORT_MIN_GAIN or dropped > REPORT_MIN_NODES:
            logger.info("Improved score by {:.4f}, dropped {} nodes", diff, dropped)
        return dropped

    attach(subtree)
    return prune_node(tree, subtree, validation)


def guess_node_class(tree: "DecisionTree", node: Node) -> float:
    """Majority training class among the rows that would reach ``node``.

    The node's own subtree is gone, so the rows are found by replaying the
    split conditions on the path from ``node`` up to the root: a row counts
    when it takes the same branch as the path at every ancestor. Ties go to
    the class seen first in the training set.
    """
    if node.has_children:
        logger.error("Can't guess the class of a node that still has children")
        return 0.0
    if node.is_leaf:
        return node.prediction_value

    train = tree.dataset_
    if train is None or not train.has_labels or train.row_count == 0:
        logger.error("No training data available to relabel a pruned node")
        return 0.0

    path = ancestry(node)
    top = path[-1][0] if path else node
    if top is not tree.root_:
        logger.error("Failed to reach the root when guessing a pruned node's class")

    X = train.features
    reaches = np.ones(train.row_count, dtype=bool)
    for ancestor, went_lesser in path:
        lesser = X[:, ancestor.split_column] < ancestor.split_threshold
        reaches &= lesser if went_lesser else ~lesser

    classes = train.distinct_classes()
    labels = train.labels[reaches]
    counts = np.array([np.count_nonzero(labels == c) for c in classes], dtype=np.int64)
    return majority_class(classes, counts)
