from __future__ import annotations

import math
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

# Returned when traversal reaches an internal node with no children.
UNDEFINED_CLASS = float("nan")


@dataclass(eq=False)
class Node:
    """A binary decision-tree node.

    Internal nodes send rows with ``row[split_column] < split_threshold`` to
    ``left`` and the rest to ``right``; either child may be missing. Leaves
    carry ``prediction_value``. The parent link is a weak reference used only
    to walk upward during pruning.
    """

    is_leaf: bool = False
    split_column: int = 0
    split_threshold: float = 0.0
    prediction_value: float = 0.0
    is_lesser_child: bool = False
    left: Optional["Node"] = None
    right: Optional["Node"] = None
    depth: int = 0
    n_samples: int = 0
    _parent: Optional[weakref.ReferenceType] = field(default=None, repr=False)
    _id: int = field(default=0, repr=False)

    @property
    def parent(self) -> Optional["Node"]:
        return self._parent() if self._parent is not None else None

    @property
    def has_children(self) -> bool:
        return self.left is not None or self.right is not None

    def attach_left(self, child: "Node") -> "Node":
        child.is_lesser_child = True
        child._parent = weakref.ref(self)
        self.left = child
        return child

    def attach_right(self, child: "Node") -> "Node":
        child.is_lesser_child = False
        child._parent = weakref.ref(self)
        self.right = child
        return child

    def detach_left(self) -> Optional["Node"]:
        child, self.left = self.left, None
        return child

    def detach_right(self) -> Optional["Node"]:
        child, self.right = self.right, None
        return child

    def make_leaf(self, prediction: float) -> None:
        self.is_leaf = True
        self.prediction_value = float(prediction)

    def classify_row(self, row) -> float:
        node = self
        while not node.is_leaf:
            value = row[node.split_column]
            if value < node.split_threshold:
                nxt = node.left if node.left is not None else node.right
            else:
                nxt = node.right if node.right is not None else node.left
            if nxt is None:
                logger.debug("Internal node without children; row is unclassified")
                return UNDEFINED_CLASS
            node = nxt
        return node.prediction_value

    def to_dict(self) -> Dict[str, Any]:
        if self.is_leaf:
            return {
                "is_leaf": True,
                "prediction": self.prediction_value,
                "n_samples": self.n_samples,
                "depth": self.depth,
            }
        return {
            "is_leaf": False,
            "split_column": self.split_column,
            "split_threshold": self.split_threshold,
            "n_samples": self.n_samples,
            "depth": self.depth,
            "left": self.left.to_dict() if self.left else None,
            "right": self.right.to_dict() if self.right else None,
        }


def count_nodes(node: Optional[Node]) -> int:
    """Number of nodes in the subtree rooted at ``node``."""
    if node is None:
        return 0
    return 1 + count_nodes(node.left) + count_nodes(node.right)


def tree_depth(node: Optional[Node]) -> int:
    """Number of edges on the longest root-to-leaf path; -1 for an empty tree."""
    if node is None:
        return -1
    return 1 + max(tree_depth(node.left), tree_depth(node.right))


def ancestry(node: Node) -> List[Tuple[Node, bool]]:
    """Path from ``node`` to the top of its tree.

    Each entry is ``(ancestor, went_lesser)``: the ancestor's split and the
    branch taken from it on the way down to ``node``.
    """
    path: List[Tuple[Node, bool]] = []
    child = node
    parent = node.parent
    while parent is not None:
        path.append((parent, child.is_lesser_child))
        child, parent = parent, parent.parent
    return path


def assign_node_ids(node: Node, start: int = 0) -> int:
    """Assign compact integer identifiers to nodes for plotting/export."""
    node._id = start
    next_id = start + 1
    if node.left:
        next_id = assign_node_ids(node.left, next_id)
    if node.right:
        next_id = assign_node_ids(node.right, next_id)
    return next_id


def format_label(value: float) -> str:
    if math.isnan(value):
        return "undefined"
    return f"{value:g}"
