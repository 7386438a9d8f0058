from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from .dataset import Dataset
from .tree import Node, assign_node_ids, format_label


def _layout_tree(node: Node, y=0, positions=None, leaf_positions=None):
    if positions is None:
        positions = {}
    if leaf_positions is None:
        leaf_positions = []

    children = [c for c in (node.left, node.right) if c is not None]
    if not children:
        xpos = len(leaf_positions)
        positions[node._id] = (xpos, -y)
        leaf_positions.append(xpos)
        return positions, leaf_positions

    for child in children:
        positions, leaf_positions = _layout_tree(child, y + 1, positions, leaf_positions)

    xs = [positions[c._id][0] for c in children]
    positions[node._id] = ((min(xs) + max(xs)) / 2, -y)
    return positions, leaf_positions


def plot_tree(root: Node, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Draw the tree with internal splits and leaf classes."""
    assign_node_ids(root)
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 5))
    positions, _ = _layout_tree(root)

    def draw(node: Node):
        x, y = positions[node._id]
        for child in (node.left, node.right):
            if child is None:
                continue
            cx, cy = positions[child._id]
            ax.plot([x, cx], [y, cy], color="0.6")
            draw(child)

        if node.is_leaf:
            label = f"class {format_label(node.prediction_value)}\nn={node.n_samples}"
        else:
            label = f"x{node.split_column} < {node.split_threshold:.3f}\nn={node.n_samples}"
        ax.scatter([x], [y], s=200, color="#2a9d8f" if node.is_leaf else "#264653")
        ax.text(x, y, label, ha="center", va="center", color="white", fontsize=8)

    draw(root)
    ax.set_axis_off()
    ax.set_title("Decision tree", fontsize=12)
    return ax


def plot_split(dataset: Dataset, node: Node, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Scatter the split column of ``node`` against the labels."""
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))
    x = dataset.features[:, node.split_column]
    y = dataset.labels if dataset.has_labels else np.zeros(dataset.row_count)
    ax.scatter(x, y, alpha=0.6, s=20, color="#1d3557")
    ax.axvline(node.split_threshold, color="#e76f51", linestyle="--", label="threshold")
    ax.set_xlabel(f"x{node.split_column}")
    ax.set_ylabel("class")
    ax.legend()
    ax.set_title("Split at node")
    return ax
