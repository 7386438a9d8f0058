"""pyDT: binary decision trees with mean-threshold splits and validation pruning.

Trees are grown on numeric features by splitting each node at the mean of
the column that best separates the classes (by information gain or
population purity), then optionally pruned against a validation set.
"""

from loguru import logger

from .dataset import Dataset
from .decision_tree import DecisionTree
from .logging import PACKAGE_NAME, enable_logging
from .tree import UNDEFINED_CLASS, Node
from .utils import Criterion

logger.disable(PACKAGE_NAME)

__all__ = [
    "Criterion",
    "Dataset",
    "DecisionTree",
    "Node",
    "UNDEFINED_CLASS",
    "enable_logging",
]
__version__ = "0.1.0"
