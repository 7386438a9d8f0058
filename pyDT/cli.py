from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from loguru import logger

from .dataset import Dataset
from .decision_tree import DecisionTree
from .io import read_csv, write_predictions
from .logging import enable_logging
from .utils import Criterion


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pydt",
        description="Train, score, optionally prune and apply a mean-split decision tree.",
    )
    ap.add_argument("criterion", choices=[c.value for c in Criterion],
                    help="split metric: information gain or population purity")
    ap.add_argument("prune", choices=["prune", "noprune"],
                    help="prune against the validation set after training")
    ap.add_argument("train", help="training CSV (last column is the class)")
    ap.add_argument("validate", help="validation CSV (last column is the class)")
    ap.add_argument("test", help="test CSV (features only)")
    ap.add_argument("predictions", help="output file for Id,Prediction rows")
    ap.add_argument("--seed", type=int, default=0, help="random seed (0 uses the clock)")
    ap.add_argument("--verbose", action="store_true", help="also show debug diagnostics")
    ap.add_argument("--plot", default="", help="save a picture of the final tree to this path")
    return ap


def _describe(name: str, ds: Dataset) -> None:
    logger.info(
        "{} data set has {} rows, {} columns, {} labels",
        name,
        ds.row_count,
        ds.column_count,
        "HAS" if ds.has_labels else "DOES NOT HAVE",
    )


def run(args: argparse.Namespace) -> int:
    criterion = Criterion.parse(args.criterion)
    if criterion is Criterion.ENTROPY:
        logger.info("Using entropy metric for splits")
    else:
        logger.info("Using Gini (population diversity) metric for splits")

    try:
        train_ds = Dataset.from_table(read_csv(args.train), last_column_is_label=True)
        validate_ds = Dataset.from_table(read_csv(args.validate), last_column_is_label=True)
        test_ds = Dataset.from_table(read_csv(args.test), last_column_is_label=False)
    except FileNotFoundError as exc:
        logger.error("Failed to open input file: {}", exc.filename)
        return 1

    _describe("Training", train_ds)
    _describe("Validation", validate_ds)
    _describe("Test", test_ds)

    tree = DecisionTree(seed=args.seed, criterion=criterion)
    logger.info("Training decision tree on training data set...")
    if tree.train(train_ds) > 0:
        logger.info("Training successful")
    else:
        logger.warning("Training produced no nodes")

    score = tree.score(validate_ds)
    logger.info("Score: {:.4f}", score)

    if args.prune == "prune":
        precount = tree.node_count()
        logger.info("Attempting to prune the tree. This may take a while...")
        pruned = tree.prune(validate_ds)
        if pruned > 0:
            prune_score = tree.score(validate_ds)
            logger.info("New score: {:.4f}", prune_score)
            logger.info("Improvement of {:.3f}", prune_score - score)
            logger.info("Removed {:.3f}% of the tree", 100.0 * pruned / precount)
        else:
            logger.info("Pruning didn't improve the score...")

    logger.info("Running predictions for test data")
    preds = tree.predict(test_ds)
    write_predictions(args.predictions, preds)
    logger.info("Saved predictions to {}", args.predictions)

    if args.plot:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from .plotting import plot_tree

        ax = plot_tree(tree.root_)
        ax.figure.savefig(args.plot)
        plt.close(ax.figure)
        logger.info("Saved tree plot to {}", args.plot)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = "DEBUG" if args.verbose else "INFO"
    with enable_logging(level=level, log_format="plain", sink=sys.stdout):
        return run(args)


if __name__ == "__main__":
    sys.exit(main())
