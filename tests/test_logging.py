import io

from loguru import logger

from pyDT import Dataset, DecisionTree, enable_logging
from pyDT.logging import PACKAGE_NAME, LoggingHandle


def test_library_is_silent_by_default():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record))
    try:
        Dataset.from_arrays([[1.0]], [0]).mean(3)
    finally:
        logger.remove(handler_id)
    assert not any(r["name"].startswith(PACKAGE_NAME) for r in records)


def test_enable_logging_reports_invalid_arguments():
    buf = io.StringIO()
    with enable_logging(level="WARNING", sink=buf) as handle:
        assert LoggingHandle.get_active_handle_count() >= 1
        Dataset.from_arrays([[1.0]], [0]).mean(3)
        Dataset.from_arrays([[1.0]]).entropy()
        DecisionTree(seed=1).score(Dataset.from_arrays([[1.0]]))

    assert handle.handler_id is None
    log = buf.getvalue()
    assert "Column 3 out of range" in log
    assert "Entropy calculation requires labels" in log
    assert "Scoring data must have labels" in log


def test_level_filters_records():
    buf = io.StringIO()
    with enable_logging(level="ERROR", sink=buf):
        Dataset.from_arrays([[1.0]], [0]).mean(3)
        DecisionTree(seed=1).train(Dataset.from_arrays([[1.0]]))

    log = buf.getvalue()
    assert "out of range" not in log
    assert "Training data must have labels" in log


def test_training_and_pruning_progress_is_logged():
    buf = io.StringIO()
    train = Dataset.from_arrays([[1.0], [2.0], [8.0], [9.0]], [0, 0, 1, 1])
    with enable_logging(level="INFO", log_format="plain", sink=buf):
        tree = DecisionTree(seed=1)
        tree.train(train)
        tree.prune(Dataset.from_arrays([[1.0]], [5]))

    lines = buf.getvalue().splitlines()
    assert "Decision tree has 3 nodes" in lines
    assert "Pruned 2 nodes" in lines


def test_disable_is_idempotent():
    handle = enable_logging(sink=io.StringIO())
    handle.disable()
    handle.disable()
    assert handle.handler_id is None
