import numpy as np
import pytest

from pyDT.dataset import Dataset
from pyDT.io import CSVTable


def test_column_statistics_are_ordered():
    rng = np.random.default_rng(0)
    ds = Dataset.from_arrays(rng.normal(size=(300, 4)) * 10, rng.integers(0, 3, size=300))

    for col in range(ds.column_count):
        assert ds.min(col) <= ds.mean(col) <= ds.max(col)
        assert ds.variance(col) >= 0.0


def test_mean_and_population_variance():
    ds = Dataset.from_arrays([[1.0], [2.0], [3.0], [4.0]], [0, 0, 1, 1])
    assert ds.mean(0) == pytest.approx(2.5)
    assert ds.variance(0) == pytest.approx(1.25)
    assert ds.min(0) == 1.0
    assert ds.max(0) == 4.0


def test_out_of_range_column_returns_zero():
    ds = Dataset.from_arrays([[1.0, 2.0], [3.0, 4.0]], [0, 1])
    assert ds.mean(2) == 0.0
    assert ds.variance(-1) == 0.0
    assert ds.min(5) == 0.0
    assert ds.max(5) == 0.0


def test_empty_dataset_statistics():
    ds = Dataset(3, has_labels=True)
    assert ds.row_count == 0
    assert ds.mean(0) == 0.0
    assert ds.entropy() == 0.0
    assert ds.gini_index() == 0.0
    assert ds.distinct_classes() == []


def test_add_row_grows_by_doubling():
    ds = Dataset(2, has_labels=True)
    for i in range(5):
        ds.add_row([i, i * 2], label=i % 2)

    assert ds.row_count == 5
    assert ds.capacity == 8
    assert ds.features.shape == (5, 2)
    assert ds.labels.tolist() == [0, 1, 0, 1, 0]
    assert ds.features[4].tolist() == [4.0, 8.0]


def test_add_row_rejects_wrong_width():
    ds = Dataset(2, has_labels=False)
    with pytest.raises(ValueError):
        ds.add_row([1.0, 2.0, 3.0])


def test_add_row_ignores_label_without_labels():
    ds = Dataset(1, has_labels=False)
    ds.add_row([1.0], label=3.0)
    assert ds.labels is None
    assert len(ds) == 1


def test_labeled_add_row_requires_label():
    ds = Dataset(1, has_labels=True)
    with pytest.raises(ValueError):
        ds.add_row([1.0])


def test_entropy_examples():
    balanced = Dataset.from_arrays([[0.0], [1.0]], [0, 1])
    single = Dataset.from_arrays([[0.0], [1.0], [2.0]], [4, 4, 4])

    assert balanced.entropy() == pytest.approx(1.0)
    assert single.entropy() == 0.0


def test_gini_is_purity_not_impurity():
    single = Dataset.from_arrays([[0.0], [1.0]], [2, 2])
    mixed = Dataset.from_arrays([[0.0], [1.0], [2.0], [3.0]], [0, 0, 1, 1])

    assert single.gini_index() == pytest.approx(1.0)
    assert single.gini_purity() == pytest.approx(1.0)
    assert mixed.gini_index() == pytest.approx(0.5)


def test_distinct_classes_first_seen_order():
    ds = Dataset.from_arrays(np.zeros((5, 1)), [3, 1, 3, 2, 1])
    classes, counts = ds.class_counts()
    assert classes == [3.0, 1.0, 2.0]
    assert counts.tolist() == [2, 2, 1]


def test_distinct_classes_has_no_fixed_cap():
    n = 3000
    ds = Dataset.from_arrays(np.zeros((n, 1)), np.arange(n))
    assert len(ds.distinct_classes()) == n


def test_label_metrics_without_labels():
    ds = Dataset.from_arrays([[1.0], [2.0]])
    assert not ds.has_labels
    assert ds.entropy() == 0.0
    assert ds.gini_index() == 0.0
    assert ds.distinct_classes() == []


def test_from_table_splits_off_last_column():
    data = np.array([[1, 2, 0], [3, 4, 1], [5, 6, 1]], dtype=np.float32)
    table = CSVTable(filename="mem", data=data, row_count=3, column_count=3)

    labeled = Dataset.from_table(table, last_column_is_label=True)
    unlabeled = Dataset.from_table(table, last_column_is_label=False)

    assert labeled.column_count == 2
    assert labeled.labels.tolist() == [0, 1, 1]
    assert unlabeled.column_count == 3
    assert unlabeled.labels is None


def test_take_copies_selected_rows():
    ds = Dataset.from_arrays([[1.0], [2.0], [3.0]], [0, 1, 0])
    sub = ds.take([2, 0])
    assert sub.features[:, 0].tolist() == [3.0, 1.0]
    assert sub.labels.tolist() == [0, 0]

    sub.add_row([9.0], label=1)
    assert ds.row_count == 3
