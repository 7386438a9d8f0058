import json

import numpy as np

from pyDT import Dataset, DecisionTree
from pyDT.io import read_csv


def test_end_to_end_training_pruning_and_export(tmp_path):
    rng = np.random.default_rng(1)
    X = rng.normal(size=(300, 2))
    # Interaction plus label noise so that pruning has something to remove.
    y = ((X[:, 0] > 0) ^ (X[:, 1] > 0.5)).astype(float)
    noise = rng.random(300) < 0.1
    y[noise] = 1.0 - y[noise]

    rows = np.column_stack([X, y])
    path = tmp_path / "data.csv"
    path.write_text("\n".join(",".join(repr(float(v)) for v in row) for row in rows))

    full = Dataset.from_table(read_csv(path), last_column_is_label=True)
    train = full.take(np.arange(0, 200))
    validation = full.take(np.arange(200, 300))

    model = DecisionTree(seed=9, criterion="entropy")
    built = model.train(train)
    before = model.score(validation)

    removed = model.prune(validation)
    after = model.score(validation)

    assert built > 1
    assert after >= before
    assert model.node_count() == built - removed

    test = Dataset.from_arrays(rng.normal(size=(10, 2)))
    preds = model.predict(test)
    assert preds.shape == (10,)
    assert set(np.unique(preds)) <= {0.0, 1.0}

    parsed = json.loads(model.to_json())
    assert "is_leaf" in parsed
