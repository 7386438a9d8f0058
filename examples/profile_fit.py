import numpy as np
from pyDT import Dataset, DecisionTree, enable_logging

rng = np.random.default_rng(0)
X = rng.normal(size=(6000, 10))
y = ((X[:, 0] > 0) ^ (X[:, 1] > 0.5)).astype(float)
y[rng.random(6000) < 0.05] += 1

train = Dataset.from_arrays(X[:4000], y[:4000])
validation = Dataset.from_arrays(X[4000:], y[4000:])

with enable_logging(level="INFO"):
    m = DecisionTree(seed=1, criterion="gini")
    m.train(train)
    print(f"score before pruning: {m.score(validation):.4f}")
    m.prune(validation)
    print(f"score after pruning:  {m.score(validation):.4f} ({m.node_count()} nodes)")
