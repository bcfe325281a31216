"""Pytest configuration and fixtures."""

import numpy as np
import pandas as pd
import pytest

from imth.config import CELL_GROUPS

LM22 = [name for members in CELL_GROUPS.values() for name in members]


@pytest.fixture
def lm22_names():
    return list(LM22)


@pytest.fixture
def lm22_props():
    """5 samples x 22 LM22 fractions, each row summing to 1."""
    rng = np.random.default_rng(42)
    X = rng.random((5, len(LM22)))
    X[1, :5] = 0.0
    X = X / X.sum(axis=1, keepdims=True)
    return pd.DataFrame(X, index=[f"TCGA-{i:02d}" for i in range(5)], columns=LM22)


@pytest.fixture
def custom_props():
    """Spot-level compositions over 4 arbitrary cell types."""
    return pd.DataFrame(
        [
            [0.5, 0.5, 0.0, 0.0],
            [1.0, 0.0, 0.0, 0.0],
            [0.25, 0.25, 0.25, 0.25],
        ],
        index=["spot_1", "spot_2", "spot_3"],
        columns=["Tumor", "Fibroblast", "T cell", "Myeloid"],
    )


@pytest.fixture
def cibersort_table(lm22_props):
    """lm22_props plus the statistic columns CIBERSORT appends."""
    out = lm22_props.copy()
    out["P-value"] = 0.0
    out["Correlation"] = 0.8
    out["RMSE"] = 0.6
    return out
