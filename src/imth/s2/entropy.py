#!/usr/bin/env python3
"""
S2 (score) — Shannon entropy
shannon_entropy, entropy_scores
"""

from __future__ import annotations

import numpy as np
import pandas as pd


def shannon_entropy(p) -> float:
    """
    H = -sum(p_i * log2(p_i)) over the positive entries of `p` (bits).

    Zeros are dropped, so 0 * log2(0) contributes nothing.
    Returns NaN when no entry is positive.
    """
    x = np.asarray(p, dtype=float).ravel()
    x = x[x > 0]
    if x.size == 0:
        return float("nan")
    return float(-np.sum(x * np.log2(x)))


def entropy_scores(df: pd.DataFrame) -> pd.Series:
    """Row-wise Shannon entropy of a samples x categories table (NaN for rows with no positive entry)."""
    P = np.atleast_2d(df.to_numpy(dtype=float))
    pos = P > 0

    logs = np.zeros_like(P)
    np.log2(P, out=logs, where=pos)
    H = 0.0 - (P * logs).sum(axis=1)  # 0.0 - x keeps single-category rows at +0.0
    H[~pos.any(axis=1)] = np.nan
    return pd.Series(H, index=df.index, name="ImTH_Score")


__all__ = ["shannon_entropy", "entropy_scores"]
