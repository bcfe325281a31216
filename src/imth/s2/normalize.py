#!/usr/bin/env python3
"""
S2 (score) — Proportion validation & row normalization
check_proportion_range, normalize_rows
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..config import ROW_SUM_TOL

logger = logging.getLogger(__name__)


def check_numeric(df: pd.DataFrame) -> np.ndarray:
    """Fail on non-numeric columns or missing values; return the values as a float array."""
    non_numeric = [c for c in df.columns if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise ValueError(f"Cell proportion columns must be numeric; got non-numeric: {non_numeric}")

    values = df.to_numpy(dtype=float)
    if np.isnan(values).any():
        bad = df.index[np.isnan(values).any(axis=1)].tolist()
        raise ValueError(f"Cell proportions contain missing values for samples: {bad}")

    return values


def check_proportion_range(df: pd.DataFrame) -> None:
    """
    Fail unless every cell is a number in [0, 1].

    Raises
    ------
    ValueError
        on non-numeric columns, missing values, or any value outside [0, 1].
    """
    values = check_numeric(df)
    if ((values < 0) | (values > 1)).any():
        raise ValueError("All cell proportion values must be within the range of 0 to 1")


def normalize_rows(df: pd.DataFrame, tol: float = ROW_SUM_TOL) -> pd.DataFrame:
    """
    Rescale rows so each sums to 1.

    If every row already sums to 1 (within `tol`) the table is returned as is.
    Otherwise a warning is logged and every row is divided by its own sum.
    Rows summing to exactly 0 are left as zeros (their score is undefined
    downstream) instead of being divided.
    """
    row_sums = df.sum(axis=1)
    if bool(((row_sums - 1.0).abs() < tol).all()):
        return df

    logger.warning(
        "Some samples exhibited total immune cell proportions that did not sum to 1. "
        "These have been automatically scaled to sum to 1. "
        "Please confirm this is appropriate for your data."
    )

    zero = row_sums == 0
    if zero.any():
        logger.debug("Rows with zero total left unscaled: %s", df.index[zero].tolist())

    divisor = row_sums.where(~zero, 1.0)
    return df.div(divisor, axis=0)


__all__ = ["check_numeric", "check_proportion_range", "normalize_rows"]
