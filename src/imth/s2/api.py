#!/usr/bin/env python3
"""
S2 (score) — Public wrapper
imth_score
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

import pandas as pd

from ..config import CELL_GROUPS, ROW_SUM_TOL, VALID_MODES
from .entropy import entropy_scores
from .groups import aggregate_cell_groups
from .normalize import check_proportion_range, normalize_rows

__all__ = ["imth_score"]

logger = logging.getLogger(__name__)


def _check_mode(mode: Optional[str]) -> str:
    choices = " or ".join(f"'{m}'" for m in VALID_MODES)
    if mode is None:
        raise ValueError(f"The type parameter must be specified. You can choose: {choices}")
    if mode not in VALID_MODES:
        raise ValueError(f"Unrecognized type {mode!r}. You can choose: {choices}")
    return mode


def imth_score(
    data,
    mode: Optional[str] = None,
    cell_groups: Mapping[str, Sequence[str]] = CELL_GROUPS,
    tol: float = ROW_SUM_TOL,
) -> pd.DataFrame:
    """
    Quantify intratumor immune heterogeneity (ImTH) for every sample.

    Parameters
    ----------
    data : pd.DataFrame
        Proportions of immune cell types, samples as rows (index = sample IDs)
        and cell types as columns. Anything `pd.DataFrame(...)` accepts works.
    mode : {"CIBERSORT", "custom"}
        "CIBERSORT" sums the 22 LM22 cell types into 14 groups (see
        `cell_groups`) before scoring; "custom" scores every column as its own
        category, e.g. single-cell or spatial spot compositions.
    cell_groups : Mapping[str, Sequence[str]]
        Coarse group -> fine member names, used only in "CIBERSORT" mode.
    tol : float
        Allowed deviation of a row sum from 1 before rescaling.

    Returns
    -------
    pd.DataFrame
        Columns `Sample` and `ImTH_Score` (Shannon entropy in bits, NaN for a
        sample whose proportions are all zero), one row per input sample in
        input order.

    Raises
    ------
    ValueError
        empty input, missing/unknown mode, or proportions outside [0, 1].
    """
    df = data if isinstance(data, pd.DataFrame) else pd.DataFrame(data)
    if df.shape[0] == 0:
        raise ValueError("Input data is empty")
    mode = _check_mode(mode)

    logger.info("Scoring %d samples (type=%s)", df.shape[0], mode)

    if mode == "CIBERSORT":
        combined = aggregate_cell_groups(df, cell_groups)
    else:
        combined = df

    check_proportion_range(combined)
    combined = normalize_rows(combined, tol=tol)

    scores = entropy_scores(combined)
    n_missing = int(scores.isna().sum())
    if n_missing:
        logger.debug("%d sample(s) have no positive proportions; score set to NaN", n_missing)

    return pd.DataFrame(
        {
            "Sample": combined.index.astype(str).tolist(),
            "ImTH_Score": scores.to_numpy(dtype=float),
        }
    )
