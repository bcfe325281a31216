#!/usr/bin/env python3
"""
S2 (score) — Cell-group aggregation
aggregate_cell_groups, missing_fine_types
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

import numpy as np
import pandas as pd

from ..config import CELL_GROUPS
from .normalize import check_numeric

logger = logging.getLogger(__name__)


def missing_fine_types(
    columns: Sequence[str],
    cell_groups: Mapping[str, Sequence[str]] = CELL_GROUPS,
) -> List[str]:
    """Fine cell-type names expected by `cell_groups` but absent from `columns` (mapping order)."""
    present = set(map(str, columns))
    return [name for members in cell_groups.values() for name in members if name not in present]


def aggregate_cell_groups(
    df: pd.DataFrame,
    cell_groups: Mapping[str, Sequence[str]] = CELL_GROUPS,
) -> pd.DataFrame:
    """
    Collapse fine cell-type proportions into coarse groups by row-wise summation.

    Parameters
    ----------
    df : pd.DataFrame
        samples x fine cell types (e.g. the 22 LM22 columns from CIBERSORT).
    cell_groups : Mapping[str, Sequence[str]]
        coarse group -> member fine names. Defaults to the 14-group LM22 mapping.

    Returns
    -------
    pd.DataFrame
        samples x coarse groups, in mapping order, same index as `df`.
        Members missing from `df` count as 0 (logged once as a warning);
        columns not named by the mapping are dropped.

    Raises
    ------
    ValueError
        if a mapped fine column is non-numeric or holds a missing value.
    """
    mapped = [c for members in cell_groups.values() for c in members if c in df.columns]
    check_numeric(df.loc[:, mapped])

    missing = missing_fine_types(df.columns, cell_groups)
    if missing:
        logger.warning("Missing expected cell types: %s", ", ".join(missing))

    totals = {}
    for group, members in cell_groups.items():
        cols = [c for c in members if c in df.columns]
        if cols:
            totals[group] = df.loc[:, cols].sum(axis=1, skipna=False)
        else:
            totals[group] = pd.Series(np.zeros(len(df.index)), index=df.index)

    out = pd.DataFrame(totals, index=df.index, columns=list(cell_groups.keys()))
    logger.debug("Aggregated %d fine columns into %d groups", df.shape[1], out.shape[1])
    return out


__all__ = ["aggregate_cell_groups", "missing_fine_types"]
