#!/usr/bin/env python3
"""
S2 (score) — Table IO
read_proportions, write_scores
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config import CIBERSORT_STAT_COLUMNS

logger = logging.getLogger(__name__)


def _sep_for(p: Path) -> str:
    ext = p.suffix.lower()
    if ext == ".gz":
        ext = Path(p.stem).suffix.lower()
    if ext == ".csv":
        return ","
    if ext in {".tsv", ".txt"}:
        return "\t"
    # Sniff delimiter from the first 8KB
    with p.open("r", encoding="utf-8", errors="ignore", newline="") as f:
        sample = f.read(8192)
    try:
        return csv.Sniffer().sniff(sample, delimiters=[",", "\t", ";", "|"]).delimiter
    except csv.Error:
        return ","


def read_proportions(path: str, drop_stats: bool = True) -> pd.DataFrame:
    """
    Load a samples x cell-types proportions table.

    Supports
    --------
    - .csv → comma; .tsv / .txt → tab; other extensions sniffed
    - first column is the sample index
    - lines starting with '#' are comments
    - UTF-8 by default; falls back to latin-1

    Parameters
    ----------
    path : str
        File path to load (e.g. CIBERSORT_results.tsv).
    drop_stats : bool
        Remove the CIBERSORT statistic columns (P-value, Correlation, RMSE).

    Returns
    -------
    pandas.DataFrame
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Proportions table not found: {path}")

    sep = _sep_for(p)
    try:
        df = pd.read_csv(p, sep=sep, index_col=0, comment="#")
    except UnicodeDecodeError:
        df = pd.read_csv(p, sep=sep, index_col=0, comment="#", encoding="latin-1")

    df.index = df.index.astype(str)
    df.columns = [str(c).strip() for c in df.columns]

    if drop_stats:
        stats = [c for c in CIBERSORT_STAT_COLUMNS if c in df.columns]
        if stats:
            logger.debug("Dropping CIBERSORT statistic columns: %s", stats)
            df = df.drop(columns=stats)

    logger.info("Loaded proportions %s: %d samples x %d cell types", p.name, df.shape[0], df.shape[1])
    return df


def write_scores(scores: pd.DataFrame, path: str, float_format: Optional[str] = None) -> str:
    """Write a Sample/ImTH_Score table (TSV for .tsv/.txt, CSV otherwise). Returns the path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    sep = "\t" if p.suffix.lower() in {".tsv", ".txt"} else ","
    scores.to_csv(
        p, sep=sep, index=False, na_rep="NA", float_format=float_format
    )
    logger.info("Wrote %s", p)
    return str(p)


__all__ = ["read_proportions", "write_scores"]
