#!/usr/bin/env python3
"""
imth.config

Contains:
- USER_DEFAULTS: baseline defaults for CLI & drivers
- CELL_GROUPS: LM22 fine cell types -> 14 coarse immune groups
- resolve_paths(args): expand user paths, normalize relative ones
"""

from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


# -------------------------------------------------------------
# Default user-configurable parameters (used by CLI & drivers)
# -------------------------------------------------------------
# Central defaults used by the CLI. Make sure EVERY key the CLI reads exists here.
USER_DEFAULTS = {
    # Inputs
    "mixture":          "",   # bulk expression (genes x samples, tab-delimited) for S1
    "proportions":      "",   # existing proportions table; used when S1 is skipped
    "sig_matrix":       "",   # "" means $IMTH_SIG_MATRIX, then bundled extdata/LM22.txt
    "cibersort_source": "",   # optional path to CIBERSORT.R to source inside R

    # S1 tuning (strings on purpose; drivers normalize)
    "perm": "1000",
    "qn":   "true",

    # S2
    "type": "",               # CIBERSORT | custom; must be chosen

    # Outputs
    "outdir": "",             # "" means ~/imth_runs/<timestamp>
}

# -------------------------------------------------------------
# Scoring constants
# -------------------------------------------------------------
VALID_MODES: Tuple[str, ...] = ("CIBERSORT", "custom")
ROW_SUM_TOL: float = 1e-6

# Statistic columns CIBERSORT appends after the 22 fractions
CIBERSORT_STAT_COLUMNS: Tuple[str, ...] = ("P-value", "Correlation", "RMSE")

# 22 LM22 cell types collapsed into 14 groups (read-only)
CELL_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "B cells": ("B cells naive", "B cells memory"),
    "T cells CD4": ("T cells CD4 naive", "T cells CD4 memory resting", "T cells CD4 memory activated"),
    "NK cells": ("NK cells resting", "NK cells activated"),
    "Macrophages": ("Macrophages M0", "Macrophages M1", "Macrophages M2"),
    "Dendritic cells": ("Dendritic cells resting", "Dendritic cells activated"),
    "Mast cells": ("Mast cells resting", "Mast cells activated"),
    "Plasma cells": ("Plasma cells",),
    "T cells CD8": ("T cells CD8",),
    "T cells follicular helper": ("T cells follicular helper",),
    "T cells regulatory (Tregs)": ("T cells regulatory (Tregs)",),
    "T cells gamma delta": ("T cells gamma delta",),
    "Monocytes": ("Monocytes",),
    "Eosinophils": ("Eosinophils",),
    "Neutrophils": ("Neutrophils",),
})

# -------------------------------------------------------------
# Signature matrix lookup
# -------------------------------------------------------------
SIG_MATRIX_ENV = "IMTH_SIG_MATRIX"
SIG_MATRIX_NAME = "LM22.txt"


def default_sig_matrix_path() -> Path:
    """$IMTH_SIG_MATRIX if set, else the bundled extdata/LM22.txt."""
    env = os.environ.get(SIG_MATRIX_ENV, "").strip()
    if env:
        return Path(env).expanduser()
    return Path(__file__).resolve().parent / "extdata" / SIG_MATRIX_NAME


# -------------------------------------------------------------
# CLI path options
# -------------------------------------------------------------
PATH_KEYS: Tuple[str, ...] = ("mixture", "proportions", "sig_matrix", "cibersort_source", "outdir")


def _abs_or_none(value: Optional[str]) -> Optional[str]:
    """Blank or None -> None; otherwise ~-expanded absolute path."""
    text = "" if value is None else str(value).strip()
    return str(Path(text).expanduser().resolve()) if text else None


def resolve_paths(args: Any) -> Dict[str, Optional[str]]:
    """
    Absolute paths for every PATH_KEYS entry of a CLI namespace or dict.

    >>> resolve_paths({"mixture": "expr.txt", "proportions": ""})["proportions"] is None
    True
    """
    if isinstance(args, Mapping):
        source = args
    elif hasattr(args, "__dict__"):
        source = vars(args)
    else:
        raise TypeError(f"resolve_paths() expects a mapping or argparse.Namespace, got {type(args).__name__}")
    return {key: _abs_or_none(source.get(key)) for key in PATH_KEYS}


# -------------------------------------------------------------
# Optional: run as script to print defaults
# -------------------------------------------------------------
if __name__ == "__main__":
    import json
    print(json.dumps(USER_DEFAULTS, indent=2))
    print(json.dumps({k: list(v) for k, v in CELL_GROUPS.items()}, indent=2))
