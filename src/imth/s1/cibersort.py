#!/usr/bin/env python3
"""
S1 (deconvolution) — CIBERSORT wrapper
get_cibersort, run_cibersort_r
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Optional

import pandas as pd

from ..config import SIG_MATRIX_NAME, default_sig_matrix_path
from ..s2.io import read_proportions

logger = logging.getLogger(__name__)

RESULTS_NAME = "CIBERSORT_results.tsv"


def resolve_sig_matrix(sig_matrix: Optional[str] = None) -> Path:
    """Explicit path, else $IMTH_SIG_MATRIX, else bundled extdata/LM22.txt. Must exist."""
    p = Path(sig_matrix).expanduser() if sig_matrix else default_sig_matrix_path()
    if not p.is_file():
        raise FileNotFoundError(
            f"Signature matrix file ({SIG_MATRIX_NAME}) not found: {p}. "
            "Pass sig_matrix=... or set IMTH_SIG_MATRIX."
        )
    return p.resolve()


def run_cibersort_r(
    *,
    sig_matrix: str,
    mixture_file: str,
    perm: int,
    qn: bool,
    out_dir: str,
    cibersort_source: Optional[str] = None,
) -> str:
    """
    Run cibersort.R through Rscript.

    Returns
    -------
    str
        Path to CIBERSORT_results.tsv
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    r_script = Path(__file__).with_name("cibersort.R")
    if not r_script.exists():
        raise FileNotFoundError(f"[S1] Missing R script: {r_script}")

    # --- Environment for R ---
    env = os.environ.copy()
    env.update({
        "SIG_MATRIX_PY": str(sig_matrix),
        "MIXTURE_FILE_PY": str(mixture_file),
        "OUT_DIR_PY": os.path.abspath(out_dir),
        "PERM_PY": str(int(perm)),
        "QN_PY": "true" if qn else "false",
    })
    if cibersort_source:
        env["CIBERSORT_SOURCE_PY"] = os.path.abspath(cibersort_source)

    log_file = out / "R_console.log"
    err_file = out / "R_stderr.log"

    cmd = ["Rscript", str(r_script)]
    logger.info("[S1] Running: %s", " ".join(cmd))

    try:
        result = subprocess.run(
            cmd,
            check=True,
            env=env,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        raise RuntimeError(
            "Rscript not found on PATH. Install R and ensure 'Rscript' is available."
        )
    except subprocess.CalledProcessError as e:
        log_file.write_text(e.stdout or "")
        err_file.write_text(e.stderr or "")
        tail = (e.stderr or "").splitlines()[-20:]
        logger.error("[S1][R stderr tail]\n%s", "\n".join(tail))
        raise RuntimeError(
            f"S1 CIBERSORT step failed (exit {e.returncode}). "
            f"See logs:\n  {log_file}\n  {err_file}"
        ) from e

    log_file.write_text(result.stdout or "")
    err_file.write_text(result.stderr or "")
    logger.info("[S1] R completed successfully.")

    results = out / RESULTS_NAME
    if not results.exists():
        raise FileNotFoundError(f"[S1] Expected R output not found: {results}")
    return str(results)


def get_cibersort(
    mixture_file: str,
    perm: int = 1000,
    qn: bool = True,
    *,
    sig_matrix: Optional[str] = None,
    out_dir: Optional[str] = None,
    cibersort_source: Optional[str] = None,
    runner: Optional[Callable[..., str]] = None,
) -> pd.DataFrame:
    """
    Estimate tumor-infiltrating immune cell fractions with CIBERSORT (LM22).

    Parameters
    ----------
    mixture_file : str
        Bulk gene expression, tab-delimited, genes as rows and samples as columns.
    perm : int
        Number of permutations for the CIBERSORT p-value.
    qn : bool
        Quantile normalization of the mixture (CIBERSORT's QN flag).
    sig_matrix : str | None
        Signature matrix; defaults to $IMTH_SIG_MATRIX, then bundled extdata/LM22.txt.
    out_dir : str | None
        Where R writes CIBERSORT_results.tsv and its logs (temporary dir if None).
    cibersort_source : str | None
        Path to a CIBERSORT.R to source when no R package provides it.
    runner : callable | None
        Replaces the Rscript call; receives the keyword arguments of
        `run_cibersort_r` and returns the results path.

    Returns
    -------
    pd.DataFrame
        samples x (22 cell fractions + P-value, Correlation, RMSE).
    """
    sig = resolve_sig_matrix(sig_matrix)

    mix = Path(mixture_file).expanduser()
    if not mix.is_file():
        raise FileNotFoundError(f"Mixture file not found: {mixture_file}")

    if isinstance(perm, bool) or int(perm) != perm or perm < 0:
        raise ValueError(f"perm must be a non-negative integer, got {perm!r}")

    runner = runner or run_cibersort_r
    kwargs = dict(
        sig_matrix=str(sig),
        mixture_file=str(mix.resolve()),
        perm=int(perm),
        qn=bool(qn),
        cibersort_source=cibersort_source,
    )

    logger.info("[S1] CIBERSORT: mixture=%s sig_matrix=%s perm=%d QN=%s", mix, sig, int(perm), bool(qn))
    if out_dir is None:
        with tempfile.TemporaryDirectory(prefix="imth_cibersort_") as tmp:
            results = runner(out_dir=tmp, **kwargs)
            return read_proportions(results, drop_stats=False)

    results = runner(out_dir=str(out_dir), **kwargs)
    return read_proportions(results, drop_stats=False)


__all__ = ["get_cibersort", "run_cibersort_r", "resolve_sig_matrix"]
