# src/imth/cli.py
from __future__ import annotations

import argparse
import logging
import sys

from .config import USER_DEFAULTS, VALID_MODES, resolve_paths
from .utils import setup_logging, timestamped_run_root

logger = logging.getLogger("imth.cli")


def _D(key: str, fallback):
    """pull from USER_DEFAULTS with a safe fallback"""
    return USER_DEFAULTS.get(key, fallback)


def _parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        "imth",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="CIBERSORT deconvolution (S1) and ImTH entropy scoring (S2).",
    )

    # ---------- Inputs ----------
    ap.add_argument("--mixture",          default=_D("mixture", ""),
                    help="Bulk expression file (genes x samples) for CIBERSORT")
    ap.add_argument("--proportions",      default=_D("proportions", ""),
                    help="Existing proportions table (samples x cell types); used when S1 is skipped")
    ap.add_argument("--sig_matrix",       default=_D("sig_matrix", ""),
                    help="Signature matrix; blank = $IMTH_SIG_MATRIX or bundled LM22.txt")
    ap.add_argument("--cibersort_source", default=_D("cibersort_source", ""),
                    help="Path to CIBERSORT.R to source in R")

    # ---------- S1 tuning (strings on purpose; drivers normalize) ----------
    ap.add_argument("--perm", default=_D("perm", "1000"))
    ap.add_argument("--qn",   default=_D("qn", "true"))

    # ---------- S2 ----------
    ap.add_argument("--type", dest="mode", default=_D("type", ""), choices=list(VALID_MODES),
                    help="CIBERSORT: collapse LM22 into 14 groups; custom: score every column")

    # ---------- Outputs ----------
    ap.add_argument("--outdir", default=_D("outdir", ""))

    # ---------- Orchestration toggles ----------
    ap.add_argument("--skip_deconv", action="store_true", help="Skip S1 (CIBERSORT)")
    ap.add_argument("--verbose", action="store_true", help="DEBUG logging")

    return ap.parse_args(argv)


def _run(argv=None) -> None:
    a = _parse_args(argv)
    setup_logging(a.verbose)

    # --- resolve paths ---
    paths = resolve_paths(a)
    mixture_abs = paths["mixture"]
    props_abs = paths["proportions"]

    run_s1 = bool(mixture_abs) and not a.skip_deconv
    if not (run_s1 or props_abs):
        raise SystemExit("Provide --mixture (run CIBERSORT) OR --proportions (score an existing table).")
    if not a.mode:
        raise SystemExit(f"--type is required: {' or '.join(VALID_MODES)}")

    run_root = paths["outdir"] or timestamped_run_root()
    out_deconv = f"{run_root}/deconv"
    out_score = f"{run_root}/score"

    from .drivers import run_deconv, run_score

    # --- S1 ---
    if run_s1:
        props_abs = run_deconv(
            mixture_abs=mixture_abs,
            out_deconv=out_deconv,
            sig_matrix=paths["sig_matrix"],
            cibersort_source=paths["cibersort_source"],
            perm=a.perm,
            qn=a.qn,
        )
    else:
        logger.info("[CLI] Skipping S1")

    # --- S2 ---
    scores_path = run_score(proportions_abs=props_abs, out_score=out_score, mode=a.mode)
    logger.info("[CLI] ImTH scores in: %s", scores_path)


def main(argv=None) -> None:
    try:
        _run(argv)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
