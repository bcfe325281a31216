# src/imth/utils.py
from __future__ import annotations
import logging
from pathlib import Path
from datetime import datetime

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def timestamped_run_root(root_name: str = "imth_runs") -> str:
    """~/imth_runs/2025-10-27_153012"""
    stamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    root = Path.home() / root_name / stamp
    root.mkdir(parents=True, exist_ok=True)
    return str(root)


def as_bool(v) -> bool:
    """'true'/'1'/'yes' (any case) -> True; bools pass through."""
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in {"1", "t", "true", "y", "yes"}


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger once (CLI only; library code never calls this)."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    elif verbose:
        root.setLevel(logging.DEBUG)


__all__ = ["timestamped_run_root", "as_bool", "setup_logging"]
