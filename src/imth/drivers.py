from __future__ import annotations

import json
from pathlib import Path

from .utils import as_bool


def run_deconv(*, mixture_abs, out_deconv, sig_matrix, cibersort_source, perm, qn):
    from .s1.cibersort import get_cibersort, RESULTS_NAME  # import late
    get_cibersort(
        mixture_abs,
        perm=int(perm),
        qn=as_bool(qn),
        sig_matrix=sig_matrix or None,
        out_dir=out_deconv,
        cibersort_source=cibersort_source or None,
    )
    return str(Path(out_deconv) / RESULTS_NAME)


def run_score(*, proportions_abs, out_score, mode):
    from .s2.api import imth_score  # import late
    from .s2.io import read_proportions, write_scores

    props = read_proportions(proportions_abs)
    scores = imth_score(props, mode=mode)

    out = Path(out_score)
    out.mkdir(parents=True, exist_ok=True)
    scores_path = write_scores(scores, str(out / "ImTH_scores.tsv"))

    summary = {
        "type": mode,
        "proportions": str(proportions_abs),
        "scores": scores_path,
        "n_samples": int(scores.shape[0]),
        "n_missing_scores": int(scores["ImTH_Score"].isna().sum()),
    }
    with open(out / "imth_summary.json", "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)
    return scores_path
