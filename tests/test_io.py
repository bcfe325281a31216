"""Tests for proportions/score table IO."""

import numpy as np
import pandas as pd
import pytest

from imth.s2.io import read_proportions, write_scores


def test_read_tsv_drops_cibersort_stats(tmp_path, cibersort_table, lm22_names):
    path = tmp_path / "CIBERSORT_results.txt"
    cibersort_table.to_csv(path, sep="\t")

    df = read_proportions(str(path))
    assert list(df.columns) == lm22_names
    assert list(df.index) == list(cibersort_table.index)
    np.testing.assert_allclose(df.to_numpy(), cibersort_table[lm22_names].to_numpy())


def test_read_keeps_stats_when_asked(tmp_path, cibersort_table):
    path = tmp_path / "res.tsv"
    cibersort_table.to_csv(path, sep="\t")
    df = read_proportions(str(path), drop_stats=False)
    assert "RMSE" in df.columns


def test_read_csv_and_sniffed(tmp_path, custom_props):
    csv_path = tmp_path / "props.csv"
    custom_props.to_csv(csv_path)
    semi_path = tmp_path / "props.dat"
    custom_props.to_csv(semi_path, sep=";")

    for p in (csv_path, semi_path):
        df = read_proportions(str(p))
        assert list(df.columns) == list(custom_props.columns)
        np.testing.assert_allclose(df.to_numpy(), custom_props.to_numpy())


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_proportions(str(tmp_path / "nope.tsv"))


def test_write_scores_tsv_with_na(tmp_path):
    scores = pd.DataFrame({"Sample": ["a", "b"], "ImTH_Score": [1.0, np.nan]})
    out = write_scores(scores, str(tmp_path / "sub" / "ImTH_scores.tsv"))
    lines = open(out, encoding="utf-8").read().splitlines()
    assert lines[0] == "Sample\tImTH_Score"
    assert lines[1] == "a\t1.0"
    assert lines[2] == "b\tNA"
