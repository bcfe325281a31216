"""Tests for LM22 -> coarse group aggregation."""

import logging
from types import MappingProxyType

import numpy as np
import pandas as pd
import pytest

from imth.config import CELL_GROUPS
from imth.s2.groups import aggregate_cell_groups, missing_fine_types


def test_cell_groups_layout(lm22_names):
    assert len(CELL_GROUPS) == 14
    assert len(lm22_names) == 22
    assert len(set(lm22_names)) == 22
    with pytest.raises(TypeError):
        CELL_GROUPS["New"] = ("x",)


def test_full_lm22_sums_preserved(lm22_props):
    out = aggregate_cell_groups(lm22_props)
    assert list(out.columns) == list(CELL_GROUPS.keys())
    assert list(out.index) == list(lm22_props.index)
    np.testing.assert_allclose(out.sum(axis=1), 1.0)
    np.testing.assert_allclose(
        out["Macrophages"],
        lm22_props[["Macrophages M0", "Macrophages M1", "Macrophages M2"]].sum(axis=1),
    )


def test_full_lm22_no_warning(lm22_props, caplog):
    with caplog.at_level(logging.WARNING):
        aggregate_cell_groups(lm22_props)
    assert not caplog.records


def test_partial_columns_sum_and_warn(caplog):
    df = pd.DataFrame(
        {"B cells naive": [0.3], "B cells memory": [0.2], "T cells CD8": [0.5]},
        index=["s1"],
    )
    with caplog.at_level(logging.WARNING):
        out = aggregate_cell_groups(df)

    assert out.loc["s1", "B cells"] == pytest.approx(0.5)
    assert out.loc["s1", "T cells CD8"] == pytest.approx(0.5)
    assert out.loc["s1", "Macrophages"] == 0.0

    msgs = [r.getMessage() for r in caplog.records]
    assert len(msgs) == 1
    assert "Macrophages M0" in msgs[0]
    assert "B cells naive" not in msgs[0]


def test_missing_fine_types_exact_list():
    present = [n for n in sum(CELL_GROUPS.values(), ()) if n not in ("Eosinophils", "NK cells resting")]
    assert missing_fine_types(present) == ["NK cells resting", "Eosinophils"]


def test_unmapped_columns_dropped(lm22_props):
    df = lm22_props.copy()
    df["P-value"] = 0.01
    out = aggregate_cell_groups(df)
    assert "P-value" not in out.columns
    assert out.shape == (lm22_props.shape[0], 14)


def test_custom_mapping_injected():
    groups = MappingProxyType({"Lymphoid": ("T", "B"), "Myeloid": ("Mono",)})
    df = pd.DataFrame({"T": [0.1, 0.4], "B": [0.2, 0.0], "Mono": [0.7, 0.6]})
    out = aggregate_cell_groups(df, groups)
    np.testing.assert_allclose(out["Lymphoid"], [0.3, 0.4])
    np.testing.assert_allclose(out["Myeloid"], [0.7, 0.6])


def test_missing_value_in_fine_column_fails(lm22_props):
    df = lm22_props.copy()
    df.iloc[2, df.columns.get_loc("B cells memory")] = np.nan
    with pytest.raises(ValueError, match="TCGA-02"):
        aggregate_cell_groups(df)


def test_unmapped_non_numeric_column_ignored(lm22_props):
    df = lm22_props.copy()
    df["Cohort"] = "UCS"
    out = aggregate_cell_groups(df)
    np.testing.assert_allclose(out.sum(axis=1), 1.0)
