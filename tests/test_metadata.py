"""
Tests for core/metadata.py module.
"""
import numpy as np
import pandas as pd
import pytest

from chipqc_report.core.errors import JoinMismatch
from chipqc_report.core.metadata import (
    make_safe_token,
    normalize_aggregate_metadata,
    normalize_sheet_metadata,
    sanitize_columns,
)
from conftest import make_sample


class TestMakeSafeToken:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("H3K4me3", "H3K4me3"),
            ("wild type", "wild.type"),
            ("knock-out", "knock.out"),
            ("1 hour", "X1.hour"),
            ("", "X"),
            (".5", "X.5"),
            (".hidden", ".hidden"),
            ("_tag", "X_tag"),
            ("if", "if."),
            ("NA", "NA."),
            (np.nan, "NA."),
            (None, "NA."),
            (3, "X3"),
            (3.0, "X3"),
            (2.5, "X2.5"),
        ],
    )
    def test_tokens(self, value, expected):
        assert make_safe_token(value) == expected

    def test_idempotent(self):
        for value in ["a b", "1x", "NA", "", "if", "x-y-z"]:
            once = make_safe_token(value)
            assert make_safe_token(once) == once

    def test_no_uniqueness_enforced(self):
        assert make_safe_token("a b") == make_safe_token("a-b")


def test_sanitize_columns_respects_exclusions():
    df = pd.DataFrame({"A": ["x y"], "Path": ["some dir/f.pkl"], "Replicate": [2]})
    out = sanitize_columns(df, exclude=["Path", "Replicate"])
    assert out.loc[0, "A"] == "x.y"
    assert out.loc[0, "Path"] == "some dir/f.pkl"
    assert out.loc[0, "Replicate"] == 2
    # input unchanged
    assert df.loc[0, "A"] == "x y"


class TestNormalizeSheetMetadata:
    def _sheet(self):
        return pd.DataFrame(
            {
                "Tissue": ["He La", "HeLa"],
                "SampleID": ["s 1", "s2"],
                "Replicate": [1, 2],
                "Path": ["a b.pkl", "c.pkl"],
                "Peaks": ["p1.bed", "p2.bed"],
            }
        )

    def test_columns_and_peaks(self):
        handles = [make_sample(counts=[1, 2]), make_sample(counts=[1, 2, 3])]
        meta = normalize_sheet_metadata(
            self._sheet(), ["s.1", "s2"], handles
        )
        assert meta.columns[0] == "Sample"
        assert meta["Sample"].tolist() == ["s.1", "s2"]
        assert meta["Tissue"].tolist() == ["He.La", "HeLa"]
        assert meta["Path"].tolist() == ["a b.pkl", "c.pkl"]
        assert meta["Replicate"].tolist() == [1, 2]
        assert meta["Peaks"].tolist() == [2, 3]

    def test_order_mismatch(self):
        handles = [make_sample(), make_sample()]
        with pytest.raises(JoinMismatch):
            normalize_sheet_metadata(self._sheet(), ["s2", "s.1"], handles)

    def test_handle_count_mismatch(self):
        with pytest.raises(JoinMismatch):
            normalize_sheet_metadata(
                self._sheet(), ["s.1", "s2"], [make_sample()]
            )


class TestNormalizeAggregateMetadata:
    def test_first_column_renamed_and_peaks_recomputed(self):
        embedded = pd.DataFrame(
            {
                "ID": ["A", "B"],
                "Factor": ["CTCF", "H3K27ac"],
                "Peaks": ["a.bed", "b.bed"],
            }
        )
        handles = [make_sample(counts=[1]), make_sample(counts=[])]
        meta = normalize_aggregate_metadata(embedded, ["A", "B"], handles)
        assert list(meta.columns) == ["Sample", "Factor", "Peaks"]
        assert meta["Peaks"].tolist() == [1, 0]
        # values are not sanitized in aggregate mode
        assert meta["Factor"].tolist() == ["CTCF", "H3K27ac"]
