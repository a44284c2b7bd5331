"""
End-to-end tests for core/pipeline.py.
"""

import pandas as pd
import pytest

from chipqc_report.config import ReportConfig
from chipqc_report.core.errors import (
    InvalidInputFormat,
    JoinMismatch,
    MissingFacetColumn,
    UndefinedRatioWarning,
)
from chipqc_report.core.modes import InputMode
from chipqc_report.core.pipeline import build_qc_tables
from conftest import make_sample


def _config(path, tmp_path):
    return ReportConfig(input=path, out_dir=tmp_path / "out", echo=False)


def test_sheet_end_to_end(sample_sheet, tmp_path):
    tables = build_qc_tables(_config(sample_sheet, tmp_path))

    assert tables.mode == InputMode.MULTI_FILE_SHEET
    assert tables.sample_ids == ["CTCF_1", "CTCF_2"]

    rip = tables.reads_in_peaks
    inside = rip[rip["Category"] == "Inside"].set_index("Sample")["Percentage"]
    outside = rip[rip["Category"] == "Outside"].set_index("Sample")["Percentage"]
    assert inside.loc[["CTCF_1", "CTCF_2"]].tolist() == pytest.approx([10.0, 20.0])
    assert outside.loc[["CTCF_1", "CTCF_2"]].tolist() == pytest.approx(
        [90.0, 80.0]
    )
    assert set(rip["Sample"]) == {"CTCF_1", "CTCF_2"}
    assert {"Tissue", "Factor", "Condition", "Peaks"} <= set(rip.columns)

    for name, df in tables.as_dict().items():
        assert set(df["Sample"]) <= set(tables.metadata["Sample"]), name

    hist = tables.coverage_histogram
    assert len(hist) == 4 * 2
    assert hist["Depth"].max() == 4

    counts = tables.peak_counts
    assert len(counts) == 5 * 2
    assert counts["PeakIndex"].tolist()[:5] == [1, 2, 3, 4, 5]

    profile = tables.peak_profile
    assert sorted(profile["Distance"].unique()) == [-2, -1, 0, 1, 2]

    assert tables.cross_coverage["ShiftSize"].max() == 5
    assert tables.summary["SSD"].tolist() == [1.5, 1.5]


def test_aggregate_end_to_end(experiment_pickle, tmp_path):
    tables = build_qc_tables(_config(experiment_pickle, tmp_path))
    assert tables.mode == InputMode.SINGLE_AGGREGATE
    assert tables.metadata["Peaks"].tolist() == [3, 5]
    assert set(tables.coverage_histogram["Condition"]) == {"WT"}


def test_idempotent(sample_sheet, tmp_path):
    first = build_qc_tables(_config(sample_sheet, tmp_path))
    second = build_qc_tables(_config(sample_sheet, tmp_path))
    for name, df in first.as_dict().items():
        pd.testing.assert_frame_equal(df, second.as_dict()[name])
        assert df.to_csv(index=False) == second.as_dict()[name].to_csv(
            index=False
        )


def test_undefined_ratio_only_affects_reads_in_peaks(tmp_path):
    pd.to_pickle(make_sample(rip=None), tmp_path / "a.pkl")
    pd.to_pickle(make_sample(rip=25.0), tmp_path / "b.pkl")
    sheet = tmp_path / "sheet.csv"
    pd.DataFrame(
        {
            "SampleID": ["a", "b"],
            "Tissue": ["HeLa", "HeLa"],
            "Factor": ["CTCF", "CTCF"],
            "Condition": ["x", "y"],
            "Path": ["a.pkl", "b.pkl"],
        }
    ).to_csv(sheet, index=False)

    with pytest.warns(UndefinedRatioWarning):
        tables = build_qc_tables(_config(sheet, tmp_path))

    assert tables.rip_excluded == ["a"]
    assert set(tables.reads_in_peaks["Sample"]) == {"b"}
    assert set(tables.coverage_histogram["Sample"]) == {"a", "b"}


def test_invalid_input_stops_before_reading(tmp_path):
    with pytest.raises(InvalidInputFormat):
        build_qc_tables(_config(tmp_path / "data.txt", tmp_path))


def test_aggregate_with_unknown_sample(tmp_path, samples):
    from chipqc_report.core.handles import ExperimentQC

    meta = pd.DataFrame({"ID": ["CTCF_1", "other"]})
    experiment = ExperimentQC(sample_metadata=meta, sample_handles=samples)
    path = tmp_path / "exp.pkl"
    pd.to_pickle(experiment, path)
    with pytest.raises(JoinMismatch, match="other"):
        build_qc_tables(_config(path, tmp_path))


def test_aggregate_with_duplicate_sample_ids(tmp_path, samples):
    from chipqc_report.core.handles import ExperimentQC

    meta = pd.DataFrame({"ID": ["CTCF_1", "CTCF_1"], "Condition": ["a", "b"]})
    experiment = ExperimentQC(sample_metadata=meta, sample_handles=samples)
    path = tmp_path / "exp.pkl"
    pd.to_pickle(experiment, path)
    with pytest.raises(JoinMismatch, match="CTCF_1"):
        build_qc_tables(_config(path, tmp_path))


def test_unknown_facet_column(sample_sheet, tmp_path):
    config = ReportConfig(
        input=sample_sheet,
        out_dir=tmp_path / "out",
        facet_x="Tisue",
        echo=False,
    )
    with pytest.raises(MissingFacetColumn) as excinfo:
        build_qc_tables(config)
    message = str(excinfo.value)
    assert "Tisue" in message
    assert "Tissue" in message
