"""
Tests for services/io.py and services/handles_io.py.
"""
import pandas as pd
import pytest
import matplotlib.pyplot as plt

from chipqc_report.core.errors import HandleLoadFailure
from chipqc_report.core.handles import ExperimentQC, SampleQC
from chipqc_report.services.handles_io import (
    load_aggregate,
    load_handle,
    read_serialized,
)
from chipqc_report.services.io import read_dataframe, save_figure, write_tables
from conftest import make_sample


class TestReadDataframe:
    def test_csv(self, tmp_path):
        path = tmp_path / "x.csv"
        pd.DataFrame({"a": [1, 2]}).to_csv(path, index=False)
        assert read_dataframe(path)["a"].tolist() == [1, 2]

    def test_tsv(self, tmp_path):
        path = tmp_path / "x.tsv"
        pd.DataFrame({"a": [1], "b": ["x y"]}).to_csv(path, sep="\t", index=False)
        df = read_dataframe(path)
        assert list(df.columns) == ["a", "b"]

    def test_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_dataframe(tmp_path / "nope.csv")

    def test_unsupported(self, tmp_path):
        path = tmp_path / "x.txt"
        path.write_text("a\n1\n")
        with pytest.raises(ValueError):
            read_dataframe(path)


class TestSaveFigure:
    def test_formats(self, tmp_path):
        fig, ax = plt.subplots()
        ax.plot([1, 2], [1, 2])
        written = save_figure(fig, tmp_path / "nested", "plot", formats=["png", "svg"])
        plt.close(fig)
        assert [p.name for p in written] == ["plot.png", "plot.svg"]
        assert all(p.exists() for p in written)


def test_write_tables(tmp_path):
    written = write_tables(
        {"one": pd.DataFrame({"x": [1]}), "two": pd.DataFrame({"y": [2]})},
        tmp_path / "tables",
    )
    assert set(written) == {"one", "two"}
    assert pd.read_csv(written["one"], sep="\t")["x"].tolist() == [1]


class TestHandleLoading:
    def test_load_sample_pickle(self, tmp_path):
        path = tmp_path / "s.pkl"
        pd.to_pickle(make_sample(rip=12.0), path)
        handle = load_handle(path)
        assert isinstance(handle, SampleQC)
        assert handle.reads_in_peaks() == 12.0

    def test_load_experiment_pickle(self, experiment_pickle):
        aggregate = load_aggregate(experiment_pickle)
        assert isinstance(aggregate, ExperimentQC)
        assert len(aggregate.samples()) == 2

    def test_wrong_object_type(self, tmp_path):
        path = tmp_path / "frame.pickle"
        pd.to_pickle(pd.DataFrame({"a": [1]}), path)
        with pytest.raises(HandleLoadFailure, match="DataFrame"):
            load_handle(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(HandleLoadFailure):
            read_serialized(tmp_path / "missing.pkl")

    def test_unknown_suffix(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("{}")
        with pytest.raises(HandleLoadFailure, match=".json"):
            read_serialized(path)

    def test_corrupt_pickle(self, tmp_path):
        path = tmp_path / "s.pkl"
        path.write_bytes(b"not a pickle")
        with pytest.raises(HandleLoadFailure) as excinfo:
            load_handle(path)
        assert excinfo.value.__cause__ is not None
