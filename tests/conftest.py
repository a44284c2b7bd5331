import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from chipqc_report.core.handles import SampleQC, ExperimentQC


def make_sample(
    rip=40.0,
    mapped=100.0,
    coverage=(1000.0, 200.0, 0.0, 10.0),
    counts=(5.0, 12.0, 30.0),
    cc_scores=(0.1, 0.3, 0.2, 0.15, 0.1),
    peak_signal=(1.0, 2.0, 4.0, 4.0, 2.0, 1.0),
    reads=1000,
):
    return SampleQC(
        qc_metrics={"Reads": float(reads), "FragL": 150.0, "SSD": 1.5},
        coverage=np.array(coverage, dtype=float),
        cc_scores=np.array(cc_scores, dtype=float),
        peak_signal=np.array(peak_signal, dtype=float),
        rip=rip,
        mapped=mapped,
        counts=np.array(counts, dtype=float),
    )


@pytest.fixture
def samples():
    """Two samples with differently sized histograms and peak sets."""
    return {
        "CTCF_1": make_sample(rip=10.0, mapped=100.0),
        "CTCF_2": make_sample(
            rip=20.0,
            mapped=100.0,
            coverage=(800.0, 100.0),
            counts=(7.0, 0.0, 3.0, 9.0, 11.0),
        ),
    }


@pytest.fixture
def sample_sheet(tmp_path, samples):
    """CSV sheet pointing at pickled SampleQC objects (relative paths)."""
    handle_dir = tmp_path / "handles"
    handle_dir.mkdir()
    paths = []
    for sample_id, handle in samples.items():
        path = handle_dir / f"{sample_id}.pkl"
        pd.to_pickle(handle, path)
        paths.append(f"handles/{sample_id}.pkl")
    sheet = pd.DataFrame(
        {
            "SampleID": list(samples),
            "Tissue": ["HeLa", "HeLa"],
            "Factor": ["CTCF", "CTCF"],
            "Condition": ["wild type", "knock-out"],
            "Replicate": [1, 1],
            "Path": paths,
        }
    )
    sheet_path = tmp_path / "samples.csv"
    sheet.to_csv(sheet_path, index=False)
    return sheet_path


@pytest.fixture
def experiment(samples):
    metadata = pd.DataFrame(
        {
            "ID": list(samples),
            "Tissue": ["HeLa", "HeLa"],
            "Factor": ["CTCF", "CTCF"],
            "Condition": ["WT", "WT"],
            "Peaks": ["a.bed", "b.bed"],
        }
    )
    return ExperimentQC(sample_metadata=metadata, sample_handles=samples)


@pytest.fixture
def experiment_pickle(tmp_path, experiment):
    path = tmp_path / "experiment.pkl"
    pd.to_pickle(experiment, path)
    return path
