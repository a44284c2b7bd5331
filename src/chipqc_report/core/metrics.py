"""
Extraction of the per-sample QC metric families from analysis handles.

All outputs are fresh copies labelled with the canonical sample ids; the
handles themselves are only read.
"""

import warnings
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd
from pandas import DataFrame

from .errors import JoinMismatch, UndefinedRatioWarning
from .handles import AnalysisHandle
from .metadata import SAMPLE_COL
from .ragged import RaggedVectorCollection, list_to_matrix


@dataclass
class MetricFamilies:
    """
    Native (wide) shape of every metric family.

    summary            : one row per sample, "Sample" + scalar metric columns
    coverage_histogram : depth (1-based index) x sample, zero padded
    cross_coverage     : shift size (1-based index) x sample
    peak_profile       : distance (centred index) x sample
    reads_in_peaks     : "Sample", "RiP", "Mapped"; undefined samples dropped
    peak_counts        : peak number (1-based index) x sample, zero padded
    rip_excluded       : samples left out of reads_in_peaks
    """

    sample_ids: List[str]
    summary: DataFrame
    coverage_histogram: DataFrame
    cross_coverage: DataFrame
    peak_profile: DataFrame
    reads_in_peaks: DataFrame
    peak_counts: DataFrame
    rip_excluded: List[str]


def peak_profile_distances(length: int) -> np.ndarray:
    """
    Distances from the peak centre for a trimmed profile.

    Even-length profiles lose the element just right of the centre (see
    trim_peak_profile), so the distances are always symmetric around 0.
    """
    if length % 2 == 0:
        length -= 1
    half = (length - 1) // 2
    return np.arange(-half, half + 1)


def trim_peak_profile(signal: Sequence[float]) -> np.ndarray:
    """Drop the centre-adjacent element of an even-length profile."""
    signal = np.asarray(signal, dtype=float)
    if len(signal) % 2 == 0 and len(signal) > 0:
        signal = np.delete(signal, len(signal) // 2)
    return signal.copy()


def _fixed_length_matrix(
    vectors: List[np.ndarray], sample_ids: List[str], family: str
) -> DataFrame:
    lengths = {len(v) for v in vectors}
    if len(lengths) > 1:
        raise ValueError(
            f"{family} profiles must have the same length for all samples, "
            f"got lengths {sorted(lengths)}."
        )
    length = lengths.pop() if lengths else 0
    data = {s: np.asarray(v, dtype=float) for s, v in zip(sample_ids, vectors)}
    return pd.DataFrame(data, index=pd.RangeIndex(1, length + 1))


def extract_summary(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> DataFrame:
    rows = [h.metrics() for h in handles]
    summary = pd.DataFrame(rows, index=range(len(sample_ids)))
    if SAMPLE_COL in summary.columns:
        summary = summary.drop(columns=[SAMPLE_COL])
    summary.insert(0, SAMPLE_COL, list(sample_ids))
    return summary


def extract_coverage_histogram(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> DataFrame:
    collection = RaggedVectorCollection(
        [h.coverage_histogram() for h in handles], list(sample_ids)
    )
    return list_to_matrix(collection)


def extract_cross_coverage(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> DataFrame:
    return _fixed_length_matrix(
        [h.cross_coverage() for h in handles], list(sample_ids), "Cross-coverage"
    )


def extract_peak_profile(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> DataFrame:
    profiles = [trim_peak_profile(h.average_peak_signal()) for h in handles]
    matrix = _fixed_length_matrix(profiles, list(sample_ids), "Peak signal")
    matrix.index = pd.Index(peak_profile_distances(len(matrix)))
    return matrix


def extract_reads_in_peaks(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> DataFrame:
    """
    Reads in peaks and mapped reads per sample.

    Samples without a reads-in-peaks value, without mapped reads or with
    more reads in peaks than mapped reads are left out of this family with
    an UndefinedRatioWarning.
    """
    rows = []
    undefined = []
    for sample, handle in zip(sample_ids, handles):
        rip = handle.reads_in_peaks()
        mapped = handle.mapped_reads()
        if (
            rip is None
            or pd.isna(rip)
            or pd.isna(mapped)
            or mapped <= 0
            or rip > mapped
        ):
            undefined.append(sample)
            continue
        rows.append({SAMPLE_COL: sample, "RiP": float(rip), "Mapped": float(mapped)})
    if undefined:
        warnings.warn(
            f"No reads-in-peaks value for {undefined}; these samples are "
            "left out of the reads-in-peaks plot.",
            UndefinedRatioWarning,
        )
    return pd.DataFrame(rows, columns=[SAMPLE_COL, "RiP", "Mapped"])


def extract_peak_counts(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> DataFrame:
    collection = RaggedVectorCollection(
        [h.peak_counts() for h in handles], list(sample_ids)
    )
    return list_to_matrix(collection)


def extract_metrics(
    handles: Sequence[AnalysisHandle], sample_ids: List[str]
) -> MetricFamilies:
    """Pull every metric family from handles, labelled by sample_ids."""
    if len(handles) != len(sample_ids):
        raise JoinMismatch(
            f"{len(handles)} QC handles for {len(sample_ids)} sample ids."
        )
    reads_in_peaks = extract_reads_in_peaks(handles, sample_ids)
    kept = set(reads_in_peaks[SAMPLE_COL])
    return MetricFamilies(
        sample_ids=list(sample_ids),
        summary=extract_summary(handles, sample_ids),
        coverage_histogram=extract_coverage_histogram(handles, sample_ids),
        cross_coverage=extract_cross_coverage(handles, sample_ids),
        peak_profile=extract_peak_profile(handles, sample_ids),
        reads_in_peaks=reads_in_peaks,
        peak_counts=extract_peak_counts(handles, sample_ids),
        rip_excluded=[s for s in sample_ids if s not in kept],
    )
