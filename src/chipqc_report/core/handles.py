"""
Read-only views on QC metrics computed by an upstream ChIP-seq QC engine.

AnalysisHandle is one sample, AggregateHandle is one experiment holding
several samples plus their metadata. SampleQC and ExperimentQC are the
plain-Python implementations (pickled with pandas); the R ChIPQC objects
are adapted in chipqc_report.r_integration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from pandas import DataFrame


class AnalysisHandle(ABC):
    @abstractmethod
    def metrics(self) -> Dict[str, float]:
        """Scalar QC metrics, passed through to the summary table."""

    @abstractmethod
    def coverage_histogram(self) -> np.ndarray:
        """Base pairs per read depth, index 0 is depth 1."""

    @abstractmethod
    def cross_coverage(self) -> np.ndarray:
        """Cross-coverage score per shift size."""

    @abstractmethod
    def average_peak_signal(self) -> np.ndarray:
        """Mean signal around peak summits."""

    @abstractmethod
    def reads_in_peaks(self) -> Optional[float]:
        """Reads overlapping called peaks, None if not computed."""

    @abstractmethod
    def mapped_reads(self) -> float:
        """Total mapped reads."""

    @abstractmethod
    def peak_counts(self) -> np.ndarray:
        """Read count of every called peak."""

    def n_peaks(self) -> int:
        return int(len(self.peak_counts()))


class AggregateHandle(ABC):
    @abstractmethod
    def metadata(self) -> DataFrame:
        """Sample metadata, first column holds the sample ids."""

    @abstractmethod
    def samples(self) -> List[AnalysisHandle]:
        """Per-sample handles in metadata row order."""


def _as_array(values) -> np.ndarray:
    return np.asarray(values, dtype=float).copy()


@dataclass
class SampleQC(AnalysisHandle):
    qc_metrics: Dict[str, float] = field(default_factory=dict)
    coverage: np.ndarray = field(default_factory=lambda: np.zeros(0))
    cc_scores: np.ndarray = field(default_factory=lambda: np.zeros(0))
    peak_signal: np.ndarray = field(default_factory=lambda: np.zeros(0))
    rip: Optional[float] = None
    mapped: float = 0.0
    counts: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def metrics(self) -> Dict[str, float]:
        return dict(self.qc_metrics)

    def coverage_histogram(self) -> np.ndarray:
        return _as_array(self.coverage)

    def cross_coverage(self) -> np.ndarray:
        return _as_array(self.cc_scores)

    def average_peak_signal(self) -> np.ndarray:
        return _as_array(self.peak_signal)

    def reads_in_peaks(self) -> Optional[float]:
        if self.rip is None or pd.isna(self.rip):
            return None
        return float(self.rip)

    def mapped_reads(self) -> float:
        return float(self.mapped)

    def peak_counts(self) -> np.ndarray:
        return _as_array(self.counts)


@dataclass
class ExperimentQC(AggregateHandle):
    sample_metadata: DataFrame
    sample_handles: Dict[str, SampleQC]

    def metadata(self) -> DataFrame:
        return self.sample_metadata.copy()

    def samples(self) -> List[AnalysisHandle]:
        ids = self.sample_metadata.iloc[:, 0].astype(str).tolist()
        missing = [s for s in ids if s not in self.sample_handles]
        if missing:
            raise KeyError(
                f"Metadata lists samples without QC data: {missing}"
            )
        return [self.sample_handles[s] for s in ids]
