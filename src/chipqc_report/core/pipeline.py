"""
In-memory ChIP-seq QC pipeline: resolve, ingest, extract, reshape.

build_qc_tables is deterministic; the same input always gives identical
tables. Rendering and writing files is left to the report layer.
"""

from dataclasses import dataclass
from typing import Dict, List

from pandas import DataFrame

from ..config import ReportConfig
from .facets import check_facet_columns
from .ingest import ingest
from .metrics import extract_metrics
from .modes import InputMode, resolve_mode
from .tidy import (
    coverage_histogram_long,
    cross_coverage_long,
    peak_counts_long,
    peak_profile_long,
    reads_in_peaks_long,
    summary_long,
)


@dataclass
class QCTables:
    mode: InputMode
    sample_ids: List[str]
    metadata: DataFrame
    summary: DataFrame
    coverage_histogram: DataFrame
    cross_coverage: DataFrame
    peak_profile: DataFrame
    reads_in_peaks: DataFrame
    peak_counts: DataFrame
    rip_excluded: List[str]

    def as_dict(self) -> Dict[str, DataFrame]:
        return {
            "metadata": self.metadata,
            "summary": self.summary,
            "coverage_histogram": self.coverage_histogram,
            "cross_coverage": self.cross_coverage,
            "peak_profile": self.peak_profile,
            "reads_in_peaks": self.reads_in_peaks,
            "peak_counts": self.peak_counts,
        }


def build_qc_tables(config: ReportConfig) -> QCTables:
    """
    Run ingestion, metric extraction and reshaping for config.input.

    Raises
    ------
    InvalidInputFormat
        Unknown input suffix; nothing is read.
    InvalidSampleSheet, HandleLoadFailure
        The input or one of the referenced QC objects cannot be used.
    MissingFacetColumn
        facet_x, facet_y or facet_z is not a metadata column.
    JoinMismatch
        Metric families and metadata disagree on the sample ids.
    """
    mode = resolve_mode(config.input)
    samples = ingest(config.input, mode=mode, **config.sheet_columns())
    metadata = samples.metadata
    check_facet_columns(
        metadata, config.facet_x, config.facet_y, config.facet_z
    )
    families = extract_metrics(samples.handles, samples.sample_ids)

    return QCTables(
        mode=mode,
        sample_ids=samples.sample_ids,
        metadata=metadata,
        summary=summary_long(families.summary, metadata),
        coverage_histogram=coverage_histogram_long(
            families.coverage_histogram, metadata
        ),
        cross_coverage=cross_coverage_long(families.cross_coverage, metadata),
        peak_profile=peak_profile_long(families.peak_profile, metadata),
        reads_in_peaks=reads_in_peaks_long(
            families.reads_in_peaks, metadata, excluded=families.rip_excluded
        ),
        peak_counts=peak_counts_long(families.peak_counts, metadata),
        rip_excluded=families.rip_excluded,
    )
