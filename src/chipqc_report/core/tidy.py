"""
Long-form reshaping of the metric families.

Every function returns one row per (sample, index) observation joined with
the sample metadata. Joins are strict: a sample id missing on either side
raises JoinMismatch instead of silently dropping rows.
"""

from typing import Iterable, Union

import numpy as np
import pandas as pd
from pandas import DataFrame

from .errors import JoinMismatch
from .metadata import SAMPLE_COL
from .ragged import RaggedVectorCollection, list_to_matrix

RIP_CATEGORIES = ["Outside", "Inside"]


def join_metadata(
    df: DataFrame,
    metadata: DataFrame,
    family: str,
    allow_absent: Iterable[str] = (),
) -> DataFrame:
    """
    Join df with metadata on "Sample", refusing unmatched ids, duplicate
    metadata rows and column names present on both sides.

    Parameters
    ----------
    df : DataFrame
        Long-form metric table with a "Sample" column.
    metadata : DataFrame
        One row per sample, "Sample" column unique.
    family : str
        Name used in error messages.
    allow_absent : iterable of str
        Metadata samples that may legitimately be missing from df.

    Returns
    -------
    DataFrame
        df with all metadata columns appended, row order of df kept.
    """
    duplicated = sorted(
        set(metadata.loc[metadata[SAMPLE_COL].duplicated(), SAMPLE_COL])
    )
    if duplicated:
        raise JoinMismatch(
            f"{family}: metadata lists samples {duplicated} more than once."
        )
    overlap = sorted(
        (set(df.columns) & set(metadata.columns)) - {SAMPLE_COL}
    )
    if overlap:
        raise JoinMismatch(
            f"{family}: columns {overlap} exist in both the metric table "
            "and the metadata."
        )
    family_ids = set(df[SAMPLE_COL].astype(str))
    meta_ids = set(metadata[SAMPLE_COL].astype(str))
    unknown = sorted(family_ids - meta_ids)
    if unknown:
        raise JoinMismatch(
            f"{family}: samples {unknown} have no metadata row."
        )
    absent = sorted(meta_ids - family_ids - set(allow_absent))
    if absent:
        raise JoinMismatch(f"{family}: no values for samples {absent}.")
    # every id is known at this point, so a left join equals the inner join
    # and keeps the row order of df
    return df.merge(
        metadata,
        on=SAMPLE_COL,
        how="left",
        validate="many_to_one",
        sort=False,
    )


def _melt_matrix(
    matrix: DataFrame, index_name: str, value_name: str
) -> DataFrame:
    long_df = (
        matrix.rename_axis(index=index_name, columns=None)
        .reset_index()
        .melt(id_vars=index_name, var_name=SAMPLE_COL, value_name=value_name)
    )
    long_df[SAMPLE_COL] = long_df[SAMPLE_COL].astype(str)
    return long_df[[index_name, SAMPLE_COL, value_name]]


def _log10(values: pd.Series) -> pd.Series:
    # log10(0) stays -inf, plotting code has to cope with it
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log10(values.astype(float))


def coverage_histogram_long(matrix: DataFrame, metadata: DataFrame) -> DataFrame:
    """(Depth, Sample, bp, log10_bp) + metadata."""
    df = _melt_matrix(matrix, "Depth", "bp")
    df["log10_bp"] = _log10(df["bp"])
    return join_metadata(df, metadata, "Coverage histogram")


def cross_coverage_long(matrix: DataFrame, metadata: DataFrame) -> DataFrame:
    """(ShiftSize, Sample, CCScore) + metadata, ShiftSize runs 1..N."""
    df = _melt_matrix(matrix, "ShiftSize", "CCScore")
    return join_metadata(df, metadata, "Cross-coverage")


def peak_profile_long(matrix: DataFrame, metadata: DataFrame) -> DataFrame:
    """(Distance, Sample, Signal) + metadata, Distance centred on 0."""
    df = _melt_matrix(matrix, "Distance", "Signal")
    return join_metadata(df, metadata, "Peak profile")


def reads_in_peaks_long(
    rip: DataFrame, metadata: DataFrame, excluded: Iterable[str] = ()
) -> DataFrame:
    """
    Percentage of reads inside and outside peaks per sample.

    Returns (Sample, Category, Reads, Percentage) + metadata, Category being
    an ordered categorical with "Outside" before "Inside". Only the samples
    in excluded (dropped for an undefined ratio) may be missing.
    """
    wide = rip[[SAMPLE_COL]].copy()
    wide["Inside"] = rip["RiP"].astype(float)
    wide["Outside"] = rip["Mapped"].astype(float) - wide["Inside"]
    long_df = wide.melt(
        id_vars=SAMPLE_COL,
        value_vars=RIP_CATEGORIES,
        var_name="Category",
        value_name="Reads",
    )
    totals = long_df.groupby(SAMPLE_COL, sort=False)["Reads"].transform("sum")
    long_df["Percentage"] = long_df["Reads"] * 100 / totals
    long_df["Category"] = pd.Categorical(
        long_df["Category"], categories=RIP_CATEGORIES, ordered=True
    )
    long_df[SAMPLE_COL] = long_df[SAMPLE_COL].astype(str)
    return join_metadata(
        long_df, metadata, "Reads in peaks", allow_absent=excluded
    )


def peak_counts_long(
    counts: Union[DataFrame, RaggedVectorCollection], metadata: DataFrame
) -> DataFrame:
    """(PeakIndex, Sample, Count, log10_Count) + metadata."""
    if isinstance(counts, RaggedVectorCollection):
        counts = list_to_matrix(counts)
    df = _melt_matrix(counts, "PeakIndex", "Count")
    df["log10_Count"] = _log10(df["Count"])
    return join_metadata(df, metadata, "Peak counts")


def summary_long(summary: DataFrame, metadata: DataFrame) -> DataFrame:
    """Per-sample scalar metrics joined with metadata (one row per sample)."""
    df = summary.copy()
    df[SAMPLE_COL] = df[SAMPLE_COL].astype(str)
    return join_metadata(df, metadata, "Summary metrics")
