"""
Sample metadata normalization.

Sheet metadata is free text typed by users; before it can be used to facet
and colour plots every cell is turned into a syntactically safe token. Both
input modes end with one row per sample, in canonical sample order, with a
"Sample" column first and a derived "Peaks" column.
"""

import re
from typing import Iterable, List, Sequence

import pandas as pd
from pandas import DataFrame

from .errors import JoinMismatch
from .handles import AnalysisHandle

SAMPLE_COL = "Sample"
PEAKS_COL = "Peaks"

_RESERVED = {
    "if",
    "else",
    "repeat",
    "while",
    "function",
    "for",
    "next",
    "break",
    "in",
    "TRUE",
    "FALSE",
    "NULL",
    "Inf",
    "NaN",
    "NA",
    "NA_integer_",
    "NA_real_",
    "NA_character_",
    "NA_complex_",
}
_INVALID_CHARS = re.compile(r"[^0-9A-Za-z._]")
_VALID_START = re.compile(r"^([A-Za-z]|\.(?![0-9]))")


def make_safe_token(value) -> str:
    """
    Turn a metadata cell into a syntactically valid identifier.

    Invalid characters become ".", an "X" is prefixed when the token does
    not start with a letter (or a dot not followed by a digit), missing
    values become "NA." and reserved words get a trailing ".".
    The mapping is deterministic and idempotent; it does not enforce
    uniqueness.

    >>> make_safe_token("1 hour")
    'X1.hour'
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return "NA."
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    token = _INVALID_CHARS.sub(".", str(value))
    if not _VALID_START.match(token):
        token = "X" + token
    if token in _RESERVED:
        token = token + "."
    return token


def sanitize_columns(
    metadata: DataFrame, exclude: Iterable[str] = ()
) -> DataFrame:
    """Apply make_safe_token to every column not listed in exclude."""
    exclude = set(exclude)
    df = metadata.copy()
    for col in df.columns:
        if col in exclude:
            continue
        df[col] = df[col].map(make_safe_token)
    return df


def add_peak_counts(
    metadata: DataFrame, handles: Sequence[AnalysisHandle]
) -> DataFrame:
    if len(handles) != len(metadata):
        raise JoinMismatch(
            f"{len(handles)} QC handles for {len(metadata)} metadata rows."
        )
    df = metadata.copy()
    df[PEAKS_COL] = [int(h.n_peaks()) for h in handles]
    return df


def _check_order(metadata: DataFrame, sample_ids: List[str]) -> None:
    found = metadata[SAMPLE_COL].astype(str).tolist()
    if found != list(sample_ids):
        raise JoinMismatch(
            "Metadata rows do not match the sample order used for metric "
            f"extraction: {found} != {list(sample_ids)}"
        )


def _sample_first(df: DataFrame) -> DataFrame:
    cols = [SAMPLE_COL] + [c for c in df.columns if c != SAMPLE_COL]
    return df[cols].reset_index(drop=True)


def normalize_sheet_metadata(
    sheet: DataFrame,
    sample_ids: List[str],
    handles: Sequence[AnalysisHandle],
    sample_id_col: str = "SampleID",
    path_col: str = "Path",
    replicate_col: str = "Replicate",
) -> DataFrame:
    """
    Build the metadata table for sample-sheet input.

    Parameters
    ----------
    sheet : DataFrame
        Sample sheet as read from disk.
    sample_ids : list of str
        Canonical sample ids, in sheet row order.
    handles : sequence of AnalysisHandle
        Loaded per-sample handles, same order.
    sample_id_col, path_col, replicate_col : str
        Sheet column names. The path and replicate columns are kept as is,
        every other column is sanitized.

    Returns
    -------
    DataFrame
        Metadata with "Sample" first and a "Peaks" column appended.
    """
    df = sanitize_columns(sheet, exclude=[path_col, replicate_col])
    if sample_id_col != SAMPLE_COL and SAMPLE_COL in df.columns:
        df = df.drop(columns=[SAMPLE_COL])
    df = df.rename(columns={sample_id_col: SAMPLE_COL})
    df = _sample_first(df)
    df = add_peak_counts(df, handles)
    _check_order(df, sample_ids)
    return df


def normalize_aggregate_metadata(
    metadata: DataFrame,
    sample_ids: List[str],
    handles: Sequence[AnalysisHandle],
) -> DataFrame:
    """
    Build the metadata table for an aggregate object.

    The embedded table is used as is apart from renaming its first column
    to "Sample" and (re)computing "Peaks" from the handles.
    """
    df = metadata.copy()
    first = df.columns[0]
    if first != SAMPLE_COL and SAMPLE_COL in df.columns:
        df = df.drop(columns=[SAMPLE_COL])
    df = df.rename(columns={first: SAMPLE_COL})
    df[SAMPLE_COL] = df[SAMPLE_COL].astype(str)
    df = _sample_first(df)
    if PEAKS_COL in df.columns:
        df = df.drop(columns=[PEAKS_COL])
    df = add_peak_counts(df, handles)
    _check_order(df, sample_ids)
    return df
