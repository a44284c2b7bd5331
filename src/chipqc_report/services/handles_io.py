"""
Loading of serialized QC objects.

Pickles (".pkl", ".pickle") must contain a SampleQC/ExperimentQC (or any
other handle implementation); ".rds" files are R ChIPQC objects read via
rpy2. Every failure is reported as HandleLoadFailure so a single unreadable
file stops the whole report.
"""

from pathlib import Path
from typing import Union

import pandas as pd

from ..core.errors import HandleLoadFailure
from ..core.handles import AnalysisHandle, AggregateHandle

PICKLE_SUFFIXES = {".pkl", ".pickle"}
RDS_SUFFIXES = {".rds"}


def read_serialized(path: Union[str, Path]):
    path = Path(path)
    if not path.exists():
        raise HandleLoadFailure(f"QC object does not exist: {path}")
    suffix = path.suffix.lower()
    if suffix not in PICKLE_SUFFIXES | RDS_SUFFIXES:
        raise HandleLoadFailure(
            f"Unsupported QC object format '{suffix}' for {path}"
        )
    try:
        if suffix in RDS_SUFFIXES:
            # needs R with ChIPQC installed, only imported on demand
            from ..r_integration.chipqc_wrapper import read_chipqc_rds

            return read_chipqc_rds(path)
        return pd.read_pickle(path)
    except Exception as exc:
        raise HandleLoadFailure(
            f"Failed to load QC object '{path}': {exc}"
        ) from exc


def load_handle(path: Union[str, Path]) -> AnalysisHandle:
    obj = read_serialized(path)
    if not isinstance(obj, AnalysisHandle):
        raise HandleLoadFailure(
            f"'{path}' does not contain a single-sample QC object "
            f"(found {type(obj).__name__})."
        )
    return obj


def load_aggregate(path: Union[str, Path]) -> AggregateHandle:
    obj = read_serialized(path)
    if not isinstance(obj, AggregateHandle):
        raise HandleLoadFailure(
            f"'{path}' does not contain a multi-sample QC object "
            f"(found {type(obj).__name__})."
        )
    return obj
