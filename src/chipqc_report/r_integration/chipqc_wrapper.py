import numpy as np
import rpy2.robjects as ro

from rpy2.robjects import pandas2ri
from rpy2.robjects.packages import importr
from pathlib import Path
from typing import Dict, List, Optional, Union
from pandas import DataFrame

from ..core.handles import AnalysisHandle, AggregateHandle


def _chipqc():
    """
    Attach the ChIPQC R package and return its namespace.
    """
    return importr("ChIPQC")


# accessors that need a little R code to flatten ChIPQC return values
_PEAK_COUNTS_R = ro.r(
    """
    function(x) {
        p <- peaks(x)
        if (is.null(p) || length(p) == 0) return(numeric(0))
        as.numeric(p$Counts)
    }
    """
)
_METRICS_R = ro.r(
    """
    function(x) {
        m <- QCmetrics(x)
        m <- suppressWarnings(as.numeric(m))
        names(m) <- names(QCmetrics(x))
        m
    }
    """
)


def _to_numpy(r_vector) -> np.ndarray:
    values = np.array(list(r_vector), dtype=float)
    return values


def _to_scalar(r_vector) -> Optional[float]:
    values = _to_numpy(r_vector)
    if len(values) == 0 or np.isnan(values[0]):
        return None
    return float(values[0])


def _to_pandas(r_frame) -> DataFrame:
    with (ro.default_converter + pandas2ri.converter).context():
        df = ro.conversion.get_conversion().rpy2py(r_frame)
    return df.reset_index(drop=True)


class RChIPQCSample(AnalysisHandle):
    """
    Wrapper around an R ChIPQCsample object.
    """

    def __init__(self, r_object):
        self.r_object = r_object
        self.chipqc = _chipqc()

    def metrics(self) -> Dict[str, float]:
        r_metrics = _METRICS_R(self.r_object)
        return dict(zip(list(r_metrics.names), _to_numpy(r_metrics)))

    def coverage_histogram(self) -> np.ndarray:
        return _to_numpy(self.chipqc.coveragehistogram(self.r_object))

    def cross_coverage(self) -> np.ndarray:
        return _to_numpy(self.chipqc.crosscoverage(self.r_object))

    def average_peak_signal(self) -> np.ndarray:
        return _to_numpy(self.chipqc.averagepeaksignal(self.r_object))

    def reads_in_peaks(self) -> Optional[float]:
        return _to_scalar(self.chipqc.rip(self.r_object))

    def mapped_reads(self) -> float:
        mapped = _to_scalar(self.chipqc.mapped(self.r_object))
        return 0.0 if mapped is None else mapped

    def peak_counts(self) -> np.ndarray:
        return _to_numpy(_PEAK_COUNTS_R(self.r_object))


class RChIPQCExperiment(AggregateHandle):
    """
    Wrapper around an R ChIPQCexperiment object.
    """

    def __init__(self, r_object):
        self.r_object = r_object
        self.chipqc = _chipqc()

    def metadata(self) -> DataFrame:
        return _to_pandas(self.chipqc.QCmetadata(self.r_object))

    def samples(self) -> List[AnalysisHandle]:
        ids = self.metadata().iloc[:, 0].astype(str).tolist()
        r_samples = self.chipqc.QCsample(self.r_object)
        by_name = dict(zip(list(r_samples.names), list(r_samples)))
        return [RChIPQCSample(by_name[sample]) for sample in ids]


def read_chipqc_rds(
    path: Union[str, Path],
) -> Union[RChIPQCSample, RChIPQCExperiment]:
    """
    readRDS a ChIPQC object and wrap it according to its R class.
    """
    _chipqc()
    r_object = ro.r["readRDS"](str(path))
    r_classes = set(ro.r["class"](r_object))
    if "ChIPQCexperiment" in r_classes:
        return RChIPQCExperiment(r_object)
    if "ChIPQCsample" in r_classes:
        return RChIPQCSample(r_object)
    raise TypeError(
        f"{path} holds an R object of class {sorted(r_classes)}, "
        "expected ChIPQCexperiment or ChIPQCsample."
    )
