"""
ChIP-seq QC report: tidy tables and charts from per-sample QC metrics.

This package provides:
- core
- models
- services
- jobs
- r_integration
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("chipqc-report")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"


from .config import ReportConfig
from .core.pipeline import QCTables, build_qc_tables
from .models.qc_report import ChIPQCReport

__all__ = [
    "ReportConfig",
    "QCTables",
    "build_qc_tables",
    "ChIPQCReport",
]
