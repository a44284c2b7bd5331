"""
Report generators for ChIP-seq QC.

This includes:
- ChIPQCReport: tables, plots and markdown/HTML report for one input
- ReportConfig: configuration of one report run
"""

from ..config import ReportConfig
from .qc_report import ChIPQCReport

__all__ = [
    "ChIPQCReport",
    "ReportConfig",
]
