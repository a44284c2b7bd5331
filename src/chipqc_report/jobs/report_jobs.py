import os
from dataclasses import asdict
from pathlib import Path
from typing import List

from pypipegraph2 import (
    Job,
    MultiFileGeneratingJob,
    FunctionInvariant,
    ParameterInvariant,
)

from chipqc_report.config import ReportConfig
from chipqc_report.models.qc_report import ChIPQCReport


def _build_report(config: ReportConfig) -> Path:
    return ChIPQCReport(config).build()


def write_chipqc_report_job(
    config: ReportConfig,
    dependencies: List[Job] = [],
):
    """
    Job writing report.md and report.html (plus tables/plots) for config.

    Output paths are registered relative to the current working directory,
    which is where the pipegraph runs.
    """
    # pypipegraph2 refuses absolute output paths
    out_dir = Path(os.path.relpath(config.out_dir))
    outfiles = [out_dir / "report.md", out_dir / "report.html"]

    def __dump(outfiles, config=config):
        _build_report(config)

    params = ParameterInvariant(
        f"write_chipqc_report_params_{out_dir}",
        sorted((k, str(v)) for k, v in asdict(config).items()),
    )
    func_invariant = FunctionInvariant(
        f"build_chipqc_report_{out_dir}", _build_report
    )
    return (
        MultiFileGeneratingJob(outfiles, __dump)
        .depends_on(params, func_invariant)
        .depends_on(dependencies)
    )
