"""
QC Report Module

Builds the ChIP-seq quality control report: runs the metric pipeline,
writes every long-form table as TSV, renders the charts and writes
report.md / report.html referencing them.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import markdown as md
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from ..config import ReportConfig
from ..core.facets import facet_columns
from ..core.metadata import PEAKS_COL, SAMPLE_COL
from ..core.pipeline import QCTables, build_qc_tables
from ..core.plots import (
    plot_coverage_histogram,
    plot_cross_coverage,
    plot_peak_counts,
    plot_peak_profile,
    plot_peaks_per_sample,
    plot_reads_in_peaks,
)
from ..services.io import save_figure, write_tables


class ChIPQCReport:
    """
    Report generator for ChIP-seq QC metrics.

    Inputs:
      - a sample sheet referencing one QC object per sample, or
      - one aggregate QC object

    Outputs (below config.out_dir):
      - <assets>/tables/*.tsv
      - <assets>/plots/*.<fmt>
      - report.md, report.html
    """

    def __init__(self, config: ReportConfig):
        self.cfg = config

        self.out_dir = Path(self.cfg.out_dir)
        self.assets_dir = self.out_dir / self.cfg.assets_dirname
        self.plots_dir = self.assets_dir / self.cfg.plots_dirname
        self.tables_dir = self.assets_dir / self.cfg.tables_dirname

        # Long-form tables, filled by build()
        self.tables: Optional[QCTables] = None
        # name -> written files, filled by build()
        self.table_files: Dict[str, Path] = {}
        self.plot_files: Dict[str, List[Path]] = {}

    def _echo(self, message: str) -> None:
        if self.cfg.echo:
            print(message)

    # -----------------------
    # Main API
    # -----------------------
    def build(self) -> Path:
        """
        Run the pipeline and write tables, plots and the report.

        Returns
        -------
        Path
            Path to report.md.
        """
        self._echo("=" * 60)
        self._echo(f"{self.cfg.title}: {self.cfg.input}")
        self._echo("=" * 60)

        self.tables = build_qc_tables(self.cfg)
        self._echo(
            f"Loaded {len(self.tables.sample_ids)} samples "
            f"({self.tables.mode.value})."
        )

        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.plots_dir.mkdir(parents=True, exist_ok=True)
        self.tables_dir.mkdir(parents=True, exist_ok=True)

        self.table_files = write_tables(self.tables.as_dict(), self.tables_dir)
        self._echo(f"Saved {len(self.table_files)} tables to {self.tables_dir}")

        self._make_plots()
        report_md = self._write_markdown_report(self.summary_statistics())
        self._echo(f"\nReport complete: {report_md}")
        return report_md

    # -----------------------
    # Summary
    # -----------------------
    def summary_statistics(self) -> pd.DataFrame:
        """
        One row per sample: grouping columns, peaks, reads-in-peaks % and
        the scalar QC metrics.
        """
        if self.tables is None:
            raise RuntimeError("Call build() first.")
        meta = self.tables.metadata
        keep = facet_columns(
            meta, self.cfg.facet_x, self.cfg.facet_y, self.cfg.facet_z
        )
        keep = list(dict.fromkeys([SAMPLE_COL] + keep + [PEAKS_COL]))
        stats = meta[keep].copy()

        rip = self.tables.reads_in_peaks
        inside = rip.loc[rip["Category"] == "Inside", [SAMPLE_COL, "Percentage"]]
        inside = inside.rename(columns={"Percentage": "RiP%"})
        stats = stats.merge(inside, on=SAMPLE_COL, how="left")

        metric_cols = [
            c
            for c in self.tables.summary.columns
            if c not in meta.columns or c == SAMPLE_COL
        ]
        stats = stats.merge(
            self.tables.summary[metric_cols], on=SAMPLE_COL, how="left"
        )
        return stats

    # -----------------------
    # Plots
    # -----------------------
    def _make_plots(self) -> None:
        t = self.tables
        facets = dict(
            facet_x=self.cfg.facet_x,
            facet_y=self.cfg.facet_y,
            palette=self.cfg.palette,
        )
        plots = [
            (
                "coverage_histogram",
                lambda: plot_coverage_histogram(
                    t.coverage_histogram,
                    t.metadata,
                    facet_z=self.cfg.facet_z,
                    **facets,
                ),
            ),
            (
                "cross_coverage",
                lambda: plot_cross_coverage(
                    t.cross_coverage,
                    t.metadata,
                    facet_z=self.cfg.facet_z,
                    **facets,
                ),
            ),
            (
                "peak_profile",
                lambda: plot_peak_profile(
                    t.peak_profile,
                    t.metadata,
                    facet_z=self.cfg.facet_z,
                    **facets,
                ),
            ),
            (
                "reads_in_peaks",
                lambda: plot_reads_in_peaks(
                    t.reads_in_peaks, t.metadata, **facets
                ),
            ),
            (
                "peak_counts",
                lambda: plot_peak_counts(
                    t.peak_counts,
                    t.metadata,
                    facet_z=self.cfg.facet_z,
                    **facets,
                ),
            ),
            (
                "peaks_per_sample",
                lambda: plot_peaks_per_sample(
                    t.metadata,
                    facet_z=self.cfg.facet_z,
                    palette=self.cfg.palette,
                ),
            ),
        ]
        for name, plot_func in plots:
            self._echo(f"Generating {name} plot...")
            fig = plot_func()
            self.plot_files[name] = save_figure(
                fig, self.plots_dir, name, formats=self.cfg.save_formats
            )
            plt.close(fig)

    # -----------------------
    # Report
    # -----------------------
    def _markdown_table(self, df: pd.DataFrame) -> str:
        def fmt(value) -> str:
            if isinstance(value, (float, np.floating)):
                return "NA" if np.isnan(value) else f"{value:.2f}"
            return str(value)

        header = "| " + " | ".join(str(c) for c in df.columns) + " |\n"
        rule = "|" + "---|" * len(df.columns) + "\n"
        rows = "".join(
            "| " + " | ".join(fmt(v) for v in row) + " |\n"
            for row in df.itertuples(index=False)
        )
        return header + rule + rows

    def _write_markdown_report(self, stats: pd.DataFrame) -> Path:
        """
        Write report.md referencing generated plots and tables, and render
        it to report.html.
        """
        t = self.tables
        report_text = f"# {self.cfg.title}\n"
        report_text += "\n## Overview\n"
        report_text += f"- Input: `{self.cfg.input}` ({t.mode.value})\n"
        report_text += f"- Samples: {len(t.sample_ids)}\n"
        report_text += (
            f"- Facets: {self.cfg.facet_x} x {self.cfg.facet_y}, "
            f"colour: {self.cfg.facet_z}\n"
        )
        if t.rip_excluded:
            report_text += (
                "- No reads-in-peaks value for: "
                f"{', '.join(t.rip_excluded)}\n"
            )
        report_text += (
            f"- Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
        )

        report_text += "\n## Summary statistics\n\n"
        report_text += self._markdown_table(stats)

        report_text += "\n## Plots\n"
        for name, files in self.plot_files.items():
            png = [f for f in files if f.suffix == ".png"]
            target = png[0] if png else files[0]
            rel = target.relative_to(self.out_dir)
            report_text += f"\n### {name.replace('_', ' ').capitalize()}\n\n"
            report_text += f"![{name}]({rel.as_posix()})\n"

        report_text += "\n## Tables\n"
        for name, path in self.table_files.items():
            rel = path.relative_to(self.out_dir)
            report_text += f"\n- `{rel.as_posix()}`\n"

        report_md = self.out_dir / "report.md"
        report_md.write_text(report_text, encoding="utf-8")

        out_html = self.out_dir / "report.html"
        out_html.write_text(
            md.markdown(report_text, extensions=["tables"]), encoding="utf-8"
        )
        return report_md
