"""
Charts for the ChIP-seq QC report.

Every function takes a finished long-form table plus the facet settings and
returns a matplotlib Figure. Columns are split by facet_x, rows by facet_y,
and colour follows facet_z only if that column has more than one value in
the metadata.
"""

from typing import Dict, Optional

import numpy as np
import seaborn as sns  # type: ignore
import matplotlib.pyplot as plt  # type: ignore
from matplotlib.figure import Figure  # type: ignore
from pandas import DataFrame  # type: ignore

from .facets import use_color
from .metadata import PEAKS_COL, SAMPLE_COL
from .tidy import RIP_CATEGORIES


def _finite(df: DataFrame, column: str) -> DataFrame:
    """Copy of df with non-finite values in column set to NaN."""
    out = df.copy()
    out[column] = out[column].replace([np.inf, -np.inf], np.nan)
    return out


def _empty_figure(message: str, height: float) -> Figure:
    fig, ax = plt.subplots(figsize=(height * 1.5, height))
    ax.text(0.5, 0.5, message, ha="center")
    ax.set_axis_off()
    return fig


def facet_kwargs(
    data: DataFrame,
    metadata: DataFrame,
    facet_x: Optional[str],
    facet_y: Optional[str],
    facet_z: Optional[str],
    palette: str,
    color: bool = True,
) -> Dict[str, object]:
    kwargs: Dict[str, object] = {}
    if facet_x and facet_x in data.columns:
        kwargs["col"] = facet_x
    if facet_y and facet_y in data.columns and facet_y != facet_x:
        kwargs["row"] = facet_y
    if color and facet_z and facet_z in data.columns and use_color(
        metadata, facet_z
    ):
        kwargs["hue"] = facet_z
        kwargs["palette"] = palette
    return kwargs


def _line_plot(
    df: DataFrame,
    metadata: DataFrame,
    x: str,
    y: str,
    title: str,
    facet_x: Optional[str],
    facet_y: Optional[str],
    facet_z: Optional[str],
    palette: str,
    height: float,
) -> Figure:
    data = _finite(df, y)
    g = sns.relplot(
        data=data,
        x=x,
        y=y,
        kind="line",
        units=SAMPLE_COL,
        estimator=None,
        height=height,
        **facet_kwargs(data, metadata, facet_x, facet_y, facet_z, palette),
    )
    g.figure.suptitle(title, y=1.02)
    return g.figure


def plot_coverage_histogram(
    df: DataFrame,
    metadata: DataFrame,
    facet_x: Optional[str] = "Tissue",
    facet_y: Optional[str] = "Factor",
    facet_z: Optional[str] = "Condition",
    palette: str = "Set1",
    height: float = 3.0,
) -> Figure:
    """log10 base pairs per read depth."""
    return _line_plot(
        df,
        metadata,
        "Depth",
        "log10_bp",
        "Coverage histogram",
        facet_x,
        facet_y,
        facet_z,
        palette,
        height,
    )


def plot_cross_coverage(
    df: DataFrame,
    metadata: DataFrame,
    facet_x: Optional[str] = "Tissue",
    facet_y: Optional[str] = "Factor",
    facet_z: Optional[str] = "Condition",
    palette: str = "Set1",
    height: float = 3.0,
) -> Figure:
    """Cross-coverage score per shift size."""
    return _line_plot(
        df,
        metadata,
        "ShiftSize",
        "CCScore",
        "Cross-coverage",
        facet_x,
        facet_y,
        facet_z,
        palette,
        height,
    )


def plot_peak_profile(
    df: DataFrame,
    metadata: DataFrame,
    facet_x: Optional[str] = "Tissue",
    facet_y: Optional[str] = "Factor",
    facet_z: Optional[str] = "Condition",
    palette: str = "Set1",
    height: float = 3.0,
) -> Figure:
    """Average signal around peak summits."""
    return _line_plot(
        df,
        metadata,
        "Distance",
        "Signal",
        "Peak profile",
        facet_x,
        facet_y,
        facet_z,
        palette,
        height,
    )


def plot_reads_in_peaks(
    df: DataFrame,
    metadata: DataFrame,
    facet_x: Optional[str] = "Tissue",
    facet_y: Optional[str] = "Factor",
    palette: str = "Set1",
    height: float = 3.0,
) -> Figure:
    """
    Percentage of reads inside/outside peaks per sample, stacked to 100%.

    Colour is always the inside/outside category here, so facet_z is not
    used.
    """
    kwargs = facet_kwargs(
        df, metadata, facet_x, facet_y, None, palette, color=False
    )
    if len(df) == 0:
        return _empty_figure("No reads-in-peaks values", height)
    g = sns.displot(
        data=df,
        x=SAMPLE_COL,
        weights="Percentage",
        hue="Category",
        hue_order=RIP_CATEGORIES,
        multiple="stack",
        discrete=True,
        shrink=0.8,
        palette=palette,
        height=height,
        facet_kws={"sharex": False},
        **kwargs,
    )
    g.set_axis_labels(SAMPLE_COL, "Percentage")
    for ax in g.axes.flat:
        ax.tick_params(axis="x", labelrotation=45)
    g.figure.suptitle("Reads in peaks", y=1.02)
    return g.figure


def plot_peak_counts(
    df: DataFrame,
    metadata: DataFrame,
    facet_x: Optional[str] = "Tissue",
    facet_y: Optional[str] = "Factor",
    facet_z: Optional[str] = "Condition",
    palette: str = "Set1",
    height: float = 3.0,
) -> Figure:
    """Distribution of log10 reads per peak."""
    data = _finite(df, "log10_Count").dropna(subset=["log10_Count"])
    if len(data) == 0:
        return _empty_figure("No peaks with reads", height)
    g = sns.catplot(
        data=data,
        x=SAMPLE_COL,
        y="log10_Count",
        kind="box",
        sharex=False,
        height=height,
        **facet_kwargs(data, metadata, facet_x, facet_y, facet_z, palette),
    )
    g.set_xticklabels(rotation=45, ha="right")
    g.figure.suptitle("Reads per peak", y=1.02)
    return g.figure


def plot_peaks_per_sample(
    metadata: DataFrame,
    facet_z: Optional[str] = "Condition",
    palette: str = "Set1",
    height: float = 3.0,
) -> Figure:
    """Number of called peaks per sample."""
    kwargs = facet_kwargs(metadata, metadata, None, None, facet_z, palette)
    fig, ax = plt.subplots(
        figsize=(max(height * 1.5, 0.6 * len(metadata)), height)
    )
    sns.barplot(data=metadata, x=SAMPLE_COL, y=PEAKS_COL, ax=ax, **kwargs)
    ax.tick_params(axis="x", labelrotation=45)
    ax.set_title("Peaks per sample")
    fig.tight_layout()
    return fig
