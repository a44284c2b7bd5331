from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.facets import validate_palette


class Settings(BaseSettings):
    """Environment defaults, read from CHIPQC_* variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CHIPQC_", env_file=".env", extra="ignore"
    )

    facet_x: str = "Tissue"
    facet_y: str = "Factor"
    facet_z: str = "Condition"
    palette: str = "Set1"
    out_dir: str = "chipqc_report"
    sample_id_col: str = "SampleID"
    path_col: str = "Path"
    replicate_col: str = "Replicate"


settings = Settings()


@dataclass
class ReportConfig:
    """
    Configuration for one report run.

    Attributes
    ----------
    input : str or Path
        Sample sheet (.csv/.tsv) or aggregate QC object (.rds/.pkl).
    facet_x, facet_y : str
        Metadata columns splitting charts into columns and rows.
    facet_z : str
        Metadata column used for colour, if it has more than one value.
    palette : str
        Qualitative palette name, validated on construction.
    echo : bool
        Print progress while building the report.
    out_dir : str or Path
        Root directory of the report.
    title : str
        Report title.
    assets_dirname, plots_dirname, tables_dirname : str
        Layout of the output directory.
    sample_id_col, path_col, replicate_col : str
        Sample sheet column names.
    save_formats : list of str
        Figure formats to write.
    """

    input: Union[str, Path]
    facet_x: str = field(default_factory=lambda: settings.facet_x)
    facet_y: str = field(default_factory=lambda: settings.facet_y)
    facet_z: str = field(default_factory=lambda: settings.facet_z)
    palette: str = field(default_factory=lambda: settings.palette)
    echo: bool = True
    out_dir: Union[str, Path] = field(default_factory=lambda: settings.out_dir)
    title: str = "ChIP-seq Quality Control Report"
    assets_dirname: str = "report_assets"
    plots_dirname: str = "plots"
    tables_dirname: str = "tables"
    sample_id_col: str = field(default_factory=lambda: settings.sample_id_col)
    path_col: str = field(default_factory=lambda: settings.path_col)
    replicate_col: str = field(default_factory=lambda: settings.replicate_col)
    save_formats: List[str] = field(default_factory=lambda: ["png"])

    def __post_init__(self):
        validate_palette(self.palette)

    def sheet_columns(self) -> dict:
        return {
            "sample_id_col": self.sample_id_col,
            "path_col": self.path_col,
            "replicate_col": self.replicate_col,
        }
