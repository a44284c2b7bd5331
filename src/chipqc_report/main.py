from pathlib import Path
from typing import Optional

import typer

from .config import ReportConfig, settings
from .core.errors import ChIPQCReportError
from .core.facets import QUALITATIVE_PALETTES
from .models.qc_report import ChIPQCReport

app = typer.Typer(help="Quality control reports for ChIP-seq experiments")


@app.command()
def info() -> None:
    """Show effective settings and accepted palettes."""
    typer.echo(f"Facets: {settings.facet_x} x {settings.facet_y}")
    typer.echo(f"Colour by: {settings.facet_z}")
    typer.echo(f"Palette: {settings.palette}")
    typer.echo(f"Output directory: {settings.out_dir}")
    typer.echo(f"Palettes: {', '.join(QUALITATIVE_PALETTES)}")


@app.command()
def report(
    input: Path = typer.Argument(
        ..., help="Sample sheet (.csv/.tsv) or QC object (.rds/.pkl)"
    ),
    facet_x: str = typer.Option(settings.facet_x, help="Column facets"),
    facet_y: str = typer.Option(settings.facet_y, help="Row facets"),
    facet_z: str = typer.Option(settings.facet_z, help="Colour grouping"),
    palette: str = typer.Option(settings.palette, help="Qualitative palette"),
    out_dir: Path = typer.Option(Path(settings.out_dir), help="Output folder"),
    title: Optional[str] = typer.Option(None, help="Report title"),
    echo: bool = typer.Option(True, help="Print progress"),
) -> None:
    """Build the QC report for INPUT."""
    try:
        config = ReportConfig(
            input=input,
            facet_x=facet_x,
            facet_y=facet_y,
            facet_z=facet_z,
            palette=palette,
            out_dir=out_dir,
            echo=echo,
        )
        if title is not None:
            config.title = title
        report_md = ChIPQCReport(config).build()
    except ChIPQCReportError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {report_md}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
