from pathlib import Path
from typing import Union, List, Dict

import pandas as pd
from pandas import DataFrame


def save_figure(
    f,
    folder: Union[Path, str],
    name: str,
    formats: List[str] = ["png"],
    bbox_inches: str = "tight",
    dpi: int = 150,
) -> List[Path]:
    folder = Path(folder)
    folder.mkdir(exist_ok=True, parents=True)
    written = []
    for fmt in formats:
        outfile = folder / f"{name}.{fmt.lstrip('.')}"
        f.savefig(outfile, bbox_inches=bbox_inches, dpi=dpi)
        written.append(outfile)
    return written


def read_dataframe(path: Union[str, Path], **kwargs) -> DataFrame:
    """
    Read a tabular file into a pandas DataFrame based on file extension.

    Rules:
    - .csv        -> read as CSV
    - .tsv        -> read as TSV
    - other       -> ValueError

    Additional keyword arguments are forwarded to the pandas reader.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File does not exist: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        reader_kwargs = {}
    elif suffix == ".tsv":
        reader_kwargs = {"sep": "\t"}
    else:
        raise ValueError(f"Unsupported file extension '{suffix}' for {path}")

    reader_kwargs.update(kwargs)
    try:
        return pd.read_csv(path, **reader_kwargs)
    except Exception as exc:
        raise RuntimeError(f"Failed to read file '{path}': {exc}") from exc


def write_tables(
    tables: Dict[str, DataFrame], folder: Union[Path, str]
) -> Dict[str, Path]:
    """Write each table as <name>.tsv into folder, without the index."""
    folder = Path(folder)
    folder.mkdir(exist_ok=True, parents=True)
    written = {}
    for name, df in tables.items():
        outfile = folder / f"{name}.tsv"
        df.to_csv(outfile, sep="\t", index=False)
        written[name] = outfile
    return written
