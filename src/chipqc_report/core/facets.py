from typing import List

from pandas import DataFrame

from .errors import InvalidPalette, MissingFacetColumn


QUALITATIVE_PALETTES = (
    "Accent",
    "Dark2",
    "Paired",
    "Pastel1",
    "Pastel2",
    "Set1",
    "Set2",
    "Set3",
)


def validate_palette(name: str) -> str:
    """Return name if it is a qualitative palette, raise InvalidPalette otherwise."""
    if name not in QUALITATIVE_PALETTES:
        raise InvalidPalette(
            f"Palette '{name}' is not supported. "
            f"Choose one of: {', '.join(QUALITATIVE_PALETTES)}"
        )
    return name


def use_color(metadata: DataFrame, color_col: str) -> bool:
    """
    Decide whether a chart gets a colour channel.

    Colouring (and a legend) only makes sense if the colour column takes more
    than one value across the samples in metadata.
    """
    if color_col not in metadata.columns:
        return False
    return bool(metadata[color_col].nunique(dropna=False) > 1)


def facet_columns(metadata: DataFrame, *columns: str) -> List[str]:
    """Grouping columns that are present in metadata, in the given order."""
    return [c for c in columns if c is not None and c in metadata.columns]


def check_facet_columns(metadata: DataFrame, *columns: str) -> None:
    """Raise MissingFacetColumn unless every named column is in metadata."""
    missing = [c for c in columns if c and c not in metadata.columns]
    if missing:
        raise MissingFacetColumn(
            f"Grouping column(s) {missing} not found in the sample metadata. "
            f"Available columns: {list(metadata.columns)}"
        )
