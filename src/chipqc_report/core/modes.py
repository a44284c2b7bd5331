from enum import Enum
from pathlib import Path
from typing import Union

from .errors import InvalidInputFormat


SHEET_SUFFIXES = {".csv", ".tsv"}
SERIALIZED_SUFFIXES = {".rds", ".pkl", ".pickle"}


class InputMode(str, Enum):
    MULTI_FILE_SHEET = "multi-file-sheet"
    SINGLE_AGGREGATE = "single-aggregate"


def resolve_mode(reference: Union[str, Path]) -> InputMode:
    """
    Classify an input reference by its file suffix.

    ".csv"/".tsv" is a sample sheet listing one analysis object per sample,
    ".rds"/".pkl"/".pickle" is a single aggregate object. Anything else
    raises InvalidInputFormat before any file is touched.
    """
    suffix = Path(str(reference)).suffix.lower()
    if suffix in SHEET_SUFFIXES:
        return InputMode.MULTI_FILE_SHEET
    if suffix in SERIALIZED_SUFFIXES:
        return InputMode.SINGLE_AGGREGATE
    raise InvalidInputFormat(
        f"Cannot determine input type of '{reference}'. Expected a sample "
        f"sheet ({', '.join(sorted(SHEET_SUFFIXES))}) or a serialized QC "
        f"object ({', '.join(sorted(SERIALIZED_SUFFIXES))})."
    )
