"""
Padding of ragged per-sample vectors into rectangular matrices.

Coverage histograms and per-peak counts have a different length for every
sample. This is the only place where those lengths are reconciled; every
consumer downstream expects a rectangular DataFrame.
"""

from dataclasses import dataclass
from typing import Sequence, List, Union

import numpy as np
import pandas as pd
from pandas import DataFrame


@dataclass(frozen=True)
class FlatVector:
    """A single numeric vector, returned unchanged by list_to_matrix."""

    values: np.ndarray


@dataclass(frozen=True)
class RaggedVectorCollection:
    """One numeric vector per sample, lengths may differ."""

    vectors: List[np.ndarray]
    sample_ids: List[str]

    def __post_init__(self):
        if len(self.vectors) != len(self.sample_ids):
            raise ValueError(
                f"Got {len(self.vectors)} vectors for "
                f"{len(self.sample_ids)} sample ids."
            )


def extend(vector: Sequence[float], target_length: int) -> np.ndarray:
    """
    Replace missing values by zero and right-pad with zeros.

    Never truncates: the result has length max(len(vector), target_length).

    Parameters
    ----------
    vector : sequence of float
        Input values, may contain NaN/None.
    target_length : int
        Minimum length of the result.

    Returns
    -------
    np.ndarray
        Float array without missing values.
    """
    values = pd.to_numeric(
        pd.Series(list(vector), dtype=object), errors="coerce"
    ).to_numpy(dtype=float)
    values = np.nan_to_num(values, nan=0.0, posinf=np.inf, neginf=-np.inf)
    missing = target_length - len(values)
    if missing > 0:
        values = np.concatenate([values, np.zeros(missing)])
    return values


def list_to_matrix(
    collection: Union[RaggedVectorCollection, FlatVector],
) -> Union[DataFrame, np.ndarray]:
    """
    Pad a ragged collection into a zero-filled matrix.

    Rows are 1-based positions, columns are the sample ids in collection
    order. A FlatVector is passed through untouched.

    Parameters
    ----------
    collection : RaggedVectorCollection or FlatVector
        Vectors to align.

    Returns
    -------
    DataFrame or np.ndarray
        (max length x n samples) DataFrame, or the flat vector's values.
    """
    if isinstance(collection, FlatVector):
        return collection.values
    if not isinstance(collection, RaggedVectorCollection):
        raise TypeError(
            "collection must be a RaggedVectorCollection or FlatVector, "
            f"got {type(collection).__name__}"
        )
    target_length = max((len(v) for v in collection.vectors), default=0)
    columns = {
        sample: extend(vector, target_length)
        for sample, vector in zip(collection.sample_ids, collection.vectors)
    }
    matrix = pd.DataFrame(
        columns,
        index=pd.RangeIndex(1, target_length + 1),
        columns=list(collection.sample_ids),
    )
    return matrix
