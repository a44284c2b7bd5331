"""
Sample ingestion for the two input shapes.

A sample sheet lists one QC object per row; an aggregate object carries all
samples and their metadata. Both produce an IngestedSamples bundle with the
handles and the canonical sample ids in the same order, so that everything
downstream is independent of the input shape.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from pandas import DataFrame

from .errors import InvalidSampleSheet, JoinMismatch
from .handles import AnalysisHandle, AggregateHandle
from .metadata import (
    make_safe_token,
    normalize_aggregate_metadata,
    normalize_sheet_metadata,
)
from .modes import InputMode, resolve_mode
from ..services.handles_io import load_handle, load_aggregate
from ..services.io import read_dataframe


@dataclass
class IngestedSamples:
    mode: InputMode
    sample_ids: List[str]
    handles: List[AnalysisHandle]
    metadata: DataFrame

    def __post_init__(self):
        if len(self.handles) != len(self.sample_ids):
            raise JoinMismatch(
                f"{len(self.handles)} QC handles for "
                f"{len(self.sample_ids)} sample ids."
            )


class SampleIngestor(ABC):
    @abstractmethod
    def ingest(self, reference: Union[str, Path]) -> IngestedSamples:
        """Load handles, sample ids and normalized metadata."""


class SheetIngestor(SampleIngestor):
    """
    Ingest a CSV/TSV sample sheet.

    Handles are loaded one row at a time in sheet order; relative paths are
    resolved against the sheet's directory. Sample ids are sanitized with
    the same rule as the other metadata columns.
    """

    def __init__(
        self,
        sample_id_col: str = "SampleID",
        path_col: str = "Path",
        replicate_col: str = "Replicate",
        loader: Callable[[Path], AnalysisHandle] = load_handle,
    ):
        self.sample_id_col = sample_id_col
        self.path_col = path_col
        self.replicate_col = replicate_col
        self.loader = loader

    def read_sheet(self, reference: Union[str, Path]) -> DataFrame:
        try:
            sheet = read_dataframe(reference)
        except (FileNotFoundError, ValueError, RuntimeError) as exc:
            raise InvalidSampleSheet(str(exc)) from exc
        missing = [
            c for c in (self.sample_id_col, self.path_col) if c not in sheet
        ]
        if missing:
            raise InvalidSampleSheet(
                f"Sample sheet '{reference}' lacks column(s) {missing}. "
                f"Available columns: {list(sheet.columns)}"
            )
        if sheet.empty:
            raise InvalidSampleSheet(f"Sample sheet '{reference}' is empty.")
        return sheet

    def ingest(self, reference: Union[str, Path]) -> IngestedSamples:
        sheet = self.read_sheet(reference)
        sample_ids = [make_safe_token(v) for v in sheet[self.sample_id_col]]
        duplicated = sorted(
            {s for s in sample_ids if sample_ids.count(s) > 1}
        )
        if duplicated:
            raise InvalidSampleSheet(
                f"Sample ids are not unique: {duplicated}"
            )

        base = Path(reference).parent
        handles = []
        for handle_path in sheet[self.path_col]:
            handle_path = Path(str(handle_path))
            if not handle_path.is_absolute():
                handle_path = base / handle_path
            handles.append(self.loader(handle_path))

        metadata = normalize_sheet_metadata(
            sheet,
            sample_ids,
            handles,
            sample_id_col=self.sample_id_col,
            path_col=self.path_col,
            replicate_col=self.replicate_col,
        )
        return IngestedSamples(
            InputMode.MULTI_FILE_SHEET, sample_ids, handles, metadata
        )


class AggregateIngestor(SampleIngestor):
    """Ingest one serialized object holding every sample."""

    def __init__(
        self,
        loader: Callable[[Path], AggregateHandle] = load_aggregate,
    ):
        self.loader = loader

    def ingest(self, reference: Union[str, Path]) -> IngestedSamples:
        aggregate = self.loader(Path(reference))
        embedded = aggregate.metadata()
        sample_ids = embedded.iloc[:, 0].astype(str).tolist()
        duplicated = sorted(
            {s for s in sample_ids if sample_ids.count(s) > 1}
        )
        if duplicated:
            raise JoinMismatch(
                f"Aggregate object lists samples {duplicated} more than once."
            )
        try:
            handles = list(aggregate.samples())
        except KeyError as exc:
            raise JoinMismatch(str(exc)) from exc
        if len(handles) != len(sample_ids):
            raise JoinMismatch(
                f"Aggregate object holds {len(handles)} samples but its "
                f"metadata lists {len(sample_ids)}."
            )
        metadata = normalize_aggregate_metadata(embedded, sample_ids, handles)
        return IngestedSamples(
            InputMode.SINGLE_AGGREGATE, sample_ids, handles, metadata
        )


def get_ingestor(
    mode: InputMode,
    sample_id_col: str = "SampleID",
    path_col: str = "Path",
    replicate_col: str = "Replicate",
) -> SampleIngestor:
    if mode == InputMode.MULTI_FILE_SHEET:
        return SheetIngestor(sample_id_col, path_col, replicate_col)
    return AggregateIngestor()


def ingest(
    reference: Union[str, Path],
    mode: Optional[InputMode] = None,
    **sheet_columns,
) -> IngestedSamples:
    """Resolve the input mode (unless given) and ingest the samples."""
    if mode is None:
        mode = resolve_mode(reference)
    return get_ingestor(mode, **sheet_columns).ingest(reference)
