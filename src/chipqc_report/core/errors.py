"""
Error taxonomy for ChIP-seq QC report generation.

Every fatal condition derives from ChIPQCReportError so callers (the CLI,
pipeline jobs) can stop the run with a single except clause. Conditions
that only exclude data are warnings, not exceptions.
"""


class ChIPQCReportError(Exception):
    """Base class for all fatal report errors."""


class InvalidInputFormat(ChIPQCReportError, ValueError):
    """Input reference is neither a sample sheet nor a serialized object."""


class InvalidPalette(ChIPQCReportError, ValueError):
    """Configured palette is not one of the qualitative palettes."""


class InvalidSampleSheet(ChIPQCReportError, ValueError):
    """Sample sheet is empty, lacks required columns or has duplicate ids."""


class HandleLoadFailure(ChIPQCReportError, RuntimeError):
    """A per-sample (or aggregate) analysis object could not be loaded."""


class JoinMismatch(ChIPQCReportError, ValueError):
    """Sample identifiers of a metric family and the metadata disagree."""


class MissingFacetColumn(ChIPQCReportError, ValueError):
    """A grouping column named in the configuration is not in the metadata."""


class UndefinedRatioWarning(UserWarning):
    """Samples were dropped from the reads-in-peaks family."""
