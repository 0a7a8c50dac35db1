"""Exception types raised while ingesting and enriching GCMS data."""

from typing import Iterable, List


class GCMSAnalyzerError(Exception):
    """Base class for all analyzer errors."""


class ParseError(GCMSAnalyzerError):
    """The uploaded content could not be read as a CSV table."""


class FileTypeError(ParseError):
    """The upload is neither a CSV by MIME type nor by extension."""


class MissingColumnError(GCMSAnalyzerError):
    """One or more required columns are absent from the header row."""

    def __init__(self, missing: Iterable[str]):
        self.missing: List[str] = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class RowValidationError(GCMSAnalyzerError):
    """A single CSV record failed validation."""

    def __init__(self, row_index: int, field: str, reason: str):
        self.row_index = row_index
        self.field = field
        self.reason = reason
        super().__init__(f"Row {row_index}: {reason}")


class CompoundLookupError(GCMSAnalyzerError):
    """An outbound compound database request failed."""
