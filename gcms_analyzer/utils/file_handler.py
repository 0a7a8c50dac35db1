"""
CSV ingestion and validation for GCMS measurement files.

Turns the raw text of an uploaded file into an ordered list of
`MeasurementRow` records. Required columns are matched case-insensitively,
numeric fields are coerced to floats, and any other column is carried along
untouched as per-row additional data. Every failure is raised as one of the
typed errors in `gcms_analyzer.utils.errors` so the upload can be rejected
as a whole.
"""

# --- Standard Library Imports ---
import csv
import io
import logging
import math
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

# --- Third-party Imports ---
import pandas as pd

# --- Local Application Imports ---
from ..config import REQUIRED_COLUMNS, SAMPLE_DATA_FILE, VALID_MIME_TYPES
from .errors import FileTypeError, MissingColumnError, ParseError, RowValidationError

# --- Setup Logging ---
logger = logging.getLogger(__name__)

# --- Type Aliases for clarity ---
StatusCallback = Callable[[str, str, Optional[int]], None]

SAMPLE_DATA_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", SAMPLE_DATA_FILE)


@dataclass(frozen=True)
class MeasurementRow:
    """One validated CSV record."""
    name: str
    retention_time: float
    intensity: float
    additional_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # read-only view over a private copy
        object.__setattr__(self, "additional_data", MappingProxyType(dict(self.additional_data)))


def _notify(on_status: Optional[StatusCallback], status: str, message: str, progress: Optional[int] = None) -> None:
    if on_status is not None:
        on_status(status, message, progress)


def validate_file_type(filename: Optional[str], mime_type: Optional[str] = None) -> bool:
    """Returns True when the upload is a CSV by MIME type or by extension."""
    if mime_type in VALID_MIME_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".csv")


def _resolve_columns(headers: List[str]) -> Dict[str, str]:
    """Maps each required column to the header spelling used in the file."""
    column_mapping: Dict[str, str] = {}
    missing: List[str] = []
    for required in REQUIRED_COLUMNS:
        match = next((h for h in headers if str(h).strip().lower() == required.lower()), None)
        if match is None:
            missing.append(required)
        else:
            column_mapping[required] = match
    if missing:
        raise MissingColumnError(missing)
    return column_mapping


def _coerce_float(value: Any, row_index: int, field_name: str, label: str) -> float:
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RowValidationError(row_index, field_name, f"Invalid {label} value {value!r}") from None
    if not math.isfinite(number):
        raise RowValidationError(row_index, field_name, f"Invalid {label} value {value!r}")
    return number


def _check_field_counts(content: str) -> None:
    """Rejects any data record whose field count differs from the header's."""
    records = (r for r in csv.reader(io.StringIO(content)) if r and not (len(r) == 1 and not r[0].strip()))
    header = next(records, None)
    if header is None:
        return
    expected = len(header)
    for row_index, record in enumerate(records, start=1):
        if len(record) != expected:
            kind = "too few" if len(record) < expected else "too many"
            raise ParseError(f"CSV parsing errors: row {row_index} has {len(record)} fields, expected {expected} ({kind} fields)")


def validate_data(df: pd.DataFrame) -> List[MeasurementRow]:
    """
    Validates parsed records and normalizes them into `MeasurementRow`s.

    Args:
        df (pd.DataFrame): Header-keyed records, all cells as raw strings.

    Returns:
        List[MeasurementRow]: One row per record, in input order.

    Raises:
        ParseError: If there are no records.
        MissingColumnError: If a required column is absent.
        RowValidationError: On the first record with an invalid field.
    """
    if df is None or df.empty:
        raise ParseError("The file appears to be empty.")

    column_mapping = _resolve_columns(list(df.columns))
    required_headers = set(column_mapping.values())
    extra_headers = [h for h in df.columns if h not in required_headers]

    rows: List[MeasurementRow] = []
    for position, record in enumerate(df.to_dict("records")):
        row_index = position + 1
        retention_time = _coerce_float(record[column_mapping["RetentionTime"]], row_index, "RetentionTime", "retention time")
        if retention_time <= 0:
            raise RowValidationError(row_index, "RetentionTime", f"Retention time must be positive, got {retention_time}")
        intensity = _coerce_float(record[column_mapping["Intensity"]], row_index, "Intensity", "intensity")
        if intensity < 0:
            raise RowValidationError(row_index, "Intensity", f"Intensity must not be negative, got {intensity}")

        name = record[column_mapping["Metabolite"]]
        if not isinstance(name, str) or not name.strip():
            raise RowValidationError(row_index, "Metabolite", "Invalid or missing metabolite name")

        rows.append(MeasurementRow(
            name=name.strip(),
            retention_time=retention_time,
            intensity=intensity,
            additional_data={h: record[h] for h in extra_headers},
        ))
    return rows


def parse_csv(
    content: Union[str, bytes],
    filename: Optional[str] = None,
    mime_type: Optional[str] = None,
    on_status: Optional[StatusCallback] = None,
) -> List[MeasurementRow]:
    """
    Parses and validates the content of a GCMS CSV upload.

    The file type is only checked when a filename or MIME type is supplied;
    raw text handed over by other callers is parsed directly.
    """
    if (filename is not None or mime_type is not None) and not validate_file_type(filename, mime_type):
        raise FileTypeError("Invalid file type. Please upload a CSV file.")

    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Error parsing CSV file: {e}") from e
    content = content.lstrip("\ufeff")
    if not content.strip():
        raise ParseError("The file appears to be empty.")

    _notify(on_status, "parsing", "Parsing CSV file...")
    # pandas pads short rows and promotes surplus leading fields to an index
    try:
        _check_field_counts(content)
    except csv.Error as e:
        raise ParseError(f"CSV parsing errors: {e}") from e
    try:
        df = pd.read_csv(io.StringIO(content), dtype=str, keep_default_na=False, skip_blank_lines=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ParseError(f"CSV parsing errors: {e}") from e

    rows = validate_data(df)
    logger.info(f"Parsed {len(rows)} measurement rows from {filename or 'uploaded content'}.")
    return rows


def load_sample_data(on_status: Optional[StatusCallback] = None) -> List[MeasurementRow]:
    """Loads the bundled sample GCMS run through the regular upload path."""
    _notify(on_status, "loading", "Loading sample data...", 0)
    try:
        with open(SAMPLE_DATA_PATH, "r", encoding="utf-8") as f:
            content = f.read()
        rows = parse_csv(content, filename=SAMPLE_DATA_FILE, mime_type="text/csv", on_status=on_status)
    except (OSError, ParseError, MissingColumnError, RowValidationError) as e:
        logger.error(f"Failed to load sample data: {e}")
        _notify(on_status, "error", str(e), 0)
        raise
    _notify(on_status, "complete", "Sample data loaded successfully", 100)
    return rows


def rows_to_dataframe(rows: List[MeasurementRow]) -> pd.DataFrame:
    """Flattens measurement rows into a DataFrame for tabular display."""
    if not rows:
        return pd.DataFrame(columns=list(REQUIRED_COLUMNS))
    records = []
    for row in rows:
        record = {"Metabolite": row.name, "RetentionTime": row.retention_time, "Intensity": row.intensity}
        record.update(row.additional_data)
        records.append(record)
    return pd.DataFrame(records)
