"""Delimited extract reading and tolerant field parsing."""

import csv
import logging
from collections.abc import Iterator
from datetime import date, datetime
from pathlib import Path

from fndds_ingest.errors import ExtractReadError

DATE_FORMAT = "%Y-%m-%d"

_logger = logging.getLogger(__name__)


def read_rows(
    path: Path, *, delimiter: str = ",", skip_header: bool = True
) -> Iterator[list[str]]:
    """Yield the rows of a delimited extract in file order."""
    try:
        handle = path.open(newline="", encoding="utf-8")
    except OSError as exc:
        raise ExtractReadError(f"Cannot open extract {path}: {exc}") from exc
    with handle:
        reader = csv.reader(handle, delimiter=delimiter)
        try:
            if skip_header:
                next(reader, None)
            yield from reader
        except (csv.Error, OSError, UnicodeDecodeError) as exc:
            raise ExtractReadError(
                f"Failed reading {path.name} at line {reader.line_num}: {exc}"
            ) from exc


def cell(row: list[str], index: int) -> str:
    """Return a stripped cell, or an empty string for short rows."""
    if index >= len(row):
        return ""
    return row[index].strip()


def parse_float(row: list[str], index: int, *, field: str, source: str) -> float:
    """Parse a float cell, logging and returning 0.0 on failure."""
    raw = cell(row, index)
    try:
        return float(raw)
    except ValueError:
        _log_parse_failure(row, raw, field=field, source=source)
        return 0.0


def parse_int(row: list[str], index: int, *, field: str, source: str) -> int:
    """Parse an integer cell, logging and returning 0 on failure."""
    raw = cell(row, index)
    try:
        return int(raw)
    except ValueError:
        _log_parse_failure(row, raw, field=field, source=source)
        return 0


def parse_date(row: list[str], index: int, *, field: str, source: str) -> date | None:
    """Parse an ISO date cell, logging and returning None on failure."""
    raw = cell(row, index)
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        _log_parse_failure(row, raw, field=field, source=source)
        return None


def _log_parse_failure(row: list[str], raw: str, *, field: str, source: str) -> None:
    _logger.warning(
        "%s row %s: can't parse %s %r, using zero value",
        source,
        cell(row, 0) or "?",
        field,
        raw,
    )
