"""
import_engine.sheet_parser - Read an uploaded spreadsheet into RawRows.

Responsibilities:
  • Format sniffing (xlsx by ZIP signature, otherwise CSV)
  • BOM removal and encoding fallback for CSV
  • Header whitespace stripping, blank-cell → None, blank-line skipping
  • Required-header validation (raises ParseError)
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, BinaryIO, Iterator

from openpyxl import load_workbook

from import_engine.columns import header_key
from import_engine.errors import ParseError
from import_engine.field_map import REQUIRED_COLUMNS
from import_engine.report import RawRow, freeze_row

logger = logging.getLogger(__name__)

_ZIP_MAGIC = b"PK\x03\x04"
_OLE_MAGIC = b"\xd0\xcf\x11\xe0"      # legacy .xls


@dataclass(frozen=True)
class ParsedSheet:
    headers: tuple[str, ...]
    rows: tuple[RawRow, ...]
    source_format: str                  # "csv" | "xlsx"

    def __iter__(self) -> Iterator[RawRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


def parse_sheet(source: BinaryIO | bytes, filename: str = "upload") -> ParsedSheet:
    """
    Read the whole upload and return its data rows keyed by header.

    Raises ParseError when the content is not a readable spreadsheet,
    has no data rows, or lacks required columns.
    """
    raw = source if isinstance(source, (bytes, bytearray)) else source.read()
    raw = bytes(raw)
    if not raw.strip():
        raise ParseError("No data found")

    if raw.startswith(_ZIP_MAGIC):
        headers, rows = _read_xlsx(raw, filename)
        fmt = "xlsx"
    elif raw.startswith(_OLE_MAGIC):
        raise ParseError(f"'{filename}' is a legacy .xls workbook; save it as .xlsx or CSV")
    else:
        headers, rows = _read_csv(raw, filename)
        fmt = "csv"

    if not rows:
        raise ParseError("No data found")

    missing = missing_required_columns(headers)
    if missing:
        raise ParseError(f"Missing required columns: {', '.join(missing)}")

    logger.info("Parsed %s '%s': %d rows, %d columns", fmt, filename, len(rows), len(headers))
    return ParsedSheet(headers=tuple(headers), rows=tuple(rows), source_format=fmt)


def missing_required_columns(headers: list[str] | tuple[str, ...]) -> list[str]:
    """Display names of required columns none of whose aliases appear in ``headers``."""
    present = {header_key(h) for h in headers if h}
    return [
        display for display, aliases in REQUIRED_COLUMNS.items()
        if not any(header_key(alias) in present for alias in aliases)
    ]


# ── CSV ───────────────────────────────────────────────────────────────

def _read_csv(raw: bytes, filename: str) -> tuple[list[str], list[RawRow]]:
    text = _decode(raw, filename)
    try:
        reader = csv.reader(io.StringIO(text, newline=""))
        table = list(reader)
    except csv.Error as exc:
        raise ParseError(f"Could not read CSV file '{filename}': {exc}") from exc
    return _rows_from_table(table)


def _decode(raw: bytes, filename: str) -> str:
    # Strip UTF-8 BOM
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    if b"\x00" in raw:
        raise ParseError(f"'{filename}' is not a spreadsheet or CSV file")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        return raw.decode("cp1252")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Could not decode '{filename}' as text") from exc


# ── XLSX ──────────────────────────────────────────────────────────────

def _read_xlsx(raw: bytes, filename: str) -> tuple[list[str], list[RawRow]]:
    try:
        wb = load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except Exception as exc:
        raise ParseError(f"Could not read Excel file '{filename}': {exc}") from exc

    try:
        if not wb.worksheets:
            raise ParseError(f"'{filename}' has no worksheets")
        ws = wb.worksheets[0]
        table = [list(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()
    return _rows_from_table(table)


# ── Shared ────────────────────────────────────────────────────────────

def _rows_from_table(table: list[list[Any]]) -> tuple[list[str], list[RawRow]]:
    """First non-blank line is the header; later non-blank lines are data."""
    lines = iter(table)
    headers: list[str] = []
    for line in lines:
        cells = [_clean_cell(c) for c in line]
        if any(c is not None for c in cells):
            headers = ["" if c is None else str(c).strip() for c in cells]
            break

    rows: list[RawRow] = []
    for line in lines:
        record: dict[str, Any] = {}
        for pos, header in enumerate(headers):
            if not header:
                continue
            # short lines leave the trailing columns empty
            record[header] = _clean_cell(line[pos]) if pos < len(line) else None
        if any(v is not None for v in record.values()):
            rows.append(freeze_row(record))
    return [h for h in headers if h], rows


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value
