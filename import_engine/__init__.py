"""
import_engine - Bulk monthly-report import pipeline.

Public API:
    parse_sheet(file)                                  → ParsedSheet
    process_rows(rows, user_id, centers)               → ImportResult
    persist_reports(store, reports, user_id)           → PersistResult
    run_import(file, user_id, center_store=, report_store=) → ImportOutcome
"""

from import_engine.errors import (                       # noqa: F401
    InvalidMonthError,
    InvalidYearError,
    ParseError,
    ReportMonthError,
    StoreError,
)
from import_engine.report import (                       # noqa: F401
    CanonicalReport,
    HealthcareCenterRef,
    ImportOutcome,
    ImportResult,
    PersistResult,
    RowError,
)
from import_engine.sheet_parser import parse_sheet       # noqa: F401
from import_engine.row_processor import process_rows     # noqa: F401
from import_engine.persister import persist_reports      # noqa: F401
from import_engine.importer import run_import            # noqa: F401
