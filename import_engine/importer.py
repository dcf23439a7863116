"""
import_engine.importer - Top-level orchestrator.

Coordinates sheet_parser → row_processor → persister and produces
an ImportOutcome.  Stores are passed in; nothing here opens a session.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from import_engine.center_matcher import CenterIndex
from import_engine.persister import persist_reports
from import_engine.report import CenterStore, ImportOutcome, ReportStore
from import_engine.row_processor import process_rows
from import_engine.sheet_parser import parse_sheet

logger = logging.getLogger(__name__)


def run_import(
    file_content: BinaryIO | bytes,
    acting_user_id: str,
    *,
    center_store: CenterStore,
    report_store: ReportStore,
    filename: str = "upload",
    commit: bool = True,
    batch_size: int | None = None,
) -> ImportOutcome:
    """
    Import a spreadsheet of monthly reports.

    Parameters
    ----------
    file_content : uploaded xlsx/CSV (bytes or binary file handle)
    acting_user_id : stamped on every saved report
    center_store / report_store : storage handles
    commit : if False, only validate (dry run)

    Returns
    -------
    ImportOutcome; ``persisted`` is None unless the rows were clean and
    ``commit`` was requested.

    Raises ParseError when the file itself is unusable.
    """
    sheet = parse_sheet(file_content, filename)
    index = CenterIndex(center_store.list_centers())
    result = process_rows(sheet, acting_user_id, index)

    outcome = ImportOutcome(result=result)
    if not result.ok:
        logger.info("Import of '%s' blocked: %d row errors, %d unmatched centers",
                    filename, len(result.errors), len(result.unmatched_centers))
        return outcome
    if not commit:
        return outcome

    outcome.persisted = persist_reports(
        report_store, result.processed_reports, acting_user_id,
        batch_size=batch_size,
    )
    return outcome
