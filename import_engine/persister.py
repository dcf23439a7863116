"""
import_engine.persister - Upsert canonical reports in fixed-size batches.

Batches run one after another.  A failed batch is recorded and skipped;
later batches are still attempted and earlier ones stay committed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

import config
from import_engine.errors import StoreError
from import_engine.report import CanonicalReport, PersistResult, ReportStore

logger = logging.getLogger(__name__)


def stamp(reports: Sequence[CanonicalReport], acting_user_id: str,
          now: datetime | None = None) -> list[dict]:
    """Storage records for ``reports`` with created_by / created_at filled in."""
    now = now or datetime.now(timezone.utc)
    records = []
    for report in reports:
        rec = report.to_dict()
        rec["created_by"] = acting_user_id
        rec["created_at"] = now
        records.append(rec)
    return records


def persist_reports(
    store: ReportStore,
    reports: Sequence[CanonicalReport],
    acting_user_id: str,
    *,
    batch_size: int | None = None,
    now: datetime | None = None,
) -> PersistResult:
    """
    Save ``reports`` keyed on (center_id, report_month), updating on conflict.

    saved_count only counts rows of batches that succeeded outright.
    """
    if not acting_user_id:
        return PersistResult(
            success=False, saved_count=0,
            errors=["User ID is required for saving reports"],
        )

    size = max(1, batch_size or config.IMPORT_BATCH_SIZE)
    records = stamp(reports, acting_user_id, now)
    result = PersistResult()

    for ordinal, start in enumerate(range(0, len(records), size), start=1):
        batch = records[start:start + size]
        try:
            store.upsert_reports(batch)
        except StoreError as exc:
            logger.error("Batch %d (rows %d-%d) failed: %s",
                         ordinal, start + 1, start + len(batch), exc)
            result.errors.append(
                f"Error saving batch {ordinal} (rows {start + 1}-{start + len(batch)}): {exc}"
            )
            continue
        result.saved_count += len(batch)

    result.success = not result.errors
    logger.info("Persisted %d/%d reports for user %s (%d failed batches)",
                result.saved_count, len(records), acting_user_id, len(result.errors))
    return result
