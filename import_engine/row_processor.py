"""
import_engine.row_processor - Validate and transform spreadsheet rows into reports.

Single-responsibility: given a RawRow and the center index, either return
a CanonicalReport or raise RowRejected.  process_rows() folds that over a
whole sheet; one bad row never stops the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from import_engine import field_map as fm
from import_engine.center_matcher import CenterIndex
from import_engine.coercers import to_boolean, to_numeric, to_report_month
from import_engine.columns import resolve
from import_engine.errors import ReportMonthError, RowRejected
from import_engine.report import (
    CanonicalReport, HealthcareCenterRef, ImportResult, RawRow, RowError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowOutcome:
    """Result of one row: exactly one of ``report`` / ``error`` is set."""
    row: int
    report: CanonicalReport | None = None
    error: str | None = None
    unmatched: str | None = None


class RowProcessor:
    """Builds CanonicalReports against a fixed snapshot of known centers."""

    def __init__(self, centers: CenterIndex | Iterable[HealthcareCenterRef]):
        self.centers = centers if isinstance(centers, CenterIndex) else CenterIndex(centers)

    def process(self, row: RawRow) -> CanonicalReport:
        """
        Validate one row and build its report.
        Raises RowRejected on any problem.
        """
        center = self._resolve_center(row)
        report_month = self._resolve_month(row)
        numbers = self._resolve_numbers(row)

        flags = {
            attr: to_boolean(resolve(row, aliases), default)
            for attr, (aliases, default) in fm.BOOLEAN_FIELDS.items()
        }
        texts = {attr: _text_or_none(resolve(row, aliases))
                 for attr, aliases in fm.TEXT_FIELDS.items()}

        return CanonicalReport(
            center_id=center.id,
            center_name=center.name,
            report_month=report_month,
            total_doses=numbers["fixed_doses"] + numbers["outreach_doses"],
            **numbers,
            **flags,
            **texts,
        )

    def outcome(self, index: int, row: RawRow) -> RowOutcome:
        try:
            return RowOutcome(row=index, report=self.process(row))
        except RowRejected as exc:
            return RowOutcome(row=index, error=str(exc), unmatched=exc.unmatched)
        except Exception as exc:
            logger.exception("Unexpected failure processing row %d", index)
            return RowOutcome(row=index, error=f"Processing error: {exc}")

    # ── Private helpers ────────────────────────────────────────────────

    def _resolve_center(self, row: RawRow) -> HealthcareCenterRef:
        raw_name = resolve(row, fm.CENTER_NAME)
        name = "" if raw_name is None else str(raw_name).strip()
        if not name:
            raise RowRejected("Missing PHC name")

        center = self.centers.match(name)
        if center is None:
            raise RowRejected(f'PHC not found: "{name}"', unmatched=name)
        return center

    @staticmethod
    def _resolve_month(row: RawRow) -> str:
        month = resolve(row, fm.MONTH)
        year = resolve(row, fm.YEAR)
        if _blank(month) or _blank(year):
            raise RowRejected("Missing month or year")
        try:
            return to_report_month(year, month)
        except ReportMonthError as exc:
            raise RowRejected(str(exc)) from exc

    @staticmethod
    def _resolve_numbers(row: RawRow) -> dict[str, int]:
        values = {attr: to_numeric(resolve(row, aliases))
                  for attr, (_label, aliases) in fm.NUMERIC_FIELDS.items()}
        if any(v is None for v in values.values()):
            raise RowRejected("Missing or invalid numeric values")

        numbers = {attr: int(v) for attr, v in values.items()}
        negative = [fm.NUMERIC_FIELDS[attr][0] for attr, v in numbers.items() if v < 0]
        if negative:
            raise RowRejected(f"Negative values not allowed: {', '.join(negative)}")
        return numbers


def process_rows(
    rows: Iterable[RawRow],
    acting_user_id: str,
    centers: CenterIndex | Iterable[HealthcareCenterRef],
) -> ImportResult:
    """
    Turn parsed rows into an ImportResult.

    Row indices in errors are 1-based data-row positions.  The acting
    user is only stamped later, at persist time.
    """
    processor = RowProcessor(centers)
    outcomes = [processor.outcome(idx, row) for idx, row in enumerate(rows, start=1)]

    reports = [o.report for o in outcomes if o.report is not None]
    errors = [RowError(o.row, o.error) for o in outcomes if o.error is not None]
    unmatched = list(dict.fromkeys(o.unmatched for o in outcomes if o.unmatched))

    logger.info(
        "Processed %d rows for user %s: %d ok, %d errors, %d unmatched centers",
        len(outcomes), acting_user_id, len(reports), len(errors), len(unmatched),
    )
    return ImportResult(processed_reports=reports, errors=errors, unmatched_centers=unmatched)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text_or_none(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
