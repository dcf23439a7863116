"""
services.reports_service - Monthly report entry outside the spreadsheet import.

Covers the single-report form, the per-month grid ("bulk entry") and
report listing.  Both entry paths build the same CanonicalReport the
import engine does and save through the same upsert, so a form save
and a re-import of the same center/month land on one row.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models import HealthcareCenter, MonthlyReport
from db.store import SqlReportStore
from import_engine.coercers import to_boolean
from import_engine.errors import StoreError
from import_engine.persister import persist_reports, stamp
from import_engine.report import CanonicalReport, ImportOutcome, ImportResult, RowError
from services.errors import NotFoundError, ServiceError, ValidationError

logger = logging.getLogger(__name__)

NUMERIC_FORM_FIELDS = ("stock_beginning", "stock_end", "fixed_doses", "outreach_doses")
BOOLEAN_FORM_FIELDS = ("in_stock", "shortage", "outreach", "dhis_check")
TEXT_FORM_FIELDS = ("shortage_response", "misinformation")

_MONTH_KEY_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:-\d{1,2})?\s*$")


def normalize_month_key(text: str) -> str:
    """'2024-03' / '2024-03-17' → '2024-03-01'.  Raises ValidationError."""
    m = _MONTH_KEY_RE.match(str(text or ""))
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise ValidationError(f"report_month must look like YYYY-MM, got {text!r}")
    return f"{m.group(1)}-{int(m.group(2)):02d}-01"


def _form_int(data: dict, key: str, errors: list[str]) -> int:
    raw = data.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    if isinstance(raw, bool):
        errors.append(f"{key} must be a whole number")
        return 0
    try:
        value = int(raw) if not isinstance(raw, str) else int(raw.strip())
    except (TypeError, ValueError):
        errors.append(f"{key} must be a whole number")
        return 0
    if value < 0:
        errors.append(f"{key} cannot be negative")
    return value


def build_report(center: HealthcareCenter, report_month: str, data: dict) -> CanonicalReport:
    """Form fields → CanonicalReport.  total_doses is always derived."""
    errors: list[str] = []
    numbers = {key: _form_int(data, key, errors) for key in NUMERIC_FORM_FIELDS}
    if errors:
        raise ValidationError(errors)

    texts = {}
    for key in TEXT_FORM_FIELDS:
        val = data.get(key)
        texts[key] = (str(val).strip() or None) if val is not None else None

    return CanonicalReport(
        center_id=center.id,
        center_name=center.name,
        report_month=report_month,
        total_doses=numbers["fixed_doses"] + numbers["outreach_doses"],
        **numbers,
        **{key: to_boolean(data.get(key), False) for key in BOOLEAN_FORM_FIELDS},
        **texts,
    )


class ReportsService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def list_reports(
        session: Session,
        center_id: str = "",
        report_month: str = "",
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[MonthlyReport], int]:
        q = select(MonthlyReport)
        if center_id:
            q = q.where(MonthlyReport.center_id == center_id)
        if report_month:
            q = q.where(MonthlyReport.report_month == normalize_month_key(report_month))

        total = session.scalar(select(func.count()).select_from(q.subquery())) or 0
        q = (q.order_by(MonthlyReport.report_month.desc(), MonthlyReport.center_name)
             .limit(limit).offset(offset))
        return list(session.scalars(q)), total

    @staticmethod
    def get_for_month(session: Session, center_id: str, report_month: str) -> MonthlyReport | None:
        return session.scalar(
            select(MonthlyReport).where(
                MonthlyReport.center_id == center_id,
                MonthlyReport.report_month == normalize_month_key(report_month),
            )
        )

    @staticmethod
    def last_report_months(session: Session) -> dict[str, str]:
        """center_id → most recent report_month on file."""
        rows = session.execute(
            select(MonthlyReport.center_id, func.max(MonthlyReport.report_month))
            .group_by(MonthlyReport.center_id)
        ).all()
        return {center_id: month for center_id, month in rows}

    # ── Write ──────────────────────────────────────────────────────────

    @staticmethod
    def save_report(session: Session, data: dict, acting_user_id: str) -> MonthlyReport:
        """
        Insert or update the report for (center_id, report_month).
        Raises ValidationError / NotFoundError.
        """
        if not acting_user_id:
            raise ValidationError("User ID is required for saving reports")

        center_id = str(data.get("center_id") or "").strip()
        if not center_id:
            raise ValidationError("center_id is required")
        center = session.get(HealthcareCenter, center_id)
        if center is None:
            raise NotFoundError(f"Center {center_id} not found")

        report_month = normalize_month_key(data.get("report_month"))
        report = build_report(center, report_month, data)

        try:
            SqlReportStore(session).upsert_reports(stamp([report], acting_user_id))
        except StoreError as exc:
            raise ServiceError(f"Could not save report: {exc}") from exc

        session.expire_all()
        return ReportsService.get_for_month(session, center_id, report_month)

    @staticmethod
    def bulk_entry(
        session: Session,
        report_month: str,
        entries: list[dict],
        acting_user_id: str,
    ) -> ImportOutcome:
        """
        Grid entry: one report per center for the same month.

        Every entry is validated first; nothing is saved unless all of
        them pass.  Entry numbers in errors are 1-based.
        """
        month = normalize_month_key(report_month)
        ids = {str(e.get("center_id") or "") for e in entries}
        centers = {
            c.id: c for c in session.scalars(
                select(HealthcareCenter).where(HealthcareCenter.id.in_(ids))
            )
        }

        reports: list[CanonicalReport] = []
        errors: list[RowError] = []
        unknown: list[str] = []
        for idx, entry in enumerate(entries, start=1):
            center_id = str(entry.get("center_id") or "")
            center = centers.get(center_id)
            if center is None:
                unknown.append(center_id)
                errors.append(RowError(idx, f'Center not found: "{center_id}"'))
                continue
            try:
                reports.append(build_report(center, month, entry))
            except ValidationError as exc:
                errors.append(RowError(idx, "; ".join(exc.messages)))

        result = ImportResult(processed_reports=reports, errors=errors,
                              unmatched_centers=list(dict.fromkeys(unknown)))
        outcome = ImportOutcome(result=result)
        if result.ok and reports:
            outcome.persisted = persist_reports(SqlReportStore(session), reports, acting_user_id)
        return outcome

    @staticmethod
    def delete(session: Session, report_id: int) -> None:
        report = session.get(MonthlyReport, report_id)
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        session.delete(report)
        session.commit()
