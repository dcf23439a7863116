"""
db.store - SQLAlchemy-backed center and report stores for the import engine.

The import engine only sees the CenterStore / ReportStore contracts;
these wrap a caller-owned Session.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import HealthcareCenter, MonthlyReport
from import_engine.errors import StoreError
from import_engine.report import HealthcareCenterRef

CONFLICT_KEY = ("center_id", "report_month")

# Columns overwritten when a (center_id, report_month) row already exists
UPSERT_COLUMNS = (
    "center_name", "in_stock", "stock_beginning", "stock_end", "shortage",
    "shortage_response", "outreach", "fixed_doses", "outreach_doses",
    "total_doses", "misinformation", "dhis_check", "created_by",
)

_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlCenterStore:

    def __init__(self, session: Session):
        self._session = session

    def list_centers(self) -> list[HealthcareCenterRef]:
        try:
            rows = self._session.execute(
                select(HealthcareCenter.id, HealthcareCenter.name,
                       HealthcareCenter.state, HealthcareCenter.lga)
                .order_by(HealthcareCenter.created_at, HealthcareCenter.id)
            ).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Error fetching healthcare centers: {exc}") from exc
        return [
            HealthcareCenterRef(id=r.id, name=r.name, state=r.state or "", lga=r.lga or "")
            for r in rows
        ]


class SqlReportStore:
    """Upserts monthly reports; each call commits (or rolls back) on its own."""

    def __init__(self, session: Session):
        self._session = session

    def upsert_reports(self, records: list[dict]) -> None:
        if not records:
            return
        # A key may appear only once per ON CONFLICT statement; later rows win
        records = list({(r["center_id"], r["report_month"]): r for r in records}.values())
        dialect = self._session.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise StoreError(f"Upsert not supported on {dialect}")

        stmt = insert(MonthlyReport.__table__)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(CONFLICT_KEY),
            set_={
                **{col: stmt.excluded[col] for col in UPSERT_COLUMNS},
                "updated_at": stmt.excluded.created_at,
            },
        )
        try:
            self._session.execute(stmt, records)
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(str(getattr(exc, "orig", None) or exc)) from exc
