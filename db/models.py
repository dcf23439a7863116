"""
db.models - SQLAlchemy ORM declarations.

Tables
------
healthcare_centers - one row per registered center.  Coordinates are
                     optional; centers without them are left off the map.
monthly_reports    - one row per center per month.  The natural key
                     (center_id, report_month) is enforced by a unique
                     constraint so re-imports update instead of duplicating.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String,
    Text, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class HealthcareCenter(Base):
    __tablename__ = "healthcare_centers"

    id   = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False, index=True)

    # ── Location ───────────────────────────────────────────────────────
    address   = Column(Text, default="")
    area      = Column(String(200), default="")
    state     = Column(String(100), default="", index=True)
    lga       = Column(String(100), default="", index=True)
    latitude  = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # ── Contact / schedule ─────────────────────────────────────────────
    contact_name     = Column(String(200), default="")
    contact_phone    = Column(String(50), default="")
    working_hours    = Column(String(200), default="")
    vaccination_days = Column(String(200), default="")

    # Study arm: treatment vs control
    is_treatment_area = Column(Boolean, nullable=False, default=False)

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    reports = relationship(
        "MonthlyReport", back_populates="center",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    # ── Serialisation ──────────────────────────────────────────────────
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address or "",
            "area": self.area or "",
            "state": self.state or "",
            "lga": self.lga or "",
            "latitude": self.latitude,
            "longitude": self.longitude,
            "contact_name": self.contact_name or "",
            "contact_phone": self.contact_phone or "",
            "working_hours": self.working_hours or "",
            "vaccination_days": self.vaccination_days or "",
            "is_treatment_area": bool(self.is_treatment_area),
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }


class MonthlyReport(Base):
    __tablename__ = "monthly_reports"

    id        = Column(Integer, primary_key=True, autoincrement=True)
    center_id = Column(String(36),
                       ForeignKey("healthcare_centers.id", ondelete="CASCADE"),
                       nullable=False, index=True)
    center_name  = Column(String(200), default="")
    report_month = Column(String(10), nullable=False, index=True)   # YYYY-MM-01

    # ── Stock ──────────────────────────────────────────────────────────
    in_stock          = Column(Boolean, nullable=False, default=True)
    stock_beginning   = Column(Integer, nullable=False, default=0)
    stock_end         = Column(Integer, nullable=False, default=0)
    shortage          = Column(Boolean, nullable=False, default=False)
    shortage_response = Column(Text, nullable=True)

    # ── Doses ──────────────────────────────────────────────────────────
    outreach       = Column(Boolean, nullable=False, default=False)
    fixed_doses    = Column(Integer, nullable=False, default=0)
    outreach_doses = Column(Integer, nullable=False, default=0)
    total_doses    = Column(Integer, nullable=False, default=0)

    misinformation = Column(Text, nullable=True)
    dhis_check     = Column(Boolean, nullable=False, default=False)

    # ── Audit ──────────────────────────────────────────────────────────
    created_by = Column(String(100), default="")
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    center = relationship("HealthcareCenter", back_populates="reports")

    __table_args__ = (
        UniqueConstraint("center_id", "report_month", name="uq_center_month"),
        Index("ix_report_month_center", "report_month", "center_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "center_id": self.center_id,
            "center_name": self.center_name or "",
            "report_month": self.report_month,
            "in_stock": bool(self.in_stock),
            "stock_beginning": self.stock_beginning,
            "stock_end": self.stock_end,
            "shortage": bool(self.shortage),
            "shortage_response": self.shortage_response,
            "outreach": bool(self.outreach),
            "fixed_doses": self.fixed_doses,
            "outreach_doses": self.outreach_doses,
            "total_doses": self.total_doses,
            "misinformation": self.misinformation,
            "dhis_check": bool(self.dhis_check),
            "created_by": self.created_by or "",
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }
