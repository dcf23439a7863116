"""
services.centers_service - CRUD operations on HealthcareCenter records.

All session management is the caller's responsibility (open before,
close after).  Write methods commit their own change.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import HealthcareCenter
from services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "area", "state", "lga")
TEXT_FIELDS = (
    "name", "address", "area", "state", "lga", "contact_name",
    "contact_phone", "working_hours", "vaccination_days",
)


def _parse_coordinate(data: dict, key: str, limit: float, errors: list[str]) -> float | None:
    raw = data.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        errors.append(f"{key} must be a number")
        return None
    if not -limit <= value <= limit:
        errors.append(f"{key} must be between {-limit:g} and {limit:g}")
        return None
    return value


def as_bool(raw) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


class CentersService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, center_id: str) -> HealthcareCenter:
        center = session.get(HealthcareCenter, center_id)
        if center is None:
            raise NotFoundError(f"Center {center_id} not found")
        return center

    @staticmethod
    def list_centers(session: Session, state: str = "", lga: str = "") -> list[HealthcareCenter]:
        q = select(HealthcareCenter)
        if state:
            q = q.where(HealthcareCenter.state == state)
        if lga:
            q = q.where(HealthcareCenter.lga == lga)
        return list(session.scalars(q.order_by(HealthcareCenter.name)))

    @staticmethod
    def list_states(session: Session) -> list[str]:
        rows = session.scalars(select(HealthcareCenter.state).distinct())
        return sorted({s.strip() for s in rows if s and s.strip()})

    @staticmethod
    def map_locations(session: Session) -> list[dict]:
        """Centers that have both coordinates, shaped for the map widget."""
        q = (select(HealthcareCenter)
             .where(HealthcareCenter.latitude.is_not(None),
                    HealthcareCenter.longitude.is_not(None))
             .order_by(HealthcareCenter.name))
        return [
            {
                "id": c.id,
                "name": c.name,
                "address": c.address or "",
                "state": c.state or "",
                "lga": c.lga or "",
                "latitude": c.latitude,
                "longitude": c.longitude,
                "is_treatment_area": bool(c.is_treatment_area),
            }
            for c in session.scalars(q)
        ]

    # ── Write ──────────────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> HealthcareCenter:
        center = HealthcareCenter()
        CentersService._apply(center, data, partial=False)
        session.add(center)
        session.commit()
        logger.info("Created center %s (%s)", center.id, center.name)
        return center

    @staticmethod
    def update(session: Session, center_id: str, data: dict) -> HealthcareCenter:
        center = CentersService.get(session, center_id)
        CentersService._apply(center, data, partial=True)
        session.commit()
        return center

    @staticmethod
    def set_treatment_area(session: Session, center_id: str, flag: bool) -> HealthcareCenter:
        center = CentersService.get(session, center_id)
        center.is_treatment_area = bool(flag)
        session.commit()
        return center

    @staticmethod
    def delete(session: Session, center_id: str) -> None:
        """Delete a center together with all of its monthly reports."""
        center = CentersService.get(session, center_id)
        session.delete(center)
        session.commit()
        logger.info("Deleted center %s", center_id)

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _apply(center: HealthcareCenter, data: dict, partial: bool) -> None:
        """Validate ``data`` and copy it onto ``center``; raises ValidationError."""
        errors: list[str] = []
        values: dict = {}

        for key in TEXT_FIELDS:
            if key in data:
                values[key] = str(data.get(key) or "").strip()

        for key in REQUIRED_FIELDS:
            if partial and key not in data:
                continue
            if not values.get(key):
                errors.append(f"{key} is required")

        if "latitude" in data:
            values["latitude"] = _parse_coordinate(data, "latitude", 90, errors)
        if "longitude" in data:
            values["longitude"] = _parse_coordinate(data, "longitude", 180, errors)
        if "is_treatment_area" in data:
            values["is_treatment_area"] = as_bool(data["is_treatment_area"])

        if errors:
            raise ValidationError(errors)
        for key, val in values.items():
            setattr(center, key, val)
