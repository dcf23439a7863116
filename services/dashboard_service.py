"""
services.dashboard_service - Aggregate statistics for the dashboard cards and charts.

Centers are split into treatment and control arms by is_treatment_area;
growth compares a month with the one before it.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

import config
from db.models import HealthcareCenter, MonthlyReport
from services.reports_service import normalize_month_key


def previous_month(month_key: str) -> str:
    """'2024-01-01' → '2023-12-01'."""
    year, month = int(month_key[:4]), int(month_key[5:7])
    if month == 1:
        return f"{year - 1:04d}-12-01"
    return f"{year:04d}-{month - 1:02d}-01"


def growth_percent(current: int, previous: int) -> float:
    """Percentage change; 0 when there is nothing to compare against."""
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)


class DashboardService:

    @staticmethod
    def summary(session: Session, month: str | None = None) -> dict:
        month_key = normalize_month_key(month) if month else date.today().strftime("%Y-%m-01")
        prev_key = previous_month(month_key)

        arm_by_center = dict(session.execute(
            select(HealthcareCenter.id, HealthcareCenter.is_treatment_area)
        ).all())
        total_centers = len(arm_by_center)
        treatment_centers = sum(1 for flag in arm_by_center.values() if flag)

        rows = session.execute(
            select(MonthlyReport.report_month, MonthlyReport.center_id,
                   MonthlyReport.total_doses, MonthlyReport.shortage)
            .where(MonthlyReport.report_month.in_((month_key, prev_key)))
        ).all()

        doses = {
            month_key: {"treatment": 0, "control": 0},
            prev_key: {"treatment": 0, "control": 0},
        }
        reporting: set[str] = set()
        shortages = 0
        for report_month, center_id, total, shortage in rows:
            arm = "treatment" if arm_by_center.get(center_id) else "control"
            doses[report_month][arm] += total or 0
            if report_month == month_key:
                reporting.add(center_id)
                shortages += 1 if shortage else 0

        cur, prev = doses[month_key], doses[prev_key]
        return {
            "month": month_key,
            "total_centers": total_centers,
            "treatment_centers": treatment_centers,
            "control_centers": total_centers - treatment_centers,
            "reporting_centers": len(reporting),
            "shortage_reports": shortages,
            "total_vaccinations": cur["treatment"] + cur["control"],
            "treatment_vaccinations": cur["treatment"],
            "control_vaccinations": cur["control"],
            "prev_treatment_vaccinations": prev["treatment"],
            "prev_control_vaccinations": prev["control"],
            "treatment_growth_percent": growth_percent(cur["treatment"], prev["treatment"]),
            "control_growth_percent": growth_percent(cur["control"], prev["control"]),
        }

    @staticmethod
    def monthly_totals(
        session: Session,
        months: int = config.DASHBOARD_MONTHS,
        end_month: str | None = None,
    ) -> list[dict]:
        """Dose totals for the ``months`` months ending at ``end_month``, oldest first."""
        key = normalize_month_key(end_month) if end_month else date.today().strftime("%Y-%m-01")
        keys = [key]
        for _ in range(max(1, months) - 1):
            keys.append(previous_month(keys[-1]))
        keys.reverse()

        rows = session.execute(
            select(
                MonthlyReport.report_month,
                func.coalesce(func.sum(MonthlyReport.fixed_doses), 0),
                func.coalesce(func.sum(MonthlyReport.outreach_doses), 0),
                func.coalesce(func.sum(MonthlyReport.total_doses), 0),
                func.count(MonthlyReport.id),
            )
            .where(MonthlyReport.report_month.in_(keys))
            .group_by(MonthlyReport.report_month)
        ).all()
        by_month = {r[0]: r[1:] for r in rows}

        series = []
        for k in keys:
            fixed, outreach, total, count = by_month.get(k, (0, 0, 0, 0))
            series.append({
                "month": k,
                "fixed_doses": int(fixed),
                "outreach_doses": int(outreach),
                "total_doses": int(total),
                "reports": int(count),
            })
        return series
