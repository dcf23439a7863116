"""
api.routes_dashboard - /api/v1/dashboard/* endpoints feeding the cards and charts.
"""

from flask import request, jsonify

import config
from api import api_bp
from db import get_session
from services.dashboard_service import DashboardService
from services.errors import ValidationError


@api_bp.route("/dashboard/summary")
def dashboard_summary():
    """GET /api/v1/dashboard/summary?month=YYYY-MM  (defaults to the current month)"""
    month = request.args.get("month", "").strip() or None
    session = get_session()
    try:
        return jsonify(DashboardService.summary(session, month))
    finally:
        session.close()


@api_bp.route("/dashboard/monthly")
def dashboard_monthly():
    """GET /api/v1/dashboard/monthly?months=12&end=YYYY-MM"""
    end = request.args.get("end", "").strip() or None
    try:
        months = int(request.args.get("months", config.DASHBOARD_MONTHS))
    except ValueError as exc:
        raise ValidationError("months must be an integer") from exc
    months = max(1, min(months, 120))

    session = get_session()
    try:
        return jsonify(DashboardService.monthly_totals(session, months=months, end_month=end))
    finally:
        session.close()
