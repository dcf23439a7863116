"""
api.routes_reports - /api/v1/reports endpoints (form and grid entry).
"""

from flask import request, jsonify

from api import api_bp, acting_user, json_body, outcome_status, page_args
from db import get_session
from services.errors import ValidationError
from services.reports_service import ReportsService


@api_bp.route("/reports")
def list_reports():
    """GET /api/v1/reports?center_id=&month=YYYY-MM&limit=100&offset=0"""
    center_id = request.args.get("center_id", "").strip()
    month = request.args.get("month", "").strip()
    limit, offset = page_args()
    session = get_session()
    try:
        reports, total = ReportsService.list_reports(
            session, center_id=center_id, report_month=month,
            limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "reports": [r.to_dict() for r in reports],
        })
    finally:
        session.close()


@api_bp.route("/reports/latest")
def latest_report_months():
    """center_id → most recent report month."""
    session = get_session()
    try:
        return jsonify(ReportsService.last_report_months(session))
    finally:
        session.close()


@api_bp.route("/reports", methods=["POST"])
def save_report():
    """
    POST /api/v1/reports

    JSON body: {center_id, report_month: "YYYY-MM", stock_beginning, …}.
    Creates or replaces the report for that center and month.
    """
    user_id = acting_user()
    data = json_body()
    session = get_session()
    try:
        report = ReportsService.save_report(session, data, user_id)
        return jsonify(report.to_dict()), 201
    finally:
        session.close()


@api_bp.route("/reports/bulk", methods=["POST"])
def bulk_entry():
    """
    POST /api/v1/reports/bulk

    JSON body: {report_month: "YYYY-MM", entries: [{center_id, …fields}, …]}
    422 when any entry is invalid (nothing saved), 500 when saving failed.
    """
    user_id = acting_user()
    data = json_body()
    entries = data.get("entries")
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValidationError("entries must be a list of objects")

    session = get_session()
    try:
        outcome = ReportsService.bulk_entry(
            session, data.get("report_month"), entries, user_id,
        )
        return jsonify(outcome.to_dict()), outcome_status(outcome)
    finally:
        session.close()


@api_bp.route("/reports/<int:report_id>", methods=["DELETE"])
def delete_report(report_id: int):
    acting_user()
    session = get_session()
    try:
        ReportsService.delete(session, report_id)
        return jsonify({"deleted": report_id})
    finally:
        session.close()
