"""
api.routes_import - /api/v1/import endpoint.

Accepts an xlsx or CSV spreadsheet via multipart file upload or raw request body.
"""

from flask import request, jsonify

from api import api_bp, acting_user, outcome_status
from db import get_session, SqlCenterStore, SqlReportStore
from import_engine import run_import
from services.errors import ValidationError


@api_bp.route("/import", methods=["POST"])
def api_import_reports():
    """
    POST /api/v1/import?dry_run=0|1

    Multipart: field name 'file'
    Or: raw spreadsheet bytes as request body.

    200 with the outcome when clean; 422 with the row errors and
    unmatched centers when anything blocks the import (nothing saved);
    500 when a save batch failed (persisted.errors names the batches).
    """
    user_id = acting_user()
    dry_run = request.args.get("dry_run", "0") == "1"

    filename = "upload"
    if request.content_type and "multipart" in request.content_type:
        f = request.files.get("file")
        if not f:
            raise ValidationError("no file in upload")
        filename = f.filename or filename
        content = f.read()
    else:
        content = request.get_data()

    if not content:
        raise ValidationError("empty body")

    session = get_session()
    try:
        outcome = run_import(
            content, user_id,
            center_store=SqlCenterStore(session),
            report_store=SqlReportStore(session),
            filename=filename,
            commit=not dry_run,
        )
    finally:
        session.close()

    return jsonify(outcome.to_dict()), outcome_status(outcome)
