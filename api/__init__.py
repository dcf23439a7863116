"""
api - REST API layer.

All route modules register on a single Flask Blueprint
with url_prefix /api/v1.
"""

from flask import Blueprint, request

import config
from services.errors import ValidationError

api_bp = Blueprint("api", __name__, url_prefix="/api/v1")


def acting_user() -> str:
    """Id of the signed-in user forwarded by the auth gateway; required for writes."""
    user_id = (request.headers.get(config.USER_HEADER) or "").strip()
    if not user_id:
        raise ValidationError(f"{config.USER_HEADER} header is required")
    return user_id


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def page_args() -> tuple[int, int]:
    """(limit, offset) from the query string, clamped to the configured maximum."""
    try:
        limit = int(request.args.get("limit", config.API_DEFAULT_LIMIT))
        offset = int(request.args.get("offset", 0))
    except ValueError as exc:
        raise ValidationError("limit and offset must be integers") from exc
    return max(1, min(limit, config.API_MAX_LIMIT)), max(0, offset)


def outcome_status(outcome) -> int:
    """422 when rows block the import, 500 when a save batch failed, else 200."""
    if not outcome.result.ok:
        return 422
    if outcome.persisted is not None and not outcome.persisted.success:
        return 500
    return 200


# Import route modules so their @api_bp decorators execute
from api import routes_centers     # noqa: F401, E402
from api import routes_reports     # noqa: F401, E402
from api import routes_import      # noqa: F401, E402
from api import routes_dashboard   # noqa: F401, E402
from api import errors             # noqa: F401, E402
