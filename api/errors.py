"""
api.errors - JSON error handlers for the API blueprint.
"""

from flask import jsonify

from api import api_bp
from import_engine.errors import ParseError
from services.errors import ServiceError, ValidationError


@api_bp.errorhandler(ValidationError)
def api_validation_error(e: ValidationError):
    return jsonify({"error": str(e), "messages": e.messages}), e.status_code


@api_bp.errorhandler(ServiceError)
def api_service_error(e: ServiceError):
    return jsonify({"error": str(e)}), e.status_code


@api_bp.errorhandler(ParseError)
def api_parse_error(e: ParseError):
    return jsonify({"error": str(e)}), 400


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(400)
def api_bad_request(_e):
    return jsonify({"error": "bad request"}), 400


@api_bp.errorhandler(413)
def api_too_large(_e):
    return jsonify({"error": "upload too large"}), 413


@api_bp.errorhandler(500)
def api_server_error(_e):
    return jsonify({"error": "internal server error"}), 500
