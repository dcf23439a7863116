"""
api.routes_centers - /api/v1/centers endpoints.
"""

from flask import request, jsonify

from api import api_bp, acting_user, json_body
from db import get_session
from services.centers_service import CentersService, as_bool


@api_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@api_bp.route("/centers")
def list_centers():
    """GET /api/v1/centers?state=&lga="""
    state = request.args.get("state", "").strip()
    lga = request.args.get("lga", "").strip()
    session = get_session()
    try:
        centers = CentersService.list_centers(session, state=state, lga=lga)
        return jsonify({"total": len(centers), "centers": [c.to_dict() for c in centers]})
    finally:
        session.close()


@api_bp.route("/centers/states")
def list_states():
    session = get_session()
    try:
        return jsonify(CentersService.list_states(session))
    finally:
        session.close()


@api_bp.route("/centers/map")
def center_map():
    """Markers for every center with coordinates."""
    session = get_session()
    try:
        return jsonify(CentersService.map_locations(session))
    finally:
        session.close()


@api_bp.route("/centers/<center_id>")
def get_center(center_id: str):
    session = get_session()
    try:
        return jsonify(CentersService.get(session, center_id).to_dict())
    finally:
        session.close()


@api_bp.route("/centers", methods=["POST"])
def create_center():
    """
    POST /api/v1/centers

    JSON body: {name, area, state, lga, address?, latitude?, longitude?, …}
    """
    acting_user()
    data = json_body()
    session = get_session()
    try:
        center = CentersService.create(session, data)
        return jsonify(center.to_dict()), 201
    finally:
        session.close()


@api_bp.route("/centers/<center_id>", methods=["PUT"])
def update_center(center_id: str):
    """PUT /api/v1/centers/{id}  (JSON body with fields to update)"""
    acting_user()
    data = json_body()
    session = get_session()
    try:
        center = CentersService.update(session, center_id, data)
        return jsonify(center.to_dict())
    finally:
        session.close()


@api_bp.route("/centers/<center_id>/treatment", methods=["POST"])
def set_treatment(center_id: str):
    """POST /api/v1/centers/{id}/treatment  {"is_treatment_area": true|false}"""
    acting_user()
    data = json_body()
    session = get_session()
    try:
        center = CentersService.set_treatment_area(
            session, center_id, as_bool(data.get("is_treatment_area")),
        )
        return jsonify(center.to_dict())
    finally:
        session.close()


@api_bp.route("/centers/<center_id>", methods=["DELETE"])
def delete_center(center_id: str):
    """DELETE /api/v1/centers/{id}  (also removes the center's reports)"""
    acting_user()
    session = get_session()
    try:
        CentersService.delete(session, center_id)
        return jsonify({"deleted": center_id})
    finally:
        session.close()
