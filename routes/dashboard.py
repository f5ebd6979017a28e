# routes/dashboard.py
from flask import Blueprint, jsonify

from routes.auth import current_actor
from routes.helpers import int_arg
from services import dashboard_service

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/admin/dashboard")


@dashboard_bp.get("/stats")
def get_stats():
    return jsonify({"data": dashboard_service.dashboard_stats(current_actor())})


@dashboard_bp.post("/snapshot")
def snapshot():
    row = dashboard_service.take_snapshot(current_actor())
    return jsonify(row.to_dict()), 201


@dashboard_bp.get("/snapshots")
def snapshots():
    rows = dashboard_service.list_snapshots(current_actor(), limit=int_arg("limit", 30))
    return jsonify({"items": [r.to_dict() for r in rows]})
