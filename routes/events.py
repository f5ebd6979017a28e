# routes/events.py
from datetime import datetime

from flask import Blueprint, jsonify

from routes.auth import current_actor
from routes.helpers import bool_arg, body
from services import event_service

events_bp = Blueprint("events", __name__, url_prefix="/api")


@events_bp.get("/events")
def list_events():
    """?upcoming=1 hides events that already ended."""
    after = datetime.utcnow() if bool_arg("upcoming") else None
    return jsonify({"items": event_service.list_events(upcoming_after=after)})


@events_bp.get("/events/<int:event_id>")
def event_detail(event_id):
    return jsonify(event_service.get_event(event_id).to_dict())


@events_bp.post("/events/<int:event_id>/registration")
def register(event_id):
    reg = event_service.register(current_actor(), event_id)
    return jsonify(reg.to_dict()), 201


@events_bp.delete("/events/<int:event_id>/registration")
def unregister(event_id):
    event_service.unregister(current_actor(), event_id)
    return jsonify({"ok": True})


@events_bp.get("/events/<int:event_id>/is-registered")
def is_registered(event_id):
    return jsonify({"registered": event_service.is_registered(current_actor(), event_id)})


# ---------- admin ----------
@events_bp.post("/admin/events")
def admin_create_event():
    ev = event_service.create_event(current_actor(), body())
    return jsonify(ev.to_dict()), 201


@events_bp.delete("/admin/events/<int:event_id>")
def admin_delete_event(event_id):
    event_service.delete_event(current_actor(), event_id)
    return jsonify({"ok": True})
