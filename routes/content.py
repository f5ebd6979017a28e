# routes/content.py
from flask import Blueprint, jsonify

from routes.auth import current_actor
from routes.helpers import body
from services import content_service

content_bp = Blueprint("content", __name__, url_prefix="/api")


# ---------- public ----------
@content_bp.get("/content/<section>")
def list_section(section):
    items = content_service.list_items(section)
    return jsonify({"items": [it.to_dict() for it in items]})


@content_bp.get("/content/<section>/<int:item_id>")
def get_section_item(section, item_id):
    return jsonify(content_service.get_item(section, item_id).to_dict())


@content_bp.get("/pages/terms")
def terms():
    return jsonify({"title": "Terms and Conditions", "sections": content_service.TERMS_SECTIONS})


@content_bp.post("/contact")
def contact():
    row = content_service.submit_contact(body())
    return jsonify({"ok": True, "id": row.id}), 201


@content_bp.post("/feedback")
def feedback():
    row = content_service.submit_feedback(current_actor(), body())
    return jsonify(row.to_dict()), 201


# ---------- admin ----------
@content_bp.post("/admin/content/<section>")
def admin_create(section):
    row = content_service.create_item(current_actor(), section, body())
    return jsonify(row.to_dict()), 201


@content_bp.put("/admin/content/<section>/<int:item_id>")
def admin_update(section, item_id):
    row = content_service.update_item(current_actor(), section, item_id, body())
    return jsonify(row.to_dict())


@content_bp.delete("/admin/content/<section>/<int:item_id>")
def admin_delete(section, item_id):
    content_service.delete_item(current_actor(), section, item_id)
    return jsonify({"ok": True})


@content_bp.get("/admin/contacts")
def admin_contacts():
    return jsonify({"items": [c.to_dict() for c in content_service.list_contacts(current_actor())]})


@content_bp.get("/admin/feedback")
def admin_feedback():
    return jsonify({"items": [f.to_dict() for f in content_service.list_feedback(current_actor())]})
