# routes/me.py
from flask import Blueprint, request, jsonify

from routes.auth import current_actor
from routes.helpers import bool_arg, body
from services import user_service, profile_service, subscription_service, storage
from services.access import require_actor, require_admin
from models.user import User

bp_me = Blueprint("me", __name__, url_prefix="/api")


# ========== account ==========
@bp_me.get("/me")
def me():
    actor = require_actor(current_actor())
    user = user_service.get_user(actor["id"])
    sub = subscription_service.current_subscription(user.id)
    out = user.to_dict()
    out["active_subscription"] = sub.to_dict() if sub else None
    return jsonify(out)


@bp_me.get("/me/profile")
def get_profile():
    prof = user_service.get_profile(current_actor())
    return jsonify(prof.to_dict() if prof else {})


@bp_me.put("/me/profile")
def put_profile():
    prof = user_service.upsert_profile(current_actor(), body())
    return jsonify(prof.to_dict())


# ========== notifications ==========
@bp_me.get("/me/notifications")
def notifications():
    items = user_service.list_notifications(current_actor(), unread_only=bool(bool_arg("unread")))
    return jsonify({"items": [n.to_dict() for n in items]})


@bp_me.post("/me/notifications/<int:notification_id>/read")
def read_notification(notification_id):
    n = user_service.mark_notification_read(current_actor(), notification_id)
    return jsonify(n.to_dict())


# ========== onboarding worksheets ==========
@bp_me.get("/me/personal-discovery")
def get_discovery():
    return jsonify(profile_service.get_discovery(current_actor()).to_dict())


@bp_me.post("/me/personal-discovery")
def create_discovery():
    row = profile_service.create_discovery(current_actor(), body())
    return jsonify(row.to_dict()), 201


@bp_me.put("/me/personal-discovery")
def update_discovery():
    return jsonify(profile_service.update_discovery(current_actor(), body()).to_dict())


@bp_me.get("/me/scholarship-assessment")
def get_scholarship():
    return jsonify(profile_service.get_scholarship(current_actor()).to_dict())


@bp_me.post("/me/scholarship-assessment")
def create_scholarship():
    row = profile_service.create_scholarship(current_actor(), body())
    return jsonify(row.to_dict()), 201


@bp_me.put("/me/scholarship-assessment")
def update_scholarship():
    return jsonify(profile_service.update_scholarship(current_actor(), body()).to_dict())


@bp_me.get("/me/cv")
def get_cv():
    return jsonify(profile_service.get_cv(current_actor()).to_dict())


@bp_me.post("/me/cv")
def upload_cv():
    """multipart file "file", or json {"file_name", "file_url"}"""
    actor = require_actor(current_actor())
    upload = request.files.get("file")
    if upload is not None:
        saved = storage.save_upload(upload, "cvs")
        file_name, file_url = saved["file_name"], saved["url"]
    else:
        data = body()
        file_url = data.get("file_url")
        file_name = data.get("file_name") or (file_url or "").rsplit("/", 1)[-1]
    row = profile_service.save_cv(actor, file_name, file_url)
    return jsonify(row.to_dict()), 201


# ========== admin ==========
@bp_me.get("/admin/users")
def admin_users():
    require_admin(current_actor())
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify({"items": [u.to_dict() for u in users]})


@bp_me.put("/admin/users/<int:user_id>/progress")
def admin_set_progress(user_id):
    """{"progress_status": "CV_ALIGNMENT_PENDING"}"""
    user = user_service.admin_set_progress(current_actor(), user_id, body())
    return jsonify(user.to_dict())
