# routes/upload.py
from flask import Blueprint, jsonify, request

from routes.auth import role_required
from services import storage

upload_bp = Blueprint("upload", __name__)


@upload_bp.post("/api/admin/upload")
@role_required("ADMIN")
def admin_upload():
    """multipart: file + kind (banners | avatars | resources) -> {url, file_name}"""
    kind = (request.form.get("kind") or "banners").strip().lower()
    saved = storage.save_upload(request.files.get("file"), kind)
    return jsonify(saved), 201
