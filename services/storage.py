# services/storage.py
"""
Local file storage for uploads.

Files land in ``UPLOAD_ROOT/<kind>/<random>.<ext>`` and are served back by
routes.media_public under ``/media/<kind>/<name>``.
"""
import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from services.errors import ValidationError

logger = logging.getLogger(__name__)

IMAGE_EXTS = {"png", "jpg", "jpeg", "webp", "gif"}
DOCUMENT_EXTS = {"pdf", "doc", "docx"}

# upload kind -> allowed extensions
KINDS = {
    "proofs": IMAGE_EXTS | {"pdf"},
    "cvs": DOCUMENT_EXTS,
    "banners": IMAGE_EXTS,
    "avatars": IMAGE_EXTS,
    "resources": IMAGE_EXTS | DOCUMENT_EXTS,
}


def _ext(filename: str) -> str:
    name = secure_filename(filename or "")
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def upload_root() -> str:
    return current_app.config["UPLOAD_ROOT"]


def save_upload(file, kind: str) -> dict:
    """Store a werkzeug FileStorage and return {url, file_name}."""
    if kind not in KINDS:
        raise ValidationError("Unknown upload kind",
                              details=[{"field": "kind", "message": f"one of {', '.join(sorted(KINDS))}"}])
    if file is None or not file.filename:
        raise ValidationError("File is required", details=[{"field": "file", "message": "no file uploaded"}])
    ext = _ext(file.filename)
    if ext not in KINDS[kind]:
        raise ValidationError("Unsupported file type",
                              details=[{"field": "file",
                                        "message": f"allowed: {', '.join(sorted(KINDS[kind]))}"}])

    folder = os.path.join(upload_root(), kind)
    os.makedirs(folder, exist_ok=True)
    name = f"{uuid.uuid4().hex}.{ext}"
    file.save(os.path.join(folder, name))
    logger.info("stored upload %s/%s (%s)", kind, name, file.filename)
    return {"url": f"/media/{kind}/{name}", "file_name": secure_filename(file.filename)}
