# routes/media_public.py
from flask import Blueprint, send_from_directory, jsonify, abort, current_app

media_public_bp = Blueprint("media_public", __name__)


@media_public_bp.get("/media/ping")
def media_ping():
    return jsonify({"ok": True})


@media_public_bp.route("/media/<path:subpath>")
def media_serve(subpath: str):
    # no escaping the upload root
    if ".." in subpath or subpath.startswith("/"):
        abort(400)
    return send_from_directory(current_app.config["UPLOAD_ROOT"], subpath, conditional=True)
