# routes/helpers.py
from flask import request

from services.errors import ValidationError


def int_arg(name: str, default: int) -> int:
    """Integer query-string argument; a non-integer value is a ValidationError."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid query parameter",
                              details=[{"field": name, "message": "must be an integer"}])


def bool_arg(name: str):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    return raw.lower() in ("1", "true", "yes", "on")


def body() -> dict:
    """JSON body, or the form fields of a multipart request."""
    data = request.get_json(silent=True)
    if data is None and request.form:
        data = request.form.to_dict()
    return data or {}
