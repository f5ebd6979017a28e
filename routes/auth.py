# routes/auth.py
from datetime import datetime, timedelta
from functools import wraps

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_jwt_in_request,
    get_jwt,
    get_jwt_identity,
)
from jwt.exceptions import PyJWTError
from flask_jwt_extended.exceptions import JWTExtendedException

from extensions import db
from models.user import User
from schemas import parse, LoginPayload
from services import user_service

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _now_utc() -> datetime:
    return datetime.utcnow()


def _fmt_expires(dt: datetime) -> str:
    return dt.strftime("%Y/%m/%d %H:%M:%S")


def _claims_for(user: User) -> dict:
    role = user.role.value
    return {"role": role, "roles": [role]}


def _token_response(user: User, status: int = 200):
    """Access + refresh token pair for ``user``; identity is the id as a string."""
    cfg = current_app.config
    access_delta = timedelta(hours=cfg["JWT_ACCESS_TOKEN_HOURS"])
    refresh_delta = timedelta(days=cfg["JWT_REFRESH_TOKEN_DAYS"])
    identity = str(user.id)
    claims = _claims_for(user)

    access_token = create_access_token(identity=identity, additional_claims=claims, expires_delta=access_delta)
    refresh_token = create_refresh_token(identity=identity, additional_claims=claims, expires_delta=refresh_delta)
    return jsonify({
        "accessToken": access_token,
        "refreshToken": refresh_token,
        "expires": _fmt_expires(_now_utc() + access_delta),
        "user": user.to_dict(),
    }), status


def current_actor():
    """
    {"id": int, "role": str} for the bearer of a valid access token, else None.
    A malformed or expired token still raises (answered with 401 by JWTManager).
    """
    verify_jwt_in_request(optional=True)
    ident = get_jwt_identity()
    if ident is None:
        return None
    try:
        uid = int(ident)
    except (TypeError, ValueError):
        return None
    claims = get_jwt() or {}
    role = claims.get("role")
    if not role:
        roles = claims.get("roles") or []
        role = roles[0] if roles else None
    return {"id": uid, "role": role}


def role_required(*required_roles):
    """
    Restrict a view to the given roles.
    Usage: @role_required("ADMIN")
    """
    def wrapper(fn):
        @wraps(fn)
        def decorated_view(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt() or {}
            user_roles = claims.get("roles") or claims.get("role") or []
            if isinstance(user_roles, str):
                user_roles = [user_roles]
            if not any(role in user_roles for role in required_roles):
                return jsonify({"error": "Forbidden"}), 403
            return fn(*args, **kwargs)
        return decorated_view
    return wrapper


@auth_bp.post("/register")
def register():
    user = user_service.register_user(request.get_json(silent=True))
    current_app.logger.info("registered user %s", user.id)
    return _token_response(user, 201)


@auth_bp.post("/login")
def login():
    """{"email": "...", "password": "..."} -> token pair."""
    data = parse(LoginPayload, request.get_json(silent=True), "Email and password are required")
    user = user_service.authenticate(data.email, data.password)
    if user is None:
        return jsonify({"error": "Invalid email or password"}), 401
    return _token_response(user)


@auth_bp.post("/refresh-token")
def refresh_token():
    """
    {"refreshToken": "..."} in the body (not the Authorization header).
    Role claims are re-read from the database so a role change takes effect.
    """
    data = request.get_json(silent=True) or {}
    raw_refresh = data.get("refreshToken", "")
    if not raw_refresh:
        return jsonify({"error": "refreshToken is required"}), 401

    try:
        decoded = decode_token(raw_refresh)
    except (PyJWTError, JWTExtendedException):
        return jsonify({"error": "refreshToken is invalid or expired"}), 401
    if decoded.get("type") != "refresh":
        return jsonify({"error": "refreshToken is invalid or expired"}), 401

    try:
        user = db.session.get(User, int(decoded.get("sub")))
    except (TypeError, ValueError):
        user = None
    if user is None:
        return jsonify({"error": "refreshToken is invalid or expired"}), 401

    access_delta = timedelta(hours=current_app.config["JWT_ACCESS_TOKEN_HOURS"])
    new_access = create_access_token(identity=str(user.id), additional_claims=_claims_for(user),
                                     expires_delta=access_delta)
    return jsonify({
        "accessToken": new_access,
        "refreshToken": raw_refresh,
        "expires": _fmt_expires(_now_utc() + access_delta),
    }), 200
