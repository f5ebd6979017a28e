# routes/career.py
"""
Guest career assessment. No account is needed: creating a career profile
(directly or inline with the first assessment) returns an ``access_token``
that the guest sends back in the ``X-Career-Token`` header. A signed-in
owner may use their bearer token instead. Shared results are public under
``/shared/<code>``; the analytics listing is admin-only.
"""
from flask import Blueprint, jsonify, current_app, request

from routes.auth import current_actor, role_required
from routes.helpers import int_arg, body
from services import career_service
from services.errors import ShareCodeTaken

career_bp = Blueprint("career", __name__, url_prefix="/api/career")

TOKEN_HEADER = "X-Career-Token"


# ---------- helpers ----------
def _ok(payload, status: int = 200):
    return jsonify(payload), status


def _access():
    return {"token": request.headers.get(TOKEN_HEADER), "actor": current_actor()}


# ---------- career users ----------
@career_bp.post("/users")
def create_career_user():
    cu = career_service.create_career_user(body(), actor=current_actor())
    return _ok({**cu.to_dict(), "access_token": cu.access_token}, 201)


@career_bp.get("/users/<int:career_user_id>/assessments")
def list_user_assessments(career_user_id):
    cu = career_service.get_career_user(career_user_id, **_access())
    return _ok({"items": [a.to_dict() for a in cu.assessments]})


# ---------- assessments ----------
@career_bp.post("/assessments")
def start_assessment():
    a = career_service.start_assessment(body(), **_access())
    return _ok({**a.to_dict(), "access_token": a.career_user.access_token}, 201)


@career_bp.get("/assessments/<int:assessment_id>")
def get_assessment(assessment_id):
    return _ok(career_service.get_assessment(assessment_id, **_access()).to_dict())


@career_bp.post("/assessments/<int:assessment_id>/complete")
def complete_assessment(assessment_id):
    """{"suggested_career": "...", "confidence_score": 0.82, "matching_factors": [...]}"""
    a = career_service.complete_assessment(assessment_id, body(), **_access())
    return _ok(a.to_dict())


@career_bp.post("/assessments/<int:assessment_id>/abandon")
def abandon_assessment(assessment_id):
    return _ok(career_service.abandon_assessment(assessment_id, **_access()).to_dict())


@career_bp.post("/assessments/<int:assessment_id>/share")
def share_assessment(assessment_id):
    cfg = current_app.config
    access = _access()
    attempts = cfg.get("SHARE_CODE_ATTEMPTS", 5)
    for attempt in range(1, attempts + 1):
        try:
            code = career_service.share_assessment(
                assessment_id, code_length=cfg.get("SHARE_CODE_LENGTH", 10), **access)
            return _ok({"share_code": code, "url": f"/api/career/shared/{code}"})
        except ShareCodeTaken:
            if attempt == attempts:
                raise
            current_app.logger.warning("share code collision for assessment %s (attempt %s)",
                                       assessment_id, attempt)


@career_bp.get("/shared/<code>")
def shared_assessment(code):
    return _ok(career_service.get_shared_assessment(code).to_dict(public=True))


@career_bp.post("/assessments/<int:assessment_id>/feedback")
def submit_feedback(assessment_id):
    fb = career_service.submit_feedback(assessment_id, body(), **_access())
    return _ok(fb.to_dict(), 201)


# ---------- analytics ----------
@career_bp.get("/analytics")
@role_required("ADMIN")
def analytics():
    limit = int_arg("limit", 0) or None
    return _ok({"items": career_service.list_analytics(limit)})
