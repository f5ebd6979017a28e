# services/career_service.py
"""
Guest career-assessment flow: career user -> assessment -> result -> share / feedback.

Career users are independent of ``users``; the whole flow runs without any
account. Aggregates in ``career_analytics`` are only changed with single
UPDATE statements so concurrent completions never lose an increment.
"""
import logging
import secrets
import string
from collections import Counter
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.career import CareerUser, CareerAssessment, AssessmentFeedback, CareerAnalytics
from models.enums import AssessmentStatus
from schemas import (
    parse, CareerUserPayload, AssessmentStartPayload,
    AssessmentCompletePayload, AssessmentFeedbackPayload,
)
from services.errors import NotFoundError, ConflictError, ShareCodeTaken
from services.access import is_admin
from services.lifecycle import claim_transition

logger = logging.getLogger(__name__)

SHARE_CODE_ALPHABET = string.ascii_uppercase + string.digits
POSITIVE_RATING = 4     # rating >= 4
NEGATIVE_RATING = 2     # rating <= 2


# ---------- helpers ----------
def generate_share_code(length: int = 10) -> str:
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(length))


def _bump_analytics(career_path: str, values: dict, seed: dict):
    """
    Apply ``values`` (column -> SQL expression) to the path's row in one UPDATE.
    When the row does not exist yet it is inserted with ``seed``; losing that
    insert race falls back to the UPDATE.
    """
    stmt = (
        update(CareerAnalytics)
        .where(CareerAnalytics.career_path == career_path)
        .values(updated_at=datetime.utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    if db.session.execute(stmt).rowcount:
        return
    try:
        with db.session.begin_nested():
            db.session.add(CareerAnalytics(career_path=career_path, **seed))
    except IntegrityError:
        db.session.execute(stmt)


def _record_suggestion(career_path: str, score: float):
    A = CareerAnalytics
    _bump_analytics(
        career_path,
        {
            # both SET expressions read the pre-update row
            "average_confidence": (A.average_confidence * A.total_suggestions + score) / (A.total_suggestions + 1),
            "total_suggestions": A.total_suggestions + 1,
        },
        {"total_suggestions": 1, "average_confidence": score},
    )


def _record_rating(career_path: str, rating: int):
    A = CareerAnalytics
    if rating >= POSITIVE_RATING:
        col = "positive_ratings"
    elif rating <= NEGATIVE_RATING:
        col = "negative_ratings"
    else:
        return
    _bump_analytics(
        career_path,
        {col: getattr(A, col) + 1},
        {"total_suggestions": 0, "average_confidence": 0.0, col: 1},
    )


# ---------- access ----------
def _can_access(cu: CareerUser, token: str | None, actor) -> bool:
    """The guest's access token, the linked signed-in account, or an admin."""
    if is_admin(actor):
        return True
    if actor and cu.auth_user_id is not None and actor.get("id") == cu.auth_user_id:
        return True
    return bool(token) and secrets.compare_digest(str(token).encode(), cu.access_token.encode())


# ---------- career users ----------
def create_career_user(payload, actor=None) -> CareerUser:
    """Guest profile; a signed-in actor gets their existing profile back."""
    data = parse(CareerUserPayload, payload, "Invalid career user")
    if actor and actor.get("id") is not None:
        existing = CareerUser.query.filter_by(auth_user_id=actor["id"]).first()
        if existing is not None:
            return existing
    cu = CareerUser(**data.model_dump())
    if actor and actor.get("id") is not None:
        cu.is_authenticated = True
        cu.auth_user_id = actor["id"]
    db.session.add(cu)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Career profile already exists for this account")
    return cu


def get_career_user(career_user_id: int, token: str | None = None, actor=None) -> CareerUser:
    # a wrong token reads the same as a missing row so ids cannot be enumerated
    cu = db.session.get(CareerUser, career_user_id)
    if cu is None or not _can_access(cu, token, actor):
        raise NotFoundError("Career user not found")
    return cu


# ---------- assessments ----------
def get_assessment(assessment_id: int, token: str | None = None, actor=None) -> CareerAssessment:
    a = db.session.get(CareerAssessment, assessment_id)
    if a is None or not _can_access(a.career_user, token, actor):
        raise NotFoundError("Assessment not found")
    return a


def start_assessment(payload, actor=None, token: str | None = None) -> CareerAssessment:
    """
    Start for an existing career user (``career_user_id`` plus its access token)
    or for a new guest profile described inline.
    """
    data = parse(AssessmentStartPayload, payload, "Invalid assessment")
    if data.career_user_id is not None:
        cu = get_career_user(data.career_user_id, token=token, actor=actor)
    else:
        cu = create_career_user(data.career_user.model_dump(), actor=actor)

    a = CareerAssessment(career_user_id=cu.id, status=AssessmentStatus.IN_PROGRESS, **data.inputs())
    db.session.add(a)
    db.session.commit()
    logger.info("assessment %s started for career user %s", a.id, cu.id)
    return a


def complete_assessment(assessment_id: int, payload, now: datetime | None = None,
                        token: str | None = None, actor=None) -> CareerAssessment:
    a = get_assessment(assessment_id, token=token, actor=actor)
    data = parse(AssessmentCompletePayload, payload, "Invalid assessment result")

    now = now or datetime.utcnow()
    # only the request that moves the row out of IN_PROGRESS feeds the analytics
    claim_transition(
        a, AssessmentStatus.COMPLETED,
        suggested_career=data.suggested_career,
        confidence_score=data.confidence_score,
        matching_factors=data.matching_factors,
        completed_at=now,
        updated_at=now,
    )
    _record_suggestion(data.suggested_career, data.confidence_score)
    db.session.commit()
    logger.info("assessment %s completed: %s (%.2f)", a.id, a.suggested_career, a.confidence_score)
    return a


def abandon_assessment(assessment_id: int, token: str | None = None, actor=None) -> CareerAssessment:
    a = get_assessment(assessment_id, token=token, actor=actor)
    claim_transition(a, AssessmentStatus.ABANDONED, updated_at=datetime.utcnow())
    db.session.commit()
    logger.info("assessment %s abandoned", a.id)
    return a


def share_assessment(assessment_id: int, code: str | None = None, code_length: int = 10,
                     token: str | None = None, actor=None) -> str:
    """
    Publish a COMPLETED assessment under a share code. Sharing twice returns the
    first code; a code already taken by another assessment raises ConflictError.
    """
    a = get_assessment(assessment_id, token=token, actor=actor)
    if a.status != AssessmentStatus.COMPLETED:
        raise ConflictError("Only completed assessments can be shared")
    if a.is_shared and a.share_code:
        return a.share_code

    a.share_code = (code or generate_share_code(code_length)).strip().upper()
    a.is_shared = True
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ShareCodeTaken()
    logger.info("assessment %s shared as %s", a.id, a.share_code)
    return a.share_code


def get_shared_assessment(code: str) -> CareerAssessment:
    a = CareerAssessment.query.filter_by(share_code=(code or "").strip().upper(), is_shared=True).first()
    if a is None:
        raise NotFoundError("Shared result not found")
    return a


def submit_feedback(assessment_id: int, payload, token: str | None = None, actor=None) -> AssessmentFeedback:
    a = get_assessment(assessment_id, token=token, actor=actor)
    if a.status != AssessmentStatus.COMPLETED:
        raise ConflictError("Feedback is only accepted for completed assessments")
    data = parse(AssessmentFeedbackPayload, payload, "Invalid feedback")

    fb = AssessmentFeedback(assessment_id=a.id, **data.model_dump())
    db.session.add(fb)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Feedback already submitted for this assessment")

    _record_rating(a.suggested_career, data.rating)
    db.session.commit()
    return fb


# ---------- analytics ----------
def list_analytics(limit: int | None = None) -> list[dict]:
    """Per-path aggregates with demographic spreads of the completed assessments."""
    q = CareerAnalytics.query.order_by(CareerAnalytics.total_suggestions.desc(), CareerAnalytics.career_path.asc())
    if limit:
        q = q.limit(limit)
    rows = q.all()
    if not rows:
        return []

    paths = [r.career_path for r in rows]
    completed = (
        db.session.query(CareerAssessment.suggested_career, CareerAssessment.field,
                         CareerUser.age, CareerUser.gender)
        .join(CareerUser, CareerAssessment.career_user_id == CareerUser.id)
        .filter(CareerAssessment.status == AssessmentStatus.COMPLETED,
                CareerAssessment.suggested_career.in_(paths))
        .all()
    )
    spread = {p: {"age": Counter(), "gender": Counter(), "field": Counter()} for p in paths}
    for path, field, age, gender in completed:
        s = spread[path]
        s["age"][age or "unknown"] += 1
        s["gender"][gender or "unknown"] += 1
        s["field"][field or "unknown"] += 1

    out = []
    for r in rows:
        d = r.to_dict()
        s = spread[r.career_path]
        d["age_distribution"] = dict(s["age"])
        d["gender_distribution"] = dict(s["gender"])
        d["field_distribution"] = dict(s["field"])
        out.append(d)
    return out
