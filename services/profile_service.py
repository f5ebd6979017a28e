# services/profile_service.py
"""
Onboarding worksheets. Each record is one-per-user; the first submission
moves the owner's progress_status forward:

    PersonalDiscovery      -> CV_ALIGNMENT_PENDING
    CV                     -> SCHOLARSHIP_MATRIX_PENDING
    ScholarshipAssessment  -> ESSAYS_PENDING
"""
import logging

from sqlalchemy.exc import IntegrityError

from extensions import db
from models.enums import ProgressStatus
from models.profile import PersonalDiscovery, ScholarshipAssessment, CV
from schemas import parse, PersonalDiscoveryPayload, ScholarshipAssessmentPayload
from services import user_service
from services.access import require_actor
from services.errors import NotFoundError, ConflictError, ValidationError
from services.lifecycle import advance_progress

logger = logging.getLogger(__name__)


def _get_own(model, actor, label):
    require_actor(actor)
    row = model.query.filter_by(user_id=actor["id"]).first()
    if row is None:
        raise NotFoundError(f"{label} not found")
    return row


def _create_own(model, actor, fields: dict, stage: ProgressStatus, label: str):
    require_actor(actor)
    user = user_service.get_user(actor["id"])
    row = model(user_id=user.id, **fields)
    db.session.add(row)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"{label} already exists, update it instead")
    if advance_progress(user, stage):
        logger.info("user %s progress -> %s", user.id, stage.value)
    db.session.commit()
    return row


# ---------- personal discovery ----------
def get_discovery(actor) -> PersonalDiscovery:
    return _get_own(PersonalDiscovery, actor, "Personal discovery")


def create_discovery(actor, payload) -> PersonalDiscovery:
    data = parse(PersonalDiscoveryPayload, payload, "Invalid personal discovery")
    return _create_own(PersonalDiscovery, actor, data.model_dump(),
                       ProgressStatus.CV_ALIGNMENT_PENDING, "Personal discovery")


def update_discovery(actor, payload) -> PersonalDiscovery:
    row = get_discovery(actor)
    data = parse(PersonalDiscoveryPayload, payload, "Invalid personal discovery")
    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(row, k, v)
    db.session.commit()
    return row


# ---------- scholarship assessment ----------
def get_scholarship(actor) -> ScholarshipAssessment:
    return _get_own(ScholarshipAssessment, actor, "Scholarship assessment")


def create_scholarship(actor, payload) -> ScholarshipAssessment:
    data = parse(ScholarshipAssessmentPayload, payload, "Invalid scholarship assessment")
    return _create_own(ScholarshipAssessment, actor, data.model_dump(),
                       ProgressStatus.ESSAYS_PENDING, "Scholarship assessment")


def update_scholarship(actor, payload) -> ScholarshipAssessment:
    row = get_scholarship(actor)
    data = parse(ScholarshipAssessmentPayload, payload, "Invalid scholarship assessment")
    for k, v in data.model_dump().items():
        setattr(row, k, v)
    db.session.commit()
    return row


# ---------- CV ----------
def get_cv(actor) -> CV:
    return _get_own(CV, actor, "CV")


def save_cv(actor, file_name: str, file_url: str) -> CV:
    """First upload creates the CV (and advances progress); later uploads replace the file."""
    require_actor(actor)
    if not file_url:
        raise ValidationError("CV file is required", details=[{"field": "file", "message": "no file uploaded"}])
    row = CV.query.filter_by(user_id=actor["id"]).first()
    if row is None:
        return _create_own(CV, actor, {"file_name": file_name, "file_url": file_url},
                           ProgressStatus.SCHOLARSHIP_MATRIX_PENDING, "CV")
    row.file_name = file_name
    row.file_url = file_url
    row.analysis_result = None
    db.session.commit()
    return row
