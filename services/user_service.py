# services/user_service.py
import logging

from sqlalchemy.exc import IntegrityError

from extensions import db
from models.enums import Role
from models.user import User, UserProfile, Notification
from schemas import parse, RegisterPayload, UserProfilePayload, ProgressUpdatePayload
from services.access import require_actor, require_admin
from services.errors import NotFoundError, ConflictError
from services.lifecycle import set_progress

logger = logging.getLogger(__name__)


def get_user(user_id) -> User:
    user = db.session.get(User, int(user_id)) if user_id is not None else None
    if user is None:
        raise NotFoundError("User not found")
    return user


def register_user(payload, role: Role = Role.USER) -> User:
    data = parse(RegisterPayload, payload, "Invalid registration")
    if User.query.filter_by(email=data.email).first() is not None:
        raise ConflictError("Email already registered")
    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        phone=data.phone,
        service=data.service,
        gender=data.gender,
        country=data.country,
        education_level=data.education_level,
        role=role,
    )
    user.set_password(data.password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Email already registered")
    logger.info("user %s registered (%s)", user.id, role.value)
    return user


def authenticate(email: str, password: str) -> User | None:
    user = User.query.filter_by(email=(email or "").strip().lower()).first()
    if user is None or not user.check_password(password or ""):
        return None
    return user


def get_profile(actor) -> UserProfile | None:
    require_actor(actor)
    return UserProfile.query.filter_by(user_id=actor["id"]).first()


def upsert_profile(actor, payload) -> UserProfile:
    require_actor(actor)
    data = parse(UserProfilePayload, payload, "Invalid profile")
    prof = UserProfile.query.filter_by(user_id=actor["id"]).first()
    if prof is None:
        prof = UserProfile(user_id=actor["id"])
        db.session.add(prof)
    for k, v in data.model_dump(exclude_unset=True).items():
        setattr(prof, k, v)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Profile was created concurrently, retry the update")
    return prof


def notify(user_id: int, title: str, content: str) -> Notification:
    """Queue an in-app notification; the caller commits."""
    n = Notification(user_id=user_id, title=title, content=content)
    db.session.add(n)
    return n


def list_notifications(actor, unread_only=False) -> list[Notification]:
    require_actor(actor)
    q = Notification.query.filter_by(user_id=actor["id"])
    if unread_only:
        q = q.filter_by(read=False)
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_notification_read(actor, notification_id: int) -> Notification:
    require_actor(actor)
    n = Notification.query.filter_by(id=notification_id, user_id=actor["id"]).first()
    if n is None:
        raise NotFoundError("Notification not found")
    n.read = True
    db.session.commit()
    return n


def admin_set_progress(actor, user_id: int, payload) -> User:
    require_admin(actor)
    data = parse(ProgressUpdatePayload, payload, "Invalid progress status")
    user = get_user(user_id)
    set_progress(user, data.progress_status)
    db.session.commit()
    logger.info("user %s progress set to %s by %s", user.id, user.progress_status.value, actor["id"])
    return user
