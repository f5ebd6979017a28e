# services/event_service.py
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from extensions import db
from models.event import Event, UserEvent
from schemas import parse, EventPayload
from services import user_service
from services.access import require_actor, require_admin
from services.errors import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


def list_events(upcoming_after=None) -> list[dict]:
    counts = (
        db.session.query(UserEvent.event_id, func.count(UserEvent.user_id).label("n"))
        .group_by(UserEvent.event_id)
        .subquery()
    )
    q = (
        db.session.query(Event, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.event_id == Event.id)
    )
    if upcoming_after is not None:
        q = q.filter(Event.end_date >= upcoming_after)
    rows = q.order_by(Event.start_date.asc(), Event.id.asc()).all()
    return [ev.to_dict(registered_count=int(n)) for ev, n in rows]


def get_event(event_id: int) -> Event:
    ev = db.session.get(Event, event_id)
    if ev is None:
        raise NotFoundError("Event not found")
    return ev


def create_event(actor, payload) -> Event:
    require_admin(actor)
    data = parse(EventPayload, payload, "Invalid event")
    ev = Event(**data.model_dump())
    db.session.add(ev)
    db.session.commit()
    logger.info("event %s created by user %s", ev.id, actor["id"])
    return ev


def delete_event(actor, event_id: int):
    """Registrations go with the event (ON DELETE CASCADE)."""
    require_admin(actor)
    ev = get_event(event_id)
    db.session.delete(ev)
    db.session.commit()
    logger.info("event %s deleted by user %s", event_id, actor["id"])


def register(actor, event_id: int) -> UserEvent:
    require_actor(actor)
    user = user_service.get_user(actor["id"])
    ev = get_event(event_id)
    reg = UserEvent(user_id=user.id, event_id=ev.id)
    db.session.add(reg)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Already registered for this event")
    logger.info("user %s registered for event %s", user.id, ev.id)
    return reg


def unregister(actor, event_id: int):
    require_actor(actor)
    deleted = UserEvent.query.filter_by(user_id=actor["id"], event_id=event_id).delete()
    if not deleted:
        db.session.rollback()
        raise NotFoundError("Registration not found")
    db.session.commit()
    logger.info("user %s unregistered from event %s", actor["id"], event_id)


def is_registered(actor, event_id: int) -> bool:
    require_actor(actor)
    return db.session.get(UserEvent, (actor["id"], event_id)) is not None
