# services/lifecycle.py
"""
Transition guards for every status column.

Nothing outside this module assigns a lifecycle enum directly: callers ask
``transition()`` which either applies the move or raises ConflictError.
``claim_transition()`` does the same check at the store for rows that
concurrent requests may move.
"""
import logging

from extensions import db
from models.enums import (
    ProgressStatus, SubscriptionStatus, PaymentStatus, AssessmentStatus,
    SUBSCRIPTION_TRANSITIONS, PAYMENT_TRANSITIONS, ASSESSMENT_TRANSITIONS,
)
from services.errors import ConflictError

logger = logging.getLogger(__name__)

_TABLES = {
    SubscriptionStatus: SUBSCRIPTION_TRANSITIONS,
    PaymentStatus: PAYMENT_TRANSITIONS,
    AssessmentStatus: ASSESSMENT_TRANSITIONS,
}


def can_transition(current, target) -> bool:
    table = _TABLES[type(target)]
    return target in table.get(current, set())


def transition(obj, target, attr: str = "status"):
    """Move ``obj.<attr>`` to ``target`` or raise ConflictError."""
    current = getattr(obj, attr)
    if not can_transition(current, target):
        raise ConflictError(
            f"{type(obj).__name__} cannot move from {current.value} to {target.value}"
        )
    setattr(obj, attr, target)
    logger.debug("%s #%s %s: %s -> %s", type(obj).__name__, getattr(obj, "id", None),
                 attr, current.value, target.value)
    return obj


def claim_transition(obj, target, attr: str = "status", **values):
    """
    Store-level ``transition()``: one ``UPDATE ... WHERE id = :id AND <attr> = :current``.
    Raises ConflictError when the move is illegal or another writer moved the row first.
    ``values`` are written in the same statement. ``obj`` is expired afterwards.
    """
    model, oid = type(obj), obj.id
    current = getattr(obj, attr)
    if not can_transition(current, target):
        raise ConflictError(
            f"{model.__name__} cannot move from {current.value} to {target.value}"
        )
    claimed = (
        model.query
        .filter(model.id == oid, getattr(model, attr) == current)
        .update({attr: target, **values}, synchronize_session=False)
    )
    if claimed != 1:
        db.session.rollback()
        raise ConflictError(f"{model.__name__} #{oid} was changed concurrently")
    db.session.expire(obj)
    logger.debug("%s #%s %s: %s -> %s (claimed)", model.__name__, oid, attr, current.value, target.value)
    return obj


def advance_progress(user, target: ProgressStatus) -> bool:
    """
    Forward-only move of the onboarding gate.
    Returns False (and changes nothing) when the user is already at or past ``target``.
    """
    if user.progress_status is not None and user.progress_status.rank >= target.rank:
        return False
    user.progress_status = target
    return True


def set_progress(user, target: ProgressStatus):
    """Explicit admin move; going backwards is refused."""
    if user.progress_status.rank > target.rank:
        raise ConflictError(
            f"progress cannot move back from {user.progress_status.value} to {target.value}"
        )
    user.progress_status = target
    return user
