# services/plan_service.py
import logging
import math

from sqlalchemy.exc import IntegrityError

from extensions import db
from models.plan import Plan, Subscription
from schemas import parse, PlanPayload, PlanUpdatePayload
from services.access import require_admin
from services.errors import ValidationError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)


def list_plans(page: int = 1, page_size: int = 10) -> dict:
    """One page of plans, newest first, with pagination totals."""
    details = []
    if page < 1:
        details.append({"field": "page", "message": "must be a positive integer"})
    if page_size < 1:
        details.append({"field": "page_size", "message": "must be a positive integer"})
    if details:
        raise ValidationError("Invalid pagination", details=details)

    total = Plan.query.count()
    plans = (
        Plan.query
        .order_by(Plan.created_at.desc(), Plan.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {
        "plans": [p.to_dict() for p in plans],
        "pagination": {
            "total": total,
            "page_count": math.ceil(total / page_size),
            "current_page": page,
            "page_size": page_size,
        },
    }


def get_plan(plan_id: int) -> Plan:
    plan = db.session.get(Plan, plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")
    return plan


def create_plan(actor, payload) -> Plan:
    require_admin(actor)
    data = parse(PlanPayload, payload, "Invalid plan")
    plan = Plan(**data.model_dump())
    db.session.add(plan)
    db.session.commit()
    logger.info("plan %s created by user %s", plan.id, actor["id"])
    return plan


def update_plan(actor, plan_id: int, payload) -> Plan:
    require_admin(actor)
    plan = get_plan(plan_id)
    data = parse(PlanUpdatePayload, payload, "Invalid plan")
    # only keys present in the body are touched
    for k, v in data.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(plan, k, v)
    db.session.commit()
    return plan


def delete_plan(actor, plan_id: int):
    require_admin(actor)
    plan = get_plan(plan_id)
    if Subscription.query.filter_by(plan_id=plan.id).first() is not None:
        raise ConflictError("Plan has subscriptions and cannot be deleted")
    db.session.delete(plan)
    try:
        db.session.commit()
    except IntegrityError:
        # a subscription landed between the check and the delete
        db.session.rollback()
        raise ConflictError("Plan has subscriptions and cannot be deleted")
    logger.info("plan %s deleted by user %s", plan_id, actor["id"])
