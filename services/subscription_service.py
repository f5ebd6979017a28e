# services/subscription_service.py
"""
Subscription requests and the admin payment-proof review.

Flow:
  user uploads proof -> Subscription PENDING + PaymentProof PENDING
  admin APPROVED     -> proof APPROVED, subscription ACTIVE, onboarding unlocked
  admin REJECTED     -> proof REJECTED, subscription CANCELLED

Expiry is never written: an ACTIVE row past its end_date reads as EXPIRED
(Subscription.effective_status).
"""
import logging
from datetime import datetime, timedelta

from extensions import db
from models.enums import SubscriptionStatus, PaymentStatus, ProgressStatus
from models.plan import Subscription, PaymentProof
from models.user import User
from schemas import parse, PaymentReviewPayload
from services import plan_service, user_service
from services.access import require_actor, require_admin, is_admin
from services.errors import ValidationError, NotFoundError, ConflictError, AuthorizationError
from services.lifecycle import can_transition, transition, advance_progress

logger = logging.getLogger(__name__)


def request_subscription(actor, plan_id: int, proof_url: str, now: datetime | None = None) -> Subscription:
    require_actor(actor)
    if not proof_url:
        raise ValidationError("Payment proof is required",
                              details=[{"field": "proof", "message": "upload an image of the payment"}])
    user = user_service.get_user(actor["id"])
    plan = plan_service.get_plan(plan_id)

    now = now or datetime.utcnow()
    sub = Subscription(
        user_id=user.id,
        plan_id=plan.id,
        status=SubscriptionStatus.PENDING,
        start_date=now,
        end_date=now + timedelta(days=plan.duration),
    )
    db.session.add(sub)
    db.session.flush()  # need sub.id for the proof

    proof = PaymentProof(
        image_url=proof_url,
        status=PaymentStatus.PENDING,
        user_id=user.id,
        subscription_id=sub.id,
    )
    db.session.add(proof)
    db.session.commit()
    logger.info("subscription %s requested by user %s for plan %s", sub.id, user.id, plan.id)
    return sub


def review_payment(actor, payment_proof_id: int, decision, now: datetime | None = None) -> PaymentProof:
    """
    Admin decision on a PENDING proof. A proof that was already reviewed (or whose
    subscription left PENDING) is refused with ConflictError and nothing changes.
    """
    require_admin(actor)
    data = parse(PaymentReviewPayload, {"decision": decision}, "Invalid review decision")
    target = PaymentStatus(data.decision)

    proof = db.session.get(PaymentProof, payment_proof_id)
    if proof is None:
        raise NotFoundError("Payment proof not found")
    sub = proof.subscription
    sub_target = SubscriptionStatus.ACTIVE if target == PaymentStatus.APPROVED else SubscriptionStatus.CANCELLED

    if not can_transition(proof.status, target):
        raise ConflictError(f"Payment proof already {proof.status.value}")
    if not can_transition(sub.status, sub_target) or sub.status != SubscriptionStatus.PENDING:
        raise ConflictError(f"Subscription is {sub.status.value}, only PENDING subscriptions can be reviewed")

    now = now or datetime.utcnow()
    # claim the proof at the store so two concurrent reviews cannot both win
    claimed = (
        PaymentProof.query
        .filter(PaymentProof.id == proof.id, PaymentProof.status == PaymentStatus.PENDING)
        .update({"status": target, "reviewed_by": actor["id"], "reviewed_at": now},
                synchronize_session=False)
    )
    if claimed != 1:
        db.session.rollback()
        raise ConflictError("Payment proof was reviewed concurrently")
    db.session.expire(proof)

    transition(sub, sub_target)
    owner = sub.user
    if target == PaymentStatus.APPROVED:
        advance_progress(owner, ProgressStatus.PERSONAL_DISCOVERY_PENDING)
        user_service.notify(owner.id, "Subscription approved",
                            f"Your payment for the {sub.plan.name} plan was approved. "
                            f"Your subscription is active until {sub.end_date.date().isoformat()}.")
    else:
        user_service.notify(owner.id, "Payment proof rejected",
                            f"Your payment for the {sub.plan.name} plan could not be verified. "
                            "Please submit a new subscription request.")
    db.session.commit()
    logger.info("payment proof %s %s by admin %s (subscription %s -> %s)",
                proof.id, target.value, actor["id"], sub.id, sub_target.value)
    return proof


def cancel_subscription(actor, subscription_id: int) -> Subscription:
    """Owner (or admin) withdraws a request that is still PENDING."""
    require_actor(actor)
    sub = db.session.get(Subscription, subscription_id)
    if sub is None:
        raise NotFoundError("Subscription not found")
    if sub.user_id != actor["id"] and not is_admin(actor):
        raise AuthorizationError("Not your subscription")
    if sub.status != SubscriptionStatus.PENDING:
        raise ConflictError(f"Subscription is {sub.status.value}, only PENDING requests can be withdrawn")
    transition(sub, SubscriptionStatus.CANCELLED)
    for p in sub.payment_proofs:
        if p.status == PaymentStatus.PENDING:
            transition(p, PaymentStatus.REJECTED)
    db.session.commit()
    return sub


def list_user_subscriptions(actor) -> list[Subscription]:
    require_actor(actor)
    return (
        Subscription.query
        .filter_by(user_id=actor["id"])
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .all()
    )


def current_subscription(user_id: int, now: datetime | None = None) -> Subscription | None:
    """Latest subscription that is ACTIVE right now (expiry applied)."""
    now = now or datetime.utcnow()
    return (
        Subscription.query
        .filter(Subscription.user_id == user_id,
                Subscription.status == SubscriptionStatus.ACTIVE,
                Subscription.end_date > now)
        .order_by(Subscription.end_date.desc())
        .first()
    )


def list_payment_proofs(actor, status: str | None = None) -> list[dict]:
    require_admin(actor)
    q = db.session.query(PaymentProof, User).join(User, PaymentProof.user_id == User.id)
    if status:
        try:
            q = q.filter(PaymentProof.status == PaymentStatus(status.upper()))
        except ValueError:
            raise ValidationError("Invalid status filter",
                                  details=[{"field": "status", "message": f"unknown status '{status}'"}])
    rows = q.order_by(PaymentProof.created_at.desc(), PaymentProof.id.desc()).all()

    items = []
    for proof, user in rows:
        d = proof.to_dict()
        d["user_email"] = user.email
        d["user_name"] = user.full_name
        d["plan_name"] = proof.subscription.plan.name
        d["subscription_status"] = proof.subscription.effective_status().value
        items.append(d)
    return items
