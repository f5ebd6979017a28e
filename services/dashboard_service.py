# services/dashboard_service.py
import logging
from datetime import datetime

from sqlalchemy import func

from extensions import db
from models.career import CareerAssessment, AnalyticsIndex
from models.course import Enrollment
from models.enums import AssessmentStatus, PaymentStatus, SubscriptionStatus
from models.plan import Subscription, PaymentProof
from models.user import User
from services.access import require_admin

logger = logging.getLogger(__name__)


def collect_stats(now: datetime | None = None) -> dict:
    now = now or datetime.utcnow()
    total_users = db.session.query(func.count(User.id)).scalar() or 0
    # "active" = holds a subscription that is ACTIVE and not past its end_date
    active_users = (
        db.session.query(func.count(func.distinct(Subscription.user_id)))
        .filter(Subscription.status == SubscriptionStatus.ACTIVE, Subscription.end_date > now)
        .scalar() or 0
    )
    pending_proofs = PaymentProof.query.filter_by(status=PaymentStatus.PENDING).count()
    enrollments = db.session.query(func.count(Enrollment.id)).scalar() or 0
    completed_enrollments = Enrollment.query.filter(Enrollment.completed_at.isnot(None)).count()

    assessments = db.session.query(func.count(CareerAssessment.id)).scalar() or 0
    completed = CareerAssessment.query.filter_by(status=AssessmentStatus.COMPLETED).count()
    shared = CareerAssessment.query.filter_by(is_shared=True).count()

    return {
        "total_users": total_users,
        "active_users": active_users,
        "pending_payment_proofs": pending_proofs,
        "enrollments": enrollments,
        "completed_enrollments": completed_enrollments,
        "new_assessments": assessments,
        "completed_assessments": completed,
        "shared_results": shared,
        "completion_rate": round(completed / assessments, 4) if assessments else 0.0,
    }


def dashboard_stats(actor, now: datetime | None = None) -> dict:
    require_admin(actor)
    return collect_stats(now)


def take_snapshot(actor, now: datetime | None = None) -> AnalyticsIndex:
    require_admin(actor)
    now = now or datetime.utcnow()
    s = collect_stats(now)
    row = AnalyticsIndex(
        date=now,
        total_users=s["total_users"],
        active_users=s["active_users"],
        completion_rate=s["completion_rate"],
        new_assessments=s["new_assessments"],
        completed_assessments=s["completed_assessments"],
        shared_results=s["shared_results"],
    )
    db.session.add(row)
    db.session.commit()
    logger.info("analytics snapshot %s taken by user %s", row.id, actor["id"])
    return row


def list_snapshots(actor, limit: int = 30) -> list[AnalyticsIndex]:
    require_admin(actor)
    return AnalyticsIndex.query.order_by(AnalyticsIndex.date.desc()).limit(limit).all()
