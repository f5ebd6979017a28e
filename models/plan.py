# models/plan.py
from datetime import datetime

from extensions import db
from models.enums import SubscriptionStatus, PaymentStatus


class Plan(db.Model):
    """Subscription tier sold to mentees. ``duration`` is in days."""
    __tablename__ = "plans"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Float, nullable=False)
    duration = db.Column(db.Integer, nullable=False)
    services = db.Column(db.JSON, nullable=False, default=list)
    features = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "duration": self.duration,
            "services": list(self.services or []),
            "features": list(self.features or []),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Subscription(db.Model):
    __tablename__ = "subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, index=True)
    plan_id = db.Column(db.Integer, db.ForeignKey("plans.id", ondelete="RESTRICT"),
                        nullable=False, index=True)
    status = db.Column(db.Enum(SubscriptionStatus, name="subscription_status", native_enum=False, length=16),
                       nullable=False, default=SubscriptionStatus.PENDING, index=True)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    plan = db.relationship("Plan", backref=db.backref("subscriptions", passive_deletes="all"))
    user = db.relationship("User", backref=db.backref("subscriptions", passive_deletes="all"))
    payment_proofs = db.relationship("PaymentProof", backref="subscription",
                                     order_by="PaymentProof.id", passive_deletes="all")

    __table_args__ = (
        db.CheckConstraint("end_date > start_date", name="ck_subscription_interval"),
    )

    def effective_status(self, now: datetime | None = None) -> SubscriptionStatus:
        """ACTIVE past its end_date reads as EXPIRED; nothing rewrites the column."""
        now = now or datetime.utcnow()
        if self.status == SubscriptionStatus.ACTIVE and self.end_date <= now:
            return SubscriptionStatus.EXPIRED
        return self.status

    def to_dict(self, now: datetime | None = None):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "plan_id": self.plan_id,
            "plan_name": self.plan.name if self.plan else None,
            "status": self.effective_status(now).value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "payment_proofs": [p.to_dict() for p in self.payment_proofs],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class PaymentProof(db.Model):
    __tablename__ = "payment_proofs"

    id = db.Column(db.Integer, primary_key=True)
    image_url = db.Column(db.String(512), nullable=False)
    status = db.Column(db.Enum(PaymentStatus, name="payment_status", native_enum=False, length=16),
                       nullable=False, default=PaymentStatus.PENDING, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, index=True)
    subscription_id = db.Column(db.Integer, db.ForeignKey("subscriptions.id", ondelete="RESTRICT"),
                                nullable=False, index=True)
    reviewed_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "image_url": self.image_url,
            "status": self.status.value,
            "user_id": self.user_id,
            "subscription_id": self.subscription_id,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
