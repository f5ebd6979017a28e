# models/enums.py
"""
Closed status sets and their allowed transitions.

Each lifecycle column stores one of these enums; writes go through
``services.lifecycle`` which checks the tables below.
"""
import enum


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    MENTOR = "MENTOR"
    TEAM_MEMBER = "TEAM_MEMBER"


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class ProgressStatus(str, enum.Enum):
    PAYMENT_PENDING = "PAYMENT_PENDING"
    PERSONAL_DISCOVERY_PENDING = "PERSONAL_DISCOVERY_PENDING"
    CV_ALIGNMENT_PENDING = "CV_ALIGNMENT_PENDING"
    SCHOLARSHIP_MATRIX_PENDING = "SCHOLARSHIP_MATRIX_PENDING"
    ESSAYS_PENDING = "ESSAYS_PENDING"
    COMPLETED = "COMPLETED"

    @property
    def rank(self) -> int:
        return PROGRESS_ORDER.index(self)


# onboarding funnel, earliest stage first
PROGRESS_ORDER = list(ProgressStatus)


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
    PENDING = "PENDING"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AssessmentStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"


SUBSCRIPTION_TRANSITIONS = {
    SubscriptionStatus.PENDING: {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED},
    SubscriptionStatus.ACTIVE: {SubscriptionStatus.EXPIRED, SubscriptionStatus.CANCELLED},
    SubscriptionStatus.EXPIRED: set(),
    SubscriptionStatus.CANCELLED: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.APPROVED, PaymentStatus.REJECTED},
    PaymentStatus.APPROVED: set(),
    PaymentStatus.REJECTED: set(),
}

ASSESSMENT_TRANSITIONS = {
    AssessmentStatus.IN_PROGRESS: {AssessmentStatus.COMPLETED, AssessmentStatus.ABANDONED},
    AssessmentStatus.COMPLETED: set(),
    AssessmentStatus.ABANDONED: set(),
}


def enum_options(enum_cls) -> list[dict]:
    """[{value, label}] for form dropdowns."""
    return [
        {"value": m.value, "label": m.value.replace("_", " ").title()}
        for m in enum_cls
    ]
