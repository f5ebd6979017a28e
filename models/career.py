# models/career.py
"""
Guest career-assessment flow.

``career_users`` is its own identity space: a guest never needs a row in
``users``. ``auth_user_id`` optionally points at the signed-in account that
claimed the guest profile.
"""
import secrets
from datetime import datetime

from extensions import db
from models.enums import AssessmentStatus

# questionnaire inputs captured when an assessment starts
ASSESSMENT_INPUT_FIELDS = (
    "education", "field", "employment", "self_employment", "sector",
    "passion", "life_passion", "life_goal", "future_title", "future_tasks",
    "required_skills", "required_courses",
)


def new_access_token() -> str:
    return secrets.token_urlsafe(32)


class CareerUser(db.Model):
    __tablename__ = "career_users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=True, index=True)
    age = db.Column(db.String(20), nullable=False)           # age range bucket, e.g. "18-24"
    gender = db.Column(db.String(20))
    location = db.Column(db.String(120))
    is_authenticated = db.Column(db.Boolean, nullable=False, default=False)
    auth_user_id = db.Column(db.Integer, unique=True, nullable=True, index=True)
    # bearer secret for the guest; returned only to whoever created the profile
    access_token = db.Column(db.String(64), unique=True, nullable=False, default=new_access_token)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assessments = db.relationship("CareerAssessment", backref="career_user",
                                  order_by="CareerAssessment.id", passive_deletes="all")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "age": self.age,
            "gender": self.gender,
            "location": self.location,
            "is_authenticated": self.is_authenticated,
            "auth_user_id": self.auth_user_id,
        }


class CareerAssessment(db.Model):
    __tablename__ = "career_assessments"

    id = db.Column(db.Integer, primary_key=True)
    career_user_id = db.Column(db.Integer, db.ForeignKey("career_users.id", ondelete="RESTRICT"),
                               nullable=False, index=True)
    status = db.Column(db.Enum(AssessmentStatus, name="assessment_status", native_enum=False, length=16),
                       nullable=False, default=AssessmentStatus.IN_PROGRESS, index=True)
    completed_at = db.Column(db.DateTime)

    education = db.Column(db.String(120), nullable=False)
    field = db.Column(db.String(120), nullable=False)
    employment = db.Column(db.String(120), nullable=False)
    self_employment = db.Column(db.String(120))
    sector = db.Column(db.String(120), nullable=False)
    passion = db.Column(db.Text, nullable=False)
    life_passion = db.Column(db.Text, nullable=False)
    life_goal = db.Column(db.Text, nullable=False)
    future_title = db.Column(db.String(200), nullable=False)
    future_tasks = db.Column(db.Text, nullable=False)
    required_skills = db.Column(db.Text, nullable=False)
    required_courses = db.Column(db.Text, nullable=False)

    # result
    suggested_career = db.Column(db.String(200))
    confidence_score = db.Column(db.Float)
    matching_factors = db.Column(db.JSON, nullable=False, default=list)

    # public sharing
    is_shared = db.Column(db.Boolean, nullable=False, default=False)
    share_code = db.Column(db.String(32), unique=True, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    feedback = db.relationship("AssessmentFeedback", backref="assessment", uselist=False, passive_deletes="all")

    def to_dict(self, public=False):
        out = {
            "id": self.id,
            "status": self.status.value,
            "suggested_career": self.suggested_career,
            "confidence_score": self.confidence_score,
            "matching_factors": list(self.matching_factors or []),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
        if public:
            # shared view: no contact details, first name only
            name = (self.career_user.name or "").split(" ")[0] if self.career_user else ""
            out["name"] = name
            return out
        out.update({f: getattr(self, f) for f in ASSESSMENT_INPUT_FIELDS})
        out.update({
            "career_user_id": self.career_user_id,
            "is_shared": self.is_shared,
            "share_code": self.share_code,
            "has_feedback": self.feedback is not None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        })
        return out


class AssessmentFeedback(db.Model):
    __tablename__ = "user_feedback"

    id = db.Column(db.Integer, primary_key=True)
    assessment_id = db.Column(db.Integer, db.ForeignKey("career_assessments.id", ondelete="RESTRICT"),
                              nullable=False, unique=True)
    rating = db.Column(db.Integer, nullable=False)
    is_relevant = db.Column(db.Boolean, nullable=False)
    would_recommend = db.Column(db.Boolean, nullable=False)
    comments = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "assessment_id": self.assessment_id,
            "rating": self.rating,
            "is_relevant": self.is_relevant,
            "would_recommend": self.would_recommend,
            "comments": self.comments,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class CareerAnalytics(db.Model):
    """Per career path aggregate; only touched through single UPDATE statements."""
    __tablename__ = "career_analytics"

    id = db.Column(db.Integer, primary_key=True)
    career_path = db.Column(db.String(200), unique=True, nullable=False)
    total_suggestions = db.Column(db.Integer, nullable=False, default=0)
    average_confidence = db.Column(db.Float, nullable=False, default=0.0)
    positive_ratings = db.Column(db.Integer, nullable=False, default=0)
    negative_ratings = db.Column(db.Integer, nullable=False, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "career_path": self.career_path,
            "total_suggestions": self.total_suggestions,
            "average_confidence": round(self.average_confidence or 0.0, 4),
            "positive_ratings": self.positive_ratings,
            "negative_ratings": self.negative_ratings,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class AnalyticsIndex(db.Model):
    """Dated platform snapshot written from the admin dashboard."""
    __tablename__ = "analytics_index"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    total_users = db.Column(db.Integer, nullable=False, default=0)
    active_users = db.Column(db.Integer, nullable=False, default=0)
    completion_rate = db.Column(db.Float, nullable=False, default=0.0)
    new_assessments = db.Column(db.Integer, nullable=False, default=0)
    completed_assessments = db.Column(db.Integer, nullable=False, default=0)
    shared_results = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "total_users": self.total_users,
            "active_users": self.active_users,
            "completion_rate": self.completion_rate,
            "new_assessments": self.new_assessments,
            "completed_assessments": self.completed_assessments,
            "shared_results": self.shared_results,
        }
