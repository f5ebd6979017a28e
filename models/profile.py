# models/profile.py
"""
One-per-user onboarding records. Each row advances the owner's
progress_status when first submitted (services.profile_service).
"""
from datetime import datetime

from extensions import db

# list-valued fields of the personal discovery (SWOT + aspirations) worksheet
DISCOVERY_FIELDS = (
    "strengths", "weaknesses", "opportunities", "achievements", "threats",
    "family_aspirations", "career_aspirations", "financial_business_aspirations",
    "social_aspirations", "desired_position", "required_skills",
    "courses_and_trainings", "strategies", "short_term_goals",
)

SCHOLARSHIP_FIELDS = (
    "education_level", "field_preference", "age_range", "gender",
    "employment_preference", "self_employment_type", "career_sector",
    "unpaid_passion", "personal_passion", "life_goal", "future_title",
    "future_tasks", "required_skills", "desired_courses",
)


class PersonalDiscovery(db.Model):
    __tablename__ = "personal_discoveries"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, unique=True)

    strengths = db.Column(db.JSON, nullable=False, default=list)
    weaknesses = db.Column(db.JSON, nullable=False, default=list)
    opportunities = db.Column(db.JSON, nullable=False, default=list)
    achievements = db.Column(db.JSON, nullable=False, default=list)
    threats = db.Column(db.JSON, nullable=False, default=list)
    family_aspirations = db.Column(db.JSON, nullable=False, default=list)
    career_aspirations = db.Column(db.JSON, nullable=False, default=list)
    financial_business_aspirations = db.Column(db.JSON, nullable=False, default=list)
    social_aspirations = db.Column(db.JSON, nullable=False, default=list)
    desired_position = db.Column(db.JSON, nullable=False, default=list)
    required_skills = db.Column(db.JSON, nullable=False, default=list)
    courses_and_trainings = db.Column(db.JSON, nullable=False, default=list)
    strategies = db.Column(db.JSON, nullable=False, default=list)
    short_term_goals = db.Column(db.JSON, nullable=False, default=list)
    document_analysis = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        out = {"id": self.id, "user_id": self.user_id}
        for f in DISCOVERY_FIELDS:
            out[f] = list(getattr(self, f) or [])
        out["document_analysis"] = self.document_analysis
        out["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return out


class ScholarshipAssessment(db.Model):
    __tablename__ = "scholarship_assessments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, unique=True)

    education_level = db.Column(db.String(120), nullable=False)
    field_preference = db.Column(db.String(120), nullable=False)
    age_range = db.Column(db.String(40), nullable=False)
    gender = db.Column(db.String(20), nullable=False)
    employment_preference = db.Column(db.String(120), nullable=False)
    self_employment_type = db.Column(db.String(120))
    career_sector = db.Column(db.String(120), nullable=False)
    unpaid_passion = db.Column(db.Text, nullable=False)
    personal_passion = db.Column(db.Text, nullable=False)
    life_goal = db.Column(db.Text, nullable=False)
    future_title = db.Column(db.String(200), nullable=False)
    future_tasks = db.Column(db.Text, nullable=False)
    required_skills = db.Column(db.Text, nullable=False)
    desired_courses = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        out = {"id": self.id, "user_id": self.user_id}
        for f in SCHOLARSHIP_FIELDS:
            out[f] = getattr(self, f)
        out["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return out


class CV(db.Model):
    __tablename__ = "cvs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, unique=True)
    file_name = db.Column(db.String(255), nullable=False)
    file_url = db.Column(db.String(512), nullable=False)
    analysis_result = db.Column(db.Text)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "file_name": self.file_name,
            "file_url": self.file_url,
            "analysis_result": self.analysis_result,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
        }
