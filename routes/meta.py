# routes/meta.py
from flask import Blueprint, jsonify

from models.enums import (
    Role, Gender, ProgressStatus, SubscriptionStatus, PaymentStatus, AssessmentStatus, enum_options,
)

meta_bp = Blueprint("meta", __name__, url_prefix="/api")

# single source for form dropdowns; enum-backed lists come from the models
OPTIONS = {
    "roles": enum_options(Role),
    "genders": enum_options(Gender),
    "progress_statuses": enum_options(ProgressStatus),
    "subscription_statuses": enum_options(SubscriptionStatus),
    "payment_statuses": enum_options(PaymentStatus),
    "assessment_statuses": enum_options(AssessmentStatus),
    "course_levels": [
        {"value": "beginner", "label": "Beginner"},
        {"value": "intermediate", "label": "Intermediate"},
        {"value": "advanced", "label": "Advanced"},
    ],
    "education_levels": [
        {"value": "high_school", "label": "High school"},
        {"value": "diploma", "label": "Diploma"},
        {"value": "bachelor", "label": "Bachelor"},
        {"value": "master", "label": "Master"},
        {"value": "phd", "label": "PhD"},
    ],
    "age_ranges": [
        {"value": "under-18", "label": "Under 18"},
        {"value": "18-24", "label": "18-24"},
        {"value": "25-34", "label": "25-34"},
        {"value": "35-44", "label": "35-44"},
        {"value": "45+", "label": "45 and over"},
    ],
}


@meta_bp.get("/meta/options")
def get_options():
    return jsonify(OPTIONS)
