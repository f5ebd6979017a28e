# schemas.py
"""
Request payload schemas.

Every handler validates its JSON body through ``parse()`` so that a bad
request reports all failing fields at once.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from models.enums import ProgressStatus, Gender
from services.errors import ValidationError

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class _Payload(BaseModel):
    # NaN and Infinity never pass as prices or scores
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", allow_inf_nan=False)


def parse(schema, data, message: str = "Invalid input"):
    try:
        return schema.model_validate(data if data is not None else {})
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, message)


def _clean_list(v):
    if v is None:
        return []
    if isinstance(v, str):
        # "a, b" or multi-line text from a textarea
        return [x.strip() for x in v.replace("\n", ",").split(",") if x.strip()]
    return v


# ---------- auth ----------
class RegisterPayload(_Payload):
    first_name: str = Field(min_length=1, max_length=80)
    last_name: str = Field(min_length=1, max_length=80)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=120)
    password: str = Field(min_length=8, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=32)
    service: Optional[str] = None
    gender: Optional[Gender] = None
    country: Optional[str] = None
    education_level: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _lower(cls, v):
        return v.lower()


class LoginPayload(_Payload):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ---------- plans ----------
class PlanPayload(_Payload):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(min_length=1)
    price: float = Field(ge=0)
    duration: int = Field(ge=1)
    services: list[str] = Field(min_length=1)
    features: list[str] = Field(default_factory=list)

    @field_validator("services", "features", mode="before")
    @classmethod
    def _lists(cls, v):
        return _clean_list(v)


class PlanUpdatePayload(_Payload):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=1)
    services: Optional[list[str]] = Field(default=None, min_length=1)
    features: Optional[list[str]] = None

    @field_validator("services", "features", mode="before")
    @classmethod
    def _lists(cls, v):
        return None if v is None else _clean_list(v)


# ---------- subscriptions ----------
class SubscriptionRequestPayload(_Payload):
    plan_id: int = Field(ge=1)
    image_url: Optional[str] = Field(default=None, min_length=1, max_length=512)


class PaymentReviewPayload(_Payload):
    decision: Literal["APPROVED", "REJECTED"]

    @field_validator("decision", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


# ---------- courses ----------
class CategoryPayload(_Payload):
    name: str = Field(min_length=1, max_length=120)


class CoursePayload(_Payload):
    slug: str = Field(pattern=SLUG_PATTERN, max_length=120)
    title: str = Field(min_length=1, max_length=200)
    subtitle: str = ""
    description: str = ""
    content: str = ""
    duration: int = Field(default=0, ge=0)
    level: str = "beginner"
    category_id: int = Field(ge=1)
    is_featured: bool = False
    preview_video_url: Optional[str] = None
    objectives: list[str] = Field(default_factory=list)

    @field_validator("objectives", mode="before")
    @classmethod
    def _lists(cls, v):
        return _clean_list(v)


class LessonPayload(_Payload):
    title: str = Field(min_length=1, max_length=200)
    content: str = ""
    order: int = Field(ge=1)
    duration: int = Field(default=0, ge=0)


class EnrollPayload(_Payload):
    course_id: int = Field(ge=1)


# ---------- events ----------
class EventPayload(_Payload):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    start_date: datetime
    end_date: datetime
    location: str = Field(min_length=1, max_length=255)
    banner_url: Optional[str] = None

    @model_validator(mode="after")
    def _interval(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


# ---------- career assessment ----------
class CareerUserPayload(_Payload):
    name: str = Field(min_length=1, max_length=120)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    age: str = Field(min_length=1, max_length=20)
    gender: Optional[str] = None
    location: Optional[str] = None


class AssessmentStartPayload(_Payload):
    career_user_id: Optional[int] = Field(default=None, ge=1)
    career_user: Optional[CareerUserPayload] = None
    education: str = Field(min_length=1)
    field: str = Field(min_length=1)
    employment: str = Field(min_length=1)
    self_employment: Optional[str] = None
    sector: str = Field(min_length=1)
    passion: str = Field(min_length=1)
    life_passion: str = Field(min_length=1)
    life_goal: str = Field(min_length=1)
    future_title: str = Field(min_length=1)
    future_tasks: str = Field(min_length=1)
    required_skills: str = Field(min_length=1)
    required_courses: str = Field(min_length=1)

    @model_validator(mode="after")
    def _who(self):
        if self.career_user_id is None and self.career_user is None:
            raise ValueError("career_user_id or career_user is required")
        return self

    def inputs(self) -> dict:
        return self.model_dump(exclude={"career_user_id", "career_user"})


class AssessmentCompletePayload(_Payload):
    suggested_career: str = Field(min_length=1, max_length=200)
    confidence_score: float = Field(ge=0, le=1)
    matching_factors: list[str] = Field(default_factory=list)

    @field_validator("matching_factors", mode="before")
    @classmethod
    def _lists(cls, v):
        return _clean_list(v)


class AssessmentFeedbackPayload(_Payload):
    rating: int = Field(ge=1, le=5)
    is_relevant: bool
    would_recommend: bool
    comments: Optional[str] = None


# ---------- onboarding records ----------
class PersonalDiscoveryPayload(_Payload):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    threats: list[str] = Field(default_factory=list)
    family_aspirations: list[str] = Field(default_factory=list)
    career_aspirations: list[str] = Field(default_factory=list)
    financial_business_aspirations: list[str] = Field(default_factory=list)
    social_aspirations: list[str] = Field(default_factory=list)
    desired_position: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    courses_and_trainings: list[str] = Field(default_factory=list)
    strategies: list[str] = Field(default_factory=list)
    short_term_goals: list[str] = Field(default_factory=list)
    document_analysis: Optional[str] = None

    @field_validator(
        "strengths", "weaknesses", "opportunities", "achievements", "threats",
        "family_aspirations", "career_aspirations", "financial_business_aspirations",
        "social_aspirations", "desired_position", "required_skills",
        "courses_and_trainings", "strategies", "short_term_goals",
        mode="before",
    )
    @classmethod
    def _lists(cls, v):
        return _clean_list(v)


class ScholarshipAssessmentPayload(_Payload):
    education_level: str = Field(min_length=1)
    field_preference: str = Field(min_length=1)
    age_range: str = Field(min_length=1)
    gender: str = Field(min_length=1)
    employment_preference: str = Field(min_length=1)
    self_employment_type: Optional[str] = None
    career_sector: str = Field(min_length=1)
    unpaid_passion: str = Field(min_length=1)
    personal_passion: str = Field(min_length=1)
    life_goal: str = Field(min_length=1)
    future_title: str = Field(min_length=1)
    future_tasks: str = Field(min_length=1)
    required_skills: str = Field(min_length=1)
    desired_courses: str = Field(min_length=1)


class UserProfilePayload(_Payload):
    bio: Optional[str] = None
    avatar: Optional[str] = Field(default=None, max_length=512)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = Field(default=None, max_length=255)


class ProgressUpdatePayload(_Payload):
    progress_status: ProgressStatus


# ---------- informational content ----------
class ContactPayload(_Payload):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=120)
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)


class SiteFeedbackPayload(_Payload):
    content: str = Field(min_length=1)


class MentorPayload(_Payload):
    name: str = Field(min_length=1, max_length=120)
    title: Optional[str] = None
    bio: str = Field(min_length=1)
    expertise: list[str] = Field(default_factory=list)
    avatar: Optional[str] = None

    @field_validator("expertise", mode="before")
    @classmethod
    def _lists(cls, v):
        return _clean_list(v)


class TeamMemberPayload(_Payload):
    name: str = Field(min_length=1, max_length=120)
    role: str = Field(min_length=1, max_length=120)
    bio: str = Field(min_length=1)
    avatar: Optional[str] = None


class TestimonialPayload(_Payload):
    content: str = Field(min_length=1)
    author: str = Field(min_length=1, max_length=120)
    rating: int = Field(ge=1, le=5)


class PublicationPayload(_Payload):
    title: str = Field(min_length=1, max_length=255)
    authors: str = Field(min_length=1, max_length=255)
    abstract: str = Field(min_length=1)
    external_url: str = Field(min_length=1, max_length=512)
    published_date: datetime


class ResourcePayload(_Payload):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    file_url: str = Field(min_length=1, max_length=512)
