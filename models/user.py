# models/user.py
from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db
from models.enums import Role, Gender, ProgressStatus


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(32), nullable=True)
    service = db.Column(db.String(120), nullable=True)       # service the user signed up for
    gender = db.Column(db.Enum(Gender, name="gender", native_enum=False, length=16), nullable=True)
    country = db.Column(db.String(80), nullable=True)
    education_level = db.Column(db.String(80), nullable=True)

    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(Role, name="role", native_enum=False, length=32),
                     nullable=False, default=Role.USER)
    # onboarding funnel gate, only ever moves forward (services.lifecycle)
    progress_status = db.Column(
        db.Enum(ProgressStatus, name="progress_status", native_enum=False, length=40),
        nullable=False, default=ProgressStatus.PAYMENT_PENDING,
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    profile = db.relationship("UserProfile", backref="user", uselist=False, passive_deletes="all")

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "service": self.service,
            "gender": self.gender.value if self.gender else None,
            "country": self.country,
            "education_level": self.education_level,
            "role": self.role.value,
            "progress_status": self.progress_status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class UserProfile(db.Model):
    __tablename__ = "user_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, unique=True)
    bio = db.Column(db.Text)
    avatar = db.Column(db.String(512))
    phone_number = db.Column(db.String(32))
    address = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "bio": self.bio,
            "avatar": self.avatar,
            "phone_number": self.phone_number,
            "address": self.address,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "read": self.read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
