# tests/conftest.py
from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from config import TestConfig
from extensions import db
from models.course import Category, Course, Lesson
from models.enums import Role
from models.event import Event
from models.plan import Plan
from models.user import User


@pytest.fixture
def app(tmp_path):
    # a file database so worker threads share the same schema
    class _Cfg(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{(tmp_path / 'test.sqlite3').as_posix()}"
        UPLOAD_ROOT = str(tmp_path / "media")

    app = create_app(_Cfg)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def actor_of(user: User) -> dict:
    return {"id": user.id, "role": user.role.value}


@pytest.fixture
def as_actor():
    return actor_of


@pytest.fixture
def make_user():
    """Factory; call inside an app context."""
    counter = {"n": 0}

    def _make(email=None, role=Role.USER, password="password123", **kw):
        counter["n"] += 1
        u = User(
            first_name=kw.pop("first_name", "Ada"),
            last_name=kw.pop("last_name", "Lovelace"),
            email=email or f"user{counter['n']}@example.com",
            role=role,
            **kw,
        )
        u.set_password(password)
        db.session.add(u)
        db.session.commit()
        return u

    return _make


@pytest.fixture
def make_plan():
    def _make(name="Basic", price=49.99, duration=30, services=None, features=None):
        p = Plan(name=name, description=f"{name} plan", price=price, duration=duration,
                 services=services or ["mentorship"], features=features or [])
        db.session.add(p)
        db.session.commit()
        return p

    return _make


@pytest.fixture
def make_course():
    counter = {"n": 0}

    def _make(lessons=3, slug=None):
        counter["n"] += 1
        cat = Category.query.filter_by(name="Careers").first()
        if cat is None:
            cat = Category(name="Careers")
            db.session.add(cat)
        c = Course(slug=slug or f"course-{counter['n']}", title=f"Course {counter['n']}", category=cat)
        for i in range(1, lessons + 1):
            c.lessons.append(Lesson(title=f"Lesson {i}", order=i))
        db.session.add(c)
        db.session.commit()
        return c

    return _make


@pytest.fixture
def make_event():
    def _make(title="Career fair", days_ahead=7):
        start = datetime.utcnow() + timedelta(days=days_ahead)
        ev = Event(title=title, description="Meet mentors", start_date=start,
                   end_date=start + timedelta(hours=3), location="Online")
        db.session.add(ev)
        db.session.commit()
        return ev

    return _make


@pytest.fixture
def auth_headers(app):
    """auth_headers(user) -> {"Authorization": "Bearer ..."}; call inside an app context."""
    def _headers(user: User) -> dict:
        role = user.role.value
        token = create_access_token(identity=str(user.id), additional_claims={"role": role, "roles": [role]})
        return {"Authorization": f"Bearer {token}"}

    return _headers
