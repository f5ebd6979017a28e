# tests/test_dashboard.py
from datetime import datetime, timedelta

import pytest

from extensions import db
from models.enums import Role, SubscriptionStatus
from models.plan import Subscription
from services import career_service, dashboard_service
from services.errors import AuthorizationError

INPUTS = {
    "education": "Master", "field": "Health", "employment": "Self-employed",
    "sector": "Care", "passion": "Coaching", "life_passion": "Running",
    "life_goal": "Open a clinic", "future_title": "Director", "future_tasks": "Plan services",
    "required_skills": "Finance", "required_courses": "MPH",
}


def _assessment(done=False, shared=False):
    a = career_service.start_assessment({**INPUTS, "career_user": {"name": "Lin", "age": "25-34"}})
    if done:
        token = a.career_user.access_token
        career_service.complete_assessment(a.id, {"suggested_career": "Nurse", "confidence_score": 0.5}, token=token)
        if shared:
            career_service.share_assessment(a.id, token=token)
    return a


class TestDashboard:
    def test_stats(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin = make_user(role=Role.ADMIN)
            user = make_user()
            plan = make_plan()
            now = datetime.utcnow()
            db.session.add_all([
                Subscription(user_id=user.id, plan_id=plan.id, status=SubscriptionStatus.ACTIVE,
                             start_date=now - timedelta(days=1), end_date=now + timedelta(days=29)),
                Subscription(user_id=admin.id, plan_id=plan.id, status=SubscriptionStatus.ACTIVE,
                             start_date=now - timedelta(days=40), end_date=now - timedelta(days=10)),
            ])
            db.session.commit()
            _assessment()
            _assessment(done=True)
            _assessment(done=True, shared=True)

            s = dashboard_service.dashboard_stats(as_actor(admin))
            assert s["total_users"] == 2
            assert s["active_users"] == 1
            assert (s["new_assessments"], s["completed_assessments"], s["shared_results"]) == (3, 2, 1)
            assert s["completion_rate"] == pytest.approx(0.6667)

    def test_empty_store(self, app, make_user, as_actor):
        with app.app_context():
            s = dashboard_service.dashboard_stats(as_actor(make_user(role=Role.ADMIN)))
            assert s["completion_rate"] == 0.0
            assert s["pending_payment_proofs"] == 0

    def test_snapshots(self, app, make_user, as_actor):
        with app.app_context():
            admin = as_actor(make_user(role=Role.ADMIN))
            first = dashboard_service.take_snapshot(admin, now=datetime(2024, 1, 1))
            second = dashboard_service.take_snapshot(admin, now=datetime(2024, 1, 2))
            assert [r.id for r in dashboard_service.list_snapshots(admin)] == [second.id, first.id]
            assert first.total_users == 1

    def test_admin_only(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(AuthorizationError):
                dashboard_service.take_snapshot(as_actor(make_user()))


class TestDashboardHttp:
    def test_endpoints(self, app, client, make_user, auth_headers):
        with app.app_context():
            admin_h = auth_headers(make_user(role=Role.ADMIN))
            user_h = auth_headers(make_user())
        assert client.get("/api/admin/dashboard/stats", headers=user_h).status_code == 403
        assert client.get("/api/admin/dashboard/stats", headers=admin_h).get_json()["data"]["total_users"] == 2
        assert client.post("/api/admin/dashboard/snapshot", headers=admin_h).status_code == 201
        rows = client.get("/api/admin/dashboard/snapshots?limit=5", headers=admin_h).get_json()["items"]
        assert len(rows) == 1
