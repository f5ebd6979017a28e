# tests/test_events.py
import threading
from datetime import datetime, timedelta

import pytest

from extensions import db
from models.enums import Role
from models.event import Event, UserEvent
from services import event_service
from services.errors import ConflictError, NotFoundError, ValidationError


class TestRegistration:
    def test_register_then_duplicate(self, app, make_user, make_event, as_actor):
        with app.app_context():
            user, ev = make_user(), make_event()
            event_service.register(as_actor(user), ev.id)
            with pytest.raises(ConflictError):
                event_service.register(as_actor(user), ev.id)
            assert UserEvent.query.count() == 1

    def test_is_registered_has_no_side_effects(self, app, make_user, make_event, as_actor):
        with app.app_context():
            user, ev = make_user(), make_event()
            assert event_service.is_registered(as_actor(user), ev.id) is False
            assert event_service.is_registered(as_actor(user), ev.id) is False
            event_service.register(as_actor(user), ev.id)
            assert event_service.is_registered(as_actor(user), ev.id) is True
            assert event_service.is_registered(as_actor(user), ev.id) is True
            assert UserEvent.query.count() == 1

    def test_unregister(self, app, make_user, make_event, as_actor):
        with app.app_context():
            user, ev = make_user(), make_event()
            event_service.register(as_actor(user), ev.id)
            event_service.unregister(as_actor(user), ev.id)
            assert event_service.is_registered(as_actor(user), ev.id) is False
            with pytest.raises(NotFoundError):
                event_service.unregister(as_actor(user), ev.id)

    def test_unknown_event(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(NotFoundError):
                event_service.register(as_actor(make_user()), 12345)

    def test_concurrent_registration_has_one_winner(self, app, make_user, make_event, as_actor):
        with app.app_context():
            actor, event_id = as_actor(make_user()), make_event().id

        barrier = threading.Barrier(2)
        results = []

        def worker():
            with app.app_context():
                barrier.wait()
                try:
                    event_service.register(actor, event_id)
                    results.append("ok")
                except ConflictError:
                    results.append("conflict")
                except Exception as e:  # surfaced by the assertion below
                    results.append(repr(e))

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        assert sorted(results) == ["conflict", "ok"]
        with app.app_context():
            assert UserEvent.query.filter_by(event_id=event_id).count() == 1


class TestEventAdmin:
    def test_listing_counts_registrations(self, app, make_user, make_event, as_actor):
        with app.app_context():
            a, b = make_user(), make_user()
            later, sooner = make_event("Later", days_ahead=10), make_event("Sooner", days_ahead=2)
            event_service.register(as_actor(a), later.id)
            event_service.register(as_actor(b), later.id)

            items = event_service.list_events()
            assert [e["title"] for e in items] == ["Sooner", "Later"]
            assert [e["registered_count"] for e in items] == [0, 2]

    def test_delete_event_cascades_registrations(self, app, make_user, make_event, as_actor):
        with app.app_context():
            admin, user, ev = make_user(role=Role.ADMIN), make_user(), make_event()
            event_id = ev.id
            event_service.register(as_actor(user), event_id)
            event_service.delete_event(as_actor(admin), event_id)
            assert db.session.get(Event, event_id) is None
            assert UserEvent.query.filter_by(event_id=event_id).count() == 0

    def test_end_must_follow_start(self, app, make_user, as_actor):
        with app.app_context():
            admin = make_user(role=Role.ADMIN)
            start = datetime(2026, 5, 1, 10, 0)
            with pytest.raises(ValidationError):
                event_service.create_event(as_actor(admin), {
                    "title": "Backwards", "description": "x", "location": "Online",
                    "start_date": start.isoformat(), "end_date": (start - timedelta(hours=1)).isoformat(),
                })


class TestEventHttp:
    def test_registration_endpoints(self, app, client, make_user, make_event, auth_headers):
        with app.app_context():
            headers = auth_headers(make_user())
            event_id = make_event().id
        url = f"/api/events/{event_id}"

        assert client.get(f"{url}/is-registered", headers=headers).get_json() == {"registered": False}
        assert client.post(f"{url}/registration", headers=headers).status_code == 201
        assert client.post(f"{url}/registration", headers=headers).status_code == 409
        assert client.get(f"{url}/is-registered", headers=headers).get_json() == {"registered": True}
        assert client.get("/api/events").get_json()["items"][0]["registered_count"] == 1
        assert client.delete(f"{url}/registration", headers=headers).status_code == 200
        assert client.delete(f"{url}/registration", headers=headers).status_code == 404

    def test_registration_needs_a_token(self, app, client, make_event):
        with app.app_context():
            event_id = make_event().id
        resp = client.post(f"/api/events/{event_id}/registration")
        assert resp.status_code == 401
        assert "error" in resp.get_json()
