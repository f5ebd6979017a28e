# tests/test_subscriptions.py
import io
from datetime import datetime, timedelta

import pytest

from extensions import db
from models.enums import Role, SubscriptionStatus, PaymentStatus, ProgressStatus
from models.plan import Subscription
from models.user import Notification
from services import subscription_service
from services.errors import ValidationError, AuthorizationError, ConflictError, NotFoundError

PROOF = "/media/proofs/receipt.png"


def _request(user, plan, as_actor, now=None):
    sub = subscription_service.request_subscription(as_actor(user), plan.id, PROOF, now=now)
    return sub, sub.payment_proofs[0]


class TestRequestSubscription:
    def test_creates_pending_subscription_and_proof(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            user, plan = make_user(), make_plan(duration=30)
            now = datetime(2026, 1, 1, 12, 0, 0)
            sub, proof = _request(user, plan, as_actor, now=now)
            assert sub.status == SubscriptionStatus.PENDING
            assert sub.start_date == now
            assert sub.end_date == now + timedelta(days=30)
            assert proof.status == PaymentStatus.PENDING
            assert proof.image_url == PROOF
            assert proof.user_id == user.id

    def test_proof_is_required(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            user, plan = make_user(), make_plan()
            with pytest.raises(ValidationError):
                subscription_service.request_subscription(as_actor(user), plan.id, "")

    def test_unknown_plan(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(NotFoundError):
                subscription_service.request_subscription(as_actor(make_user()), 999, PROOF)


class TestReviewPayment:
    def test_approve_activates_and_unlocks_onboarding(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin, user, plan = make_user(role=Role.ADMIN), make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)

            subscription_service.review_payment(as_actor(admin), proof.id, "APPROVED")

            assert proof.status == PaymentStatus.APPROVED
            assert proof.reviewed_by == admin.id
            assert proof.reviewed_at is not None
            assert sub.status == SubscriptionStatus.ACTIVE
            assert user.progress_status == ProgressStatus.PERSONAL_DISCOVERY_PENDING
            notes = Notification.query.filter_by(user_id=user.id).all()
            assert len(notes) == 1
            assert "approved" in notes[0].title.lower()

    def test_reject_cancels(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin, user, plan = make_user(role=Role.ADMIN), make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)

            subscription_service.review_payment(as_actor(admin), proof.id, "rejected")

            assert proof.status == PaymentStatus.REJECTED
            assert sub.status == SubscriptionStatus.CANCELLED
            assert user.progress_status == ProgressStatus.PAYMENT_PENDING
            assert Notification.query.filter_by(user_id=user.id).count() == 1

    @pytest.mark.parametrize("first", ["APPROVED", "REJECTED"])
    def test_second_review_is_a_conflict(self, app, make_user, make_plan, as_actor, first):
        with app.app_context():
            admin, user, plan = make_user(role=Role.ADMIN), make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)
            subscription_service.review_payment(as_actor(admin), proof.id, first)
            status_after_first = sub.status

            with pytest.raises(ConflictError):
                subscription_service.review_payment(as_actor(admin), proof.id, "APPROVED")
            with pytest.raises(ConflictError):
                subscription_service.review_payment(as_actor(admin), proof.id, "REJECTED")

            db.session.refresh(sub)
            assert sub.status == status_after_first
            assert Notification.query.filter_by(user_id=user.id).count() == 1

    def test_only_admins_review(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            user, plan = make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)
            with pytest.raises(AuthorizationError):
                subscription_service.review_payment(as_actor(user), proof.id, "APPROVED")
            with pytest.raises(AuthorizationError):
                subscription_service.review_payment(None, proof.id, "APPROVED")
            assert proof.status == PaymentStatus.PENDING

    def test_decision_must_be_approved_or_rejected(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin, user, plan = make_user(role=Role.ADMIN), make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)
            with pytest.raises(ValidationError):
                subscription_service.review_payment(as_actor(admin), proof.id, "PENDING")
            with pytest.raises(ValidationError):
                subscription_service.review_payment(as_actor(admin), proof.id, None)

    def test_missing_proof(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(NotFoundError):
                subscription_service.review_payment(as_actor(make_user(role=Role.ADMIN)), 42, "APPROVED")

    def test_approval_does_not_roll_back_later_progress(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin, plan = make_user(role=Role.ADMIN), make_plan()
            user = make_user(progress_status=ProgressStatus.ESSAYS_PENDING)
            sub, proof = _request(user, plan, as_actor)
            subscription_service.review_payment(as_actor(admin), proof.id, "APPROVED")
            assert user.progress_status == ProgressStatus.ESSAYS_PENDING


class TestExpiryAndCancel:
    def test_expiry_is_derived_at_read_time(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin, user, plan = make_user(role=Role.ADMIN), make_user(), make_plan(duration=30)
            start = datetime.utcnow() - timedelta(days=40)
            sub, proof = _request(user, plan, as_actor, now=start)
            subscription_service.review_payment(as_actor(admin), proof.id, "APPROVED")

            assert sub.status == SubscriptionStatus.ACTIVE          # stored
            assert sub.effective_status() == SubscriptionStatus.EXPIRED
            assert sub.to_dict()["status"] == "EXPIRED"
            assert sub.effective_status(start + timedelta(days=1)) == SubscriptionStatus.ACTIVE
            assert subscription_service.current_subscription(user.id) is None

    def test_owner_cancels_pending_request(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            user, plan = make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)
            subscription_service.cancel_subscription(as_actor(user), sub.id)
            assert sub.status == SubscriptionStatus.CANCELLED
            assert proof.status == PaymentStatus.REJECTED

    def test_cannot_cancel_someone_elses(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            owner, other, plan = make_user(), make_user(), make_plan()
            sub, _ = _request(owner, plan, as_actor)
            with pytest.raises(AuthorizationError):
                subscription_service.cancel_subscription(as_actor(other), sub.id)

    def test_cannot_cancel_after_review(self, app, make_user, make_plan, as_actor):
        with app.app_context():
            admin, user, plan = make_user(role=Role.ADMIN), make_user(), make_plan()
            sub, proof = _request(user, plan, as_actor)
            subscription_service.review_payment(as_actor(admin), proof.id, "APPROVED")
            with pytest.raises(ConflictError):
                subscription_service.cancel_subscription(as_actor(user), sub.id)


class TestSubscriptionHttp:
    def test_upload_and_review_flow(self, app, client, make_user, make_plan, auth_headers):
        with app.app_context():
            user_h = auth_headers(make_user())
            admin_h = auth_headers(make_user(role=Role.ADMIN))
            plan_id = make_plan().id

        resp = client.post(
            "/api/subscriptions",
            data={"plan_id": str(plan_id), "proof": (io.BytesIO(b"\x89PNG fake"), "receipt.png")},
            headers=user_h,
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201
        sub = resp.get_json()
        assert sub["status"] == "PENDING"
        proof = sub["payment_proofs"][0]
        assert proof["image_url"].startswith("/media/proofs/")

        media = client.get(proof["image_url"])
        assert media.status_code == 200
        media.close()

        pending = client.get("/api/admin/payment-proofs?status=pending", headers=admin_h).get_json()["items"]
        assert [p["id"] for p in pending] == [proof["id"]]

        resp = client.post(f"/api/admin/payment-proofs/{proof['id']}/review",
                           json={"decision": "APPROVED"}, headers=user_h)
        assert resp.status_code == 403

        resp = client.post(f"/api/admin/payment-proofs/{proof['id']}/review",
                           json={"decision": "APPROVED"}, headers=admin_h)
        assert resp.status_code == 200
        assert resp.get_json()["subscription"]["status"] == "ACTIVE"

        resp = client.post(f"/api/admin/payment-proofs/{proof['id']}/review",
                           json={"decision": "REJECTED"}, headers=admin_h)
        assert resp.status_code == 409

        mine = client.get("/api/me/subscriptions", headers=user_h).get_json()["items"]
        assert mine[0]["status"] == "ACTIVE"
        me = client.get("/api/me", headers=user_h).get_json()
        assert me["active_subscription"]["id"] == sub["id"]
        assert me["progress_status"] == "PERSONAL_DISCOVERY_PENDING"

    def test_wrong_file_type_is_rejected(self, app, client, make_user, make_plan, auth_headers):
        with app.app_context():
            user_h = auth_headers(make_user())
            plan_id = make_plan().id
        resp = client.post(
            "/api/subscriptions",
            data={"plan_id": str(plan_id), "proof": (io.BytesIO(b"MZ"), "virus.exe")},
            headers=user_h,
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        with app.app_context():
            assert Subscription.query.count() == 0
