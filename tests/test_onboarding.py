# tests/test_onboarding.py
import io

import pytest

from models.enums import ProgressStatus, Role
from extensions import db
from services import profile_service, user_service
from services.errors import ConflictError, NotFoundError, ValidationError

SCHOLARSHIP = {
    "education_level": "Bachelor", "field_preference": "Engineering", "age_range": "18-24",
    "gender": "FEMALE", "employment_preference": "Employed", "career_sector": "Energy",
    "unpaid_passion": "Mentoring", "personal_passion": "Hiking", "life_goal": "Lead a lab",
    "future_title": "Research lead", "future_tasks": "Run experiments",
    "required_skills": "Statistics", "desired_courses": "MSc Energy Systems",
}


class TestWorksheets:
    def test_discovery_advances_progress(self, app, make_user, as_actor):
        with app.app_context():
            user = make_user(progress_status=ProgressStatus.PERSONAL_DISCOVERY_PENDING)
            row = profile_service.create_discovery(as_actor(user), {
                "strengths": "Communication, Planning", "weaknesses": ["Patience"],
            })
            assert row.strengths == ["Communication", "Planning"]
            assert row.threats == []
            assert user.progress_status == ProgressStatus.CV_ALIGNMENT_PENDING

    def test_discovery_is_one_per_user(self, app, make_user, as_actor):
        with app.app_context():
            user = make_user()
            profile_service.create_discovery(as_actor(user), {"strengths": ["a"]})
            with pytest.raises(ConflictError):
                profile_service.create_discovery(as_actor(user), {"strengths": ["b"]})
            updated = profile_service.update_discovery(as_actor(user), {"strengths": ["b"]})
            assert updated.strengths == ["b"]

    def test_cv_then_scholarship(self, app, make_user, as_actor):
        with app.app_context():
            user = make_user(progress_status=ProgressStatus.CV_ALIGNMENT_PENDING)
            profile_service.save_cv(as_actor(user), "cv.pdf", "/media/cvs/cv.pdf")
            assert user.progress_status == ProgressStatus.SCHOLARSHIP_MATRIX_PENDING
            again = profile_service.save_cv(as_actor(user), "cv2.pdf", "/media/cvs/cv2.pdf")
            assert again.file_name == "cv2.pdf"

            profile_service.create_scholarship(as_actor(user), SCHOLARSHIP)
            assert user.progress_status == ProgressStatus.ESSAYS_PENDING

    def test_late_worksheet_never_moves_progress_back(self, app, make_user, as_actor):
        with app.app_context():
            user = make_user(progress_status=ProgressStatus.COMPLETED)
            profile_service.create_discovery(as_actor(user), {})
            assert user.progress_status == ProgressStatus.COMPLETED

    def test_scholarship_reports_missing_fields(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(ValidationError) as ei:
                profile_service.create_scholarship(as_actor(make_user()), {"education_level": "PhD"})
            assert {"field_preference", "life_goal"} <= set(ei.value.fields)

    def test_missing_worksheet(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(NotFoundError):
                profile_service.get_cv(as_actor(make_user()))


class TestAdminProgress:
    def test_admin_moves_forward_not_back(self, app, make_user, as_actor):
        with app.app_context():
            admin = make_user(role=Role.ADMIN)
            user = make_user(progress_status=ProgressStatus.CV_ALIGNMENT_PENDING)
            user_service.admin_set_progress(as_actor(admin), user.id, {"progress_status": "ESSAYS_PENDING"})
            assert user.progress_status == ProgressStatus.ESSAYS_PENDING
            with pytest.raises(ConflictError):
                user_service.admin_set_progress(as_actor(admin), user.id, {"progress_status": "PAYMENT_PENDING"})
            with pytest.raises(ValidationError):
                user_service.admin_set_progress(as_actor(admin), user.id, {"progress_status": "DONE"})


class TestProfileHttp:
    def test_profile_and_notifications(self, app, client, make_user, auth_headers):
        with app.app_context():
            user = make_user()
            headers = auth_headers(user)
            user_service.notify(user.id, "Welcome", "Hello")
            db.session.commit()

        assert client.get("/api/me/profile", headers=headers).get_json() == {}
        resp = client.put("/api/me/profile", json={"bio": "Engineer", "phone_number": "+123"}, headers=headers)
        assert resp.get_json()["bio"] == "Engineer"
        resp = client.put("/api/me/profile", json={"address": "Main St"}, headers=headers)
        body = resp.get_json()
        assert (body["bio"], body["address"]) == ("Engineer", "Main St")

        notes = client.get("/api/me/notifications?unread=1", headers=headers).get_json()["items"]
        assert [n["title"] for n in notes] == ["Welcome"]
        client.post(f"/api/me/notifications/{notes[0]['id']}/read", headers=headers)
        assert client.get("/api/me/notifications?unread=1", headers=headers).get_json()["items"] == []

    def test_cv_upload(self, app, client, make_user, auth_headers):
        with app.app_context():
            headers = auth_headers(make_user(progress_status=ProgressStatus.CV_ALIGNMENT_PENDING))
        resp = client.post("/api/me/cv", data={"file": (io.BytesIO(b"%PDF-1.4"), "my cv.pdf")},
                           headers=headers, content_type="multipart/form-data")
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["file_name"] == "my_cv.pdf"
        assert body["file_url"].startswith("/media/cvs/")
        assert client.get("/api/me", headers=headers).get_json()["progress_status"] == "SCHOLARSHIP_MATRIX_PENDING"

    def test_admin_progress_endpoint(self, app, client, make_user, auth_headers):
        with app.app_context():
            admin_h = auth_headers(make_user(role=Role.ADMIN))
            user = make_user()
            user_id, user_h = user.id, auth_headers(user)
        url = f"/api/admin/users/{user_id}/progress"
        assert client.put(url, json={"progress_status": "COMPLETED"}, headers=user_h).status_code == 403
        resp = client.put(url, json={"progress_status": "COMPLETED"}, headers=admin_h)
        assert resp.get_json()["progress_status"] == "COMPLETED"
        assert client.put(url, json={"progress_status": "ESSAYS_PENDING"}, headers=admin_h).status_code == 409
