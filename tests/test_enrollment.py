# tests/test_enrollment.py
import logging
import threading

import pytest
from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from extensions import db
from models.course import Course, Enrollment, Lesson, LearningObjective, LessonCompletion
from models.enums import Role
from services import enrollment_service
from services.errors import ConflictError, NotFoundError, AuthorizationError


def _enroll(user, course, as_actor):
    return enrollment_service.enroll(as_actor(user), {"course_id": course.id})


class TestEnroll:
    def test_enroll_starts_at_zero(self, app, make_user, make_course, as_actor):
        with app.app_context():
            enr = _enroll(make_user(), make_course(), as_actor)
            assert enr.progress == 0
            assert enr.completed_at is None
            assert enr.to_dict()["status"] == "ENROLLED"

    def test_second_enroll_is_a_conflict(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course()
            _enroll(user, course, as_actor)
            with pytest.raises(ConflictError):
                _enroll(user, course, as_actor)
            assert len(enrollment_service.list_enrollments(as_actor(user))) == 1

    def test_missing_course(self, app, make_user, as_actor):
        with app.app_context():
            with pytest.raises(NotFoundError):
                enrollment_service.enroll(as_actor(make_user()), {"course_id": 404})

    def test_anonymous_cannot_enroll(self, app, make_course):
        with app.app_context():
            course = make_course()
            with pytest.raises(AuthorizationError):
                enrollment_service.enroll(None, {"course_id": course.id})


class TestCompleteLesson:
    def test_progress_is_floored_and_monotonic(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=3)
            enr = _enroll(user, course, as_actor)
            seen = []
            for lesson in course.lessons:
                enrollment_service.complete_lesson(as_actor(user), enr.id, lesson.id)
                seen.append(enr.progress)
            assert seen == [33, 66, 100]
            assert enr.completed_at is not None
            assert enr.to_dict()["status"] == "COMPLETED"

    def test_repeat_completion_changes_nothing(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=4)
            enr = _enroll(user, course, as_actor)
            first = course.lessons[0]
            enrollment_service.complete_lesson(as_actor(user), enr.id, first.id)
            assert enr.progress == 25

            with pytest.raises(ConflictError):
                enrollment_service.complete_lesson(as_actor(user), enr.id, first.id)

            db.session.refresh(enr)
            assert enr.progress == 25
            assert LessonCompletion.query.filter_by(enrollment_id=enr.id).count() == 1

    def test_completed_course_stays_completed(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=1)
            enr = _enroll(user, course, as_actor)
            lesson_id = course.lessons[0].id
            enrollment_service.complete_lesson(as_actor(user), enr.id, lesson_id)
            done_at = enr.completed_at
            with pytest.raises(ConflictError):
                enrollment_service.complete_lesson(as_actor(user), enr.id, lesson_id)
            db.session.refresh(enr)
            assert enr.progress == 100
            assert enr.completed_at == done_at

    def test_lesson_from_another_course(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user = make_user()
            course, other = make_course(), make_course()
            enr = _enroll(user, course, as_actor)
            with pytest.raises(NotFoundError):
                enrollment_service.complete_lesson(as_actor(user), enr.id, other.lessons[0].id)
            assert enr.progress == 0

    def test_someone_elses_enrollment(self, app, make_user, make_course, as_actor):
        with app.app_context():
            owner, other, course = make_user(), make_user(), make_course()
            enr = _enroll(owner, course, as_actor)
            with pytest.raises(NotFoundError):
                enrollment_service.complete_lesson(as_actor(other), enr.id, course.lessons[0].id)

    def test_adding_lessons_never_lowers_progress(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=2)
            enr = _enroll(user, course, as_actor)
            enrollment_service.complete_lesson(as_actor(user), enr.id, course.lessons[0].id)
            assert enr.progress == 50
            for i in (3, 4, 5, 6):
                db.session.add(Lesson(course_id=course.id, title=f"Extra {i}", order=i))
            db.session.commit()
            enrollment_service.complete_lesson(as_actor(user), enr.id, course.lessons[1].id)
            # 2 of 6 = 33, but progress never goes back
            assert enr.progress == 50

    def test_course_without_lessons_stays_at_zero(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=0)
            enr = _enroll(user, course, as_actor)
            assert enr.progress == 0
            assert enrollment_service.list_enrollments(as_actor(user))[0].progress == 0


    def test_completion_locks_the_enrollment_row(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=2)
            enr = _enroll(user, course, as_actor)
            selects = []

            def capture(state):
                if state.is_select:
                    selects.append(str(state.statement.compile(dialect=postgresql.dialect())))

            session = db.session()
            event.listen(session, "do_orm_execute", capture)
            try:
                enrollment_service.complete_lesson(as_actor(user), enr.id, course.lessons[0].id)
            finally:
                event.remove(session, "do_orm_execute", capture)

            on_enrollments = [s for s in selects if "FROM enrollments" in s]
            # the first read of the enrollment, before any count, takes the lock
            assert on_enrollments
            assert "FOR UPDATE" in on_enrollments[0]
            assert selects.index(on_enrollments[0]) < min(
                i for i, s in enumerate(selects) if "lesson_completions" in s)

    def test_concurrent_completions_reach_one_hundred(self, app, make_user, make_course, as_actor):
        with app.app_context():
            user, course = make_user(), make_course(lessons=3)
            actor = as_actor(user)
            enr_id = _enroll(user, course, as_actor).id
            lesson_ids = [lesson.id for lesson in course.lessons]

        barrier = threading.Barrier(len(lesson_ids))
        errors = []

        def worker(lesson_id):
            with app.app_context():
                barrier.wait()
                try:
                    enrollment_service.complete_lesson(actor, enr_id, lesson_id)
                except Exception as e:  # reported through the assertion below
                    errors.append(repr(e))

        threads = [threading.Thread(target=worker, args=(lid,)) for lid in lesson_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert errors == []
        with app.app_context():
            enr = db.session.get(Enrollment, enr_id)
            assert enr.progress == 100
            assert enr.completed_at is not None
            assert LessonCompletion.query.filter_by(enrollment_id=enr_id).count() == 3

    def test_course_completion_is_logged_once(self, app, make_user, make_course, as_actor, caplog):
        caplog.set_level(logging.INFO, logger="services.enrollment_service")
        with app.app_context():
            user, course = make_user(), make_course(lessons=2)
            enr = _enroll(user, course, as_actor)

            def finished():
                return [r for r in caplog.records if "completed course" in r.getMessage()]

            enrollment_service.complete_lesson(as_actor(user), enr.id, course.lessons[0].id)
            assert finished() == []

            enrollment_service.complete_lesson(as_actor(user), enr.id, course.lessons[1].id)
            records = finished()
            assert len(records) == 1
            assert records[0].levelno == logging.INFO
            assert f"completed course {course.id}" in records[0].getMessage()

            bonus = Lesson(course_id=course.id, title="Bonus", order=3)
            db.session.add(bonus)
            db.session.commit()
            enrollment_service.complete_lesson(as_actor(user), enr.id, bonus.id)
            assert len(finished()) == 1


class TestCatalogueAdmin:
    def test_create_course_with_objectives(self, app, make_user, as_actor):
        with app.app_context():
            admin = make_user(role=Role.ADMIN)
            cat = enrollment_service.create_category(as_actor(admin), {"name": "Leadership"})
            course = enrollment_service.create_course(as_actor(admin), {
                "slug": "lead-101", "title": "Lead 101", "category_id": cat.id,
                "objectives": "Delegate\nGive feedback",
            })
            enrollment_service.add_lesson(as_actor(admin), course.id, {"title": "Intro", "order": 1})
            detail = course.to_dict(with_lessons=True)
            assert detail["objectives"] == ["Delegate", "Give feedback"]
            assert [l["title"] for l in detail["lessons"]] == ["Intro"]

    def test_duplicate_slug(self, app, make_user, make_course, as_actor):
        with app.app_context():
            admin = make_user(role=Role.ADMIN)
            existing = make_course(slug="taken")
            with pytest.raises(ConflictError):
                enrollment_service.create_course(as_actor(admin), {
                    "slug": "taken", "title": "Again", "category_id": existing.category_id,
                })

    def test_delete_cascades_lessons(self, app, make_user, make_course, as_actor):
        with app.app_context():
            admin = make_user(role=Role.ADMIN)
            course = make_course(lessons=2)
            db.session.add(LearningObjective(course_id=course.id, content="x"))
            db.session.commit()
            course_id = course.id
            enrollment_service.delete_course(as_actor(admin), course_id)
            assert db.session.get(Course, course_id) is None
            assert Lesson.query.filter_by(course_id=course_id).count() == 0
            assert LearningObjective.query.filter_by(course_id=course_id).count() == 0

    def test_delete_refused_while_enrolled(self, app, make_user, make_course, as_actor):
        with app.app_context():
            admin, user, course = make_user(role=Role.ADMIN), make_user(), make_course()
            _enroll(user, course, as_actor)
            with pytest.raises(ConflictError):
                enrollment_service.delete_course(as_actor(admin), course.id)


class TestEnrollmentHttp:
    def test_enroll_endpoint(self, app, client, make_user, make_course, auth_headers):
        with app.app_context():
            headers = auth_headers(make_user())
            course = make_course(lessons=2)
            course_id, lesson_ids = course.id, [l.id for l in course.lessons]

        resp = client.post("/api/courses/enroll", json={"course_id": course_id}, headers=headers)
        assert resp.status_code == 201
        enrollment_id = resp.get_json()["id"]

        again = client.post("/api/courses/enroll", json={"course_id": course_id}, headers=headers)
        assert again.status_code == 409
        assert "error" in again.get_json()

        resp = client.post(f"/api/enrollments/{enrollment_id}/lessons/{lesson_ids[0]}/complete", headers=headers)
        assert resp.get_json()["progress"] == 50

        mine = client.get("/api/me/enrollments", headers=headers).get_json()["items"]
        assert mine[0]["course_title"] == "Course 1"
        assert mine[0]["completed_lessons"] == [lesson_ids[0]]

    def test_catalogue_is_public(self, app, client, make_course):
        with app.app_context():
            course_id = make_course(lessons=2, slug="public-course").id
        items = client.get("/api/courses").get_json()["items"]
        assert items[0]["lesson_count"] == 2
        detail = client.get("/api/courses/slug/public-course").get_json()
        assert detail["id"] == course_id
        assert client.get("/api/courses/999").status_code == 404
