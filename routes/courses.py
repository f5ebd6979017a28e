# routes/courses.py
from flask import Blueprint, jsonify

from routes.auth import current_actor
from routes.helpers import int_arg, bool_arg, body
from services import enrollment_service

courses_bp = Blueprint("courses", __name__, url_prefix="/api")


# ---------- public catalogue ----------
@courses_bp.get("/categories")
def list_categories():
    return jsonify({"items": [c.to_dict() for c in enrollment_service.list_categories()]})


@courses_bp.get("/courses")
def list_courses():
    items = enrollment_service.list_courses(
        category_id=int_arg("category_id", 0) or None,
        featured=bool_arg("featured"),
    )
    return jsonify({"items": [c.to_dict() for c in items]})


@courses_bp.get("/courses/<int:course_id>")
def course_detail(course_id):
    return jsonify(enrollment_service.get_course(course_id).to_dict(with_lessons=True))


@courses_bp.get("/courses/slug/<slug>")
def course_by_slug(slug):
    return jsonify(enrollment_service.get_course_by_slug(slug).to_dict(with_lessons=True))


# ---------- enrollment ----------
@courses_bp.post("/courses/enroll")
def enroll():
    """{"course_id": 1}"""
    enr = enrollment_service.enroll(current_actor(), body())
    return jsonify(enr.to_dict()), 201


@courses_bp.get("/me/enrollments")
def my_enrollments():
    items = enrollment_service.list_enrollments(current_actor())
    return jsonify({"items": [e.to_dict() for e in items]})


@courses_bp.post("/enrollments/<int:enrollment_id>/lessons/<int:lesson_id>/complete")
def complete_lesson(enrollment_id, lesson_id):
    enr = enrollment_service.complete_lesson(current_actor(), enrollment_id, lesson_id)
    return jsonify(enr.to_dict())


# ---------- admin ----------
@courses_bp.post("/admin/categories")
def admin_create_category():
    cat = enrollment_service.create_category(current_actor(), body())
    return jsonify(cat.to_dict()), 201


@courses_bp.post("/admin/courses")
def admin_create_course():
    course = enrollment_service.create_course(current_actor(), body())
    return jsonify(course.to_dict(with_lessons=True)), 201


@courses_bp.post("/admin/courses/<int:course_id>/lessons")
def admin_add_lesson(course_id):
    lesson = enrollment_service.add_lesson(current_actor(), course_id, body())
    return jsonify(lesson.to_dict()), 201


@courses_bp.delete("/admin/courses/<int:course_id>")
def admin_delete_course(course_id):
    enrollment_service.delete_course(current_actor(), course_id)
    return jsonify({"ok": True})
