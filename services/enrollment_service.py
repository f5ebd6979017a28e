# services/enrollment_service.py
"""
Course catalogue administration and enrollment progress.

Progress is recomputed from LessonCompletion rows on every completion:
    progress = floor(100 * completed / total_lessons)
so it can only grow while lessons are not removed from a course.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from extensions import db
from models.course import Category, Course, Lesson, LearningObjective, Enrollment, LessonCompletion
from schemas import parse, CategoryPayload, CoursePayload, LessonPayload, EnrollPayload
from services import user_service
from services.access import require_actor, require_admin
from services.errors import NotFoundError, ConflictError

logger = logging.getLogger(__name__)


# ---------- catalogue ----------
def list_courses(category_id: int | None = None, featured: bool | None = None) -> list[Course]:
    q = Course.query
    if category_id:
        q = q.filter(Course.category_id == category_id)
    if featured is not None:
        q = q.filter(Course.is_featured.is_(featured))
    return q.order_by(Course.created_at.desc(), Course.id.desc()).all()


def get_course(course_id: int) -> Course:
    course = db.session.get(Course, course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


def get_course_by_slug(slug: str) -> Course:
    course = Course.query.filter_by(slug=slug).first()
    if course is None:
        raise NotFoundError("Course not found")
    return course


def list_categories() -> list[Category]:
    return Category.query.order_by(Category.name.asc()).all()


def create_category(actor, payload) -> Category:
    require_admin(actor)
    data = parse(CategoryPayload, payload, "Invalid category")
    cat = Category(name=data.name)
    db.session.add(cat)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Category already exists")
    return cat


def create_course(actor, payload) -> Course:
    require_admin(actor)
    data = parse(CoursePayload, payload, "Invalid course")
    if db.session.get(Category, data.category_id) is None:
        raise NotFoundError("Category not found")
    fields = data.model_dump(exclude={"objectives"})
    course = Course(**fields)
    for text in data.objectives:
        course.objectives.append(LearningObjective(content=text))
    db.session.add(course)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Course slug '{data.slug}' already exists")
    logger.info("course %s (%s) created by user %s", course.id, course.slug, actor["id"])
    return course


def add_lesson(actor, course_id: int, payload) -> Lesson:
    require_admin(actor)
    course = get_course(course_id)
    data = parse(LessonPayload, payload, "Invalid lesson")
    lesson = Lesson(course_id=course.id, **data.model_dump())
    db.session.add(lesson)
    db.session.commit()
    return lesson


def delete_course(actor, course_id: int):
    require_admin(actor)
    course = get_course(course_id)
    if Enrollment.query.filter_by(course_id=course.id).first() is not None:
        raise ConflictError("Course has enrollments and cannot be deleted")
    db.session.delete(course)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Course has enrollments and cannot be deleted")
    logger.info("course %s deleted by user %s", course_id, actor["id"])


# ---------- enrollment ----------
def enroll(actor, payload) -> Enrollment:
    require_actor(actor)
    data = parse(EnrollPayload, payload, "Invalid enrollment")
    user = user_service.get_user(actor["id"])
    course = get_course(data.course_id)

    enr = Enrollment(user_id=user.id, course_id=course.id, progress=0)
    db.session.add(enr)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Already enrolled in this course")
    logger.info("user %s enrolled in course %s", user.id, course.id)
    return enr


def list_enrollments(actor) -> list[Enrollment]:
    require_actor(actor)
    return (
        Enrollment.query
        .filter_by(user_id=actor["id"])
        .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
        .all()
    )


def get_enrollment(actor, enrollment_id: int, lock: bool = False) -> Enrollment:
    require_actor(actor)
    if lock:
        # row lock until commit; concurrent completions on one enrollment queue here
        enr = (
            Enrollment.query.filter_by(id=enrollment_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
    else:
        enr = db.session.get(Enrollment, enrollment_id)
    if enr is None or enr.user_id != actor["id"]:
        raise NotFoundError("Enrollment not found")
    return enr


def complete_lesson(actor, enrollment_id: int, lesson_id: int, now: datetime | None = None) -> Enrollment:
    """
    Record a finished lesson. A lesson outside the enrollment's course is NotFound,
    a second completion of the same lesson is a ConflictError; neither changes state.
    """
    enr = get_enrollment(actor, enrollment_id, lock=True)
    lesson = db.session.get(Lesson, lesson_id)
    if lesson is None or lesson.course_id != enr.course_id:
        raise NotFoundError("Lesson not found in this course")

    db.session.add(LessonCompletion(enrollment_id=enr.id, lesson_id=lesson.id))
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Lesson already completed")

    done = LessonCompletion.query.filter_by(enrollment_id=enr.id).count()
    total = Lesson.query.filter_by(course_id=enr.course_id).count()
    progress = (100 * done) // total if total else 0
    # never move backwards even if lessons were added since the last completion
    enr.progress = max(enr.progress, min(progress, 100))
    finished = enr.progress == 100 and enr.completed_at is None
    if finished:
        enr.completed_at = now or datetime.utcnow()
    db.session.commit()
    if finished:
        logger.info("enrollment %s: user %s completed course %s", enr.id, enr.user_id, enr.course_id)
    logger.debug("enrollment %s lesson %s done: %s/%s -> %s%%", enr.id, lesson.id, done, total, enr.progress)
    return enr
