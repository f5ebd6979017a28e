# models/course.py
from datetime import datetime

from extensions import db


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Course(db.Model):
    __tablename__ = "courses"

    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    subtitle = db.Column(db.String(255), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    content = db.Column(db.Text, nullable=False, default="")
    duration = db.Column(db.Integer, nullable=False, default=0)      # minutes
    level = db.Column(db.String(40), nullable=False, default="beginner")
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id", ondelete="RESTRICT"),
                            nullable=False, index=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    preview_video_url = db.Column(db.String(512))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    category = db.relationship("Category", backref=db.backref("courses", passive_deletes="all"))
    lessons = db.relationship("Lesson", backref="course", order_by="Lesson.order",
                              cascade="all, delete-orphan", passive_deletes=True)
    objectives = db.relationship("LearningObjective", backref="course",
                                 cascade="all, delete-orphan", passive_deletes=True)
    enrollments = db.relationship("Enrollment", backref="course", passive_deletes="all")

    def to_dict(self, with_lessons=False):
        out = {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "duration": self.duration,
            "level": self.level,
            "category": self.category.name if self.category else None,
            "is_featured": self.is_featured,
            "preview_video_url": self.preview_video_url,
            "lesson_count": len(self.lessons),
        }
        if with_lessons:
            out["content"] = self.content
            out["lessons"] = [l.to_dict() for l in self.lessons]
            out["objectives"] = [o.content for o in self.objectives]
        return out


class Lesson(db.Model):
    __tablename__ = "lessons"

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"),
                          nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")
    order = db.Column(db.Integer, nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "course_id": self.course_id,
            "title": self.title,
            "content": self.content,
            "order": self.order,
            "duration": self.duration,
        }


class LearningObjective(db.Model):
    __tablename__ = "learning_objectives"

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"),
                          nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)


class Enrollment(db.Model):
    """
    One user's progress through one course.

    ``progress`` is denormalized from LessonCompletion rows (0..100, floored);
    ``completed_at`` is set once it reaches 100.
    """
    __tablename__ = "enrollments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, index=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="RESTRICT"),
                          nullable=False, index=True)
    progress = db.Column(db.Integer, nullable=False, default=0)
    completed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    completions = db.relationship("LessonCompletion", backref="enrollment", passive_deletes="all")

    __table_args__ = (
        db.UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
        db.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_enrollment_progress"),
    )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "course_title": self.course.title if self.course else None,
            "progress": self.progress,
            "status": "COMPLETED" if self.is_completed else "ENROLLED",
            "completed_lessons": sorted(c.lesson_id for c in self.completions),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class LessonCompletion(db.Model):
    __tablename__ = "lesson_completions"

    id = db.Column(db.Integer, primary_key=True)
    enrollment_id = db.Column(db.Integer, db.ForeignKey("enrollments.id", ondelete="RESTRICT"),
                              nullable=False, index=True)
    lesson_id = db.Column(db.Integer, db.ForeignKey("lessons.id", ondelete="RESTRICT"),
                          nullable=False, index=True)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("enrollment_id", "lesson_id", name="uq_completion_enrollment_lesson"),
    )
