from lms_api.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, index=True)  # external username or admin-chosen id
    name = Column(String, nullable=False)
    role = Column(String(20), default="student", nullable=False)  # admin|student
    title = Column(String, nullable=True)
    xp = Column(Integer, default=0, nullable=False)
    category = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class RoleGrant(Base):
    __tablename__ = "role_grants"
    username = Column(String, primary_key=True, index=True)
    role = Column(String(20), nullable=False)


class Course(Base):
    __tablename__ = "courses"
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    categories = Column(JSON, nullable=False, default=list)  # list[str]
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    modules = relationship(
        "Module",
        backref="course",
        cascade="all, delete-orphan",
        order_by="Module.order_index",
    )


class Module(Base):
    __tablename__ = "modules"
    id = Column(String, primary_key=True, index=True)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    order_index = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    lessons = relationship(
        "Lesson",
        backref="module",
        cascade="all, delete-orphan",
        order_by="Lesson.order_index",
    )


class Lesson(Base):
    __tablename__ = "lessons"
    id = Column(String, primary_key=True, index=True)
    module_id = Column(String, ForeignKey("modules.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    video_url = Column(String, nullable=False, default="")
    content = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False)
    quiz_id = Column(String, nullable=True)  # weak reference into the quiz bank
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Quiz(Base):
    __tablename__ = "quizzes"
    id = Column(String, primary_key=True, index=True)
    passing_score = Column(Integer, default=60, nullable=False)
    questions = Column(JSON, nullable=False)  # list of {id, text, options, correctOptionIndex}


class Progress(Base):
    __tablename__ = "progress"
    __table_args__ = (UniqueConstraint("user_id", "lesson_id", name="uq_progress_user_lesson"),)
    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(String, index=True, nullable=False)
    lesson_id = Column(String, index=True, nullable=False)
    status = Column(String(20), default="IN_PROGRESS", nullable=False)  # IN_PROGRESS|COMPLETED
    attempts = Column(Integer, default=0, nullable=False)
    score = Column(Integer, default=0, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)


class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_certificate_user_course"),)
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    course_id = Column(String, index=True, nullable=False)
    user_name = Column(String, nullable=False)
    course_title = Column(String, nullable=False)
    issued_at = Column(DateTime, default=_utcnow, nullable=False)
