"""
Relational storage backend (SQLAlchemy). One SqlStore wraps one DB session.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lms_api.models import models as orm
from lms_api.repositories.base import (
    CertificateRepository,
    CourseRepository,
    ProgressRepository,
    QuizRepository,
    RoleRepository,
    Store,
    UserRepository,
)
from lms_api.schemas.certificate_schemas import Certificate
from lms_api.schemas.course_schemas import Course, CourseModule, Lesson
from lms_api.schemas.progress_schemas import Progress
from lms_api.schemas.quiz_schemas import Quiz, QuizQuestion
from lms_api.schemas.user_schemas import User

# record field -> column name, where they differ
_ORDER_COLUMNS = {"order": "order_index"}


def _columns(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {_ORDER_COLUMNS.get(k, k): v for k, v in fields.items()}


def _user(row: orm.User) -> User:
    return User(
        id=row.id,
        name=row.name,
        role=row.role,
        title=row.title,
        xp=int(row.xp or 0),
        category=row.category,
    )


def _lesson(row: orm.Lesson) -> Lesson:
    return Lesson(
        id=row.id,
        module_id=row.module_id,
        title=row.title,
        video_url=row.video_url or "",
        content=row.content,
        order=row.order_index,
        quiz_id=row.quiz_id,
    )


def _module(row: orm.Module) -> CourseModule:
    return CourseModule(
        id=row.id,
        course_id=row.course_id,
        title=row.title,
        description=row.description or "",
        order=row.order_index,
        lessons=[_lesson(lesson) for lesson in sorted(row.lessons, key=lambda l: l.order_index)],
    )


def _course(row: orm.Course) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description or "",
        categories=list(row.categories or []),
        modules=[_module(m) for m in sorted(row.modules, key=lambda m: m.order_index)],
    )


def _progress(row: orm.Progress) -> Progress:
    return Progress(
        user_id=row.user_id,
        lesson_id=row.lesson_id,
        status=row.status,
        attempts=int(row.attempts or 0),
        score=int(row.score or 0),
        completed_at=row.completed_at,
    )


def _certificate(row: orm.Certificate) -> Certificate:
    return Certificate(
        id=row.id,
        user_id=row.user_id,
        course_id=row.course_id,
        user_name=row.user_name,
        course_title=row.course_title,
        issued_at=row.issued_at,
    )


class SqlUserRepository(UserRepository):
    def __init__(self, db: Session):
        self.db = db

    def _row(self, user_id: str) -> orm.User | None:
        return self.db.query(orm.User).filter(orm.User.id == user_id).first()

    def list_users(self) -> List[User]:
        return [_user(u) for u in self.db.query(orm.User).order_by(orm.User.name.asc()).all()]

    def get(self, user_id: str) -> Optional[User]:
        row = self._row(user_id)
        return _user(row) if row else None

    def add(self, user: User) -> User:
        row = orm.User(
            id=user.id,
            name=user.name,
            role=user.role.value,
            title=user.title,
            xp=user.xp,
            category=user.category,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _user(row)

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        row = self._row(user_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value.value if hasattr(value, "value") else value)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _user(row)

    def delete(self, user_id: str) -> bool:
        row = self._row(user_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def add_xp(self, user_id: str, amount: int) -> Optional[User]:
        updated = (
            self.db.query(orm.User)
            .filter(orm.User.id == user_id)
            .update({orm.User.xp: orm.User.xp + amount}, synchronize_session=False)
        )
        self.db.commit()
        if not updated:
            return None
        return self.get(user_id)

    def ranking(self, limit: Optional[int]) -> List[User]:
        q = self.db.query(orm.User).order_by(orm.User.xp.desc(), orm.User.id.asc())
        if limit:
            q = q.limit(limit)
        return [_user(u) for u in q.all()]


class SqlRoleRepository(RoleRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_role(self, username: str) -> Optional[str]:
        row = self.db.query(orm.RoleGrant).filter(orm.RoleGrant.username == username).first()
        return row.role if row else None

    def grant(self, username: str, role: str) -> None:
        row = self.db.query(orm.RoleGrant).filter(orm.RoleGrant.username == username).first()
        if row is None:
            row = orm.RoleGrant(username=username, role=role)
        row.role = role
        self.db.add(row)
        self.db.commit()

    def list_grants(self) -> Dict[str, str]:
        return {g.username: g.role for g in self.db.query(orm.RoleGrant).all()}


class SqlCourseRepository(CourseRepository):
    def __init__(self, db: Session):
        self.db = db

    def _course_row(self, course_id: str) -> orm.Course | None:
        return self.db.query(orm.Course).filter(orm.Course.id == course_id).first()

    def _module_row(self, module_id: str) -> orm.Module | None:
        return self.db.query(orm.Module).filter(orm.Module.id == module_id).first()

    def _lesson_row(self, lesson_id: str) -> orm.Lesson | None:
        return self.db.query(orm.Lesson).filter(orm.Lesson.id == lesson_id).first()

    def list_courses(self) -> List[Course]:
        return [_course(c) for c in self.db.query(orm.Course).order_by(orm.Course.created_at.asc()).all()]

    def get_course(self, course_id: str) -> Optional[Course]:
        row = self._course_row(course_id)
        return _course(row) if row else None

    def add_course(self, course: Course) -> Course:
        row = orm.Course(
            id=course.id,
            title=course.title,
            description=course.description,
            categories=list(course.categories),
        )
        for module in course.modules:
            module_row = orm.Module(
                id=module.id,
                title=module.title,
                description=module.description,
                order_index=module.order,
            )
            module_row.lessons = [
                orm.Lesson(
                    id=lesson.id,
                    title=lesson.title,
                    video_url=lesson.video_url,
                    content=lesson.content,
                    order_index=lesson.order,
                    quiz_id=lesson.quiz_id,
                )
                for lesson in module.lessons
            ]
            row.modules.append(module_row)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _course(row)

    def update_course(self, course_id: str, fields: Dict[str, Any]) -> Optional[Course]:
        row = self._course_row(course_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return _course(row)

    def delete_course(self, course_id: str) -> bool:
        row = self._course_row(course_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def get_module(self, module_id: str) -> Optional[CourseModule]:
        row = self._module_row(module_id)
        return _module(row) if row else None

    def add_module(self, module: CourseModule) -> CourseModule:
        row = orm.Module(
            id=module.id,
            course_id=module.course_id,
            title=module.title,
            description=module.description,
            order_index=module.order,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _module(row)

    def update_module(self, module_id: str, fields: Dict[str, Any]) -> Optional[CourseModule]:
        row = self._module_row(module_id)
        if row is None:
            return None
        for key, value in _columns(fields).items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return _module(row)

    def delete_module(self, module_id: str) -> bool:
        row = self._module_row(module_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        row = self._lesson_row(lesson_id)
        return _lesson(row) if row else None

    def add_lesson(self, lesson: Lesson) -> Lesson:
        row = orm.Lesson(
            id=lesson.id,
            module_id=lesson.module_id,
            title=lesson.title,
            video_url=lesson.video_url,
            content=lesson.content,
            order_index=lesson.order,
            quiz_id=lesson.quiz_id,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _lesson(row)

    def update_lesson(self, lesson_id: str, fields: Dict[str, Any]) -> Optional[Lesson]:
        row = self._lesson_row(lesson_id)
        if row is None:
            return None
        for key, value in _columns(fields).items():
            setattr(row, key, value)
        self.db.commit()
        self.db.refresh(row)
        return _lesson(row)

    def delete_lesson(self, lesson_id: str) -> bool:
        row = self._lesson_row(lesson_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def set_module_orders(self, orders: Dict[str, int]) -> None:
        for module_id, order in orders.items():
            self.db.query(orm.Module).filter(orm.Module.id == module_id).update(
                {orm.Module.order_index: order}, synchronize_session=False
            )
        self.db.commit()

    def set_lesson_orders(self, orders: Dict[str, int]) -> None:
        for lesson_id, order in orders.items():
            self.db.query(orm.Lesson).filter(orm.Lesson.id == lesson_id).update(
                {orm.Lesson.order_index: order}, synchronize_session=False
            )
        self.db.commit()


class SqlQuizRepository(QuizRepository):
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _quiz(row: orm.Quiz) -> Quiz:
        return Quiz(
            id=row.id,
            passing_score=row.passing_score,
            questions=[QuizQuestion.model_validate(q) for q in (row.questions or [])],
        )

    def list_quizzes(self) -> List[Quiz]:
        return [self._quiz(q) for q in self.db.query(orm.Quiz).all()]

    def get(self, quiz_id: str) -> Optional[Quiz]:
        row = self.db.query(orm.Quiz).filter(orm.Quiz.id == quiz_id).first()
        return self._quiz(row) if row else None

    def add(self, quiz: Quiz) -> Quiz:
        row = orm.Quiz(
            id=quiz.id,
            passing_score=quiz.passing_score,
            questions=[q.model_dump(by_alias=True) for q in quiz.questions],
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return self._quiz(row)


class SqlProgressRepository(ProgressRepository):
    def __init__(self, db: Session):
        self.db = db

    def _row(self, user_id: str, lesson_id: str) -> orm.Progress | None:
        return (
            self.db.query(orm.Progress)
            .filter(orm.Progress.user_id == user_id, orm.Progress.lesson_id == lesson_id)
            .first()
        )

    def get(self, user_id: str, lesson_id: str) -> Optional[Progress]:
        row = self._row(user_id, lesson_id)
        return _progress(row) if row else None

    def save(self, progress: Progress) -> Progress:
        row = self._row(progress.user_id, progress.lesson_id)
        if row is None:
            row = orm.Progress(id=str(uuid4()), user_id=progress.user_id, lesson_id=progress.lesson_id)
        row.status = progress.status.value
        row.attempts = progress.attempts
        row.score = progress.score
        row.completed_at = progress.completed_at
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _progress(row)

    def for_user(self, user_id: str) -> List[Progress]:
        return [_progress(p) for p in self.db.query(orm.Progress).filter(orm.Progress.user_id == user_id).all()]

    def list_all(self) -> List[Progress]:
        return [_progress(p) for p in self.db.query(orm.Progress).all()]

    def delete_for_user(self, user_id: str) -> None:
        self.db.query(orm.Progress).filter(orm.Progress.user_id == user_id).delete(synchronize_session=False)
        self.db.commit()


class SqlCertificateRepository(CertificateRepository):
    def __init__(self, db: Session):
        self.db = db

    def find(self, user_id: str, course_id: str) -> Optional[Certificate]:
        row = (
            self.db.query(orm.Certificate)
            .filter(orm.Certificate.user_id == user_id, orm.Certificate.course_id == course_id)
            .first()
        )
        return _certificate(row) if row else None

    def issue(self, certificate: Certificate) -> Tuple[Certificate, bool]:
        existing = self.find(certificate.user_id, certificate.course_id)
        if existing is not None:
            return existing, False
        row = orm.Certificate(
            id=certificate.id,
            user_id=certificate.user_id,
            course_id=certificate.course_id,
            user_name=certificate.user_name,
            course_title=certificate.course_title,
            issued_at=certificate.issued_at,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request issued it between the lookup and the insert.
            self.db.rollback()
            return self.find(certificate.user_id, certificate.course_id), False
        self.db.refresh(row)
        return _certificate(row), True

    def list_certificates(self, user_id: Optional[str] = None) -> List[Certificate]:
        q = self.db.query(orm.Certificate)
        if user_id is not None:
            q = q.filter(orm.Certificate.user_id == user_id)
        return [_certificate(c) for c in q.order_by(orm.Certificate.issued_at.asc()).all()]

    def delete_for_user(self, user_id: str) -> None:
        self.db.query(orm.Certificate).filter(orm.Certificate.user_id == user_id).delete(synchronize_session=False)
        self.db.commit()


class SqlStore(Store):
    def __init__(self, db: Session):
        self.db = db
        self.users = SqlUserRepository(db)
        self.roles = SqlRoleRepository(db)
        self.courses = SqlCourseRepository(db)
        self.quizzes = SqlQuizRepository(db)
        self.progress = SqlProgressRepository(db)
        self.certificates = SqlCertificateRepository(db)

    def close(self) -> None:
        self.db.close()
