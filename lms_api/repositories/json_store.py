"""
File-backed storage backend.

Each entity type lives in one JSON file under the data directory (users.json,
courses.json, ...). The whole file is rewritten after every mutation. Records are
kept in memory and handed out as deep copies so callers cannot mutate state.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

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
from lms_api.schemas.quiz_schemas import Quiz
from lms_api.schemas.user_schemas import User
from lms_api.utils.logger import configure_logging

logger = configure_logging()

M = TypeVar("M", bound=BaseModel)


class JsonFiles:
    """Load/save whole JSON documents under one directory."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def load(self, filename: str, default: Any) -> Any:
        path = self.data_dir / filename
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("could not read %s, using empty default: %s", path, e)
            return default

    def save(self, filename: str, data: Any) -> None:
        path = self.data_dir / filename
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def load_models(self, filename: str, model: Type[M]) -> List[M]:
        raw = self.load(filename, [])
        if not isinstance(raw, list):
            logger.error("%s does not hold a list, ignoring it", filename)
            return []
        out: List[M] = []
        for item in raw:
            try:
                out.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning("skipping invalid record in %s: %s", filename, e.errors())
        return out

    def save_models(self, filename: str, items: List[BaseModel]) -> None:
        self.save(filename, [i.model_dump(mode="json", by_alias=True) for i in items])


def _copy(item: M) -> M:
    return item.model_copy(deep=True)


class _JsonRepository:
    def __init__(self, store: "JsonStore"):
        self.store = store

    @property
    def lock(self) -> threading.RLock:
        return self.store.lock


class JsonUserRepository(_JsonRepository, UserRepository):
    def _find(self, user_id: str) -> Optional[User]:
        return next((u for u in self.store.users_data if u.id == user_id), None)

    def list_users(self) -> List[User]:
        return [_copy(u) for u in sorted(self.store.users_data, key=lambda u: u.name)]

    def get(self, user_id: str) -> Optional[User]:
        user = self._find(user_id)
        return _copy(user) if user else None

    def add(self, user: User) -> User:
        with self.lock:
            self.store.users_data.append(_copy(user))
            self.store.flush("users")
        return _copy(user)

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        with self.lock:
            user = self._find(user_id)
            if user is None:
                return None
            for key, value in fields.items():
                setattr(user, key, value)
            self.store.flush("users")
            return _copy(user)

    def delete(self, user_id: str) -> bool:
        with self.lock:
            before = len(self.store.users_data)
            self.store.users_data = [u for u in self.store.users_data if u.id != user_id]
            if len(self.store.users_data) == before:
                return False
            self.store.flush("users")
            return True

    def add_xp(self, user_id: str, amount: int) -> Optional[User]:
        with self.lock:
            user = self._find(user_id)
            if user is None:
                return None
            user.xp = (user.xp or 0) + amount
            self.store.flush("users")
            return _copy(user)

    def ranking(self, limit: Optional[int]) -> List[User]:
        ranked = sorted(self.store.users_data, key=lambda u: (-u.xp, u.id))
        if limit:
            ranked = ranked[:limit]
        return [_copy(u) for u in ranked]


class JsonRoleRepository(_JsonRepository, RoleRepository):
    def get_role(self, username: str) -> Optional[str]:
        return self.store.roles_data.get(username)

    def grant(self, username: str, role: str) -> None:
        with self.lock:
            self.store.roles_data[username] = role
            self.store.flush("roles")

    def list_grants(self) -> Dict[str, str]:
        return dict(self.store.roles_data)


class JsonCourseRepository(_JsonRepository, CourseRepository):
    def _course(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.store.courses_data if c.id == course_id), None)

    def _module(self, module_id: str) -> Optional[CourseModule]:
        for course in self.store.courses_data:
            for module in course.modules:
                if module.id == module_id:
                    return module
        return None

    def _lesson(self, lesson_id: str) -> Optional[Lesson]:
        for course in self.store.courses_data:
            for module in course.modules:
                for lesson in module.lessons:
                    if lesson.id == lesson_id:
                        return lesson
        return None

    @staticmethod
    def _sorted(course: Course) -> Course:
        out = _copy(course)
        out.modules.sort(key=lambda m: m.order)
        for module in out.modules:
            module.lessons.sort(key=lambda l: l.order)
        return out

    def list_courses(self) -> List[Course]:
        return [self._sorted(c) for c in self.store.courses_data]

    def get_course(self, course_id: str) -> Optional[Course]:
        course = self._course(course_id)
        return self._sorted(course) if course else None

    def add_course(self, course: Course) -> Course:
        with self.lock:
            self.store.courses_data.append(_copy(course))
            self.store.flush("courses")
        return self._sorted(course)

    def update_course(self, course_id: str, fields: Dict[str, Any]) -> Optional[Course]:
        with self.lock:
            course = self._course(course_id)
            if course is None:
                return None
            for key, value in fields.items():
                setattr(course, key, value)
            self.store.flush("courses")
            return self._sorted(course)

    def delete_course(self, course_id: str) -> bool:
        with self.lock:
            before = len(self.store.courses_data)
            self.store.courses_data = [c for c in self.store.courses_data if c.id != course_id]
            if len(self.store.courses_data) == before:
                return False
            self.store.flush("courses")
            return True

    def get_module(self, module_id: str) -> Optional[CourseModule]:
        module = self._module(module_id)
        if module is None:
            return None
        out = _copy(module)
        out.lessons.sort(key=lambda l: l.order)
        return out

    def add_module(self, module: CourseModule) -> CourseModule:
        with self.lock:
            course = self._course(module.course_id)
            if course is None:
                raise KeyError(module.course_id)
            course.modules.append(_copy(module))
            self.store.flush("courses")
        return _copy(module)

    def update_module(self, module_id: str, fields: Dict[str, Any]) -> Optional[CourseModule]:
        with self.lock:
            module = self._module(module_id)
            if module is None:
                return None
            for key, value in fields.items():
                setattr(module, key, value)
            self.store.flush("courses")
        return self.get_module(module_id)

    def delete_module(self, module_id: str) -> bool:
        with self.lock:
            for course in self.store.courses_data:
                kept = [m for m in course.modules if m.id != module_id]
                if len(kept) != len(course.modules):
                    course.modules = kept
                    self.store.flush("courses")
                    return True
            return False

    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        lesson = self._lesson(lesson_id)
        return _copy(lesson) if lesson else None

    def add_lesson(self, lesson: Lesson) -> Lesson:
        with self.lock:
            module = self._module(lesson.module_id)
            if module is None:
                raise KeyError(lesson.module_id)
            module.lessons.append(_copy(lesson))
            self.store.flush("courses")
        return _copy(lesson)

    def update_lesson(self, lesson_id: str, fields: Dict[str, Any]) -> Optional[Lesson]:
        with self.lock:
            lesson = self._lesson(lesson_id)
            if lesson is None:
                return None
            for key, value in fields.items():
                setattr(lesson, key, value)
            self.store.flush("courses")
            return _copy(lesson)

    def delete_lesson(self, lesson_id: str) -> bool:
        with self.lock:
            for course in self.store.courses_data:
                for module in course.modules:
                    kept = [l for l in module.lessons if l.id != lesson_id]
                    if len(kept) != len(module.lessons):
                        module.lessons = kept
                        self.store.flush("courses")
                        return True
            return False

    def _set_orders(self, orders: Dict[str, int], find: Callable[[str], Any]) -> None:
        with self.lock:
            for item_id, order in orders.items():
                item = find(item_id)
                if item is not None:
                    item.order = order
            self.store.flush("courses")

    def set_module_orders(self, orders: Dict[str, int]) -> None:
        self._set_orders(orders, self._module)

    def set_lesson_orders(self, orders: Dict[str, int]) -> None:
        self._set_orders(orders, self._lesson)


class JsonQuizRepository(_JsonRepository, QuizRepository):
    def list_quizzes(self) -> List[Quiz]:
        return [_copy(q) for q in self.store.quizzes_data]

    def get(self, quiz_id: str) -> Optional[Quiz]:
        quiz = next((q for q in self.store.quizzes_data if q.id == quiz_id), None)
        return _copy(quiz) if quiz else None

    def add(self, quiz: Quiz) -> Quiz:
        with self.lock:
            self.store.quizzes_data.append(_copy(quiz))
            self.store.flush("quizzes")
        return _copy(quiz)


class JsonProgressRepository(_JsonRepository, ProgressRepository):
    def _find(self, user_id: str, lesson_id: str) -> Optional[Progress]:
        return next(
            (p for p in self.store.progress_data if p.user_id == user_id and p.lesson_id == lesson_id),
            None,
        )

    def get(self, user_id: str, lesson_id: str) -> Optional[Progress]:
        progress = self._find(user_id, lesson_id)
        return _copy(progress) if progress else None

    def save(self, progress: Progress) -> Progress:
        with self.lock:
            existing = self._find(progress.user_id, progress.lesson_id)
            if existing is not None:
                self.store.progress_data.remove(existing)
            self.store.progress_data.append(_copy(progress))
            self.store.flush("progress")
        return _copy(progress)

    def for_user(self, user_id: str) -> List[Progress]:
        return [_copy(p) for p in self.store.progress_data if p.user_id == user_id]

    def list_all(self) -> List[Progress]:
        return [_copy(p) for p in self.store.progress_data]

    def delete_for_user(self, user_id: str) -> None:
        with self.lock:
            self.store.progress_data = [p for p in self.store.progress_data if p.user_id != user_id]
            self.store.flush("progress")


class JsonCertificateRepository(_JsonRepository, CertificateRepository):
    def find(self, user_id: str, course_id: str) -> Optional[Certificate]:
        cert = next(
            (c for c in self.store.certificates_data if c.user_id == user_id and c.course_id == course_id),
            None,
        )
        return _copy(cert) if cert else None

    def issue(self, certificate: Certificate) -> Tuple[Certificate, bool]:
        with self.lock:
            existing = self.find(certificate.user_id, certificate.course_id)
            if existing is not None:
                return existing, False
            self.store.certificates_data.append(_copy(certificate))
            self.store.flush("certificates")
        return _copy(certificate), True

    def list_certificates(self, user_id: Optional[str] = None) -> List[Certificate]:
        return [
            _copy(c)
            for c in self.store.certificates_data
            if user_id is None or c.user_id == user_id
        ]

    def delete_for_user(self, user_id: str) -> None:
        with self.lock:
            self.store.certificates_data = [c for c in self.store.certificates_data if c.user_id != user_id]
            self.store.flush("certificates")


class JsonStore(Store):
    FILES = {
        "users": "users.json",
        "roles": "roles.json",
        "courses": "courses.json",
        "quizzes": "quizzes.json",
        "progress": "progress.json",
        "certificates": "certificates.json",
    }

    def __init__(self, data_dir: str | Path):
        self.files = JsonFiles(data_dir)
        self.lock = threading.RLock()

        self.users_data: List[User] = self.files.load_models(self.FILES["users"], User)
        self.courses_data: List[Course] = self.files.load_models(self.FILES["courses"], Course)
        self.quizzes_data: List[Quiz] = self.files.load_models(self.FILES["quizzes"], Quiz)
        self.progress_data: List[Progress] = self.files.load_models(self.FILES["progress"], Progress)
        self.certificates_data: List[Certificate] = self.files.load_models(self.FILES["certificates"], Certificate)
        roles = self.files.load(self.FILES["roles"], {})
        self.roles_data: Dict[str, str] = roles if isinstance(roles, dict) else {}

        self.users = JsonUserRepository(self)
        self.roles = JsonRoleRepository(self)
        self.courses = JsonCourseRepository(self)
        self.quizzes = JsonQuizRepository(self)
        self.progress = JsonProgressRepository(self)
        self.certificates = JsonCertificateRepository(self)

    def flush(self, kind: str) -> None:
        filename = self.FILES[kind]
        if kind == "roles":
            self.files.save(filename, self.roles_data)
        else:
            self.files.save_models(filename, getattr(self, f"{kind}_data"))
