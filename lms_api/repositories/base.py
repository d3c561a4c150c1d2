from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from lms_api.schemas.certificate_schemas import Certificate
from lms_api.schemas.course_schemas import Course, CourseModule, Lesson
from lms_api.schemas.progress_schemas import Progress
from lms_api.schemas.quiz_schemas import Quiz
from lms_api.schemas.user_schemas import User


class UserRepository(ABC):
    @abstractmethod
    def list_users(self) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def add(self, user: User) -> User:
        raise NotImplementedError

    @abstractmethod
    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        """Apply a partial update (snake_case field names). None if the user does not exist."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add_xp(self, user_id: str, amount: int) -> Optional[User]:
        """Add a signed amount to the user's XP accumulator in a single write."""
        raise NotImplementedError

    @abstractmethod
    def ranking(self, limit: Optional[int]) -> List[User]:
        """Users by XP descending, ties by id. limit=None returns everyone."""
        raise NotImplementedError


class RoleRepository(ABC):
    """Explicit username -> role grants consulted by the admin capability check."""

    @abstractmethod
    def get_role(self, username: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def grant(self, username: str, role: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_grants(self) -> Dict[str, str]:
        raise NotImplementedError


class CourseRepository(ABC):
    """
    Course catalog tree. Reads return whole courses with modules and lessons sorted by order.
    Deleting a course removes its modules and lessons; deleting a module removes its lessons.
    """

    @abstractmethod
    def list_courses(self) -> List[Course]:
        raise NotImplementedError

    @abstractmethod
    def get_course(self, course_id: str) -> Optional[Course]:
        raise NotImplementedError

    @abstractmethod
    def add_course(self, course: Course) -> Course:
        raise NotImplementedError

    @abstractmethod
    def update_course(self, course_id: str, fields: Dict[str, Any]) -> Optional[Course]:
        raise NotImplementedError

    @abstractmethod
    def delete_course(self, course_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_module(self, module_id: str) -> Optional[CourseModule]:
        raise NotImplementedError

    @abstractmethod
    def add_module(self, module: CourseModule) -> CourseModule:
        raise NotImplementedError

    @abstractmethod
    def update_module(self, module_id: str, fields: Dict[str, Any]) -> Optional[CourseModule]:
        raise NotImplementedError

    @abstractmethod
    def delete_module(self, module_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        raise NotImplementedError

    @abstractmethod
    def add_lesson(self, lesson: Lesson) -> Lesson:
        raise NotImplementedError

    @abstractmethod
    def update_lesson(self, lesson_id: str, fields: Dict[str, Any]) -> Optional[Lesson]:
        raise NotImplementedError

    @abstractmethod
    def delete_lesson(self, lesson_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def set_module_orders(self, orders: Dict[str, int]) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_lesson_orders(self, orders: Dict[str, int]) -> None:
        raise NotImplementedError


class QuizRepository(ABC):
    @abstractmethod
    def list_quizzes(self) -> List[Quiz]:
        raise NotImplementedError

    @abstractmethod
    def get(self, quiz_id: str) -> Optional[Quiz]:
        raise NotImplementedError

    @abstractmethod
    def add(self, quiz: Quiz) -> Quiz:
        raise NotImplementedError


class ProgressRepository(ABC):
    @abstractmethod
    def get(self, user_id: str, lesson_id: str) -> Optional[Progress]:
        raise NotImplementedError

    @abstractmethod
    def save(self, progress: Progress) -> Progress:
        """Insert or replace the row keyed by (user_id, lesson_id)."""
        raise NotImplementedError

    @abstractmethod
    def for_user(self, user_id: str) -> List[Progress]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[Progress]:
        raise NotImplementedError

    @abstractmethod
    def delete_for_user(self, user_id: str) -> None:
        raise NotImplementedError


class CertificateRepository(ABC):
    @abstractmethod
    def find(self, user_id: str, course_id: str) -> Optional[Certificate]:
        raise NotImplementedError

    @abstractmethod
    def issue(self, certificate: Certificate) -> Tuple[Certificate, bool]:
        """
        Store the certificate unless one already exists for (user_id, course_id).
        Returns (stored certificate, created). Implementations must make this safe
        against two concurrent issuers.
        """
        raise NotImplementedError

    @abstractmethod
    def list_certificates(self, user_id: Optional[str] = None) -> List[Certificate]:
        raise NotImplementedError

    @abstractmethod
    def delete_for_user(self, user_id: str) -> None:
        raise NotImplementedError


class Store(ABC):
    """Bundle of repositories handed to services; one per request for the SQL backend."""

    users: UserRepository
    roles: RoleRepository
    courses: CourseRepository
    quizzes: QuizRepository
    progress: ProgressRepository
    certificates: CertificateRepository

    def close(self) -> None:
        pass
