"""
Lesson progress and the completion flow:

    record attempt -> course complete? -> issue certificate -> award XP

Runs synchronously inside the request. Idempotency of the certificate step comes
from the store's `issue` (unique (user, course) key), so XP is only awarded by the
request that actually created the certificate.
"""

from datetime import datetime, timezone
from typing import Optional

from lms_api.repositories.base import Store
from lms_api.schemas.certificate_schemas import Certificate
from lms_api.schemas.progress_schemas import Progress, ProgressStatus
from lms_api.services.certificate_service import CertificateService
from lms_api.services.course_service import CourseService
from lms_api.services.user_service import UserService
from lms_api.utils.logger import configure_logging

logger = configure_logging()

PASSING_SCORE = 4  # correct answers out of a 5-question quiz
COURSE_COMPLETION_XP = 10
FALLBACK_USER_NAME = "Student"


class ProgressService:
    """Service for per-user lesson progress and course completion."""

    def __init__(self, store: Store):
        self.store = store
        self.courses = CourseService(store)
        self.certificates = CertificateService(store)
        self.users = UserService(store)

    def mark_completed(self, user_id: str, lesson_id: str) -> Optional[Progress]:
        """Completion without a quiz (e.g. the lesson video reached its end)."""
        return self.record_attempt(user_id, lesson_id, 0, force_complete=True)

    def record_attempt(
        self, user_id: str, lesson_id: str, score: int, force_complete: bool = False
    ) -> Optional[Progress]:
        """
        Record one attempt on a lesson. The latest score wins; a score of PASSING_SCORE
        or more (or force_complete) completes the lesson, and a completed lesson never
        goes back to in-progress. Returns None if the user or lesson does not exist.
        """
        if self.store.courses.get_lesson(lesson_id) is None:
            logger.warning("progress for unknown lesson user_id=%s lesson_id=%s", user_id, lesson_id)
            return None
        if self.store.users.get(user_id) is None:
            logger.warning("progress for unknown user user_id=%s lesson_id=%s", user_id, lesson_id)
            return None

        progress = self.store.progress.get(user_id, lesson_id)
        if progress is None:
            progress = Progress(user_id=user_id, lesson_id=lesson_id, status=ProgressStatus.IN_PROGRESS)

        progress.attempts += 1
        progress.score = score
        if score >= PASSING_SCORE or force_complete:
            if not progress.completed:
                progress.completed_at = datetime.now(timezone.utc)
            progress.status = ProgressStatus.COMPLETED

        saved = self.store.progress.save(progress)
        if saved.completed:
            self.check_and_issue_certificate(user_id, lesson_id)
        return saved

    def check_and_issue_certificate(self, user_id: str, completed_lesson_id: str) -> Optional[Certificate]:
        """
        Issue the course certificate and award XP if the lesson's course is now fully
        completed by the user. Returns the certificate only when this call created it.
        """
        course = self.courses.find_course_for_lesson(completed_lesson_id)
        if course is None:
            return None

        completed = {p.lesson_id for p in self.store.progress.for_user(user_id) if p.completed}
        if not all(lesson_id in completed for lesson_id in course.lesson_ids()):
            return None

        user = self.store.users.get(user_id)
        cert, created = self.certificates.issue_certificate(
            user_id,
            user.name if user else FALLBACK_USER_NAME,
            course.id,
            course.title,
        )
        if not created:
            logger.debug("certificate already issued user_id=%s course_id=%s", user_id, course.id)
            return None

        if user is not None:
            self.users.update_xp(user_id, COURSE_COMPLETION_XP)
            logger.info(
                "awarded xp=%s user_id=%s for completing course_id=%s",
                COURSE_COMPLETION_XP, user_id, course.id,
            )
        return cert

    def get_user_progress(self, user_id: str) -> list[Progress]:
        return self.store.progress.for_user(user_id)

    def get_all_progress(self) -> list[Progress]:
        return self.store.progress.list_all()
