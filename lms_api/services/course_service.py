"""
Course catalog service: course/module/lesson CRUD, reordering and category filtering.
"""

from typing import Optional
from uuid import uuid4

from lms_api.repositories.base import Store
from lms_api.schemas.course_schemas import (
    Course,
    CourseModule,
    CreateCourseRequest,
    CreateLessonRequest,
    CreateModuleRequest,
    Lesson,
    UpdateCourseRequest,
    UpdateLessonRequest,
    UpdateModuleRequest,
)
from lms_api.utils.logger import configure_logging

logger = configure_logging()

DEFAULT_COURSE_TITLE = "New course"
DEFAULT_MODULE_TITLE = "New module"
DEFAULT_LESSON_TITLE = "New lesson"


def new_id(prefix: str) -> str:
    return f"{prefix}{uuid4().hex[:12]}"


def next_order(siblings) -> int:
    """Order for a new last sibling; stays unique after deletes leave gaps."""
    return max((s.order for s in siblings), default=0) + 1


def sequential_orders(current_ids: list[str], requested_ids: list[str]) -> dict[str, int]:
    """
    Map sibling id -> 1-based order. Requested ids come first in the given sequence;
    siblings left out of the request keep their relative order after them. Ids that
    are not siblings are ignored, and so are repeats.
    """
    siblings = set(current_ids)
    ordered: list[str] = []
    for item_id in requested_ids:
        if item_id in siblings and item_id not in ordered:
            ordered.append(item_id)
    ordered.extend(i for i in current_ids if i not in ordered)
    return {item_id: idx for idx, item_id in enumerate(ordered, start=1)}


class CourseService:
    """Service for the course -> module -> lesson tree."""

    def __init__(self, store: Store):
        self.store = store

    # ----- courses -----
    def find_all(self) -> list[Course]:
        return self.store.courses.list_courses()

    def find_one(self, course_id: str) -> Optional[Course]:
        return self.store.courses.get_course(course_id)

    def courses_for_user(self, user_id: str) -> list[Course]:
        """Courses visible to the user: all of them without a category, else untagged or matching ones."""
        courses = self.find_all()
        user = self.store.users.get(user_id)
        if user is None or not user.category:
            return courses
        return [c for c in courses if not c.categories or user.category in c.categories]

    def find_course_for_lesson(self, lesson_id: str) -> Optional[Course]:
        """First course whose tree contains the lesson."""
        for course in self.find_all():
            if course.has_lesson(lesson_id):
                return course
        return None

    def create_course(self, req: CreateCourseRequest) -> Course:
        course = Course(
            id=new_id("c"),
            title=(req.title or "").strip() or DEFAULT_COURSE_TITLE,
            description=req.description or "",
            categories=[c.strip() for c in req.categories if c.strip()],
            modules=[],
        )
        logger.info("course created id=%s", course.id)
        return self.store.courses.add_course(course)

    def update_course(self, course_id: str, req: UpdateCourseRequest) -> Optional[Course]:
        fields = req.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return self.find_one(course_id)
        return self.store.courses.update_course(course_id, fields)

    def delete_course(self, course_id: str) -> bool:
        deleted = self.store.courses.delete_course(course_id)
        if deleted:
            logger.info("course deleted id=%s", course_id)
        return deleted

    # ----- modules -----
    def _module_in_course(self, course_id: str, module_id: str) -> Optional[CourseModule]:
        module = self.store.courses.get_module(module_id)
        if module is None or module.course_id != course_id:
            return None
        return module

    def add_module(self, course_id: str, req: CreateModuleRequest) -> Optional[CourseModule]:
        course = self.find_one(course_id)
        if course is None:
            return None
        module = CourseModule(
            id=new_id("m"),
            course_id=course_id,
            title=(req.title or "").strip() or DEFAULT_MODULE_TITLE,
            description=req.description or "",
            order=next_order(course.modules),
            lessons=[],
        )
        return self.store.courses.add_module(module)

    def update_module(self, course_id: str, module_id: str, req: UpdateModuleRequest) -> Optional[CourseModule]:
        if self._module_in_course(course_id, module_id) is None:
            return None
        fields = req.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return self.store.courses.get_module(module_id)
        return self.store.courses.update_module(module_id, fields)

    def delete_module(self, course_id: str, module_id: str) -> bool:
        if self._module_in_course(course_id, module_id) is None:
            return False
        return self.store.courses.delete_module(module_id)

    def reorder_modules(self, course_id: str, module_ids: list[str]) -> Optional[Course]:
        course = self.find_one(course_id)
        if course is None:
            return None
        orders = sequential_orders([m.id for m in course.modules], module_ids)
        self.store.courses.set_module_orders(orders)
        return self.find_one(course_id)

    # ----- lessons -----
    def _lesson_in_module(self, course_id: str, module_id: str, lesson_id: str) -> Optional[Lesson]:
        if self._module_in_course(course_id, module_id) is None:
            return None
        lesson = self.store.courses.get_lesson(lesson_id)
        if lesson is None or lesson.module_id != module_id:
            return None
        return lesson

    def add_lesson(self, course_id: str, module_id: str, req: CreateLessonRequest) -> Optional[Lesson]:
        module = self._module_in_course(course_id, module_id)
        if module is None:
            return None
        lesson = Lesson(
            id=new_id("l"),
            module_id=module_id,
            title=(req.title or "").strip() or DEFAULT_LESSON_TITLE,
            video_url=req.video_url or "",
            content=req.content,
            order=next_order(module.lessons),
            quiz_id=req.quiz_id or None,
        )
        return self.store.courses.add_lesson(lesson)

    def update_lesson(
        self, course_id: str, module_id: str, lesson_id: str, req: UpdateLessonRequest
    ) -> Optional[Lesson]:
        if self._lesson_in_module(course_id, module_id, lesson_id) is None:
            return None
        fields = req.model_dump(exclude_unset=True)
        if "quiz_id" in fields:
            # An empty quizId detaches the quiz from the lesson.
            fields["quiz_id"] = fields["quiz_id"] or None
        fields = {k: v for k, v in fields.items() if v is not None or k == "quiz_id"}
        if not fields:
            return self.store.courses.get_lesson(lesson_id)
        return self.store.courses.update_lesson(lesson_id, fields)

    def delete_lesson(self, course_id: str, module_id: str, lesson_id: str) -> bool:
        if self._lesson_in_module(course_id, module_id, lesson_id) is None:
            return False
        return self.store.courses.delete_lesson(lesson_id)

    def reorder_lessons(self, course_id: str, module_id: str, lesson_ids: list[str]) -> Optional[CourseModule]:
        module = self._module_in_course(course_id, module_id)
        if module is None:
            return None
        orders = sequential_orders([l.id for l in module.lessons], lesson_ids)
        self.store.courses.set_lesson_orders(orders)
        return self.store.courses.get_module(module_id)
