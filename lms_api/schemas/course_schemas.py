"""
Course catalog schemas: course -> modules -> lessons.
"""

from typing import Optional

from pydantic import Field, model_validator

from lms_api.schemas.base import CamelModel


def _fill_parent_ids(data, children_key: str, parent_key: str):
    # Nested JSON documents may omit the back-reference to their parent.
    if isinstance(data, dict) and isinstance(data.get(children_key), list) and "id" in data:
        data = {**data, children_key: [
            {parent_key: data["id"], **child} if isinstance(child, dict) else child
            for child in data[children_key]
        ]}
    return data


class Lesson(CamelModel):
    id: str
    module_id: str
    title: str
    video_url: str = ""
    content: Optional[str] = None
    order: int
    quiz_id: Optional[str] = None


class CourseModule(CamelModel):
    id: str
    course_id: str
    title: str
    description: str = ""
    order: int
    lessons: list[Lesson] = []

    @model_validator(mode="before")
    @classmethod
    def _lesson_parents(cls, data):
        return _fill_parent_ids(data, "lessons", "moduleId")


class Course(CamelModel):
    id: str
    title: str
    description: str = ""
    categories: list[str] = []
    modules: list[CourseModule] = []

    @model_validator(mode="before")
    @classmethod
    def _module_parents(cls, data):
        return _fill_parent_ids(data, "modules", "courseId")

    def lesson_ids(self) -> list[str]:
        return [lesson.id for module in self.modules for lesson in module.lessons]

    def has_lesson(self, lesson_id: str) -> bool:
        return any(lesson.id == lesson_id for module in self.modules for lesson in module.lessons)


class CreateCourseRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    categories: list[str] = []


class UpdateCourseRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    categories: Optional[list[str]] = None


class CreateModuleRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None


class UpdateModuleRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None


class CreateLessonRequest(CamelModel):
    title: Optional[str] = None
    video_url: Optional[str] = None
    content: Optional[str] = None
    quiz_id: Optional[str] = None


class UpdateLessonRequest(CamelModel):
    title: Optional[str] = None
    video_url: Optional[str] = None
    content: Optional[str] = None
    quiz_id: Optional[str] = None


class ReorderModulesRequest(CamelModel):
    module_ids: list[str] = Field(default_factory=list)


class ReorderLessonsRequest(CamelModel):
    lesson_ids: list[str] = Field(default_factory=list)
