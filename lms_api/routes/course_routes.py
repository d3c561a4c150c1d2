"""
Course catalog endpoints: courses, modules, lessons and their ordering.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from lms_api.dependencies import get_store
from lms_api.repositories.base import Store
from lms_api.schemas.course_schemas import (
    Course,
    CourseModule,
    CreateCourseRequest,
    CreateLessonRequest,
    CreateModuleRequest,
    Lesson,
    ReorderLessonsRequest,
    ReorderModulesRequest,
    UpdateCourseRequest,
    UpdateLessonRequest,
    UpdateModuleRequest,
)
from lms_api.schemas.user_schemas import User
from lms_api.services.course_service import CourseService
from lms_api.utils.auth import require_admin

course_routes = APIRouter()


@course_routes.get("/courses", response_model=list[Course])
async def list_courses(
    user_id: Optional[str] = Query(None, alias="userId", description="Only courses visible to this user's category"),
    store: Store = Depends(get_store),
) -> list[Course]:
    service = CourseService(store)
    if user_id:
        return service.courses_for_user(user_id)
    return service.find_all()


@course_routes.get("/courses/{course_id}", response_model=Course)
async def get_course(course_id: str, store: Store = Depends(get_store)) -> Course:
    course = CourseService(store).find_one(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@course_routes.post("/courses", response_model=Course)
async def create_course(
    req: CreateCourseRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> Course:
    return CourseService(store).create_course(req)


@course_routes.patch("/courses/{course_id}", response_model=Course)
async def update_course(
    course_id: str,
    req: UpdateCourseRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> Course:
    course = CourseService(store).update_course(course_id, req)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@course_routes.delete("/courses/{course_id}")
async def delete_course(
    course_id: str,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> dict:
    """Delete a course with all its modules and lessons."""
    if not CourseService(store).delete_course(course_id):
        raise HTTPException(status_code=404, detail="Course not found")
    return {"deleted": True}


@course_routes.post("/courses/{course_id}/modules", response_model=CourseModule)
async def create_module(
    course_id: str,
    req: CreateModuleRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> CourseModule:
    module = CourseService(store).add_module(course_id, req)
    if module is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return module


# Registered before /modules/{module_id} so "reorder" is not taken for a module id.
@course_routes.patch("/courses/{course_id}/modules/reorder", response_model=Course)
async def reorder_modules(
    course_id: str,
    req: ReorderModulesRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> Course:
    """Assign orders 1..n following moduleIds; modules left out go after them."""
    course = CourseService(store).reorder_modules(course_id, req.module_ids)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@course_routes.patch("/courses/{course_id}/modules/{module_id}", response_model=CourseModule)
async def update_module(
    course_id: str,
    module_id: str,
    req: UpdateModuleRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> CourseModule:
    module = CourseService(store).update_module(course_id, module_id, req)
    if module is None:
        raise HTTPException(status_code=404, detail="Module not found")
    return module


@course_routes.delete("/courses/{course_id}/modules/{module_id}")
async def delete_module(
    course_id: str,
    module_id: str,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> dict:
    if not CourseService(store).delete_module(course_id, module_id):
        raise HTTPException(status_code=404, detail="Module not found")
    return {"deleted": True}


@course_routes.post("/courses/{course_id}/modules/{module_id}/lessons", response_model=Lesson)
async def create_lesson(
    course_id: str,
    module_id: str,
    req: CreateLessonRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> Lesson:
    lesson = CourseService(store).add_lesson(course_id, module_id, req)
    if lesson is None:
        raise HTTPException(status_code=404, detail="Module not found")
    return lesson


@course_routes.patch("/courses/{course_id}/modules/{module_id}/lessons/reorder", response_model=CourseModule)
async def reorder_lessons(
    course_id: str,
    module_id: str,
    req: ReorderLessonsRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> CourseModule:
    module = CourseService(store).reorder_lessons(course_id, module_id, req.lesson_ids)
    if module is None:
        raise HTTPException(status_code=404, detail="Module not found")
    return module


@course_routes.patch("/courses/{course_id}/modules/{module_id}/lessons/{lesson_id}", response_model=Lesson)
async def update_lesson(
    course_id: str,
    module_id: str,
    lesson_id: str,
    req: UpdateLessonRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> Lesson:
    lesson = CourseService(store).update_lesson(course_id, module_id, lesson_id, req)
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return lesson


@course_routes.delete("/courses/{course_id}/modules/{module_id}/lessons/{lesson_id}")
async def delete_lesson(
    course_id: str,
    module_id: str,
    lesson_id: str,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> dict:
    if not CourseService(store).delete_lesson(course_id, module_id, lesson_id):
        raise HTTPException(status_code=404, detail="Lesson not found")
    return {"deleted": True}
