"""
Lesson progress endpoints. Completing the last lesson of a course issues its certificate.
"""

from fastapi import APIRouter, Depends, HTTPException

from lms_api.dependencies import get_store
from lms_api.repositories.base import Store
from lms_api.schemas.progress_schemas import MarkCompletedRequest, Progress, RecordAttemptRequest
from lms_api.schemas.user_schemas import User
from lms_api.services.progress_service import ProgressService
from lms_api.utils.auth import ensure_self_or_admin, get_current_user

progress_routes = APIRouter()


@progress_routes.post("/progress", response_model=Progress)
async def mark_completed(
    body: MarkCompletedRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> Progress:
    """Mark a lesson completed without a quiz (video watched to the end)."""
    ensure_self_or_admin(body.user_id, current_user, store)
    progress = ProgressService(store).mark_completed(body.user_id, body.lesson_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="User or lesson not found")
    return progress


@progress_routes.post("/progress/attempt", response_model=Progress)
async def record_attempt(
    body: RecordAttemptRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> Progress:
    """Record a quiz attempt; 4 or more correct answers complete the lesson."""
    ensure_self_or_admin(body.user_id, current_user, store)
    progress = ProgressService(store).record_attempt(body.user_id, body.lesson_id, body.score)
    if progress is None:
        raise HTTPException(status_code=404, detail="User or lesson not found")
    return progress


@progress_routes.get("/progress", response_model=list[Progress])
async def get_all_progress(store: Store = Depends(get_store)) -> list[Progress]:
    return ProgressService(store).get_all_progress()


@progress_routes.get("/progress/{user_id}", response_model=list[Progress])
async def get_user_progress(user_id: str, store: Store = Depends(get_store)) -> list[Progress]:
    return ProgressService(store).get_user_progress(user_id)
