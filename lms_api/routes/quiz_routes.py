from fastapi import APIRouter, Depends, HTTPException

from lms_api.dependencies import get_store
from lms_api.repositories.base import Store
from lms_api.schemas.quiz_schemas import CreateQuizRequest, Quiz
from lms_api.schemas.user_schemas import User
from lms_api.services.quiz_service import QuizService
from lms_api.utils.auth import require_admin

quiz_routes = APIRouter()


@quiz_routes.get("/quizzes", response_model=list[Quiz])
async def list_quizzes(store: Store = Depends(get_store)) -> list[Quiz]:
    return QuizService(store).find_all()


@quiz_routes.get("/quizzes/{quiz_id}", response_model=Quiz)
async def get_quiz(quiz_id: str, store: Store = Depends(get_store)) -> Quiz:
    quiz = QuizService(store).find_one(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@quiz_routes.post("/quizzes", response_model=Quiz)
async def create_quiz(
    req: CreateQuizRequest,
    admin: User = Depends(require_admin),
    store: Store = Depends(get_store),
) -> Quiz:
    return QuizService(store).create_quiz(req)
