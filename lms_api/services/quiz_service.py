"""
Quiz bank service. Quizzes can be added but never updated.
"""

from typing import Optional
from uuid import uuid4

from lms_api.repositories.base import Store
from lms_api.schemas.quiz_schemas import CreateQuizRequest, Quiz, QuizQuestion
from lms_api.services.quiz_seed import SEED_QUIZZES
from lms_api.utils.logger import configure_logging

logger = configure_logging()


class QuizService:
    def __init__(self, store: Store):
        self.store = store

    def find_all(self) -> list[Quiz]:
        return self.store.quizzes.list_quizzes()

    def find_one(self, quiz_id: str) -> Optional[Quiz]:
        return self.store.quizzes.get(quiz_id)

    def create_quiz(self, req: CreateQuizRequest) -> Quiz:
        quiz = Quiz(
            id=f"q{uuid4().hex[:12]}",
            passing_score=req.passing_score,
            questions=[
                QuizQuestion(
                    id=str(idx),
                    text=q.text.strip(),
                    options=q.options,
                    correct_option_index=q.correct_option_index,
                )
                for idx, q in enumerate(req.questions, start=1)
            ],
        )
        logger.info("quiz created id=%s questions=%s", quiz.id, len(quiz.questions))
        return self.store.quizzes.add(quiz)

    def seed(self) -> int:
        """Load the seed quizzes whose ids are missing from the store."""
        added = 0
        for raw in SEED_QUIZZES:
            if self.store.quizzes.get(raw["id"]) is None:
                self.store.quizzes.add(Quiz.model_validate(raw))
                added += 1
        if added:
            logger.info("quiz bank seeded count=%s", added)
        return added
