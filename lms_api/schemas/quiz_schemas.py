"""
Quiz bank schemas. Quizzes are immutable once created.
"""

from pydantic import Field, model_validator

from lms_api.schemas.base import CamelModel

OPTIONS_PER_QUESTION = 3


class QuizQuestion(CamelModel):
    id: str
    text: str
    options: list[str]
    correct_option_index: int


class Quiz(CamelModel):
    id: str
    questions: list[QuizQuestion]
    passing_score: int = 60  # percentage


class CreateQuizQuestion(CamelModel):
    text: str = Field(min_length=1)
    options: list[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_option_index: int

    @model_validator(mode="after")
    def _index_in_range(self) -> "CreateQuizQuestion":
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError("correctOptionIndex must point at one of the options")
        return self


class CreateQuizRequest(CamelModel):
    questions: list[CreateQuizQuestion] = Field(min_length=1)
    passing_score: int = Field(default=60, ge=0, le=100)
