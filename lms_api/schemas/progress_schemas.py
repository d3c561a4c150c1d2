"""
Lesson progress schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from lms_api.schemas.base import CamelModel


class ProgressStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Progress(CamelModel):
    user_id: str
    lesson_id: str
    status: ProgressStatus = ProgressStatus.IN_PROGRESS
    attempts: int = 0
    score: int = 0
    completed_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _legacy_pending(cls, value):
        # Older JSON data files wrote PENDING for lessons not yet completed.
        return ProgressStatus.IN_PROGRESS if value == "PENDING" else value

    @property
    def completed(self) -> bool:
        return self.status == ProgressStatus.COMPLETED


class MarkCompletedRequest(CamelModel):
    user_id: str
    lesson_id: str


class RecordAttemptRequest(CamelModel):
    user_id: str
    lesson_id: str
    score: int = Field(ge=0)
