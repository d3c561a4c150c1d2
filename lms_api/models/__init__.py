"""
ORM entities for the relational storage backend.

Services never import these directly; they go through `lms_api.repositories`.
"""

from lms_api.models.models import (
    User,
    RoleGrant,
    Course,
    Module,
    Lesson,
    Quiz,
    Progress,
    Certificate,
)

__all__ = [
    "User",
    "RoleGrant",
    "Course",
    "Module",
    "Lesson",
    "Quiz",
    "Progress",
    "Certificate",
]
