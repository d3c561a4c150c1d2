"""
Storage backends behind one repository contract.

- SqlStore: SQLAlchemy session per request (default, STORAGE_BACKEND=sql)
- JsonStore: whole-file JSON documents under DATA_DIR (STORAGE_BACKEND=json)
"""

from lms_api.repositories.base import (
    CertificateRepository,
    CourseRepository,
    ProgressRepository,
    QuizRepository,
    RoleRepository,
    Store,
    UserRepository,
)
from lms_api.repositories.json_store import JsonStore
from lms_api.repositories.sql_store import SqlStore

__all__ = [
    "CertificateRepository",
    "CourseRepository",
    "ProgressRepository",
    "QuizRepository",
    "RoleRepository",
    "Store",
    "UserRepository",
    "JsonStore",
    "SqlStore",
]
