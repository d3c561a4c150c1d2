"""
Pytest configuration and shared fixtures for the test suite.
Points the app at an in-memory database before anything imports lms_api.config,
and provides both storage backends for repository and service tests.
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Settings are read once at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_BACKEND", "sql")
os.environ.setdefault("ADMIN_USERNAMES", "")
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "lms-api-test-logs"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """In-memory SQLite engine; StaticPool keeps every session on the same database."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory(in_memory_engine):
    from lms_api.config import Base
    import lms_api.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)


@pytest.fixture
def sql_store(session_factory):
    from lms_api.repositories import SqlStore
    store = SqlStore(session_factory())
    yield store
    store.close()


@pytest.fixture
def json_store(tmp_path):
    from lms_api.repositories import JsonStore
    return JsonStore(tmp_path / "data")


@pytest.fixture(params=["sql", "json"])
def store(request):
    """Runs the test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_store")


def build_catalog(store):
    """
    Course c1 with module m1 holding lessons l1 and l2, plus student u1.
    """
    from lms_api.schemas.course_schemas import Course, CourseModule, Lesson
    from lms_api.schemas.user_schemas import User

    store.users.add(User(id="u1", name="Ana"))
    store.courses.add_course(
        Course(
            id="c1",
            title="Intro",
            modules=[
                CourseModule(
                    id="m1",
                    course_id="c1",
                    title="Basics",
                    order=1,
                    lessons=[
                        Lesson(id="l1", module_id="m1", title="First", order=1),
                        Lesson(id="l2", module_id="m1", title="Second", order=2),
                    ],
                )
            ],
        )
    )
    return store


@pytest.fixture
def catalog(store):
    return build_catalog(store)


@pytest.fixture
def catalog_builder():
    return build_catalog
