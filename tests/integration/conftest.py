"""
Integration test fixtures. Overrides get_store for API tests with an in-memory DB,
and replaces the identity API and Flussonic with in-process fakes.
"""
from typing import Optional

import httpx
import pytest

from lms_api.schemas.auth_schemas import ExternalIdentity
from lms_api.services.identity_client import IdentityProvider


class FakeIdentityProvider(IdentityProvider):
    """Accepts any user whose password is "secret"."""

    def __init__(self):
        self.calls = []

    async def authenticate(self, username: str, password: str) -> Optional[ExternalIdentity]:
        self.calls.append((username, password))
        if password != "secret":
            return None
        return ExternalIdentity(username=username, name=username.title(), email=f"{username}@corp.test")


@pytest.fixture
def override_get_store(session_factory):
    """Store factory bound to the test's in-memory engine."""
    from lms_api.bootstrap import seed_store
    from lms_api.repositories import SqlStore

    seed = SqlStore(session_factory())
    try:
        seed_store(seed, ["boss"])
    finally:
        seed.close()

    def _get_store():
        store = SqlStore(session_factory())
        try:
            yield store
        finally:
            store.close()

    return _get_store


@pytest.fixture
def test_store(session_factory):
    """Direct store access for arranging and inspecting data around API calls."""
    from lms_api.repositories import SqlStore
    store = SqlStore(session_factory())
    yield store
    store.close()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def flussonic_requests():
    return []


@pytest.fixture
def flussonic_client(flussonic_requests):
    from lms_api.config import Settings
    from lms_api.services.upload_service import FlussonicClient

    def _handle(request: httpx.Request) -> httpx.Response:
        flussonic_requests.append(request)
        return httpx.Response(200)

    cfg = Settings(
        flussonic_url="https://media.test",
        flussonic_user="svc",
        flussonic_password="pw",
        flussonic_vod_name="lessons",
    )
    return FlussonicClient(cfg, transport=httpx.MockTransport(_handle))


@pytest.fixture
def api_client(override_get_store, identity_provider, flussonic_client):
    """FastAPI TestClient with in-memory store and fake external services."""
    from fastapi.testclient import TestClient
    from lms_api.api import app
    from lms_api.dependencies import get_store
    from lms_api.services.identity_client import get_identity_provider
    from lms_api.services.upload_service import get_flussonic_client

    app.dependency_overrides[get_store] = override_get_store
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_flussonic_client] = lambda: flussonic_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(test_store):
    """Bearer header for "boss", who holds the admin grant seeded by override_get_store."""
    from lms_api.schemas.user_schemas import Role, User
    from lms_api.utils.jwt import create_access_token

    test_store.users.add(User(id="boss", name="Boss", role=Role.ADMIN))
    return {"Authorization": f"Bearer {create_access_token('boss', Role.ADMIN.value)}"}


@pytest.fixture
def student_headers(test_store):
    from lms_api.schemas.user_schemas import User
    from lms_api.utils.jwt import create_access_token

    test_store.users.add(User(id="u1", name="Ana"))
    return {"Authorization": f"Bearer {create_access_token('u1', 'student')}"}
