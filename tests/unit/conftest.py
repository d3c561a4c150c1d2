"""
Unit test fixtures. Services run against the shared store fixtures; external
HTTP services are replaced with httpx.MockTransport.
"""
import httpx
import pytest


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def mock_transport_factory(recorded_requests):
    """Build a MockTransport that records each request and answers with `handler`."""

    def _factory(handler):
        def _handle(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(_handle)

    return _factory
