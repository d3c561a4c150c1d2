"""
External identity provider relay.

The rest of the app only needs `authenticate(username, password) -> ExternalIdentity | None`.
HttpIdentityProvider implements it against the corporate login API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from lms_api.config import settings
from lms_api.schemas.auth_schemas import ExternalIdentity
from lms_api.utils.logger import configure_logging

logger = configure_logging()


class IdentityProvider(ABC):
    @abstractmethod
    async def authenticate(self, username: str, password: str) -> Optional[ExternalIdentity]:
        """Return the external profile, or None when the credentials are rejected."""
        raise NotImplementedError


def _first_str(data: dict, *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, (str, int)) and str(value).strip():
            return str(value).strip()
    return None


def parse_identity(body: Any) -> Optional[ExternalIdentity]:
    """
    Normalize the login API answer. The profile may sit under "user" / "usuario" or at
    the top level, with Portuguese (nome, usuario) or English field names.
    Returns None when the answer carries no profile: the API reports some rejected
    logins with a 2xx status and only a message.
    """
    if not isinstance(body, dict):
        return None
    profile = next((body[key] for key in ("user", "usuario") if isinstance(body.get(key), dict)), body)
    external_username = _first_str(profile, "usuario", "username", "login")
    if external_username is None:
        return None
    return ExternalIdentity(
        username=external_username,
        name=_first_str(profile, "nome", "name") or external_username,
        external_id=_first_str(profile, "id", "codigo"),
        email=_first_str(profile, "email"),
        avatar=_first_str(profile, "avatar", "foto"),
    )


class HttpIdentityProvider(IdentityProvider):
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.auth_api_url
        self.timeout = timeout or settings.auth_timeout_seconds
        self.transport = transport

    async def authenticate(self, username: str, password: str) -> Optional[ExternalIdentity]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.url,
                    json={"usuario": username, "senha": password},
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.warning("identity provider unreachable url=%s error=%s", self.url, e)
            return None

        if response.status_code >= 400:
            logger.warning("identity provider rejected login username=%s status=%s", username, response.status_code)
            return None
        try:
            body = response.json()
        except ValueError:
            logger.warning("identity provider answered non-JSON status=%s", response.status_code)
            return None
        if isinstance(body, dict) and body.get("success") is False:
            return None
        identity = parse_identity(body)
        if identity is None:
            logger.warning("identity provider answered without a profile username=%s", username)
        return identity


def get_identity_provider() -> IdentityProvider:
    """Identity provider dependency"""
    return HttpIdentityProvider()
