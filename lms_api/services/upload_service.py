"""
Video upload relay to a Flussonic VOD location.
"""

from __future__ import annotations

from typing import AsyncIterator, Optional
from uuid import uuid4

import httpx

from lms_api.config import Settings, settings as default_settings
from lms_api.utils.logger import configure_logging, log_request

logger = configure_logging()

CHUNK_SIZE = 1024 * 1024


class UploadError(Exception):
    """Upload relay failure carrying the HTTP status the route should answer with."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def storage_filename(original_name: Optional[str]) -> str:
    """Random name that keeps the original extension."""
    name = original_name or ""
    ext = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    return f"{uuid4()}.{ext}" if ext else str(uuid4())


class FlussonicClient:
    def __init__(self, cfg: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        cfg = cfg or default_settings
        self.base_url = cfg.flussonic_url.rstrip("/")
        self.user = cfg.flussonic_user
        self.password = cfg.flussonic_password
        self.vod_name = cfg.flussonic_vod_name
        self.transport = transport

    @property
    def configured(self) -> bool:
        return all([self.base_url, self.user, self.password, self.vod_name])

    def _require_config(self) -> None:
        if not self.configured:
            raise UploadError(500, "Flussonic configuration missing")

    def _client(self, timeout: Optional[float]) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=(self.user, self.password),
            timeout=timeout,
            transport=self.transport,
        )

    def upload_url(self, filename: str) -> str:
        return f"{self.base_url}/streamer/api/v3/vods/{self.vod_name}/storages/0/files/{filename}"

    def playback_url(self, filename: str) -> str:
        return f"{self.base_url}/{self.vod_name}/{filename}/index.m3u8"

    async def upload(self, filename: str, content: bytes | AsyncIterator[bytes], content_type: Optional[str]) -> str:
        """PUT the file into the VOD storage and return its HLS playback URL."""
        self._require_config()
        url = self.upload_url(filename)
        headers = {"Content-Type": content_type or "application/octet-stream"}
        try:
            with log_request(logger, f"flussonic upload file={filename}"):
                async with self._client(timeout=None) as client:
                    response = await client.put(url, content=content, headers=headers)
        except httpx.HTTPError as e:
            raise UploadError(502, "Failed to upload video") from e

        if response.status_code >= 400:
            logger.error("flussonic upload failed status=%s body=%s", response.status_code, response.text[:500])
            raise UploadError(502, f"Flussonic upload failed: {response.reason_phrase}")
        return self.playback_url(filename)

    async def configure_cors(self, origins: list[str]) -> None:
        """Allow the given origins to play the VOD location from a browser."""
        self._require_config()
        url = f"{self.base_url}/streamer/api/v3/vods/{self.vod_name}"
        body = {"cors": {"enabled": True, "domains": origins}}
        try:
            async with self._client(timeout=30.0) as client:
                response = await client.put(url, json=body)
        except httpx.HTTPError as e:
            raise UploadError(502, "Failed to reach Flussonic") from e
        if response.status_code >= 400:
            logger.error("flussonic cors update failed status=%s body=%s", response.status_code, response.text[:500])
            raise UploadError(502, f"Flussonic CORS update failed: {response.reason_phrase}")
        logger.info("flussonic cors configured vod=%s origins=%s", self.vod_name, origins)


async def iter_file(fileobj, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Stream an UploadFile in chunks instead of reading it whole."""
    while True:
        chunk = await fileobj.read(chunk_size)
        if not chunk:
            break
        yield chunk


def get_flussonic_client() -> FlussonicClient:
    """Flussonic client dependency"""
    return FlussonicClient()
