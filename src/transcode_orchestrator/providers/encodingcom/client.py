"""encoding.com API client.

Every action is a POST of a form field named ``json`` holding
``{"query": {...}}``; responses come back as ``{"response": {...}}``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ...errors import RemoteTransportError

logger = logging.getLogger(__name__)


@dataclass
class APIStatus:
    """Service status reported by status.encoding.com."""

    status: str
    status_code: str
    incident: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code.lower() == "ok"


class EncodingComClient:
    """Thin async wrapper around the encoding.com media API."""

    def __init__(
        self,
        endpoint: str,
        user_id: str,
        user_key: str,
        *,
        status_endpoint: str = "http://status.encoding.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.user_id = user_id
        self.user_key = user_key
        self.status_endpoint = status_endpoint
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.timeout)

    async def _do(self, action: str, operation: str, **params: Any) -> dict[str, Any]:
        query = {"userid": self.user_id, "userkey": self.user_key, "action": action, **params}

        try:
            async with self._client() as client:
                response = await client.post(
                    self.endpoint,
                    data={"json": json.dumps({"query": query})},
                )
        except httpx.HTTPError as e:
            raise RemoteTransportError(operation, e) from e

        if not response.is_success:
            raise RemoteTransportError(operation, f"HTTP {response.status_code}: {response.text}")

        try:
            body = response.json().get("response") or {}
        except ValueError as e:
            raise RemoteTransportError(operation, f"invalid JSON response: {e}") from e

        errors = body.get("errors")
        if errors:
            messages = errors.get("error") if isinstance(errors, dict) else errors
            if isinstance(messages, list):
                messages = ", ".join(str(m) for m in messages)
            raise RemoteTransportError(operation, str(messages))

        return body

    async def add_media(self, source: list[str], formats: list[dict[str, Any]]) -> dict[str, Any]:
        """Create a media job; returns the response with ``MediaID`` and ``message``."""
        body = await self._do("AddMedia", "creating the media", source=source, format=formats)
        if not body.get("MediaID"):
            raise RemoteTransportError("creating the media", "no MediaID in response")
        logger.info(f"Created encoding.com media {body['MediaID']}")
        return body

    async def get_status(self, media_id: str) -> dict[str, Any]:
        """Extended status: includes one ``format`` block per output.

        Extended responses nest the media under ``job``; the media fields are
        returned either way.
        """
        body = await self._do(
            "GetStatus",
            f"retrieving the status of media {media_id}",
            mediaid=media_id,
            extended="yes",
        )
        job = body.get("job")
        if isinstance(job, list):
            job = job[0] if job else None
        return job if isinstance(job, dict) else body

    async def cancel_media(self, media_id: str) -> dict[str, Any]:
        return await self._do("CancelMedia", f"cancelling media {media_id}", mediaid=media_id)

    async def save_preset(self, name: str, fmt: dict[str, Any]) -> str:
        body = await self._do("SavePreset", f"saving preset {name}", name=name, format=fmt)
        return body.get("SavedPreset") or name

    async def get_preset(self, name: str) -> dict[str, Any]:
        return await self._do("GetPreset", f"retrieving preset {name}", name=name, type="user")

    async def delete_preset(self, name: str) -> None:
        await self._do("DeletePreset", f"deleting preset {name}", name=name)

    async def api_status(self) -> APIStatus:
        operation = "retrieving the API status"
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.status_endpoint.rstrip('/')}/status.php",
                    params={"format": "json"},
                )
        except httpx.HTTPError as e:
            raise RemoteTransportError(operation, e) from e

        if not response.is_success:
            raise RemoteTransportError(operation, f"HTTP {response.status_code}: {response.text}")

        data = response.json()
        return APIStatus(
            status=data.get("status", ""),
            status_code=data.get("status_code", ""),
            incident=data.get("incident") or "",
        )
