"""Bitmovin encoding API client.

API Reference: https://developer.bitmovin.com/encoding/reference
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...errors import RemoteTransportError
from ...pagination import Page

logger = logging.getLogger(__name__)

API_BASE = "https://api.bitmovin.com/v1"


class BitmovinAPIError(RemoteTransportError):
    """Error response from the Bitmovin API."""

    def __init__(self, operation: str, detail: str | Exception, status_code: int | None = None):
        super().__init__(operation, detail)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class BitmovinClient:
    """Async wrapper around the Bitmovin REST endpoints this service uses."""

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: str = API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "X-Api-Key": self.api_key,
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return ``data.result`` from the envelope."""
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    f"{self.endpoint}{path}",
                    headers=self._headers(),
                    json=json,
                    params=params,
                )
        except httpx.HTTPError as e:
            raise BitmovinAPIError(operation, e) from e

        if not response.is_success:
            detail = response.text
            try:
                detail = response.json().get("data", {}).get("message") or detail
            except ValueError:
                pass
            raise BitmovinAPIError(
                operation, f"HTTP {response.status_code}: {detail}", status_code=response.status_code
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise BitmovinAPIError(operation, f"invalid JSON response: {e}") from e

        return (envelope.get("data") or {}).get("result") or {}

    async def _create(self, path: str, operation: str, payload: dict[str, Any]) -> str:
        result = await self._request("POST", path, operation, json=payload)
        resource_id = result.get("id")
        if not resource_id:
            raise BitmovinAPIError(operation, "no resource ID in response")
        return resource_id

    # Codec configurations

    async def create_codec_config(self, kind: str, codec: str, payload: dict[str, Any]) -> str:
        """Create a ``video``/``audio`` codec configuration and return its ID."""
        return await self._create(
            f"/encoding/configurations/{kind}/{codec}", f"creating the {kind} config", payload
        )

    async def delete_codec_config(self, kind: str, codec: str, config_id: str) -> None:
        await self._request(
            "DELETE",
            f"/encoding/configurations/{kind}/{codec}/{config_id}",
            f"removing the {kind} config",
        )

    # Encodings

    async def create_encoding(self, name: str, cloud_region: str, encoder_version: str) -> str:
        return await self._create(
            "/encoding/encodings",
            "creating the encoding",
            {"name": name, "cloudRegion": cloud_region, "encoderVersion": encoder_version},
        )

    async def create_input(self, kind: str, payload: dict[str, Any]) -> str:
        return await self._create(f"/encoding/inputs/{kind}", f"creating the {kind} input", payload)

    async def create_output(self, kind: str, payload: dict[str, Any]) -> str:
        return await self._create(f"/encoding/outputs/{kind}", f"creating the {kind} output", payload)

    async def create_stream(self, encoding_id: str, payload: dict[str, Any]) -> str:
        return await self._create(
            f"/encoding/encodings/{encoding_id}/streams", "creating the stream", payload
        )

    async def create_muxing(self, encoding_id: str, kind: str, payload: dict[str, Any]) -> str:
        return await self._create(
            f"/encoding/encodings/{encoding_id}/muxings/{kind}", f"creating the {kind} muxing", payload
        )

    async def start_encoding(self, encoding_id: str) -> None:
        await self._request("POST", f"/encoding/encodings/{encoding_id}/start", "starting the encoding", json={})

    async def stop_encoding(self, encoding_id: str) -> None:
        await self._request("POST", f"/encoding/encodings/{encoding_id}/stop", "stopping the encoding")

    async def encoding_status(self, encoding_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/encoding/encodings/{encoding_id}/status", "retrieving the encoding status"
        )

    # Muxings

    async def list_muxings(self, encoding_id: str, kind: str, offset: int, limit: int) -> Page[dict[str, Any]]:
        result = await self._request(
            "GET",
            f"/encoding/encodings/{encoding_id}/muxings/{kind}",
            f"retrieving {kind} muxings",
            params={"offset": offset, "limit": limit},
        )
        return Page(items=list(result.get("items") or []), total_count=result.get("totalCount"))

    async def muxing_information(self, encoding_id: str, kind: str, muxing_id: str) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"/encoding/encodings/{encoding_id}/muxings/{kind}/{muxing_id}/information",
            f"retrieving muxing information with ID {muxing_id!r}",
        )

    # Account

    async def account_information(self) -> dict[str, Any]:
        return await self._request("GET", "/account/information", "retrieving account information")
