"""ESI (EVE Swagger Interface) status endpoints."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from tweetfleet.errors import UpstreamError
from tweetfleet.models import RouteStatus, ServerStatus
from tweetfleet.services import async_client, decode_json

logger = logging.getLogger("tweetfleet.services.esi")


class ESIClient:
    def __init__(self, base_url: str, timeout: float | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def fetch_server_status(self) -> tuple[int, Optional[ServerStatus]]:
        """Return the upstream status code and, on 200, the decoded server status."""
        try:
            async with async_client(self.timeout) as client:
                resp = await client.get(f"{self.base_url}/v1/status/")
        except httpx.HTTPError as exc:
            raise UpstreamError(f"failed to reach ESI: {exc.__class__.__name__}") from exc

        if resp.status_code > 200:
            logger.info("ESI server status unavailable status=%d", resp.status_code)
            return resp.status_code, None

        payload = decode_json(resp, upstream="ESI")
        try:
            return resp.status_code, ServerStatus.model_validate(payload)
        except PydanticValidationError as exc:
            raise UpstreamError("unexpected server status payload from ESI") from exc

    async def fetch_route_statuses(self, version: str) -> tuple[RouteStatus, ...]:
        try:
            async with async_client(self.timeout) as client:
                resp = await client.get(f"{self.base_url}/status.json", params={"version": version})
        except httpx.HTTPError as exc:
            raise UpstreamError(f"failed to reach ESI: {exc.__class__.__name__}") from exc

        if resp.status_code >= 400:
            raise UpstreamError(f"ESI route status request failed with status {resp.status_code}")

        payload = decode_json(resp, upstream="ESI")
        if not isinstance(payload, list):
            raise UpstreamError("unexpected route status payload from ESI")
        try:
            return tuple(RouteStatus.model_validate(item) for item in payload)
        except PydanticValidationError as exc:
            raise UpstreamError("unexpected route status payload from ESI") from exc
