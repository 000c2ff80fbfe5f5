"""Slack Web API client for posting replies and moderation notices."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from tweetfleet.errors import UpstreamError
from tweetfleet.services import async_client, decode_json

logger = logging.getLogger("tweetfleet.services.slack")


class SlackClient:
    def __init__(self, bot_token: str, api_base: str = "https://slack.com/api", timeout: float | None = None) -> None:
        self.bot_token = bot_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    async def post_message(
        self,
        channel: str,
        *,
        text: Optional[str] = None,
        attachments: Optional[Sequence[dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        """Call ``chat.postMessage``. Returns the Slack response body."""
        if not self.bot_token:
            raise UpstreamError("Slack bot token is not configured")

        payload: dict[str, Any] = {"channel": channel}
        if text is not None:
            payload["text"] = text
        if attachments:
            payload["attachments"] = list(attachments)

        try:
            async with async_client(self.timeout) as client:
                resp = await client.post(
                    f"{self.api_base}/chat.postMessage",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.bot_token}"},
                )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"failed to reach Slack: {exc.__class__.__name__}") from exc

        body = decode_json(resp, upstream="Slack")
        if resp.status_code >= 400 or not isinstance(body, dict) or not body.get("ok"):
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning("chat.postMessage failed channel=%s status=%d error=%s", channel, resp.status_code, error)
            raise UpstreamError(f"Slack rejected message: {error or resp.status_code}")

        logger.info("Posted Slack message channel=%s ts=%s", body.get("channel"), body.get("ts"))
        return body
