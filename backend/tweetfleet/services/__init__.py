"""Shared plumbing for the Slack, ESI and EVE SSO clients."""

import logging
from typing import Any

import httpx

from tweetfleet import config
from tweetfleet.errors import UpstreamError
from tweetfleet.log_redact import httpx_event_hooks

logger = logging.getLogger("tweetfleet.services")


def async_client(timeout: float | None = None) -> httpx.AsyncClient:
    """Build an AsyncClient with a bounded timeout and redacted request logging."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout=timeout or config.REQUEST_TIMEOUT_SECONDS),
        headers={"User-Agent": config.USER_AGENT},
        event_hooks=httpx_event_hooks(),
    )


def decode_json(resp: httpx.Response, *, upstream: str) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        logger.warning("Undecodable response from %s status=%d", upstream, resp.status_code)
        raise UpstreamError(f"unable to parse response from {upstream}") from exc
