"""Slack request signing (``v0`` HMAC-SHA256 scheme).

See https://api.slack.com/authentication/verifying-requests-from-slack
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from typing import Callable, Mapping

from fastapi import Request

from tweetfleet.errors import AuthenticationError

logger = logging.getLogger("tweetfleet.signature")

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"
VERSION = "v0"


class SignatureVerifier:
    def __init__(
        self,
        signing_secret: str,
        *,
        tolerance_seconds: int = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = signing_secret.encode("utf-8")
        self._tolerance = tolerance_seconds
        self._clock = clock

    def sign(self, body: bytes, timestamp: str | int) -> str:
        basestring = f"{VERSION}:{timestamp}:".encode("utf-8") + body
        digest = hmac.new(self._secret, basestring, hashlib.sha256).hexdigest()
        return f"{VERSION}={digest}"

    def verify(self, headers: Mapping[str, str], body: bytes) -> None:
        """Raise :class:`AuthenticationError` unless *body* was signed by Slack."""
        if not self._secret:
            raise AuthenticationError("Slack signing secret is not configured")

        raw_timestamp = headers.get(TIMESTAMP_HEADER)
        if not raw_timestamp:
            raise AuthenticationError(f"missing {TIMESTAMP_HEADER} header")
        try:
            timestamp = int(raw_timestamp)
        except ValueError as exc:
            raise AuthenticationError(f"invalid {TIMESTAMP_HEADER} header") from exc
        if abs(self._clock() - timestamp) > self._tolerance:
            raise AuthenticationError("timestamp is outside the allowed window")

        signature = headers.get(SIGNATURE_HEADER)
        if not signature:
            raise AuthenticationError(f"missing {SIGNATURE_HEADER} header")

        expected = self.sign(body, raw_timestamp).encode("ascii")
        if not hmac.compare_digest(expected, signature.encode("utf-8", "surrogateescape")):
            raise AuthenticationError("computed signature does not match")


async def verified_body(request: Request) -> bytes:
    """FastAPI dependency returning the raw body once its signature checks out.

    Starlette caches the body on the request, so handlers can still call
    ``await request.body()`` and see the same bytes.
    """
    body = await request.body()
    verifier: SignatureVerifier = request.app.state.gateway.verifier
    try:
        verifier.verify(request.headers, body)
    except AuthenticationError as exc:
        logger.warning("Rejected Slack request: %s", exc.message)
        raise
    return body
