"""EVE SSO (OAuth2) helpers for the Slack invite flow."""

import base64
import logging
import urllib.parse
from typing import Any

import httpx

from tweetfleet.errors import UpstreamError
from tweetfleet.services import async_client, decode_json

logger = logging.getLogger("tweetfleet.services.eve_sso")


class EveSSOClient:
    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        callback_url: str,
        base_url: str = "https://login.eveonline.com",
        timeout: float | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def authorization_url(self, state: str) -> str:
        """Build the EVE SSO authorization URL."""
        params = {
            "response_type": "code",
            "redirect_uri": self.callback_url,
            "client_id": self.client_id,
            "state": state,
        }
        return f"{self.base_url}/v2/oauth/authorize?{urllib.parse.urlencode(params)}"

    def _basic_auth(self) -> str:
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    async def exchange_code(self, code: str) -> dict[str, Any]:
        """Exchange an authorization code for tokens and return the body as-is."""
        try:
            async with async_client(self.timeout) as client:
                resp = await client.post(
                    f"{self.base_url}/v2/oauth/token",
                    data={"grant_type": "authorization_code", "code": code},
                    headers={
                        "Authorization": self._basic_auth(),
                        "Content-Type": "application/x-www-form-urlencoded",
                    },
                )
        except httpx.HTTPError as exc:
            logger.warning("EVE SSO token exchange failed (%s)", exc.__class__.__name__)
            raise UpstreamError("failed to make post request to ccp") from exc

        payload = decode_json(resp, upstream="ccp")
        if not isinstance(payload, dict):
            raise UpstreamError("unable to parse response from ccp")
        return payload
