"""One-time CSRF state tokens for the EVE SSO redirect flow."""

import logging
import secrets

from tweetfleet.cache import EphemeralStore

logger = logging.getLogger("tweetfleet.oauth_state")

STATE_TOKEN_BYTES = 24


class OAuthStateManager:
    def __init__(self, store: EphemeralStore[bool], ttl_seconds: float = 300) -> None:
        self._store = store
        self._ttl = ttl_seconds

    def issue(self) -> str:
        token = secrets.token_urlsafe(STATE_TOKEN_BYTES)
        self._store.set(token, True, self._ttl)
        return token

    def redeem(self, token: str) -> bool:
        """Consume *token*. Succeeds at most once per issued token."""
        if not token:
            return False
        redeemed = self._store.pop(token, False)
        if not redeemed:
            logger.info("Rejected unknown, expired or replayed OAuth state")
        return bool(redeemed)
