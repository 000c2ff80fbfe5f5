"""Composition root: the stores, managers and clients one app instance owns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from tweetfleet import config
from tweetfleet.cache import EphemeralStore
from tweetfleet.events import EventDispatcher, EventProcessor
from tweetfleet.models import StatusSnapshot
from tweetfleet.oauth_state import OAuthStateManager
from tweetfleet.services.esi import ESIClient
from tweetfleet.services.eve_sso import EveSSOClient
from tweetfleet.services.slack import SlackClient
from tweetfleet.signature import SignatureVerifier
from tweetfleet.state import StatusCache


@dataclass
class Gateway:
    verifier: SignatureVerifier
    oauth_states: OAuthStateManager
    status_cache: StatusCache
    slack: SlackClient
    esi: ESIClient
    sso: EveSSOClient
    dispatcher: EventDispatcher
    stores: tuple[EphemeralStore, ...]
    mod_channel: str


def build_gateway(
    *,
    signing_secret: Optional[str] = None,
    slack: Optional[SlackClient] = None,
    esi: Optional[ESIClient] = None,
    sso: Optional[EveSSOClient] = None,
    mod_channel: Optional[str] = None,
) -> Gateway:
    """Wire a gateway from config, letting callers swap in their own clients."""
    state_store: EphemeralStore[bool] = EphemeralStore(
        default_ttl=config.OAUTH_STATE_TTL_SECONDS,
        sweep_interval=config.OAUTH_STATE_SWEEP_SECONDS,
        name="oauth-states",
    )
    status_store: EphemeralStore[StatusSnapshot] = EphemeralStore(
        default_ttl=config.STATUS_CACHE_TTL_SECONDS,
        sweep_interval=config.STATUS_CACHE_SWEEP_SECONDS,
        name="esi-status",
    )

    slack = slack or SlackClient(config.SLACK_BOT_TOKEN, config.SLACK_API_BASE)
    esi = esi or ESIClient(config.ESI_BASE_URL)
    sso = sso or EveSSOClient(
        client_id=config.EVE_CLIENT_ID,
        client_secret=config.EVE_CLIENT_SECRET,
        callback_url=config.EVE_CALLBACK,
        base_url=config.EVE_SSO_BASE,
    )
    status_cache = StatusCache(status_store)
    processor = EventProcessor(slack=slack, esi=esi, status_cache=status_cache)

    return Gateway(
        verifier=SignatureVerifier(
            config.SLACK_SIGNING_SECRET if signing_secret is None else signing_secret,
            tolerance_seconds=config.SIGNATURE_TOLERANCE_SECONDS,
        ),
        oauth_states=OAuthStateManager(state_store, ttl_seconds=config.OAUTH_STATE_TTL_SECONDS),
        status_cache=status_cache,
        slack=slack,
        esi=esi,
        sso=sso,
        dispatcher=EventDispatcher(processor.process),
        stores=(state_store, status_store),
        mod_channel=config.SLACK_MOD_CHANNEL if mod_channel is None else mod_channel,
    )


def get_gateway(request: Request) -> Gateway:
    return request.app.state.gateway
