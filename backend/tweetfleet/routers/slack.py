"""Slack router: Events API webhook and the EVE SSO gated invite flow."""

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from tweetfleet.errors import AuthenticationError, InternalError, UpstreamError, ValidationError
from tweetfleet.gateway import Gateway, get_gateway
from tweetfleet.models import (
    EventEnvelope,
    Identity,
    InviteCallbackRequest,
    InviteSendRequest,
    InviteSendResponse,
    InviteURLResponse,
)
from tweetfleet.signature import verified_body

logger = logging.getLogger("tweetfleet.slack")

router = APIRouter(prefix="/slack", tags=["slack"])

INVITE_CONFIRMATION = (
    "Your request has been submitted successfully. Please monitor your inbox "
    "for an invitation for the Tweetfleet Staff. Thank You"
)


def get_identity(request: Request) -> Identity:
    """Resolve the EVE character placed on ``request.state.identity`` by the auth middleware."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise InternalError("token not found")
    if isinstance(identity, Identity):
        return identity
    try:
        return Identity.model_validate(identity)
    except PydanticValidationError as exc:
        logger.error("Authenticated identity has no usable display name")
        raise InternalError("identity is missing a display name") from exc


@router.post("/events")
async def slack_events(
    body: bytes = Depends(verified_body),
    gateway: Gateway = Depends(get_gateway),
):
    """Slack Events API endpoint. Never waits on event processing."""
    try:
        envelope = EventEnvelope.model_validate(json.loads(body))
        if envelope.type == "url_verification":
            return {"challenge": envelope.challenge or ""}
        message = envelope.message_event()
    except (ValueError, PydanticValidationError) as exc:
        raise InternalError("unable to decode Slack event envelope") from exc

    if message is not None:
        gateway.dispatcher.submit(message)
    return {}


@router.get("/invite", response_model=InviteURLResponse)
async def slack_invite_url(gateway: Gateway = Depends(get_gateway)):
    state = gateway.oauth_states.issue()
    return InviteURLResponse(url=gateway.sso.authorization_url(state))


@router.post("/invite")
async def slack_invite_callback(
    body: InviteCallbackRequest,
    gateway: Gateway = Depends(get_gateway),
):
    """Finish the EVE SSO login and hand the token response back verbatim."""
    if not body.is_valid():
        raise ValidationError("invalid body received. Please provide both code and state")
    if not gateway.oauth_states.redeem(body.state):
        raise AuthenticationError("invalid state received")

    try:
        return await gateway.sso.exchange_code(body.code)
    except UpstreamError:
        logger.exception("Failed to exchange EVE SSO code")
        raise


@router.post("/invite/send", response_model=InviteSendResponse)
async def slack_invite_send(
    body: InviteSendRequest,
    identity: Identity = Depends(get_identity),
    gateway: Gateway = Depends(get_gateway),
):
    email = body.email.strip()
    if not email:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "error": "email_invalid: please supply a valid, non-empty email address"},
        )

    msg = f"{identity.name} ({email}) has requested an invitation to Tweetfleet."
    try:
        await gateway.slack.post_message(gateway.mod_channel, text=msg)
    except UpstreamError:
        logger.exception("Failed to post invite request to mod channel")
        raise
    return InviteSendResponse(message=INVITE_CONFIRMATION)
