"""Domain records and request/response models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ESI_TIME_LAYOUT = "%Y-%m-%dT%H:%M:%SZ"


def parse_esi_time(value: str) -> datetime:
    return datetime.strptime(value, ESI_TIME_LAYOUT).replace(tzinfo=timezone.utc)


class RouteHealth(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class RouteStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str
    route: str
    status: RouteHealth
    endpoint: Optional[str] = None
    tags: tuple[str, ...] = ()


class StatusSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    variant: str
    routes: tuple[RouteStatus, ...]
    fetched_at: datetime


class ServerStatus(BaseModel):
    players: int
    server_version: Optional[str] = None
    start_time: datetime
    vip: bool = False

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_start_time(cls, value):
        return parse_esi_time(value) if isinstance(value, str) else value


# --- Slack Events API ---
class MessageEvent(BaseModel):
    type: str
    channel: str = ""
    user: Optional[str] = None
    text: str = ""
    ts: Optional[str] = None
    bot_id: Optional[str] = None
    subtype: Optional[str] = None


class EventEnvelope(BaseModel):
    type: str
    challenge: Optional[str] = None
    team_id: Optional[str] = None
    event_id: Optional[str] = None
    event: Optional[dict[str, Any]] = None

    def message_event(self) -> Optional[MessageEvent]:
        if self.type != "event_callback" or not self.event:
            return None
        if self.event.get("type") != "message":
            return None
        return MessageEvent.model_validate(self.event)


# --- Invite flow ---
class InviteURLResponse(BaseModel):
    url: str


class InviteCallbackRequest(BaseModel):
    state: str = ""
    code: str = ""

    @field_validator("state", "code", mode="before")
    @classmethod
    def strip_value(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    def is_valid(self) -> bool:
        return bool(self.state and self.code)


class InviteSendRequest(BaseModel):
    email: str = Field(default="", max_length=320)


class InviteSendResponse(BaseModel):
    message: str


class Identity(BaseModel):
    """Authenticated EVE character, as resolved by the auth middleware."""

    name: str
    character_id: Optional[int] = None
