"""Chat command handling for Slack message events."""

from __future__ import annotations

import asyncio
import logging
import shlex
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from tweetfleet.categories import DEFAULT_CATEGORIES, StatusCategory, categorize
from tweetfleet.errors import GatewayError
from tweetfleet.messages import esi_status_attachments, server_status_attachment, server_unavailable_attachment
from tweetfleet.models import MessageEvent
from tweetfleet.services.esi import ESIClient
from tweetfleet.services.slack import SlackClient
from tweetfleet.state import StatusCache

logger = logging.getLogger("tweetfleet.events")

DEFAULT_ESI_VERSION = "latest"

SERVER_STATUS_TRIGGERS = frozenset({"!status", "!tq"})
ESI_STATUS_TRIGGERS = frozenset({"!esi"})


@dataclass(frozen=True)
class Command:
    name: str
    flags: dict[str, str] = field(default_factory=dict)


def parse_command(text: str) -> Optional[Command]:
    """Parse ``!esi version=dev`` / ``!esi --version dev`` style messages."""
    try:
        tokens = shlex.split(text or "")
    except ValueError:
        tokens = (text or "").split()
    if not tokens:
        return None

    trigger = tokens[0].lower()
    if trigger in SERVER_STATUS_TRIGGERS:
        name = "server_status"
    elif trigger in ESI_STATUS_TRIGGERS:
        name = "esi_status"
    else:
        return None

    flags: dict[str, str] = {}
    args = iter(tokens[1:])
    for token in args:
        key = token.lstrip("-")
        if not key:
            continue
        if "=" in key:
            key, value = key.split("=", 1)
        elif token.startswith("--"):
            value = next(args, "")
        else:
            continue
        flags[key.lower()] = value
    return Command(name=name, flags=flags)


class EventProcessor:
    def __init__(
        self,
        *,
        slack: SlackClient,
        esi: ESIClient,
        status_cache: StatusCache,
        categories: tuple[StatusCategory, ...] = DEFAULT_CATEGORIES,
    ) -> None:
        self._slack = slack
        self._esi = esi
        self._status_cache = status_cache
        self._categories = categories

    async def process(self, event: MessageEvent) -> None:
        if event.bot_id or event.subtype:
            return
        command = parse_command(event.text)
        if command is None:
            return

        try:
            if command.name == "server_status":
                await self._reply_server_status(event.channel)
            elif command.name == "esi_status":
                version = command.flags.get("version") or DEFAULT_ESI_VERSION
                await self._reply_esi_status(event.channel, version)
        except GatewayError as exc:
            logger.warning("Failed to answer %s in channel=%s: %s", command.name, event.channel, exc.message)
            await self._reply_error(event.channel, exc.message)

    async def _reply_server_status(self, channel: str) -> None:
        status_code, server_status = await self._esi.fetch_server_status()
        if server_status is None:
            attachment = server_unavailable_attachment(status_code)
        else:
            attachment = server_status_attachment(server_status)

        logger.info("Responding to request for eve server status")
        await self._slack.post_message(channel, attachments=[attachment])

    async def _reply_esi_status(self, channel: str, version: str) -> None:
        snapshot = await self._status_cache.get_or_refresh(version, self._esi.fetch_route_statuses)
        buckets = categorize(snapshot, self._categories)

        logger.info("Responding to request for esi route status version=%s", version)
        await self._slack.post_message(channel, attachments=esi_status_attachments(buckets))

    async def _reply_error(self, channel: str, message: str) -> None:
        try:
            await self._slack.post_message(channel, text=message)
        except GatewayError as exc:
            logger.error("Failed to post error reply to channel=%s: %s", channel, exc.message)


class EventDispatcher:
    """Runs event handlers as background tasks; callers get no completion signal."""

    def __init__(self, handler: Callable[[MessageEvent], Awaitable[None]]) -> None:
        self._handler = handler
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, event: MessageEvent) -> None:
        task = asyncio.create_task(self._handler(event), name=f"slack-event-{event.ts or 'unknown'}")
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Slack event handler failed", exc_info=exc)

    async def drain(self, timeout: Optional[float] = None) -> int:
        """Wait for in-flight handlers; cancel whatever is still running after *timeout*.

        Returns the number of handlers that had to be cancelled.
        """
        if not self._tasks:
            return 0
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning("Cancelled %d Slack event handler(s) still running at shutdown", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
        return len(pending)
