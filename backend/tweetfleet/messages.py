"""Slack attachment payloads for status replies."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from tweetfleet.categories import CategoryBucket, format_routes_block
from tweetfleet.models import ESI_TIME_LAYOUT, ServerStatus

SERVER_NAME = "Tranquility"

INDETERMINATE_TEXT = (
    "Cannot determine server status. It might be offline, or experiencing connectivity issues."
)

Attachment = dict[str, Any]


def format_esi_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(ESI_TIME_LAYOUT)


def format_running_for(started_at: datetime, now: Optional[datetime] = None) -> str:
    """Render uptime as ``HHh MMm SSs``. Wraps every 24 hours; days are not shown."""
    now = now or datetime.now(timezone.utc)
    elapsed = int((now - started_at).total_seconds()) % 86400
    hours, rest = divmod(elapsed, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}h {minutes:02d}m {seconds:02d}s"


def server_unavailable_attachment(status_code: int) -> Attachment:
    text = "Offline" if status_code == 503 else INDETERMINATE_TEXT
    return {
        "color": "danger",
        "title": f"{SERVER_NAME} status",
        "text": text,
        "fallback": f"{SERVER_NAME} Status: {text}",
    }


def server_status_attachment(status: ServerStatus, now: Optional[datetime] = None) -> Attachment:
    started = format_esi_time(status.start_time)
    color = "warning" if status.vip else "good"
    in_vip = ", in VIP" if status.vip else ""
    return {
        "color": color,
        "title": f"{SERVER_NAME} status",
        "fields": [
            {"title": "Players Online", "value": str(status.players), "short": False},
            {"title": "Started At", "value": started, "short": True},
            {"title": "Running For", "value": format_running_for(status.start_time, now), "short": True},
        ],
        "fallback": f"{SERVER_NAME} status: {status.players} player online, started at {started}{in_vip}",
    }


def bucket_attachment(bucket: CategoryBucket) -> Attachment:
    title = bucket.category.status.value.title()
    count = len(bucket.routes)
    pct = bucket.health_percentage
    emoji = bucket.category.emoji
    summary = f"{count} {title} (out of {bucket.total},  {pct:.3f}%)"
    return {
        "color": bucket.category.color,
        "fallback": f"{title}: {count} out of {bucket.total}, {pct:.3f}%",
        "text": f"{emoji} {summary} {emoji} {format_routes_block(bucket.routes)}",
    }


def esi_status_attachments(buckets: list[CategoryBucket]) -> list[Attachment]:
    if not buckets:
        return [{"text": ":ok_hand:"}]
    return [bucket_attachment(bucket) for bucket in buckets]
