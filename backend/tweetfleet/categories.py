"""Severity bucketing and rendering of ESI route statuses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from tweetfleet.models import RouteHealth, RouteStatus, StatusSnapshot

MAX_RENDERED_ROUTES = 51


@dataclass(frozen=True)
class StatusCategory:
    status: RouteHealth
    emoji: str
    color: str


@dataclass(frozen=True)
class CategoryBucket:
    category: StatusCategory
    routes: tuple[RouteStatus, ...]
    total: int

    @property
    def health_percentage(self) -> float:
        return percentage(len(self.routes), self.total)


DEFAULT_CATEGORIES: tuple[StatusCategory, ...] = (
    StatusCategory(status=RouteHealth.RED, emoji=":fire:", color="danger"),
    StatusCategory(status=RouteHealth.YELLOW, emoji=":fire_engine:", color="warning"),
)


def percentage(top: int, bottom: int) -> float:
    """Return ``1 - (top / bottom) * 100``, or ``0.0`` when *bottom* is zero.

    This is not the share of routes in a bucket: 3 of 10 gives about -29.0.
    """
    if bottom == 0:
        return 0.0
    return 1 - ((top / bottom) * 100)


def categorize(
    source: Union[StatusSnapshot, Sequence[RouteStatus]],
    categories: Iterable[StatusCategory] = DEFAULT_CATEGORIES,
) -> list[CategoryBucket]:
    """Bucket routes by exact status match, in category order; empty buckets are dropped."""
    routes = source.routes if isinstance(source, StatusSnapshot) else tuple(source)
    total = len(routes)
    buckets: list[CategoryBucket] = []
    for category in categories:
        matching = tuple(route for route in routes if route.status == category.status)
        if matching:
            buckets.append(CategoryBucket(category=category, routes=matching, total=total))
    return buckets


def render_routes(routes: Sequence[RouteStatus], limit: int = MAX_RENDERED_ROUTES) -> list[str]:
    """Render ``METHOD /route`` lines, collapsing everything past *limit* into ``"N more"``.

    Past the limit the result holds ``limit + 1`` lines: *limit* routes plus the marker.
    """
    lines = [f"{route.method.upper()} {route.route}" for route in routes[:limit]]
    remaining = len(routes) - limit
    if remaining > 0:
        lines.append(f"{remaining} more")
    return lines


def format_routes_block(routes: Sequence[RouteStatus]) -> str:
    if not routes:
        return ""
    return "```" + "\n".join(render_routes(routes)) + "```"
