"""In-memory cache of ESI route-status snapshots, keyed by ESI version."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable

from tweetfleet.cache import EphemeralStore
from tweetfleet.models import RouteStatus, StatusSnapshot

logger = logging.getLogger("tweetfleet.state")

RouteFetcher = Callable[[str], Awaitable[Iterable[RouteStatus]]]


class StatusCache:
    """Flush-and-refill cache for ESI route statuses.

    A successful :meth:`refresh` for any variant empties the whole cache
    before storing the new snapshot, so a refresh of ``"latest"`` evicts a
    still-fresh ``"dev"`` snapshot. Concurrent refreshes are not coalesced;
    each one calls the upstream and the last writer wins.
    """

    def __init__(self, store: EphemeralStore[StatusSnapshot]) -> None:
        self._store = store

    def lookup(self, variant: str) -> StatusSnapshot | None:
        return self._store.get(variant)

    async def refresh(self, variant: str, fetch: RouteFetcher) -> StatusSnapshot:
        routes = await fetch(variant)
        snapshot = StatusSnapshot(
            variant=variant,
            routes=tuple(routes),
            fetched_at=datetime.now(timezone.utc),
        )
        self._store.flush()
        self._store.set(variant, snapshot)
        logger.info("Refreshed ESI status snapshot variant=%s routes=%d", variant, len(snapshot.routes))
        return snapshot

    async def get_or_refresh(self, variant: str, fetch: RouteFetcher) -> StatusSnapshot:
        cached = self.lookup(variant)
        if cached is not None:
            return cached
        return await self.refresh(variant, fetch)
