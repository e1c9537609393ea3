"""Time-bounded cache for the latest date present in the permit dataset."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from .exceptions import PermitSourceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CachedValue(Generic[T]):
    value: T
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at


class LatestDatasetDateCache:
    """Caches the dataset's newest date for ``ttl_seconds``.

    The clock is injected so expiry can be tested without sleeping. A fetch
    failure falls back to the stale value when one exists.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[date]],
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._cached: Optional[CachedValue[date]] = None

    @property
    def cached(self) -> Optional[CachedValue[date]]:
        return self._cached

    def is_fresh(self) -> bool:
        return self._cached is not None and self._cached.age(self._clock()) < self._ttl_seconds

    def invalidate(self):
        self._cached = None

    async def get(self) -> date:
        if self.is_fresh():
            return self._cached.value
        try:
            value = await self._fetch()
        except PermitSourceError as exc:
            if self._cached is None:
                raise
            logger.warning("Latest dataset date refresh failed, using stale value: %s", exc)
            return self._cached.value
        self._cached = CachedValue(value=value, fetched_at=self._clock())
        return value
