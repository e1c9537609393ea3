"""Recurring permit refresh with at most one request in flight."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .models import PermitEntity
from .store import PermitStore

logger = logging.getLogger(__name__)

FetchPermits = Callable[[int], Awaitable[list[PermitEntity]]]


class PermitRefresher:
    """Periodically replaces the store's snapshot.

    Triggers that arrive while a refresh is running are coalesced into one
    follow-up refresh, so completions can never interleave.
    """

    def __init__(
        self,
        fetch: FetchPermits,
        store: PermitStore,
        interval_seconds: float = 300.0,
        days_back: int = 30,
    ):
        self._fetch = fetch
        self._store = store
        self._interval_seconds = interval_seconds
        self._days_back = days_back
        self._in_flight = False
        self._rerun_requested = False
        self._task: Optional[asyncio.Task] = None

    @property
    def days_back(self) -> int:
        return self._days_back

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> bool:
        """Run a refresh now. Returns False if it was coalesced into a running one."""
        if self._in_flight:
            self._rerun_requested = True
            logger.debug("Refresh already in flight; coalescing trigger")
            return False

        self._in_flight = True
        try:
            while True:
                self._rerun_requested = False
                await self._refresh_once()
                if not self._rerun_requested:
                    break
        finally:
            self._in_flight = False
        return True

    async def _refresh_once(self):
        days_back = self._days_back
        sequence = self._store.begin_request()
        try:
            entities = await self._fetch(days_back)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Permit refresh #%d failed; keeping previous snapshot", sequence)
            self._store.record_failure(sequence, f"{type(exc).__name__}: {exc}")
            return
        self._store.commit(sequence, entities, days_back=days_back)

    async def set_days_back(self, days_back: int) -> bool:
        if days_back <= 0:
            raise ValueError("days_back must be positive")
        self._days_back = days_back
        return await self.refresh()

    def start(self):
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Permit refresher started (every %.0fs)", self._interval_seconds)

    async def _run(self):
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval_seconds)

    async def stop(self):
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Permit refresher stopped")
