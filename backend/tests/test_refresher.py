"""Tests for PermitRefresher scheduling: single flight, coalescing, stop."""
from __future__ import annotations

import asyncio

import pytest

from permits import PermitRefresher, PermitSourceError, PermitStore


class GatedFetch:
    """Fetch whose completion the test controls."""

    def __init__(self, result):
        self.result = result
        self.calls: list[int] = []
        self.gate = asyncio.Event()
        self.active = 0
        self.max_active = 0

    async def __call__(self, days_back: int):
        self.calls.append(days_back)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await self.gate.wait()
        finally:
            self.active -= 1
        if isinstance(self.result, Exception):
            raise self.result
        return list(self.result)


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_commits(self, permit_factory):
        store = PermitStore()

        async def _fetch(days_back):
            return [permit_factory()]

        refresher = PermitRefresher(_fetch, store, days_back=7)
        assert await refresher.refresh()
        assert store.snapshot.is_loaded
        assert store.snapshot.days_back == 7

    @pytest.mark.asyncio
    async def test_overlapping_triggers_coalesce(self, permit_factory):
        store = PermitStore()
        fetch = GatedFetch([permit_factory()])
        refresher = PermitRefresher(fetch, store)

        first = asyncio.create_task(refresher.refresh())
        await asyncio.sleep(0)
        assert refresher.in_flight
        assert await refresher.refresh() is False
        assert await refresher.refresh() is False

        fetch.gate.set()
        assert await first
        assert len(fetch.calls) == 2
        assert fetch.max_active == 1
        assert not refresher.in_flight
        assert store.snapshot.sequence == 2

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_snapshot(self, permit_factory):
        store = PermitStore()
        results = [[permit_factory()], PermitSourceError("Permit API error (503)")]

        async def _fetch(days_back):
            result = results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        refresher = PermitRefresher(_fetch, store)
        await refresher.refresh()
        snapshot = store.snapshot
        await refresher.refresh()
        assert store.snapshot is snapshot
        assert "503" in store.last_error
        assert not refresher.in_flight

    @pytest.mark.asyncio
    async def test_set_days_back(self, permit_factory):
        store = PermitStore()
        seen = []

        async def _fetch(days_back):
            seen.append(days_back)
            return []

        refresher = PermitRefresher(_fetch, store, days_back=30)
        await refresher.set_days_back(90)
        assert seen == [90]
        assert refresher.days_back == 90
        assert store.snapshot.days_back == 90

    @pytest.mark.asyncio
    async def test_set_days_back_rejects_non_positive(self):
        async def _fetch(days_back):
            return []

        refresher = PermitRefresher(_fetch, PermitStore())
        with pytest.raises(ValueError):
            await refresher.set_days_back(0)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_runs_periodically(self):
        store = PermitStore()
        calls = []

        async def _fetch(days_back):
            calls.append(days_back)
            return []

        refresher = PermitRefresher(_fetch, store, interval_seconds=0.01)
        refresher.start()
        assert refresher.is_running
        await asyncio.sleep(0.05)
        await refresher.stop()
        assert len(calls) >= 2
        assert not refresher.is_running

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_fetch(self, permit_factory):
        store = PermitStore()
        fetch = GatedFetch([permit_factory()])
        refresher = PermitRefresher(fetch, store)
        refresher.start()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert fetch.active == 1

        await refresher.stop()
        assert fetch.active == 0
        assert not store.snapshot.is_loaded
        assert not refresher.in_flight

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        async def _fetch(days_back):
            return []

        await PermitRefresher(_fetch, PermitStore()).stop()
