"""Fetch building permits from NYC Open Data (Socrata)."""
from __future__ import annotations

import asyncio
import logging
import time
from datetime import date, timedelta
from typing import Any, Callable

import aiohttp
from pydantic import BaseModel, ValidationError

from common.config import PermitSettings, permit_settings
from .cache import LatestDatasetDateCache
from .exceptions import PermitSourceError
from .models import (
    DobNowPermitRecord,
    PermitEntity,
    PermitIssuanceRecord,
    from_dob_now,
    from_permit_issuance,
    merge_permit_sources,
    parse_date,
)

logger = logging.getLogger(__name__)


def _parse_rows(
    rows: list[dict[str, Any]],
    record_type: type[BaseModel],
    convert: Callable[[Any], PermitEntity | None],
    source: str,
) -> list[PermitEntity | None]:
    """Convert raw rows, skipping any that fail validation."""
    entities = []
    for row in rows:
        try:
            record = record_type(**row)
        except ValidationError as exc:
            logger.debug("Skipping malformed %s row: %s", source, exc)
            continue
        entities.append(convert(record))
    return entities


def _headers(settings: PermitSettings) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if settings.app_token:
        headers["X-App-Token"] = settings.app_token
    return headers


async def _get_json(
    session: aiohttp.ClientSession,
    url: str,
    params: dict[str, str],
    settings: PermitSettings,
) -> list[dict[str, Any]]:
    try:
        async with session.get(url, params=params, headers=_headers(settings)) as response:
            if response.status != 200:
                detail = await response.text()
                raise PermitSourceError(f"Permit API error ({response.status}): {detail[:200]}")
            data = await response.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise PermitSourceError(f"Permit API request failed: {type(exc).__name__}: {exc}") from exc

    if not isinstance(data, list):
        raise PermitSourceError("Permit API returned a non-list payload")
    return data


async def fetch_latest_filing_date(session: aiohttp.ClientSession, settings: PermitSettings) -> date:
    """Newest filing date in the issuance dataset (the dataset lags real time)."""
    rows = await _get_json(
        session,
        settings.permit_issuance_url,
        {"$select": "max(filing_date) AS latest"},
        settings,
    )
    latest = parse_date(rows[0].get("latest")) if rows else None
    if latest is None:
        logger.warning("Latest filing date unavailable, using today")
        return date.today()
    return latest


async def fetch_permit_issuance(
    session: aiohttp.ClientSession,
    since: date,
    settings: PermitSettings,
) -> list[PermitEntity]:
    params = {
        "$order": "filing_date DESC",
        "$limit": str(settings.query_limit),
        "$where": (
            f"filing_date >= '{since.isoformat()}' "
            "AND gis_latitude IS NOT NULL AND gis_longitude IS NOT NULL"
        ),
    }
    rows = await _get_json(session, settings.permit_issuance_url, params, settings)
    entities = _parse_rows(rows, PermitIssuanceRecord, from_permit_issuance, "permit issuance")
    kept = [e for e in entities if e is not None]
    logger.info("Permit issuance: %d rows, %d geocoded", len(rows), len(kept))
    return kept


async def fetch_dob_now_permits(
    session: aiohttp.ClientSession,
    since: date,
    settings: PermitSettings,
) -> list[PermitEntity]:
    params = {
        "$order": "approved_date DESC",
        "$limit": str(settings.query_limit),
        "$where": (
            f"approved_date >= '{since.isoformat()}' "
            "AND latitude IS NOT NULL AND longitude IS NOT NULL"
        ),
    }
    rows = await _get_json(session, settings.dob_now_url, params, settings)
    entities = _parse_rows(rows, DobNowPermitRecord, from_dob_now, "DOB NOW")
    kept = [e for e in entities if e is not None]
    logger.info("DOB NOW permits: %d rows, %d geocoded", len(rows), len(kept))
    return kept


class PermitSource:
    """Both permit datasets merged into one entity list."""

    def __init__(
        self,
        settings: PermitSettings = permit_settings,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._settings = settings
        self._latest_date = LatestDatasetDateCache(
            self._fetch_latest_date,
            ttl_seconds=settings.latest_date_ttl_sec,
            clock=clock,
        )

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._settings.request_timeout_sec)
        )

    async def _fetch_latest_date(self) -> date:
        async with self._session() as session:
            return await fetch_latest_filing_date(session, self._settings)

    async def fetch(self, days_back: int) -> list[PermitEntity]:
        latest = await self._latest_date.get()
        since = latest - timedelta(days=days_back)

        async with self._session() as session:
            issuance, dob_now = await asyncio.gather(
                fetch_permit_issuance(session, since, self._settings),
                fetch_dob_now_permits(session, since, self._settings),
                return_exceptions=True,
            )

        if isinstance(issuance, BaseException):
            raise issuance
        if isinstance(dob_now, Exception):
            # Secondary source: degrade to issuance data only
            logger.warning("DOB NOW permits unavailable: %s", dob_now)
            dob_now = []
        elif isinstance(dob_now, BaseException):
            raise dob_now
        return merge_permit_sources(issuance, dob_now)
