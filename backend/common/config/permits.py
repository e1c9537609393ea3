"""Permit data source configuration (NYC Open Data / Socrata)."""
from __future__ import annotations

import os
from dataclasses import dataclass

PERMIT_ISSUANCE_URL_DEFAULT = "https://data.cityofnewyork.us/resource/ipu4-2q9a.json"
DOB_NOW_PERMITS_URL_DEFAULT = "https://data.cityofnewyork.us/resource/rbx6-tga4.json"

DAYS_BACK_CHOICES = (7, 30, 90)


@dataclass(frozen=True)
class PermitSettings:
    permit_issuance_url: str = os.getenv("PERMIT_ISSUANCE_URL", PERMIT_ISSUANCE_URL_DEFAULT).strip()
    dob_now_url: str = os.getenv("DOB_NOW_PERMITS_URL", DOB_NOW_PERMITS_URL_DEFAULT).strip()
    app_token: str = os.getenv("SOCRATA_APP_TOKEN", "").strip()
    query_limit: int = int(os.getenv("PERMITS_QUERY_LIMIT", "1000"))
    request_timeout_sec: float = float(os.getenv("PERMITS_REQUEST_TIMEOUT_SEC", "30"))
    refresh_interval_sec: float = float(os.getenv("PERMITS_REFRESH_INTERVAL_SEC", "300"))
    latest_date_ttl_sec: float = float(os.getenv("PERMITS_LATEST_DATE_TTL_SEC", "3600"))
    default_days_back: int = int(os.getenv("PERMITS_DEFAULT_DAYS_BACK", "30"))
    recent_limit: int = int(os.getenv("PERMITS_RECENT_LIMIT", "30"))


permit_settings = PermitSettings()
