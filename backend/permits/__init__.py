"""Permit data source: fetch, normalize, filter and hold snapshots."""

from .cache import CachedValue, LatestDatasetDateCache
from .categories import (
    ALL_BOROUGHS,
    ALL_JOB_TYPES,
    OTHER,
    CategoryStyle,
    category_style,
)
from .exceptions import PermitSourceError
from .fetch_permits import PermitSource
from .filters import FilterState, apply_filters, format_address, format_date, recent_permits
from .models import (
    DobNowPermitRecord,
    PermitEntity,
    PermitIssuanceRecord,
    from_dob_now,
    from_permit_issuance,
    merge_permit_sources,
)
from .refresher import PermitRefresher
from .store import PermitSnapshot, PermitStore

__all__ = [
    "ALL_BOROUGHS",
    "ALL_JOB_TYPES",
    "CachedValue",
    "CategoryStyle",
    "DobNowPermitRecord",
    "FilterState",
    "LatestDatasetDateCache",
    "OTHER",
    "PermitEntity",
    "PermitIssuanceRecord",
    "PermitRefresher",
    "PermitSnapshot",
    "PermitSource",
    "PermitSourceError",
    "PermitStore",
    "apply_filters",
    "category_style",
    "format_address",
    "format_date",
    "from_dob_now",
    "from_permit_issuance",
    "merge_permit_sources",
    "recent_permits",
]
