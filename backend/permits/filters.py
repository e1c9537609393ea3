"""Filtering and presentation helpers for permit entities."""
from __future__ import annotations

from datetime import date
from typing import Iterable

from pydantic import BaseModel, Field

from .categories import ALL_BOROUGHS, ALL_JOB_TYPES, OTHER
from .models import PermitEntity


class FilterState(BaseModel):
    job_types: set[str] = Field(default_factory=lambda: set(ALL_JOB_TYPES) | {OTHER})
    boroughs: set[str] = Field(default_factory=lambda: set(ALL_BOROUGHS))


def matches_filters(entity: PermitEntity, filters: FilterState) -> bool:
    code = entity.category_code.upper()
    if code in ALL_JOB_TYPES:
        job_type_match = code in filters.job_types
    else:
        job_type_match = OTHER in filters.job_types
    return job_type_match and entity.borough.upper() in filters.boroughs


def apply_filters(entities: Iterable[PermitEntity], filters: FilterState) -> list[PermitEntity]:
    return [e for e in entities if matches_filters(e, filters)]


def _sort_date(entity: PermitEntity) -> date:
    return entity.issued_date or entity.filing_date or date.min


def recent_permits(entities: Iterable[PermitEntity], limit: int = 30) -> list[PermitEntity]:
    """Most recent first, by issued date falling back to filing date."""
    return sorted(entities, key=_sort_date, reverse=True)[:limit]


def format_address(entity: PermitEntity) -> str:
    parts = [entity.house_number, entity.street_name, entity.borough]
    address = " ".join(p for p in parts if p)
    return address or "Unknown address"


def format_date(value: date | None) -> str:
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"
