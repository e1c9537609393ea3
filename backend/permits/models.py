"""
Permit records from the two NYC DOB datasets and the normalized entity
the map overlay consumes.

Each source has its own raw model and one adapter function mapping it to
PermitEntity. Records without usable coordinates never become entities.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .categories import DOB_NOW_WORK_TYPE_CODES, OTHER, normalize_job_type

PermitSourceName = Literal["permit_issuance", "dob_now"]

_DATE_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d", "%m/%d/%Y")


class PermitIssuanceRecord(BaseModel):
    """Row of the DOB Permit Issuance dataset (ipu4-2q9a)."""

    job_number: Optional[str] = Field(None, alias="job__")
    job_type: Optional[str] = None
    permit_type: Optional[str] = None
    permit_status: Optional[str] = None
    house_number: Optional[str] = Field(None, alias="house__")
    street_name: Optional[str] = None
    borough: Optional[str] = None
    owner_business_name: Optional[str] = Field(None, alias="owner_s_business_name")
    permittee_business_name: Optional[str] = Field(None, alias="permittee_s_business_name")
    filing_date: Optional[str] = None
    issuance_date: Optional[str] = None
    gis_latitude: Optional[Union[str, float]] = None
    gis_longitude: Optional[Union[str, float]] = None
    job_description: Optional[str] = None
    bin: Optional[str] = Field(None, alias="bin__")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DobNowPermitRecord(BaseModel):
    """Row of the DOB NOW: Build approved permits dataset (rbx6-tga4)."""

    job_filing_number: Optional[str] = None
    work_type: Optional[str] = None
    permit_status: Optional[str] = None
    house_no: Optional[str] = None
    street_name: Optional[str] = None
    borough: Optional[str] = None
    owner_business_name: Optional[str] = None
    job_description: Optional[str] = None
    approved_date: Optional[str] = None
    issued_date: Optional[str] = None
    latitude: Optional[Union[str, float]] = None
    longitude: Optional[Union[str, float]] = None
    bin: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class PermitEntity(BaseModel):
    """Normalized geocoded permit."""

    model_config = ConfigDict(frozen=True)

    source: PermitSourceName
    job_number: Optional[str] = None
    category_code: str = OTHER
    latitude: float
    longitude: float
    borough: str = ""
    house_number: Optional[str] = None
    street_name: Optional[str] = None
    owner_business_name: Optional[str] = None
    job_description: Optional[str] = None
    permit_status: Optional[str] = None
    filing_date: Optional[date] = None
    issued_date: Optional[date] = None


def parse_coordinate(value: str | float | None, limit: float) -> float | None:
    """Float within [-limit, limit], or None for missing/unparsable input."""
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed) or abs(parsed) > limit:
        return None
    return parsed


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    raw = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def from_permit_issuance(record: PermitIssuanceRecord) -> PermitEntity | None:
    lat = parse_coordinate(record.gis_latitude, 90.0)
    lng = parse_coordinate(record.gis_longitude, 180.0)
    if lat is None or lng is None:
        return None
    return PermitEntity(
        source="permit_issuance",
        job_number=_clean(record.job_number),
        category_code=normalize_job_type(record.job_type),
        latitude=lat,
        longitude=lng,
        borough=(record.borough or "").strip().upper(),
        house_number=_clean(record.house_number),
        street_name=_clean(record.street_name),
        owner_business_name=_clean(record.owner_business_name),
        job_description=_clean(record.job_description),
        permit_status=_clean(record.permit_status),
        filing_date=parse_date(record.filing_date),
        issued_date=parse_date(record.issuance_date),
    )


def _dob_now_job_number(job_filing_number: str | None) -> str | None:
    # "M00123456-I1" -> "M00123456"
    cleaned = _clean(job_filing_number)
    if cleaned is None:
        return None
    return cleaned.split("-", 1)[0]


def from_dob_now(record: DobNowPermitRecord) -> PermitEntity | None:
    lat = parse_coordinate(record.latitude, 90.0)
    lng = parse_coordinate(record.longitude, 180.0)
    if lat is None or lng is None:
        return None
    work_type = (record.work_type or "").strip().upper()
    approved = parse_date(record.approved_date)
    return PermitEntity(
        source="dob_now",
        job_number=_dob_now_job_number(record.job_filing_number),
        category_code=DOB_NOW_WORK_TYPE_CODES.get(work_type, OTHER),
        latitude=lat,
        longitude=lng,
        borough=(record.borough or "").strip().upper(),
        house_number=_clean(record.house_no),
        street_name=_clean(record.street_name),
        owner_business_name=_clean(record.owner_business_name),
        job_description=_clean(record.job_description),
        permit_status=_clean(record.permit_status),
        filing_date=None,
        issued_date=approved or parse_date(record.issued_date),
    )


def prefer_dob_now_issued_date(primary: PermitEntity, dob_now: PermitEntity) -> PermitEntity:
    """DOB NOW's approval date is the canonical issued date when both sources know a job."""
    if dob_now.issued_date is None:
        return primary
    return primary.model_copy(update={"issued_date": dob_now.issued_date})


def merge_permit_sources(
    issuance: list[PermitEntity],
    dob_now: list[PermitEntity],
) -> list[PermitEntity]:
    """Join the two sources on job number, keeping issuance rows first."""
    dob_now_by_job = {e.job_number: e for e in dob_now if e.job_number}
    matched: set[str] = set()
    merged: list[PermitEntity] = []

    for entity in issuance:
        other = dob_now_by_job.get(entity.job_number) if entity.job_number else None
        if other is not None:
            entity = prefer_dob_now_issued_date(entity, other)
            matched.add(other.job_number)
        merged.append(entity)

    merged.extend(e for e in dob_now if not e.job_number or e.job_number not in matched)
    return merged
