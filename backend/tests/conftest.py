"""Shared test fixtures for backend tests.

Provides the calibrated camera, fake viewers and sample permit records so
tests run without a browser or network access to NYC Open Data.
"""
from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from permits import PermitEntity
from projection import DEFAULT_CAMERA, DEFAULT_IMAGE_DIMENSIONS, DEFAULT_SEED_PIXEL
from viewport import ViewportAdapter


# ---------- Projection fixtures ----------

@pytest.fixture()
def camera():
    return DEFAULT_CAMERA


@pytest.fixture()
def seed_pixel():
    return DEFAULT_SEED_PIXEL


@pytest.fixture()
def dimensions():
    return DEFAULT_IMAGE_DIMENSIONS


@pytest.fixture()
def adapter(dimensions):
    return ViewportAdapter(dimensions)


# ---------- Viewer fixtures ----------

@pytest.fixture()
def viewer_factory():
    """Create a FakeViewer, opened (with a viewport) unless opened=False."""
    from tests.fakes import FakeViewer, FakeViewport

    def _factory(zoom: float = 1.0, opened: bool = True):
        return FakeViewer(FakeViewport(zoom=zoom) if opened else None)

    return _factory


@pytest.fixture()
def label_layer():
    from tests.fakes import FakeLabelLayer

    return FakeLabelLayer()


# ---------- Permit fixtures ----------

@pytest.fixture()
def permit_factory():
    """Build PermitEntity objects with Midtown defaults."""

    def _factory(**kwargs) -> PermitEntity:
        defaults = dict(
            source="permit_issuance",
            job_number="121234567",
            category_code="NB",
            latitude=40.7505,
            longitude=-73.9934,
            borough="MANHATTAN",
            house_number="350",
            street_name="5 AVENUE",
            filing_date=date(2024, 4, 20),
            issued_date=date(2024, 5, 1),
        )
        defaults.update(kwargs)
        return PermitEntity(**defaults)

    return _factory


@pytest.fixture()
def issuance_row():
    """Raw row from the DOB Permit Issuance dataset."""
    return {
        "job__": "121234567",
        "job_type": "A2",
        "permit_status": "ISSUED",
        "house__": "350",
        "street_name": "5 AVENUE",
        "borough": "MANHATTAN",
        "owner_s_business_name": "EMPIRE STATE REALTY",
        "filing_date": "2024-04-20T00:00:00.000",
        "issuance_date": "05/01/2024",
        "gis_latitude": "40.748441",
        "gis_longitude": "-73.985664",
        "job_description": "INTERIOR RENOVATION",
        "bin__": "1015862",
    }


@pytest.fixture()
def dob_now_row():
    """Raw row from the DOB NOW approved permits dataset."""
    return {
        "job_filing_number": "M00123456-I1",
        "work_type": "General Construction",
        "permit_status": "Permit Issued",
        "house_no": "1",
        "street_name": "WALL STREET",
        "borough": "Manhattan",
        "approved_date": "2024-05-03T00:00:00.000",
        "issued_date": "2024-05-04T00:00:00.000",
        "latitude": "40.7074",
        "longitude": "-74.0113",
    }


# ---------- FastAPI test client ----------

@pytest.fixture()
def fetched_permits(permit_factory):
    """Entities the patched PermitSource.fetch returns."""
    return [
        permit_factory(),
        permit_factory(
            job_number="320000001",
            category_code="DM",
            latitude=40.6782,
            longitude=-73.9442,
            borough="BROOKLYN",
            house_number="100",
            street_name="FULTON STREET",
            issued_date=date(2024, 5, 10),
        ),
    ]


@pytest.fixture()
def api_client(monkeypatch, fetched_permits):
    """TestClient for api.app with the network fetch patched out."""
    import api

    calls: list[int] = []

    async def _fake_fetch(self, days_back: int):
        calls.append(days_back)
        return list(fetched_permits)

    monkeypatch.setattr("permits.fetch_permits.PermitSource.fetch", _fake_fetch)
    monkeypatch.setattr(api, "PERMITS_AUTO_REFRESH", False)

    with TestClient(api.app) as c:
        c.fetch_calls = calls
        yield c
