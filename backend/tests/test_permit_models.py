"""Tests for permit record adapters, merging and category styling."""
from __future__ import annotations

from datetime import date

import pytest

from permits import (
    DobNowPermitRecord,
    PermitIssuanceRecord,
    category_style,
    from_dob_now,
    from_permit_issuance,
    merge_permit_sources,
)
from permits.categories import OTHER_COLOR, normalize_job_type
from permits.models import parse_coordinate, parse_date


class TestPermitIssuanceAdapter:
    def test_maps_fields(self, issuance_row):
        entity = from_permit_issuance(PermitIssuanceRecord(**issuance_row))
        assert entity.source == "permit_issuance"
        assert entity.job_number == "121234567"
        assert entity.category_code == "A2"
        assert entity.latitude == pytest.approx(40.748441)
        assert entity.borough == "MANHATTAN"
        assert entity.owner_business_name == "EMPIRE STATE REALTY"
        assert entity.filing_date == date(2024, 4, 20)
        assert entity.issued_date == date(2024, 5, 1)

    @pytest.mark.parametrize("lat,lng", [(None, "-73.9"), ("", "-73.9"), ("abc", "-73.9"), ("40.7", "-200")])
    def test_missing_coordinates_dropped(self, issuance_row, lat, lng):
        issuance_row.update(gis_latitude=lat, gis_longitude=lng)
        assert from_permit_issuance(PermitIssuanceRecord(**issuance_row)) is None

    def test_unknown_job_type_is_other(self, issuance_row):
        issuance_row["job_type"] = "ZZ"
        assert from_permit_issuance(PermitIssuanceRecord(**issuance_row)).category_code == "OTHER"


class TestDobNowAdapter:
    def test_maps_fields(self, dob_now_row):
        entity = from_dob_now(DobNowPermitRecord(**dob_now_row))
        assert entity.source == "dob_now"
        assert entity.job_number == "M00123456"
        assert entity.category_code == "A2"
        assert entity.borough == "MANHATTAN"
        assert entity.house_number == "1"
        assert entity.issued_date == date(2024, 5, 3)

    def test_issued_date_fallback(self, dob_now_row):
        dob_now_row["approved_date"] = None
        assert from_dob_now(DobNowPermitRecord(**dob_now_row)).issued_date == date(2024, 5, 4)

    def test_unknown_work_type(self, dob_now_row):
        dob_now_row["work_type"] = "Curb Cut"
        assert from_dob_now(DobNowPermitRecord(**dob_now_row)).category_code == "OTHER"


class TestMerge:
    def test_dob_now_date_preferred(self, permit_factory):
        issuance = [permit_factory(job_number="M1", issued_date=date(2024, 5, 1))]
        dob_now = [permit_factory(source="dob_now", job_number="M1", issued_date=date(2024, 5, 3))]
        merged = merge_permit_sources(issuance, dob_now)
        assert len(merged) == 1
        assert merged[0].source == "permit_issuance"
        assert merged[0].issued_date == date(2024, 5, 3)

    def test_unmatched_rows_kept(self, permit_factory):
        issuance = [permit_factory(job_number="A")]
        dob_now = [
            permit_factory(source="dob_now", job_number="B"),
            permit_factory(source="dob_now", job_number=None),
        ]
        merged = merge_permit_sources(issuance, dob_now)
        assert [e.job_number for e in merged] == ["A", "B", None]

    def test_dob_now_without_date(self, permit_factory):
        issuance = [permit_factory(job_number="M1", issued_date=date(2024, 5, 1))]
        dob_now = [permit_factory(source="dob_now", job_number="M1", issued_date=None)]
        assert merge_permit_sources(issuance, dob_now)[0].issued_date == date(2024, 5, 1)


class TestParsing:
    @pytest.mark.parametrize("raw,expected", [
        ("2024-05-01T00:00:00.000", date(2024, 5, 1)),
        ("2024-05-01T12:30:00", date(2024, 5, 1)),
        ("2024-05-01", date(2024, 5, 1)),
        ("05/01/2024", date(2024, 5, 1)),
        ("yesterday", None),
        (None, None),
    ])
    def test_parse_date(self, raw, expected):
        assert parse_date(raw) == expected

    def test_parse_coordinate(self):
        assert parse_coordinate("40.5", 90) == 40.5
        assert parse_coordinate("nan", 90) is None
        assert parse_coordinate(91, 90) is None


class TestCategories:
    def test_known(self):
        style = category_style("nb")
        assert style.code == "NB"
        assert style.label == "New Building"

    @pytest.mark.parametrize("code", [None, "", "OTHER"])
    def test_other(self, code):
        style = category_style(code)
        assert style.code == "OTHER"
        assert style.color == OTHER_COLOR

    def test_unknown_code_keeps_name(self):
        style = category_style("XY")
        assert style.label == "XY"
        assert style.color == OTHER_COLOR

    def test_normalize(self):
        assert normalize_job_type(" a1 ") == "A1"
        assert normalize_job_type(None) == "OTHER"
