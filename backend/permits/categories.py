"""Permit job-type categories and their map styling."""
from __future__ import annotations

from typing import NamedTuple

OTHER = "OTHER"

JOB_TYPE_LABELS: dict[str, str] = {
    "NB": "New Building",
    "DM": "Demolition",
    "A1": "Major Alteration",
    "A2": "Minor Alteration",
    "A3": "Minor Alteration",
    "EW": "Equipment Work",
    "PL": "Plumbing",
    "SG": "Sign",
}

JOB_TYPE_COLORS: dict[str, str] = {
    "NB": "#00ff88",
    "DM": "#ff3333",
    "A1": "#ff8800",
    "A2": "#ffcc00",
    "A3": "#ffcc00",
    "EW": "#00ccff",
    "PL": "#7777ff",
    "SG": "#ff77ff",
}

JOB_TYPE_EMOJIS: dict[str, str] = {
    "NB": "🏗",
    "DM": "💥",
    "A1": "🔨",
    "A2": "🔧",
    "A3": "🔩",
    "EW": "⚙️",
    "PL": "🔵",
    "SG": "📋",
}

OTHER_COLOR = "#aaaaaa"
OTHER_EMOJI = "📌"

ALL_JOB_TYPES = ("NB", "DM", "A1", "A2", "A3", "EW", "PL", "SG")
ALL_BOROUGHS = ("MANHATTAN", "BROOKLYN", "QUEENS", "BRONX", "STATEN ISLAND")

BOROUGH_ABBR: dict[str, str] = {
    "MANHATTAN": "MAN",
    "BROOKLYN": "BKN",
    "QUEENS": "QNS",
    "BRONX": "BRX",
    "STATEN ISLAND": "SI",
}

# DOB NOW reports a work type instead of a BIS job type
DOB_NOW_WORK_TYPE_CODES: dict[str, str] = {
    "NEW BUILDING": "NB",
    "FOUNDATION": "NB",
    "EARTH WORK": "NB",
    "FULL DEMOLITION": "DM",
    "STRUCTURAL": "A1",
    "GENERAL CONSTRUCTION": "A2",
    "MECHANICAL SYSTEMS": "EW",
    "BOILER EQUIPMENT": "EW",
    "SIDEWALK SHED": "EW",
    "SUPPORTED SCAFFOLD": "EW",
    "CONSTRUCTION FENCE": "EW",
    "ANTENNA": "EW",
    "SOLAR": "EW",
    "PLUMBING": "PL",
    "SPRINKLERS": "PL",
    "STANDPIPE": "PL",
    "SIGN": "SG",
}


class CategoryStyle(NamedTuple):
    code: str
    label: str
    color: str
    emoji: str


def normalize_job_type(raw: str | None) -> str:
    code = (raw or "").strip().upper()
    return code if code in JOB_TYPE_LABELS else OTHER


def category_style(code: str | None) -> CategoryStyle:
    """Style for a category code; unknown codes get the OTHER look."""
    code = (code or "").strip().upper()
    if code in JOB_TYPE_LABELS:
        return CategoryStyle(code, JOB_TYPE_LABELS[code], JOB_TYPE_COLORS[code], JOB_TYPE_EMOJIS[code])
    if not code or code == OTHER:
        return CategoryStyle(OTHER, "Other", OTHER_COLOR, OTHER_EMOJI)
    return CategoryStyle(code, code, OTHER_COLOR, OTHER_EMOJI)
