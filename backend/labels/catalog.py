"""Static label catalog: boroughs, major neighborhoods and all NTAs."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel

from common.config import NTA_CENTROIDS_PATH
from projection import CameraConfig, SeedPixel, project_to_image_pixel
from projection.geo_utils import is_within_metro
from viewport import Point, ViewportAdapter
from .types import LabelEntity, Tier

logger = logging.getLogger(__name__)


class NtaCentroid(BaseModel):
    code: str
    name: str
    lat: float
    lng: float


BOROUGH_LABELS: tuple[tuple[str, float, float], ...] = (
    ("MANHATTAN", 40.7831, -73.9712),
    ("BROOKLYN", 40.6501, -73.9496),
    ("QUEENS", 40.7282, -73.7949),
    ("BRONX", 40.8448, -73.8648),
    ("STATEN ISLAND", 40.6050, -74.0800),
)

MAJOR_NTA_CODES = frozenset({
    "MN2501", "MN1701", "MN2301", "MN2701", "MN2001", "MN3301", "MN2401", "MN1301",
    "MN0901", "MN1101", "MN1001", "MN2101", "MN2201", "MN1601", "MN1501",
    "BK0101", "BK0901", "BK7301", "BK9101", "BK4501", "BK8801", "BK6101", "BK5501", "BK7701", "BK3101",
    "QN3101", "QN2601", "QN4901", "QN6301", "QN5301", "QN7101", "QN4101", "QN5701",
    "BX0101", "BX3101", "BX6301", "BX0901", "BX5301",
    "SI0101", "SI0501", "SI2501",
})


def load_nta_centroids(path: Path = NTA_CENTROIDS_PATH) -> list[NtaCentroid]:
    if not path.exists():
        logger.warning("NTA centroid file not found: %s", path)
        return []
    data = json.loads(path.read_text(encoding="utf-8"))
    return [NtaCentroid(**item) for item in data]


def _make_label(
    text: str,
    lat: float,
    lng: float,
    tier: Tier,
    cam_cfg: CameraConfig,
    seed_pixel: SeedPixel,
    adapter: ViewportAdapter,
) -> LabelEntity | None:
    if not is_within_metro(cam_cfg.seed.lat, cam_cfg.seed.lng, lat, lng):
        logger.debug("Label '%s' is far from the seed; projection may be inaccurate", text)
    x, y = project_to_image_pixel(cam_cfg, seed_pixel, lat, lng)
    if not adapter.contains(x, y):
        logger.debug("Label '%s' projects off the raster at (%.0f, %.0f)", text, x, y)
        return None
    return LabelEntity(
        text=text,
        lat=lat,
        lng=lng,
        tier=tier,
        image_pixel=Point(x, y),
        viewport_point=adapter.image_pixel_to_viewport_point(x, y),
    )


def build_label_entities(
    cam_cfg: CameraConfig,
    seed_pixel: SeedPixel,
    adapter: ViewportAdapter,
    ntas: list[NtaCentroid] | None = None,
) -> list[LabelEntity]:
    """Project every label once."""
    if ntas is None:
        ntas = load_nta_centroids()

    labels: list[LabelEntity] = []
    for name, lat, lng in BOROUGH_LABELS:
        label = _make_label(name, lat, lng, Tier.COARSE, cam_cfg, seed_pixel, adapter)
        if label:
            labels.append(label)
    for nta in ntas:
        tier = Tier.MID if nta.code in MAJOR_NTA_CODES else Tier.FINE
        label = _make_label(nta.name, nta.lat, nta.lng, tier, cam_cfg, seed_pixel, adapter)
        if label:
            labels.append(label)

    logger.info("Built %d labels (%d NTAs)", len(labels), len(ntas))
    return labels
