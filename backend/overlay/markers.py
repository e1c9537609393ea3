"""Permit markers placed on the viewer at normalized viewport coordinates."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from common.config import FLY_TO_MIN_ZOOM
from permits import CategoryStyle, PermitEntity, category_style
from projection import CameraConfig, SeedPixel, project_to_image_pixel
from projection.geo_utils import is_within_metro
from viewport import EVENT_OPEN, Point, Viewer, ViewportAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    key: str
    entity: PermitEntity
    style: CategoryStyle
    image_pixel: Point
    viewport_point: Point

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "job_number": self.entity.job_number,
            "category": self.style.code,
            "label": self.style.label,
            "color": self.style.color,
            "emoji": self.style.emoji,
            "lat": self.entity.latitude,
            "lng": self.entity.longitude,
            "borough": self.entity.borough,
            "image_x": self.image_pixel.x,
            "image_y": self.image_pixel.y,
            "vp_x": self.viewport_point.x,
            "vp_y": self.viewport_point.y,
        }


def marker_key(entity: PermitEntity, index: int) -> str:
    if entity.job_number:
        return f"job-{entity.job_number}"
    return f"idx-{index}"


def project_entities(
    entities: Iterable[PermitEntity],
    cam_cfg: CameraConfig,
    seed_pixel: SeedPixel,
    adapter: ViewportAdapter,
) -> list[Marker]:
    """Project each entity once; those off the raster are dropped silently."""
    markers: dict[str, Marker] = {}
    for index, entity in enumerate(entities):
        if not is_within_metro(cam_cfg.seed.lat, cam_cfg.seed.lng, entity.latitude, entity.longitude):
            logger.debug(
                "Permit %s is far from the seed; projection may be inaccurate", entity.job_number or index
            )
        x, y = project_to_image_pixel(cam_cfg, seed_pixel, entity.latitude, entity.longitude)
        if not adapter.contains(x, y):
            continue
        key = marker_key(entity, index)
        markers[key] = Marker(
            key=key,
            entity=entity,
            style=category_style(entity.category_code),
            image_pixel=Point(x, y),
            viewport_point=adapter.image_pixel_to_viewport_point(x, y),
        )
    return list(markers.values())


class MarkerController:
    """Owns the markers currently placed on a viewer."""

    def __init__(
        self,
        viewer: Viewer,
        adapter: ViewportAdapter,
        cam_cfg: CameraConfig,
        seed_pixel: SeedPixel,
    ):
        self._viewer = viewer
        self._adapter = adapter
        self._cam_cfg = cam_cfg
        self._seed_pixel = seed_pixel
        self._markers: dict[str, Marker] = {}
        self._pending: Optional[list[PermitEntity]] = None
        viewer.add_handler(EVENT_OPEN, self._on_open)

    @property
    def markers(self) -> dict[str, Marker]:
        return dict(self._markers)

    def _ready(self) -> bool:
        return self._viewer.viewport is not None

    def _on_open(self, _event: Any):
        if self._pending is not None:
            pending, self._pending = self._pending, None
            self.sync(pending)

    def add(self, marker: Marker) -> bool:
        if not self._ready() or marker.key in self._markers:
            return False
        self._viewer.add_overlay(marker.key, marker.viewport_point)
        self._markers[marker.key] = marker
        return True

    def update(self, marker: Marker) -> bool:
        if not self._ready() or marker.key not in self._markers:
            return False
        if self._markers[marker.key].viewport_point != marker.viewport_point:
            self._viewer.update_overlay(marker.key, marker.viewport_point)
        self._markers[marker.key] = marker
        return True

    def remove(self, key: str) -> bool:
        if key not in self._markers:
            return False
        del self._markers[key]
        if self._ready():
            self._viewer.remove_overlay(key)
        return True

    def clear(self):
        for key in list(self._markers):
            self.remove(key)

    def sync(self, entities: Iterable[PermitEntity]) -> int:
        """Bring placed markers in line with a new entity snapshot."""
        entities = list(entities)
        if not self._ready():
            self._pending = entities
            return 0

        incoming = {m.key: m for m in project_entities(entities, self._cam_cfg, self._seed_pixel, self._adapter)}
        for key in [k for k in self._markers if k not in incoming]:
            self.remove(key)
        for key, marker in incoming.items():
            if key in self._markers:
                self.update(marker)
            else:
                self.add(marker)

        logger.info("Placed %d markers (%d entities)", len(self._markers), len(entities))
        return len(self._markers)

    def fly_to_entity(self, entity: PermitEntity, min_zoom: float = FLY_TO_MIN_ZOOM) -> bool:
        x, y = project_to_image_pixel(self._cam_cfg, self._seed_pixel, entity.latitude, entity.longitude)
        return self._adapter.fly_to(self._viewer, x, y, min_zoom)

    def destroy(self):
        self.clear()
        self._viewer.remove_handler(EVENT_OPEN, self._on_open)
