"""Types for level-of-detail map labels."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from viewport import Point


class Tier(IntEnum):
    """LOD bucket. A label is shown at every tier >= its own."""

    COARSE = 0
    MID = 1
    FINE = 2


@dataclass(frozen=True)
class LabelEntity:
    """A pre-projected label. Visibility and screen position belong to a controller."""

    text: str
    lat: float
    lng: float
    tier: Tier
    image_pixel: Point
    viewport_point: Point

    def shown_at(self, tier: Tier) -> bool:
        return self.tier <= tier

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "tier": self.tier.name.lower(),
            "lat": self.lat,
            "lng": self.lng,
            "image_x": self.image_pixel.x,
            "image_y": self.image_pixel.y,
            "vp_x": self.viewport_point.x,
            "vp_y": self.viewport_point.y,
        }
