# projection.py
from __future__ import annotations

import math

from .camera_config import (
    DEFAULT_CAMERA,
    DEFAULT_SEED_PIXEL,
    CameraConfig,
    SeedPixel,
)
from .geo_utils import equirectangular_offset, offset_to_lat_lng


def _camera_axes(cam_cfg: CameraConfig) -> tuple[float, float, float]:
    azimuth = math.radians(cam_cfg.azimuth_deg)
    elevation = math.radians(cam_cfg.elevation_deg)
    return math.cos(azimuth), math.sin(azimuth), math.sin(elevation)


def image_offset_from_seed(cam_cfg: CameraConfig, lat: float, lng: float) -> tuple[float, float]:
    """Pixel offset of (lat, lng) from the seed pixel."""
    east, north = equirectangular_offset(cam_cfg.seed.lat, cam_cfg.seed.lng, lat, lng)
    cos_a, sin_a, sin_el = _camera_axes(cam_cfg)

    right = east * cos_a - north * sin_a
    forward = east * sin_a + north * cos_a

    # Foreshortening on the forward axis only (no roll)
    vertical_shift = -forward * sin_el

    dx = right / cam_cfg.meters_per_pixel_x
    # Image rows grow downward
    dy = -vertical_shift / cam_cfg.meters_per_pixel_y
    return dx, dy


def project_to_image_pixel(
    cam_cfg: CameraConfig,
    seed_pixel: SeedPixel,
    lat: float,
    lng: float,
) -> tuple[float, float]:
    """Map (lat, lng) to image pixel space. May fall outside the raster."""
    dx, dy = image_offset_from_seed(cam_cfg, lat, lng)
    return seed_pixel.x + dx, seed_pixel.y + dy


def image_pixel_to_lat_lng(
    cam_cfg: CameraConfig,
    seed_pixel: SeedPixel,
    x: float,
    y: float,
) -> tuple[float, float]:
    """Inverse of project_to_image_pixel."""
    cos_a, sin_a, sin_el = _camera_axes(cam_cfg)
    if sin_el == 0.0:
        raise ValueError("Cannot invert projection for a horizontal camera (elevation 0)")

    right = (x - seed_pixel.x) * cam_cfg.meters_per_pixel_x
    forward = (y - seed_pixel.y) * cam_cfg.meters_per_pixel_y / sin_el

    east = right * cos_a + forward * sin_a
    north = -right * sin_a + forward * cos_a
    return offset_to_lat_lng(cam_cfg.seed.lat, cam_cfg.seed.lng, east, north)


def lat_lng_to_image_pixel(lat: float, lng: float) -> tuple[float, float]:
    return project_to_image_pixel(DEFAULT_CAMERA, DEFAULT_SEED_PIXEL, lat, lng)
