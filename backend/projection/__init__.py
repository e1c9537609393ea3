"""Geodetic to image-pixel projection for the oblique city raster."""

from .camera_config import (
    DEFAULT_CAMERA,
    DEFAULT_IMAGE_DIMENSIONS,
    DEFAULT_SEED_PIXEL,
    CameraConfig,
    ImageDimensions,
    LatLng,
    SeedPixel,
)
from .projection import (
    image_offset_from_seed,
    image_pixel_to_lat_lng,
    lat_lng_to_image_pixel,
    project_to_image_pixel,
)

__all__ = [
    "CameraConfig",
    "DEFAULT_CAMERA",
    "DEFAULT_IMAGE_DIMENSIONS",
    "DEFAULT_SEED_PIXEL",
    "ImageDimensions",
    "LatLng",
    "SeedPixel",
    "image_offset_from_seed",
    "image_pixel_to_lat_lng",
    "lat_lng_to_image_pixel",
    "project_to_image_pixel",
]
