from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.config import (
    CAMERA_AZIMUTH_DEG,
    CAMERA_ELEVATION_DEG,
    IMAGE_HEIGHT_PX,
    IMAGE_WIDTH_PX,
    REFERENCE_PIXEL_HEIGHT,
    REFERENCE_PIXEL_WIDTH,
    SEED_LAT,
    SEED_LNG,
    SEED_PIXEL_X,
    SEED_PIXEL_Y,
    TILE_STEP,
    VIEW_HEIGHT_METERS,
    VIEW_WIDTH_METERS,
)


class LatLng(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class CameraConfig(BaseModel):
    """Fixed oblique camera that rendered the raster."""

    model_config = ConfigDict(frozen=True)

    seed: LatLng = LatLng(lat=SEED_LAT, lng=SEED_LNG)
    azimuth_deg: float = CAMERA_AZIMUTH_DEG
    elevation_deg: float = CAMERA_ELEVATION_DEG   # camera looks down
    view_width_meters: float = Field(VIEW_WIDTH_METERS, gt=0)
    view_height_meters: float = Field(VIEW_HEIGHT_METERS, gt=0)
    reference_pixel_width: int = Field(REFERENCE_PIXEL_WIDTH, gt=0)
    reference_pixel_height: int = Field(REFERENCE_PIXEL_HEIGHT, gt=0)
    tile_step: float = Field(TILE_STEP, gt=0)

    @field_validator("azimuth_deg")
    @classmethod
    def _check_azimuth(cls, value: float) -> float:
        if not -180.0 < value <= 180.0:
            raise ValueError("azimuth_deg must be in (-180, 180]")
        return value

    @field_validator("elevation_deg")
    @classmethod
    def _check_elevation(cls, value: float) -> float:
        if not -90.0 < value <= 0.0:
            raise ValueError("elevation_deg must be in (-90, 0]")
        return value

    @property
    def meters_per_pixel_x(self) -> float:
        return self.view_width_meters / self.reference_pixel_width

    @property
    def meters_per_pixel_y(self) -> float:
        return self.view_height_meters / self.reference_pixel_height

    def with_scale(self, meters_per_pixel_x: float, meters_per_pixel_y: float) -> "CameraConfig":
        """Copy with the view footprint rescaled to new meters-per-pixel values."""
        return self.model_copy(update={
            "view_width_meters": meters_per_pixel_x * self.reference_pixel_width,
            "view_height_meters": meters_per_pixel_y * self.reference_pixel_height,
        })


class SeedPixel(BaseModel):
    """Image pixel of CameraConfig.seed."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class ImageDimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = Field(IMAGE_WIDTH_PX, gt=0)
    height: int = Field(IMAGE_HEIGHT_PX, gt=0)


DEFAULT_CAMERA = CameraConfig()
DEFAULT_SEED_PIXEL = SeedPixel(x=SEED_PIXEL_X, y=SEED_PIXEL_Y)
DEFAULT_IMAGE_DIMENSIONS = ImageDimensions()
