"""Types for calibration points and fit results."""
from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from projection import SeedPixel


class CalibrationPoint(BaseModel):
    """A ground-truth (lat, lng) <-> image pixel pair."""

    label: str = Field(..., min_length=1)
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    image_pixel_x: int = Field(..., alias="imagePixelX")
    image_pixel_y: int = Field(..., alias="imagePixelY")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CalibrationResidual(BaseModel):
    label: str
    dx_px: float
    dy_px: float
    distance_px: float
    distance_m: float


class CalibrationFit(BaseModel):
    """Outcome of a least-squares fit.

    A degenerate fit has no seed pixel and infinite residual metrics; callers
    must check ``is_valid`` before using ``seed_pixel``.
    """

    seed_pixel: SeedPixel | None = None
    meters_per_pixel_x: float
    meters_per_pixel_y: float
    point_count: int = 0
    rms_residual_px: float = math.inf
    max_residual_px: float = math.inf
    rms_residual_m: float = math.inf
    max_residual_m: float = math.inf
    residuals: list[CalibrationResidual] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.seed_pixel is not None and math.isfinite(self.rms_residual_px)
