"""Calibration of the projection constants from ground-truth points."""

from .exceptions import CalibrationError, CalibrationInputError
from .session import CalibrationSession, load_points, save_points
from .solver import MIN_CALIBRATION_POINTS, fit_camera_scale, fit_seed_pixel
from .types import CalibrationFit, CalibrationPoint, CalibrationResidual

__all__ = [
    "CalibrationError",
    "CalibrationFit",
    "CalibrationInputError",
    "CalibrationPoint",
    "CalibrationResidual",
    "CalibrationSession",
    "MIN_CALIBRATION_POINTS",
    "fit_camera_scale",
    "fit_seed_pixel",
    "load_points",
    "save_points",
]
