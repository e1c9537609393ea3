"""Least-squares calibration of the projection constants.

For a fixed camera the projection is affine in the seed pixel, so fitting
the seed alone is a two-unknown linear problem whose solution is the mean
of (recorded pixel - projected offset). The optional scale refinement also
frees the per-axis pixels-per-meter factors; each image axis stays an
independent two-unknown linear system.
"""
from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from projection import CameraConfig, SeedPixel, image_offset_from_seed, image_pixel_to_lat_lng
from projection.geo_utils import equirectangular_offset, haversine_distance
from .types import CalibrationFit, CalibrationPoint, CalibrationResidual

logger = logging.getLogger(__name__)

MIN_CALIBRATION_POINTS = 2


def _degenerate_fit(cam_cfg: CameraConfig, point_count: int) -> CalibrationFit:
    return CalibrationFit(
        meters_per_pixel_x=cam_cfg.meters_per_pixel_x,
        meters_per_pixel_y=cam_cfg.meters_per_pixel_y,
        point_count=point_count,
    )


def _recorded_pixels(points: Sequence[CalibrationPoint]) -> np.ndarray:
    return np.array([[p.image_pixel_x, p.image_pixel_y] for p in points], dtype=float)


def _ground_distance_m(point: CalibrationPoint, cam_cfg: CameraConfig, seed_pixel: SeedPixel) -> float:
    """Meters between the true location and where the recorded pixel unprojects to."""
    if cam_cfg.elevation_deg == 0.0:
        return math.inf
    lat, lng = image_pixel_to_lat_lng(cam_cfg, seed_pixel, point.image_pixel_x, point.image_pixel_y)
    return haversine_distance(point.lat, point.lng, lat, lng)


def _evaluate(
    points: Sequence[CalibrationPoint],
    cam_cfg: CameraConfig,
    seed_pixel: SeedPixel,
) -> CalibrationFit:
    recorded = _recorded_pixels(points)
    offsets = np.array([image_offset_from_seed(cam_cfg, p.lat, p.lng) for p in points], dtype=float)
    predicted = offsets + np.array([seed_pixel.x, seed_pixel.y])
    deltas = recorded - predicted
    distances_px = np.hypot(deltas[:, 0], deltas[:, 1])

    residuals: list[CalibrationResidual] = []
    distances_m: list[float] = []
    for point, (dx, dy), dist_px in zip(points, deltas, distances_px):
        dist_m = _ground_distance_m(point, cam_cfg, seed_pixel)
        distances_m.append(dist_m)
        residuals.append(CalibrationResidual(
            label=point.label,
            dx_px=float(dx),
            dy_px=float(dy),
            distance_px=float(dist_px),
            distance_m=dist_m,
        ))

    meters = np.array(distances_m)
    return CalibrationFit(
        seed_pixel=seed_pixel,
        meters_per_pixel_x=cam_cfg.meters_per_pixel_x,
        meters_per_pixel_y=cam_cfg.meters_per_pixel_y,
        point_count=len(points),
        rms_residual_px=float(np.sqrt(np.mean(distances_px ** 2))),
        max_residual_px=float(np.max(distances_px)),
        rms_residual_m=float(np.sqrt(np.mean(meters ** 2))),
        max_residual_m=float(np.max(meters)),
        residuals=residuals,
    )


def fit_seed_pixel(points: Sequence[CalibrationPoint], cam_cfg: CameraConfig) -> CalibrationFit:
    """Fit SeedPixel with every other camera constant held fixed."""
    if len(points) < MIN_CALIBRATION_POINTS:
        return _degenerate_fit(cam_cfg, len(points))

    recorded = _recorded_pixels(points)
    offsets = np.array([image_offset_from_seed(cam_cfg, p.lat, p.lng) for p in points], dtype=float)
    seed = (recorded - offsets).mean(axis=0)
    fit = _evaluate(points, cam_cfg, SeedPixel(x=float(seed[0]), y=float(seed[1])))
    logger.info(
        "Seed fit from %d points: (%.1f, %.1f), rms=%.2fpx (%.1fm), max=%.2fpx",
        fit.point_count, seed[0], seed[1], fit.rms_residual_px, fit.rms_residual_m, fit.max_residual_px,
    )
    return fit


def _camera_axis_meters(points: Sequence[CalibrationPoint], cam_cfg: CameraConfig) -> np.ndarray:
    """Per point: (camera-right meters, foreshortened forward meters)."""
    azimuth = math.radians(cam_cfg.azimuth_deg)
    sin_el = math.sin(math.radians(cam_cfg.elevation_deg))
    rows = []
    for p in points:
        east, north = equirectangular_offset(cam_cfg.seed.lat, cam_cfg.seed.lng, p.lat, p.lng)
        right = east * math.cos(azimuth) - north * math.sin(azimuth)
        forward = east * math.sin(azimuth) + north * math.cos(azimuth)
        rows.append((right, forward * sin_el))
    return np.array(rows, dtype=float)


def _solve_axis(meters: np.ndarray, pixels: np.ndarray) -> tuple[float, float] | None:
    design = np.column_stack([np.ones_like(meters), meters])
    params, _, rank, _ = np.linalg.lstsq(design, pixels, rcond=None)
    if rank < 2 or params[1] <= 0:
        return None
    return float(params[0]), float(params[1])


def fit_camera_scale(points: Sequence[CalibrationPoint], cam_cfg: CameraConfig) -> tuple[CalibrationFit, CameraConfig]:
    """Fit SeedPixel plus independent X/Y meters-per-pixel.

    Returns the fit and the camera carrying the refined scale. If either axis
    is rank deficient (points share a camera-axis coordinate) the fit is
    degenerate and the input camera is returned unchanged.
    """
    if len(points) < MIN_CALIBRATION_POINTS:
        return _degenerate_fit(cam_cfg, len(points)), cam_cfg

    meters = _camera_axis_meters(points, cam_cfg)
    recorded = _recorded_pixels(points)
    x_axis = _solve_axis(meters[:, 0], recorded[:, 0])
    y_axis = _solve_axis(meters[:, 1], recorded[:, 1])
    if x_axis is None or y_axis is None:
        logger.warning("Scale refinement is degenerate for %d points", len(points))
        return _degenerate_fit(cam_cfg, len(points)), cam_cfg

    seed_x, px_per_m_x = x_axis
    seed_y, px_per_m_y = y_axis
    refined = cam_cfg.with_scale(1.0 / px_per_m_x, 1.0 / px_per_m_y)
    fit = _evaluate(points, refined, SeedPixel(x=seed_x, y=seed_y))
    logger.info(
        "Scale fit from %d points: mpp_x=%.6f mpp_y=%.6f rms=%.2fpx",
        fit.point_count, refined.meters_per_pixel_x, refined.meters_per_pixel_y, fit.rms_residual_px,
    )
    return fit, refined
