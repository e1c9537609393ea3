"""Fit projection constants from exported calibration points.

Usage: python -m calibration points.json [--refine-scale]
"""
from __future__ import annotations

import argparse
import logging

from common.config import DEFAULT_CALIBRATION_POINTS_PATH
from projection import DEFAULT_CAMERA
from .session import load_points
from .solver import fit_camera_scale, fit_seed_pixel


def main():
    parser = argparse.ArgumentParser(description="Fit the seed pixel from calibration points")
    parser.add_argument("points", nargs="?", default=str(DEFAULT_CALIBRATION_POINTS_PATH))
    parser.add_argument("--refine-scale", action="store_true", help="also fit per-axis meters-per-pixel")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    points = load_points(args.points)

    if args.refine_scale:
        fit, camera = fit_camera_scale(points, DEFAULT_CAMERA)
    else:
        fit, camera = fit_seed_pixel(points, DEFAULT_CAMERA), DEFAULT_CAMERA

    if not fit.is_valid:
        print(f"Fit undefined for {fit.point_count} point(s); need at least two well-spread points")
        return

    print(f"Seed pixel: ({fit.seed_pixel.x:.1f}, {fit.seed_pixel.y:.1f})")
    print(f"Meters per pixel: x={camera.meters_per_pixel_x:.6f} y={camera.meters_per_pixel_y:.6f}")
    print(f"RMS residual: {fit.rms_residual_px:.2f}px ({fit.rms_residual_m:.1f}m)")
    print(f"Max residual: {fit.max_residual_px:.2f}px ({fit.max_residual_m:.1f}m)")
    for r in fit.residuals:
        print(f"  {r.label:40s} d=({r.dx_px:+8.1f}, {r.dy_px:+8.1f})px  ~{r.distance_m:7.1f}m")


if __name__ == "__main__":
    main()
