"""Calibrated camera constants for the isometric NYC raster.

The projection constants were fitted against ground-truth points
(RMS around 8 m). Keep them exactly as calibrated; the fit absorbs
rendering details the simple camera model does not describe.
"""
from __future__ import annotations

import os

# Geodetic anchor of the projection
SEED_LAT = 40.7484
SEED_LNG = -73.9857

CAMERA_AZIMUTH_DEG = -15.0
CAMERA_ELEVATION_DEG = -45.0

# Camera footprint is not square in world space (about 1.47:1).
# 439.59808 / 1024 = 0.429295 m/px (X), 300 / 1024 = 0.292969 m/px (Y)
VIEW_WIDTH_METERS = 439.59808
VIEW_HEIGHT_METERS = 300.0
REFERENCE_PIXEL_WIDTH = 1024
REFERENCE_PIXEL_HEIGHT = 1024
TILE_STEP = 0.5

# Full raster served by the deep-zoom tile pyramid
IMAGE_WIDTH_PX = 123904
IMAGE_HEIGHT_PX = 100864

# Image pixel of the seed point (least-squares fit)
SEED_PIXEL_X = 45059.0
SEED_PIXEL_Y = 43479.0

# Level-of-detail cut points in viewer zoom units
LOD_T1 = float(os.getenv("LOD_T1", "1.5"))
LOD_T2 = float(os.getenv("LOD_T2", "4.0"))

FLY_TO_MIN_ZOOM = float(os.getenv("FLY_TO_MIN_ZOOM", "6.0"))
