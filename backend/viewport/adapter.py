"""Image pixel <-> viewer viewport coordinate conversion."""
from __future__ import annotations

import logging

from projection import CameraConfig, ImageDimensions, SeedPixel, project_to_image_pixel
from .types import Point, Viewer

logger = logging.getLogger(__name__)


class ViewportAdapter:
    """Converts between image pixels and the viewer's normalized viewport space.

    Both viewport axes are divided by the image *width*. Dividing y by the
    height shifts every overlay vertically by a factor of (height/width - 1).
    """

    def __init__(self, dimensions: ImageDimensions):
        self._dimensions = dimensions

    @property
    def dimensions(self) -> ImageDimensions:
        return self._dimensions

    def image_pixel_to_viewport_point(self, x: float, y: float) -> Point:
        unit = self._dimensions.width
        return Point(x / unit, y / unit)

    def viewport_point_to_image_pixel(self, u: float, v: float) -> Point:
        unit = self._dimensions.width
        return Point(u * unit, v * unit)

    def contains(self, x: float, y: float) -> bool:
        return 0.0 <= x <= self._dimensions.width and 0.0 <= y <= self._dimensions.height

    def project_lat_lng(
        self,
        cam_cfg: CameraConfig,
        seed_pixel: SeedPixel,
        lat: float,
        lng: float,
    ) -> Point | None:
        """Viewport point for (lat, lng), or None when it falls off the raster."""
        x, y = project_to_image_pixel(cam_cfg, seed_pixel, lat, lng)
        if not self.contains(x, y):
            return None
        return self.image_pixel_to_viewport_point(x, y)

    def screen_to_image_pixel(self, viewer: Viewer, screen_x: float, screen_y: float) -> Point | None:
        viewport = viewer.viewport
        if viewport is None:
            return None
        point = viewport.point_from_pixel(Point(screen_x, screen_y))
        return self.viewport_point_to_image_pixel(point.x, point.y)

    def fly_to(self, viewer: Viewer, x: float, y: float, min_zoom: float) -> bool:
        """Pan to an image pixel and zoom in to at least min_zoom, never out."""
        viewport = viewer.viewport
        if viewport is None:
            return False
        viewport.pan_to(self.image_pixel_to_viewport_point(x, y))
        current = viewport.get_zoom()
        if current < min_zoom:
            viewport.zoom_to(min_zoom)
        logger.debug("Fly to image pixel (%.0f, %.0f), zoom %.2f", x, y, max(current, min_zoom))
        return True
