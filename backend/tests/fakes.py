"""Shared test doubles for viewer-facing tests.

Provides FakeViewport / FakeViewer (mimic the OpenSeadragon viewer shape)
and FakeLabelLayer so overlay and label code runs without a browser.
"""
from __future__ import annotations

from collections import defaultdict

from viewport import EVENT_OPEN, EVENT_ZOOM, Point


class FakeViewport:
    """Viewport with a 1000px-wide container centred on ``center``."""

    def __init__(self, zoom: float = 1.0, center: Point = Point(0.5, 0.5), container_width: float = 1000.0):
        self.zoom = zoom
        self.center = center
        self.container_width = container_width
        self.pan_calls: list[Point] = []
        self.zoom_calls: list[float] = []

    def get_zoom(self) -> float:
        return self.zoom

    def _scale(self) -> float:
        return self.zoom * self.container_width

    def pixel_from_point(self, point: Point) -> Point:
        half = self.container_width / 2
        return Point(
            (point.x - self.center.x) * self._scale() + half,
            (point.y - self.center.y) * self._scale() + half,
        )

    def point_from_pixel(self, pixel: Point) -> Point:
        half = self.container_width / 2
        return Point(
            (pixel.x - half) / self._scale() + self.center.x,
            (pixel.y - half) / self._scale() + self.center.y,
        )

    def pan_to(self, point: Point) -> None:
        self.pan_calls.append(point)
        self.center = point

    def zoom_to(self, zoom: float) -> None:
        self.zoom_calls.append(zoom)
        self.zoom = zoom


class FakeViewer:
    """Mimics the host viewer: event handlers, overlays, lazy viewport."""

    def __init__(self, viewport: FakeViewport | None = None):
        self.viewport = viewport
        self.handlers: dict[str, list] = defaultdict(list)
        self.overlays: dict[str, Point] = {}
        self.overlay_updates = 0

    def add_handler(self, event: str, handler) -> None:
        self.handlers[event].append(handler)

    def remove_handler(self, event: str, handler) -> None:
        if handler in self.handlers[event]:
            self.handlers[event].remove(handler)

    def emit(self, event: str, payload=None) -> None:
        for handler in list(self.handlers[event]):
            handler(payload)

    def open(self, zoom: float = 1.0) -> FakeViewport:
        """Simulate the image pyramid finishing its load."""
        self.viewport = FakeViewport(zoom=zoom)
        self.emit(EVENT_OPEN)
        return self.viewport

    def zoom(self, zoom: float) -> None:
        self.viewport.zoom = zoom
        self.emit(EVENT_ZOOM)

    def add_overlay(self, overlay_id: str, location: Point) -> None:
        self.overlays[overlay_id] = location

    def update_overlay(self, overlay_id: str, location: Point) -> None:
        self.overlays[overlay_id] = location
        self.overlay_updates += 1

    def remove_overlay(self, overlay_id: str) -> None:
        self.overlays.pop(overlay_id, None)


class FakeLabelLayer:
    """Records LabelLayer calls."""

    def __init__(self):
        self.shown: list[str] = []
        self.hidden: list[str] = []
        self.moves = 0
        self.container_visible = True
        self.cleared = False

    def show(self, label) -> None:
        self.shown.append(label.text)

    def hide(self, label) -> None:
        self.hidden.append(label.text)

    def move(self, label, position: Point) -> None:
        self.moves += 1

    def set_container_visible(self, visible: bool) -> None:
        self.container_visible = visible

    def clear(self) -> None:
        self.cleared = True
