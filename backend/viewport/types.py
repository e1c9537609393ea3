"""Host tile-viewer boundary.

Shapes follow OpenSeadragon: viewport coordinates use the image width as the
unit on both axes, and ``viewport`` is ``None`` until the pyramid is open.
"""
from __future__ import annotations

from typing import Any, Callable, NamedTuple, Optional, Protocol

EVENT_OPEN = "open"
EVENT_ZOOM = "zoom"
EVENT_PAN = "pan"
EVENT_UPDATE_VIEWPORT = "update-viewport"

EventHandler = Callable[[Any], None]


class Point(NamedTuple):
    x: float
    y: float


class Viewport(Protocol):
    def get_zoom(self) -> float: ...

    def pixel_from_point(self, point: Point) -> Point: ...

    def point_from_pixel(self, pixel: Point) -> Point: ...

    def pan_to(self, point: Point) -> None: ...

    def zoom_to(self, zoom: float) -> None: ...


class Viewer(Protocol):
    viewport: Optional[Viewport]

    def add_handler(self, event: str, handler: EventHandler) -> None: ...

    def remove_handler(self, event: str, handler: EventHandler) -> None: ...

    def add_overlay(self, overlay_id: str, location: Point) -> None: ...

    def update_overlay(self, overlay_id: str, location: Point) -> None: ...

    def remove_overlay(self, overlay_id: str) -> None: ...
