"""Viewer viewport adapter and host-viewer protocols."""

from .adapter import ViewportAdapter
from .types import (
    EVENT_OPEN,
    EVENT_PAN,
    EVENT_UPDATE_VIEWPORT,
    EVENT_ZOOM,
    Point,
    Viewer,
    Viewport,
)

__all__ = [
    "EVENT_OPEN",
    "EVENT_PAN",
    "EVENT_UPDATE_VIEWPORT",
    "EVENT_ZOOM",
    "Point",
    "Viewer",
    "Viewport",
    "ViewportAdapter",
]
