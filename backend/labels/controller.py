"""Level-of-detail label controller.

Zoom tiers (viewer zoom units):
    zoom < T1        -> borough labels
    T1 <= zoom < T2  -> boroughs + major neighborhoods
    zoom >= T2       -> every NTA

Projection happens once when labels are built; every pan/zoom frame only
maps the cached viewport point through the viewer's viewport-to-screen
transform.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence

from common.config import LOD_T1, LOD_T2
from viewport import (
    EVENT_OPEN,
    EVENT_PAN,
    EVENT_UPDATE_VIEWPORT,
    EVENT_ZOOM,
    Point,
    Viewer,
)
from .layer import LabelLayer, NullLabelLayer
from .types import LabelEntity, Tier

logger = logging.getLogger(__name__)


def classify_tier(zoom: float, t1: float = LOD_T1, t2: float = LOD_T2) -> Tier:
    """Half-open buckets, lower bound inclusive."""
    if zoom < t1:
        return Tier.COARSE
    if zoom < t2:
        return Tier.MID
    return Tier.FINE


class LabelController:
    """Owns pre-built labels and keeps them in sync with the viewer.

    Safe to construct before the viewer has opened its image: without a
    viewport every operation is a no-op. Visibility and screen positions are
    kept per controller, so several controllers may share one label catalog.
    """

    def __init__(
        self,
        viewer: Viewer,
        labels: Sequence[LabelEntity],
        layer: LabelLayer | None = None,
        t1: float = LOD_T1,
        t2: float = LOD_T2,
    ):
        if not t1 < t2:
            raise ValueError(f"LOD thresholds must satisfy t1 < t2 (got {t1}, {t2})")
        self._viewer = viewer
        self._labels = list(labels)
        self._layer: LabelLayer = layer or NullLabelLayer()
        self._t1 = t1
        self._t2 = t2
        self._current_tier: Tier | None = None
        self._enabled = True
        self.visibility_toggles = 0
        self.frames_drawn = 0
        # Indices into _labels
        self._visible: set[int] = set()
        self._positions: dict[int, Point] = {}

        self._handlers = (
            (EVENT_OPEN, self._on_open),
            (EVENT_ZOOM, self._on_zoom),
            (EVENT_PAN, self._on_frame),
            (EVENT_UPDATE_VIEWPORT, self._on_frame),
        )
        for event, handler in self._handlers:
            viewer.add_handler(event, handler)

        self.update_tier()

    @property
    def labels(self) -> list[LabelEntity]:
        return self._labels

    @property
    def current_tier(self) -> Tier | None:
        return self._current_tier

    @property
    def enabled(self) -> bool:
        return self._enabled

    def visible_labels(self) -> list[LabelEntity]:
        if not self._enabled:
            return []
        return [label for i, label in enumerate(self._labels) if i in self._visible]

    def is_visible(self, index: int) -> bool:
        return self._enabled and index in self._visible

    def screen_position(self, index: int) -> Point | None:
        """Last drawn screen position of a visible label."""
        return self._positions.get(index)

    def _on_open(self, _event: Any):
        self.update_tier()

    def _on_zoom(self, _event: Any):
        self.update_tier()

    def _on_frame(self, _event: Any):
        self.draw()

    def set_enabled(self, enabled: bool):
        self._enabled = enabled
        self._layer.set_container_visible(enabled)
        if enabled:
            # Visibility may be stale after a disabled stretch
            self._current_tier = None
            self.update_tier()

    def update_tier(self):
        if not self._enabled:
            return
        viewport = self._viewer.viewport
        if viewport is None:
            return

        tier = classify_tier(viewport.get_zoom(), self._t1, self._t2)
        if tier == self._current_tier:
            logger.debug("Tier unchanged (%s)", tier.name)
            return
        logger.debug("Tier %s -> %s", self._current_tier, tier.name)
        self._current_tier = tier

        for i, label in enumerate(self._labels):
            show = label.shown_at(tier)
            if show == (i in self._visible):
                continue
            self.visibility_toggles += 1
            if show:
                self._visible.add(i)
                self._layer.show(label)
            else:
                self._visible.discard(i)
                self._positions.pop(i, None)
                self._layer.hide(label)

        self.draw()

    def draw(self):
        """Write screen positions of visible labels for the current frame."""
        if not self._enabled:
            return
        viewport = self._viewer.viewport
        if viewport is None:
            return

        for i in sorted(self._visible):
            label = self._labels[i]
            position = viewport.pixel_from_point(label.viewport_point)
            self._positions[i] = position
            self._layer.move(label, position)
        self.frames_drawn += 1

    def destroy(self):
        for event, handler in self._handlers:
            self._viewer.remove_handler(event, handler)
        self._layer.clear()
