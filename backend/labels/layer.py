"""Drawing surface for labels, owned by the host UI."""
from __future__ import annotations

from typing import Protocol

from viewport import Point
from .types import LabelEntity


class LabelLayer(Protocol):
    """A plain overlay container positioned manually above the viewer canvas.

    Bypasses the viewer's own overlay system, which would re-layout every
    element on each animation frame.
    """

    def show(self, label: LabelEntity) -> None: ...

    def hide(self, label: LabelEntity) -> None: ...

    def move(self, label: LabelEntity, position: Point) -> None: ...

    def set_container_visible(self, visible: bool) -> None: ...

    def clear(self) -> None: ...


class NullLabelLayer:
    """Layer that only keeps state on the LabelEntity objects themselves."""

    def show(self, label: LabelEntity) -> None:
        pass

    def hide(self, label: LabelEntity) -> None:
        pass

    def move(self, label: LabelEntity, position: Point) -> None:
        pass

    def set_container_visible(self, visible: bool) -> None:
        pass

    def clear(self) -> None:
        pass
