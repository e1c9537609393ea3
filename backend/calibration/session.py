"""Manual calibration session: click, tag, refit."""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from projection import CameraConfig
from viewport import Point, Viewer, ViewportAdapter
from .exceptions import CalibrationInputError
from .solver import fit_camera_scale, fit_seed_pixel
from .types import CalibrationFit, CalibrationPoint

logger = logging.getLogger(__name__)


def _parse_coordinate(raw: str | float, name: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise CalibrationInputError(f"Invalid {name}: {raw!r}")
    if value != value:
        raise CalibrationInputError(f"Invalid {name}: {raw!r}")
    return value


class CalibrationSession:
    """Append-only calibration points with a refit after every addition."""

    def __init__(
        self,
        cam_cfg: CameraConfig,
        adapter: ViewportAdapter,
        refine_scale: bool = False,
    ):
        self._base_camera = cam_cfg
        self._adapter = adapter
        self._refine_scale = refine_scale
        self._lock = threading.Lock()
        self._points: list[CalibrationPoint] = []
        self._pending: Point | None = None
        self._camera = cam_cfg
        self._fit = fit_seed_pixel([], cam_cfg)

    @property
    def points(self) -> tuple[CalibrationPoint, ...]:
        with self._lock:
            return tuple(self._points)

    @property
    def pending(self) -> Point | None:
        return self._pending

    @property
    def fit(self) -> CalibrationFit:
        return self._fit

    @property
    def camera(self) -> CameraConfig:
        """Camera used by the latest fit (refined scale when enabled and valid)."""
        return self._camera

    def capture_click(self, viewer: Viewer, screen_x: float, screen_y: float) -> Point | None:
        """Record the image pixel under a screen click as the pending point."""
        pixel = self._adapter.screen_to_image_pixel(viewer, screen_x, screen_y)
        if pixel is None:
            return None
        self._pending = Point(round(pixel.x), round(pixel.y))
        logger.info("Calibration click at image (%d, %d)", self._pending.x, self._pending.y)
        return self._pending

    def cancel_pending(self):
        self._pending = None

    def tag_pending(self, label: str, lat: str | float, lng: str | float) -> CalibrationFit:
        """Attach operator-entered geodetic coordinates to the pending click."""
        if self._pending is None:
            raise CalibrationInputError("No pending calibration click to tag")
        fit = self.add_tagged(label, lat, lng, int(self._pending.x), int(self._pending.y))
        self._pending = None
        return fit

    def add_tagged(
        self,
        label: str,
        lat: str | float,
        lng: str | float,
        image_pixel_x: int,
        image_pixel_y: int,
    ) -> CalibrationFit:
        """Validate operator input and append it as a calibration point."""
        if not label or not label.strip():
            raise CalibrationInputError("Calibration label is required")
        point = self._build_point(
            label=label.strip(),
            lat=_parse_coordinate(lat, "latitude"),
            lng=_parse_coordinate(lng, "longitude"),
            image_pixel_x=image_pixel_x,
            image_pixel_y=image_pixel_y,
        )
        return self.add_point(point)

    @staticmethod
    def _build_point(**fields) -> CalibrationPoint:
        try:
            return CalibrationPoint(**fields)
        except ValidationError as exc:
            raise CalibrationInputError(str(exc)) from exc

    def add_point(self, point: CalibrationPoint) -> CalibrationFit:
        with self._lock:
            self._points.append(point)
            fit = self._refit()
            count = len(self._points)
        logger.info("Added calibration point '%s' (%d total)", point.label, count)
        return fit

    def add_points(self, points: list[CalibrationPoint]) -> CalibrationFit:
        with self._lock:
            self._points.extend(points)
            return self._refit()

    def _refit(self) -> CalibrationFit:
        # Caller holds _lock, so the published fit always matches _points
        points = list(self._points)
        if self._refine_scale:
            fit, camera = fit_camera_scale(points, self._base_camera)
        else:
            fit, camera = fit_seed_pixel(points, self._base_camera), self._base_camera
        if not fit.is_valid:
            logger.warning("Calibration fit undefined with %d point(s)", len(points))
        self._fit, self._camera = fit, camera
        return fit

    def reset(self):
        with self._lock:
            self._points.clear()
            self._camera = self._base_camera
            self._fit = fit_seed_pixel([], self._base_camera)
        self._pending = None
        logger.info("Calibration session reset")

    def export(self) -> list[dict]:
        return [p.model_dump(by_alias=True) for p in self.points]

    def to_json(self) -> str:
        return json.dumps(self.export(), indent=2)


def load_points(path: Path) -> list[CalibrationPoint]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [CalibrationPoint(**record) for record in data]


def save_points(path: Path, points: list[CalibrationPoint]):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = [p.model_dump(by_alias=True) for p in points]
    path.write_text(json.dumps(records, indent=2), encoding="utf-8")
