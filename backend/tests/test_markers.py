"""Tests for permit marker projection and the marker controller."""
from __future__ import annotations

import logging

import pytest

from overlay import MarkerController, marker_key, project_entities


@pytest.fixture()
def controller_factory(adapter, camera, seed_pixel):
    def _factory(viewer):
        return MarkerController(viewer, adapter, camera, seed_pixel)

    return _factory


class TestProjectEntities:
    def test_projects_with_style(self, permit_factory, adapter, camera, seed_pixel):
        markers = project_entities([permit_factory(category_code="DM")], camera, seed_pixel, adapter)
        assert len(markers) == 1
        marker = markers[0]
        assert marker.key == "job-121234567"
        assert marker.style.code == "DM"
        assert marker.viewport_point == adapter.image_pixel_to_viewport_point(*marker.image_pixel)

    def test_off_raster_dropped(self, permit_factory, adapter, camera, seed_pixel):
        entities = [permit_factory(), permit_factory(job_number="9", latitude=51.5074, longitude=-0.1278)]
        markers = project_entities(entities, camera, seed_pixel, adapter)
        assert [m.key for m in markers] == ["job-121234567"]

    def test_far_permit_logged(self, permit_factory, adapter, camera, seed_pixel, caplog):
        caplog.set_level(logging.DEBUG, logger="overlay.markers")
        entities = [permit_factory(), permit_factory(job_number="9", latitude=51.5074, longitude=-0.1278)]
        project_entities(entities, camera, seed_pixel, adapter)
        far = [r.getMessage() for r in caplog.records if "far from the seed" in r.getMessage()]
        assert far == ["Permit 9 is far from the seed; projection may be inaccurate"]

    def test_key_falls_back_to_index(self, permit_factory):
        assert marker_key(permit_factory(job_number=None), 7) == "idx-7"

    def test_to_dict(self, permit_factory, adapter, camera, seed_pixel):
        data = project_entities([permit_factory()], camera, seed_pixel, adapter)[0].to_dict()
        assert data["category"] == "NB"
        assert data["color"] == "#00ff88"
        assert 0.0 <= data["vp_x"] <= 1.0


class TestMarkerController:
    def test_sync_places_overlays(self, viewer_factory, controller_factory, permit_factory):
        viewer = viewer_factory()
        controller = controller_factory(viewer)
        placed = controller.sync([permit_factory(), permit_factory(job_number="2", latitude=40.76)])
        assert placed == 2
        assert set(viewer.overlays) == {"job-121234567", "job-2"}

    def test_sync_diffs_snapshots(self, viewer_factory, controller_factory, permit_factory):
        viewer = viewer_factory()
        controller = controller_factory(viewer)
        controller.sync([permit_factory(), permit_factory(job_number="2")])

        controller.sync([permit_factory(latitude=40.7510), permit_factory(job_number="3")])
        assert set(viewer.overlays) == {"job-121234567", "job-3"}
        assert viewer.overlay_updates == 1

    def test_unchanged_marker_not_updated(self, viewer_factory, controller_factory, permit_factory):
        viewer = viewer_factory()
        controller = controller_factory(viewer)
        controller.sync([permit_factory()])
        controller.sync([permit_factory()])
        assert viewer.overlay_updates == 0

    def test_sync_before_open_is_deferred(self, viewer_factory, controller_factory, permit_factory):
        viewer = viewer_factory(opened=False)
        controller = controller_factory(viewer)
        assert controller.sync([permit_factory()]) == 0
        assert viewer.overlays == {}

        viewer.open()
        assert set(viewer.overlays) == {"job-121234567"}
        assert set(controller.markers) == {"job-121234567"}

    def test_clear_and_destroy(self, viewer_factory, controller_factory, permit_factory):
        viewer = viewer_factory()
        controller = controller_factory(viewer)
        controller.sync([permit_factory()])
        controller.destroy()
        assert viewer.overlays == {}
        assert controller.markers == {}
        assert viewer.handlers["open"] == []

    def test_remove_unknown(self, viewer_factory, controller_factory):
        assert controller_factory(viewer_factory()).remove("job-x") is False

    def test_fly_to_entity(self, viewer_factory, controller_factory, permit_factory, adapter):
        viewer = viewer_factory(zoom=2.0)
        controller = controller_factory(viewer)
        entity = permit_factory()
        assert controller.fly_to_entity(entity)
        assert viewer.viewport.zoom == 6
        marker = project_entities([entity], controller._cam_cfg, controller._seed_pixel, adapter)[0]
        assert viewer.viewport.center == pytest.approx(marker.viewport_point)
