"""Tests for the rotation/perspective pipeline."""

import math

import pytest

from ideasphere.model import Point3D, ViewState, Viewport
from ideasphere.projection import FOCAL_LENGTH, NEAR_PLANE, project, project_polyline, project_segments, project_xyz

VIEWPORT = Viewport(800, 600)
FLAT = ViewState(rotation_x=0.0, rotation_y=0.0, zoom=1.0)


class TestProjectXYZ:

    def test_origin_maps_to_viewport_center(self):
        p = project_xyz(0.0, 0.0, 0.0, ViewState(0.7, -1.3, 2.0), VIEWPORT)
        assert (p.screen_x, p.screen_y) == (400.0, 300.0)
        assert p.perspective_scale == 1.0
        assert p.depth_key == 1000
        assert p.raw_z == 0.0

    def test_depth_shrinks_far_points(self):
        far = project_xyz(0.0, 0.0, 100.0, FLAT, VIEWPORT)
        near = project_xyz(0.0, 0.0, -100.0, FLAT, VIEWPORT)
        assert far.perspective_scale == pytest.approx(FOCAL_LENGTH / (FOCAL_LENGTH + 100.0))
        assert near.perspective_scale > 1.0 > far.perspective_scale
        assert far.depth_key == math.floor(far.perspective_scale * 1000)
        assert near.depth_key > far.depth_key

    def test_zoom_scales_coordinates(self):
        p = project_xyz(10.0, -5.0, 0.0, ViewState(0.0, 0.0, 2.0), VIEWPORT)
        assert p.screen_x == pytest.approx(420.0)
        assert p.screen_y == pytest.approx(290.0)

    def test_rotation_about_y_moves_x_into_depth(self):
        p = project_xyz(100.0, 0.0, 0.0, ViewState(0.0, math.pi / 2, 1.0), VIEWPORT)
        assert p.raw_z == pytest.approx(100.0)
        assert p.screen_x == pytest.approx(400.0, abs=1e-9)

    def test_rotation_about_x_moves_y_into_depth(self):
        p = project_xyz(0.0, 100.0, 0.0, ViewState(math.pi / 2, 0.0, 1.0), VIEWPORT)
        assert p.raw_z == pytest.approx(100.0)
        assert p.screen_y == pytest.approx(300.0, abs=1e-9)

    def test_y_rotation_applied_before_x_rotation(self):
        """A point on +X reaches the Y axis only through the Y-then-X order."""
        view = ViewState(math.pi / 2, math.pi / 2, 1.0)
        p = project_xyz(100.0, 0.0, 0.0, view, VIEWPORT)
        # Y rotation sends +X into +Z; X rotation then sends +Z into -Y.
        assert p.raw_z == pytest.approx(0.0, abs=1e-9)
        assert p.screen_y == pytest.approx(300.0 - 100.0)

    def test_points_past_camera_stay_finite(self):
        p = project_xyz(0.0, 0.0, -2000.0, FLAT, VIEWPORT)
        assert math.isfinite(p.perspective_scale)
        assert p.perspective_scale > 0

    def test_points_past_near_plane_are_culled(self):
        past = project_xyz(0.0, 0.0, -2000.0, FLAT, VIEWPORT)
        assert past.culled
        assert past.perspective_scale == pytest.approx(FOCAL_LENGTH / NEAR_PLANE)
        assert not project_xyz(0.0, 0.0, -100.0, FLAT, VIEWPORT).culled

    def test_tilted_pole_culled_at_max_zoom(self):
        """Tilting the north pole toward the viewer at zoom 2.5 puts it behind the camera."""
        p = project_xyz(0.0, 420.0, 0.0, ViewState(-math.pi / 2, 0.0, 2.5), VIEWPORT)
        assert p.raw_z == pytest.approx(-1050.0)
        assert p.culled
        assert p.perspective_scale <= FOCAL_LENGTH / NEAR_PLANE

    def test_pure_function_of_view(self):
        view = ViewState(0.3, 1.1, 1.4)
        assert project_xyz(12.0, 34.0, 56.0, view, VIEWPORT) == project_xyz(12.0, 34.0, 56.0, view, VIEWPORT)


class TestProjectPoint:

    def test_carries_point(self):
        point = Point3D(10.0, 20.0, 30.0, "n1")
        projected = project(point, FLAT, VIEWPORT)
        assert projected.point is point
        assert projected.id == "n1"
        assert not projected.is_center

    def test_polyline(self):
        line = [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0)]
        assert project_polyline(line, FLAT, VIEWPORT) == [(400.0, 300.0), (410.0, 300.0)]

    def test_segments_split_at_culled_samples(self):
        line = [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (0.0, 0.0, -900.0), (20.0, 0.0, 0.0), (30.0, 0.0, 0.0)]
        assert project_segments(line, FLAT, VIEWPORT) == [
            [(400.0, 300.0), (410.0, 300.0)],
            [(420.0, 300.0), (430.0, 300.0)],
        ]

    def test_segments_drop_single_samples(self):
        line = [(0.0, 0.0, -900.0), (5.0, 0.0, 0.0), (0.0, 0.0, -900.0)]
        assert project_segments(line, FLAT, VIEWPORT) == []

    def test_project_carries_culled_flag(self):
        point = Point3D(0.0, 0.0, -1000.0, "far")
        assert project(point, FLAT, VIEWPORT).culled
