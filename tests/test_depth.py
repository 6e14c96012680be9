"""Tests for depth ordering and render descriptors."""

import random

import pytest

from ideasphere.depth import build_render_list, depth_sort, is_behind, link_opacity
from ideasphere.model import CENTER_ID, Idea, Point3D, ProjectedPoint


def projected(node_id, scale, *, center=False, raw_z=0.0, item=None):
    point = Point3D(0.0, 0.0, raw_z, node_id, item=item, is_center=center)
    return ProjectedPoint(point, 0.0, 0.0, scale, int(scale * 1000), raw_z)


class TestDepthSort:

    def test_far_to_near(self):
        pts = [projected("a", 1.2), projected("b", 0.7), projected("c", 0.95)]
        assert [p.id for p in depth_sort(pts)] == ["b", "c", "a"]

    def test_center_always_last(self):
        """The center is drawn last even when satellites are nearer."""
        rng = random.Random(7)
        for _ in range(50):
            pts = [projected(f"n{i}", rng.uniform(0.3, 3.0)) for i in range(8)]
            pts.insert(rng.randrange(len(pts) + 1), projected(CENTER_ID, 1.0, center=True))
            ordered = depth_sort(pts)
            assert ordered[-1].is_center
            keys = [p.depth_key for p in ordered[:-1]]
            assert keys == sorted(keys)

    def test_ties_broken_by_scale(self):
        a = ProjectedPoint(Point3D(0, 0, 0, "a"), 0, 0, 0.9004, 900, 0.0)
        b = ProjectedPoint(Point3D(0, 0, 0, "b"), 0, 0, 0.9001, 900, 0.0)
        assert [p.id for p in depth_sort([a, b])] == ["b", "a"]


class TestHints:

    @pytest.mark.parametrize(
        "raw_z, zoom, expected",
        [(-101.0, 1.0, True), (-100.0, 1.0, False), (-150.0, 2.0, False), (-201.0, 2.0, True), (50.0, 1.0, False)],
    )
    def test_is_behind(self, raw_z, zoom, expected):
        assert is_behind(raw_z, zoom) is expected

    def test_link_opacity_floor(self):
        assert link_opacity(0.5) == 0.05
        assert link_opacity(0.1) == 0.05

    def test_link_opacity_grows_with_scale(self):
        assert link_opacity(1.0) == pytest.approx(0.2)
        assert link_opacity(1.5) == pytest.approx(0.4)


class TestBuildRenderList:

    def test_labels_and_flags(self):
        idea = Idea("a", "Alpha")
        pts = [
            projected(CENTER_ID, 1.0, center=True),
            projected("a", 0.8, raw_z=-300.0, item=idea),
        ]
        items = build_render_list(pts, 1.0, center_label="Core")
        assert [it.id for it in items] == ["a", CENTER_ID]
        satellite, center = items
        assert satellite.label == "Alpha"
        assert satellite.is_behind
        assert satellite.link_opacity == pytest.approx(0.12)
        assert satellite.item is idea
        assert center.label == "Core"
        assert not center.is_behind
        assert center.link_opacity == 0.0

    def test_only_selected_index_flagged(self):
        """Two nodes sharing an id never both light up."""
        first = Idea("dup", "First")
        last = Idea("dup", "Last")
        pts = [
            projected(CENTER_ID, 1.0, center=True),
            projected("dup", 0.9, item=first),
            projected("dup", 1.1, item=last),
        ]
        items = build_render_list(pts, 1.0, selected_index=2)
        flagged = [it for it in items if it.is_selected]
        assert len(flagged) == 1
        assert flagged[0].item is last

    def test_culled_points_keep_order_without_link(self):
        culled = ProjectedPoint(Point3D(0, 0, 0, "gone", Idea("gone", "Gone")), 0, 0, 10.0, 10000, -1050.0, True)
        pts = [projected(CENTER_ID, 1.0, center=True), projected("a", 0.9, item=Idea("a", "A")), culled]
        items = build_render_list(pts, 2.5)
        assert [it.id for it in items] == ["a", "gone", CENTER_ID]
        assert items[1].is_culled
        assert items[1].link_opacity == 0.0
        assert not items[0].is_culled

    def test_no_selection(self):
        pts = [projected(CENTER_ID, 1.0, center=True), projected("a", 0.9, item=Idea("a", "A"))]
        assert not any(it.is_selected for it in build_render_list(pts, 1.0))
