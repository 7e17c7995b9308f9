"""Test module for ade.path

The tests are run using pytest.
These tests cover bounds, point extraction, flattening and caching of
AdPath as well as the functional PathData interface.
"""

import numpy as np
import pytest

from ade.path import AdPath, Node, PathData
from ade.svgpath import AdSvgPath

###############################################################################
# Bounds
###############################################################################


class TestBounds:
    """Tests for AdPath.bounding_box() and PathData.get_bounds()."""

    def test_line_bounds(self):
        """Bounds are (min_x, min_y, width, height)."""
        assert PathData.get_bounds("M 10 20 L 30 5") == (10.0, 5.0, 20.0, 15.0)

    def test_relative_bounds(self):
        """Relative coordinates are resolved before bounding."""
        assert PathData.get_bounds("m 10 10 l 20 0 l 0 20") == (10.0, 10.0, 20.0, 20.0)

    @pytest.mark.parametrize("path_string", ["", "   ", "foo", "L 1"])
    def test_empty_bounds(self, path_string):
        """Unparsable input gives the zero rectangle."""
        assert PathData.get_bounds(path_string) == (0.0, 0.0, 0.0, 0.0)

    def test_cubic_bounds_are_conservative(self):
        """Control points are included although the curve stays below them."""
        assert PathData.get_bounds("M 0 0 C 0 10 10 10 10 0") == (0.0, 0.0, 10.0, 10.0)

    def test_quadratic_bounds_include_control(self):
        """The quadratic control point is part of the bounds."""
        assert PathData.get_bounds("M 0 0 Q 5 -10 10 0") == (0.0, -10.0, 10.0, 10.0)

    def test_smooth_curve_reflected_control_in_bounds(self):
        """The reflected control point of S also bounds the curve."""
        # reflected control of S is (40, 20)
        assert PathData.get_bounds("M 0 0 C 10 0 20 0 30 10 S 50 10 60 10") == (0.0, 0.0, 60.0, 20.0)

    def test_arc_bounds_endpoint_only(self):
        """By default arcs contribute their endpoint only."""
        assert PathData.get_bounds("M 0 0 A 10 10 0 0 1 20 0") == (0.0, 0.0, 20.0, 0.0)

    def test_arc_bounds_with_samples(self):
        """Folding in the arc samples covers the bulge of the arc."""
        box = AdPath("M 0 0 A 10 10 0 0 1 20 0").bounding_box(include_arc_samples=True)
        assert box.height == pytest.approx(10.0)
        assert box.ymin == pytest.approx(-10.0)

    def test_horizontal_vertical_bounds(self):
        """H and V keep the other coordinate."""
        assert PathData.get_bounds("M 1 1 H 11 V 6") == (1.0, 1.0, 10.0, 5.0)

    def test_bounds_monotonic(self):
        """Appending a segment never shrinks the bounds."""
        base = AdPath("M 0 0 L 10 10 Q 20 0 30 10").bounding_box()
        extended = AdPath("M 0 0 L 10 10 Q 20 0 30 10 L 5 -5").bounding_box()
        assert extended.xmin <= base.xmin
        assert extended.ymin <= base.ymin
        assert extended.xmax >= base.xmax
        assert extended.ymax >= base.ymax

    def test_bounds_follow_translation(self):
        """Moving a path moves its bounds by the same offset."""
        for path_string in ("M 0 0 L 10 0 Q 20 10 30 0 C 40 0 50 10 60 0 Z", "m 10 10 l 20 0 l 0 20 l -20 0 z"):
            (x, y, w, h) = PathData.get_bounds(path_string)
            moved = PathData.get_bounds(AdSvgPath.move_path_by(path_string, 5, 7))
            assert moved == pytest.approx((x + 5, y + 7, w, h))

    def test_bounding_box_cached(self):
        """The default bounds are computed once per instance."""
        path = AdPath("M 0 0 L 1 1")
        assert path.bounding_box() is path.bounding_box()


###############################################################################
# Point extraction
###############################################################################


class TestPoints:
    """Tests for point and node extraction."""

    def test_to_points_endpoints_of_mlqc(self):
        """to_points returns the M/L/Q/C endpoints without control points."""
        points = PathData.to_points("M 0 0 Q 1 2 3 4 C 5 5 6 6 7 7 L 8 8")
        assert points == [(0.0, 0.0), (3.0, 4.0), (7.0, 7.0), (8.0, 8.0)]

    def test_to_points_resolves_relative(self):
        """Relative endpoints are returned absolute."""
        assert PathData.to_points("m 1 1 l 2 0 q 1 1 2 2") == [(1.0, 1.0), (3.0, 1.0), (5.0, 3.0)]

    def test_to_points_skips_other_commands(self):
        """H, V, S, T, A and Z do not contribute endpoints."""
        assert PathData.to_points("M 0 0 H 5 V 5 L 6 6 A 1 1 0 0 1 8 8 Z") == [(0.0, 0.0), (6.0, 6.0)]

    def test_nodes_with_type_quadratic(self):
        """The quadratic control point is flagged."""
        nodes = PathData.get_path_nodes_with_type("M 0 0 Q 1 2 3 4")
        assert len(nodes) == 3
        assert nodes[1].is_control
        assert not nodes[0].is_control
        assert not nodes[2].is_control
        assert nodes[1] == Node(1.0, 2.0, True)

    def test_nodes_with_type_cubic(self):
        """Both cubic control points are flagged."""
        nodes = PathData.get_path_nodes_with_type("M 0 0 C 1 1 2 2 3 3")
        assert [node.is_control for node in nodes] == [False, True, True, False]

    def test_nodes_smooth_cubic_written_control_only(self):
        """S contributes only the control point written in the string."""
        nodes = PathData.get_path_nodes_with_type("M 0 0 C 1 1 2 2 3 3 S 5 5 6 6")
        assert [node.point for node in nodes[-2:]] == [(5.0, 5.0), (6.0, 6.0)]
        assert len(nodes) == 6

    def test_get_points(self):
        """get_points returns endpoints and control points in order."""
        assert PathData.get_points("M 0 0 Q 1 2 3 4 L 5 6") == [(0.0, 0.0), (1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]

    def test_closepath_adds_no_point(self):
        """Z adds no node."""
        assert PathData.get_points("M 0 0 L 1 1 Z") == [(0.0, 0.0), (1.0, 1.0)]

    def test_format_round_trip(self):
        """A path string survives tokenizing, formatting and point extraction."""
        path_string = AdSvgPath.move_path_by("M 0 0 L 10 10", 0, 0)
        assert path_string == "M 0 0 L 10 10"
        assert PathData.get_points(path_string) == [(0.0, 0.0), (10.0, 10.0)]


###############################################################################
# Length
###############################################################################


class TestEstimatedLength:
    """Tests for estimated_length()."""

    def test_3_4_5(self):
        """A single line has its euclidean length."""
        assert PathData.estimated_length("M 0 0 L 3 4") == pytest.approx(5.0)

    def test_includes_moveto_jumps(self):
        """Jumps between subpaths are part of the estimate."""
        assert PathData.estimated_length("M 0 0 L 3 4 M 3 10 L 3 14") == pytest.approx(15.0)

    def test_empty(self):
        """An empty path has length 0."""
        assert PathData.estimated_length("") == 0.0


###############################################################################
# AdPath
###############################################################################


class TestAdPath:
    """Tests for caching, flattening and translation of AdPath."""

    def test_of_is_cached(self):
        """AdPath.of returns a shared instance per path string."""
        assert AdPath.of("M 1 1 L 2 2") is AdPath.of("M 1 1 L 2 2")

    def test_none_is_empty(self):
        """None is treated as empty path string."""
        path = AdPath(None)
        assert path.path_string == ""
        assert path.is_empty

    def test_flattened_excludes_moves(self):
        """One polyline per drawing primitive."""
        polylines = AdPath("M 0 0 L 10 0 C 10 5 20 5 20 0 M 30 0 Z").flattened()
        assert [len(p) for p in polylines] == [2, 11, 2]

    def test_flattened_is_read_only(self):
        """The shared flattening of a cached path cannot be changed by a caller."""
        polylines = AdPath.of("M 0 0 L 10 0 L 10 10").flattened()
        assert isinstance(polylines, tuple)
        assert AdPath.of("M 0 0 L 10 0 L 10 10").flattened() is polylines
        with pytest.raises(ValueError):
            polylines[0][0, 0] = 99.0

    def test_flattened_custom_resolution(self):
        """Custom sample counts are honored and not cached."""
        path = AdPath("M 0 0 Q 5 5 10 0 A 5 5 0 0 1 20 0")
        assert [len(p) for p in path.flattened(4, 8)] == [5, 9]
        assert [len(p) for p in path.flattened()] == [11, 21]

    def test_sampled_points_include_moves(self):
        """sampled_points() also contains lone moveto points."""
        points = AdPath("M 5 5 M 0 0 L 1 0").sampled_points()
        np.testing.assert_allclose(points, [(5, 5), (0, 0), (0, 0), (1, 0)])

    def test_sampled_points_empty(self):
        """Empty paths have no samples."""
        assert AdPath("").sampled_points().shape == (0, 2)

    def test_move_by(self):
        """move_by returns a new path and leaves the original untouched."""
        path = AdPath("M 0 0 l 10 0")
        moved = path.move_by(1, 2)
        assert moved.path_string == "M 1 2 l 10 0"
        assert path.path_string == "M 0 0 l 10 0"

    def test_str_and_repr(self):
        """str gives the path string."""
        path = AdPath("M 0 0")
        assert str(path) == "M 0 0"
        assert repr(path) == "AdPath('M 0 0')"
