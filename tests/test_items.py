"""Test module for ade.items

The tests are run using pytest.
"""

import pytest

from ade.items import SvgCircleItem, SvgPathItem, new_item_id
from ade.settings import AdSettings


class TestSvgPathItem:
    """Tests for path items."""

    def test_defaults(self):
        """Stroke attributes default to a round black solid line."""
        item = SvgPathItem("M 0 0 L 1 1")
        assert item.stroke == "#000"
        assert item.stroke_width == 2.0
        assert item.opacity == 1.0
        assert item.line_type == "solid"
        assert item.stroke_line_cap == "round"
        assert item.stroke_line_join == "round"

    def test_ids(self):
        """Ids are 12 hex digits and unique."""
        assert len(new_item_id()) == 12
        int(new_item_id(), 16)
        assert SvgPathItem().id != SvgPathItem().id
        assert SvgPathItem(item_id="abc").id == "abc"

    def test_bounds_follow_path_string(self):
        """Assigning a new path string refreshes the bounds."""
        item = SvgPathItem("M 0 0 L 10 10")
        assert item.bounds.rect == (0.0, 0.0, 10.0, 10.0)
        item.d = "M 5 5 L 20 30"
        assert item.bounds.rect == (5.0, 5.0, 15.0, 25.0)

    def test_none_path_string(self):
        """None is stored as empty path."""
        item = SvgPathItem()
        item.d = None
        assert item.d == ""
        assert item.bounds.rect == (0.0, 0.0, 0.0, 0.0)

    def test_move_by_keeps_relative_commands(self):
        """Moving an item translates its path string."""
        item = SvgPathItem("m 10 10 l 20 0")
        item.move_by(5, 7)
        assert item.d == "m 15 17 l 20 0"
        assert item.bounds.rect == (15.0, 17.0, 20.0, 0.0)

    def test_hit_tests(self):
        """Hit-tests are delegated to the path."""
        item = SvgPathItem("M 0 0 L 10 0")
        assert item.is_near_point(5, 1)
        assert not item.is_near_point(5, 1, threshold=0.5)
        assert item.intersects_circle(5, 2, 2)
        assert item.intersects_rect(9, -1, 11, 1)
        assert not item.intersects_rect(4, -1, 6, 1)

    def test_hit_threshold_from_settings(self):
        """The hit distance defaults to settings.hit_threshold."""
        item = SvgPathItem("M 0 0 L 10 0")
        assert not item.is_near_point(5, 6)
        assert item.is_near_point(5, 6, settings=AdSettings(hit_threshold=8.0))
        assert not item.is_near_point(5, 6, threshold=2.0, settings=AdSettings(hit_threshold=8.0))

    def test_curve_samples_from_settings(self):
        """A single curve sample reduces the curve to its chord."""
        item = SvgPathItem("M 0 0 Q 5 10 10 0")
        coarse = AdSettings(curve_samples=1, hit_threshold=1.0)
        assert item.is_near_point(5, 4.5, settings=AdSettings(hit_threshold=1.0))
        assert not item.is_near_point(5, 4.5, settings=coarse)
        assert item.intersects_circle(5, 4, 1.5)
        assert not item.intersects_circle(5, 4, 1.5, settings=coarse)

    def test_to_dict(self):
        """The dictionary carries all attributes."""
        item = SvgPathItem("M 0 0 L 1 1", stroke="#f00", item_id="p1")
        data = item.to_dict()
        assert data["id"] == "p1"
        assert data["d"] == "M 0 0 L 1 1"
        assert data["stroke"] == "#f00"


class TestSvgCircleItem:
    """Tests for circle items."""

    def test_negative_radius(self):
        """Negative radii are rejected."""
        with pytest.raises(ValueError):
            SvgCircleItem(0, 0, -1)

    def test_defaults(self):
        """Circles are filled black and opaque."""
        circle = SvgCircleItem(1, 2, 3)
        assert circle.fill == "#000"
        assert circle.opacity == 1.0
        assert len(circle.id) == 12

    def test_bounds(self):
        """Bounds are the bounding square."""
        assert SvgCircleItem(10, 20, 5).bounds.rect == (5.0, 15.0, 10.0, 10.0)

    def test_queries(self):
        """Point, circle and rectangle queries."""
        circle = SvgCircleItem(0, 0, 2)
        assert circle.contains_point(1, 1)
        assert not circle.contains_point(2, 1)
        assert circle.intersects_circle(4, 0, 2)
        assert not circle.intersects_circle(5, 0, 2)
        assert circle.intersects_rect(1, 1, 5, 5)
        assert not circle.intersects_rect(3, 3, 5, 5)

    def test_move_by(self):
        """Moving shifts the center."""
        circle = SvgCircleItem(1, 2, 3)
        circle.move_by(4, 5)
        assert (circle.cx, circle.cy, circle.r) == (5, 7, 3)

    def test_to_dict(self):
        """The dictionary carries all attributes."""
        data = SvgCircleItem(1, 2, 3, item_id="c1").to_dict()
        assert data == {"id": "c1", "cx": 1, "cy": 2, "r": 3, "fill": "#000", "opacity": 1.0}
