"""Diagram items: freehand paths and circles with their cached geometry."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from ade.geom import AdBox
from ade.hit_test import HitTester
from ade.path import AdPath
from ade.settings import AdSettings

logger = logging.getLogger(__name__)


def new_item_id() -> str:
    """Random identifier of 12 hex digits."""
    return uuid.uuid4().hex[:12]


###############################################################################
# SvgPathItem
###############################################################################


class SvgPathItem:
    """
    A stroke of the diagram: a SVG path string plus its stroke attributes.

    Assigning a new path string drops the cached geometry; bounds are recomputed
    on next access.

    Attributes:
        id: Identifier of the item
        stroke: Stroke color
        stroke_width: Stroke width
        opacity: Opacity in [0, 1]
        line_type: "solid", "dashed", ...
        stroke_line_cap: SVG stroke-linecap
        stroke_line_join: SVG stroke-linejoin
    """

    def __init__(
        # pylint: disable=too-many-arguments
        self,
        d: str = "",
        stroke: str = "#000",
        stroke_width: float = 2.0,
        opacity: float = 1.0,
        line_type: str = "solid",
        stroke_line_cap: str = "round",
        stroke_line_join: str = "round",
        item_id: Optional[str] = None,
    ):
        self.id: str = item_id or new_item_id()
        self.stroke = stroke
        self.stroke_width = stroke_width
        self.opacity = opacity
        self.line_type = line_type
        self.stroke_line_cap = stroke_line_cap
        self.stroke_line_join = stroke_line_join
        self._path = AdPath.of(d or "")

    @property
    def d(self) -> str:
        """The SVG path string."""
        return self._path.path_string

    @d.setter
    def d(self, value: str) -> None:
        self._path = AdPath.of(value or "")
        logger.debug("item %s: path changed, bounds %s", self.id, self._path.bounding_box())

    @property
    def path(self) -> AdPath:
        """The parsed path."""
        return self._path

    @property
    def bounds(self) -> AdBox:
        """Conservative bounds of the path."""
        return self._path.bounding_box()

    def is_near_point(
        self, x: float, y: float, threshold: Optional[float] = None, settings: Optional[AdSettings] = None
    ) -> bool:
        """
        True if the stroke passes closer than _threshold_ to (x,y).

        Args:
            x, y: the query point
            threshold: hit distance; settings.hit_threshold if None
            settings: source of the threshold and the flattening resolution,
                the defaults of AdSettings if None
        """
        settings = settings if settings is not None else AdSettings()
        if threshold is None:
            threshold = settings.hit_threshold
        return HitTester.is_near_point(x, y, self._path, threshold, settings.curve_samples, settings.arc_segments)

    def intersects_circle(self, cx: float, cy: float, radius: float, settings: Optional[AdSettings] = None) -> bool:
        """True if the stroke, flattened as configured in _settings_, comes within _radius_ of (cx,cy)."""
        settings = settings if settings is not None else AdSettings()
        return HitTester.intersects_circle(self._path, cx, cy, radius, settings.curve_samples, settings.arc_segments)

    def intersects_rect(self, min_x: float, min_y: float, max_x: float, max_y: float) -> bool:
        """True if a point of the stroke lies inside the rectangle."""
        return HitTester.intersects_rect(self._path, min_x, min_y, max_x, max_y, self.bounds)

    def move_by(self, dx: float, dy: float) -> None:
        """Translate the stroke by (dx, dy), keeping relative commands relative."""
        self.d = self._path.move_by(dx, dy).path_string

    def to_dict(self) -> dict:
        """Convert the item to a dictionary."""
        return {
            "id": self.id,
            "d": self.d,
            "stroke": self.stroke,
            "stroke_width": self.stroke_width,
            "opacity": self.opacity,
            "line_type": self.line_type,
            "stroke_line_cap": self.stroke_line_cap,
            "stroke_line_join": self.stroke_line_join,
        }

    def __repr__(self):
        return f"SvgPathItem(id={self.id!r}, d={self.d!r})"


###############################################################################
# SvgCircleItem
###############################################################################


class SvgCircleItem:
    """
    A filled circle of the diagram.

    Attributes:
        id: Identifier of the item
        cx, cy: Center
        r: Radius, >= 0
        fill: Fill color
        opacity: Opacity in [0, 1]
    """

    def __init__(
        # pylint: disable=too-many-arguments
        self,
        cx: float = 0.0,
        cy: float = 0.0,
        r: float = 0.0,
        fill: str = "#000",
        opacity: float = 1.0,
        item_id: Optional[str] = None,
    ):
        if r < 0:
            raise ValueError(f"Circle radius must not be negative, got {r}")
        self.id: str = item_id or new_item_id()
        self.cx = cx
        self.cy = cy
        self.r = r
        self.fill = fill
        self.opacity = opacity

    @property
    def bounds(self) -> AdBox:
        """Bounding square of the circle."""
        return AdBox.from_rect(self.cx - self.r, self.cy - self.r, 2 * self.r, 2 * self.r)

    def contains_point(self, x: float, y: float) -> bool:
        """True if (x,y) lies inside the circle or on its border."""
        return HitTester.is_point_in_circle(x, y, self)

    def intersects_circle(self, cx: float, cy: float, radius: float) -> bool:
        """True if this circle and the circle around (cx,cy) overlap."""
        return HitTester.circle_intersects_circle(self, cx, cy, radius)

    def intersects_rect(self, min_x: float, min_y: float, max_x: float, max_y: float) -> bool:
        """True if the circle overlaps the rectangle."""
        return HitTester.circle_intersects_rect(self, min_x, min_y, max_x, max_y)

    def move_by(self, dx: float, dy: float) -> None:
        """Translate the circle by (dx, dy)."""
        self.cx += dx
        self.cy += dy

    def to_dict(self) -> dict:
        """Convert the item to a dictionary."""
        return {"id": self.id, "cx": self.cx, "cy": self.cy, "r": self.r, "fill": self.fill, "opacity": self.opacity}

    def __repr__(self):
        return f"SvgCircleItem(id={self.id!r}, cx={self.cx}, cy={self.cy}, r={self.r})"
