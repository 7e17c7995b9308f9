"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ade.common import ARC_SEGMENTS, Point


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods related to geometry handling."""

    @staticmethod
    def distance(x1: float, y1: float, x2: float, y2: float) -> float:
        """Euclidean distance between (x1,y1) and (x2,y2)."""
        return math.hypot(x2 - x1, y2 - y1)

    @staticmethod
    def closest_point_on_segment(
        px: float, py: float, x1: float, y1: float, x2: float, y2: float
    ) -> Tuple[float, float]:
        """
        Return the point of segment (x1,y1)-(x2,y2) closest to (px,py).
        A zero-length segment returns its start point.
        """
        dx = x2 - x1
        dy = y2 - y1
        length2 = dx * dx + dy * dy
        if length2 == 0:
            return (x1, y1)
        t = ((px - x1) * dx + (py - y1) * dy) / length2
        t = max(0.0, min(1.0, t))
        return (x1 + t * dx, y1 + t * dy)

    @staticmethod
    def distance_to_segment(px: float, py: float, x1: float, y1: float, x2: float, y2: float) -> float:
        """
        Distance from point (px,py) to segment (x1,y1)-(x2,y2).

        Args:
            px, py (float): the point
            x1, y1, x2, y2 (float): start and end of the segment

        Returns:
            float: the distance; plain point distance if the segment has zero length
        """
        (qx, qy) = GeomMath.closest_point_on_segment(px, py, x1, y1, x2, y2)
        return math.hypot(px - qx, py - qy)

    @staticmethod
    def perpendicular_distances(points: NDArray[np.float64], start: Point, end: Point) -> NDArray[np.float64]:
        """
        Perpendicular distances of all _points_ from the line through _start_ and _end_.
        If _start_ and _end_ coincide the distances to _start_ are returned.

        Args:
            points (NDArray[np.float64]): shape (n, 2)
            start (Tuple[float, float]): first point of the chord
            end (Tuple[float, float]): last point of the chord

        Returns:
            NDArray[np.float64]: shape (n,)
        """
        chord_x = end[0] - start[0]
        chord_y = end[1] - start[1]
        chord_len = math.hypot(chord_x, chord_y)
        rel_x = points[:, 0] - start[0]
        rel_y = points[:, 1] - start[1]
        if chord_len == 0:
            return np.hypot(rel_x, rel_y)
        return np.abs(chord_x * rel_y - chord_y * rel_x) / chord_len

    @staticmethod
    def turn_angle(a: Point, b: Point, c: Point) -> Optional[float]:
        """
        Angle (radians) between the vectors a->b and b->c.
        Returns None if one of the vectors has zero length.
        """
        v1x, v1y = b[0] - a[0], b[1] - a[1]
        v2x, v2y = c[0] - b[0], c[1] - b[1]
        mag1 = math.hypot(v1x, v1y)
        mag2 = math.hypot(v2x, v2y)
        if mag1 == 0 or mag2 == 0:
            return None
        cos_angle = (v1x * v2x + v1y * v2y) / (mag1 * mag2)
        return math.acos(max(-1.0, min(1.0, cos_angle)))

    @staticmethod
    def polyline_length(points: Union[Sequence[Point], NDArray[np.float64]]) -> float:
        """Sum of the straight distances between consecutive _points_."""
        if len(points) < 2:
            return 0.0
        diffs = np.diff(np.asarray(points, dtype=np.float64), axis=0)
        return float(np.sum(np.hypot(diffs[:, 0], diffs[:, 1])))

    @staticmethod
    def sample_arc(
        # pylint: disable=too-many-arguments,too-many-positional-arguments,too-many-locals
        start: Point,
        rx: float,
        ry: float,
        angle: float,
        large_arc: bool,
        sweep: bool,
        end: Point,
        segments: int = ARC_SEGMENTS,
    ) -> NDArray[np.float64]:
        """
        Sample an SVG elliptical arc into a polyline.

        Uses the endpoint to center conversion of the SVG implementation notes:
        radii too small to connect both endpoints are scaled up uniformly, and the
        angle sweep is corrected according to _sweep_.

        Args:
            start (Tuple[float, float]): current point (absolute)
            rx, ry (float): radii
            angle (float): x-axis-rotation in degrees
            large_arc (bool): large-arc-flag
            sweep (bool): sweep-flag
            end (Tuple[float, float]): end point (absolute)
            segments (int): number of straight segments

        Returns:
            NDArray[np.float64]: shape (segments+1, 2) from _start_ to _end_,
                or shape (2, 2) for a degenerate arc (zero radius or coinciding endpoints)
        """
        (x0, y0) = start
        (x, y) = end
        rx = abs(rx)
        ry = abs(ry)
        if rx == 0 or ry == 0 or (x0 == x and y0 == y):
            return np.array([start, end], dtype=np.float64)

        rad = math.radians(angle)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        dx2 = (x0 - x) / 2.0
        dy2 = (y0 - y) / 2.0
        x1p = cos_a * dx2 + sin_a * dy2
        y1p = -sin_a * dx2 + cos_a * dy2

        rx2, ry2 = rx * rx, ry * ry
        x1p2, y1p2 = x1p * x1p, y1p * y1p
        lam = x1p2 / rx2 + y1p2 / ry2
        if lam > 1:
            scale = math.sqrt(lam)
            rx *= scale
            ry *= scale
            rx2, ry2 = rx * rx, ry * ry

        sign = -1.0 if large_arc == sweep else 1.0
        sq = (rx2 * ry2 - rx2 * y1p2 - ry2 * x1p2) / (rx2 * y1p2 + ry2 * x1p2)
        coef = sign * math.sqrt(max(sq, 0.0))
        cxp = coef * (rx * y1p) / ry
        cyp = coef * -(ry * x1p) / rx
        center_x = cos_a * cxp - sin_a * cyp + (x0 + x) / 2.0
        center_y = sin_a * cxp + cos_a * cyp + (y0 + y) / 2.0

        theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
        dtheta = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx) - theta1
        if sweep and dtheta < 0:
            dtheta += 2 * math.pi
        elif not sweep and dtheta > 0:
            dtheta -= 2 * math.pi

        t = theta1 + dtheta * np.linspace(0.0, 1.0, segments + 1, dtype=np.float64)
        cos_t = np.cos(t)
        sin_t = np.sin(t)
        result = np.empty((segments + 1, 2), dtype=np.float64)
        result[:, 0] = center_x + rx * cos_a * cos_t - ry * sin_a * sin_t
        result[:, 1] = center_y + rx * sin_a * cos_t + ry * cos_a * sin_t
        # pin the exact endpoints against rounding drift
        result[0] = start
        result[-1] = end
        return result


###############################################################################
# AdBox
###############################################################################
@dataclass
class AdBox:
    """
    Axis-aligned bounding rectangle.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    _xmin: float
    _ymin: float
    _xmax: float
    _ymax: float

    def __init__(self, xmin: float, ymin: float, xmax: float, ymax: float):
        """Initialize AdBox with coordinates.

        Args:
            xmin: The minimum x-coordinate
            ymin: The minimum y-coordinate
            xmax: The maximum x-coordinate
            ymax: The maximum y-coordinate
        """
        self._xmin = float(xmin)
        self._ymin = float(ymin)
        self._xmax = float(xmax)
        self._ymax = float(ymax)

        # Normalize coordinates to ensure xmin <= xmax and ymin <= ymax
        if self._xmin > self._xmax:
            self._xmin, self._xmax = self._xmax, self._xmin
        if self._ymin > self._ymax:
            self._ymin, self._ymax = self._ymax, self._ymin

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> AdBox:
        """Create an AdBox from (x, y, width, height)."""
        return cls(x, y, x + width, y + height)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> AdBox:
        """Smallest box containing all _points_; the zero box if there are none."""
        arr = np.asarray(list(points), dtype=np.float64)
        if not arr.size:
            return cls(0.0, 0.0, 0.0, 0.0)
        x_min, y_min = arr.min(axis=0)
        x_max, y_max = arr.max(axis=0)
        return cls(x_min, y_min, x_max, y_max)

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self._xmin

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self._ymin

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self._xmax

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self._ymax

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        """The box as Tuple (min_x, min_y, width, height)."""
        return self._xmin, self._ymin, self.width, self.height

    @property
    def width(self) -> float:
        """float: The width of the box (difference between xmax and xmin)."""
        return self._xmax - self._xmin

    @property
    def height(self) -> float:
        """float: The height of the box (difference between ymax and ymin)."""
        return self._ymax - self._ymin

    def contains_point(self, x: float, y: float) -> bool:
        """True if (x,y) lies inside the box or on its border."""
        return self._xmin <= x <= self._xmax and self._ymin <= y <= self._ymax

    def overlaps(self, min_x: float, min_y: float, max_x: float, max_y: float) -> bool:
        """True if the box touches or overlaps the rectangle (min_x, min_y)-(max_x, max_y)."""
        return not (self._xmin > max_x or self._xmax < min_x or self._ymin > max_y or self._ymax < min_y)

    def __repr__(self):
        return f"AdBox({self._xmin}, {self._ymin}, {self._xmax}, {self._ymax})"
