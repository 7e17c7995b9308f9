"""Re-fitting of freehand ink: point reduction and curve fitting into SVG path strings."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ade.bezier import BezierCurve
from ade.common import (
    BASE_STEP,
    MAX_STEP,
    MIN_POINT_DISTANCE,
    RDP_EPSILON,
    STRAIGHT_ANGLE,
    STRAIGHTISH_ANGLE,
    Point,
    SmoothingType,
)
from ade.geom import GeomMath
from ade.items import SvgPathItem
from ade.location_cache import ItemLocationCache
from ade.path import PathData
from ade.settings import AdSettings
from ade.svgpath import AdSvgPath

logger = logging.getLogger(__name__)


def _fmt(point: Point) -> str:
    return f"{AdSvgPath.format_number(point[0])} {AdSvgPath.format_number(point[1])}"


###############################################################################
# SmoothingStrategies
###############################################################################


class SmoothingStrategies:
    """
    Strategies turning an ordered list of points into a SVG path string.

    All strategies emit absolute commands only, numbers with at most 2 decimals.
    They never raise; too short inputs give a short (possibly empty) result which
    the caller is expected to validate, see PathSmoother.is_valid_result().
    """

    @staticmethod
    def linear(points: Sequence[Point]) -> str:
        """Connect all _points_ by straight lines; "" for fewer than 2 points."""
        if len(points) < 2:
            return ""
        parts = [f"M {_fmt(points[0])}"]
        parts.extend(f"L {_fmt(p)}" for p in points[1:])
        return " ".join(parts)

    @staticmethod
    def reduce_points(points: Sequence[Point], min_distance: float = MIN_POINT_DISTANCE) -> List[Point]:
        """
        Drop every point closer than _min_distance_ to the previously kept point.
        The first and the last point are always kept.
        """
        if len(points) < 2:
            return list(points)
        kept = [points[0]]
        for point in points[1:-1]:
            last = kept[-1]
            if GeomMath.distance(last[0], last[1], point[0], point[1]) >= min_distance:
                kept.append(point)
        kept.append(points[-1])
        return kept

    @staticmethod
    def linear_reduced(points: Sequence[Point], min_distance: float = MIN_POINT_DISTANCE) -> str:
        """Linear strategy on the points left by reduce_points()."""
        return SmoothingStrategies.linear(SmoothingStrategies.reduce_points(points, min_distance))

    @staticmethod
    def quadratic_bezier(points: Sequence[Point], step: int = BASE_STEP) -> str:
        """
        Quadratic Bezier fit skipping _step_ points per curve.

        Every step-th point becomes the control point of a Q curve ending halfway
        between its neighbours (step points back and forth); a final L reaches
        the last point.

        Args:
            points: the stroke, at least one point for a non-empty result
            step: distance (in points) between consecutive control points, >= 1

        Returns:
            str: the path string; "M first L last" for fewer than 3 points
        """
        n = len(points)
        if n == 0:
            return ""
        if n < 3:
            return f"M {_fmt(points[0])} L {_fmt(points[-1])}"
        step = max(1, step)
        parts = [f"M {_fmt(points[0])}"]
        for i in range(step, n - step, step):
            before = points[i - step]
            after = points[min(i + step, n - 1)]
            mid = ((before[0] + after[0]) / 2, (before[1] + after[1]) / 2)
            parts.append(f"Q {_fmt(points[i])} {_fmt(mid)}")
        parts.append(f"L {_fmt(points[-1])}")
        return " ".join(parts)

    @staticmethod
    def catmull_rom(points: Sequence[Point]) -> str:
        """
        Catmull-Rom spline along _points_ as cubic Bezier curves.

        For i in [1, n-2] a C curve runs to p[i+1] with its controls taken from the
        neighbours p[i-1] and p[i+2]; past the last point p[n-1] stands in for p[i+2].
        The curves therefore end at p2 ... p[n-1], p1 only shapes the first curve.
        Fewer than 4 points fall back to linear().
        """
        n = len(points)
        if n < 4:
            return SmoothingStrategies.linear(points)
        parts = [f"M {_fmt(points[0])}"]
        for i in range(1, n - 1):
            p0 = points[i - 1]
            p3 = points[min(i + 2, n - 1)]
            (c1, c2) = BezierCurve.catmull_rom_control_points(p0, points[i], points[i + 1], p3)
            parts.append(f"C {_fmt(c1)} {_fmt(c2)} {_fmt(points[i + 1])}")
        return " ".join(parts)

    @staticmethod
    def rdp(points: Sequence[Point], epsilon: float = RDP_EPSILON) -> List[Point]:
        """
        Ramer-Douglas-Peucker polyline simplification.

        The point farthest from the chord of a range is kept if its distance exceeds
        _epsilon_ and both halves are processed in turn, otherwise the range collapses
        to its end points. Ranges are processed from an explicit stack.

        Args:
            points: the polyline
            epsilon: tolerance; distances are measured to the infinite chord line,
                or to the start point if the chord has zero length

        Returns:
            List[Tuple[float, float]]: the kept points in their original order
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        n = len(pts)
        if n < 3:
            return [(float(x), float(y)) for (x, y) in pts]

        keep = np.zeros(n, dtype=bool)
        keep[0] = True
        keep[-1] = True
        stack = [(0, n - 1)]
        while stack:
            (first, last) = stack.pop()
            if last <= first + 1:
                continue
            dists = GeomMath.perpendicular_distances(pts[first + 1 : last], tuple(pts[first]), tuple(pts[last]))
            index = int(np.argmax(dists))
            if dists[index] > epsilon:
                split = first + 1 + index
                keep[split] = True
                stack.append((split, last))
                stack.append((first, split))
        return [(float(x), float(y)) for (x, y) in pts[keep]]

    @staticmethod
    def simplified_bezier(points: Sequence[Point], epsilon: float = RDP_EPSILON) -> str:
        """RDP followed by a quadratic fit through every remaining point."""
        return SmoothingStrategies.quadratic_bezier(SmoothingStrategies.rdp(points, epsilon), 1)

    @staticmethod
    def simplified_cubic_bezier(points: Sequence[Point], epsilon: float = RDP_EPSILON) -> str:
        """RDP followed by a Catmull-Rom cubic fit."""
        return SmoothingStrategies.catmull_rom(SmoothingStrategies.rdp(points, epsilon))

    @staticmethod
    def average_turn_angle(points: Sequence[Point]) -> float:
        """
        Average change of direction (radians) along _points_.

        Corners with a zero-length leg contribute nothing but still count; 0.0 for
        fewer than 3 points.
        """
        if len(points) < 3:
            return 0.0
        total = 0.0
        for i in range(1, len(points) - 1):
            angle = GeomMath.turn_angle(points[i - 1], points[i], points[i + 1])
            if angle is not None:
                total += angle
        return total / (len(points) - 2)

    @staticmethod
    def compute_adaptive_step(points: Sequence[Point], base_step: int = BASE_STEP, max_step: int = MAX_STEP) -> int:
        """
        Step for quadratic_bezier() derived from how curvy the stroke is.

        Very straight strokes get _max_step_, straightish ones half of it (at least
        _base_step_) and curvy ones _base_step_.
        """
        if len(points) < 3:
            return base_step
        avg_angle = SmoothingStrategies.average_turn_angle(points)
        if avg_angle < STRAIGHT_ANGLE:
            return max_step
        if avg_angle < STRAIGHTISH_ANGLE:
            return max(base_step, max_step // 2)
        return base_step

    @staticmethod
    def build_path(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        points: Sequence[Point],
        strategy: SmoothingType,
        base_step: int = BASE_STEP,
        max_step: int = MAX_STEP,
        epsilon: float = RDP_EPSILON,
        min_distance: float = MIN_POINT_DISTANCE,
    ) -> str:
        """
        Build a path string from _points_ with the given _strategy_.

        Args:
            points: the stroke in drawing order
            strategy: the smoothing strategy
            base_step, max_step: range of the adaptive step of QUADRATIC_BEZIER
            epsilon: RDP tolerance of the SIMPLIFIED_* strategies
            min_distance: point distance of LINEAR_REDUCED

        Returns:
            str: the new path string (unvalidated)
        """
        if strategy == SmoothingType.LINEAR:
            return SmoothingStrategies.linear(points)
        if strategy == SmoothingType.LINEAR_REDUCED:
            return SmoothingStrategies.linear_reduced(points, min_distance)
        if strategy == SmoothingType.CATMULL_ROM:
            return SmoothingStrategies.catmull_rom(points)
        if strategy == SmoothingType.SIMPLIFIED_BEZIER:
            return SmoothingStrategies.simplified_bezier(points, epsilon)
        if strategy == SmoothingType.SIMPLIFIED_CUBIC_BEZIER:
            return SmoothingStrategies.simplified_cubic_bezier(points, epsilon)
        step = SmoothingStrategies.compute_adaptive_step(points, base_step, max_step)
        return SmoothingStrategies.quadratic_bezier(points, step)


###############################################################################
# PathSmoother
###############################################################################


class PathSmoother:
    """Applies the configured smoothing strategy and guards against unusable results."""

    def __init__(self, settings: Optional[AdSettings] = None):
        self._settings = settings if settings is not None else AdSettings()

    @property
    def settings(self) -> AdSettings:
        """The settings in use."""
        return self._settings

    @staticmethod
    def is_valid_result(path_string: str) -> bool:
        """A re-fitted path is usable if it starts with "M " and draws at least one segment."""
        return bool(path_string) and path_string.startswith("M ") and len(path_string) > 10

    def smooth_stroke(self, points: Sequence[Point]) -> str:
        """
        Build a path string for _points_ with the configured strategy.

        With extreme_auto_smoothing enabled, a stroke that is very straight on average
        becomes a single line from its first to its last point.
        """
        settings = self._settings
        if (
            settings.extreme_auto_smoothing
            and len(points) >= 3
            and SmoothingStrategies.average_turn_angle(points) < STRAIGHT_ANGLE
        ):
            return SmoothingStrategies.linear([points[0], points[-1]])
        return SmoothingStrategies.build_path(
            points,
            settings.smoothing_strategy,
            settings.base_step,
            settings.max_step,
            settings.rdp_epsilon,
            settings.min_distance,
        )

    def simplify(self, path_string: str) -> str:
        """
        Re-fit the endpoints of _path_string_.

        Returns:
            str: the new path string, or _path_string_ itself if the result is not valid
        """
        result = self.smooth_stroke(PathData.to_points(path_string))
        if not self.is_valid_result(result):
            logger.warning("%s produced an invalid path string", self._settings.smoothing_strategy.name)
            return path_string
        return result

    def simplify_item(self, item: SvgPathItem, cache: Optional[ItemLocationCache] = None) -> bool:
        """
        Re-fit the path of _item_ in place.

        On success the item's bounds are refreshed (by assigning the new path string)
        and the item is re-bucketed in _cache_.

        Returns:
            bool: True if the item was changed
        """
        result = self.smooth_stroke(PathData.to_points(item.d))
        if not self.is_valid_result(result):
            logger.warning(
                "%s produced an invalid path string for item %s", self._settings.smoothing_strategy.name, item.id
            )
            return False
        item.d = result
        if cache is not None:
            cache.add_or_update(item)
        return True

    def simplify_items(self, items: Iterable[object], cache: Optional[ItemLocationCache] = None) -> int:
        """Re-fit all path items among _items_ (other items are skipped); returns the number changed."""
        return sum(1 for item in items if isinstance(item, SvgPathItem) and self.simplify_item(item, cache))
