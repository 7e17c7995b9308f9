"""SVG path string with cached geometry: bounds, point extraction and flattening."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property, lru_cache
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ade.common import ARC_SEGMENTS, CURVE_SAMPLES, Point, SegmentKind
from ade.geom import AdBox, GeomMath
from ade.pen import PathSegment, PenStateMachine
from ade.svgpath import AdSvgPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """A point of a path as written in the path string."""

    x: float
    y: float
    is_control: bool = False

    @property
    def point(self) -> Point:
        """The node as (x, y)."""
        return (self.x, self.y)


###############################################################################
# AdPath
###############################################################################


class AdPath:
    """SVG path string together with its lazily parsed primitives.

    The string is parsed once; segments, bounds and flattened polylines are cached
    on the instance. A changed path string means a new AdPath, so nothing has to be
    invalidated explicitly. Parsing never raises: malformed parts are skipped.

    Attributes:
        _path_string: the SVG path string
        _bounding_box: Cached bounding box for performance
        _flattened: Cached default flattening for performance
    """

    def __init__(self, path_string: Optional[str] = None):
        """
        Initialize an AdPath from a SVG path string.

        Args:
            path_string: a SVG path string; None is treated as empty
        """
        self._path_string: str = path_string or ""
        self._bounding_box: Optional[AdBox] = None
        self._flattened: Optional[Tuple[NDArray[np.float64], ...]] = None

    @staticmethod
    @lru_cache(maxsize=512)
    def of(path_string: str) -> AdPath:
        """Return a shared, cached AdPath for _path_string_."""
        return AdPath(path_string)

    @property
    def path_string(self) -> str:
        """The SVG path string."""
        return self._path_string

    @cached_property
    def segments(self) -> Tuple[PathSegment, ...]:
        """All primitives of the path in drawing order."""
        return tuple(PenStateMachine.parse(self._path_string))

    @property
    def is_empty(self) -> bool:
        """True if nothing of the path string could be parsed."""
        return not self.segments

    def bounding_box(self, include_arc_samples: bool = False) -> AdBox:
        """
        Returns the conservative bounding box of the path.

        Lines, arcs and closepaths contribute their end point, Bezier curves
        contribute all control points as well. The box therefore may be larger
        than the drawn curve but never smaller, except for arcs bulging beyond
        their endpoints: use _include_arc_samples_ to fold in the flattened arcs.

        Args:
            include_arc_samples: Also include the sampled points of arcs

        Returns:
            AdBox: the bounding box; the zero box for an empty path
        """
        if not include_arc_samples and self._bounding_box is not None:
            return self._bounding_box

        points: List[Point] = []
        for segment in self.segments:
            points.extend(segment.bound_points())
            if include_arc_samples and segment.kind == SegmentKind.ARC:
                points.extend(tuple(pt) for pt in segment.flatten())

        box = AdBox.from_points(points)
        if not include_arc_samples:
            self._bounding_box = box
            logger.debug("bounds of %r: %s", self._path_string, box)
        return box

    def flattened(
        self, curve_samples: int = CURVE_SAMPLES, arc_segments: int = ARC_SEGMENTS
    ) -> Tuple[NDArray[np.float64], ...]:
        """Return one polyline per drawing primitive (moves excluded).

        Args:
            curve_samples: Number of straight pieces per cubic/quadratic curve
            arc_segments: Number of straight pieces per arc

        Returns:
            Tuple[NDArray[np.float64], ...]: read-only polylines of shape (n, 2) in drawing order
        """
        use_cache = curve_samples == CURVE_SAMPLES and arc_segments == ARC_SEGMENTS
        if use_cache and self._flattened is not None:
            return self._flattened

        polylines = tuple(
            segment.flatten(curve_samples, arc_segments)
            for segment in self.segments
            if segment.kind != SegmentKind.MOVE
        )
        for polyline in polylines:
            polyline.flags.writeable = False
        if use_cache:
            self._flattened = polylines
        return polylines

    def sampled_points(self) -> NDArray[np.float64]:
        """All points the hit-tester samples, including the moveto points."""
        parts = [segment.flatten() for segment in self.segments]
        if not parts:
            return np.empty((0, 2), dtype=np.float64)
        return np.concatenate(parts)

    def nodes(self) -> List[Node]:
        """
        Return all points written in the path string (absolute), marking control points.

        Reflected control points of S/s and T/t are not part of the string and are
        therefore not returned. Closepaths contribute no node.
        """
        result: List[Node] = []
        for segment in self.segments:
            if segment.kind == SegmentKind.CLOSE:
                continue
            cmd = segment.command.upper()
            if cmd == "C":
                result.extend(Node(x, y, True) for (x, y) in segment.controls)
            elif cmd in "SQ":
                (x, y) = segment.controls[-1]
                result.append(Node(x, y, True))
            result.append(Node(segment.end[0], segment.end[1], False))
        return result

    def points(self) -> List[Point]:
        """All points written in the path string (endpoints and control points), in order."""
        return [node.point for node in self.nodes()]

    def endpoints(self) -> List[Point]:
        """Endpoints of all M, L, Q and C commands (either case) in drawing order.

        Control points are not included. This is the input for re-fitting a stroke.
        """
        return [segment.end for segment in self.segments if segment.command.upper() in "MLQC"]

    def estimated_length(self) -> float:
        """Sum of straight distances between consecutive endpoints() (curves are under-estimated)."""
        return GeomMath.polyline_length(self.endpoints())

    def move_by(self, dx: float, dy: float) -> AdPath:
        """Return a new AdPath translated by (dx, dy), see AdSvgPath.move_path_by()."""
        return AdPath(AdSvgPath.move_path_by(self._path_string, dx, dy))

    def __str__(self):
        """Returns the path string."""
        return self._path_string

    def __repr__(self):
        return f"AdPath({self._path_string!r})"


###############################################################################
# PathData
###############################################################################


class PathData:
    """Functional access to path geometry keyed by the path string."""

    @staticmethod
    def get_bounds(path_string: str) -> Tuple[float, float, float, float]:
        """Bounds of _path_string_ as (min_x, min_y, width, height)."""
        return AdPath.of(path_string).bounding_box().rect

    @staticmethod
    def to_points(path_string: str) -> List[Point]:
        """Endpoints of the M/L/Q/C commands of _path_string_."""
        return AdPath.of(path_string).endpoints()

    @staticmethod
    def get_points(path_string: str) -> List[Point]:
        """All endpoints and control points of _path_string_."""
        return AdPath.of(path_string).points()

    @staticmethod
    def get_path_nodes_with_type(path_string: str) -> List[Node]:
        """All nodes of _path_string_ with their control point flag."""
        return AdPath.of(path_string).nodes()

    @staticmethod
    def estimated_length(path_string: str) -> float:
        """Estimated length of _path_string_, see AdPath.estimated_length()."""
        return AdPath.of(path_string).estimated_length()
