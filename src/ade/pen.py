"""Pen state machine: turns SVG path tokens into absolute geometric primitives.

Every consumer (bounds, hit-testing, point extraction) walks the same stream of
PathSegment objects, so the rules for relative coordinates, implicit linetos,
smooth-curve reflection and closepath live in exactly one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from ade.bezier import BezierCurve
from ade.common import ARC_SEGMENTS, CURVE_SAMPLES, CmdFamily, Point, SegmentKind
from ade.geom import GeomMath
from ade.svgpath import COMMAND_INFO, AdSvgPath, SvgToken

###############################################################################
# PenState
###############################################################################


@dataclass
class PenState:
    """Transient state of one traversal of a path.

    Attributes:
        current: Current point (absolute)
        subpath_start: First point of the current subpath (absolute)
        reflected_control: Last control point of the previous curve segment
        last_family: Family of the previous command; S/s reflects only after CUBIC,
            T/t only after QUADRATIC
    """

    current: Point = (0.0, 0.0)
    subpath_start: Point = (0.0, 0.0)
    reflected_control: Point = (0.0, 0.0)
    last_family: CmdFamily = CmdFamily.OTHER

    def smooth_control(self, family: CmdFamily) -> Point:
        """First control point of a smooth curve of the given _family_."""
        if self.last_family == family:
            return BezierCurve.reflect_control_point(self.reflected_control, self.current)
        return self.current


###############################################################################
# PathSegment
###############################################################################


@dataclass(frozen=True)
class ArcParams:
    """Arc parameters as given in the path string (radii and rotation untouched)."""

    rx: float
    ry: float
    angle: float
    large_arc: bool
    sweep: bool


@dataclass(frozen=True)
class PathSegment:
    """One primitive of a path with absolute coordinates.

    Attributes:
        kind: Kind of the primitive
        command: Command letter the primitive originates from (e.g. "c", "M")
        start: Current point before the primitive
        end: Current point after the primitive
        controls: Control points of Bezier curves (absolute)
        arc: Arc parameters for ARC segments
    """

    kind: SegmentKind
    command: str
    start: Point
    end: Point
    controls: Tuple[Point, ...] = ()
    arc: Optional[ArcParams] = None

    @property
    def is_curve(self) -> bool:
        """True for Bezier curves and arcs."""
        return self.kind in (SegmentKind.CUBIC, SegmentKind.QUADRATIC, SegmentKind.ARC)

    def bound_points(self) -> Tuple[Point, ...]:
        """Points which conservatively bound the primitive.

        Curves contribute start, all control points and end (the control polygon's
        convex hull contains the curve). Everything else contributes its end point.
        """
        if self.kind in (SegmentKind.CUBIC, SegmentKind.QUADRATIC):
            return (self.start,) + self.controls + (self.end,)
        return (self.end,)

    def flatten(self, curve_samples: int = CURVE_SAMPLES, arc_segments: int = ARC_SEGMENTS) -> NDArray[np.float64]:
        """Approximate the primitive by a polyline from start to end.

        Args:
            curve_samples: Number of straight pieces for cubic and quadratic curves
            arc_segments: Number of straight pieces for elliptical arcs

        Returns:
            NDArray[np.float64]: shape (n, 2); a MOVE yields its single end point
        """
        if self.kind == SegmentKind.MOVE:
            return np.array([self.end], dtype=np.float64)
        if self.kind == SegmentKind.CUBIC:
            return BezierCurve.polygonize_cubic_curve((self.start,) + self.controls + (self.end,), curve_samples)
        if self.kind == SegmentKind.QUADRATIC:
            return BezierCurve.polygonize_quadratic_curve((self.start,) + self.controls + (self.end,), curve_samples)
        if self.kind == SegmentKind.ARC and self.arc is not None:
            return GeomMath.sample_arc(
                self.start,
                self.arc.rx,
                self.arc.ry,
                self.arc.angle,
                self.arc.large_arc,
                self.arc.sweep,
                self.end,
                arc_segments,
            )
        return np.array([self.start, self.end], dtype=np.float64)


###############################################################################
# PenStateMachine
###############################################################################


class PenStateMachine:
    """Interpreter for the SVG path mini-language.

    Commands with too few arguments for a single repetition and unknown commands
    are skipped without touching the pen state.
    """

    @staticmethod
    def parse(path_string: str) -> List[PathSegment]:
        """Tokenize _path_string_ and return all of its primitives."""
        return list(PenStateMachine.segments(AdSvgPath.tokenize(path_string)))

    @staticmethod
    def segments(tokens: Iterable[SvgToken]) -> Iterator[PathSegment]:
        """Yield the primitives described by _tokens_ in drawing order."""
        state = PenState()
        for command_letter, args in tokens:
            cmd = command_letter.upper()
            if cmd not in COMMAND_INFO:
                continue

            if cmd == "Z":
                yield PathSegment(SegmentKind.CLOSE, command_letter, state.current, state.subpath_start)
                state.current = state.subpath_start
                state.last_family = CmdFamily.OTHER
                continue

            per_repeat = COMMAND_INFO[cmd].args_per_repeat
            for rep in range(AdSvgPath.repetitions(command_letter, args)):
                rep_args = args[rep * per_repeat : (rep + 1) * per_repeat]
                yield PenStateMachine._step(state, command_letter, rep, rep_args)

    @staticmethod
    def _step(state: PenState, command_letter: str, rep: int, args: List[float]) -> PathSegment:
        # pylint: disable=too-many-locals
        """Process one repetition of a command and advance _state_."""
        cmd = command_letter.upper()
        start = state.current
        (ox, oy) = start if command_letter.islower() else (0.0, 0.0)

        def absolute(i: int) -> Point:
            return (args[i] + ox, args[i + 1] + oy)

        if cmd == "M":
            end = absolute(0)
            state.current = end
            state.last_family = CmdFamily.OTHER
            if rep == 0:
                state.subpath_start = end
                return PathSegment(SegmentKind.MOVE, command_letter, start, end)
            # extra pairs of a moveto are implicit linetos
            return PathSegment(SegmentKind.LINE, command_letter, start, end)

        if cmd in "LHV":
            if cmd == "L":
                end = absolute(0)
            elif cmd == "H":
                end = (args[0] + ox, start[1])
            else:
                end = (start[0], args[0] + oy)
            state.current = end
            state.last_family = CmdFamily.OTHER
            return PathSegment(SegmentKind.LINE, command_letter, start, end)

        if cmd in "CS":
            if cmd == "C":
                control1 = absolute(0)
                control2 = absolute(2)
                end = absolute(4)
            else:
                control1 = state.smooth_control(CmdFamily.CUBIC)
                control2 = absolute(0)
                end = absolute(2)
            state.current = end
            state.reflected_control = control2
            state.last_family = CmdFamily.CUBIC
            return PathSegment(SegmentKind.CUBIC, command_letter, start, end, (control1, control2))

        if cmd in "QT":
            if cmd == "Q":
                control = absolute(0)
                end = absolute(2)
            else:
                control = state.smooth_control(CmdFamily.QUADRATIC)
                end = absolute(0)
            state.current = end
            state.reflected_control = control
            state.last_family = CmdFamily.QUADRATIC
            return PathSegment(SegmentKind.QUADRATIC, command_letter, start, end, (control,))

        # "A": only the endpoint is relative, radii/rotation/flags are not
        (rx, ry, angle, large_arc, sweep) = args[:5]
        end = absolute(5)
        state.current = end
        state.last_family = CmdFamily.OTHER
        arc = ArcParams(rx, ry, angle, bool(large_arc), bool(sweep))
        return PathSegment(SegmentKind.ARC, command_letter, start, end, arc=arc)
