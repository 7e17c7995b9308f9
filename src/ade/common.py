"""Central module containing types, enums and constants for SVG path geometry."""

from __future__ import annotations

from enum import Enum, auto
from typing import Literal, Tuple

###############################################################################
# Types
###############################################################################

Point = Tuple[float, float]

SvgPathCmds = Literal[  # Type-Definition for SvgPath-Commands; uppercase = absolute, lowercase = relative
    # MoveTo (2) - start a new subpath and move the current point to (x,y)
    "M",
    "m",
    # LineTo (2) - draw a straight line from the current point to (x,y)
    "L",
    "l",
    # Horizontal LineTo (1) - draw a horizontal line to the given x coordinate
    "H",
    "h",
    # Vertical LineTo (1) - draw a vertical line to the given y coordinate
    "V",
    "v",
    # Cubic Bezier To (6) - two control points and an endpoint (x,y)
    "C",
    "c",
    # Smooth cubic Bezier To (4) - first control point is the reflection of the previous one
    "S",
    "s",
    # Quadratic Bezier To (4) - one control point and an endpoint (x,y)
    "Q",
    "q",
    # Smooth quadratic Bezier To (2) - control point is the reflection of the previous one
    "T",
    "t",
    # Arc (7) - (rx ry x-axis-rotation large-arc-flag sweep-flag x y)
    "A",
    "a",
    # ClosePath (0) - line from the current point back to the subpath start
    "Z",
    "z",
]


###############################################################################
# Enums and Consts
###############################################################################


class CmdFamily(Enum):
    """Command family relevant for control point reflection of S/s and T/t."""

    CUBIC = auto()
    QUADRATIC = auto()
    OTHER = auto()


class SegmentKind(Enum):
    """Kind of primitive produced by the pen state machine."""

    MOVE = auto()
    LINE = auto()
    CUBIC = auto()
    QUADRATIC = auto()
    ARC = auto()
    CLOSE = auto()


class SmoothingType(Enum):
    """Strategies for re-fitting freehand ink into a path string."""

    LINEAR = auto()
    LINEAR_REDUCED = auto()
    QUADRATIC_BEZIER = auto()
    CATMULL_ROM = auto()
    SIMPLIFIED_BEZIER = auto()
    SIMPLIFIED_CUBIC_BEZIER = auto()


# Hit-test distance in path-local units
HIT_THRESHOLD: float = 5.0
# Number of samples used to flatten a cubic or quadratic curve
CURVE_SAMPLES: int = 10
# Number of straight segments used to flatten an elliptical arc
ARC_SEGMENTS: int = 20
# Ramer-Douglas-Peucker tolerance
RDP_EPSILON: float = 2.0
# Minimum distance between kept points of the linear-reduced strategy
MIN_POINT_DISTANCE: float = 4.0
# Adaptive smoothing step range
BASE_STEP: int = 2
MAX_STEP: int = 20
# Average turn angles (radians) separating very straight / straightish / curvy strokes
STRAIGHT_ANGLE: float = 0.1
STRAIGHTISH_ANGLE: float = 0.2
