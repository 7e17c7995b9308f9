"""Bezier curve evaluation and control point construction for path flattening and stroke fitting."""

from __future__ import annotations

import math
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ade.common import Point

ControlPoints = Union[Sequence[Tuple[float, float]], NDArray[np.float64]]


class BezierCurve:
    """Quadratic and cubic Bezier helpers.

    Curves are evaluated at evenly spaced parameters as a Bernstein basis matrix
    times the control points, which yields all samples in one product.
    """

    @staticmethod
    def _bernstein_basis(degree: int, steps: int) -> NDArray[np.float64]:
        """Basis matrix of shape (steps+1, degree+1) for t = 0, 1/steps, ..., 1."""
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)[:, None]
        k = np.arange(degree + 1)
        binomial = np.array([math.comb(degree, i) for i in range(degree + 1)], dtype=np.float64)
        return binomial * t**k * (1.0 - t) ** (degree - k)

    @classmethod
    def polygonize_cubic_curve(cls, points: ControlPoints, steps: int) -> NDArray[np.float64]:
        """
        Sample a cubic Bezier curve.

        Args:
            points: start, control1, control2 and end point
            steps: number of straight pieces

        Returns:
            NDArray[np.float64]: shape (steps+1, 2), first row is start, last row is end
        """
        return cls._bernstein_basis(3, steps) @ np.asarray(points, dtype=np.float64).reshape(4, 2)

    @classmethod
    def polygonize_quadratic_curve(cls, points: ControlPoints, steps: int) -> NDArray[np.float64]:
        """
        Sample a quadratic Bezier curve.

        Args:
            points: start, control and end point
            steps: number of straight pieces

        Returns:
            NDArray[np.float64]: shape (steps+1, 2), first row is start, last row is end
        """
        return cls._bernstein_basis(2, steps) @ np.asarray(points, dtype=np.float64).reshape(3, 2)

    @staticmethod
    def reflect_control_point(control: Point, through: Point) -> Point:
        """Point reflection of _control_ through _through_ (used by S/s and T/t)."""
        return (2 * through[0] - control[0], 2 * through[1] - control[1])

    @staticmethod
    def catmull_rom_control_points(p0: Point, p1: Point, p2: Point, p3: Point) -> Tuple[Point, Point]:
        """
        Cubic Bezier control points of the Catmull-Rom segment p1 -> p2.

        c1 = p1 + (p2 - p0) / 6
        c2 = p2 - (p3 - p1) / 6
        """
        c1 = (p1[0] + (p2[0] - p0[0]) / 6.0, p1[1] + (p2[1] - p0[1]) / 6.0)
        c2 = (p2[0] - (p3[0] - p1[0]) / 6.0, p2[1] - (p3[1] - p1[1]) / 6.0)
        return c1, c2
