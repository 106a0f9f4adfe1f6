"""
B-spline to cubic Bezier decomposition.

The control polygon is refined by knot insertion (Boehm's algorithm) until the
domain ends and every interior knot reach a multiplicity equal to the degree.
Each non-empty knot span then owns ``degree + 1`` consecutive control points,
which are exactly the control polygon of a Bezier segment of that degree.

Degree 1 and 2 segments are raised to cubic exactly. Higher degrees cannot be
represented by a single cubic; they are replaced by the cubic that keeps the end
points and end tangents of the original segment.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from ezdxf.math import Vec2, open_uniform_knot_vector

from .errors import GeometryError

logger = logging.getLogger(__name__)

KNOT_TOLERANCE = 1e-10


@dataclass(frozen=True)
class Bezier2:
    start: Vec2
    control1: Vec2
    control2: Vec2
    end: Vec2


class Spline2:
    """A planar, non-rational B-spline."""

    def __init__(self, degree: int, control_points: Sequence, knots: Optional[Sequence[float]] = None):
        if degree < 1:
            raise GeometryError(f"Spline degree must be at least 1, got {degree}")

        points = np.array([(float(p[0]), float(p[1])) for p in control_points], dtype=float).reshape(-1, 2)
        if len(points) < degree + 1:
            raise GeometryError(
                f"A degree {degree} spline needs at least {degree + 1} control points, got {len(points)}"
            )

        if knots is None or len(knots) == 0:
            knots = open_uniform_knot_vector(len(points), degree + 1, normalize=True)
        knots = np.array(knots, dtype=float)
        expected = len(points) + degree + 1
        if len(knots) != expected:
            raise GeometryError(f"Expected {expected} knot values, got {len(knots)}")
        if np.any(np.diff(knots) < 0.0):
            raise GeometryError("Knot values must be non-decreasing")

        self.degree = degree
        self.control_points = points
        self.knots = knots

    @property
    def domain(self):
        return self.knots[self.degree], self.knots[len(self.control_points)]

    def to_beziers(self) -> List[Bezier2]:
        points, knots = self._refined()
        p = self.degree
        start, end = self.domain

        beziers = []
        for k in range(p, len(points)):
            left, right = knots[k], knots[k + 1]
            if right - left <= KNOT_TOLERANCE or left < start - KNOT_TOLERANCE or right > end + KNOT_TOLERANCE:
                continue
            beziers.append(self._to_cubic(points[k - p:k + 1]))
        return beziers

    def _refined(self):
        """Control points and knots after inserting knots up to multiplicity ``degree``."""
        p = self.degree
        points = self.control_points
        knots = self.knots
        start, end = self.domain

        targets = [start]
        for value in knots[p + 1:len(points)]:
            if value - targets[-1] > KNOT_TOLERANCE:
                targets.append(value)
        if end - targets[-1] > KNOT_TOLERANCE:
            targets.append(end)

        for value in targets:
            while _multiplicity(knots, value) < p:
                points, knots = _insert_knot(p, points, knots, value)
        return points, knots

    def _to_cubic(self, polygon: np.ndarray) -> Bezier2:
        p = self.degree
        if p == 1:
            p0, p1 = polygon
            c1 = p0 + (p1 - p0) / 3.0
            c2 = p0 + (p1 - p0) * 2.0 / 3.0
            p3 = p1
        elif p == 2:
            p0, q, p3 = polygon
            c1 = p0 + (q - p0) * 2.0 / 3.0
            c2 = p3 + (q - p3) * 2.0 / 3.0
        elif p == 3:
            p0, c1, c2, p3 = polygon
        else:
            logger.debug(f"Approximating degree {p} Bezier segment with a cubic")
            p0, p3 = polygon[0], polygon[-1]
            c1 = p0 + (polygon[1] - p0) * (p / 3.0)
            c2 = p3 + (polygon[-2] - p3) * (p / 3.0)
        return Bezier2(_vec(p0), _vec(c1), _vec(c2), _vec(p3))


def _vec(point: np.ndarray) -> Vec2:
    return Vec2(float(point[0]), float(point[1]))


def _multiplicity(knots: np.ndarray, value: float) -> int:
    return int(np.count_nonzero(np.abs(knots - value) <= KNOT_TOLERANCE))


def _insert_knot(degree: int, points: np.ndarray, knots: np.ndarray, value: float):
    """Insert ``value`` once (Boehm) and return the new control points and knots."""
    span = int(np.searchsorted(knots, value + KNOT_TOLERANCE, side="right")) - 1
    existing = _multiplicity(knots, value)

    inserted = np.empty((len(points) + 1, 2), dtype=float)
    for i in range(len(points) + 1):
        if i <= span - degree:
            inserted[i] = points[i]
        elif i >= span - existing + 1:
            inserted[i] = points[i - 1]
        else:
            alpha = (value - knots[i]) / (knots[i + degree] - knots[i])
            inserted[i] = (1.0 - alpha) * points[i - 1] + alpha * points[i]

    return inserted, np.insert(knots, span + 1, value)


def spline_to_beziers(degree: int, control_points: Sequence, knots: Sequence[float] = ()) -> List[Bezier2]:
    return Spline2(degree, control_points, knots).to_beziers()
