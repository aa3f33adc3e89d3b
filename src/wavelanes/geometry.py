# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Arena geometry -- value types and 2D vector math for lane routing.

Coordinate convention:
    The arena is a rectangle centered on the world origin.  ``Point2D``
    maps to world (X, Z); ``Point3`` adds the vertical axis as ``y``.
    All arithmetic is plain floats; nothing here allocates beyond tuples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

# Direction vectors shorter than this are treated as "no direction"
DIRECTION_EPSILON = 1e-4

# Segments shorter than this (squared) collapse to their start point
_SEGMENT_EPSILON_SQ = 1e-4


class Point2D(NamedTuple):
    """A point or direction on the arena floor (world X/Z)."""

    x: float
    y: float


class Point3(NamedTuple):
    """A world-space point with height (y is up, z is the floor's second axis)."""

    x: float
    y: float
    z: float


@dataclass(frozen=True)
class ArenaBounds:
    """Symmetric rectangular play area centered at the world origin."""

    half_width: float
    half_height: float

    def corners(self) -> list[Point2D]:
        """Return the four corners in a fixed order (SW, SE, NE, NW)."""
        w, h = self.half_width, self.half_height
        return [
            Point2D(-w, -h),
            Point2D(w, -h),
            Point2D(w, h),
            Point2D(-w, h),
        ]

    def contains(self, p: Sequence[float], tolerance: float = 1e-9) -> bool:
        return (
            -self.half_width - tolerance <= p[0] <= self.half_width + tolerance
            and -self.half_height - tolerance <= p[1] <= self.half_height + tolerance
        )

    def clamp_point(self, x: float, y: float) -> Point2D:
        """Clamp (x, y) into the arena.  Non-finite values snap to the low edge."""
        return Point2D(
            clamp(x, -self.half_width, self.half_width),
            clamp(y, -self.half_height, self.half_height),
        )


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi].  NaN/inf inputs return lo."""
    if not math.isfinite(value):
        return lo
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two 2D points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1]


def unit_vector(
    origin: Sequence[float],
    target: Sequence[float],
) -> tuple[Point2D, float] | None:
    """Return (unit direction, length) from origin to target.

    Returns None when the two points coincide (length <= DIRECTION_EPSILON).
    """
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    length = math.hypot(dx, dy)
    if length <= DIRECTION_EPSILON:
        return None
    return Point2D(dx / length, dy / length), length


def ray_exit_distance(
    origin: Sequence[float],
    direction: Sequence[float],
    min_xy: tuple[float, float],
    max_xy: tuple[float, float],
) -> float:
    """Distance along a ray before it leaves an axis-aligned box.

    Standard slab test: for each axis with a non-zero direction component,
    ``t = (plane - origin) / direction`` where the plane is the box face
    the ray is heading toward.  The smallest positive ``t`` wins.

    Returns 0.0 when no axis yields a positive ``t`` (origin already past
    the faces it is heading toward, or zero direction).
    """
    best = math.inf
    for axis in (0, 1):
        d = direction[axis]
        if abs(d) < 1e-12:
            continue
        plane = max_xy[axis] if d > 0 else min_xy[axis]
        t = (plane - origin[axis]) / d
        if t > 0.0 and t < best:
            best = t
    return best if math.isfinite(best) else 0.0


def point_to_segment_distance(
    p: Sequence[float],
    a: Sequence[float],
    b: Sequence[float],
) -> float:
    """Shortest distance from p to the segment a-b."""
    abx = b[0] - a[0]
    aby = b[1] - a[1]
    ab_len_sq = abx * abx + aby * aby
    if ab_len_sq <= _SEGMENT_EPSILON_SQ:
        return distance(p, a)

    apx = p[0] - a[0]
    apy = p[1] - a[1]
    t = max(0.0, min(1.0, (apx * abx + apy * aby) / ab_len_sq))
    cx = a[0] + abx * t
    cy = a[1] + aby * t
    return math.hypot(p[0] - cx, p[1] - cy)


def point_to_polyline_distance(
    p: Sequence[float],
    polyline: Sequence[Sequence[float]],
) -> float:
    """Minimum distance from p to any segment of the polyline.

    An empty polyline is infinitely far away; a single vertex is a point.
    """
    if len(polyline) == 0:
        return math.inf
    if len(polyline) == 1:
        return distance(p, polyline[0])

    best = math.inf
    for i in range(len(polyline) - 1):
        d = point_to_segment_distance(p, polyline[i], polyline[i + 1])
        if d < best:
            best = d
    return best
