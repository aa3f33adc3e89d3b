# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Spawn portal placement -- three equidistant entry points on the arena rim.

Architecture
------------
Portals are derived from the arena corners as seen from the defended base:

  1. The corner nearest the base is the "safe" corner and is discarded,
     so no portal ever sits next to the player's structure.
  2. A ray is cast from the base toward each of the remaining three
     corners and clipped against the arena shrunk by ``edge_margin``
     (slab intersection, minimum positive t across the two axes).
  3. The shortest of the three clipped distances becomes the *shared*
     travel distance, scaled by ``distance_factor`` (0.3-1.0), and every
     portal is placed at ``base + direction * shared``.

Sharing one distance keeps the three entry points equidistant from the
base no matter where the base sits, so an off-center base still gets a
fair three-way spread.

Fallbacks (never raised, logged at DEBUG):
  - margin too large for the arena  -> use the full rectangle
  - degenerate or non-finite ray     -> return the three raw corners
"""

from __future__ import annotations

import math
from typing import Sequence

from loguru import logger

from .geometry import ArenaBounds, Point2D, clamp, distance, ray_exit_distance, unit_vector

DEFAULT_EDGE_MARGIN = 4.0
DEFAULT_DISTANCE_FACTOR = 0.96

MIN_DISTANCE_FACTOR = 0.3
MAX_DISTANCE_FACTOR = 1.0

# Ray travel at or below this is treated as degenerate
_MIN_TRAVEL = 0.01


def edge_position(bounds: ArenaBounds) -> Point2D:
    """Fixed fallback spawn point: the (+X, +Y) arena corner."""
    return Point2D(bounds.half_width, bounds.half_height)


def usable_rect(
    bounds: ArenaBounds,
    edge_margin: float,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Return (min_xy, max_xy) of the arena shrunk by edge_margin.

    Falls back to the full rectangle when the margin would invert or
    collapse either axis.
    """
    margin = edge_margin if math.isfinite(edge_margin) and edge_margin > 0.0 else 0.0
    w, h = bounds.half_width, bounds.half_height
    min_x, max_x = -w + margin, w - margin
    min_y, max_y = -h + margin, h - margin
    if min_x >= max_x or min_y >= max_y:
        logger.debug(
            f"Edge margin {edge_margin} too large for arena {w}x{h}, using full rectangle"
        )
        return (-w, -h), (w, h)
    return (min_x, min_y), (max_x, max_y)


def nearest_corner_index(base: Sequence[float], corners: Sequence[Point2D]) -> int:
    """Index of the corner closest to base (first wins on ties)."""
    best_idx = 0
    best_dist = math.inf
    for idx, corner in enumerate(corners):
        d = distance(base, corner)
        if d < best_dist:
            best_dist = d
            best_idx = idx
    return best_idx


def resolve_portals(
    base: Sequence[float],
    bounds: ArenaBounds,
    edge_margin: float = DEFAULT_EDGE_MARGIN,
    distance_factor: float = DEFAULT_DISTANCE_FACTOR,
) -> list[Point2D]:
    """Compute the three spawn portals for a base position.

    Args:
        base: (x, y) position of the defended structure.
        bounds: Arena half extents.
        edge_margin: Distance to keep portals away from each wall.
        distance_factor: Fraction of the shared travel distance to use,
            clamped to [0.3, 1.0].

    Returns:
        Three portal points, all at the same distance from ``base`` unless
        the raw-corner fallback was taken.
    """
    corners = bounds.corners()
    safe_idx = nearest_corner_index(base, corners)
    far_corners = [c for i, c in enumerate(corners) if i != safe_idx]

    factor = clamp(distance_factor, MIN_DISTANCE_FACTOR, MAX_DISTANCE_FACTOR)
    min_xy, max_xy = usable_rect(bounds, edge_margin)

    directions: list[Point2D] = []
    travel: list[float] = []
    for corner in far_corners:
        resolved = unit_vector(base, corner)
        if resolved is None:
            logger.debug(f"Base {tuple(base)} sits on corner {tuple(corner)}, using raw corners")
            return list(far_corners)
        direction, _ = resolved
        t = ray_exit_distance(base, direction, min_xy, max_xy)
        if not math.isfinite(t) or t <= _MIN_TRAVEL:
            logger.debug(
                f"Degenerate portal ray from {tuple(base)} toward {tuple(corner)} (t={t}), "
                "using raw corners"
            )
            return list(far_corners)
        directions.append(direction)
        travel.append(t)

    if not directions:
        return list(far_corners)

    shared = min(travel) * factor
    return [
        Point2D(base[0] + d.x * shared, base[1] + d.y * shared)
        for d in directions
    ]
