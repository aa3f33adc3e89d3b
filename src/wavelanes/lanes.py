# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Lane vocabulary -- the three attack routes and their reference paths.

Lanes are fixed for the lifetime of the game:

  top:     hugs the southern wall heading east       (canonical +X)
  mid:     cuts diagonally across the arena          (canonical +X+Y)
  bottom:  hugs the western wall heading north       (canonical +Y)

The reference polylines are authored in normalized arena coordinates
(0..1 on both axes, z flipped) and scaled to world space per arena size.
They are only used to classify static world points (building pads), never
for spawning.
"""

from __future__ import annotations

import math
from enum import Enum

from .geometry import ArenaBounds, Point2D


class RouteLane(str, Enum):
    """One of the three named attack routes."""
    TOP = "top"
    MID = "mid"
    BOTTOM = "bottom"


class ForecastLane(str, Enum):
    """Screen-relative lane naming used by wave forecasts and HUD callouts."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# Order in which lanes open as the encounter advances
ROUTE_LANE_SEQUENCE: tuple[RouteLane, ...] = (RouteLane.MID, RouteLane.TOP, RouteLane.BOTTOM)

CANONICAL_DIRECTIONS: dict[RouteLane, Point2D] = {
    RouteLane.TOP: Point2D(1.0, 0.0),
    RouteLane.MID: Point2D(math.sqrt(0.5), math.sqrt(0.5)),
    RouteLane.BOTTOM: Point2D(0.0, 1.0),
}

# Normalized (nx, nz) vertices per lane
_LANE_PATHS_NORMALIZED: dict[RouteLane, tuple[tuple[float, float], ...]] = {
    RouteLane.TOP: ((0.05, 0.95), (0.06, 0.92), (0.95, 0.92)),
    RouteLane.MID: ((0.05, 0.95), (0.35, 0.65), (0.5, 0.5), (0.65, 0.35), (0.95, 0.05)),
    RouteLane.BOTTOM: ((0.05, 0.95), (0.08, 0.94), (0.08, 0.05)),
}

_FORECAST_BY_LANE: dict[RouteLane, ForecastLane] = {
    RouteLane.TOP: ForecastLane.LEFT,
    RouteLane.MID: ForecastLane.CENTER,
    RouteLane.BOTTOM: ForecastLane.RIGHT,
}


def lane_to_forecast_lane(lane: RouteLane) -> ForecastLane:
    """Map a route lane to its forecast/HUD side."""
    return _FORECAST_BY_LANE.get(lane, ForecastLane.CENTER)


def normalized_to_world(nx: float, nz: float, bounds: ArenaBounds) -> Point2D:
    """Convert normalized arena coordinates to world (x, y).

    Half extents below 1 are floored to 1 so tiny arenas still produce
    non-degenerate paths.
    """
    half_w = max(1.0, bounds.half_width)
    half_h = max(1.0, bounds.half_height)
    return Point2D(
        nx * (half_w * 2.0) - half_w,
        (1.0 - nz) * (half_h * 2.0) - half_h,
    )


def lane_polylines(bounds: ArenaBounds) -> dict[RouteLane, tuple[Point2D, ...]]:
    """Return the world-space reference polyline for every lane."""
    return {
        lane: tuple(normalized_to_world(nx, nz, bounds) for nx, nz in path)
        for lane, path in _LANE_PATHS_NORMALIZED.items()
    }
