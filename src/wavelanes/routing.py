# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""LanePortalRouter -- bijective assignment of spawn portals to lanes.

Each lane has a canonical direction (see ``lanes.CANONICAL_DIRECTIONS``).
Lanes are processed in priority order mid, top, bottom; each picks the
still-unassigned portal whose base->portal direction best matches the
lane's canonical direction:

    score = dot(portal_dir, lane_dir) + 1e-4 * distance

The distance term only breaks near-ties.  A picked portal leaves the pool,
so three distinct portals always yield three distinct indices.  With only
three lanes and three portals the greedy pass matches the optimal
assignment.

Degraded mode: with fewer than three portals the pool runs dry and the
remaining lanes pick from the full candidate list again, so lanes share
portals.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from loguru import logger

from .geometry import Point2D, dot, unit_vector
from .lanes import CANONICAL_DIRECTIONS, RouteLane

# Order lanes claim portals in
LANE_ASSIGN_ORDER: tuple[RouteLane, ...] = (RouteLane.MID, RouteLane.TOP, RouteLane.BOTTOM)

# Weight of the distance tie-breaker in the matching score
_DISTANCE_TIE_BREAK = 1e-4


@dataclass(frozen=True)
class LanePortalRouting:
    """Lane -> portal index bijection plus the true escape direction per lane."""

    portal_index_by_lane: Mapping[RouteLane, int]
    direction_by_lane: Mapping[RouteLane, Point2D]

    def is_bijective(self) -> bool:
        return len(set(self.portal_index_by_lane.values())) == len(self.portal_index_by_lane)

    def portal_for(self, lane: RouteLane, portals: Sequence[Point2D]) -> Point2D | None:
        """Return the portal assigned to lane, or None if the index is invalid."""
        idx = self.portal_index_by_lane.get(lane)
        if idx is None or idx < 0 or idx >= len(portals):
            return None
        return portals[idx]


@dataclass(frozen=True)
class _Candidate:
    index: int
    distance: float
    direction: Point2D


def _candidates(base: Sequence[float], portals: Sequence[Sequence[float]]) -> list[_Candidate]:
    result: list[_Candidate] = []
    for index, portal in enumerate(portals):
        resolved = unit_vector(base, portal)
        if resolved is None:
            result.append(_Candidate(index, 0.0, CANONICAL_DIRECTIONS[RouteLane.MID]))
        else:
            direction, length = resolved
            result.append(_Candidate(index, length, direction))
    return result


def _pick_portal(
    candidates: list[_Candidate],
    target: Point2D,
    available: set[int],
) -> int:
    """Best-scoring available candidate; falls back to the full list when none remain."""
    if not candidates:
        return 0

    pool = [c for c in candidates if c.index in available]
    if not pool:
        pool = candidates

    best_index = pool[0].index
    best_score = float("-inf")
    for c in pool:
        score = dot(c.direction, target) + c.distance * _DISTANCE_TIE_BREAK
        if score > best_score:
            best_score = score
            best_index = c.index
    return best_index


def _lane_direction(
    base: Sequence[float],
    portal: Sequence[float] | None,
    fallback: Point2D,
) -> Point2D:
    if portal is None:
        return fallback
    resolved = unit_vector(base, portal)
    if resolved is None:
        return fallback
    return resolved[0]


def route_portals(base: Sequence[float], portals: Sequence[Sequence[float]]) -> LanePortalRouting:
    """Assign each lane a portal and derive its escape direction.

    Args:
        base: (x, y) position of the defended structure.
        portals: Candidate portal points (normally exactly three).

    Returns:
        LanePortalRouting with pairwise-distinct indices whenever at least
        three portals are supplied.
    """
    candidates = _candidates(base, portals)
    if len(candidates) < len(LANE_ASSIGN_ORDER):
        logger.debug(
            f"Only {len(candidates)} portal(s) for {len(LANE_ASSIGN_ORDER)} lanes, "
            "lanes will share portals"
        )

    available = {c.index for c in candidates}
    index_by_lane: dict[RouteLane, int] = {}
    for lane in LANE_ASSIGN_ORDER:
        idx = _pick_portal(candidates, CANONICAL_DIRECTIONS[lane], available)
        index_by_lane[lane] = idx
        available.discard(idx)

    direction_by_lane: dict[RouteLane, Point2D] = {}
    for lane in RouteLane:
        idx = index_by_lane[lane]
        portal = portals[idx] if 0 <= idx < len(portals) else None
        direction_by_lane[lane] = _lane_direction(base, portal, CANONICAL_DIRECTIONS[lane])

    return LanePortalRouting(
        portal_index_by_lane=MappingProxyType({lane: index_by_lane[lane] for lane in RouteLane}),
        direction_by_lane=MappingProxyType(direction_by_lane),
    )
