# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""LaneProgressionGate -- which portals and lanes are open at a given wave.

Everything here is a pure function of its inputs; no state is persisted
between waves.  Unlock schedule (defaults):

  wave  1-3   one portal   (mid)
  wave  4-7   two portals  (mid, top)
  wave  8+    three portals (mid, top, bottom)

The boss-lane cursor is the one piece of progression the wave scheduler
carries between waves; it is modelled as an immutable ``LaneUnlockState``
that ``advance_boss_lane_state`` replaces rather than mutates.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from .geometry import Point2D, point_to_polyline_distance
from .lanes import ROUTE_LANE_SEQUENCE, ForecastLane, RouteLane

DEFAULT_OPEN_WAVE_2 = 4
DEFAULT_OPEN_WAVE_3 = 8

# Evaluation order for nearest-lane ties
_CLASSIFY_ORDER: tuple[RouteLane, ...] = (RouteLane.MID, RouteLane.TOP, RouteLane.BOTTOM)


def active_portal_count(
    wave_number: int,
    total_portals: int,
    open_wave_2: int = DEFAULT_OPEN_WAVE_2,
    open_wave_3: int = DEFAULT_OPEN_WAVE_3,
) -> int:
    """Return how many portals are open at wave_number, clamped to total_portals."""
    lo, hi = min(open_wave_2, open_wave_3), max(open_wave_2, open_wave_3)
    total = max(0, total_portals)
    if wave_number >= hi:
        return min(3, total)
    if wave_number >= lo:
        return min(2, total)
    return min(1, total)


def active_lane_set(
    wave_number: int,
    total_portals: int = 3,
    open_wave_2: int = DEFAULT_OPEN_WAVE_2,
    open_wave_3: int = DEFAULT_OPEN_WAVE_3,
) -> frozenset[RouteLane]:
    """Lanes open at wave_number: a prefix of ROUTE_LANE_SEQUENCE."""
    count = active_portal_count(wave_number, total_portals, open_wave_2, open_wave_3)
    return frozenset(ROUTE_LANE_SEQUENCE[:count])


def classify_lane(
    point: Sequence[float],
    lane_polylines: Mapping[RouteLane, Sequence[Sequence[float]]],
) -> RouteLane:
    """Return the lane whose reference polyline passes closest to point.

    Ties go to the first lane in evaluation order (mid, top, bottom).
    Lanes missing from ``lane_polylines`` are never chosen unless every
    lane is missing, in which case mid is returned.
    """
    best_lane = RouteLane.MID
    best_distance = math.inf
    for lane in _CLASSIFY_ORDER:
        polyline = lane_polylines.get(lane)
        if polyline is None:
            continue
        d = point_to_polyline_distance(point, polyline)
        if d < best_distance:
            best_distance = d
            best_lane = lane
    return best_lane


def resolve_lane_by_portal_rank(
    wave_number: int,
    portals: Sequence[Point2D],
    portal_index: int,
    open_wave_2: int = DEFAULT_OPEN_WAVE_2,
    open_wave_3: int = DEFAULT_OPEN_WAVE_3,
) -> ForecastLane:
    """Screen-side label for a portal among the currently active ones.

    Active portals are ranked by x then y; the first is LEFT, the last is
    RIGHT, everything in between is CENTER.  A single active portal is
    always CENTER.
    """
    if not portals:
        return ForecastLane.CENTER

    active = active_portal_count(wave_number, len(portals), open_wave_2, open_wave_3)
    if active <= 1:
        return ForecastLane.CENTER

    safe_index = max(0, min(int(math.floor(portal_index)), active - 1))
    ordered = sorted(range(active), key=lambda i: (portals[i][0], portals[i][1]))
    rank = ordered.index(safe_index)
    if rank <= 0:
        return ForecastLane.LEFT
    if rank >= len(ordered) - 1:
        return ForecastLane.RIGHT
    return ForecastLane.CENTER


# ---------------------------------------------------------------------------
# Boss-driven lane unlocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LaneUnlockState:
    """Cursors into ROUTE_LANE_SEQUENCE.

    Attributes:
        next_unlock_cursor: Index of the next lane to unlock.  Mid is open
            from the start, so this begins at 1.
        next_boss_cursor: Index of the lane the next boss spawns on.
    """

    next_unlock_cursor: int = 1
    next_boss_cursor: int = 0

    def unlocked_lanes(self) -> frozenset[RouteLane]:
        count = max(1, min(self.next_unlock_cursor, len(ROUTE_LANE_SEQUENCE)))
        return frozenset(ROUTE_LANE_SEQUENCE[:count])


def current_boss_lane(state: LaneUnlockState) -> RouteLane:
    """Lane the next boss should spawn on."""
    if 0 <= state.next_boss_cursor < len(ROUTE_LANE_SEQUENCE):
        return ROUTE_LANE_SEQUENCE[state.next_boss_cursor]
    return RouteLane.MID


def advance_boss_lane_state(
    state: LaneUnlockState,
) -> tuple[RouteLane | None, LaneUnlockState]:
    """Advance lane cursors after a boss kill.

    While locked lanes remain, the next one in sequence unlocks and becomes
    the boss lane.  Once every lane is open, the boss lane rotates
    round-robin and nothing new unlocks.

    Returns:
        (lane_to_unlock or None, new state)
    """
    sequence_len = len(ROUTE_LANE_SEQUENCE)
    if 0 <= state.next_unlock_cursor < sequence_len:
        lane = ROUTE_LANE_SEQUENCE[state.next_unlock_cursor]
        return lane, LaneUnlockState(
            next_unlock_cursor=state.next_unlock_cursor + 1,
            next_boss_cursor=state.next_unlock_cursor,
        )

    return None, LaneUnlockState(
        next_unlock_cursor=state.next_unlock_cursor,
        next_boss_cursor=(state.next_boss_cursor + 1) % max(1, sequence_len),
    )


def pick_unlocked_lane(
    unlocked: Iterable[RouteLane],
    rng: random.Random | None = None,
) -> RouteLane:
    """Uniformly pick one unlocked lane (sequence order); mid if none."""
    unlocked_set = set(unlocked)
    lanes = [lane for lane in ROUTE_LANE_SEQUENCE if lane in unlocked_set]
    if not lanes:
        return RouteLane.MID
    r = rng if rng is not None else random
    return lanes[r.randint(0, len(lanes) - 1)]
