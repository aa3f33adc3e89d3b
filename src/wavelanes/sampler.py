# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""SpawnPositionSampler -- concrete spawn coordinates and lane focus points.

Spawn positions are jittered around the lane's portal inside a disk of
``jitter_radius``.  The radius is drawn as ``sqrt(U(0,1)) * R`` so samples
are uniform over the disk's area rather than clustered at the center.

When the base position is known, a jittered point may not end up closer
to the base than ``portal_distance - R * 0.2``; offending samples are
projected back out along the base->portal direction.  Every result is
clamped to the arena.

Focus points draw player attention to a lane that is about to open:
either a point just inside the arena from the portal, or (preferred) the
nearest still-locked building pad on that lane.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import AbstractSet, Mapping, Sequence

from loguru import logger

from .geometry import ArenaBounds, Point2D, Point3, clamp, distance, unit_vector
from .lanes import RouteLane, lane_polylines
from .portals import edge_position
from .progression import (
    DEFAULT_OPEN_WAVE_2,
    DEFAULT_OPEN_WAVE_3,
    active_portal_count,
    classify_lane,
)
from .routing import LanePortalRouting

# Fraction of the jitter radius a spawn may creep toward the base
_BASE_CREEP_FRACTION = 0.2

# Focus points never sit lower than this (keeps the camera off the floor)
DEFAULT_MIN_FOCUS_HEIGHT = 1.2


@dataclass(frozen=True)
class BuildingPad:
    """A building pad as reported by the placement subsystem."""
    type: str
    x: float
    z: float


def _jitter(
    portal: Point2D,
    jitter_radius: float,
    rng: random.Random | None,
) -> tuple[float, float]:
    r = rng if rng is not None else random
    angle = r.uniform(0.0, 2.0 * math.pi)
    radius = math.sqrt(r.random()) * jitter_radius
    return (portal.x + math.cos(angle) * radius, portal.y + math.sin(angle) * radius)


def _keep_clear_of_base(
    x: float,
    y: float,
    portal: Point2D,
    base: Sequence[float],
    jitter_radius: float,
) -> tuple[float, float]:
    """Push (x, y) back out along base->portal if it crept too close to base."""
    resolved = unit_vector(base, portal)
    if resolved is None:
        return x, y
    (nx, ny), portal_dist = resolved
    min_dist = max(0.0, portal_dist - jitter_radius * _BASE_CREEP_FRACTION)
    if distance((x, y), base) < min_dist:
        return base[0] + nx * min_dist, base[1] + ny * min_dist
    return x, y


def jitter_portal(
    portal: Point2D,
    jitter_radius: float,
    bounds: ArenaBounds,
    base: Sequence[float] | None = None,
    rng: random.Random | None = None,
) -> Point2D:
    """Jitter a single portal position and clamp it to the arena."""
    if not jitter_radius > 0.0:
        return Point2D(portal.x, portal.y)

    x, y = _jitter(portal, jitter_radius, rng)
    if base is not None:
        x, y = _keep_clear_of_base(x, y, portal, base, jitter_radius)
    return bounds.clamp_point(x, y)


def sample_spawn_position(
    lane: RouteLane,
    routing: LanePortalRouting | None,
    portals: Sequence[Point2D],
    jitter_radius: float,
    bounds: ArenaBounds,
    base: Sequence[float] | None = None,
    rng: random.Random | None = None,
) -> Point2D:
    """Spawn coordinate for a new enemy on lane.

    Args:
        lane: Lane the enemy enters on.
        routing: Lane->portal routing; None or an out-of-range index falls
            back to the fixed arena corner.
        portals: Portal list the routing indexes into.
        jitter_radius: Disk radius around the portal; <= 0 disables jitter.
        bounds: Arena half extents.
        base: Defended position, if known, to stop jitter creeping toward it.
        rng: Random source (module ``random`` when omitted).

    Returns:
        A point inside the arena.  With jitter disabled the portal itself
        is returned unchanged.
    """
    portal = routing.portal_for(lane, portals) if routing is not None else None
    if portal is None:
        logger.debug(f"No routed portal for lane {lane.value}, spawning at arena corner")
        portal = edge_position(bounds)
    return jitter_portal(Point2D(portal[0], portal[1]), jitter_radius, bounds, base, rng)


def resolve_portal_index(
    active_count: int,
    forced_index: int | None = None,
    rng: random.Random | None = None,
) -> int:
    """Pick which active portal to spawn from.

    A forced index inside [0, active_count) wins; otherwise one of the
    active portals is chosen uniformly.
    """
    if active_count <= 1:
        return 0
    if forced_index is not None and math.isfinite(forced_index):
        safe = int(math.floor(forced_index))
        if 0 <= safe < active_count:
            return safe
    r = rng if rng is not None else random
    return r.randrange(active_count)


def sample_wave_spawn_position(
    wave_number: int,
    portals: Sequence[Point2D],
    jitter_radius: float,
    bounds: ArenaBounds,
    forced_index: int | None = None,
    open_wave_2: int = DEFAULT_OPEN_WAVE_2,
    open_wave_3: int = DEFAULT_OPEN_WAVE_3,
    rng: random.Random | None = None,
) -> Point2D:
    """Spawn coordinate at one of the portals open at wave_number.

    Portal-indexed counterpart of ``sample_spawn_position`` for schedulers
    that do not track lanes.  No portals means the arena corner.
    """
    if not portals:
        return edge_position(bounds)
    active = active_portal_count(wave_number, len(portals), open_wave_2, open_wave_3)
    idx = resolve_portal_index(active, forced_index, rng)
    portal = portals[idx]
    return jitter_portal(Point2D(portal[0], portal[1]), jitter_radius, bounds, None, rng)


def resolve_lane_unlock_focus(
    lane: RouteLane,
    routing: LanePortalRouting | None,
    portals: Sequence[Point2D],
    bounds: ArenaBounds,
    inward_offset: float,
    height: float = 0.0,
    min_height: float = DEFAULT_MIN_FOCUS_HEIGHT,
) -> Point3:
    """Camera focus just inside the arena from lane's portal."""
    portal = routing.portal_for(lane, portals) if routing is not None else None
    if portal is None:
        portal = edge_position(bounds)

    direction = None
    if routing is not None:
        direction = routing.direction_by_lane.get(lane) or routing.direction_by_lane.get(RouteLane.MID)
    if direction is None:
        direction = Point2D(0.0, 0.0)

    x = clamp(portal[0] - direction[0] * inward_offset, -bounds.half_width, bounds.half_width)
    z = clamp(portal[1] - direction[1] * inward_offset, -bounds.half_height, bounds.half_height)
    return Point3(x, max(min_height, height), z)


def resolve_lane_unlock_pad_focus(
    lane: RouteLane,
    pads: Sequence[BuildingPad],
    locked_pad_types: AbstractSet[str],
    bounds: ArenaBounds,
    base_position: Sequence[float],
    height: float = 0.0,
    polylines: Mapping[RouteLane, Sequence[Point2D]] | None = None,
    min_height: float = DEFAULT_MIN_FOCUS_HEIGHT,
) -> Point3 | None:
    """Nearest locked building pad on lane, or None if the lane has none.

    Pads are assigned to lanes by nearest reference polyline; only pads
    whose type is in ``locked_pad_types`` are considered.
    """
    if not pads:
        return None

    paths = polylines if polylines is not None else lane_polylines(bounds)
    best: BuildingPad | None = None
    best_dist = math.inf
    for pad in pads:
        if pad.type not in locked_pad_types:
            continue
        if classify_lane((pad.x, pad.z), paths) != lane:
            continue
        d = distance((pad.x, pad.z), base_position)
        if d < best_dist:
            best_dist = d
            best = pad

    if best is None:
        return None
    return Point3(best.x, max(min_height, height), best.z)
