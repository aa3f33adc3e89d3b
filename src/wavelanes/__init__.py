# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""wavelanes -- spawn portals, lane routing and lane progression for wave defense.

Typical use at session start::

    from wavelanes import ArenaBounds, LaneRoutingTable, RouteLane

    table = LaneRoutingTable.build((0.0, -9.0), ArenaBounds(25.0, 25.0))
    if RouteLane.TOP in table.active_lanes(wave):
        x, y = table.spawn_position(RouteLane.TOP)

The free functions in ``portals``, ``routing``, ``progression`` and
``sampler`` are the underlying contracts; the table just binds them to one
arena and one settings object.
"""

from .config import WaveLaneSettings, get_settings
from .geometry import ArenaBounds, Point2D, Point3
from .lanes import ROUTE_LANE_SEQUENCE, ForecastLane, RouteLane, lane_polylines, lane_to_forecast_lane
from .portals import edge_position, resolve_portals
from .progression import (
    LaneUnlockState,
    active_lane_set,
    active_portal_count,
    advance_boss_lane_state,
    classify_lane,
    current_boss_lane,
    pick_unlocked_lane,
    resolve_lane_by_portal_rank,
)
from .routing import LanePortalRouting, route_portals
from .sampler import (
    BuildingPad,
    resolve_lane_unlock_focus,
    resolve_lane_unlock_pad_focus,
    resolve_portal_index,
    sample_spawn_position,
    sample_wave_spawn_position,
)
from .table import LaneRoutingCache, LaneRoutingTable

__version__ = "0.1.0"

__all__ = [
    "ArenaBounds",
    "BuildingPad",
    "ForecastLane",
    "LanePortalRouting",
    "LaneRoutingCache",
    "LaneRoutingTable",
    "LaneUnlockState",
    "Point2D",
    "Point3",
    "ROUTE_LANE_SEQUENCE",
    "RouteLane",
    "WaveLaneSettings",
    "active_lane_set",
    "active_portal_count",
    "advance_boss_lane_state",
    "classify_lane",
    "current_boss_lane",
    "edge_position",
    "get_settings",
    "lane_polylines",
    "lane_to_forecast_lane",
    "pick_unlocked_lane",
    "resolve_lane_by_portal_rank",
    "resolve_lane_unlock_focus",
    "resolve_lane_unlock_pad_focus",
    "resolve_portal_index",
    "resolve_portals",
    "route_portals",
    "sample_spawn_position",
    "sample_wave_spawn_position",
]
