# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""LaneRoutingTable -- the per-session portal/lane geometry, computed once.

Architecture
------------
A table is built when the arena and base position are known (session
start) and is immutable afterwards.  The wave scheduler holds it and calls
its query methods per spawn event:

  table = LaneRoutingTable.build(base, bounds, settings)
  lanes = table.active_lanes(wave)
  pos   = table.spawn_position(lane)
  focus = table.focus_for_unlock(lane, pads)

``LaneRoutingCache`` memoizes tables per (base, bounds, margin, factor)
so repeated session starts on the same map skip the geometry.  Building
happens under a lock (one writer); reads after that are lock-free since
tables never change.
"""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from loguru import logger

from .config import WaveLaneSettings, get_settings
from .geometry import ArenaBounds, Point2D, Point3
from .lanes import RouteLane, lane_polylines
from .portals import resolve_portals
from .progression import active_lane_set, active_portal_count, classify_lane
from .routing import LanePortalRouting, route_portals
from .sampler import (
    BuildingPad,
    resolve_lane_unlock_focus,
    resolve_lane_unlock_pad_focus,
    sample_spawn_position,
)


@dataclass(frozen=True, eq=False)
class LaneRoutingTable:
    """Immutable portal positions, lane routing and reference paths for one arena."""

    base: Point2D
    bounds: ArenaBounds
    portals: tuple[Point2D, ...]
    routing: LanePortalRouting
    polylines: Mapping[RouteLane, tuple[Point2D, ...]]
    settings: WaveLaneSettings

    @classmethod
    def build(
        cls,
        base: Sequence[float],
        bounds: ArenaBounds | None = None,
        settings: WaveLaneSettings | None = None,
    ) -> LaneRoutingTable:
        """Resolve portals, routing and polylines for a base position."""
        cfg = settings if settings is not None else get_settings()
        arena = bounds if bounds is not None else cfg.bounds
        origin = Point2D(float(base[0]), float(base[1]))

        portals = tuple(resolve_portals(origin, arena, cfg.edge_margin, cfg.distance_factor))
        routing = route_portals(origin, portals)
        table = cls(
            base=origin,
            bounds=arena,
            portals=portals,
            routing=routing,
            polylines=MappingProxyType(lane_polylines(arena)),
            settings=cfg,
        )
        logger.info(
            f"Lane routing built for base ({origin.x:.1f}, {origin.y:.1f}): "
            + ", ".join(
                f"{lane.value}->#{idx} ({portals[idx].x:.1f}, {portals[idx].y:.1f})"
                for lane, idx in routing.portal_index_by_lane.items()
                if 0 <= idx < len(portals)
            )
        )
        return table

    def portal_for(self, lane: RouteLane) -> Point2D | None:
        return self.routing.portal_for(lane, self.portals)

    # -- Progression -----------------------------------------------------------

    def active_portal_count(self, wave_number: int) -> int:
        return active_portal_count(
            wave_number, len(self.portals),
            self.settings.open_wave_2, self.settings.open_wave_3,
        )

    def active_lanes(self, wave_number: int) -> frozenset[RouteLane]:
        return active_lane_set(
            wave_number, len(self.portals),
            self.settings.open_wave_2, self.settings.open_wave_3,
        )

    def classify(self, point: Sequence[float]) -> RouteLane:
        """Lane whose reference path passes nearest to point."""
        return classify_lane(point, self.polylines)

    # -- Spawning & focus ------------------------------------------------------

    def spawn_position(
        self,
        lane: RouteLane,
        rng: random.Random | None = None,
        jitter_radius: float | None = None,
    ) -> Point2D:
        radius = self.settings.jitter_radius if jitter_radius is None else jitter_radius
        return sample_spawn_position(
            lane, self.routing, self.portals, radius, self.bounds, self.base, rng,
        )

    def unlock_focus(self, lane: RouteLane, height: float = 0.0) -> Point3:
        return resolve_lane_unlock_focus(
            lane, self.routing, self.portals, self.bounds,
            self.settings.unlock_focus_inward, height, self.settings.min_focus_height,
        )

    def unlock_pad_focus(
        self,
        lane: RouteLane,
        pads: Sequence[BuildingPad],
        height: float = 0.0,
    ) -> Point3 | None:
        return resolve_lane_unlock_pad_focus(
            lane, pads, self.settings.locked_lane_pad_types, self.bounds,
            self.base, height, self.polylines, self.settings.min_focus_height,
        )

    def focus_for_unlock(
        self,
        lane: RouteLane,
        pads: Sequence[BuildingPad] = (),
        height: float = 0.0,
    ) -> Point3:
        """Pad focus when the lane has a locked pad, portal focus otherwise."""
        pad_focus = self.unlock_pad_focus(lane, pads, height)
        if pad_focus is not None:
            return pad_focus
        return self.unlock_focus(lane, height)


class LaneRoutingCache:
    """Memoizes LaneRoutingTable per arena configuration."""

    def __init__(self, settings: WaveLaneSettings | None = None) -> None:
        self._settings = settings
        self._tables: dict[tuple, LaneRoutingTable] = {}
        self._lock = threading.Lock()

    def _key(self, base: Point2D, bounds: ArenaBounds, cfg: WaveLaneSettings) -> tuple:
        return (base, bounds, cfg.edge_margin, cfg.distance_factor)

    def get(self, base: Sequence[float], bounds: ArenaBounds | None = None) -> LaneRoutingTable:
        """Return the cached table for (base, bounds), building it on first use."""
        cfg = self._settings if self._settings is not None else get_settings()
        arena = bounds if bounds is not None else cfg.bounds
        origin = Point2D(float(base[0]), float(base[1]))
        key = self._key(origin, arena, cfg)

        table = self._tables.get(key)
        if table is not None:
            return table
        with self._lock:
            table = self._tables.get(key)
            if table is None:
                table = LaneRoutingTable.build(origin, arena, cfg)
                self._tables[key] = table
            return table

    def __len__(self) -> int:
        return len(self._tables)

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()
