# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Unit tests for lane progression — unlock schedule, lane classification,
portal ranking, and the boss-lane cursor.
"""

from __future__ import annotations

import random

import pytest

from wavelanes.geometry import Point2D
from wavelanes.lanes import (
    ROUTE_LANE_SEQUENCE,
    ForecastLane,
    RouteLane,
    lane_polylines,
    lane_to_forecast_lane,
)
from wavelanes.progression import (
    LaneUnlockState,
    active_lane_set,
    active_portal_count,
    advance_boss_lane_state,
    classify_lane,
    current_boss_lane,
    pick_unlocked_lane,
    resolve_lane_by_portal_rank,
)

pytestmark = pytest.mark.unit


# --------------------------------------------------------------------------
# active_portal_count
# --------------------------------------------------------------------------

class TestActivePortalCount:
    """Thresholds OPEN_WAVE_2=4, OPEN_WAVE_3=8."""

    @pytest.mark.parametrize("wave,expected", [
        (1, 1), (3, 1), (4, 2), (7, 2), (8, 3), (50, 3),
    ])
    def test_schedule(self, wave, expected):
        assert active_portal_count(wave, 3, open_wave_2=4, open_wave_3=8) == expected

    @pytest.mark.parametrize("total", [0, 1, 2, 3, 5])
    def test_late_wave_clamped_to_total(self, total):
        assert active_portal_count(50, total, 4, 8) == min(3, total)

    def test_no_portals_means_none_open(self):
        assert active_portal_count(1, 0) == 0

    @pytest.mark.parametrize("total", [1, 2, 3])
    def test_monotonic(self, total):
        counts = [active_portal_count(w, total, 4, 8) for w in range(0, 40)]
        assert counts == sorted(counts)

    def test_custom_thresholds(self):
        assert active_portal_count(2, 3, open_wave_2=2, open_wave_3=3) == 2
        assert active_portal_count(3, 3, open_wave_2=2, open_wave_3=3) == 3

    def test_swapped_thresholds_are_ordered(self):
        assert active_portal_count(5, 3, open_wave_2=8, open_wave_3=4) == 2


class TestActiveLaneSet:
    def test_mid_opens_first(self):
        assert active_lane_set(1) == frozenset({RouteLane.MID})

    def test_top_opens_second(self):
        assert active_lane_set(4) == frozenset({RouteLane.MID, RouteLane.TOP})

    def test_all_open_late(self):
        assert active_lane_set(8) == frozenset(RouteLane)

    def test_subset_chain(self):
        previous = frozenset()
        for wave in range(1, 20):
            current = active_lane_set(wave)
            assert previous <= current
            previous = current


# --------------------------------------------------------------------------
# classify_lane
# --------------------------------------------------------------------------

class TestClassifyLane:
    @pytest.fixture
    def polylines(self, bounds):
        return lane_polylines(bounds)

    def test_point_near_top_lane(self, polylines):
        assert classify_lane((15.0, -20.0), polylines) == RouteLane.TOP

    def test_point_near_bottom_lane(self, polylines):
        assert classify_lane((-20.0, 15.0), polylines) == RouteLane.BOTTOM

    def test_point_on_diagonal(self, polylines):
        assert classify_lane((5.0, 5.0), polylines) == RouteLane.MID

    def test_shared_start_vertex_goes_to_mid(self, polylines):
        # All three lanes start at the same vertex
        assert classify_lane((-22.5, -22.5), polylines) == RouteLane.MID

    def test_tie_between_top_and_bottom_prefers_top(self):
        polylines = {
            RouteLane.MID: [Point2D(100.0, 100.0), Point2D(101.0, 101.0)],
            RouteLane.TOP: [Point2D(-1.0, 1.0), Point2D(1.0, 1.0)],
            RouteLane.BOTTOM: [Point2D(-1.0, -1.0), Point2D(1.0, -1.0)],
        }
        assert classify_lane((0.0, 0.0), polylines) == RouteLane.TOP

    def test_tie_with_mid_prefers_mid(self):
        polylines = {
            RouteLane.MID: [Point2D(-1.0, -1.0), Point2D(1.0, -1.0)],
            RouteLane.TOP: [Point2D(-1.0, 1.0), Point2D(1.0, 1.0)],
            RouteLane.BOTTOM: [Point2D(50.0, 50.0), Point2D(60.0, 60.0)],
        }
        assert classify_lane((0.0, 0.0), polylines) == RouteLane.MID

    def test_missing_lane_is_skipped(self):
        polylines = {RouteLane.BOTTOM: [Point2D(0.0, 0.0), Point2D(0.0, 10.0)]}
        assert classify_lane((40.0, 40.0), polylines) == RouteLane.BOTTOM

    def test_no_polylines_defaults_to_mid(self):
        assert classify_lane((1.0, 2.0), {}) == RouteLane.MID


# --------------------------------------------------------------------------
# resolve_lane_by_portal_rank
# --------------------------------------------------------------------------

class TestLaneByPortalRank:
    PORTALS = [Point2D(0.0, 10.0), Point2D(-10.0, 0.0), Point2D(10.0, 0.0)]

    def test_single_active_is_center(self):
        assert resolve_lane_by_portal_rank(1, self.PORTALS, 0) == ForecastLane.CENTER

    def test_two_active(self):
        assert resolve_lane_by_portal_rank(4, self.PORTALS, 0) == ForecastLane.RIGHT
        assert resolve_lane_by_portal_rank(4, self.PORTALS, 1) == ForecastLane.LEFT

    def test_three_active(self):
        assert resolve_lane_by_portal_rank(8, self.PORTALS, 1) == ForecastLane.LEFT
        assert resolve_lane_by_portal_rank(8, self.PORTALS, 0) == ForecastLane.CENTER
        assert resolve_lane_by_portal_rank(8, self.PORTALS, 2) == ForecastLane.RIGHT

    def test_index_clamped_to_active(self):
        assert resolve_lane_by_portal_rank(8, self.PORTALS, 99) == ForecastLane.RIGHT
        assert resolve_lane_by_portal_rank(8, self.PORTALS, -5) == resolve_lane_by_portal_rank(
            8, self.PORTALS, 0
        )

    def test_y_breaks_x_ties(self):
        portals = [Point2D(0.0, 5.0), Point2D(0.0, -5.0)]
        assert resolve_lane_by_portal_rank(4, portals, 1) == ForecastLane.LEFT
        assert resolve_lane_by_portal_rank(4, portals, 0) == ForecastLane.RIGHT

    def test_no_portals(self):
        assert resolve_lane_by_portal_rank(10, [], 0) == ForecastLane.CENTER


class TestForecastMapping:
    def test_mapping(self):
        assert lane_to_forecast_lane(RouteLane.TOP) == ForecastLane.LEFT
        assert lane_to_forecast_lane(RouteLane.MID) == ForecastLane.CENTER
        assert lane_to_forecast_lane(RouteLane.BOTTOM) == ForecastLane.RIGHT


# --------------------------------------------------------------------------
# Boss-driven unlocks
# --------------------------------------------------------------------------

class TestBossLaneCursor:
    def test_initial_state(self):
        state = LaneUnlockState()
        assert current_boss_lane(state) == RouteLane.MID
        assert state.unlocked_lanes() == frozenset({RouteLane.MID})

    def test_unlocks_follow_sequence(self):
        state = LaneUnlockState()
        unlocked = []
        for _ in range(2):
            lane, state = advance_boss_lane_state(state)
            unlocked.append(lane)
            assert current_boss_lane(state) == lane
        assert unlocked == list(ROUTE_LANE_SEQUENCE[1:])
        assert state.unlocked_lanes() == frozenset(RouteLane)

    def test_rotates_after_all_unlocked(self):
        state = LaneUnlockState(next_unlock_cursor=3, next_boss_cursor=2)
        bosses = []
        for _ in range(4):
            lane, state = advance_boss_lane_state(state)
            assert lane is None
            bosses.append(current_boss_lane(state))
        assert bosses == [RouteLane.MID, RouteLane.TOP, RouteLane.BOTTOM, RouteLane.MID]

    def test_state_is_immutable(self):
        state = LaneUnlockState()
        _, new_state = advance_boss_lane_state(state)
        assert state == LaneUnlockState()
        assert new_state is not state

    def test_out_of_range_boss_cursor_falls_back_to_mid(self):
        assert current_boss_lane(LaneUnlockState(next_boss_cursor=9)) == RouteLane.MID


class TestPickUnlockedLane:
    def test_none_unlocked_is_mid(self):
        assert pick_unlocked_lane([]) == RouteLane.MID

    def test_single_lane(self):
        assert pick_unlocked_lane({RouteLane.BOTTOM}) == RouteLane.BOTTOM

    def test_covers_every_unlocked_lane(self):
        rng = random.Random(7)
        seen = {pick_unlocked_lane(set(RouteLane), rng) for _ in range(200)}
        assert seen == set(RouteLane)

    def test_never_picks_locked_lane(self):
        rng = random.Random(11)
        unlocked = {RouteLane.MID, RouteLane.TOP}
        for _ in range(200):
            assert pick_unlocked_lane(unlocked, rng) in unlocked
