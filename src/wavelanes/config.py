# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Lane and portal configuration.

Values come from the environment (``WAVELANES_`` prefix) or a ``.env``
file, falling back to the balance defaults below.  Example:

    WAVELANES_OPEN_WAVE_2=3
    WAVELANES_JITTER_RADIUS=1.2
"""

from __future__ import annotations

import math
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .geometry import ArenaBounds
from .portals import MAX_DISTANCE_FACTOR, MIN_DISTANCE_FACTOR


class WaveLaneSettings(BaseSettings):
    """Numeric knobs for portal placement, unlocks, spawning and focus."""

    model_config = SettingsConfigDict(
        env_prefix="WAVELANES_",
        env_file=".env",
        extra="ignore",
    )

    # Arena
    arena_half_width: float = Field(default=25.0, gt=0)
    arena_half_height: float = Field(default=25.0, gt=0)

    # Unlock schedule (inclusive wave numbers)
    open_wave_2: int = Field(default=4, ge=1)
    open_wave_3: int = Field(default=8, ge=1)

    # Portal placement
    edge_margin: float = Field(default=4.0, ge=0)
    distance_factor: float = 0.96

    # Spawning
    jitter_radius: float = Field(default=0.85, ge=0)

    # Lane unlock focus
    unlock_focus_inward: float = Field(default=8.5, ge=0)
    min_focus_height: float = Field(default=1.2, ge=0)
    locked_lane_pad_types: frozenset[str] = frozenset(
        {"tower", "frost_tower", "lightning_tower", "wall"}
    )

    @field_validator(
        "arena_half_width", "arena_half_height", "edge_margin",
        "jitter_radius", "unlock_focus_inward", "min_focus_height",
        "distance_factor",
    )
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("must be a finite number")
        return v

    @field_validator("distance_factor")
    @classmethod
    def _clamp_distance_factor(cls, v: float) -> float:
        return max(MIN_DISTANCE_FACTOR, min(MAX_DISTANCE_FACTOR, v))

    @model_validator(mode="after")
    def _thresholds_increase(self) -> WaveLaneSettings:
        if self.open_wave_3 <= self.open_wave_2:
            raise ValueError(
                f"open_wave_3 ({self.open_wave_3}) must be greater than "
                f"open_wave_2 ({self.open_wave_2})"
            )
        return self

    @property
    def bounds(self) -> ArenaBounds:
        return ArenaBounds(self.arena_half_width, self.arena_half_height)


@lru_cache
def get_settings() -> WaveLaneSettings:
    """Process-wide settings, read once."""
    return WaveLaneSettings()
