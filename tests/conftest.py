# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Root conftest — shared arenas, settings and deterministic RNGs."""

import os
import random
from unittest.mock import patch

import pytest

from wavelanes.config import WaveLaneSettings, get_settings
from wavelanes.geometry import ArenaBounds


@pytest.fixture(autouse=True)
def _isolated_settings():
    """Keep WAVELANES_* from the developer shell out of every test."""
    clean = {k: v for k, v in os.environ.items() if not k.startswith("WAVELANES_")}
    with patch.dict(os.environ, clean, clear=True):
        get_settings.cache_clear()
        yield
    get_settings.cache_clear()


@pytest.fixture
def bounds() -> ArenaBounds:
    return ArenaBounds(25.0, 25.0)


@pytest.fixture
def settings() -> WaveLaneSettings:
    return WaveLaneSettings(_env_file=None)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
