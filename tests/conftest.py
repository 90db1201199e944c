"""Root pytest configuration for all tests.

Grids are built directly from numpy arrays (no I/O). Helpers here are shared
by the domain tests and the infrastructure adapter tests.
"""

from __future__ import annotations

import numpy as np
import pytest

from domain.painting.value_objects import Terrain
from infrastructure.painting import NumpyGridAccessor


def create_test_grid_sand_center() -> NumpyGridAccessor:
    """Create 3x3 grid, cells (0..2, 0..2).

    Terrain: ROCK everywhere except SAND at (1, 1)
    Heights: 64, water level 62 (nothing submerged)
    """
    terrain = [[Terrain.ROCK] * 3 for _ in range(3)]
    terrain[1][1] = Terrain.SAND
    return NumpyGridAccessor(
        heights=np.full((3, 3), 64, dtype=np.int32),
        terrain=terrain,
        water_level=62,
    )


def create_test_grid_flooded_corner() -> NumpyGridAccessor:
    """Create 3x3 grid with only (0, 0) below water.

    Water level: 10 everywhere
    Heights: 5 at (0, 0), 20 elsewhere
    """
    heights = np.full((3, 3), 20, dtype=np.int32)
    heights[0, 0] = 5
    return NumpyGridAccessor(heights=heights, terrain=Terrain.GRASS, water_level=10)


def create_test_grid_random(seed: int = 42) -> NumpyGridAccessor:
    """Create 12x10 grid with random heights, terrain and one layer.

    Heights: 0-127, water level 40, origin (-4, 7)
    Terrain: random choice of GRASS, SAND, ROCK, SNOW
    Layers: "snow" on ~30% of cells
    """
    rng = np.random.default_rng(seed)
    rows, cols = 10, 12
    heights = rng.integers(0, 128, size=(rows, cols))
    choices = [Terrain.GRASS, Terrain.SAND, Terrain.ROCK, Terrain.SNOW]
    picks = rng.integers(0, len(choices), size=(rows, cols))
    terrain = [[choices[i] for i in row] for row in picks]
    return NumpyGridAccessor(
        heights=heights,
        terrain=terrain,
        water_level=40,
        layers={"snow": rng.random((rows, cols)) < 0.3},
        origin=(-4, 7),
    )


@pytest.fixture
def sand_center_grid() -> NumpyGridAccessor:
    return create_test_grid_sand_center()


@pytest.fixture
def flooded_corner_grid() -> NumpyGridAccessor:
    return create_test_grid_flooded_corner()


@pytest.fixture
def random_grid() -> NumpyGridAccessor:
    return create_test_grid_random()


@pytest.fixture
def make_random_grid():
    """Factory fixture for tests that need several identical random grids."""
    return create_test_grid_random
