"""Tests for the numpy-backed GridAccessor adapter."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from domain.painting.errors import AccessorError, CoordinateOutOfBoundsError
from domain.painting.value_objects import GridExtent, Terrain
from infrastructure.painting import NumpyGridAccessor, derive_slopes


# ===========================================================================
# Construction
# ===========================================================================
def test_extent_from_shape_and_origin():
    grid = NumpyGridAccessor(heights=np.zeros((4, 6)), origin=(-10, 3))
    assert grid.get_extent() == GridExtent(x0=-10, y0=3, width=6, height=4)


def test_heights_must_be_2d():
    with pytest.raises(ValueError, match="must be 2D"):
        NumpyGridAccessor(heights=np.zeros(5))


def test_mismatched_layer_shape_rejected():
    with pytest.raises(ValueError, match="does not match heights"):
        NumpyGridAccessor(
            heights=np.zeros((2, 2)), layers={"snow": np.zeros((3, 2), dtype=bool)}
        )


def test_mismatched_slope_shape_rejected():
    with pytest.raises(ValueError, match="does not match heights"):
        NumpyGridAccessor(heights=np.zeros((2, 2)), slopes=np.zeros((2, 3)))


def test_input_arrays_are_copied():
    heights = np.array([[1, 2], [3, 4]])
    snow = np.zeros((2, 2), dtype=bool)
    grid = NumpyGridAccessor(heights=heights, layers={"snow": snow})

    heights[0, 0] = 99
    grid.set_layer_bit_at("snow", 1, 1, True)

    assert grid.get_height_at(0, 0) == 1
    assert not snow[1, 1]


def test_scalar_water_level_is_broadcast():
    grid = NumpyGridAccessor(heights=np.zeros((2, 3)), water_level=62)
    assert all(grid.get_water_level_at(x, y) == 62 for x in range(3) for y in range(2))


def test_per_cell_terrain_accepts_names():
    grid = NumpyGridAccessor(
        heights=np.zeros((1, 2)), terrain=[["SAND", Terrain.SNOW]]
    )
    assert grid.get_terrain_at(0, 0) is Terrain.SAND
    assert grid.get_terrain_at(1, 0) is Terrain.SNOW


def test_empty_grid_is_allowed():
    grid = NumpyGridAccessor(heights=np.zeros((0, 0)), terrain=[])
    assert grid.get_extent().cell_count() == 0


# ===========================================================================
# Coordinates
# ===========================================================================
def test_origin_offset_indexing():
    heights = np.array([[1, 2, 3], [4, 5, 6]])
    grid = NumpyGridAccessor(heights=heights, origin=(100, -50))

    assert grid.get_height_at(100, -50) == 1
    assert grid.get_height_at(102, -50) == 3
    assert grid.get_height_at(101, -49) == 5


@pytest.mark.parametrize("x, y", [(3, 0), (0, 2), (-1, 0), (0, -1)])
def test_out_of_bounds_raises(x, y):
    grid = NumpyGridAccessor(heights=np.zeros((2, 3)))

    with pytest.raises(CoordinateOutOfBoundsError) as exc_info:
        grid.get_height_at(x, y)

    assert isinstance(exc_info.value, AccessorError)
    assert (exc_info.value.x, exc_info.value.y) == (x, y)
    assert exc_info.value.extent == grid.get_extent()


def test_writes_out_of_bounds_raise():
    grid = NumpyGridAccessor(heights=np.zeros((2, 2)))
    with pytest.raises(CoordinateOutOfBoundsError):
        grid.set_layer_bit_at("snow", 2, 0, True)
    with pytest.raises(CoordinateOutOfBoundsError):
        grid.set_terrain_at(0, 2, Terrain.SAND)


# ===========================================================================
# Layers
# ===========================================================================
def test_unknown_layer_reads_false():
    grid = NumpyGridAccessor(heights=np.zeros((2, 2)))
    assert grid.get_layer_bit_at("snow", 0, 0) is False
    assert not grid.layer_mask("snow").any()


def test_layer_created_on_first_write(caplog):
    caplog.set_level(logging.DEBUG, logger="infrastructure.painting.numpy_grid")
    grid = NumpyGridAccessor(heights=np.zeros((2, 2)))

    grid.set_layer_bit_at("snow", 1, 0, True)

    assert grid.layer_names == ("snow",)
    assert grid.get_layer_bit_at("snow", 1, 0) is True
    assert grid.get_layer_bit_at("snow", 0, 0) is False
    assert any("Creating layer" in r.getMessage() for r in caplog.records)


def test_clearing_absent_layer_does_not_create_it():
    grid = NumpyGridAccessor(heights=np.zeros((2, 2)))
    grid.set_layer_bit_at("snow", 0, 0, False)
    assert grid.layer_names == ()


def test_layer_mask_is_a_copy():
    grid = NumpyGridAccessor(
        heights=np.zeros((1, 1)), layers={"snow": np.array([[True]])}
    )
    grid.layer_mask("snow")[0, 0] = False
    assert grid.get_layer_bit_at("snow", 0, 0) is True


# ===========================================================================
# Terrain
# ===========================================================================
def test_set_terrain_and_mask():
    grid = NumpyGridAccessor(heights=np.zeros((2, 2)), terrain=Terrain.GRASS)

    grid.set_terrain_at(1, 0, Terrain.SAND)

    assert grid.get_terrain_at(1, 0) is Terrain.SAND
    np.testing.assert_array_equal(
        grid.terrain_mask(Terrain.SAND), np.array([[False, True], [False, False]])
    )


# ===========================================================================
# Slopes
# ===========================================================================
def test_derive_slopes_on_inclined_plane():
    # Rises 2 per column, flat along rows
    heights = np.array([[0, 2, 4], [0, 2, 4], [0, 2, 4]])
    np.testing.assert_allclose(derive_slopes(heights), np.full((3, 3), 2.0))


def test_derive_slopes_combines_both_axes():
    # Rises 3 per column and 4 per row: slope 5
    heights = np.add.outer(np.arange(3) * 4, np.arange(3) * 3)
    np.testing.assert_allclose(derive_slopes(heights), np.full((3, 3), 5.0))


def test_derive_slopes_single_row_is_flat():
    slopes = derive_slopes(np.array([[0, 5, 9]]))
    np.testing.assert_array_equal(slopes, np.zeros((1, 3)))


def test_explicit_slopes_override_derivation():
    grid = NumpyGridAccessor(
        heights=np.array([[0, 100]]), slopes=np.array([[0.25, 0.75]])
    )
    assert grid.get_slope_at(0, 0) == pytest.approx(0.25)
    assert grid.get_slope_at(1, 0) == pytest.approx(0.75)
