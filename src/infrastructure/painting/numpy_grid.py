"""In-memory GridAccessor backed by numpy arrays.

Implements the GridAccessor port for grids held entirely in memory. Used by
tests and by callers that stage a grid before handing it to a host.

Storage (all arrays indexed [row, col] = [y - y0, x - x0]):
1) heights: int32
2) slopes: float64 rise/run ratio, given or derived from heights
3) water levels: int32, broadcast from a scalar if needed
4) terrain: int16 codes into the Terrain catalogue
5) layers: one bool array per layer, created on first write

Arrays passed in are copied; the adapter never mutates caller-owned data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from domain.painting.errors import CoordinateOutOfBoundsError
from domain.painting.value_objects import GridExtent, LayerId, Terrain

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

# Terrain <-> int16 code mapping (catalogue order is stable: Enum definition order)
_TERRAIN_CATALOGUE: tuple[Terrain, ...] = tuple(Terrain)
_TERRAIN_CODES: dict[Terrain, int] = {t: i for i, t in enumerate(_TERRAIN_CATALOGUE)}


def derive_slopes(heights: NDArray[Any]) -> NDArray[np.float64]:
    """Derive per-cell slope (rise/run) from neighboring heights.

    Uses central differences in the interior and one-sided differences on
    the edges (numpy.gradient). Grids narrower than 2 cells on either axis
    have no neighbors to compare and are treated as flat.
    """
    data = np.asarray(heights, dtype=np.float64)
    if data.ndim != 2 or min(data.shape) < 2:
        return np.zeros(data.shape, dtype=np.float64)
    d_row, d_col = np.gradient(data)
    return np.hypot(d_row, d_col)


def _terrain_codes(terrain: Terrain | str | Iterable[Any], shape: tuple[int, int]):
    if isinstance(terrain, (Terrain, str)):
        return np.full(shape, _TERRAIN_CODES[Terrain(terrain)], dtype=np.int16)
    codes = np.array(
        [[_TERRAIN_CODES[Terrain(t)] for t in row] for row in terrain],
        dtype=np.int16,
    )
    if codes.size == 0:
        codes = codes.reshape(shape)
    return codes


class NumpyGridAccessor:
    """Grid accessor over in-memory numpy arrays.

    Parameters
    ----------
    heights: ArrayLike
        2D integer heights, shape (rows, cols).
    terrain: Terrain | str | 2D iterable
        One terrain for the whole grid, or one per cell.
    water_level: int | ArrayLike
        One water level for the whole grid, or one per cell.
    slopes: ArrayLike | None
        Explicit rise/run slopes. Derived from heights when None.
    layers: Mapping[str, ArrayLike] | None
        Initial boolean layers.
    origin: tuple[int, int]
        World coordinates (x0, y0) of cell [0, 0].
    """

    def __init__(
        self,
        heights: ArrayLike,
        terrain: Terrain | str | Iterable[Any] = Terrain.GRASS,
        water_level: int | ArrayLike = 0,
        slopes: ArrayLike | None = None,
        layers: Mapping[str, ArrayLike] | None = None,
        origin: tuple[int, int] = (0, 0),
    ) -> None:
        raw_heights = np.array(heights, copy=True)
        if raw_heights.ndim != 2:
            raise ValueError(f"Heights must be 2D, got {raw_heights.ndim}D")
        shape = raw_heights.shape

        self._heights: NDArray[np.int32] = raw_heights.astype(np.int32)
        self._slopes: NDArray[np.float64] = (
            derive_slopes(raw_heights)
            if slopes is None
            else np.array(slopes, dtype=np.float64, copy=True)
        )
        self._water: NDArray[np.int32] = np.array(
            np.broadcast_to(np.asarray(water_level, dtype=np.int32), shape),
            copy=True,
        )
        self._terrain: NDArray[np.int16] = _terrain_codes(terrain, shape)
        self._layers: dict[LayerId, NDArray[np.bool_]] = {}
        for name, mask in (layers or {}).items():
            self._layers[LayerId(name)] = np.array(mask, dtype=bool, copy=True)

        for label, array in (
            ("slopes", self._slopes),
            ("terrain", self._terrain),
            *((f"layer {name!r}", mask) for name, mask in self._layers.items()),
        ):
            if array.shape != shape:
                raise ValueError(
                    f"{label} shape {array.shape} does not match heights {shape}"
                )

        rows, cols = shape
        self._extent = GridExtent(x0=origin[0], y0=origin[1], width=cols, height=rows)

    # -----------------------------------------------------------------------
    # Indexing
    # -----------------------------------------------------------------------
    def _index(self, x: int, y: int) -> tuple[int, int]:
        if not self._extent.contains(x, y):
            raise CoordinateOutOfBoundsError(x, y, self._extent)
        return y - self._extent.y0, x - self._extent.x0

    # -----------------------------------------------------------------------
    # GridAccessor port
    # -----------------------------------------------------------------------
    def get_extent(self) -> GridExtent:
        return self._extent

    def get_height_at(self, x: int, y: int) -> int:
        return int(self._heights[self._index(x, y)])

    def get_slope_at(self, x: int, y: int) -> float:
        return float(self._slopes[self._index(x, y)])

    def get_water_level_at(self, x: int, y: int) -> int:
        return int(self._water[self._index(x, y)])

    def get_terrain_at(self, x: int, y: int) -> Terrain:
        return _TERRAIN_CATALOGUE[int(self._terrain[self._index(x, y)])]

    def get_layer_bit_at(self, layer: LayerId, x: int, y: int) -> bool:
        index = self._index(x, y)
        mask = self._layers.get(layer)
        return False if mask is None else bool(mask[index])

    def set_layer_bit_at(self, layer: LayerId, x: int, y: int, value: bool) -> None:
        index = self._index(x, y)
        mask = self._layers.get(layer)
        if mask is None:
            if not value:
                return  # clearing an absent layer is a no-op
            logger.debug("Creating layer %r", layer)
            mask = np.zeros(self._heights.shape, dtype=bool)
            self._layers[layer] = mask
        mask[index] = bool(value)

    def set_terrain_at(self, x: int, y: int, terrain: Terrain) -> None:
        self._terrain[self._index(x, y)] = _TERRAIN_CODES[Terrain(terrain)]

    # -----------------------------------------------------------------------
    # Inspection
    # -----------------------------------------------------------------------
    @property
    def layer_names(self) -> tuple[LayerId, ...]:
        return tuple(sorted(self._layers))

    def layer_mask(self, layer: str) -> NDArray[np.bool_]:
        """Return a copy of a layer as a bool array (all False if absent)."""
        mask = self._layers.get(LayerId(layer))
        if mask is None:
            return np.zeros(self._heights.shape, dtype=bool)
        return mask.copy()

    def terrain_mask(self, terrain: Terrain | str) -> NDArray[np.bool_]:
        """Return a bool array marking cells of the given terrain."""
        return self._terrain == _TERRAIN_CODES[Terrain(terrain)]
