"""Domain Port(s) for Grid Access.

Defines the interface (Protocol) that grid storage adapters must implement.
No concrete storage here.
"""

from __future__ import annotations

from typing import Protocol

from .value_objects import GridExtent, LayerId, Terrain


class GridAccessor(Protocol):
    """Port for reading and writing per-cell grid state.

    Implementations live in infrastructure (e.g., the numpy-backed adapter)
    or in the host application. Failures surface as exceptions; the
    mutation engine does not retry.
    """

    def get_extent(self) -> GridExtent:
        """Return the rectangular extent of the grid."""
        ...

    def get_height_at(self, x: int, y: int) -> int:
        ...

    def get_slope_at(self, x: int, y: int) -> float:
        """Return local steepness as a rise/run ratio."""
        ...

    def get_water_level_at(self, x: int, y: int) -> int:
        ...

    def get_terrain_at(self, x: int, y: int) -> Terrain:
        ...

    def get_layer_bit_at(self, layer: LayerId, x: int, y: int) -> bool:
        ...

    def set_layer_bit_at(self, layer: LayerId, x: int, y: int, value: bool) -> None:
        ...

    def set_terrain_at(self, x: int, y: int, terrain: Terrain) -> None:
        ...
