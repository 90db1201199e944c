"""Painting Bounded Context - Value Objects.

Immutable data structures describing filtered grid mutations.
All validation occurs at construction time via Pydantic.

Terrain classes and layer identifiers are opaque tokens here: the core only
compares them for membership and hands them back to the grid accessor.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Literal, NewType, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from domain.painting.repositories import GridAccessor

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_COMPLETION_NOTICE = "Execution complete."

LayerId = NewType("LayerId", str)


class Terrain(str, Enum):
    """Terrain classification assigned per grid cell."""

    GRASS = "GRASS"
    BARE_GRASS = "BARE_GRASS"
    DIRT = "DIRT"
    PERMADIRT = "PERMADIRT"
    PODZOL = "PODZOL"
    SAND = "SAND"
    RED_SAND = "RED_SAND"
    SANDSTONE = "SANDSTONE"
    DESERT = "DESERT"
    BEACHES = "BEACHES"
    ROCK = "ROCK"
    STONE = "STONE"
    COBBLESTONE = "COBBLESTONE"
    MOSSY_COBBLESTONE = "MOSSY_COBBLESTONE"
    GRAVEL = "GRAVEL"
    CLAY = "CLAY"
    SNOW = "SNOW"
    DEEP_SNOW = "DEEP_SNOW"
    MYCELIUM = "MYCELIUM"
    WATER = "WATER"
    LAVA = "LAVA"
    BEDROCK = "BEDROCK"
    NETHERRACK = "NETHERRACK"
    END_STONE = "END_STONE"
    CUSTOM_1 = "CUSTOM_1"
    CUSTOM_2 = "CUSTOM_2"
    CUSTOM_3 = "CUSTOM_3"
    CUSTOM_4 = "CUSTOM_4"


# ---------------------------------------------------------------------------
# GridExtent
# ---------------------------------------------------------------------------
class GridExtent(BaseModel):
    """Rectangular coordinate range of a grid, in cell units (Value Object).

    Invariants:
        GE-1: width >= 0
        GE-2: height >= 0
    """

    x0: int = 0
    y0: int = 0
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    def x_range(self, inclusive: bool = False) -> range:
        """Columns visited by a scan; ``inclusive`` adds the column at x0 + width."""
        return range(self.x0, self.x0 + self.width + (1 if inclusive else 0))

    def y_range(self, inclusive: bool = False) -> range:
        """Rows visited by a scan; ``inclusive`` adds the row at y0 + height."""
        return range(self.y0, self.y0 + self.height + (1 if inclusive else 0))

    def cell_count(self, inclusive: bool = False) -> int:
        return len(self.x_range(inclusive)) * len(self.y_range(inclusive))

    def contains(self, x: int, y: int) -> bool:
        """Check if (x, y) lies inside the nominal (exclusive) extent."""
        return (
            self.x0 <= x < self.x0 + self.width and self.y0 <= y < self.y0 + self.height
        )


# ---------------------------------------------------------------------------
# CellAttributes
# ---------------------------------------------------------------------------
class CellAttributes(BaseModel):
    """Attributes of a single cell, read eagerly (Value Object).

    Layers missing from ``layer_bits`` read as absent.
    """

    height: int
    slope: float  # rise/run ratio
    terrain: Terrain
    water_level: int
    layer_bits: dict[LayerId, bool] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def layer(self, layer_id: LayerId) -> bool:
        return self.layer_bits.get(layer_id, False)


# ---------------------------------------------------------------------------
# PredicateModel
# ---------------------------------------------------------------------------
class PredicateModel(BaseModel):
    """One filter configuration (Value Object).

    Every field defaults to its unconstrained value; no field depends on
    another. Slope bounds are stored as rise/run ratios, never degrees.

    Invariants:
        PM-1: above_slope and below_slope are finite when set
    """

    only_on_terrain: frozenset[Terrain] = frozenset()
    except_on_terrain: frozenset[Terrain] = frozenset()
    only_on_layer: frozenset[LayerId] = frozenset()
    except_on_layer: frozenset[LayerId] = frozenset()
    only_on_water: bool = False
    except_on_water: bool = False
    above_level: int | None = None
    below_level: int | None = None
    above_slope: float | None = None
    below_slope: float | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_slopes(self) -> "PredicateModel":
        for name in ("above_slope", "below_slope"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        return self

    def is_unconstrained(self) -> bool:
        """Return True if this model admits every cell."""
        return self == PredicateModel()


# ---------------------------------------------------------------------------
# MutationTarget (tagged variant)
# ---------------------------------------------------------------------------
class SetLayer(BaseModel):
    """Paint a boolean layer onto admitted cells."""

    kind: Literal["set_layer"] = "set_layer"
    layer: LayerId

    model_config = ConfigDict(frozen=True)

    def apply_to(self, grid: "GridAccessor", x: int, y: int) -> None:
        grid.set_layer_bit_at(self.layer, x, y, True)

    def describe(self) -> str:
        return f"set layer {self.layer!r}"


class ClearLayer(BaseModel):
    """Remove a boolean layer from admitted cells."""

    kind: Literal["clear_layer"] = "clear_layer"
    layer: LayerId

    model_config = ConfigDict(frozen=True)

    def apply_to(self, grid: "GridAccessor", x: int, y: int) -> None:
        grid.set_layer_bit_at(self.layer, x, y, False)

    def describe(self) -> str:
        return f"remove layer {self.layer!r}"


class SetTerrain(BaseModel):
    """Overwrite the terrain classification of admitted cells."""

    kind: Literal["set_terrain"] = "set_terrain"
    terrain: Terrain

    model_config = ConfigDict(frozen=True)

    def apply_to(self, grid: "GridAccessor", x: int, y: int) -> None:
        grid.set_terrain_at(x, y, self.terrain)

    def describe(self) -> str:
        return f"set terrain {self.terrain.value}"


MutationTarget = Annotated[
    Union[SetLayer, ClearLayer, SetTerrain], Field(discriminator="kind")
]


# ---------------------------------------------------------------------------
# Scan configuration and bookkeeping
# ---------------------------------------------------------------------------
class ScanOrder(str, Enum):
    """Iteration order of a full-grid scan. The result never depends on it."""

    ROW_MAJOR = "row_major"
    COLUMN_MAJOR = "column_major"


class ScanConfig(BaseModel):
    """Engine configuration.

    Fields:
        inclusive_upper_bound: Visit x0 + width and y0 + height as well,
            reproducing the legacy scan that runs one row and column past
            the nominal extent.
        order: Coordinate iteration order.
        completion_notice: Text returned by a builder's ``go()``.
    """

    inclusive_upper_bound: bool = False
    order: ScanOrder = ScanOrder.ROW_MAJOR
    completion_notice: str = DEFAULT_COMPLETION_NOTICE

    model_config = ConfigDict(frozen=True)


class ScanSummary(BaseModel):
    """Counts recorded by one completed scan."""

    target: MutationTarget
    extent: GridExtent
    cells_visited: int = Field(ge=0)
    cells_admitted: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_counts(self) -> "ScanSummary":
        if self.cells_admitted > self.cells_visited:
            raise ValueError(
                f"cells_admitted ({self.cells_admitted}) exceeds "
                f"cells_visited ({self.cells_visited})"
            )
        return self
