"""Painting Bounded Context.

Responsible for filtered bulk mutations of a 2D grid:
- Value Objects: GridExtent, CellAttributes, PredicateModel, MutationTarget
- Services: admits (predicate evaluation), MutationEngine (scan and apply)
- Builders: set_layer, remove_layer, set_terrain
- Ports: GridAccessor
"""

from domain.painting.builder import (
    FilterBuilder,
    LayerBuilder,
    RemoveLayerBuilder,
    SetLayerBuilder,
    SetTerrainBuilder,
    remove_layer,
    set_layer,
    set_terrain,
)
from domain.painting.errors import (
    AccessorError,
    ConfigurationError,
    CoordinateOutOfBoundsError,
    EngineBusyError,
    InvalidRangeError,
    PaintingError,
)
from domain.painting.repositories import GridAccessor
from domain.painting.services import (
    CellView,
    EngineState,
    MutationEngine,
    admits,
    degrees_to_slope,
    iter_coordinates,
)
from domain.painting.value_objects import (
    CellAttributes,
    ClearLayer,
    GridExtent,
    LayerId,
    MutationTarget,
    PredicateModel,
    ScanConfig,
    ScanOrder,
    ScanSummary,
    SetLayer,
    SetTerrain,
    Terrain,
)

__all__ = [
    "AccessorError",
    "CellAttributes",
    "CellView",
    "ClearLayer",
    "ConfigurationError",
    "CoordinateOutOfBoundsError",
    "EngineBusyError",
    "EngineState",
    "FilterBuilder",
    "GridAccessor",
    "GridExtent",
    "InvalidRangeError",
    "LayerBuilder",
    "LayerId",
    "MutationEngine",
    "MutationTarget",
    "PaintingError",
    "PredicateModel",
    "RemoveLayerBuilder",
    "ScanConfig",
    "ScanOrder",
    "ScanSummary",
    "SetLayer",
    "SetLayerBuilder",
    "SetTerrain",
    "SetTerrainBuilder",
    "Terrain",
    "admits",
    "degrees_to_slope",
    "iter_coordinates",
    "remove_layer",
    "set_layer",
    "set_terrain",
]
