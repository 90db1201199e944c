"""Painting Bounded Context - Domain Services.

Pure domain logic for filtered grid mutations: degree conversion, predicate
evaluation, and the single scan-and-apply engine shared by the set-layer,
remove-layer and set-terrain operations.

NO storage here - every cell read and write goes through the GridAccessor
port defined in `domain/painting/repositories.py`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from enum import Enum
from functools import cached_property
from typing import Protocol

from domain.painting.errors import (
    AccessorError,
    ConfigurationError,
    EngineBusyError,
    InvalidRangeError,
)
from domain.painting.repositories import GridAccessor
from domain.painting.value_objects import (
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

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
MAX_ABS_DEGREES = 90.0  # tan() diverges at +/-90 degrees

# Effects the engine knows how to apply
_TARGET_TYPES = (SetLayer, ClearLayer, SetTerrain)

# Exceptions from a grid accessor that abort a scan as AccessorError
_ACCESSOR_FAILURES: tuple[type[Exception], ...] = (
    LookupError,
    ValueError,
    TypeError,
    OSError,
)


# ---------------------------------------------------------------------------
# Degree Conversion
# ---------------------------------------------------------------------------
def degrees_to_slope(degrees: float) -> float:
    """Convert a surface angle in degrees to a rise/run slope ratio.

    Args:
        degrees: Angle in the open interval (-90, 90)

    Returns:
        tan(degrees * pi / 180)

    Raises:
        InvalidRangeError: If degrees is non-finite or outside (-90, 90)
    """
    degrees = float(degrees)
    if not math.isfinite(degrees) or not (-MAX_ABS_DEGREES < degrees < MAX_ABS_DEGREES):
        raise InvalidRangeError(
            f"Degrees must be within (-{MAX_ABS_DEGREES:g}, {MAX_ABS_DEGREES:g}), "
            f"got {degrees}"
        )
    return math.tan(degrees * (math.pi / 180))


# ---------------------------------------------------------------------------
# Cell Views
# ---------------------------------------------------------------------------
class CellSample(Protocol):
    """Read-only view of one cell as seen by the predicate evaluator."""

    @property
    def height(self) -> int: ...

    @property
    def slope(self) -> float: ...

    @property
    def terrain(self) -> Terrain: ...

    @property
    def water_level(self) -> int: ...

    def layer(self, layer_id: LayerId) -> bool: ...


class CellView:
    """Lazy view of one grid cell.

    Height and slope are fetched once on construction. Terrain, water level
    and layer bits are fetched on first use only, at most once each.
    """

    def __init__(self, grid: GridAccessor, x: int, y: int) -> None:
        self._grid = grid
        self.x = x
        self.y = y
        self.height = grid.get_height_at(x, y)
        self.slope = grid.get_slope_at(x, y)
        self._layers: dict[LayerId, bool] = {}

    @cached_property
    def terrain(self) -> Terrain:
        return self._grid.get_terrain_at(self.x, self.y)

    @cached_property
    def water_level(self) -> int:
        return self._grid.get_water_level_at(self.x, self.y)

    def layer(self, layer_id: LayerId) -> bool:
        if layer_id not in self._layers:
            self._layers[layer_id] = bool(
                self._grid.get_layer_bit_at(layer_id, self.x, self.y)
            )
        return self._layers[layer_id]


# ---------------------------------------------------------------------------
# Predicate Evaluation
# ---------------------------------------------------------------------------
def _any_layer(layers: frozenset[LayerId], cell: CellSample) -> bool:
    return any(cell.layer(layer_id) for layer_id in layers)


def _is_submerged(cell: CellSample) -> bool:
    return cell.height < cell.water_level


def _bounds_clause(value: float, above: float | None, below: float | None) -> bool:
    """Evaluate a level or slope clause.

    The two bounds are OR-ed: with both set, cells inside the band
    (below, above) are rejected and cells at or beyond either bound pass.
    """
    if above is None and below is None:
        return True
    return (below is not None and value <= below) or (
        above is not None and value >= above
    )


def admits(model: PredicateModel, cell: CellSample) -> bool:
    """Return True if the cell satisfies every clause of the model.

    Clauses are AND-ed and evaluated in order, so attributes needed only by a
    later clause are never read once an earlier clause rejects the cell.
    """
    return (
        # Terrain allow / deny
        (not model.only_on_terrain or cell.terrain in model.only_on_terrain)
        and (not model.except_on_terrain or cell.terrain not in model.except_on_terrain)
        # Layer allow / deny
        and (not model.only_on_layer or _any_layer(model.only_on_layer, cell))
        and not _any_layer(model.except_on_layer, cell)
        # Water allow / deny
        and (not model.only_on_water or _is_submerged(cell))
        and (not model.except_on_water or not _is_submerged(cell))
        # Level and slope bounds
        and _bounds_clause(cell.height, model.above_level, model.below_level)
        and _bounds_clause(cell.slope, model.above_slope, model.below_slope)
    )


# ---------------------------------------------------------------------------
# Scan Iteration
# ---------------------------------------------------------------------------
def iter_coordinates(
    extent: GridExtent, config: ScanConfig | None = None
) -> Iterator[tuple[int, int]]:
    """Yield every (x, y) of a scan exactly once, in the configured order."""
    config = config or ScanConfig()
    xs = extent.x_range(config.inclusive_upper_bound)
    ys = extent.y_range(config.inclusive_upper_bound)
    if config.order is ScanOrder.COLUMN_MAJOR:
        for x in xs:
            for y in ys:
                yield x, y
    else:
        for y in ys:
            for x in xs:
                yield x, y


# ---------------------------------------------------------------------------
# Mutation Engine
# ---------------------------------------------------------------------------
class EngineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class MutationEngine:
    """Full-grid scan that applies one mutation to every admitted cell.

    Not reentrant: calling apply() while a scan is running raises
    EngineBusyError. A scan always runs to completion unless the grid
    accessor fails, in which case earlier mutations are kept.
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()
        self._state = EngineState.IDLE

    @property
    def state(self) -> EngineState:
        return self._state

    def apply(
        self, model: PredicateModel, target: MutationTarget, grid: GridAccessor
    ) -> ScanSummary:
        """Scan the grid once and mutate every cell the model admits.

        Args:
            model: Filter conditions
            target: Effect applied to admitted cells
            grid: Grid accessor to read from and write to

        Returns:
            ScanSummary with visit and admission counts

        Raises:
            ConfigurationError: If target is not a SetLayer, ClearLayer or
                SetTerrain (checked before any grid access)
            EngineBusyError: If a scan is already running on this engine
            AccessorError: If the grid fails mid-scan (no rollback)
        """
        if not isinstance(target, _TARGET_TYPES):
            raise ConfigurationError(
                f"Mutation target must be one of SetLayer, ClearLayer, SetTerrain; "
                f"got {target!r}"
            )

        if self._state is EngineState.RUNNING:
            raise EngineBusyError("Mutation engine is already running a scan")

        self._state = EngineState.RUNNING
        try:
            return self._scan(model, target, grid)
        finally:
            self._state = EngineState.IDLE

    def _scan(
        self, model: PredicateModel, target: MutationTarget, grid: GridAccessor
    ) -> ScanSummary:
        try:
            extent = grid.get_extent()
        except _ACCESSOR_FAILURES as exc:
            raise AccessorError(f"Could not read grid extent: {exc}") from exc

        inclusive = self.config.inclusive_upper_bound
        logger.info(
            "Scan started: %s over %d cells (origin=(%d, %d), inclusive=%s)",
            target.describe(),
            extent.cell_count(inclusive),
            extent.x0,
            extent.y0,
            inclusive,
        )

        visited = 0
        admitted = 0
        for x, y in iter_coordinates(extent, self.config):
            try:
                if admits(model, CellView(grid, x, y)):
                    target.apply_to(grid, x, y)
                    admitted += 1
            except AccessorError as exc:
                logger.error(
                    "Scan aborted at (%d, %d) after %d cells: %s", x, y, visited, exc
                )
                raise
            except _ACCESSOR_FAILURES as exc:
                logger.error(
                    "Scan aborted at (%d, %d) after %d cells: %s", x, y, visited, exc
                )
                raise AccessorError(
                    f"Grid access failed at ({x}, {y}): {exc}", x=x, y=y
                ) from exc
            visited += 1

        summary = ScanSummary(
            target=target,
            extent=extent,
            cells_visited=visited,
            cells_admitted=admitted,
        )
        logger.info(
            "Scan complete: %s on %d of %d cells",
            target.describe(),
            admitted,
            visited,
        )
        return summary
