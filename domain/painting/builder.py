"""Painting Bounded Context - Filter Builders.

Fluent builders that accumulate a PredicateModel and a MutationTarget, run
the MutationEngine once on ``go()``, and reset themselves for the next chain.

One builder per mutation kind, all sharing the same filter setters:

    >>> set_layer(grid).layer_name("carpet").only_on_terrain(Terrain.SAND) \\
    ...     .except_on_water().above_level(75).go()
    'Execution complete.'

Setter order does not matter as long as ``go()`` comes last. Each setter
overwrites its field; repeated calls do not accumulate.
"""

from __future__ import annotations

import logging
import math
import numbers
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Self

from domain.painting.errors import ConfigurationError, InvalidRangeError
from domain.painting.repositories import GridAccessor
from domain.painting.services import MutationEngine, degrees_to_slope
from domain.painting.value_objects import (
    ClearLayer,
    LayerId,
    MutationTarget,
    PredicateModel,
    ScanConfig,
    SetLayer,
    SetTerrain,
    Terrain,
)

logger = logging.getLogger(__name__)


def _to_terrain(value: Terrain | str) -> Terrain:
    try:
        return Terrain(value)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown terrain: {value!r}") from exc


def _to_terrains(values: Iterable[Terrain | str]) -> frozenset[Terrain]:
    return frozenset(_to_terrain(v) for v in values)


def _to_layer(value: str) -> LayerId:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"Layer id must be a non-empty string, got {value!r}")
    return LayerId(value)


def _to_level(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"Level must be a number, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if not math.isfinite(value) or not float(value).is_integer():
        raise InvalidRangeError(f"Level must be a whole number, got {value}")
    return int(value)


class FilterBuilder(ABC):
    """Mutable accumulator for one filter chain.

    Subclasses provide the target-selecting setter and build the matching
    MutationTarget. Instances are independent: separate chains need
    separate builders, never shared state.
    """

    # Name of the target-selecting setter, used in error messages
    target_setter = "target"

    def __init__(
        self,
        grid: GridAccessor,
        config: ScanConfig | None = None,
        engine: MutationEngine | None = None,
    ) -> None:
        self._grid = grid
        self._engine = engine or MutationEngine(config)
        self.reset()

    # -----------------------------------------------------------------------
    # State
    # -----------------------------------------------------------------------
    def reset(self) -> None:
        """Restore every field and the target to its empty default."""
        self._target_id: LayerId | Terrain | None = None
        self._only_on_terrain: frozenset[Terrain] = frozenset()
        self._except_on_terrain: frozenset[Terrain] = frozenset()
        self._only_on_layer: frozenset[LayerId] = frozenset()
        self._except_on_layer: frozenset[LayerId] = frozenset()
        self._only_on_water = False
        self._except_on_water = False
        self._above_level: int | None = None
        self._below_level: int | None = None
        self._above_slope: float | None = None
        self._below_slope: float | None = None

    @property
    def target_id(self) -> LayerId | Terrain | None:
        return self._target_id

    def build_predicate(self) -> PredicateModel:
        """Materialize the current configuration without running it."""
        return PredicateModel(
            only_on_terrain=self._only_on_terrain,
            except_on_terrain=self._except_on_terrain,
            only_on_layer=self._only_on_layer,
            except_on_layer=self._except_on_layer,
            only_on_water=self._only_on_water,
            except_on_water=self._except_on_water,
            above_level=self._above_level,
            below_level=self._below_level,
            above_slope=self._above_slope,
            below_slope=self._below_slope,
        )

    @abstractmethod
    def _build_target(self) -> MutationTarget:
        """Build the MutationTarget for the selected target id."""

    # -----------------------------------------------------------------------
    # Filter setters
    # -----------------------------------------------------------------------
    def only_on_terrain(self, *terrains: Terrain | str) -> Self:
        self._only_on_terrain = _to_terrains(terrains)
        return self

    def except_on_terrain(self, *terrains: Terrain | str) -> Self:
        self._except_on_terrain = _to_terrains(terrains)
        return self

    def only_on_layer(self, *layers: str) -> Self:
        self._only_on_layer = frozenset(_to_layer(layer) for layer in layers)
        return self

    def except_on_layer(self, *layers: str) -> Self:
        self._except_on_layer = frozenset(_to_layer(layer) for layer in layers)
        return self

    def only_on_water(self) -> Self:
        self._only_on_water = True
        return self

    def except_on_water(self) -> Self:
        self._except_on_water = True
        return self

    def above_level(self, level: int) -> Self:
        """Admit cells at or above this height."""
        self._above_level = _to_level(level)
        return self

    def below_level(self, level: int) -> Self:
        """Admit cells at or below this height."""
        self._below_level = _to_level(level)
        return self

    def above_degrees(self, degrees: float) -> Self:
        """Admit cells at least this steep. Stored as a slope ratio."""
        self._above_slope = degrees_to_slope(degrees)
        return self

    def below_degrees(self, degrees: float) -> Self:
        """Admit cells at most this steep. Stored as a slope ratio."""
        self._below_slope = degrees_to_slope(degrees)
        return self

    # -----------------------------------------------------------------------
    # Terminal operation
    # -----------------------------------------------------------------------
    def go(self) -> str:
        """Run the configured mutation over the whole grid.

        The builder is reset afterwards, also when the scan aborts on an
        accessor failure. A missing target is reported before any grid
        access and leaves the configuration in place.

        Returns:
            The completion notice from the engine's ScanConfig.

        Raises:
            ConfigurationError: If no target was selected
            AccessorError: If the grid fails mid-scan
        """
        if self._target_id is None:
            raise ConfigurationError(
                f"{type(self).__name__}.go() called without {self.target_setter}()"
            )

        model = self.build_predicate()
        target = self._build_target()
        try:
            self._engine.apply(model, target, self._grid)
        finally:
            self.reset()
            logger.debug("%s reset after scan", type(self).__name__)
        return self._engine.config.completion_notice


class LayerBuilder(FilterBuilder):
    """Builder whose target is a layer, selected with layer_name()."""

    target_setter = "layer_name"

    def layer_name(self, layer: str) -> Self:
        self._target_id = _to_layer(layer)
        return self


class SetLayerBuilder(LayerBuilder):
    """Paint a layer on every admitted cell."""

    def _build_target(self) -> MutationTarget:
        return SetLayer(layer=self._target_id)


class RemoveLayerBuilder(LayerBuilder):
    """Remove a layer from every admitted cell."""

    def _build_target(self) -> MutationTarget:
        return ClearLayer(layer=self._target_id)


class SetTerrainBuilder(FilterBuilder):
    """Repaint the terrain of every admitted cell."""

    target_setter = "terrain_name"

    def terrain_name(self, terrain: Terrain | str) -> Self:
        self._target_id = _to_terrain(terrain)
        return self

    def _build_target(self) -> MutationTarget:
        return SetTerrain(terrain=self._target_id)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------
def set_layer(grid: GridAccessor, config: ScanConfig | None = None) -> SetLayerBuilder:
    """Start a chain that paints a layer."""
    return SetLayerBuilder(grid, config)


def remove_layer(
    grid: GridAccessor, config: ScanConfig | None = None
) -> RemoveLayerBuilder:
    """Start a chain that removes a layer."""
    return RemoveLayerBuilder(grid, config)


def set_terrain(
    grid: GridAccessor, config: ScanConfig | None = None
) -> SetTerrainBuilder:
    """Start a chain that repaints terrain."""
    return SetTerrainBuilder(grid, config)
