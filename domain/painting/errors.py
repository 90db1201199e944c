"""Painting Bounded Context - Error Hierarchy.

Custom exceptions for filtered grid mutations.

Configuration errors are raised before any grid access; accessor errors abort
a scan in progress. Cells mutated before an abort are not rolled back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.painting.value_objects import GridExtent


class PaintingError(Exception):
    """Base error for painting operations."""


class ConfigurationError(PaintingError):
    """Filter chain is incomplete or inconsistent (e.g. no target selected)."""


class InvalidRangeError(PaintingError):
    """Degree input cannot be converted to a finite slope ratio."""


class EngineBusyError(PaintingError):
    """Mutation engine was re-entered while a scan is running."""


# ---------------------------------------------------------------------------
# Grid accessor failures
# ---------------------------------------------------------------------------
class AccessorError(PaintingError):
    """Grid accessor failed; the scan in progress is aborted.

    Attributes:
        x: Column of the failing cell, if known
        y: Row of the failing cell, if known
    """

    def __init__(self, message: str, x: int | None = None, y: int | None = None):
        self.x = x
        self.y = y
        super().__init__(message)


class CoordinateOutOfBoundsError(AccessorError):
    """Coordinate lies outside the grid extent.

    Attributes:
        extent: The grid's GridExtent
    """

    def __init__(self, x: int, y: int, extent: "GridExtent") -> None:
        self.extent = extent
        super().__init__(
            f"Cell ({x}, {y}) outside extent "
            f"[x: {extent.x0} to {extent.x0 + extent.width - 1}, "
            f"y: {extent.y0} to {extent.y0 + extent.height - 1}]",
            x=x,
            y=y,
        )
