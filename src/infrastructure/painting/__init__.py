"""Infrastructure adapters for the painting bounded context.

Provides a numpy-backed implementation of the GridAccessor port.
"""

from .numpy_grid import NumpyGridAccessor, derive_slopes

__all__ = ["NumpyGridAccessor", "derive_slopes"]
