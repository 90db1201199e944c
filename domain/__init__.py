"""Grid Painter Domain Layer.

This package contains the core business logic organized by bounded contexts:
- painting: Filtered bulk mutations of grid layers and terrain
"""

from domain import painting

__all__ = ["painting"]
