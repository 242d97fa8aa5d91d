"""
Shape model and registry.

Defines the printable primitives (cube, cylinder), their slicing cursors,
and the registry that validates and stores them.
"""

from gooz.shapes.models import (
    CubeGeometry,
    CylinderGeometry,
    Shape,
    ShapeState,
    SlicingCursor,
    SlicingError,
)
from gooz.shapes.registry import (
    OutOfBoundsError,
    ShapeAllocationError,
    ShapeError,
    ShapeLookupError,
    ShapeRegistry,
)

__all__ = [
    "CubeGeometry",
    "CylinderGeometry",
    "OutOfBoundsError",
    "Shape",
    "ShapeAllocationError",
    "ShapeError",
    "ShapeLookupError",
    "ShapeRegistry",
    "ShapeState",
    "SlicingCursor",
    "SlicingError",
]
