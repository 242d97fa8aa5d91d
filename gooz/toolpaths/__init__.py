"""
Shape path generators.

Per-shape algorithms that draw one layer as a sequence of emitter calls.
"""

from gooz.toolpaths.cube import (
    CUBE_INFILLS,
    cube_infill_boustrophedon,
    cube_infill_spiral_inward,
    cube_infill_spiral_outward,
    cube_perimeter,
)
from gooz.toolpaths.cylinder import cylinder_perimeter
from gooz.toolpaths.layer import generate_layer

__all__ = [
    "CUBE_INFILLS",
    "cube_infill_boustrophedon",
    "cube_infill_spiral_inward",
    "cube_infill_spiral_outward",
    "cube_perimeter",
    "cylinder_perimeter",
    "generate_layer",
]
