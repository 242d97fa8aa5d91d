"""Per-layer dispatch from a shape to its path generators."""

from __future__ import annotations

import logging

from gooz.configs.loader import PrintSettings
from gooz.gcode.emitter import GCodeEmitter
from gooz.shapes.models import CubeGeometry, CylinderGeometry, Shape
from gooz.toolpaths.cube import CUBE_INFILLS, cube_perimeter
from gooz.toolpaths.cylinder import cylinder_perimeter

logger = logging.getLogger(__name__)


def generate_layer(
    emitter: GCodeEmitter, shape: Shape, settings: PrintSettings,
) -> None:
    """Emit the current layer of *shape*.

    Cubes get their perimeter followed by the shape's infill pattern;
    cylinders get their perimeter only.

    Raises
    ------
    TypeError
        If the shape geometry has no path generator.
    """
    logger.debug(
        "Shape #%d (%s): layer %d/%d",
        shape.key,
        shape.kind,
        shape.cursor.current_layer,
        shape.cursor.total_layers,
    )
    if isinstance(shape.geometry, CubeGeometry):
        cube_perimeter(emitter, shape, settings)
        infill = shape.infill or settings.toolpaths.default_infill
        CUBE_INFILLS[infill](emitter, shape, settings)
    elif isinstance(shape.geometry, CylinderGeometry):
        cylinder_perimeter(emitter, shape, settings)
    else:
        raise TypeError(
            f"No toolpath for geometry {type(shape.geometry).__name__}"
        )
