"""Cylinder toolpath -- polygonal perimeter, no infill."""

from __future__ import annotations

import math

from gooz.configs.loader import PrintSettings
from gooz.gcode.emitter import GCodeEmitter
from gooz.shapes.models import CylinderGeometry, Shape


def cylinder_perimeter(
    emitter: GCodeEmitter, shape: Shape, settings: PrintSettings,
) -> None:
    """Trace the outline as a regular polygon, then zero the extruder.

    The polygon has ``settings.toolpaths.cylinder_segments`` sides and
    starts at ``(x + r, y)``, going counter-clockwise.  Segment extrusion is
    printed with five decimals since each increment is small.  The closing
    ``G92 E0`` keeps every cylinder layer's extrusion count independent.
    """
    if not isinstance(shape.geometry, CylinderGeometry):
        raise TypeError(f"Shape #{shape.key} is not a cylinder")
    z = shape.cursor.layer_z(settings.layers.adhesion_offset_mm)
    r = shape.geometry.radius
    segments = settings.toolpaths.cylinder_segments
    step = 2.0 * math.pi / segments

    emitter.move(shape.x + r, shape.y, z)
    emitter.comment(
        f"cylinder #{shape.key} perimeter layer {shape.cursor.current_layer}"
    )
    for i in range(1, segments + 1):
        angle = i * step
        emitter.line(
            shape.x + r * math.cos(angle),
            shape.y + r * math.sin(angle),
            z,
            settings.nozzle_diameter,
            extrusion_digits=5,
        )
    emitter.reset_extrusion()
