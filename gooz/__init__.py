"""
gooz -- G-code generator for cubes and cylinders.

Turns a handful of primitives placed on the build plate into a complete
FDM printer program, interleaving the layers of all objects.

Subpackages:
    configs: Print settings loading and validation
    planning: Build-volume check and pass planning
    shapes: Shape model and registry
    gcode: Motion/extrusion emitter
    toolpaths: Per-shape perimeter and infill generators
    scheduler: Interleaved layer scheduling
"""

__all__ = ["configs", "planning", "shapes", "gcode", "toolpaths", "scheduler", "job"]
