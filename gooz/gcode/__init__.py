"""
G-code emission module.

Turns geometric moves into calibrated G-code lines and tracks the machine
cursor (position and extrusion).
"""

from gooz.gcode.emitter import GCodeEmitter, GCodeError, MachineCursor

__all__ = ["GCodeEmitter", "GCodeError", "MachineCursor"]
