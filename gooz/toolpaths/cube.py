"""Cube toolpaths -- perimeter and three interchangeable infill patterns.

Every function draws one layer of one cube at the layer the scheduler has
just advanced to, purely through :class:`~gooz.gcode.emitter.GCodeEmitter`
calls.  Corners are always listed in the same order::

    1 ----> 2        0: (-s, -s)   1: (-s, +s)
    ^       |        2: (+s, +s)   3: (+s, -s)
    |       v
    0 <---- 3        walking 0 -> 1 -> 2 -> 3 is clockwise seen from above

Infill geometry:
    The infill square spans ``side - 2 * nozzle`` and is tiled by
    ``n = pass_count(span, nozzle)`` beads of width ``w = span / n``.  Bead
    centre lines of the outermost infill ring sit at ``+-(span - w) / 2``.
"""

from __future__ import annotations

import logging

from gooz.configs.loader import PrintSettings
from gooz.gcode.emitter import GCodeEmitter
from gooz.planning.passes import nearest_index, pass_count
from gooz.shapes.models import CubeGeometry, Shape

logger = logging.getLogger(__name__)

# Direction from corner i to corner i + 1.
_CLOCKWISE: tuple[tuple[float, float], ...] = (
    (0.0, 1.0),
    (1.0, 0.0),
    (0.0, -1.0),
    (-1.0, 0.0),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _square(x: float, y: float, s: float) -> list[tuple[float, float]]:
    return [(x - s, y - s), (x - s, y + s), (x + s, y + s), (x + s, y - s)]


def _side(shape: Shape) -> float:
    if not isinstance(shape.geometry, CubeGeometry):
        raise TypeError(f"Shape #{shape.key} is not a cube")
    return shape.geometry.side


def _layer_z(shape: Shape, settings: PrintSettings) -> float:
    return shape.cursor.layer_z(settings.layers.adhesion_offset_mm)


def _infill_plan(
    shape: Shape, settings: PrintSettings,
) -> tuple[int, float, float] | None:
    """Return ``(passes, bead_width, half_span)`` or ``None`` if no room."""
    span = _side(shape) - 2.0 * settings.nozzle_diameter
    if span <= 0.0:
        logger.debug("Cube #%d too small for infill", shape.key)
        return None
    n = pass_count(span, settings.nozzle_diameter)
    w = span / n
    return n, w, (span - w) / 2.0


# ---------------------------------------------------------------------------
# Perimeter
# ---------------------------------------------------------------------------


def cube_perimeter(
    emitter: GCodeEmitter, shape: Shape, settings: PrintSettings,
) -> None:
    """Outline the cube, starting from the corner nearest the nozzle.

    Corners are inset by half a nozzle so the outer edge of the bead is
    flush with the nominal side.  The approach uses an anti-oozing travel.
    """
    z = _layer_z(shape, settings)
    nozzle = settings.nozzle_diameter
    corners = _square(shape.x, shape.y, _side(shape) / 2.0 - nozzle / 2.0)
    start = nearest_index(corners, emitter.cursor.x, emitter.cursor.y)

    emitter.move_oozing(corners[start][0], corners[start][1], z)
    emitter.comment(
        f"cube #{shape.key} perimeter layer {shape.cursor.current_layer}"
    )
    for i in range(1, 5):
        cx, cy = corners[(start + i) % 4]
        emitter.line(cx, cy, z, nozzle)


# ---------------------------------------------------------------------------
# Infill patterns
# ---------------------------------------------------------------------------


def cube_infill_spiral_inward(
    emitter: GCodeEmitter, shape: Shape, settings: PrintSettings,
) -> None:
    """Square spiral from the outer infill ring toward the centre.

    Starts at the ring corner nearest the nozzle, runs one full side of
    ``(n - 1) * w``, then pairs of sides of ``(n - 1) * w, ..., 1 * w``,
    turning clockwise like the perimeter.
    """
    plan = _infill_plan(shape, settings)
    if plan is None:
        return
    n, w, half = plan
    z = _layer_z(shape, settings)
    corners = _square(shape.x, shape.y, half)
    start = nearest_index(corners, emitter.cursor.x, emitter.cursor.y)

    emitter.comment(
        f"cube #{shape.key} infill layer {shape.cursor.current_layer}"
    )
    cx, cy = corners[start]
    emitter.move(cx, cy, z)

    lengths = [n - 1] + [i for i in range(n - 1, 0, -1) for _ in range(2)]
    for step, length in enumerate(lengths):
        dx, dy = _CLOCKWISE[(start + step) % 4]
        cx += dx * length * w
        cy += dy * length * w
        emitter.line(cx, cy, z, w)


def cube_infill_spiral_outward(
    emitter: GCodeEmitter, shape: Shape, settings: PrintSettings,
) -> None:
    """Square spiral from the centre out to the outer infill ring.

    Odd pass counts start on the centre point; the turning sense flips on
    every layer so successive layers cross.  Even pass counts start on the
    nearest corner of the central ``w x w`` square and first head across
    it along Y.  Side lengths grow ``1, 1, 2, 2, ..., n-1, n-1`` beads with
    a closing ``n - 1`` side.
    """
    plan = _infill_plan(shape, settings)
    if plan is None:
        return
    n, w, _ = plan
    z = _layer_z(shape, settings)

    if n % 2:
        sx, sy = shape.x, shape.y
        sign = 1.0 if shape.cursor.current_layer % 2 else -1.0
        axes = ((0, sign), (1, sign))
    else:
        centre = _square(shape.x, shape.y, w / 2.0)
        sx, sy = centre[
            nearest_index(centre, emitter.cursor.x, emitter.cursor.y)
        ]
        axes = (
            (1, 1.0 if sy < shape.y else -1.0),
            (0, 1.0 if sx < shape.x else -1.0),
        )

    emitter.comment(
        f"cube #{shape.key} infill layer {shape.cursor.current_layer}"
    )
    emitter.move(sx, sy, z)

    pos = [sx, sy]
    k = 1.0
    for i in range(1, n):
        for axis, sign in axes:
            pos[axis] += sign * w * i * k
            emitter.line(pos[0], pos[1], z, w)
        k = -k
    axis, sign = axes[0]
    pos[axis] += sign * w * (n - 1) * k
    emitter.line(pos[0], pos[1], z, w)


def cube_infill_boustrophedon(
    emitter: GCodeEmitter, shape: Shape, settings: PrintSettings,
) -> None:
    """Back-and-forth lines parallel to Y.

    Starts at the infill corner nearest the nozzle and steps one bead width
    along X toward the opposite side after each line (dry travel).
    """
    plan = _infill_plan(shape, settings)
    if plan is None:
        return
    n, w, half = plan
    z = _layer_z(shape, settings)
    corners = _square(shape.x, shape.y, half)
    sx, sy = corners[nearest_index(corners, emitter.cursor.x, emitter.cursor.y)]

    far_y = shape.y + half if sy < shape.y else shape.y - half
    x_step = w if sx < shape.x else -w

    emitter.comment(
        f"cube #{shape.key} infill layer {shape.cursor.current_layer}"
    )
    emitter.move(sx, sy, z)

    cx = sx
    for i in range(n):
        ty = far_y if i % 2 == 0 else sy
        emitter.line(cx, ty, z, w)
        if i < n - 1:
            cx += x_step
            emitter.move(cx, ty, z)


CUBE_INFILLS = {
    "spiral_inward": cube_infill_spiral_inward,
    "spiral_outward": cube_infill_spiral_outward,
    "boustrophedon": cube_infill_boustrophedon,
}
