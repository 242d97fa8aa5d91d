"""G-code emitter -- motion and extrusion primitives over a text sink.

The emitter owns the :class:`MachineCursor` (nozzle position plus the
running extrusion value ``E``) and is the only writer to the output sink.
Path generators describe geometry exclusively through :meth:`move`,
:meth:`move_oozing` and :meth:`line`.

Feed rate convention:
    Python stores feed rates in **mm/s**.  This module converts to the
    G-code ``F`` parameter (mm/min) at the generation boundary::

        F_value = feed_mm_s * 60.0

Extrusion convention:
    Absolute extrusion (``G90``).  :meth:`line` accumulates onto the cursor
    ``E``.  :meth:`move_oozing` resets the counter (``G92 E0``) and leaves
    ``E`` at the oozing amount itself, not at a running total.

Extrusion length:
    Volume equivalence between the deposited bead and the filament fed::

        length_filament = bead_area * distance / (pi * (d_filament / 2)**2)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TextIO

from gooz.configs.loader import PrintSettings

logger = logging.getLogger(__name__)

TINY_Z = 5e-4
"""Z changes below this (mm) are treated as no change."""


class GCodeError(Exception):
    """Raised when G-code cannot be written to the output sink."""

    pass


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _f(feed_mm_s: float) -> str:
    """Convert mm/s feed rate to G-code ``F`` parameter (mm/min)."""
    return f"F{feed_mm_s * 60.0:.1f}"


@dataclass(slots=True)
class MachineCursor:
    """Last commanded nozzle position and extrusion value."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    e: float = 0.0

    def distance_to(self, x: float, y: float, z: float) -> float:
        return math.sqrt(
            (x - self.x) ** 2 + (y - self.y) ** 2 + (z - self.z) ** 2
        )


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------


class GCodeEmitter:
    """Write calibrated moves to a text sink.

    Parameters
    ----------
    settings : PrintSettings
        Validated print settings.
    out : TextIO
        Destination for G-code lines.  Any ``OSError`` raised by its
        ``write`` aborts generation as :class:`GCodeError`.
    """

    def __init__(self, settings: PrintSettings, out: TextIO) -> None:
        self._cfg = settings
        self._out = out
        self.cursor = MachineCursor()
        self.lines_written = 0

    # ------------------------------------------------------------------
    # Extrusion math
    # ------------------------------------------------------------------

    def extrusion_length(self, area_mm2: float, length_mm: float) -> float:
        """Filament length feeding *area_mm2* of bead over *length_mm*."""
        return area_mm2 * length_mm / self._cfg.extruder.filament_area_mm2

    def bead_area(self, width: float) -> float:
        """Deposited cross-section for a bead of nominal *width*."""
        return (
            width
            * self._cfg.layer_height
            * self._cfg.extruder.print_width_ratio
        )

    # ------------------------------------------------------------------
    # Motion primitives
    # ------------------------------------------------------------------

    def move(self, x: float, y: float, z: float) -> None:
        """Travel without extruding.

        Rising moves lift Z before moving in XY; descending moves go in XY
        first and lower Z at the destination.
        """
        travel = _f(self._cfg.speeds.travel_mm_s)
        if z > self.cursor.z + TINY_Z:
            self._write(f"G1 Z{z:.2f} {travel} ; Move head up")
            self._write(f"G1 X{x:.2f} Y{y:.2f} {travel} ; Move head in XY plane")
        elif z < self.cursor.z - TINY_Z:
            self._write(f"G1 X{x:.2f} Y{y:.2f} {travel} ; Move head in XY plane")
            self._write(f"G1 Z{z:.2f} {travel} ; Move head down")
        else:
            self._write(f"G1 X{x:.2f} Y{y:.2f} {travel} ; Move head in XY plane")
        self._set(x, y, z, self.cursor.e)

    def move_oozing(self, x: float, y: float, z: float) -> None:
        """Travel between printed features while compensating ooze.

        Resets the extrusion counter, lifts by ``oozing.z_security_mm``
        while feeding a share of the compensation proportional to the
        vertical part of the move, feeds the rest on the way to the XY
        midpoint, finishes the XY travel dry and lowers back to *z*.
        """
        oz = self._cfg.oozing
        c = self.cursor
        area = self.bead_area(self._cfg.nozzle_diameter)
        dx = abs(x - c.x)
        dy = abs(y - c.y)
        dz = abs(z - c.z)
        dist = math.sqrt(dx * dx + dy * dy + dz * dz)
        e = self.extrusion_length(area, dist * oz.ratio)
        sec = oz.z_security_mm
        span = dx + dy + dz + sec
        e_up = e * (dz + sec) / span if span > 0 else 0.0
        travel = _f(self._cfg.speeds.travel_mm_s)

        self._write("; anti-oozing travel")
        self._write("G92 E0 ; Reset extrusion")
        self._write(f"G1 Z{z + sec:.2f} E{e_up:.2f} {travel} ; Add oozing up")
        self._write(
            f"G1 X{(c.x + x) / 2:.2f} Y{(c.y + y) / 2:.2f} E{e:.2f} {travel}"
            " ; Add oozing in XY plane"
        )
        self._write(f"G1 X{x:.2f} Y{y:.2f} {travel} ; Add oozing in XY plane")
        self._write(f"G1 Z{z:.2f} {travel} ; Remove oozing security")
        self._set(x, y, z, e)

    def line(
        self,
        x: float,
        y: float,
        z: float,
        width: float,
        extrusion_digits: int = 2,
    ) -> float:
        """Extrude a straight bead of *width* from the cursor to ``(x, y, z)``.

        Parameters
        ----------
        x, y, z : float
            End point (mm).
        width : float
            Nominal bead width (mm).
        extrusion_digits : int
            Decimal places of the ``E`` word.

        Returns
        -------
        float
            Filament length fed for this segment.
        """
        dist = self.cursor.distance_to(x, y, z)
        e = self.extrusion_length(self.bead_area(width), dist)
        total = self.cursor.e + e
        self._write(
            f"G1 X{x:.2f} Y{y:.2f} Z{z:.2f} E{total:.{extrusion_digits}f} "
            f"{_f(self._cfg.speeds.print_mm_s)} ; Add line"
        )
        self._set(x, y, z, total)
        return e

    def reset_extrusion(self) -> None:
        """Zero the extrusion counter (``G92 E0``)."""
        self._write("G92 E0 ; Reset extrusion")
        self.cursor.e = 0.0

    def comment(self, text: str) -> None:
        self._write(f"; {text}")

    # ------------------------------------------------------------------
    # Start / end sequences
    # ------------------------------------------------------------------

    def write_startup(self) -> None:
        """Heat, home, zero all axes and prime the nozzle."""
        t = self._cfg.temperatures
        lh = self._cfg.layer_height
        self._write("; START G-code")
        self._write("G90 ; use absolute coordinates")
        self._write(f"M140 S{t.bed_c} ; Bed temp")
        self._write(f"M104 S{t.nozzle_c} ; Nozzle temp")
        self._write(f"M190 S{t.bed_c} ; Wait bed")
        self._write(f"M109 S{t.nozzle_c} ; Wait nozzle")
        self._write("G28 ; Home axes")
        self._write("G92 X0 Y0 Z0 E0 ; Reset coordinates")
        self._write("")
        self.cursor = MachineCursor()

        self.move(0.0, 0.0, lh)
        self.line(
            self._cfg.startup.prime_line_length_mm, 0.0, lh,
            self._cfg.nozzle_diameter,
        )
        self.line(0.0, 0.0, lh, self._cfg.nozzle_diameter)

    def write_shutdown(self) -> None:
        """Heaters off, park the head, release the motors."""
        sh = self._cfg.shutdown
        self._write("; END G-code")
        self._write("M104 S0 ; Nozzle off")
        self._write("M140 S0 ; Bed off")
        self._write(
            f"G1 X{sh.park_x_mm:.2f} Y{sh.park_y_mm:.2f} "
            f"{_f(self._cfg.speeds.travel_mm_s)} ; Park head"
        )
        self._write("M84 ; Disable motors")
        self._set(sh.park_x_mm, sh.park_y_mm, self.cursor.z, self.cursor.e)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _set(self, x: float, y: float, z: float, e: float) -> None:
        self.cursor.x = x
        self.cursor.y = y
        self.cursor.z = z
        self.cursor.e = e

    def _write(self, text: str) -> None:
        try:
            self._out.write(text + "\n")
        except OSError as exc:
            raise GCodeError(
                f"Failed to write G-code after {self.lines_written} line(s): "
                f"{exc}"
            ) from exc
        self.lines_written += 1
