"""Build-volume check for shape placement."""

from __future__ import annotations

import math

from gooz.configs.loader import PrintSettings


def fits(
    settings: PrintSettings,
    x: float,
    y: float,
    half_width: float,
    height: float,
) -> bool:
    """Return ``True`` if a footprint centred at ``(x, y)`` fits the plate.

    Parameters
    ----------
    settings : PrintSettings
        Provides the build volume.
    x, y : float
        Footprint centre (mm).
    half_width : float
        Half-extent of the footprint on both axes (cube half-side or
        cylinder radius).
    height : float
        Shape height (mm).

    Notes
    -----
    NaN or infinite inputs never fit.
    """
    bv = settings.build_volume
    if not all(math.isfinite(v) for v in (x, y, half_width, height)):
        return False
    if half_width < 0 or height < 0:
        return False
    if x - half_width < 0 or y - half_width < 0:
        return False
    if x + half_width > bv.x or y + half_width > bv.y:
        return False
    if height > bv.z:
        return False
    return True
