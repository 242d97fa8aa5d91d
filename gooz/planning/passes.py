"""Pass planning -- best integer approximation of a target pitch.

The same question comes up twice when slicing a primitive:

* how many layers of roughly ``layer_height`` cover a shape's height,
* how many parallel beads of roughly ``nozzle_diameter`` cover an infill span.

Both are answered by :func:`pass_count`, which picks the integer count whose
actual spacing deviates least from the ideal one.
"""

from __future__ import annotations

import math
from collections.abc import Sequence


def pass_count(total_span: float, ideal_spacing: float) -> int:
    """Choose how many passes evenly tile *total_span*.

    Parameters
    ----------
    total_span : float
        Length to cover (mm).
    ideal_spacing : float
        Target pitch between passes (mm).

    Returns
    -------
    int
        Pass count, always ``>= 1``.  Non-positive inputs yield ``1``.

    Notes
    -----
    With ``f = floor(total_span / ideal_spacing)`` the candidates are ``f``
    (spacing slightly too wide) and ``f + 1`` (slightly too narrow).  ``f`` is
    returned only when its error is strictly smaller.
    """
    if total_span <= 0.0 or ideal_spacing <= 0.0:
        return 1
    f = math.floor(total_span / ideal_spacing)
    if f < 1:
        return 1
    err_down = total_span / f - ideal_spacing
    err_up = ideal_spacing - total_span / (f + 1)
    return f if err_down < err_up else f + 1


def nearest_index(
    points: Sequence[tuple[float, float]], x: float, y: float,
) -> int:
    """Index of the point closest to ``(x, y)`` in the XY plane.

    Ties resolve to the lowest index.
    """
    if not points:
        raise ValueError("nearest_index requires at least one point")
    best = 0
    best_d2 = (points[0][0] - x) ** 2 + (points[0][1] - y) ** 2
    for i in range(1, len(points)):
        d2 = (points[i][0] - x) ** 2 + (points[i][1] - y) ** 2
        if d2 < best_d2:
            best = i
            best_d2 = d2
    return best
