"""Shape registry -- append-only storage of shapes to print.

Shapes are validated against the build volume before they are stored;
a rejected shape never touches the storage.  Keys are sequential integers
starting at 0 and are never reused until :meth:`ShapeRegistry.clear`.

Storage grows by doubling from an initial capacity of 8 slots.  A failed
growth is reported to the caller as :class:`ShapeAllocationError`; the
registry itself stays intact and usable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from gooz.configs.loader import INFILL_PATTERNS, InfillPattern, PrintSettings
from gooz.planning.build_volume import fits
from gooz.planning.passes import pass_count
from gooz.shapes.models import (
    CubeGeometry,
    CylinderGeometry,
    Geometry,
    Shape,
    SlicingCursor,
)

logger = logging.getLogger(__name__)

INITIAL_CAPACITY = 8


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ShapeError(Exception):
    """Base class for shape registration and lookup errors."""

    pass


class OutOfBoundsError(ShapeError):
    """Raised when a shape does not fit inside the printable volume."""

    pass


class ShapeAllocationError(ShapeError):
    """Raised when the registry storage cannot grow."""

    pass


class ShapeLookupError(ShapeError, LookupError):
    """Raised when a key does not resolve to a registered shape."""

    pass


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ShapeRegistry:
    """Growable collection of shapes with per-shape slicing cursors.

    Parameters
    ----------
    settings : PrintSettings
        Provides build volume, layer height and the default infill.
    """

    def __init__(self, settings: PrintSettings) -> None:
        self._settings = settings
        self._slots: list[Shape | None] = []
        self._count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add_cube(
        self,
        x: float,
        y: float,
        size: float,
        infill: InfillPattern | None = None,
    ) -> int:
        """Register a cube of side *size* centred at ``(x, y)``.

        Parameters
        ----------
        x, y : float
            Footprint centre (mm).
        size : float
            Edge length (mm).
        infill : InfillPattern | None
            Interior fill policy.  ``None`` uses
            ``settings.toolpaths.default_infill``.

        Returns
        -------
        int
            Key of the new shape.

        Raises
        ------
        OutOfBoundsError
            If the cube does not fit the build volume, has a non-finite
            dimension, or is thinner than the adhesion offset.
        ShapeAllocationError
            If storage cannot grow.
        ValueError
            If *infill* is not a known pattern.
        """
        if infill is None:
            infill = self._settings.toolpaths.default_infill
        if infill not in INFILL_PATTERNS:
            raise ValueError(
                f"infill must be one of {INFILL_PATTERNS}, got {infill!r}"
            )
        return self._add(x, y, CubeGeometry(side=size), size, infill)

    def add_cylinder(
        self, x: float, y: float, radius: float, height: float,
    ) -> int:
        """Register a vertical cylinder centred at ``(x, y)``.

        Returns
        -------
        int
            Key of the new shape.

        Raises
        ------
        OutOfBoundsError
            If the cylinder does not fit the build volume, has a
            non-finite dimension, or is thinner than the adhesion offset.
        ShapeAllocationError
            If storage cannot grow.
        """
        return self._add(
            x, y, CylinderGeometry(radius=radius, height=height), height, None,
        )

    def get(self, key: int) -> Shape:
        """Resolve *key* to its shape.

        Raises
        ------
        ShapeLookupError
            If no shape with this key is registered.
        """
        if 0 <= key < self._count:
            shape = self._slots[key]
            if shape is not None and shape.key == key:
                return shape
        raise ShapeLookupError(f"No shape registered with key {key}")

    def keys(self) -> list[int]:
        return [shape.key for shape in self]

    def max_layers(self) -> int:
        """Largest ``total_layers`` over all shapes (0 when empty)."""
        return max((s.cursor.total_layers for s in self), default=0)

    def clear(self) -> None:
        """Release every shape and reset to an empty registry."""
        if self._count:
            logger.debug("Releasing %d shape(s)", self._count)
        self._slots = []
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Shape]:
        for i in range(self._count):
            shape = self._slots[i]
            if shape is not None:
                yield shape

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _add(
        self,
        x: float,
        y: float,
        geometry: Geometry,
        height: float,
        infill: InfillPattern | None,
    ) -> int:
        if not fits(self._settings, x, y, geometry.half_width, height):
            bv = self._settings.build_volume
            raise OutOfBoundsError(
                f"{type(geometry).__name__} at ({x:.2f}, {y:.2f}) with "
                f"half-width {geometry.half_width:.2f} and height "
                f"{height:.2f} does not fit build volume "
                f"{bv.x:.1f} x {bv.y:.1f} x {bv.z:.1f}"
            )
        total_layers = pass_count(height, self._settings.layer_height)
        offset = self._settings.layers.adhesion_offset_mm
        if height / total_layers <= offset:
            raise OutOfBoundsError(
                f"{type(geometry).__name__} at ({x:.2f}, {y:.2f}) with height "
                f"{height:.3f} is too thin: its first layer would sit at or "
                f"below the bed with a {offset:.2f} mm adhesion offset"
            )
        self._ensure_capacity(1)

        key = self._count
        shape = Shape(
            key=key,
            x=x,
            y=y,
            geometry=geometry,
            cursor=SlicingCursor(
                total_layers=total_layers,
                layer_height=height / total_layers,
            ),
            infill=infill,
        )
        self._slots[key] = shape
        self._count += 1
        logger.info(
            "Registered %s #%d at (%.2f, %.2f): %d layer(s) of %.3f mm",
            shape.kind,
            key,
            x,
            y,
            total_layers,
            shape.cursor.layer_height,
        )
        return key

    def _ensure_capacity(self, extra: int) -> None:
        capacity = len(self._slots)
        if self._count + extra <= capacity:
            return
        new_capacity = INITIAL_CAPACITY if capacity == 0 else capacity * 2
        try:
            self._slots.extend([None] * (new_capacity - capacity))
        except MemoryError as exc:
            raise ShapeAllocationError(
                f"Cannot grow shape storage from {capacity} to "
                f"{new_capacity} slots"
            ) from exc
