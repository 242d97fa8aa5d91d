"""Shape descriptors -- the data contract between registry and toolpaths.

Geometry is an immutable, slotted dataclass per primitive family.  All
lengths are in **millimetres**; ``(x, y)`` is the footprint centre on the
build plate (machine coordinates, origin at the plate corner).

Slicing progress
----------------
Each shape carries a :class:`SlicingCursor`, a small state machine driven
one step per scheduler visit::

    PENDING --advance--> IN_PROGRESS --advance--> ... --finish--> DONE

``total_layers`` and ``layer_height`` are fixed at registration; only the
scheduler moves ``current_layer``, by exactly one per visit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from gooz.configs.loader import InfillPattern


class SlicingError(Exception):
    """Raised when a finished shape is advanced again."""

    pass


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CubeGeometry:
    """Axis-aligned cube standing on the plate.

    Parameters
    ----------
    side : float
        Edge length (mm); also the printed height.
    """

    side: float

    @property
    def height(self) -> float:
        return self.side

    @property
    def half_width(self) -> float:
        return self.side / 2.0


@dataclass(frozen=True, slots=True)
class CylinderGeometry:
    """Vertical cylinder standing on the plate.

    Parameters
    ----------
    radius : float
        Outline radius (mm).
    height : float
        Printed height (mm).
    """

    radius: float
    height: float

    @property
    def half_width(self) -> float:
        return self.radius


Geometry = CubeGeometry | CylinderGeometry


# ---------------------------------------------------------------------------
# Slicing cursor
# ---------------------------------------------------------------------------


class ShapeState(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass(slots=True)
class SlicingCursor:
    """Per-shape layer progress.

    Parameters
    ----------
    total_layers : int
        Number of layers covering the shape height (``>= 1``).
    layer_height : float
        Height of one layer of this shape (mm).
    """

    total_layers: int
    layer_height: float
    current_layer: int = 0
    state: ShapeState = ShapeState.PENDING

    def __post_init__(self) -> None:
        if self.total_layers < 1:
            raise ValueError(
                f"total_layers must be >= 1, got {self.total_layers}"
            )

    @property
    def exhausted(self) -> bool:
        """``True`` once every layer has been handed out."""
        return self.current_layer >= self.total_layers

    def advance(self) -> int | None:
        """Step to the next layer.

        Returns
        -------
        int | None
            The new 1-based layer index, or ``None`` when the cursor would
            pass ``total_layers`` (the shape is then ``DONE`` and the
            counter is left at ``total_layers``).

        Raises
        ------
        SlicingError
            If the shape is already ``DONE``.
        """
        if self.state is ShapeState.DONE:
            raise SlicingError("Cannot advance a shape that is already done")
        if self.exhausted:
            self.state = ShapeState.DONE
            return None
        self.current_layer += 1
        self.state = ShapeState.IN_PROGRESS
        return self.current_layer

    def finish(self) -> None:
        """Mark the shape ``DONE`` after its last layer was generated."""
        if not self.exhausted:
            raise SlicingError(
                f"Shape finished early at layer {self.current_layer} "
                f"of {self.total_layers}"
            )
        self.state = ShapeState.DONE

    def layer_z(self, adhesion_offset: float) -> float:
        """Nozzle Z for the current layer (top of layer minus offset)."""
        return self.current_layer * self.layer_height - adhesion_offset


# ---------------------------------------------------------------------------
# Shape
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class Shape:
    """A registered primitive.

    Parameters
    ----------
    key : int
        Identity assigned by the registry; stable for the shape's lifetime.
    x, y : float
        Footprint centre (mm).
    geometry : CubeGeometry | CylinderGeometry
        Kind-specific dimensions.
    cursor : SlicingCursor
        Layer progress.
    infill : InfillPattern | None
        Interior fill policy (cubes only; ``None`` for cylinders).
    """

    key: int
    x: float
    y: float
    geometry: Geometry
    cursor: SlicingCursor
    infill: InfillPattern | None = None

    @property
    def kind(self) -> str:
        return "cube" if isinstance(self.geometry, CubeGeometry) else "cylinder"
