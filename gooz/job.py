"""Print job -- registration, generation and teardown in one object.

Usage::

    from gooz.configs.loader import load_config
    from gooz.job import PrintJob

    job = PrintJob(load_config())
    job.add_cube(50.0, 50.0, 10.0)
    job.add_cylinder(100.0, 100.0, 5.0, 3.0)
    with open("output.gcode", "w") as f:
        job.generate(f)
    job.free()

Each :meth:`PrintJob.generate` call builds a fresh emitter (and machine
cursor), so jobs never share state.  Generation consumes the shapes'
slicing cursors; a second :meth:`PrintJob.generate` raises
:class:`~gooz.shapes.models.SlicingError` before writing anything.
"""

from __future__ import annotations

import logging
import random
from io import StringIO
from pathlib import Path
from typing import Any, TextIO

from gooz.configs.loader import InfillPattern, PrintSettings
from gooz.gcode.emitter import GCodeEmitter
from gooz.scheduler.layer_scheduler import LayerScheduler
from gooz.shapes.models import Shape
from gooz.shapes.registry import ShapeRegistry
from gooz.utils.fs import atomic_write_text, load_yaml

logger = logging.getLogger(__name__)


class JobFileError(Exception):
    """Raised when a job file is malformed."""

    pass


class PrintJob:
    """Shapes to print plus the settings to print them with.

    Parameters
    ----------
    settings : PrintSettings
        Validated print settings, fixed for the job's lifetime.
    rng : random.Random | None
        Source of the layer interleaving order.
    """

    def __init__(
        self,
        settings: PrintSettings,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings
        self.registry = ShapeRegistry(settings)
        self._rng = rng
        self.last_scheduler: LayerScheduler | None = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_cube(
        self,
        x: float,
        y: float,
        size: float,
        infill: InfillPattern | None = None,
    ) -> int:
        """Register a cube; see :meth:`ShapeRegistry.add_cube`."""
        return self.registry.add_cube(x, y, size, infill=infill)

    def add_cylinder(
        self, x: float, y: float, radius: float, height: float,
    ) -> int:
        """Register a cylinder; see :meth:`ShapeRegistry.add_cylinder`."""
        return self.registry.add_cylinder(x, y, radius, height)

    @property
    def shapes(self) -> list[Shape]:
        return list(self.registry)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self, out: TextIO) -> None:
        """Write the full program (startup, layers, shutdown) to *out*.

        Raises
        ------
        GCodeError
            If writing to *out* fails.  Generation stops immediately and
            no shutdown block is written.
        SlicingError
            If the shapes were already generated once.  Nothing is written
            to *out*; call :meth:`free` and register the shapes again.
        """
        emitter = GCodeEmitter(self.settings, out)
        scheduler = LayerScheduler(
            self.registry, emitter, self.settings, rng=self._rng,
        )
        self.last_scheduler = scheduler
        scheduler.run()

    def generate_string(self) -> str:
        """Generate the program into a string."""
        buf = StringIO()
        self.generate(buf)
        return buf.getvalue()

    def write(self, path: str | Path) -> Path:
        """Generate the program and write it atomically to *path*."""
        path = Path(path)
        atomic_write_text(path, self.generate_string())
        logger.info("Wrote G-code to %s", path)
        return path

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def free(self) -> None:
        """Release all shapes.  Safe to call on an empty job."""
        self.registry.clear()


# ---------------------------------------------------------------------------
# Job files
# ---------------------------------------------------------------------------


def load_shapes(path: str | Path) -> list[dict[str, Any]]:
    """Read the ``shapes`` list of a YAML job file.

    Each entry is either ``{type: cube, x, y, size[, infill]}`` or
    ``{type: cylinder, x, y, radius, height}``.

    Raises
    ------
    JobFileError
        If the file has no ``shapes`` list or an entry is malformed.
    """
    data = load_yaml(path)
    if not isinstance(data, dict) or not isinstance(data.get("shapes"), list):
        raise JobFileError(f"Job file {path} must contain a 'shapes' list")

    shapes: list[dict[str, Any]] = []
    for idx, entry in enumerate(data["shapes"]):
        if not isinstance(entry, dict):
            raise JobFileError(f"Shape {idx} must be a mapping, got {entry!r}")
        kind = entry.get("type")
        try:
            if kind == "cube":
                parsed: dict[str, Any] = {
                    "type": "cube",
                    "x": float(entry["x"]),
                    "y": float(entry["y"]),
                    "size": float(entry["size"]),
                }
                if entry.get("infill") is not None:
                    parsed["infill"] = str(entry["infill"])
            elif kind == "cylinder":
                parsed = {
                    "type": "cylinder",
                    "x": float(entry["x"]),
                    "y": float(entry["y"]),
                    "radius": float(entry["radius"]),
                    "height": float(entry["height"]),
                }
            else:
                raise JobFileError(
                    f"Shape {idx}: type must be 'cube' or 'cylinder', "
                    f"got {kind!r}"
                )
        except KeyError as exc:
            raise JobFileError(f"Shape {idx} is missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise JobFileError(f"Shape {idx} has an invalid value: {exc}") from exc
        shapes.append(parsed)
    return shapes


def add_shape(job: PrintJob, shape: dict[str, Any]) -> int:
    """Register one entry produced by :func:`load_shapes`."""
    if shape["type"] == "cube":
        return job.add_cube(
            shape["x"], shape["y"], shape["size"], infill=shape.get("infill"),
        )
    return job.add_cylinder(shape["x"], shape["y"], shape["radius"], shape["height"])
