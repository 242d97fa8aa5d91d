"""Layer scheduler -- interleaves the layers of all registered shapes.

For each layer round, every still-active shape is visited exactly once in
a fresh uniformly random order (one Fisher-Yates pass over the active
slots).  Printing one layer of every object before moving up spreads the
nozzle's dwell time and oozing risk across objects instead of finishing
one part at a time.

Each visit advances the shape's :class:`~gooz.shapes.models.SlicingCursor`
by one and dispatches to the shape's path generator.  A shape that has
emitted its last layer is marked done and removed from the active slots
by swapping in the last slot, so the active set only ever shrinks.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from gooz.configs.loader import PrintSettings
from gooz.gcode.emitter import GCodeEmitter
from gooz.shapes.models import Shape, ShapeState, SlicingError
from gooz.shapes.registry import ShapeRegistry
from gooz.toolpaths.layer import generate_layer

logger = logging.getLogger(__name__)

LayerGenerator = Callable[[GCodeEmitter, Shape, PrintSettings], None]


class LayerScheduler:
    """Drive startup, interleaved layer generation and shutdown.

    Parameters
    ----------
    registry : ShapeRegistry
        Shapes to print.  Their cursors are advanced in place.
    emitter : GCodeEmitter
        Output for every move.
    settings : PrintSettings
        Validated print settings.
    rng : random.Random | None
        Source of the per-round order.  Pass a seeded instance for a
        reproducible program.
    layer_generator : LayerGenerator
        Callable drawing one layer of one shape.
    """

    def __init__(
        self,
        registry: ShapeRegistry,
        emitter: GCodeEmitter,
        settings: PrintSettings,
        rng: random.Random | None = None,
        layer_generator: LayerGenerator = generate_layer,
    ) -> None:
        self._registry = registry
        self._emitter = emitter
        self._cfg = settings
        self._rng = rng if rng is not None else random.Random()
        self._generate_layer = layer_generator
        self.round_sizes: list[int] = []

    def run(self) -> None:
        """Emit the complete program.

        Raises
        ------
        GCodeError
            If the sink fails; no shutdown block is written in that case.
        ShapeLookupError
            If an active key no longer resolves to a shape.
        SlicingError
            If any shape was already sliced by an earlier run.  Raised
            before the startup block is written.
        """
        sliced = [
            s.key
            for s in self._registry
            if s.cursor.state is not ShapeState.PENDING
        ]
        if sliced:
            raise SlicingError(
                f"Shape(s) {sliced} were already sliced; register them again "
                f"to print another copy"
            )

        max_layers = self._registry.max_layers()
        logger.info(
            "Generating %d shape(s) over %d layer round(s)",
            len(self._registry),
            max_layers,
        )
        self.round_sizes = []
        self._emitter.write_startup()

        active = self._registry.keys()
        for layer in range(1, max_layers + 1):
            self._emitter.comment(f"layer round {layer}")
            self._run_round(active)
            self.round_sizes.append(len(active))
            logger.debug(
                "Round %d done, %d shape(s) still active", layer, len(active)
            )

        self._emitter.write_shutdown()
        logger.info(
            "Generation finished: %d G-code line(s)",
            self._emitter.lines_written,
        )

    def _run_round(self, active: list[int]) -> None:
        """Visit every active slot once, in random order, compacting in place."""
        for i in range(len(active) - 1, -1, -1):
            j = self._rng.randrange(i + 1)
            active[i], active[j] = active[j], active[i]

            shape = self._registry.get(active[i])
            shape.cursor.advance()
            self._generate_layer(self._emitter, shape, self._cfg)
            if shape.cursor.exhausted:
                shape.cursor.finish()
                self._drop(active, i)

    @staticmethod
    def _drop(active: list[int], i: int) -> None:
        # Slots above i were already visited this round.
        active[i] = active[-1]
        active.pop()
