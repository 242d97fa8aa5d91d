#!/usr/bin/env python3
"""
Generate Script.

Write a G-code program for the cubes and cylinders of a job file, or for
the built-in demo grid.

Usage:
    python -m gooz.scripts.generate --job jobs/sample_job.yaml
    python -m gooz.scripts.generate --demo-grid --seed 1 -o grid.gcode
    python -m gooz.scripts.generate --job job.yaml --config my_printer.yaml

Shapes that do not fit the build volume are reported and skipped.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

import yaml

from gooz.configs.loader import ConfigError, load_config
from gooz.gcode.emitter import GCodeError
from gooz.job import JobFileError, PrintJob, add_shape, load_shapes
from gooz.shapes.models import SlicingError
from gooz.shapes.registry import ShapeError

logger = logging.getLogger(__name__)

GRID_START_MM = 10.0
GRID_PITCH_MM = 22.0


def demo_grid(rng: random.Random, width: float, depth: float) -> list[dict]:
    """Cubes on a 22 mm grid with sides between 5 and 7 mm."""
    shapes = []
    x = GRID_START_MM
    while x < width:
        y = GRID_START_MM
        while y < depth:
            size = 5.0 + rng.randrange(100) / 50.0
            shapes.append({"type": "cube", "x": x, "y": y, "size": size})
            y += GRID_PITCH_MM
        x += GRID_PITCH_MM
    return shapes


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate G-code for cubes and cylinders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Printer settings file path",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--job",
        "-j",
        type=str,
        help="Job file listing the shapes (YAML format)",
    )
    source.add_argument(
        "--demo-grid",
        action="store_true",
        help="Print a grid of cubes covering the plate",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="output.gcode",
        help="Output G-code file (default: output.gcode)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for layer interleaving and demo sizes",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every layer",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        settings = load_config(args.config)
    except (ConfigError, FileNotFoundError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return 1

    rng = random.Random(args.seed)

    if args.demo_grid:
        bv = settings.build_volume
        shapes = demo_grid(rng, bv.x, bv.y)
    else:
        try:
            shapes = load_shapes(args.job)
        except (JobFileError, FileNotFoundError, yaml.YAMLError) as e:
            logger.error("Failed to load job: %s", e)
            return 1

    job = PrintJob(settings, rng=rng)
    for shape in shapes:
        try:
            add_shape(job, shape)
        except (ShapeError, ValueError) as e:
            logger.warning("Skipping %s: %s", shape["type"], e)

    if not len(job.registry):
        logger.error("No printable shapes")
        return 1

    try:
        path = job.write(Path(args.output))
    except (GCodeError, SlicingError, OSError) as e:
        logger.error("Generation failed: %s", e)
        return 1
    finally:
        job.free()

    print(f"G-code written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
