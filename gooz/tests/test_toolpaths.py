"""Tests for cube and cylinder path generators.

Each test registers one shape, advances it to layer 1 and inspects the
G-code emitted for that single layer.
"""

from __future__ import annotations

import re
from io import StringIO

import pytest

from gooz.configs.loader import PrintSettings, load_config
from gooz.gcode.emitter import GCodeEmitter
from gooz.planning.passes import pass_count
from gooz.shapes import Shape, ShapeRegistry
from gooz.toolpaths import (
    cube_infill_boustrophedon,
    cube_infill_spiral_inward,
    cube_infill_spiral_outward,
    cube_perimeter,
    cylinder_perimeter,
    generate_layer,
)

_WORD = re.compile(r"([XYZEF])(-?\d+(?:\.\d+)?)")


def _words(line: str) -> dict[str, float]:
    code = line.split(";")[0]
    return {k: float(v) for k, v in _WORD.findall(code)}


def _extrusions(text: str) -> list[dict[str, float]]:
    return [
        _words(l) for l in text.splitlines()
        if l.startswith("G1") and "Add line" in l
    ]


def _travels(text: str) -> list[dict[str, float]]:
    return [
        _words(l) for l in text.splitlines()
        if l.startswith("G1") and "Move head in XY plane" in l
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings() -> PrintSettings:
    return load_config()


@pytest.fixture()
def registry(settings: PrintSettings) -> ShapeRegistry:
    return ShapeRegistry(settings)


@pytest.fixture()
def out() -> StringIO:
    return StringIO()


@pytest.fixture()
def em(settings: PrintSettings, out: StringIO) -> GCodeEmitter:
    return GCodeEmitter(settings, out)


def _cube(registry: ShapeRegistry, size: float = 10.0, **kw) -> Shape:
    shape = registry.get(registry.add_cube(50.0, 50.0, size, **kw))
    shape.cursor.advance()
    return shape


def _infill_passes(settings: PrintSettings, side: float) -> tuple[int, float, float]:
    span = side - 2.0 * settings.nozzle_diameter
    n = pass_count(span, settings.nozzle_diameter)
    w = span / n
    return n, w, (span - w) / 2.0


# ---------------------------------------------------------------------------
# Cube perimeter
# ---------------------------------------------------------------------------


class TestCubePerimeter:
    def test_starts_at_nearest_corner(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        cube_perimeter(em, shape, settings)
        pts = [(p["X"], p["Y"]) for p in _extrusions(out.getvalue())]
        # Nozzle starts at the origin -> corner (45.2, 45.2), clockwise.
        assert pts == [
            (45.2, 54.8), (54.8, 54.8), (54.8, 45.2), (45.2, 45.2),
        ]

    def test_starts_from_far_corner(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        em.cursor.x, em.cursor.y = 200.0, 200.0
        cube_perimeter(em, shape, settings)
        pts = [(p["X"], p["Y"]) for p in _extrusions(out.getvalue())]
        assert pts == [
            (54.8, 45.2), (45.2, 45.2), (45.2, 54.8), (54.8, 54.8),
        ]

    def test_layer_z_and_oozing_approach(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        cube_perimeter(em, shape, settings)
        text = out.getvalue()
        assert "; anti-oozing travel" in text
        assert "; cube #0 perimeter layer 1" in text
        assert all(p["Z"] == 0.1 for p in _extrusions(text))

    def test_bead_width_is_nozzle(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        # Park the nozzle on the start corner so the oozing feed is zero.
        em.cursor.x, em.cursor.y, em.cursor.z = 45.2, 45.2, 0.1
        cube_perimeter(em, shape, settings)
        side = 10.0 - settings.nozzle_diameter
        bead = (
            settings.nozzle_diameter
            * settings.layer_height
            * settings.extruder.print_width_ratio
        )
        fed = bead * 4 * side / settings.extruder.filament_area_mm2
        assert em.cursor.e == pytest.approx(fed, rel=1e-6, abs=1e-9)


# ---------------------------------------------------------------------------
# Cube infill
# ---------------------------------------------------------------------------


class TestSpiralInward:
    def test_line_count_and_bounds(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        n, _, half = _infill_passes(settings, 10.0)
        cube_infill_spiral_inward(em, shape, settings)
        pts = _extrusions(out.getvalue())
        assert len(pts) == 1 + 2 * (n - 1)
        for p in pts:
            assert abs(p["X"] - 50.0) <= half + 0.01
            assert abs(p["Y"] - 50.0) <= half + 0.01

    def test_first_side_is_full_span(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        _, _, half = _infill_passes(settings, 10.0)
        cube_infill_spiral_inward(em, shape, settings)
        start = _travels(out.getvalue())[0]
        first = _extrusions(out.getvalue())[0]
        assert (start["X"], start["Y"]) == pytest.approx((50.0 - half, 50.0 - half), abs=0.006)
        assert first["X"] == pytest.approx(50.0 - half, abs=0.006)
        assert first["Y"] == pytest.approx(50.0 + half, abs=0.006)

    def test_sides_shrink_toward_centre(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        n, _, _ = _infill_passes(settings, 10.0)
        assert n % 2 == 1
        cube_infill_spiral_inward(em, shape, settings)
        last = _extrusions(out.getvalue())[-1]
        assert (last["X"], last["Y"]) == pytest.approx((50.0, 50.0), abs=0.011)


class TestSpiralOutward:
    def test_odd_starts_at_centre(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry, infill="spiral_outward")
        n, w, half = _infill_passes(settings, 10.0)
        assert n % 2 == 1
        cube_infill_spiral_outward(em, shape, settings)
        travel = _travels(out.getvalue())[-1]
        pts = _extrusions(out.getvalue())
        assert (travel["X"], travel["Y"]) == (50.0, 50.0)
        assert len(pts) == 2 * (n - 1) + 1
        # Layer 1 turns positive first.
        assert pts[0]["X"] == pytest.approx(50.0 + w, abs=0.006)
        for p in pts:
            assert abs(p["X"] - 50.0) <= half + 0.01
            assert abs(p["Y"] - 50.0) <= half + 0.01

    def test_odd_alternates_with_layer(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry, infill="spiral_outward")
        _, w, _ = _infill_passes(settings, 10.0)
        shape.cursor.advance()  # layer 2
        cube_infill_spiral_outward(em, shape, settings)
        first = _extrusions(out.getvalue())[0]
        assert first["X"] == pytest.approx(50.0 - w, abs=0.006)

    def test_even_starts_next_to_centre(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        side = 5.6
        n, w, half = _infill_passes(settings, side)
        assert n % 2 == 0
        shape = _cube(registry, size=side, infill="spiral_outward")
        cube_infill_spiral_outward(em, shape, settings)
        travel = _travels(out.getvalue())[-1]
        assert abs(travel["X"] - 50.0) == pytest.approx(w / 2, abs=0.006)
        assert abs(travel["Y"] - 50.0) == pytest.approx(w / 2, abs=0.006)
        pts = _extrusions(out.getvalue())
        assert len(pts) == 2 * (n - 1) + 1
        for p in pts:
            assert abs(p["X"] - 50.0) <= half + 0.01
            assert abs(p["Y"] - 50.0) <= half + 0.01


class TestBoustrophedon:
    def test_parallel_lines(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry, infill="boustrophedon")
        n, _, half = _infill_passes(settings, 10.0)
        cube_infill_boustrophedon(em, shape, settings)
        pts = _extrusions(out.getvalue())
        assert len(pts) == n
        assert len({p["X"] for p in pts}) == n
        # Alternating far/near edges in Y.
        ys = [round(p["Y"], 2) for p in pts]
        assert ys[0] == pytest.approx(50.0 + half, abs=0.006)
        assert ys[1] == pytest.approx(50.0 - half, abs=0.006)

    def test_dry_steps_between_lines(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry, infill="boustrophedon")
        n, _, _ = _infill_passes(settings, 10.0)
        cube_infill_boustrophedon(em, shape, settings)
        # One travel to the start plus one between each pair of lines.
        assert len(_travels(out.getvalue())) == n

    def test_steps_toward_far_side(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry, infill="boustrophedon")
        em.cursor.x, em.cursor.y = 200.0, 200.0
        cube_infill_boustrophedon(em, shape, settings)
        xs = [p["X"] for p in _extrusions(out.getvalue())]
        assert xs == sorted(xs, reverse=True)


class TestSmallCube:
    def test_no_room_for_infill(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry, size=0.6)
        for fn in (
            cube_infill_spiral_inward,
            cube_infill_spiral_outward,
            cube_infill_boustrophedon,
        ):
            fn(em, shape, settings)
        assert out.getvalue() == ""


# ---------------------------------------------------------------------------
# Cylinder
# ---------------------------------------------------------------------------


class TestCylinderPerimeter:
    def test_segments_and_reset(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = registry.get(registry.add_cylinder(100.0, 100.0, 5.0, 3.0))
        shape.cursor.advance()
        cylinder_perimeter(em, shape, settings)
        text = out.getvalue()
        lines = text.splitlines()
        assert len(_extrusions(text)) == settings.toolpaths.cylinder_segments
        assert lines[-1].startswith("G92 E0")
        assert sum(1 for l in lines if l.startswith("G92 E0")) == 1
        assert em.cursor.e == 0.0

    def test_starts_on_circle(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = registry.get(registry.add_cylinder(100.0, 100.0, 5.0, 3.0))
        shape.cursor.advance()
        cylinder_perimeter(em, shape, settings)
        start = _travels(out.getvalue())[0]
        assert (start["X"], start["Y"]) == (105.0, 100.0)
        pts = _extrusions(out.getvalue())
        assert (pts[-1]["X"], pts[-1]["Y"]) == (105.0, 100.0)
        for p in pts:
            r = ((p["X"] - 100.0) ** 2 + (p["Y"] - 100.0) ** 2) ** 0.5
            assert r == pytest.approx(5.0, abs=0.01)

    def test_five_decimal_extrusion(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = registry.get(registry.add_cylinder(100.0, 100.0, 5.0, 3.0))
        shape.cursor.advance()
        cylinder_perimeter(em, shape, settings)
        for line in out.getvalue().splitlines():
            if "Add line" in line:
                assert re.search(r" E\d+\.\d{5} ", line)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestGenerateLayer:
    def test_cube_gets_perimeter_and_infill(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = _cube(registry)
        generate_layer(em, shape, settings)
        text = out.getvalue()
        assert "; cube #0 perimeter layer 1" in text
        assert "; cube #0 infill layer 1" in text

    def test_cylinder_gets_perimeter_only(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        out: StringIO,
        settings: PrintSettings,
    ) -> None:
        shape = registry.get(registry.add_cylinder(100.0, 100.0, 5.0, 3.0))
        shape.cursor.advance()
        generate_layer(em, shape, settings)
        text = out.getvalue()
        assert "; cylinder #0 perimeter layer 1" in text
        assert "infill" not in text

    def test_cube_generator_rejects_cylinder(
        self,
        registry: ShapeRegistry,
        em: GCodeEmitter,
        settings: PrintSettings,
    ) -> None:
        shape = registry.get(registry.add_cylinder(100.0, 100.0, 5.0, 3.0))
        shape.cursor.advance()
        with pytest.raises(TypeError):
            cube_perimeter(em, shape, settings)
