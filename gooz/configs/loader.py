"""Configuration loader for print settings.

Loads and validates ``printer.yaml`` into typed, frozen dataclasses.
All printer and material values (nozzle, filament, speeds, temperatures,
build volume) come from the config -- nothing is hardcoded in the
toolpath code.

Feed rates are stored in **mm/s** throughout Python.  Conversion to the
G-code ``F`` parameter (mm/min) happens only in the G-code emitter.

Usage::

    from gooz.configs.loader import load_config
    settings = load_config()                       # default path
    settings = load_config("/custom/printer.yaml") # explicit path
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from gooz.utils.fs import load_yaml

logger = logging.getLogger(__name__)

InfillPattern = Literal["spiral_inward", "spiral_outward", "boustrophedon"]
INFILL_PATTERNS: tuple[str, ...] = (
    "spiral_inward",
    "spiral_outward",
    "boustrophedon",
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtruderConfig:
    """Nozzle and filament geometry.

    ``print_width_ratio`` scales the nominal bead cross-section
    (``width * layer_height``) to the actually deposited area.
    """

    nozzle_diameter_mm: float
    filament_diameter_mm: float
    print_width_ratio: float

    @property
    def filament_area_mm2(self) -> float:
        """Cross-section area of the filament feedstock."""
        r = self.filament_diameter_mm / 2.0
        return math.pi * r * r


@dataclass(frozen=True)
class LayerConfig:
    """Layer slicing parameters.

    ``adhesion_offset_mm`` is subtracted from every layer's nominal top so
    the bead is pressed into the layer below.
    """

    height_mm: float
    adhesion_offset_mm: float = 0.1


@dataclass(frozen=True)
class SpeedsConfig:
    """Feed rates in mm/s."""

    print_mm_s: float
    travel_mm_s: float


@dataclass(frozen=True)
class OozingConfig:
    """Anti-oozing travel parameters.

    ``ratio`` scales the travel distance into a compensating extrusion;
    ``z_security_mm`` is how far the head lifts during the travel.
    """

    ratio: float
    z_security_mm: float


@dataclass(frozen=True)
class TemperatureConfig:
    """Target temperatures in degrees Celsius."""

    nozzle_c: int
    bed_c: int


@dataclass(frozen=True)
class BuildVolumeConfig:
    """Printable volume in mm (width, depth, height)."""

    x: float
    y: float
    z: float


@dataclass(frozen=True)
class StartupConfig:
    """Start sequence parameters."""

    prime_line_length_mm: float = 100.0


@dataclass(frozen=True)
class ShutdownConfig:
    """End sequence parameters (park position)."""

    park_x_mm: float = 0.0
    park_y_mm: float = 200.0


@dataclass(frozen=True)
class ToolpathConfig:
    """Path generator options."""

    cylinder_segments: int = 80
    default_infill: InfillPattern = "spiral_inward"


@dataclass(frozen=True)
class PrintSettings:
    """Top-level print settings -- aggregates all sections.

    Immutable once constructed; one instance is shared read-only by the
    registry, the emitter and the path generators of a run.
    """

    extruder: ExtruderConfig
    layers: LayerConfig
    speeds: SpeedsConfig
    oozing: OozingConfig
    temperatures: TemperatureConfig
    build_volume: BuildVolumeConfig
    startup: StartupConfig = StartupConfig()
    shutdown: ShutdownConfig = ShutdownConfig()
    toolpaths: ToolpathConfig = ToolpathConfig()

    @property
    def nozzle_diameter(self) -> float:
        return self.extruder.nozzle_diameter_mm

    @property
    def layer_height(self) -> float:
        return self.layers.height_mm


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _validate_settings(settings: PrintSettings) -> None:
    """Validate value ranges and cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid value or combination.
    """
    ex = settings.extruder
    if ex.nozzle_diameter_mm <= 0:
        raise ConfigError(
            f"nozzle_diameter_mm must be > 0, got {ex.nozzle_diameter_mm}"
        )
    if ex.filament_diameter_mm <= 0:
        raise ConfigError(
            f"filament_diameter_mm must be > 0, got {ex.filament_diameter_mm}"
        )
    if ex.print_width_ratio <= 0:
        raise ConfigError(
            f"print_width_ratio must be > 0, got {ex.print_width_ratio}"
        )

    # -- Layers --------------------------------------------------------------
    ly = settings.layers
    if ly.height_mm <= 0:
        raise ConfigError(f"layers.height_mm must be > 0, got {ly.height_mm}")
    if ly.adhesion_offset_mm < 0:
        raise ConfigError(
            f"layers.adhesion_offset_mm must be >= 0, "
            f"got {ly.adhesion_offset_mm}"
        )
    if ly.adhesion_offset_mm >= ly.height_mm:
        raise ConfigError(
            f"layers.adhesion_offset_mm ({ly.adhesion_offset_mm}) must be "
            f"smaller than layers.height_mm ({ly.height_mm})"
        )

    # -- Speeds --------------------------------------------------------------
    sp = settings.speeds
    if sp.print_mm_s <= 0 or sp.travel_mm_s <= 0:
        raise ConfigError(
            f"Feed rates must be > 0, got print={sp.print_mm_s}, "
            f"travel={sp.travel_mm_s}"
        )
    if sp.print_mm_s > sp.travel_mm_s:
        logger.warning(
            "Print speed (%.1f mm/s) exceeds travel speed (%.1f mm/s)",
            sp.print_mm_s,
            sp.travel_mm_s,
        )

    # -- Oozing --------------------------------------------------------------
    oz = settings.oozing
    if oz.ratio < 0:
        raise ConfigError(f"oozing.ratio must be >= 0, got {oz.ratio}")
    if oz.z_security_mm < 0:
        raise ConfigError(
            f"oozing.z_security_mm must be >= 0, got {oz.z_security_mm}"
        )

    # -- Build volume --------------------------------------------------------
    bv = settings.build_volume
    for axis, value in (("x", bv.x), ("y", bv.y), ("z", bv.z)):
        if value <= 0:
            raise ConfigError(
                f"build_volume_mm.{axis} must be > 0, got {value}"
            )
    if ly.height_mm > bv.z:
        raise ConfigError(
            f"Layer height {ly.height_mm} exceeds build height {bv.z}"
        )

    # -- Start / end sequence --------------------------------------------------
    if settings.startup.prime_line_length_mm > bv.x:
        raise ConfigError(
            f"Prime line ({settings.startup.prime_line_length_mm} mm) is "
            f"longer than the build width ({bv.x} mm)"
        )

    # -- Toolpaths -----------------------------------------------------------
    tp = settings.toolpaths
    if tp.cylinder_segments < 3:
        raise ConfigError(
            f"toolpaths.cylinder_segments must be >= 3, "
            f"got {tp.cylinder_segments}"
        )
    if tp.default_infill not in INFILL_PATTERNS:
        raise ConfigError(
            f"toolpaths.default_infill must be one of {INFILL_PATTERNS}, "
            f"got '{tp.default_infill}'"
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_settings(data: dict[str, Any]) -> PrintSettings:
    """Build validated :class:`PrintSettings` from a parsed mapping.

    Parameters
    ----------
    data : dict[str, Any]
        Mapping with the same structure as ``printer.yaml``.

    Returns
    -------
    PrintSettings
        Fully validated, frozen settings.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    """
    try:
        # -- extruder -------------------------------------------------------
        ed = data["extruder"]
        extruder = ExtruderConfig(
            nozzle_diameter_mm=float(ed["nozzle_diameter_mm"]),
            filament_diameter_mm=float(ed["filament_diameter_mm"]),
            print_width_ratio=float(ed.get("print_width_ratio", 1.0)),
        )

        # -- layers ---------------------------------------------------------
        ld = data["layers"]
        layers = LayerConfig(
            height_mm=float(ld["height_mm"]),
            adhesion_offset_mm=float(ld.get("adhesion_offset_mm", 0.1)),
        )

        # -- speeds ---------------------------------------------------------
        sd = data["speeds"]
        speeds = SpeedsConfig(
            print_mm_s=float(sd["print_mm_s"]),
            travel_mm_s=float(sd["travel_mm_s"]),
        )

        # -- oozing ---------------------------------------------------------
        od = data.get("oozing", {})
        oozing = OozingConfig(
            ratio=float(od.get("ratio", 0.0)),
            z_security_mm=float(od.get("z_security_mm", 0.0)),
        )

        # -- temperatures ---------------------------------------------------
        td = data["temperatures"]
        temperatures = TemperatureConfig(
            nozzle_c=int(td["nozzle_c"]),
            bed_c=int(td["bed_c"]),
        )

        # -- build volume ---------------------------------------------------
        bv = data["build_volume_mm"]
        build_volume = BuildVolumeConfig(
            x=float(bv["x"]), y=float(bv["y"]), z=float(bv["z"]),
        )

        # -- start / end sequence (optional) --------------------------------
        st = data.get("startup") or {}
        startup = StartupConfig(
            prime_line_length_mm=float(st.get("prime_line_length_mm", 100.0)),
        )
        sh = data.get("shutdown") or {}
        shutdown = ShutdownConfig(
            park_x_mm=float(sh.get("park_x_mm", 0.0)),
            park_y_mm=float(sh.get("park_y_mm", 200.0)),
        )

        # -- toolpaths (optional) -------------------------------------------
        tp = data.get("toolpaths") or {}
        toolpaths = ToolpathConfig(
            cylinder_segments=int(tp.get("cylinder_segments", 80)),
            default_infill=str(tp.get("default_infill", "spiral_inward")),
        )

        settings = PrintSettings(
            extruder=extruder,
            layers=layers,
            speeds=speeds,
            oozing=oozing,
            temperatures=temperatures,
            build_volume=build_volume,
            startup=startup,
            shutdown=shutdown,
            toolpaths=toolpaths,
        )

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    _validate_settings(settings)
    return settings


def load_config(path: str | Path | None = None) -> PrintSettings:
    """Load and validate print settings from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``printer.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    PrintSettings
        Fully validated, frozen settings object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "printer.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data: dict[str, Any] = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(data).__name__}"
        )

    settings = parse_settings(data)
    logger.info("Configuration loaded successfully")
    return settings
