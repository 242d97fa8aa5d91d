"""Print settings loading and validation."""

from gooz.configs.loader import (
    INFILL_PATTERNS,
    BuildVolumeConfig,
    ConfigError,
    ExtruderConfig,
    InfillPattern,
    LayerConfig,
    OozingConfig,
    PrintSettings,
    ShutdownConfig,
    SpeedsConfig,
    StartupConfig,
    TemperatureConfig,
    ToolpathConfig,
    load_config,
    parse_settings,
)

__all__ = [
    "INFILL_PATTERNS",
    "BuildVolumeConfig",
    "ConfigError",
    "ExtruderConfig",
    "InfillPattern",
    "LayerConfig",
    "OozingConfig",
    "PrintSettings",
    "ShutdownConfig",
    "SpeedsConfig",
    "StartupConfig",
    "TemperatureConfig",
    "ToolpathConfig",
    "load_config",
    "parse_settings",
]
