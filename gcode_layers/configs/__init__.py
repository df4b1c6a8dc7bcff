"""Config loading and validation."""

from gcode_layers.configs.schema import (
    ConfigError,
    LoaderConfig,
    LoggingConfig,
    ParserConfig,
    ViewerConfigV1,
    load_config,
)

__all__ = [
    "ConfigError",
    "LoaderConfig",
    "LoggingConfig",
    "ParserConfig",
    "ViewerConfigV1",
    "load_config",
]
