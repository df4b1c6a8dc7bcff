"""YAML schema validation and config loading.

Validates the viewer/loader config (``gcode_layers.v1``) with pydantic:
    - loader: base path, request headers, credentials, timeout, encoding
    - parser: instrumentation switch
    - logging: level, file, JSON mode, colors

Every section has defaults, so an empty YAML file is a valid config.

Usage::

    from gcode_layers.configs import load_config
    cfg = load_config()                     # packaged default.yaml
    cfg = load_config("/custom/viewer.yaml")
    loader = GCodeLoader.from_config(cfg.loader)
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gcode_layers.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


class ConfigError(ValueError):
    """Raised when configuration validation fails."""

    pass


# ============================================================================
# SECTIONS
# ============================================================================

class LoaderConfig(BaseModel):
    """Source fetch settings."""
    base_path: str = Field("", description="Prefix joined onto every source URL/path")
    request_headers: Dict[str, str] = Field(default_factory=dict, description="Extra HTTP request headers")
    with_credentials: bool = Field(False, description="Reuse a cookie-keeping HTTP session")
    timeout_s: float = Field(30.0, gt=0, description="HTTP timeout (s)")
    encoding: str = Field("utf-8", description="Text encoding of sources")

    @field_validator('encoding')
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding '{v}'") from e
        return v


class ParserConfig(BaseModel):
    """Interpreter settings."""
    instrument: bool = Field(False, description="Time each parse and log a summary")


class LoggingConfig(BaseModel):
    """Logging settings for setup_logging()."""
    model_config = ConfigDict(populate_by_name=True)

    level: str = Field("INFO", description="Root log level")
    file: Optional[str] = Field(None, description="Log file path")
    json_lines: bool = Field(False, alias="json", description="JSON lines in the log file")
    color: bool = Field(True, description="ANSI colors on the console")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}, got '{v}'")
        return v.upper()


# ============================================================================
# ROOT SCHEMA
# ============================================================================

class ViewerConfigV1(BaseModel):
    """Root config schema v1."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("gcode_layers.v1", alias="schema", description="Schema version")
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "gcode_layers.v1":
            raise ValueError(f"Expected schema 'gcode_layers.v1', got '{v}'")
        return v


# ============================================================================
# PUBLIC API
# ============================================================================

def load_config(path: Union[str, Path, None] = None) -> ViewerConfigV1:
    """Load and validate a config from YAML.

    Parameters
    ----------
    path : Union[str, Path, None]
        Path to a ``gcode_layers.v1`` YAML file, None for the packaged default

    Returns
    -------
    ViewerConfigV1
        Validated configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If the YAML is malformed or validation fails (message names the
        file and offending keys)
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config at {path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config at {path} must be a mapping, got {type(data).__name__}")

    try:
        cfg = ViewerConfigV1(**data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed at {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return cfg
