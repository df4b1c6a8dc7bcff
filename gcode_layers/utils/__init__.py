"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Text and YAML reads (fs)
    - Unified logging (logging_config)
    - Wall-clock timing (profiler)

No module in utils/ may import from upper layers (interpreter, loader, cli).

Convenience imports:
    from gcode_layers.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config
from . import profiler

from .logging_config import get_logger, pop_context, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'profiler',
    'setup_logging',
    'get_logger',
    'push_context',
    'pop_context',
]
