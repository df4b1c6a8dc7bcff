"""
G-code interpreter module.

Turns G-code text into layers of 3D paths: line splitting, tokenizing,
machine state tracking, command dispatch and layer/path building.
"""

from gcode_layers.interpreter.builder import Layer, LayerBuilder, Path
from gcode_layers.interpreter.commands import (
    ArcMove,
    Command,
    LinearMove,
    SetAbsolute,
    SetPosition,
    SetRelative,
    Unsupported,
    classify,
)
from gcode_layers.interpreter.lexer import TokenizedLine, split_lines, tokenize
from gcode_layers.interpreter.parser import (
    GCodeParser,
    ParseContext,
    ParseResult,
    ParseStats,
    parse,
)
from gcode_layers.interpreter.state import MachineState, Vector3, delta, resolve

__all__ = [
    "ArcMove",
    "Command",
    "GCodeParser",
    "Layer",
    "LayerBuilder",
    "LinearMove",
    "MachineState",
    "ParseContext",
    "ParseResult",
    "ParseStats",
    "Path",
    "SetAbsolute",
    "SetPosition",
    "SetRelative",
    "TokenizedLine",
    "Unsupported",
    "Vector3",
    "classify",
    "delta",
    "parse",
    "resolve",
    "split_lines",
    "tokenize",
]
