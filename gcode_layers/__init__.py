"""gcode_layers: G-code toolpath interpreter.

Reads G-code text (3D printer or CNC) and returns the drawn toolpaths as
3D point sequences grouped into layers, plus the source line at which each
layer starts.

Subpackages:
    interpreter: line splitting, tokenizing, machine state, layer building
    loader: fetching G-code from HTTP(S) or local files
    configs: YAML config loading and validation
    utils: logging, timing, file helpers

Key invariants:
    - A layer starts at the first extruding move at a new Z
    - Every extruding move adds exactly two points (start, end)
    - G2/G3 arcs and unknown commands are skipped, never fatal
    - Each parse starts from the origin in absolute mode

Usage:
    from gcode_layers import parse
    result = parse(open("part.gcode").read())
    layers, layer_indices = result.as_lists()
"""

from gcode_layers.interpreter import GCodeParser, Layer, MachineState, ParseResult, Vector3, parse
from gcode_layers.loader import GCodeLoader, LoadError

__version__ = "0.1.0"

__all__ = [
    "GCodeLoader",
    "GCodeParser",
    "Layer",
    "LoadError",
    "MachineState",
    "ParseResult",
    "Vector3",
    "parse",
]
