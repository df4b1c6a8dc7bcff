"""
Source loading module.

Fetches G-code text from HTTP(S) URLs or local files and hands the
complete document to the interpreter.
"""

from gcode_layers.loader.source import GCodeLoader, LoadError

__all__ = ["GCodeLoader", "LoadError"]
