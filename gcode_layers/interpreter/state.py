"""Machine state and coordinate resolution.

``MachineState`` is the interpreter's view of the machine after the last
processed command.  Positions are absolute machine coordinates; ``e`` is
the cumulative amount of material fed.

Positioning mode decides how incoming axis values are read:

    absolute (G90)   value is the new position
    relative (G91)   value is an offset from the current position

``delta`` and ``resolve`` are the only two places that know about the
mode; everything else asks them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import NamedTuple


class Vector3(NamedTuple):
    """Immutable 3D point in machine coordinates (mm)."""

    x: float
    y: float
    z: float


@dataclass(slots=True)
class MachineState:
    """Mutable machine state.

    Attributes
    ----------
    x, y, z : float
        Absolute position.
    e : float
        Cumulative extrusion.
    f : float
        Feed rate, tracked only.
    relative : bool
        ``True`` after G91, ``False`` after G90.  Never changed by motion.
    extruding : bool
        ``True`` if the move that produced this state fed material.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    e: float = 0.0
    f: float = 0.0
    relative: bool = False
    extruding: bool = False

    @property
    def position(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)

    def copy(self) -> MachineState:
        return replace(self)


def delta(previous: float, value: float, relative: bool) -> float:
    """Change implied by *value* relative to *previous*.

    In relative mode *value* already is the change.
    """
    return value if relative else value - previous


def resolve(previous: float, value: float | None, relative: bool) -> float:
    """Absolute result of applying *value* to *previous*.

    ``None`` (parameter absent or malformed) keeps *previous* unchanged.
    """
    if value is None:
        return previous
    return previous + value if relative else value
