"""Layer and path accumulation.

The builder receives every linear move as a ``(previous, current)`` pair
of machine states and groups the drawn geometry:

    extruding move   two points (start, end) appended to the last path
    travel move      closes the last path if it has points
    new layer        triggered by the interpreter, starts a fresh path list

Each extruding move contributes exactly **two** points, so consecutive
extruding moves give ``[a, b, b, c, c, d, ...]``.  Consumers read paths as
point pairs; keep it that way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gcode_layers.interpreter.state import MachineState, Vector3

logger = logging.getLogger(__name__)


Path = list[Vector3]
"""Ordered points; an empty path waits for the next extruding move."""


@dataclass(slots=True)
class Layer:
    """Paths drawn at one height.

    Parameters
    ----------
    z : float
        Height of the extruding move that opened the layer.
    start_line : int
        0-based source line index of that move.
    paths : list[Path]
        Paths in drawing order.  Starts as a single empty path.
    """

    z: float
    start_line: int
    paths: list[Path] = field(default_factory=lambda: [[]])

    @property
    def point_count(self) -> int:
        return sum(len(p) for p in self.paths)

    @property
    def segment_count(self) -> int:
        return self.point_count // 2


class LayerBuilder:
    """Accumulate paths into layers during a single parse."""

    def __init__(self) -> None:
        self._layers: list[Layer] = []
        self._current: Layer | None = None

    @property
    def current_z(self) -> float | None:
        """Height of the open layer, ``None`` before the first one."""
        return self._current.z if self._current is not None else None

    def needs_new_layer(self, z: float) -> bool:
        return self.current_z is None or z != self.current_z

    def open_layer(self, z: float, line_index: int) -> Layer:
        """Close the in-progress layer and start a new one at *z*."""
        if self._current is not None:
            self._layers.append(self._current)
        self._current = Layer(z=z, start_line=line_index)
        logger.debug("Layer %d opened at z=%s (line %d)", len(self._layers), z, line_index)
        return self._current

    def add_segment(self, previous: MachineState, current: MachineState) -> None:
        """Record one linear move.

        Parameters
        ----------
        previous : MachineState
            State before the move.
        current : MachineState
            State after the move; its ``extruding`` flag decides whether
            anything is drawn.
        """
        if self._current is None:
            # Travel before the first layer has nowhere to go
            return

        paths = self._current.paths
        if current.extruding:
            paths[-1].append(previous.position)
            paths[-1].append(current.position)
        elif paths[-1]:
            paths.append([])

    def finish(self) -> list[Layer]:
        """Return every opened layer, including the one in progress."""
        layers = list(self._layers)
        if self._current is not None:
            layers.append(self._current)
        return layers
