"""G-code interpreter -- text to layered toolpaths.

One pass over the document, no I/O:

    split_lines -> tokenize -> classify -> handler(ctx, command)

All mutable state of a pass lives in a ``ParseContext`` that is created
per call and handed to every handler, so two parses never share anything.

Layer detection
---------------
A layer starts at the first *extruding* move whose Z differs from the Z
of the open layer.  Watching Z alone would split on every Z-hop; watching
"extrude at a new Z" does not.  Layers are kept in discovery order, so a
model that returns to an earlier height gets a new layer entry.

Public API::

    from gcode_layers import parse
    result = parse(text)
    result.layers[0].paths[0]   # [Vector3(...), Vector3(...), ...]
    result.layer_indices        # source line of each layer
    layers, indices = result.as_lists()
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from gcode_layers.interpreter.builder import Layer, LayerBuilder
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
from gcode_layers.interpreter.lexer import split_lines, tokenize
from gcode_layers.interpreter.state import MachineState, delta, resolve
from gcode_layers.utils.profiler import timer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ParseStats:
    """Counters collected during one pass."""

    lines: int = 0
    motion_commands: int = 0
    extruding_moves: int = 0
    travel_moves: int = 0
    arc_commands: int = 0
    malformed_parameters: int = 0
    ignored_commands: Counter = field(default_factory=Counter)
    elapsed_s: float | None = None


@dataclass(slots=True)
class ParseResult:
    """Output of a parse.

    Attributes
    ----------
    layers : list[Layer]
        Layers in discovery order.
    final_state : MachineState
        Machine state after the last line.
    stats : ParseStats
        Pass counters.
    """

    layers: list[Layer]
    final_state: MachineState
    stats: ParseStats

    @property
    def layer_indices(self) -> list[int]:
        """0-based source line at which each layer was opened."""
        return [layer.start_line for layer in self.layers]

    def as_lists(self) -> tuple[list[list[list[tuple[float, float, float]]]], list[int]]:
        """Plain ``(layers, layer_indices)`` pair of nested lists and tuples."""
        layers = [
            [[tuple(point) for point in path] for path in layer.paths]
            for layer in self.layers
        ]
        return layers, self.layer_indices


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class ParseContext:
    """Everything a single pass mutates."""

    state: MachineState = field(default_factory=MachineState)
    builder: LayerBuilder = field(default_factory=LayerBuilder)
    stats: ParseStats = field(default_factory=ParseStats)
    line_index: int = 0


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _linear_move(ctx: ParseContext, cmd: LinearMove) -> None:
    state = ctx.state
    rel = state.relative
    candidate = MachineState(
        x=resolve(state.x, cmd.x, rel),
        y=resolve(state.y, cmd.y, rel),
        z=resolve(state.z, cmd.z, rel),
        e=resolve(state.e, cmd.e, rel),
        f=resolve(state.f, cmd.f, rel),
        relative=rel,
    )

    extruded = delta(state.e, cmd.e, rel) if cmd.e is not None else 0.0
    if extruded > 0:
        candidate.extruding = True
        if ctx.builder.needs_new_layer(candidate.z):
            ctx.builder.open_layer(candidate.z, ctx.line_index)
        ctx.stats.extruding_moves += 1
    else:
        ctx.stats.travel_moves += 1

    ctx.builder.add_segment(state, candidate)
    ctx.state = candidate
    ctx.stats.motion_commands += 1


def _arc_move(ctx: ParseContext, cmd: ArcMove) -> None:
    ctx.stats.arc_commands += 1
    logger.debug("Arc move not supported, skipped (line %d)", ctx.line_index)


def _set_absolute(ctx: ParseContext, cmd: SetAbsolute) -> None:
    ctx.state.relative = False


def _set_relative(ctx: ParseContext, cmd: SetRelative) -> None:
    ctx.state.relative = True


def _set_position(ctx: ParseContext, cmd: SetPosition) -> None:
    # In-place on purpose: G92 redefines where the machine is, it is not a move
    state = ctx.state
    if cmd.x is not None:
        state.x = cmd.x
    if cmd.y is not None:
        state.y = cmd.y
    if cmd.z is not None:
        state.z = cmd.z
    if cmd.e is not None:
        state.e = cmd.e


def _unsupported(ctx: ParseContext, cmd: Unsupported) -> None:
    ctx.stats.ignored_commands[cmd.mnemonic] += 1
    logger.debug("Command not supported: %s (line %d)", cmd.mnemonic, ctx.line_index)


_HANDLERS = {
    LinearMove: _linear_move,
    ArcMove: _arc_move,
    SetAbsolute: _set_absolute,
    SetRelative: _set_relative,
    SetPosition: _set_position,
    Unsupported: _unsupported,
}


def execute(ctx: ParseContext, cmd: Command) -> None:
    """Apply one command to the context."""
    _HANDLERS[type(cmd)](ctx, cmd)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class GCodeParser:
    """Interpret G-code text into layered toolpaths.

    Parameters
    ----------
    instrument : bool
        Time the pass and log a summary at INFO level.

    Notes
    -----
    The parser holds no per-parse state; one instance can be reused and
    every call starts from the seed machine state (origin, absolute mode).
    """

    def __init__(self, instrument: bool = False) -> None:
        self.instrument = instrument

    def parse(self, text: str) -> ParseResult:
        """Parse a complete G-code document.

        Parameters
        ----------
        text : str
            Whole document, ``\\n`` separated, ``;`` comments allowed.

        Returns
        -------
        ParseResult
            Layers, per-layer start lines, final state and counters.

        Raises
        ------
        TypeError
            If *text* is not a string.
        """
        if not isinstance(text, str):
            raise TypeError(f"G-code text must be str, got {type(text).__name__}")

        ctx = ParseContext()
        if self.instrument:
            with timer("parse", sink=lambda name, s: setattr(ctx.stats, "elapsed_s", s)):
                self._run(ctx, text)
            self._log_summary(ctx)
        else:
            self._run(ctx, text)

        return ParseResult(
            layers=ctx.builder.finish(),
            final_state=ctx.state.copy(),
            stats=ctx.stats,
        )

    def _run(self, ctx: ParseContext, text: str) -> None:
        lines = split_lines(text)
        ctx.stats.lines = len(lines)

        for i, raw in enumerate(lines):
            line = tokenize(raw)
            if line.is_blank:
                continue
            ctx.line_index = i
            ctx.stats.malformed_parameters += len(line.malformed)
            execute(ctx, classify(line))

    def _log_summary(self, ctx: ParseContext) -> None:
        stats = ctx.stats
        layer_count = len(ctx.builder.finish())
        logger.info(
            f"Parsed {stats.lines} lines: {layer_count} layers, "
            f"{stats.extruding_moves} extruding / {stats.travel_moves} travel moves "
            f"in {stats.elapsed_s:.3f}s"
        )
        if stats.arc_commands:
            logger.info(f"Skipped {stats.arc_commands} arc moves (G2/G3)")
        if stats.ignored_commands:
            top = ", ".join(f"{m}x{n}" for m, n in stats.ignored_commands.most_common(5))
            logger.info(f"Ignored {sum(stats.ignored_commands.values())} unsupported commands ({top})")
        if stats.malformed_parameters:
            logger.warning(f"{stats.malformed_parameters} malformed parameters treated as absent")


def parse(text: str, instrument: bool = False) -> ParseResult:
    """Parse G-code text with a fresh :class:`GCodeParser`."""
    return GCodeParser(instrument=instrument).parse(text)
