"""Command variants -- the vocabulary between tokens and the interpreter.

Every supported G-code command is an immutable, slotted dataclass that
carries only the parameters it uses.  ``classify`` turns a tokenized line
into one of these; the interpreter dispatches on the variant type instead
of comparing mnemonic strings.

Supported subset
----------------
``G0``/``G1``   linear move (``LinearMove``)
``G2``/``G3``   arc move, recognized but never interpolated (``ArcMove``)
``G90``         absolute positioning (``SetAbsolute``)
``G91``         relative positioning (``SetRelative``)
``G92``         set position (``SetPosition``)

Anything else becomes ``Unsupported`` and is skipped.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass

from gcode_layers.interpreter.lexer import TokenizedLine

# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Command(ABC):
    """Base class for all interpreted commands."""

    pass


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LinearMove(Command):
    """Straight move (G0 rapid or G1 feed).

    Parameters
    ----------
    x, y, z, e, f : float | None
        Axis values as written in the line; ``None`` when absent or
        malformed.  Read as absolute or relative by the current mode.
    rapid : bool
        ``True`` for G0.  Kept for consumers; the interpreter treats G0
        and G1 the same way.
    """

    x: float | None = None
    y: float | None = None
    z: float | None = None
    e: float | None = None
    f: float | None = None
    rapid: bool = False


@dataclass(frozen=True, slots=True)
class ArcMove(Command):
    """Circular move (G2 clockwise, G3 counter-clockwise).  Not interpolated."""

    clockwise: bool = True


# ---------------------------------------------------------------------------
# Modal / position commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetAbsolute(Command):
    """G90: following axis values are absolute positions."""

    pass


@dataclass(frozen=True, slots=True)
class SetRelative(Command):
    """G91: following axis values are offsets."""

    pass


@dataclass(frozen=True, slots=True)
class SetPosition(Command):
    """G92: declare the current position without moving.

    Present fields overwrite the machine state directly, whatever the
    positioning mode.  Feed rate is not part of G92.
    """

    x: float | None = None
    y: float | None = None
    z: float | None = None
    e: float | None = None


@dataclass(frozen=True, slots=True)
class Unsupported(Command):
    """Any mnemonic outside the supported subset."""

    mnemonic: str


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _linear(line: TokenizedLine) -> Command:
    p = line.params
    return LinearMove(
        x=p.get("x"),
        y=p.get("y"),
        z=p.get("z"),
        e=p.get("e"),
        f=p.get("f"),
        rapid=line.mnemonic == "G0",
    )


def _set_position(line: TokenizedLine) -> Command:
    p = line.params
    return SetPosition(x=p.get("x"), y=p.get("y"), z=p.get("z"), e=p.get("e"))


_BUILDERS = {
    "G0": _linear,
    "G1": _linear,
    "G2": lambda line: ArcMove(clockwise=True),
    "G3": lambda line: ArcMove(clockwise=False),
    "G90": lambda line: SetAbsolute(),
    "G91": lambda line: SetRelative(),
    "G92": _set_position,
}


def classify(line: TokenizedLine) -> Command:
    """Map a tokenized line to its command variant.

    Mnemonics are compared exactly, so ``G01`` is ``Unsupported``.
    """
    builder = _BUILDERS.get(line.mnemonic)
    if builder is None:
        return Unsupported(mnemonic=line.mnemonic)
    return builder(line)
