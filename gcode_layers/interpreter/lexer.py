"""Line splitting and tokenizing for G-code text.

A G-code document is handled one physical line at a time.  Comments start
at ``;`` and run to the end of the line; they are removed **before** the
text is split so that line indices still match the source file.

Each line is split on the space character.  The first token is the
command mnemonic (upper-cased), every following token is a parameter:
its first character (lower-cased) is the key and the rest is read as a
number::

    "G1 X10.5 y-2 E0.03"  ->  ("G1", {"x": 10.5, "y": -2.0, "e": 0.03})

Numbers are read like a lenient float parser: the longest valid leading
number is used (``"10mm"`` -> 10.0).  A remainder with no leading number
is *malformed* and stored as ``None`` so that downstream code treats the
parameter as absent, never as zero.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r";[^\n]*")

# Optional sign, digits.digits OR .digits OR digits, optional exponent
_NUMBER_RE = re.compile(
    r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?|[-+]?Infinity"
)


@dataclass(frozen=True, slots=True)
class TokenizedLine:
    """One tokenized source line.

    Parameters
    ----------
    mnemonic : str
        Upper-cased first token, ``""`` for blank lines.
    params : dict[str, float | None]
        Lower-cased parameter key -> value.  ``None`` marks a malformed
        value.  Last occurrence of a key wins.
    malformed : tuple[str, ...]
        Keys whose value could not be read as a number, in source order.
    """

    mnemonic: str
    params: dict[str, float | None] = field(default_factory=dict)
    malformed: tuple[str, ...] = ()

    @property
    def is_blank(self) -> bool:
        return not self.mnemonic

    def value(self, key: str) -> float | None:
        """Return the parameter value, or ``None`` when absent/malformed."""
        return self.params.get(key)


def strip_comments(text: str) -> str:
    """Remove every ``;`` comment, leaving line breaks in place."""
    return _COMMENT_RE.sub("", text)


def split_lines(text: str) -> list[str]:
    """Split a G-code document into raw command lines.

    Comment-only lines become empty strings; they are kept so that the
    position in the returned list is the 0-based source line index.
    """
    return strip_comments(text).split("\n")


def parse_number(raw: str) -> float | None:
    """Read the longest leading number of *raw*.

    Leading whitespace is skipped.  Returns ``None`` when *raw* does not
    start with a number.
    """
    match = _NUMBER_RE.match(raw.lstrip())
    if match is None:
        return None
    return float(match.group(0).replace("Infinity", "inf"))


def tokenize(line: str) -> TokenizedLine:
    """Split one raw line into mnemonic and parameters.

    Parameters
    ----------
    line : str
        A single line as returned by :func:`split_lines`.

    Returns
    -------
    TokenizedLine
        Mnemonic, parameter mapping and the keys that were malformed.
    """
    tokens = [t.strip() for t in line.split(" ")]
    mnemonic = tokens[0].upper() if tokens else ""

    params: dict[str, float | None] = {}
    malformed: list[str] = []

    for token in tokens[1:]:
        if not token:
            continue
        key = token[0].lower()
        value = parse_number(token[1:])
        if value is None:
            malformed.append(key)
            logger.debug("Malformed parameter %r in %r", token, line)
        params[key] = value

    return TokenizedLine(mnemonic=mnemonic, params=params, malformed=tuple(malformed))
