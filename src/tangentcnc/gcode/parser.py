"""G-code reader: recovers XY (and C) samples from program text.

The reader is deliberately forgiving.  Comments are stripped, unknown
words are ignored, and a malformed number only costs that one field on
that one line; the modal value from earlier lines is kept.  X, Y and C
are modal across the whole document, so a line that omits an axis
inherits its last value.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ..config.machine import MachineConfig
from ..core.geometry import HeadingSample, Point2D

logger = logging.getLogger(__name__)

COMMENT_RE = re.compile(r"\(.*?\)|;.*$")
TRAILING_COMMENT_RE = re.compile(r";(.*)$")
MOVE_CMD_RE = re.compile(r"(?<![A-Za-z])[gG]0*([01])(?![0-9.])")
WORD_RE = re.compile(r"(?<![A-Za-z])([XYZCFxyzcf])([^\sA-Za-z]*)")
NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)")

AXES = ("X", "Y", "Z", "C", "F")


@dataclass
class ParsedLine:
    """One source line split into code words and comment."""
    number: int
    raw: str
    code: str                       # comments removed, stripped
    comment: str = ""               # text after ';' (without the ';')
    move: Optional[str] = None      # "G0" / "G1" when present
    words: dict[str, str] = field(default_factory=dict)     # raw tokens
    values: dict[str, float] = field(default_factory=dict)  # parsed numbers

    @property
    def is_motion(self) -> bool:
        if not self.code:
            return False
        return self.move is not None or "X" in self.words or "Y" in self.words

    @property
    def has_xy(self) -> bool:
        return "X" in self.values or "Y" in self.values


def _parse_number(token: str) -> Optional[float]:
    if not NUMBER_RE.fullmatch(token):
        return None
    return float(token)


def parse_line(raw: str, number: int = 0) -> ParsedLine:
    """Split *raw* into move code, axis words and trailing comment."""
    m = TRAILING_COMMENT_RE.search(raw)
    trailing = m.group(1) if m else ""
    code = COMMENT_RE.sub("", raw).strip()

    parsed = ParsedLine(number=number, raw=raw, code=code, comment=trailing)
    if not code:
        return parsed

    mm = MOVE_CMD_RE.search(code)
    if mm:
        parsed.move = f"G{mm.group(1)}"

    for wm in WORD_RE.finditer(code):
        letter = wm.group(1).upper()
        if letter in parsed.words:
            continue  # first occurrence wins
        token = wm.group(2)
        parsed.words[letter] = token
        value = _parse_number(token)
        if value is None:
            logger.debug("Line %d: ignoring malformed %s word %r", number, letter, token)
            continue
        parsed.values[letter] = value

    return parsed


def iter_lines(text: str) -> Iterator[ParsedLine]:
    """Yield a :class:`ParsedLine` for every line of *text* (1-based numbers)."""
    for number, raw in enumerate(text.splitlines(), start=1):
        yield parse_line(raw, number)


def parse_with_heading(
    text: str,
    config: Optional[MachineConfig] = None,
    *,
    to_canvas: bool = True,
) -> list[HeadingSample]:
    """Extract XY samples plus the modal C heading from *text*.

    Parameters
    ----------
    config:
        Supplies the frame conversion (scale, Y flip, tool offsets) that
        undoes the generator's.  Defaults to ``MachineConfig()``.
    to_canvas:
        Return canvas coordinates (default) or raw machine coordinates.

    Returns
    -------
    One sample per motion line that sets X or Y, once both X and Y are
    known.  An empty list means no geometry was found.
    """
    cfg = config or MachineConfig()
    last_x: Optional[float] = None
    last_y: Optional[float] = None
    last_c: Optional[float] = None
    out: list[HeadingSample] = []

    for line in iter_lines(text):
        if not line.is_motion:
            continue
        v = line.values
        if "X" in v:
            last_x = v["X"]
        if "Y" in v:
            last_y = v["Y"]
        if "C" in v:
            last_c = v["C"]

        if not line.has_xy or last_x is None or last_y is None:
            continue

        if to_canvas:
            x, y = cfg.to_canvas(last_x, last_y)
        else:
            x, y = last_x, last_y
        out.append(HeadingSample(x, y, last_c))

    logger.debug("Parsed %d samples", len(out))
    return out


def parse_program(
    text: str,
    config: Optional[MachineConfig] = None,
    *,
    to_canvas: bool = True,
) -> list[Point2D]:
    """Positional-only variant of :func:`parse_with_heading`."""
    return [
        Point2D(s.x, s.y)
        for s in parse_with_heading(text, config, to_canvas=to_canvas)
    ]
