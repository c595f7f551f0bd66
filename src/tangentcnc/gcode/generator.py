"""Tangential-knife G-code post-processor.

Produces two dialects from the same sampled polyline:

* positional: plain X/Y/Z moves;
* oriented: the same moves plus a ``C`` heading word and an
  ``; ORI=<deg>deg`` comment for controllers without a rotary axis.

Program layout::

    ; header comments
    G90 / G20|G21 / G17 / F<rapid>
    G0 Z<safe>
    G0 X.. Y.. [C..]
    G1 Z<cut> F<feed>
    G1 X.. Y.. [C..] F<feed>     (one per remaining sample)
    G0 Z<safe>
    M2
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from ..config.machine import MachineConfig
from ..core.geometry import Point2D
from ..core.heading import HeadingTracker
from . import gcode_writer as gw
from .parser import iter_lines
from .program import Comment, ModeCommand, MotionProgram, Move, MoveKind

logger = logging.getLogger(__name__)

TITLE = "TangentCNC G-code"
ORIENTED_TITLE = "TangentCNC G-code (with orientation)"


def _header(
    config: MachineConfig,
    title: str,
    generated_at: Optional[datetime],
    oriented: bool,
) -> list:
    unit = config.units.label()
    records = [Comment(title)]
    if generated_at is not None:
        records.append(Comment(f"Generated: {generated_at.isoformat()}"))
    records.append(Comment(f"Units: {unit}"))
    records.append(Comment(f"Scale: {config.scale_factor} (canvas units to {unit})"))
    if oriented:
        records.append(Comment("Orientation C: heading in degrees (0 deg = +X, CCW+, Y up)"))
        records.append(Comment("ORI: same heading in comment for controllers without C-axis"))
    return records


def _preamble(config: MachineConfig) -> list:
    return [
        ModeCommand("G90", "Absolute positioning"),
        ModeCommand(config.units.gcode_modal, f"Unit: {config.units.label()}"),
        ModeCommand("G17", "XY plane"),
        ModeCommand(f"F{gw.fmt(config.rapid_rate)}", "Rapid feed rate"),
    ]


def machine_points(
    polyline: Sequence[Point2D],
    config: MachineConfig,
) -> list[tuple[float, float]]:
    """Machine-frame XY for each sample, rounded to the emitted precision.

    Headings are computed from these rounded values so that re-reading the
    emitted program yields exactly the same C words.
    """
    out = []
    for p in polyline:
        x, y = config.to_machine(p.x, p.y)
        out.append((gw.quantize(x), gw.quantize(y)))
    return out


def build_program(
    polyline: Sequence[Point2D],
    config: MachineConfig,
    *,
    oriented: bool = False,
    previous_heading: Optional[float] = None,
    generated_at: Optional[datetime] = None,
) -> MotionProgram:
    """Build the typed program for *polyline* (see module docstring)."""
    program = MotionProgram()
    program.extend(_header(config, ORIENTED_TITLE if oriented else TITLE,
                           generated_at, oriented))
    program.extend(_preamble(config))

    xy = machine_points(polyline, config)
    if xy:
        headings: list[Optional[float]] = [None] * len(xy)
        if oriented:
            headings = HeadingTracker(config, previous_heading).resolve(xy)

        def note(c: Optional[float]) -> str:
            return gw.orientation_note(c) if c is not None else ""

        x0, y0 = xy[0]
        program.append(Move(MoveKind.RAPID, z=config.safe_height, note="Safe height"))
        program.append(Move(MoveKind.RAPID, x=x0, y=y0, c=headings[0], note=note(headings[0])))
        program.append(Move(MoveKind.LINEAR, z=config.cut_depth, f=config.feed_rate,
                            note="Plunge to cut depth"))
        for (x, y), c in zip(xy[1:], headings[1:]):
            program.append(Move(MoveKind.LINEAR, x=x, y=y, c=c, f=config.feed_rate,
                                note=note(c)))
        program.append(Move(MoveKind.RAPID, z=config.safe_height, note="Retract"))
    else:
        logger.debug("Empty polyline: emitting preamble and program end only")

    program.append(ModeCommand("M2", "Program end"))
    return program


def generate_positional(
    polyline: Sequence[Point2D],
    config: MachineConfig,
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Plain X/Y/Z program for *polyline*."""
    return build_program(polyline, config, generated_at=generated_at).text()


def orient_program(
    text: str,
    config: MachineConfig,
    *,
    previous_heading: Optional[float] = None,
) -> str:
    """Add C headings to every XY motion line of an existing program.

    Non-motion lines (comments, modes, Z-only moves) pass through verbatim.
    XY lines are rewritten with 3-decimal coordinates, the heading word and
    an ORI comment; any original trailing comment text is kept after it.
    """
    lines = list(iter_lines(text))

    # First pass: the modal XY position at every XY motion line
    xy: list[tuple[float, float]] = []
    last_x: Optional[float] = None
    last_y: Optional[float] = None
    for line in lines:
        if not line.is_motion:
            continue
        last_x = line.values.get("X", last_x)
        last_y = line.values.get("Y", last_y)
        if line.has_xy and last_x is not None and last_y is not None:
            xy.append((last_x, last_y))

    headings = HeadingTracker(config, previous_heading).resolve(xy)

    # Second pass: rewrite the XY lines in order
    out: list[str] = []
    idx = 0
    last_x = last_y = None
    for line in lines:
        if not line.is_motion:
            out.append(line.raw)
            continue
        v = line.values
        last_x = v.get("X", last_x)
        last_y = v.get("Y", last_y)
        if not (line.has_xy and last_x is not None and last_y is not None):
            out.append(line.raw)
            continue

        c = headings[idx]
        idx += 1
        parts = []
        if line.move is not None:
            parts.append(line.move)
        if "X" in v:
            parts.append(f"X{gw.fmt(v['X'])}")
        if "Y" in v:
            parts.append(f"Y{gw.fmt(v['Y'])}")
        if "Z" in v:
            parts.append(f"Z{gw.fmt(v['Z'])}")
        parts.append(f"C{gw.fmt(c)}")
        if "F" in v:
            parts.append(f"F{gw.fmt(v['F'])}")
        new_line = gw.with_note(" ".join(parts), gw.orientation_note(c))
        if line.comment.strip():
            new_line += f" {line.comment.strip()}"
        out.append(new_line)

    return "\n".join(out)


def _strip_title(text: str) -> list[str]:
    return [
        ln for ln in text.splitlines()
        if not ln.startswith(f"; {TITLE}") and not ln.startswith("; Generated:")
    ]


def generate_oriented(
    polyline: Sequence[Point2D],
    config: MachineConfig,
    *,
    base_program: Optional[str] = None,
    previous_heading: Optional[float] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Oriented program, derived from *base_program* when one is supplied.

    Without a (non-blank) base program the headings come straight from
    *polyline*.  Both routes share :class:`HeadingTracker` and give the same
    C values for the same geometry.
    """
    if base_program is None or not base_program.strip():
        return build_program(
            polyline, config,
            oriented=True,
            previous_heading=previous_heading,
            generated_at=generated_at,
        ).text()

    body = orient_program(base_program, config, previous_heading=previous_heading)
    header = [gw.comment(ORIENTED_TITLE)]
    if generated_at is not None:
        header.append(gw.comment(f"Generated: {generated_at.isoformat()}"))
    header.append(gw.comment("Source: Base G-code with C-axis orientation added"))
    return "\n".join(header + _strip_title(body))


def default_filename(oriented: bool = False, when: Optional[datetime] = None) -> str:
    """Timestamp-suffixed output name, e.g. ``tangentcnc_2024-01-01T10-00-00.nc``."""
    when = when or datetime.now()
    ts = when.isoformat(timespec="seconds").replace(":", "-").replace(".", "-")
    prefix = "tangentcnc_oriented" if oriented else "tangentcnc"
    return f"{prefix}_{ts}.nc"


@dataclass
class PostProcessorConfig:
    """Options that are not part of the machine snapshot."""
    oriented: bool = False
    previous_heading: Optional[float] = None
    stamp_time: bool = True


class TangentPostProcessor:
    """Writes positional or oriented programs for one machine config."""

    def __init__(self, config: MachineConfig, options: Optional[PostProcessorConfig] = None):
        self.config = config
        self.options = options or PostProcessorConfig()

    def get_lines(
        self,
        polyline: Sequence[Point2D],
        generated_at: Optional[datetime] = None,
    ) -> list[str]:
        if generated_at is None and self.options.stamp_time:
            generated_at = datetime.now()
        return build_program(
            polyline, self.config,
            oriented=self.options.oriented,
            previous_heading=self.options.previous_heading,
            generated_at=generated_at,
        ).lines()

    def generate(self, polyline: Sequence[Point2D], output: Path) -> Path:
        """Write the program to *output* (plain text, trailing newline)."""
        lines = self.get_lines(polyline)
        output = Path(output)
        output.write_text("\n".join(lines) + "\n")
        logger.debug("Wrote %d lines to %s", len(lines), output)
        return output
