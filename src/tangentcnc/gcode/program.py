"""Typed records making up a motion program.

A MotionProgram is built by the generator and rendered to text in one
place, so the line format lives in :mod:`.gcode_writer` only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from . import gcode_writer as gw


class MoveKind(Enum):
    """Type of motion."""
    RAPID = "G0"     # no cutting, full speed
    LINEAR = "G1"    # cutting feed


@dataclass(frozen=True)
class Comment:
    text: str

    def render(self) -> str:
        return gw.comment(self.text)


@dataclass(frozen=True)
class ModeCommand:
    """Pass-through word such as G90, G21, G17, F<rate> or M2."""
    code: str
    note: str = ""

    def render(self) -> str:
        return gw.with_note(self.code, self.note)


@dataclass(frozen=True)
class Move:
    """A G0/G1 line; axes left as None keep their modal value."""
    kind: MoveKind
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    c: Optional[float] = None
    f: Optional[float] = None
    note: str = ""

    def render(self) -> str:
        if self.kind is MoveKind.RAPID:
            line = gw.rapid(self.x, self.y, self.z, self.c)
            if self.f is not None:
                line += f" F{gw.fmt(self.f)}"
        else:
            line = gw.linear(self.x, self.y, self.z, self.c, self.f)
        return gw.with_note(line, self.note)


Record = Union[Comment, ModeCommand, Move]


@dataclass
class MotionProgram:
    """An ordered list of program records."""
    records: list[Record] = field(default_factory=list)

    def append(self, record: Record) -> None:
        self.records.append(record)

    def extend(self, records: list[Record]) -> None:
        self.records.extend(records)

    @property
    def moves(self) -> list[Move]:
        return [r for r in self.records if isinstance(r, Move)]

    def lines(self) -> list[str]:
        return [r.render() for r in self.records]

    def text(self) -> str:
        return "\n".join(self.lines())
