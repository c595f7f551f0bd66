"""Per-generation machine parameters.

A MachineConfig is an immutable snapshot: one instance drives one
generation or parse call, and changing settings later never alters text
that was already produced.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from ..core.units import Units


class AngleMode(Enum):
    """Range the C-axis heading is folded into."""
    POSITIVE = "0-360"       # [0, 360)
    SIGNED = "-180-180"      # (-180, 180]


@dataclass(frozen=True)
class MachineConfig:
    """Machining parameters applied when converting canvas paths to G-code."""

    units: Units = Units.MM
    scale_factor: float = 0.1      # canvas units -> machine units
    safe_height: float = 5.0       # Z for rapids
    cut_depth: float = -1.0        # Z while cutting (negative)
    feed_rate: float = 300.0       # G1 feed
    rapid_rate: float = 1000.0     # default feed word in the preamble

    # Orientation (C axis)
    angle_mode: AngleMode = AngleMode.SIGNED
    angle_offset: float = 0.0
    shortest_path: bool = True

    # Fixed XY offset between the canvas origin and the tool
    tool_offset_x: float = 0.0
    tool_offset_y: float = 0.0

    def __post_init__(self) -> None:
        # Allow plain strings for the enum fields (CLI / JSON input)
        if not isinstance(self.units, Units):
            object.__setattr__(self, "units", Units(self.units))
        if not isinstance(self.angle_mode, AngleMode):
            object.__setattr__(self, "angle_mode", AngleMode(self.angle_mode))
        if self.scale_factor <= 0:
            raise ValueError(f"scale_factor must be positive, got {self.scale_factor}")

    # -- frame conversion -------------------------------------------------

    def to_machine(self, x: float, y: float) -> tuple[float, float]:
        """Canvas (Y down) -> machine (Y up) coordinates."""
        return (
            x * self.scale_factor + self.tool_offset_x,
            -y * self.scale_factor + self.tool_offset_y,
        )

    def to_canvas(self, x: float, y: float) -> tuple[float, float]:
        """Exact inverse of :meth:`to_machine`."""
        return (
            (x - self.tool_offset_x) / self.scale_factor,
            -(y - self.tool_offset_y) / self.scale_factor,
        )

    # -- serialisation ----------------------------------------------------

    def replace(self, **changes: Any) -> MachineConfig:
        return replace(self, **changes)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["units"] = self.units.value
        d["angle_mode"] = self.angle_mode.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> MachineConfig:
        known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        return cls(**known)
