"""Job pipeline: control points -> polyline -> G-code -> playback path.

A Job holds only explicit inputs.  Every accessor recomputes from them, so
callers rebuild a Job (or call again) whenever the points or settings
change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..config.machine import MachineConfig
from ..errors import EmptyGeometryError
from ..gcode.generator import generate_oriented, generate_positional
from ..gcode.parser import parse_program, parse_with_heading
from .geometry import Point2D
from .playback import PlaybackPath, build_path
from .spline import sample


@dataclass
class Job:
    """A sketch plus the settings used to turn it into a program."""

    points: list[Point2D] = field(default_factory=list)
    resolution: int = 100
    config: MachineConfig = field(default_factory=MachineConfig)
    generated_at: Optional[datetime] = None

    def polyline(self) -> list[Point2D]:
        return sample(self.points, self.resolution)

    def positional_program(self) -> str:
        return generate_positional(
            self.polyline(), self.config, generated_at=self.generated_at,
        )

    def oriented_program(
        self,
        base_program: Optional[str] = None,
        previous_heading: Optional[float] = None,
    ) -> str:
        return generate_oriented(
            self.polyline(), self.config,
            base_program=base_program,
            previous_heading=previous_heading,
            generated_at=self.generated_at,
        )

    def playback_path(self, oriented: bool = False) -> PlaybackPath:
        """Preview path built from the generated program text."""
        text = self.oriented_program() if oriented else self.positional_program()
        return build_path(parse_with_heading(text, self.config))

    def import_program(self, text: str) -> Job:
        """Return a new Job whose control points are read from *text*.

        Raises
        ------
        EmptyGeometryError:
            If *text* contains no XY moves.
        """
        points = parse_program(text, self.config)
        if not points:
            raise EmptyGeometryError("No XY moves found in the G-code")
        return Job(
            points=points,
            resolution=self.resolution,
            config=self.config,
            generated_at=self.generated_at,
        )
