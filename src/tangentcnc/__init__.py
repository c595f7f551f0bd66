"""Spline sketch to tangential-knife (C axis) G-code, and back."""

from .config.machine import AngleMode, MachineConfig
from .core.geometry import HeadingSample, Point2D
from .core.heading import angular_difference, heading_of, normalize
from .core.job import Job
from .core.playback import build_path, position_at_distance
from .core.spline import sample
from .core.units import Units
from .errors import EmptyGeometryError
from .gcode.generator import generate_oriented, generate_positional, orient_program
from .gcode.parser import parse_program, parse_with_heading

__all__ = [
    "AngleMode", "MachineConfig", "HeadingSample", "Point2D",
    "angular_difference", "heading_of", "normalize", "Job",
    "build_path", "position_at_distance", "sample", "Units",
    "EmptyGeometryError", "generate_oriented", "generate_positional",
    "orient_program", "parse_program", "parse_with_heading",
]
