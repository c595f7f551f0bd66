"""Sanity checks run before a program is written.

Checks the machine config itself and the machine-frame extent of a
sampled path against the travel envelope of the target machine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from shapely.geometry import MultiPoint, Point, box

from ..config.machine import MachineConfig
from ..core.geometry import Point2D


@dataclass
class MachineEnvelope:
    """Axis travel limits (machine units)."""

    x_min: float = -500.0
    x_max: float = 500.0
    y_min: float = -500.0
    y_max: float = 500.0
    z_min: float = -50.0
    z_max: float = 50.0
    max_feed: float = 5000.0


@dataclass
class ValidationIssue:
    """A single validation problem."""

    severity: str  # "error" or "warning"
    message: str
    point: Optional[Point2D] = None


@dataclass
class ValidationResult:
    """Result of validating a config and/or path."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)

    @property
    def is_ok(self) -> bool:
        return len(self.issues) == 0

    def merge(self, other: ValidationResult) -> ValidationResult:
        return ValidationResult(self.issues + other.issues)


def validate_config(config: MachineConfig) -> ValidationResult:
    """Check feeds are positive and the safe height clears the cut depth."""
    result = ValidationResult()

    if config.feed_rate <= 0:
        result.issues.append(ValidationIssue(
            "error", f"Feed rate must be positive (got {config.feed_rate})",
        ))
    if config.rapid_rate <= 0:
        result.issues.append(ValidationIssue(
            "error", f"Rapid rate must be positive (got {config.rapid_rate})",
        ))
    if config.safe_height <= config.cut_depth:
        result.issues.append(ValidationIssue(
            "warning",
            f"Safe height {config.safe_height} is not above cut depth "
            f"{config.cut_depth}",
        ))
    return result


def validate_samples(
    samples: Sequence[Point2D],
    config: MachineConfig,
    envelope: MachineEnvelope,
) -> ValidationResult:
    """Check the machine-frame path and Z levels against *envelope*.

    Checks performed:
    - Path is non-empty
    - All XY samples within machine travel
    - Safe height and cut depth within Z travel
    - Feed rate within machine maximum
    """
    result = ValidationResult()

    if not samples:
        result.issues.append(ValidationIssue(
            "warning", "Path is empty: no moves will be generated",
        ))
        return result

    travel = box(envelope.x_min, envelope.y_min, envelope.x_max, envelope.y_max)
    machine_xy = [config.to_machine(p.x, p.y) for p in samples]
    geom = MultiPoint(machine_xy)

    if not travel.covers(geom):
        # Report each offending sample once
        for p, (mx, my) in zip(samples, machine_xy):
            if not travel.covers(Point(mx, my)):
                result.issues.append(ValidationIssue(
                    "error",
                    f"X={mx:.3f} Y={my:.3f} outside travel "
                    f"X[{envelope.x_min}, {envelope.x_max}] "
                    f"Y[{envelope.y_min}, {envelope.y_max}]",
                    p,
                ))

    for label, z in (("Safe height", config.safe_height), ("Cut depth", config.cut_depth)):
        if z < envelope.z_min or z > envelope.z_max:
            result.issues.append(ValidationIssue(
                "error",
                f"{label} Z={z:.3f} outside travel "
                f"[{envelope.z_min}, {envelope.z_max}]",
            ))

    if config.feed_rate > envelope.max_feed:
        result.issues.append(ValidationIssue(
            "warning",
            f"Feed {config.feed_rate:.1f} exceeds machine max "
            f"({envelope.max_feed:.1f})",
        ))

    return result
