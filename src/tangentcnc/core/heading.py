"""Tangential heading (C axis) computation and normalisation.

Conventions: 0 deg points along +X, angles grow counter-clockwise, and Y is
"up".  Callers holding Y-down coordinates must negate dy first; the G-code
generator always works on machine-frame coordinates, which are already
Y-up.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..config.machine import AngleMode, MachineConfig

# Segments shorter than this have no usable direction
DEGENERATE_LENGTH = 1e-6


def heading_of(dx: float, dy: float) -> float:
    """Direction of the vector (dx, dy) in degrees, in [0, 360)."""
    ang = math.degrees(math.atan2(dy, dx))
    ang %= 360.0
    if ang >= 360.0:
        ang -= 360.0
    return ang


def fold(angle: float, mode: AngleMode) -> float:
    """Fold *angle* into (-180, 180] or [0, 360) depending on *mode*."""
    a = angle % 360.0
    if a >= 360.0:
        a -= 360.0
    if mode is AngleMode.SIGNED and a > 180.0:
        a -= 360.0
    return a


def normalize(
    angle: float,
    prev_angle: Optional[float],
    config: MachineConfig,
) -> float:
    """Apply offset, range fold, and (optionally) shortest-path continuity.

    With ``config.shortest_path`` and a previous heading, the result is the
    equivalent angle nearest to *prev_angle* and may lie outside the fold
    range.  Do not re-fold it: that would reintroduce the full turn.
    """
    normalized = fold(angle + config.angle_offset, config.angle_mode)

    if config.shortest_path and prev_angle is not None:
        diff = normalized - prev_angle
        while diff > 180.0:
            normalized -= 360.0
            diff -= 360.0
        while diff < -180.0:
            normalized += 360.0
            diff += 360.0

    return normalized


def angular_difference(a: float, b: float) -> float:
    """Smallest absolute separation between two headings, in [0, 180]."""
    diff = (b - a) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return abs(diff)


class HeadingTracker:
    """Assigns one normalised heading to every vertex of a machine-frame path.

    Both oriented G-code entry points (from control points and from an
    existing program) go through :meth:`resolve`, so identical geometry
    always yields identical C words.

    *previous* seeds shortest-path continuity.  ``None`` starts each program
    from a fresh reference; passing :attr:`last` from an earlier program
    carries the rotation state across programs instead.
    """

    def __init__(self, config: MachineConfig, previous: Optional[float] = None):
        self.config = config
        self.previous = previous
        self.last: Optional[float] = previous

    def resolve(self, xy: Sequence[tuple[float, float]]) -> list[float]:
        n = len(xy)
        if n == 0:
            return []

        # raw[i] is the direction of the segment into vertex i (None if degenerate)
        raw: list[Optional[float]] = [None] * n
        for i in range(1, n):
            dx = xy[i][0] - xy[i - 1][0]
            dy = xy[i][1] - xy[i - 1][1]
            if math.hypot(dx, dy) > DEGENERATE_LENGTH:
                raw[i] = heading_of(dx, dy)

        # Vertex 0 looks ahead to the first segment with a direction
        first = next((r for r in raw[1:] if r is not None), 0.0)

        headings: list[float] = []
        prev = self.previous
        for i in range(n):
            r = first if i == 0 else raw[i]
            if r is None:
                # Hold the last emitted heading through a zero-length move
                emitted = prev
            else:
                emitted = normalize(r, prev, self.config)
            headings.append(emitted)
            prev = emitted

        self.last = prev
        return headings
