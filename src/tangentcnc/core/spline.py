"""Catmull-Rom densification of sparse control points.

The sampler turns the editor's control points into the dense polyline that
every later stage (G-code generation, headings, playback) consumes.

Spline form
-----------
For a span ``P1 -> P2`` with neighbours ``P0`` and ``P3``::

    x(t) = 0.5 * ( 2*P1
                 + (-P0 + P2) * t
                 + (2*P0 - 5*P1 + 4*P2 - P3) * t**2
                 + (-P0 + 3*P1 - 3*P2 + P3) * t**3 )

The end spans reuse the end point as the missing neighbour, which gives a
clamped (open) curve rather than a closed loop.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .geometry import Point2D

logger = logging.getLogger(__name__)


def catmull_rom(
    p0: Point2D,
    p1: Point2D,
    p2: Point2D,
    p3: Point2D,
    t: float,
) -> Point2D:
    """Evaluate one Catmull-Rom span at parameter *t* in [0, 1]."""
    x, y = _blend(
        np.array([p0.x, p0.y]),
        np.array([p1.x, p1.y]),
        np.array([p2.x, p2.y]),
        np.array([p3.x, p3.y]),
        np.array([[t]]),
    )[0]
    return Point2D(float(x), float(y))


def _blend(p0, p1, p2, p3, t: np.ndarray) -> np.ndarray:
    """Vectorised span evaluation; *t* has shape (n, 1), result (n, 2)."""
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        (2 * p1)
        + (-p0 + p2) * t
        + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t2
        + (-p0 + 3 * p1 - 3 * p2 + p3) * t3
    )


def sample(points: Sequence[Point2D], resolution: int) -> list[Point2D]:
    """Densify *points* into a polyline with *resolution* steps per span.

    Parameters
    ----------
    points:
        Ordered control points. 0, 1 and 2 points are handled as empty,
        single-sample and straight-line cases.
    resolution:
        Samples per span (>= 1). Joint samples are emitted once.

    Returns
    -------
    A new list of samples starting at ``points[0]`` and ending at
    ``points[-1]`` exactly.
    """
    if resolution < 1:
        raise ValueError(f"resolution must be >= 1, got {resolution}")

    n = len(points)
    if n == 0:
        return []
    if n == 1:
        return [Point2D(points[0].x, points[0].y)]

    # Column vector of parameters, excluding t=0 (the joint is already emitted)
    ts = (np.arange(1, resolution + 1, dtype=float) / resolution).reshape(-1, 1)

    poly = [Point2D(points[0].x, points[0].y)]

    if n == 2:
        a = np.array([points[0].x, points[0].y])
        b = np.array([points[1].x, points[1].y])
        span = a + (b - a) * ts
        poly.extend(_span_points(span, points[1]))
        return poly

    for i in range(n - 1):
        p0 = points[max(0, i - 1)]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[min(n - 1, i + 2)]
        span = _blend(
            np.array([p0.x, p0.y]),
            np.array([p1.x, p1.y]),
            np.array([p2.x, p2.y]),
            np.array([p3.x, p3.y]),
            ts,
        )
        poly.extend(_span_points(span, p2))

    logger.debug("Sampled %d control points into %d samples", n, len(poly))
    return poly


def _span_points(span: np.ndarray, end: Point2D) -> list[Point2D]:
    # The t=1 sample is pinned to the control point to avoid rounding drift
    out = [Point2D(x, y) for x, y in span[:-1].tolist()]
    out.append(Point2D(end.x, end.y))
    return out
