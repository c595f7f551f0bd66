"""Arc-length indexed path used to scrub or animate a program preview.

Segments carry the C heading of their destination vertex; the heading
snaps per segment rather than blending between vertices.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from .geometry import HeadingSample, Point2D
from .heading import DEGENERATE_LENGTH, angular_difference


@dataclass(frozen=True)
class MotionSegment:
    start: Point2D
    end: Point2D
    length: float
    cumulative_start: float
    cumulative_end: float
    heading: Optional[float] = None
    heading_delta: Optional[float] = None

    @property
    def tangent(self) -> tuple[float, float]:
        """Unit direction of travel (canvas frame)."""
        dx = self.end.x - self.start.x
        dy = self.end.y - self.start.y
        tl = math.hypot(dx, dy) or 1.0
        return (dx / tl, dy / tl)


@dataclass(frozen=True)
class PlaybackPosition:
    x: float
    y: float
    tangent: tuple[float, float]
    heading: Optional[float]
    heading_delta: float


@dataclass
class PlaybackPath:
    segments: list[MotionSegment] = field(default_factory=list)
    total_length: float = 0.0
    # Cumulative end distance of each segment, for bisection
    _ends: np.ndarray = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self._ends is None:
            self._ends = np.array([s.cumulative_end for s in self.segments], dtype=float)

    @property
    def is_empty(self) -> bool:
        return len(self.segments) == 0


def _heading(sample) -> Optional[float]:
    return getattr(sample, "heading", None)


def build_path(samples: Sequence[Union[Point2D, HeadingSample]]) -> PlaybackPath:
    """Build contiguous segments between consecutive *samples*.

    Coincident neighbours (distance <= 1e-6) are dropped, so every stored
    segment has positive length and cumulative distances strictly increase.
    """
    if len(samples) < 2:
        return PlaybackPath()

    xy = np.array([[s.x, s.y] for s in samples], dtype=float)
    lengths = np.hypot(*np.diff(xy, axis=0).T)
    keep = np.nonzero(lengths > DEGENERATE_LENGTH)[0]
    if keep.size == 0:
        return PlaybackPath()

    kept = lengths[keep]
    ends = np.cumsum(kept)
    starts = ends - kept

    segments = []
    for k, i in enumerate(keep.tolist()):
        a = samples[i]
        b = samples[i + 1]
        ha, hb = _heading(a), _heading(b)
        delta = angular_difference(ha, hb) if ha is not None and hb is not None else 0.0
        segments.append(MotionSegment(
            start=Point2D(a.x, a.y),
            end=Point2D(b.x, b.y),
            length=float(kept[k]),
            cumulative_start=float(starts[k]),
            cumulative_end=float(ends[k]),
            heading=hb,
            heading_delta=delta,
        ))

    return PlaybackPath(segments=segments, total_length=float(ends[-1]), _ends=ends)


def clamp_distance(path: PlaybackPath, d: float) -> float:
    """Clamp *d* to ``[0, total_length]``."""
    return min(max(d, 0.0), path.total_length)


def position_at_distance(path: PlaybackPath, d: float) -> Optional[PlaybackPosition]:
    """Interpolated position *d* along *path*; ``None`` for an empty path.

    *d* is expected to be clamped by the caller.  Past the end, the final
    vertex of the last segment is returned with that segment's heading.
    """
    if path.is_empty:
        return None

    idx = int(np.searchsorted(path._ends, d, side="left"))
    if idx >= len(path.segments):
        last = path.segments[-1]
        return PlaybackPosition(
            x=last.end.x,
            y=last.end.y,
            tangent=last.tangent,
            heading=last.heading,
            heading_delta=last.heading_delta or 0.0,
        )

    seg = path.segments[idx]
    t = (d - seg.cumulative_start) / seg.length
    return PlaybackPosition(
        x=seg.start.x + (seg.end.x - seg.start.x) * t,
        y=seg.start.y + (seg.end.y - seg.start.y) * t,
        tangent=seg.tangent,
        heading=seg.heading,
        heading_delta=seg.heading_delta or 0.0,
    )
