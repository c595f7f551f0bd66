"""Planar point type shared by the sampler, generator, and parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Point2D:
    """A point in the editor's canvas frame (Y grows downward)."""
    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def coerce(cls, value: Any) -> Point2D:
        """Accept a Point2D, an ``(x, y)`` pair, or a ``{"x", "y"}`` mapping."""
        if isinstance(value, Point2D):
            return value
        if isinstance(value, dict):
            return cls(float(value["x"]), float(value["y"]))
        x, y = value
        return cls(float(x), float(y))


def as_points(values: Iterable[Any]) -> list[Point2D]:
    return [Point2D.coerce(v) for v in values]


@dataclass(frozen=True)
class HeadingSample:
    """A parsed path vertex with its C-axis heading (None if never set)."""
    x: float
    y: float
    heading: Optional[float] = None
