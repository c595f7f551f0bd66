"""Low-level G-code line formatting helpers."""

from __future__ import annotations

from typing import Optional

# Fixed precision for every coordinate, heading and feed word
DECIMALS = 3


def fmt(value: float, decimals: int = DECIMALS) -> str:
    """Format a float for G-code with fixed *decimals* (no ``-0.000``)."""
    text = f"{value:.{decimals}f}"
    if float(text) == 0.0:
        text = f"{0.0:.{decimals}f}"
    return text


def quantize(value: float, decimals: int = DECIMALS) -> float:
    """The value a reader of :func:`fmt` output would recover."""
    return float(fmt(value, decimals))


def _words(
    code: str,
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
    c: Optional[float] = None,
    f: Optional[float] = None,
) -> str:
    parts = [code]
    if x is not None:
        parts.append(f"X{fmt(x)}")
    if y is not None:
        parts.append(f"Y{fmt(y)}")
    if z is not None:
        parts.append(f"Z{fmt(z)}")
    if c is not None:
        parts.append(f"C{fmt(c)}")
    if f is not None:
        parts.append(f"F{fmt(f)}")
    return " ".join(parts)


def rapid(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
    c: Optional[float] = None,
) -> str:
    """G0 rapid traverse."""
    return _words("G0", x, y, z, c)


def linear(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
    c: Optional[float] = None,
    f: Optional[float] = None,
) -> str:
    """G1 linear interpolation."""
    return _words("G1", x, y, z, c, f)


def comment(text: str) -> str:
    """Full-line semicolon comment."""
    return f"; {text}" if text else ";"


def with_note(line: str, note: str) -> str:
    """Append a trailing ``; note`` to *line* (no-op for an empty note)."""
    if not note:
        return line
    return f"{line} ; {note}"


def orientation_note(heading: float) -> str:
    """Human-readable heading for controllers without a C axis."""
    return f"ORI={fmt(heading)}deg"
