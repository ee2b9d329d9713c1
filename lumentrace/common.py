"""Shared constants, measures, errors and small numeric helpers."""

from __future__ import annotations

import enum
import math
from typing import TypeVar

EPSILON = 1e-4
"""Relative error threshold used for ray intersection computations."""

S_EPSILON = 1e-9

INV_PI = 1.0 / math.pi
INV_TWOPI = 1.0 / (2.0 * math.pi)
INV_FOURPI = 1.0 / (4.0 * math.pi)
SQRT_TWO = math.sqrt(2.0)
INV_SQRT_TWO = 1.0 / math.sqrt(2.0)

_Number = TypeVar("_Number", int, float)


class EMeasure(enum.IntEnum):
    """Measures associated with probability distributions."""

    UNKNOWN = 0
    SOLID_ANGLE = 1
    DISCRETE = 2


class RenderError(RuntimeError):
    """Raised when scene data or a rendering query is invalid."""


def clamp(value: _Number, minimum: _Number, maximum: _Number) -> _Number:
    """Clamp ``value`` into the closed range ``[minimum, maximum]``."""
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def lerp(t: float, v1: float, v2: float) -> float:
    """Linearly interpolate between ``v1`` (t=0) and ``v2`` (t=1)."""
    return (1.0 - t) * v1 + t * v2


def mod(a: int, b: int) -> int:
    """Modulo whose result is made non-negative by adding ``b`` once.

    The remainder follows truncated division (its sign is that of ``a``);
    a negative remainder is then shifted by ``b``.
    """
    if b == 0:
        raise ZeroDivisionError("integer modulo by zero")
    r = abs(a) % abs(b)
    if a < 0:
        r = -r
    return r + b if r < 0 else r


def rad_to_deg(value: float) -> float:
    """Convert radians to degrees."""
    return value * (180.0 / math.pi)


def deg_to_rad(value: float) -> float:
    """Convert degrees to radians."""
    return value * (math.pi / 180.0)