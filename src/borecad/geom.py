"""
Basic planar geometry for borecad
=================================

Points are immutable ``(x, y)`` pairs.  They order lexicographically
(by ``x``, then ``y``), add and subtract like vectors and can be lifted
into three dimensions at a given axial position.  All measurements are
in millimetres.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Protocol, Tuple, TypeVar

Vec3 = Tuple[float, float, float]


class Point(NamedTuple):
    """An immutable planar coordinate."""

    x: float
    y: float

    def __add__(self, other):
        return Point(self.x + other[0], self.y + other[1])

    def __sub__(self, other):
        return Point(self.x - other[0], self.y - other[1])

    def __mul__(self, factor):
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self):
        return Point(-self.x, -self.y)

    def at(self, z: float) -> Vec3:
        """Lift the point to 3D at axial position ``z``."""
        return (self.x, self.y, z)

    def dist(self, other) -> float:
        return math.hypot(self.x - other[0], self.y - other[1])


class _Field(Protocol):
    def __add__(self, other): ...

    def __sub__(self, other): ...

    def __mul__(self, other): ...


T = TypeVar("T", bound=_Field)


def lerp(a0: T, a1: T, t: float) -> T:
    """Linear interpolation ``a0*(1-t) + a1*t`` over any type with ordinary
    arithmetic (floats, :class:`Point`, numpy arrays)."""
    return a0 + (a1 - a0) * t
