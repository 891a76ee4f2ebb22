"""Piecewise-linear diameter profiles.

A profile maps an axial position to a diameter.  Each control position
carries two diameters: ``low`` is the value approached from below and
``high`` the value leaving upward, so a control point whose ``low`` and
``high`` differ is a step (a *kink*) in the profile.

The modelling kernel only needs the small read-only surface described by
:class:`ProfileLike`; :class:`Profile` is the concrete implementation used
by the body builder and the tests.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Union

from .config import QUALITY
from .cornu import transition_points
from .errors import GeometryError
from .geom import lerp

AngleSpec = Union[float, str, None]


class ProfileLike(Protocol):
    def __call__(self, z: float, high: bool = False) -> float: ...

    @property
    def kinks(self) -> List[float]: ...

    def start(self) -> float: ...

    def end(self) -> float: ...


class Profile:
    """Diameter as a function of axial position.

    Args:
        pos: strictly non-decreasing control positions
        low: diameter arriving at each position
        high: diameter leaving each position, defaults to ``low``
    """

    __slots__ = ("pos", "low", "high")

    def __init__(self, pos: Sequence[float], low: Sequence[float],
                 high: Optional[Sequence[float]] = None):
        if high is None:
            high = low
        if not pos:
            raise GeometryError("a profile needs at least one control position")
        if not len(pos) == len(low) == len(high):
            raise GeometryError(
                f"profile lists differ in length: {len(pos)} positions, "
                f"{len(low)} low, {len(high)} high"
            )
        if any(b < a for a, b in zip(pos, pos[1:])):
            raise GeometryError("profile positions must be non-decreasing")
        self.pos = [float(p) for p in pos]
        self.low = [float(d) for d in low]
        self.high = [float(d) for d in high]

    @classmethod
    def from_points(cls, spec: Iterable[Sequence[float]]) -> "Profile":
        """Build a profile from ``(pos, diameter)`` or ``(pos, low, high)`` items."""
        pos, low, high = [], [], []
        for item in spec:
            pos.append(item[0])
            low.append(item[1])
            high.append(item[2] if len(item) > 2 else item[1])
        return cls(pos, low, high)

    def __call__(self, z: float, high: bool = False) -> float:
        if z < self.pos[0]:
            return self.low[0]
        if z > self.pos[-1]:
            return self.high[-1]
        i = bisect_left(self.pos, z)
        if self.pos[i] == z:
            return self.high[i] if high else self.low[i]
        t = (z - self.pos[i - 1]) / (self.pos[i] - self.pos[i - 1])
        return lerp(self.high[i - 1], self.low[i], t)

    def __repr__(self) -> str:
        return f"Profile(pos={self.pos!r}, low={self.low!r}, high={self.high!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Profile):
            return NotImplemented
        return (self.pos, self.low, self.high) == (other.pos, other.low, other.high)

    @property
    def kinks(self) -> List[float]:
        """Control positions, in order.  Every control position is a point
        where the slope may change, so extrusions sample all of them."""
        return list(self.pos)

    def start(self) -> float:
        return self.pos[0]

    def end(self) -> float:
        return self.pos[-1]

    def maximum(self) -> float:
        return max(max(self.low), max(self.high))

    def morph(self, other: "Profile", op: Callable[[float, float], float]) -> "Profile":
        """Combine two profiles pointwise at the union of their positions."""
        pos = sorted(set(self.pos) | set(other.pos))
        return Profile(
            pos,
            [op(self(p), other(p)) for p in pos],
            [op(self(p, True), other(p, True)) for p in pos],
        )

    def max_with(self, other: "Profile") -> "Profile":
        return self.morph(other, max)

    def min_with(self, other: "Profile") -> "Profile":
        return self.morph(other, min)

    def __add__(self, other: Union["Profile", float]) -> "Profile":
        """Pointwise sum with another profile, or widen by a constant."""
        if isinstance(other, (int, float)):
            return Profile(self.pos, [d + other for d in self.low],
                           [d + other for d in self.high])
        return self.morph(other, lambda a, b: a + b)

    def __sub__(self, other: "Profile") -> "Profile":
        return self.morph(other, lambda a, b: a - b)

    def moved(self, offset: float) -> "Profile":
        return Profile([p + offset for p in self.pos], self.low, self.high)

    def reversed(self) -> "Profile":
        """Mirror the profile about position zero."""
        return Profile([-p for p in reversed(self.pos)],
                       list(reversed(self.high)), list(reversed(self.low)))

    def clipped(self, start: float, end: float) -> "Profile":
        """Restrict (or extend, holding the end diameters) to ``[start, end]``."""
        pos = [start]
        low = [self(start, True)]
        high = [self(start, True)]
        for i, p in enumerate(self.pos):
            if start < p < end:
                pos.append(p)
                low.append(self.low[i])
                high.append(self.high[i])
        pos.append(end)
        low.append(self(end))
        high.append(self(end))
        return Profile(pos, low, high)

    def appended_with(self, other: "Profile") -> "Profile":
        """Join ``other`` onto the end of this profile."""
        shifted = other.moved(self.pos[-1])
        return Profile(
            self.pos[:-1] + shifted.pos,
            self.low + shifted.low[1:],
            self.high[:-1] + shifted.high,
        )

    def decorated(self, pos: float, align: float, amount: float = 0.2) -> "Profile":
        """Add a triangular bead around ``pos``.

        The bead is ``amount`` times the local diameter high and twice
        that wide; ``align`` of 1 or -1 moves it to sit wholly above or
        below ``pos``.
        """
        thickness = self(pos) * amount
        centre = pos + thickness * align
        bead = Profile([centre - thickness, centre, centre + thickness],
                       [0.0, thickness, 0.0])
        return self + bead.clipped(self.start(), self.end())

    def as_stepped(self, max_step: float) -> "Profile":
        """Approximate the profile by cylinders whose diameters differ by at
        most ``max_step``."""
        pos: List[float] = []
        for i in range(len(self.pos) - 1):
            pos.append(self.pos[i])
            ax, ay = self.pos[i], self.high[i]
            bx, by = self.pos[i + 1], self.low[i + 1]
            n = int(abs(by - ay) / max_step) + 1
            pos.extend((bx - ax) * j / n + ax for j in range(1, n))
        pos.append(self.pos[-1])
        diams = [self(0.5 * (a + b)) for a, b in zip(pos, pos[1:])]
        if not diams:
            return Profile(pos, self.low, self.high)
        return Profile(pos, [diams[0]] + diams, diams + [diams[-1]])

    @classmethod
    def curved(cls, pos: Sequence[float], low: Sequence[float], high: Sequence[float],
               low_angle: Sequence[AngleSpec], high_angle: Sequence[AngleSpec],
               quality: int = QUALITY) -> "Profile":
        """Join control points with clothoid transitions.

        The radius curve leaves position ``i`` at ``high_angle[i]`` and
        arrives at position ``i+1`` at ``low_angle[i+1]``.  An angle is a
        number of degrees, ``"mean"`` (average of the neighbouring straight
        segments), ``"up"`` (the following segment), ``"down"`` (the
        preceding segment) or ``None`` (straight segment).
        """
        n = len(pos)
        chords = []
        for i in range(n - 1):
            chords.append(math.atan2((low[i + 1] - high[i]) * 0.5, pos[i + 1] - pos[i]))

        def interpret(i: int, spec: AngleSpec) -> Optional[float]:
            if spec is None:
                return None
            if spec == "mean":
                return (chords[i - 1] + chords[i]) * 0.5
            if spec == "up":
                return chords[i]
            if spec == "down":
                return chords[i - 1]
            if isinstance(spec, str):
                raise GeometryError(f"unknown angle specification {spec!r}")
            return math.radians(spec)

        out_pos, out_low, out_high = [], [], []
        for i in range(n - 1):
            out_pos.append(pos[i])
            out_low.append(low[i])
            out_high.append(high[i])
            a1 = interpret(i, high_angle[i])
            a2 = interpret(i + 1, low_angle[i + 1])
            if a1 is None and a2 is None:
                continue
            p1 = (pos[i], high[i] * 0.5)
            p2 = (pos[i + 1], low[i + 1] * 0.5)
            chord = chords[i]
            for x, y in transition_points(p1, p2,
                                          chord if a1 is None else a1,
                                          chord if a2 is None else a2,
                                          quality):
                out_pos.append(x)
                out_low.append(y * 2)
                out_high.append(y * 2)
        out_pos.append(pos[-1])
        out_low.append(low[-1])
        out_high.append(high[-1])
        return cls(out_pos, out_low, out_high)
