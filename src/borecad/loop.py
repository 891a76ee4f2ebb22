"""Closed planar polygons used as extrusion cross-sections."""

from __future__ import annotations

import math
from typing import Iterable, Iterator, NamedTuple, Sequence

from .errors import GeometryError, GeometryNotImplementedError
from .geom import Point


class Extent(NamedTuple):
    """Axis-aligned bounding box of a loop."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min


class Loop:
    """An ordered, cyclic sequence of points.

    The first and last points are implicitly connected.  Counter-clockwise
    loops have positive :meth:`area`.  Loops are immutable; every
    transformation returns a new loop.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Sequence[float]]):
        pts = tuple(Point(float(p[0]), float(p[1])) for p in points)
        if len(pts) < 3:
            raise GeometryError(f"a loop needs at least 3 points, got {len(pts)}")
        self._points = pts

    @property
    def points(self) -> tuple[Point, ...]:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __getitem__(self, i: int) -> Point:
        return self._points[i]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Loop):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return f"Loop({len(self._points)} points, area={self.area():.6g})"

    def _edges(self) -> Iterator[tuple[Point, Point]]:
        last = self._points[-1]
        for point in self._points:
            yield last, point
            last = point

    def circumference(self) -> float:
        return sum(a.dist(b) for a, b in self._edges())

    def area(self) -> float:
        """Signed area by the shoelace formula; positive when counter-clockwise."""
        return 0.5 * sum(a.x * b.y - a.y * b.x for a, b in self._edges())

    def centroid(self) -> Point:
        """Area centroid of the polygon.

        A degenerate loop (a point or a line, with zero area) falls back to
        the mean of its vertices.
        """
        sum_x = sum_y = div = 0.0
        for a, b in self._edges():
            cross = a.x * b.y - b.x * a.y
            div += cross
            sum_x += (a.x + b.x) * cross
            sum_y += (a.y + b.y) * cross
        div *= 3.0
        if div == 0.0:
            div = float(len(self._points))
            sum_x = sum(p.x for p in self._points)
            sum_y = sum(p.y for p in self._points)
        return Point(sum_x / div, sum_y / div)

    def extent(self) -> Extent:
        xs = [p.x for p in self._points]
        ys = [p.y for p in self._points]
        return Extent(min(xs), max(xs), min(ys), max(ys))

    def scale(self, factor: float) -> "Loop":
        return Loop((p.x * factor, p.y * factor) for p in self._points)

    def scale2(self, sx: float, sy: float) -> "Loop":
        return Loop((p.x * sx, p.y * sy) for p in self._points)

    def offset(self, dx: float, dy: float) -> "Loop":
        return Loop((p.x + dx, p.y + dy) for p in self._points)

    def translate(self, delta: Sequence[float]) -> "Loop":
        return self.offset(delta[0], delta[1])

    def flip_x(self) -> "Loop":
        """Mirror across the y axis, reversing order to keep the winding."""
        return Loop((-p.x, p.y) for p in reversed(self._points))

    def flip_y(self) -> "Loop":
        """Mirror across the x axis, reversing order to keep the winding."""
        return Loop((p.x, -p.y) for p in reversed(self._points))

    def with_area(self, area: float) -> "Loop":
        current = self.area()
        if current == 0.0 or area / current < 0.0:
            raise GeometryError(f"cannot rescale a loop of area {current} to area {area}")
        return self.scale(math.sqrt(area / current))

    def with_effective_diameter(self, diameter: float) -> "Loop":
        """Rescale to the area of a circle of ``diameter``."""
        return self.with_area(math.pi * 0.25 * diameter * diameter)

    def with_circumference(self, circumference: float) -> "Loop":
        current = self.circumference()
        if current == 0.0:
            raise GeometryError("cannot rescale a loop with zero circumference")
        return self.scale(circumference / current)

    def offset_curve(self, distance: float, quality: int | None = None) -> "Loop":
        # Needs a 2-D polygon boolean engine (Minkowski sum / erosion).
        raise GeometryNotImplementedError(
            "offset curves require a 2-D polygon boolean engine"
        )
