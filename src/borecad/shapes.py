"""
Parametric cross-section generators.

Every generator samples its curve ``quality`` times (see
:class:`borecad.config.BuildConfig`) and returns the points in
counter-clockwise order, so that extrusions built from them have
outward-facing normals.
"""

from __future__ import annotations

import math

from .config import QUALITY
from .errors import GeometryError
from .geom import Point
from .loop import Loop


def circle(diameter: float = 1.0, quality: int = QUALITY, phase: float = 0.5) -> Loop:
    """Regular ``quality``-gon inscribed in a circle of ``diameter``.

    ``phase`` is the angular offset of the first sample in units of one
    step; the default of one half keeps a flat edge facing each axis, 0
    puts a vertex on the positive x axis as OpenSCAD does.
    """
    radius = diameter * 0.5
    step = math.pi * 2.0 / quality
    return Loop(
        (math.cos((i + phase) * step) * radius, math.sin((i + phase) * step) * radius)
        for i in range(quality)
    )


def chorded_circle(amount: float = 0.5, quality: int = QUALITY) -> Loop:
    """Unit circle with a chord cut off; ``amount=0.5`` gives a semicircle."""
    a1 = math.pi * (0.5 + amount)
    a2 = math.pi * (2.5 - amount)
    return Loop(
        (math.cos(a1 + (i + 0.5) * (a2 - a1) / quality),
         math.sin(a1 + (i + 0.5) * (a2 - a1) / quality))
        for i in range(quality)
    )


def square(size: float) -> Loop:
    return Loop([(size, size), (-size, size), (-size, -size), (size, -size)])


def rectangle(p0: Point, p1: Point) -> Loop:
    """Axis-aligned rectangle from lower-left ``p0`` to upper-right ``p1``."""
    return Loop([p0, (p1[0], p0[1]), p1, (p0[0], p1[1])])


def squared_circle(x_pad: float, y_pad: float, diameter: float = 1.0,
                   quality: int = QUALITY) -> Loop:
    """A circle pulled apart by ``x_pad``/``y_pad`` into a rounded rectangle,
    rescaled to the area of a circle of ``diameter``."""
    points = []
    for i in range(quality):
        a = (i + 0.5) * math.pi * 2.0 / quality
        x = math.cos(a)
        x += x_pad * 0.5 if x >= 0 else -x_pad * 0.5
        y = math.sin(a)
        y += y_pad * 0.5 if y >= 0 else -y_pad * 0.5
        points.append((x, y))
    area = math.pi + x_pad * y_pad + x_pad * 2 + y_pad * 2
    want = math.pi * (diameter * 0.5) ** 2
    return Loop(points).scale(math.sqrt(want / area))


def rounded_rectangle(p0: Point, p1: Point, diameter: float,
                      quality: int = QUALITY) -> Loop:
    radius = min(diameter, p1[0] - p0[0], p1[1] - p0[1]) * 0.5
    points = []
    for i in range(quality):
        a = (i + 0.5) * math.pi * 2.0 / quality
        x = math.cos(a) * radius
        x += p0[0] + radius if x < 0 else p1[0] - radius
        y = math.sin(a) * radius
        y += p0[1] + radius if y < 0 else p1[1] - radius
        points.append((x, y))
    return Loop(points)


def half_rounded_rectangle(p0: Point, p1: Point, quality: int = QUALITY) -> Loop:
    """Rectangle whose right-hand side is a semicircular cap."""
    radius = p1[0] - p0[0]
    points = []
    for i in range(quality):
        a = ((i + 0.5) / quality - 0.5) * math.pi
        x = math.cos(a) * radius + p0[0]
        y = math.sin(a) * radius
        y += p0[1] + radius if y < 0 else p1[1] - radius
        points.append((x, y))
    points.append((p0[0], p1[1]))
    points.append((p0[0], p0[1]))
    return Loop(points)


def _lens(turn: float, circumference: float, quality: int) -> Loop:
    turn2 = math.pi - turn * 2
    shift = math.sin(turn)
    half = [
        (math.cos((i + 0.5) / quality * 2 * turn2 + turn),
         math.sin((i + 0.5) / quality * 2 * turn2 + turn) - shift)
        for i in range(quality // 2)
    ]
    return Loop(half + [(-x, -y) for x, y in half]).with_circumference(circumference)


def lens(amount: float, circumference: float = math.pi, quality: int = QUALITY) -> Loop:
    """Biconvex lens; ``amount`` in (0, 1) is the sine of the tip half-angle."""
    if not 0.0 <= amount < 1.0:
        raise GeometryError(f"lens amount must be in [0, 1), got {amount}")
    return _lens(math.asin(amount), circumference, quality)


def lens2(amount: float, circumference: float = math.pi, quality: int = QUALITY) -> Loop:
    """Biconvex lens; ``amount`` in (0, 1) is the tip turn as a fraction of a right angle."""
    if not 0.0 <= amount < 1.0:
        raise GeometryError(f"lens amount must be in [0, 1), got {amount}")
    return _lens(math.pi * 0.5 * amount, circumference, quality)
