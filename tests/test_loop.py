import math

import pytest

from borecad.errors import GeometryError, GeometryNotImplementedError
from borecad.geom import Point, lerp
from borecad.loop import Loop
from borecad.shapes import (
    chorded_circle,
    circle,
    half_rounded_rectangle,
    lens,
    lens2,
    rectangle,
    rounded_rectangle,
    square,
    squared_circle,
)


def _polygon_area_ratio(n):
    # area of a regular n-gon over the area of its circumcircle
    return math.sin(2 * math.pi / n) / (2 * math.pi / n)


def test_point_arithmetic_and_order():
    a = Point(1.0, 2.0)
    b = Point(3.0, -1.0)
    assert a + b == Point(4.0, 1.0)
    assert b - a == Point(2.0, -3.0)
    assert 2 * a == Point(2.0, 4.0)
    assert sorted([b, a, Point(1.0, 1.0)]) == [Point(1.0, 1.0), a, b]
    assert a.at(5.0) == (1.0, 2.0, 5.0)


def test_lerp_over_numbers_and_points():
    assert lerp(2.0, 4.0, 0.25) == pytest.approx(2.5)
    assert lerp(Point(0.0, 0.0), Point(2.0, 4.0), 0.5) == Point(1.0, 2.0)


@pytest.mark.parametrize("diameter", [1.0, 2.5, 17.0])
def test_circle_area_and_centroid(diameter):
    loop = circle(diameter, 128)
    r = diameter / 2
    assert loop.area() == pytest.approx(math.pi * r * r, rel=1e-3)
    assert loop.area() == pytest.approx(math.pi * r * r * _polygon_area_ratio(128), rel=1e-9)
    c = loop.centroid()
    assert c.x == pytest.approx(0.0, abs=1e-9)
    assert c.y == pytest.approx(0.0, abs=1e-9)


def test_circle_is_counter_clockwise():
    assert circle(1.0, 16).area() > 0
    assert len(circle(1.0, 16)) == 16


def test_loop_needs_three_points():
    with pytest.raises(GeometryError):
        Loop([(0, 0), (1, 1)])


def test_with_area_is_idempotent():
    loop = circle(3.0, 64).offset(1.0, 2.0)
    once = loop.with_area(10.0)
    twice = once.with_area(10.0)
    assert once.area() == pytest.approx(10.0)
    for p, q in zip(once, twice):
        assert p.x == pytest.approx(q.x)
        assert p.y == pytest.approx(q.y)


def test_with_circumference_is_idempotent():
    loop = square(1.0)
    once = loop.with_circumference(20.0)
    assert once.circumference() == pytest.approx(20.0)
    assert once.with_circumference(20.0).circumference() == pytest.approx(20.0)


def test_with_effective_diameter():
    loop = square(1.0).with_effective_diameter(4.0)
    assert loop.area() == pytest.approx(math.pi * 4.0)


def test_rescaling_zero_area_loop_fails():
    flat = Loop([(0, 0), (1, 1), (2, 2)])
    with pytest.raises(GeometryError):
        flat.with_area(1.0)


def test_flip_x_twice_round_trips():
    loop = rectangle(Point(0.0, 0.0), Point(3.0, 1.0))
    assert loop.flip_x().flip_x() == loop
    assert loop.flip_y().flip_y() == loop


def test_flip_keeps_winding():
    loop = rectangle(Point(1.0, 0.0), Point(3.0, 1.0))
    flipped = loop.flip_x()
    assert flipped.area() == pytest.approx(loop.area())
    assert flipped.extent() == (-3.0, -1.0, 0.0, 1.0)


def test_degenerate_centroid_falls_back_to_mean():
    flat = Loop([(0, 0), (1, 1), (2, 2)])
    assert flat.centroid() == Point(1.0, 1.0)
    dot = Loop([(5, 5), (5, 5), (5, 5)])
    assert dot.centroid() == Point(5.0, 5.0)


def test_centroid_of_offset_rectangle():
    loop = rectangle(Point(2.0, 2.0), Point(4.0, 6.0))
    assert loop.centroid().x == pytest.approx(3.0)
    assert loop.centroid().y == pytest.approx(4.0)


def test_scale_and_extent():
    loop = square(1.0).scale2(2.0, 3.0)
    ext = loop.extent()
    assert (ext.x_min, ext.x_max, ext.y_min, ext.y_max) == (-2.0, 2.0, -3.0, 3.0)
    assert ext.width == 4.0
    assert ext.height == 6.0
    assert loop.translate((1.0, 1.0)).extent().x_min == -1.0


def test_offset_curve_is_not_implemented():
    with pytest.raises(GeometryNotImplementedError):
        circle(1.0, 16).offset_curve(0.5)
    with pytest.raises(NotImplementedError):
        circle(1.0, 16).offset_curve(0.5)


class TestShapes:
    def test_square_and_rectangle(self):
        assert square(1.0).area() == pytest.approx(4.0)
        assert rectangle(Point(0, 0), Point(2, 1)).area() == pytest.approx(2.0)

    @pytest.mark.parametrize("n", [16, 128, 1024])
    def test_chorded_circle_half(self, n):
        # n points half a step in from each end of the arc: n-1 arc chords
        # plus the closing chord across the cut
        half = chorded_circle(0.5, n)
        assert half.area() == pytest.approx((n - 2) / 2 * math.sin(math.pi / n))
        assert half.extent().y_max <= 1e-9

    def test_chorded_circle_area_converges(self):
        areas = [chorded_circle(0.5, n).area() for n in (16, 128, 1024)]
        assert areas == sorted(areas)
        assert areas[-1] == pytest.approx(math.pi / 2, rel=1e-2)

    def test_squared_circle_matches_area(self):
        plain = squared_circle(0.0, 0.0, diameter=2.0, quality=128)
        assert plain.area() == pytest.approx(math.pi, rel=1e-3)
        padded = squared_circle(1.0, 0.5, diameter=2.0, quality=128)
        assert padded.area() == pytest.approx(math.pi, rel=1e-2)
        assert padded.extent().width > padded.extent().height

    def test_rounded_rectangle(self):
        loop = rounded_rectangle(Point(0, 0), Point(4, 2), 1.0, 64)
        ext = loop.extent()
        assert 0.0 <= ext.x_min and ext.x_max <= 4.0
        assert 0.0 <= ext.y_min and ext.y_max <= 2.0
        assert 7.5 < loop.area() < 8.0

    def test_half_rounded_rectangle(self):
        loop = half_rounded_rectangle(Point(0, 0), Point(1, 4), 128)
        assert loop.area() == pytest.approx(2.0 + math.pi / 2, rel=1e-2)

    @pytest.mark.parametrize("make", [lens, lens2])
    def test_lens_circumference(self, make):
        loop = make(0.5, quality=64)
        assert loop.circumference() == pytest.approx(math.pi)
        assert loop.area() > 0
        assert len(loop) == 64

    def test_lens_rejects_bad_amount(self):
        with pytest.raises(GeometryError):
            lens(1.0)
