import math

import pytest

from borecad.cornu import cornu_yx, eval_cornu, fresnel, solve_transition, transition_points

# reference values of S(x), C(x)
KNOWN = [
    (0.5, 0.0647324328600, 0.4923442258714),
    (1.0, 0.4382591473904, 0.7798934003768),
    (2.0, 0.3434156783637, 0.4882534060753),
    (5.0, 0.4991913819171, 0.5636311887040),
]


def test_fresnel_zero():
    assert fresnel(0.0) == (0.0, 0.0)


@pytest.mark.parametrize("x,s,c", KNOWN)
def test_fresnel_known_values(x, s, c):
    got_s, got_c = fresnel(x)
    assert got_s == pytest.approx(s, abs=1e-9)
    assert got_c == pytest.approx(c, abs=1e-9)


@pytest.mark.parametrize("x", [0.1, 0.9, 1.6, 1.60078, 3.7, 150.0, 4.0e4])
def test_fresnel_is_odd(x):
    s, c = fresnel(x)
    assert fresnel(-x) == (-s, -c)


def test_fresnel_large_argument_limit():
    assert fresnel(1.0e5) == (0.5, 0.5)
    assert fresnel(-1.0e5) == (-0.5, -0.5)


def test_fresnel_continuous_across_regimes():
    edge = math.sqrt(2.5625)
    below = fresnel(edge - 1e-9)
    above = fresnel(edge + 1e-9)
    assert below[0] == pytest.approx(above[0], abs=1e-8)
    assert below[1] == pytest.approx(above[1], abs=1e-8)


def test_eval_cornu_unit_speed():
    # arc length between nearby samples matches the parameter step
    h = 1e-4
    y0, x0 = eval_cornu(1.0)
    y1, x1 = eval_cornu(1.0 + h)
    assert math.hypot(y1 - y0, x1 - x0) == pytest.approx(h, rel=1e-6)


def test_cornu_yx_mirror():
    y, x = cornu_yx(0.7)
    my, mx = cornu_yx(0.7, mirror=True)
    assert (my, mx) == (-y, x)
    assert cornu_yx(0.0) == (0.0, 0.0)


def test_solve_transition_returns_parameters():
    t1, t2, mirror = solve_transition(0.2, -0.2)
    assert t1 != t2
    assert isinstance(mirror, bool)


def test_straight_transition_has_no_points():
    assert transition_points((0.0, 0.0), (10.0, 5.0), math.atan2(5, 10), math.atan2(5, 10)) == []


def test_transition_bulges_between_end_points():
    points = transition_points((0.0, 0.0), (10.0, 0.0),
                               math.radians(20), math.radians(-20), quality=64)
    assert points
    for p in points:
        assert 0.0 < p.x < 10.0
        assert p.y > 0.0
