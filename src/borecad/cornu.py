"""Clothoid (Euler spiral / Cornu spiral) transition curves.

The curvature of a clothoid grows linearly with arc length, so a profile
built from clothoid segments is continuous in its second derivative.  That
makes it the curve of choice for bore transitions and diffusions.

The clothoid is obtained by plotting the Fresnel integrals ``S(t)`` and
``C(t)`` against each other.  :func:`fresnel` evaluates both with the
rational minimax approximations of the Cephes ``fresnl`` routine, which
reproduce double precision.  The coefficient tables below are listed
highest degree first, as :func:`polevl` expects, and must not be edited.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from .config import QUALITY
from .geom import Point

# S(x) for small x
_SN = (
    -2.99181919401019853726E3,
    7.08840045257738576863E5,
    -6.29741486205862506537E7,
    2.54890880573376359104E9,
    -4.42979518059697779103E10,
    3.18016297876567817986E11,
)
_SD = (
    1.00000000000000000000E0,
    2.81376268889994315696E2,
    4.55847810806532581675E4,
    5.17343888770096400730E6,
    4.19320245898111231129E8,
    2.24411795645340920940E10,
    6.07366389490084639049E11,
)

# C(x) for small x
_CN = (
    -4.98843114573573548651E-8,
    9.50428062829859605134E-6,
    -6.45191435683965050962E-4,
    1.88843319396703850064E-2,
    -2.05525900955013891793E-1,
    9.99999999999999998822E-1,
)
_CD = (
    3.99982968972495980367E-12,
    9.15439215774657478799E-10,
    1.25001862479598821474E-7,
    1.22262789024179030997E-5,
    8.68029542941784300606E-4,
    4.12142090722199792936E-2,
    1.00000000000000000118E0,
)

# Auxiliary function f(x)
_FN = (
    4.21543555043677546506E-1,
    1.43407919780758885261E-1,
    1.15220955073585758835E-2,
    3.45017939782574027900E-4,
    4.63613749287867322088E-6,
    3.05568983790257605827E-8,
    1.02304514164907233465E-10,
    1.72010743268161828879E-13,
    1.34283276233062758925E-16,
    3.76329711269987889006E-20,
)
_FD = (
    1.00000000000000000000E0,
    7.51586398353378947175E-1,
    1.16888925859191382142E-1,
    6.44051526508858611005E-3,
    1.55934409164153020873E-4,
    1.84627567348930545870E-6,
    1.12699224763999035261E-8,
    3.60140029589371370404E-11,
    5.88754533621578410010E-14,
    4.52001434074129701496E-17,
    1.25443237090011264384E-20,
)

# Auxiliary function g(x)
_GN = (
    5.04442073643383265887E-1,
    1.97102833525523411709E-1,
    1.87648584092575249293E-2,
    6.84079380915393090172E-4,
    1.15138826111884280931E-5,
    9.82852443688422223854E-8,
    4.45344415861750144738E-10,
    1.08268041139020870318E-12,
    1.37555460633261799868E-15,
    8.36354435630677421531E-19,
    1.86958710162783235106E-22,
)
_GD = (
    1.00000000000000000000E0,
    1.47495759925128324529E0,
    3.37748989120019970451E-1,
    2.53603741420338795122E-2,
    8.14679107184306179049E-4,
    1.27545075667729118702E-5,
    1.04314589657571990585E-7,
    4.60680728146520428211E-10,
    1.10273215066240270757E-12,
    1.38796531259578871258E-15,
    8.39158816283118707363E-19,
    1.86958710162783236342E-22,
)

_SMALL_X2 = 2.5625
_LARGE_X = 36974.0
_SQRT_HALF_PI = math.sqrt(math.pi * 0.5)


def polevl(x: float, coeffs: Sequence[float]) -> float:
    """Evaluate a polynomial by Horner's rule, coefficients highest degree first."""
    result = 0.0
    for c in coeffs:
        result = result * x + c
    return result


def fresnel(x: float) -> Tuple[float, float]:
    """Return the Fresnel integrals ``(S(x), C(x))``.

    ``S(x) = ∫₀ˣ sin(πt²/2) dt`` and ``C(x) = ∫₀ˣ cos(πt²/2) dt``.  Both are
    odd, so the sign of ``x`` is mirrored onto the result.
    """
    ax = abs(x)
    x2 = ax * ax
    if x2 < _SMALL_X2:
        t = x2 * x2
        s = ax * x2 * polevl(t, _SN) / polevl(t, _SD)
        c = ax * polevl(t, _CN) / polevl(t, _CD)
    elif ax > _LARGE_X:
        s = 0.5
        c = 0.5
    else:
        t = math.pi * x2
        u = 1.0 / (t * t)
        t = 1.0 / t
        f = 1.0 - u * polevl(u, _FN) / polevl(u, _FD)
        g = t * polevl(u, _GN) / polevl(u, _GD)
        t = math.pi * 0.5 * x2
        cos_t = math.cos(t)
        sin_t = math.sin(t)
        t = math.pi * ax
        c = 0.5 + (f * sin_t - g * cos_t) / t
        s = 0.5 - (f * cos_t + g * sin_t) / t
    if x < 0:
        return -s, -c
    return s, c


def eval_cornu(t: float) -> Tuple[float, float]:
    """Point ``(y, x)`` at arc length ``t`` on the unit-speed clothoid."""
    s, c = fresnel(t / _SQRT_HALF_PI)
    return s * _SQRT_HALF_PI, c * _SQRT_HALF_PI


def cornu_yx(t: float, mirror: bool = False) -> Tuple[float, float]:
    """Clothoid point re-parameterized so the tangent turns at a constant
    absolute rate in ``t``; ``mirror`` reflects the curve across the x axis."""
    y, x = eval_cornu(math.copysign(math.sqrt(abs(t)), t) if t else 0.0)
    if mirror:
        return -y, x
    return y, x


def _wrap(angle: float) -> float:
    return (angle + math.pi) % (2 * math.pi) - math.pi


def _score(t1: float, t2: float, mirror: bool, a1: float, a2: float) -> float:
    if abs(t1 - t2) < 1e-6 or max(abs(t1), abs(t2)) > math.pi * 10.0:
        return 1e30
    y1, x1 = cornu_yx(t1, mirror)
    y2, x2 = cornu_yx(t2, mirror)
    chord_a = math.atan2(y2 - y1, x2 - x1)
    this_a1 = abs(t1)
    this_a2 = abs(t2)
    if mirror:
        this_a1 = -this_a1
        this_a2 = -this_a2
    if t1 > t2:
        this_a1 += math.pi
        this_a2 += math.pi
    ea1 = _wrap(this_a1 - chord_a - a1)
    ea2 = _wrap(this_a2 - chord_a - a2)
    return ea1 * ea1 + ea2 * ea2


def solve_transition(a1: float, a2: float) -> Tuple[float, float, bool]:
    """Find clothoid parameters whose end tangents make angles ``a1`` and
    ``a2`` with the chord between the ends.

    A coarse grid over both branches seeds a pattern search that halves
    its step each time no move improves the fit.

    Returns:
        ``(t1, t2, mirror)`` for use with :func:`cornu_yx`.
    """
    n = 2
    best = None
    t1 = t2 = 0.0
    mirror = False
    for try_mirror in (False, True):
        for i in range(-n, n + 1):
            for j in range(-n, n + 1):
                nt1 = i * math.pi / n
                nt2 = j * math.pi / n
                s = _score(nt1, nt2, try_mirror, a1, a2)
                if best is None or s < best:
                    best, t1, t2, mirror = s, nt1, nt2, try_mirror

    step = math.pi * n * 0.5
    while step >= 1e-4:
        for nt1, nt2 in ((t1 + step, t2 + step), (t1 - step, t2 - step),
                         (t1 - step, t2 + step), (t1 + step, t2 - step)):
            s = _score(nt1, nt2, mirror, a1, a2)
            if s < best:
                best, t1, t2 = s, nt1, nt2
                break
        else:
            step *= 0.5
    return t1, t2, mirror


def transition_points(p1: Sequence[float], p2: Sequence[float],
                      a1: float, a2: float, quality: int = QUALITY) -> list[Point]:
    """Interior points of a clothoid joining ``p1`` to ``p2``.

    ``a1`` and ``a2`` are the absolute tangent directions (radians) wanted
    at ``p1`` and ``p2``.  The end points themselves are not included; an
    empty list means a straight segment already fits.
    """
    x1, y1 = p1[0], p1[1]
    x2, y2 = p2[0], p2[1]
    length = math.hypot(x2 - x1, y2 - y1)
    ang = math.atan2(y2 - y1, x2 - x1)
    rel1 = _wrap(a1 - ang)
    rel2 = _wrap(a2 - ang)
    if length == 0.0 or abs(rel1) + abs(rel2) < math.pi / quality:
        return []

    t1, t2, mirror = solve_transition(rel1, rel2)
    cy1, cx1 = cornu_yx(t1, mirror)
    cy2, cx2 = cornu_yx(t2, mirror)
    chord = math.hypot(cy2 - cy1, cx2 - cx1)
    if chord < 1e-10:
        return []
    chord_a = math.atan2(cy2 - cy1, cx2 - cx1)

    steps = int(abs(t2 - t1) / math.pi * quality)
    points = []
    for i in range(1, steps):
        t = t1 + i * (t2 - t1) / steps
        yy, xx = cornu_yx(t, mirror)
        aa = math.atan2(yy - cy1, xx - cx1)
        ll = math.hypot(yy - cy1, xx - cx1) / chord * length
        points.append(Point(math.cos(aa - chord_a + ang) * ll + x1,
                            math.sin(aa - chord_a + ang) * ll + y1))
    return points
