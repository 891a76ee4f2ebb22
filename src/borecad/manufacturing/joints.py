"""Joints between neighbouring segments of a cut body.

A join function returns a pair of masks ``(inside, outside)``, both
solids reaching from the cut up past the end of the body.  The piece
above a cut is the body intersected with ``inside``; the piece below is
the body minus ``outside``.  The difference between the two masks is the
clearance ``gap`` left in the joint.

Sockets put a spigot on the upper piece that fits into a socket bored
into the lower one.  A welded join has no socket: the faces are flat
apart from a ring of triangular teeth that key the pieces together for
gluing.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Tuple

import trimesh

from ..boolean import get_engine
from ..config import BuildConfig, resolve
from ..errors import ConfigError
from ..loop import Loop
from ..mesh import extrude_profile, extrusion, radial_frame
from ..profile import Profile

JoinFunction = Callable[..., Tuple["trimesh.Trimesh", "trimesh.Trimesh"]]

# how far the masks reach past the end of the body
OVERHANG = 50.0

WELD_TEETH = 4


def straight_socket(p1: float, p3: float, length: float, d1: float, d3: float,
                    d4: float, gap: float = 0.2,
                    config: Optional[BuildConfig] = None):
    """Cylindrical socket from ``p1`` to ``p3``.

    Args:
        p1: bottom of the socket
        p3: the cut; the spigot shoulder sits here
        length: body length
        d1: bore diameter at the cut
        d3: outside diameter at the cut
        d4: a diameter wider than the whole body
        gap: clearance between spigot and socket
    """
    config = resolve(config)
    d2 = (d1 + d3) / 2.0
    p2 = p1 + (d2 - d1) / 2.0
    end = length + OVERHANG
    inside = Profile([p1, p2, p3, end],
                     [d1 - gap, d2 - gap, d2 - gap, d4],
                     [d1 - gap, d2 - gap, d4, d4])
    outside = Profile([p1 - gap, p2, p3, end],
                      [d1, d2 + gap, d2 + gap, d4],
                      [d1, d2 + gap, d4, d4])
    return _masks(inside, outside, config)


def tapered_socket(p1: float, p3: float, length: float, d1: float, d4: float,
                   d5: float, gap: float = 0.2,
                   config: Optional[BuildConfig] = None):
    """Conical socket from ``p1`` to ``p3``; arguments as for
    :func:`straight_socket`, with ``d4`` the outside and ``d5`` the
    oversize diameter."""
    config = resolve(config)
    d3 = (d1 + d4) / 2.0
    d2 = (d1 + d3) / 2.0
    p2 = p1 + (d2 - d1)
    end = length + OVERHANG
    inside = Profile([p1, p2, p3, end],
                     [d1 - gap, d2 - gap, d3 - gap, d5],
                     [d1 - gap, d2 - gap, d5, d5])
    outside = Profile([p1 - gap, p2, p3, end],
                      [d1, d2 + gap, d3 + gap, d5],
                      [d1, d2 + gap, d5, d5])
    return _masks(inside, outside, config)


def _masks(inside: Profile, outside: Profile, config: BuildConfig):
    digits = config.vertex_digits
    return (extrude_profile([inside], config=config).to_trimesh(digits),
            extrude_profile([outside], config=config).to_trimesh(digits))


# unit triangle with its apex pointing down the body
_TRIANGLE = Loop([(-0.5, 0.0), (0.0, -math.sqrt(0.75)), (0.5, 0.0)])


def _tooth(r0: float, r1: float, r2: float, triangle: Loop):
    # pointed at r0, full width from r1 out to r2
    return extrusion([r0, r1, r2], [triangle.scale(0.0), triangle, triangle])


def weld_join(z0: float, z1: float, z_max: float, d0: float, d1: float,
              d_max: float, gap: float = 0.2,
              config: Optional[BuildConfig] = None):
    """Flat join at ``z1`` keyed by triangular teeth through the wall.

    The teeth hang below ``z1``: the upper piece grows them and the
    lower piece has slightly larger notches cut for them.  The inner
    third of the wall is left whole.

    ``z0`` is accepted for signature compatibility with the sockets and
    ignored.  ``d0`` and ``d1`` are the bore and outside diameters at the
    cut, ``d_max`` a diameter wider than the body.
    """
    config = resolve(config)
    engine = get_engine(config.engine)
    plain = extrude_profile([Profile([z1, z_max + OVERHANG], [d_max, d_max])], config=config)

    upper_triangle = _TRIANGLE.scale(d0 * 0.5 + gap)
    lower_triangle = _TRIANGLE.scale(d0 * 0.5 - gap)
    d1_3 = d0 * 0.6666 + d1 * 0.3334
    d2_3 = d0 * 0.3334 + d1 * 0.6666
    outside = [plain]
    inside = [plain]
    for i in range(1, WELD_TEETH + 1):
        frame = radial_frame(z1, 180.0 + 360.0 / (WELD_TEETH + 1) * i)
        outside.append(_tooth(d1_3 * 0.5 - gap * 0.5, d2_3 * 0.5 - gap * 0.5, d_max * 0.5,
                              upper_triangle).transformed(frame))
        inside.append(_tooth(d1_3 * 0.5 + gap * 0.5, d2_3 * 0.5 + gap * 0.5, d_max * 0.5,
                             lower_triangle).transformed(frame))
    return (
        engine.boolean(inside, "union", backend=config.backend, digits=config.vertex_digits),
        engine.boolean(outside, "union", backend=config.backend, digits=config.vertex_digits),
    )


JOINS = {
    "straight": straight_socket,
    "tapered": tapered_socket,
    "weld": weld_join,
}

_ALIASES = {
    "straight": "straight", "straightjoin": "straight",
    "tapered": "tapered", "taperedjoin": "tapered",
    "weld": "weld", "welded": "weld", "weldedjoin": "weld",
}


def join_name(name: str) -> str:
    """Canonical join name for ``name`` (``"Welded"`` -> ``"weld"``)."""
    canonical = _ALIASES.get(name.lower())
    if canonical is None:
        raise ConfigError(f"invalid join type {name!r} (known: {sorted(JOINS)})")
    return canonical


def get_join(name: str) -> JoinFunction:
    return JOINS[join_name(name)]


__all__ = ['straight_socket', 'tapered_socket', 'weld_join', 'JOINS', 'join_name',
           'get_join', 'OVERHANG']
