"""Mesh-built instrument bodies for fabrication.

:func:`make_instrument` lofts the outside and the bore straight from
their profiles and cuts the tone holes as lofted spokes, so holes can
lean along the body (``vert_angle``), turn around it (``horiz_angle``),
have squared cross-sections and carry finger pads.  The result keeps the
outside and bore solids next to the body because the segmenter needs the
bore to thicken sockets.

This is the path used to print an instrument; :mod:`borecad.flute`
builds the lighter composition tree used for script output.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import trimesh

from .boolean import get_engine
from .config import BuildConfig, resolve
from .errors import GeometryError
from .log import get_logger
from .mesh import Mesh, extrude_profile, extrusion, radial_frame
from .profile import Profile
from .shapes import squared_circle

logger = get_logger(__name__)

PAD_WIDENING = 1.3


@dataclass(frozen=True)
class ToneHole:
    """A hole through the body wall.

    Attributes:
        position: elevation of the hole centre along the body
        diameter: effective diameter (the cross-section has this area)
        vert_angle: lean along the body axis, degrees
        horiz_angle: turn about the body axis away from ``-x``, degrees
        x_pad: squareness across the body (see :func:`borecad.shapes.squared_circle`)
        y_pad: squareness along the body
        finger_pad: raise a dished pad around the hole
    """
    position: float
    diameter: float
    vert_angle: float = 0.0
    horiz_angle: float = 0.0
    x_pad: float = 0.0
    y_pad: float = 0.0
    finger_pad: bool = False

    def __post_init__(self):
        if self.diameter <= 0:
            raise GeometryError(f"hole diameter must be positive, got {self.diameter}")
        if not -90.0 < self.vert_angle < 90.0:
            raise GeometryError(f"hole angle must be within (-90, 90), got {self.vert_angle}")

    @property
    def corrected_diameter(self) -> float:
        """Diameter widened for the lean so the hole keeps its acoustic size."""
        return self.diameter * math.cos(math.radians(self.vert_angle)) ** -0.5

    def cross_section(self, diameter: float, quality: int):
        return squared_circle(self.x_pad, self.y_pad, quality=quality) \
            .with_effective_diameter(diameter)


@dataclass
class InstrumentBody:
    """A built body and the parts it was made from.

    Attributes:
        solid: the finished body (``trimesh.Trimesh``)
        outside: outer surface with pads and angled holes applied
        bore: everything removed from the inside, holes included
        inner: bore profile
        outer: outside profile
        top: upper end of the body along z
    """
    solid: "trimesh.Trimesh"
    outside: "trimesh.Trimesh"
    bore: "trimesh.Trimesh"
    inner: Profile
    outer: Profile
    top: float


def hole_mesh(hole: ToneHole, inner: Profile, outer: Profile,
              config: Optional[BuildConfig] = None) -> Mesh:
    """The spoke cut for ``hole``, from halfway out from the axis to the
    bore wall out past the outside surface.

    A leaning hole is centred on ``position`` where it meets the outside;
    with a positive ``vert_angle`` its inner end is higher up the body.
    """
    config = resolve(config)
    slope = math.sin(math.radians(hole.vert_angle))
    height = outer(hole.position) * 0.5
    h1 = inner(hole.position) * 0.25
    h2 = height * 1.5
    section = hole.cross_section(hole.corrected_diameter, config.quality)
    spoke = extrusion([h1, h2], [section.offset(0.0, -slope * h1),
                                 section.offset(0.0, -slope * h2)])
    return spoke.transformed(radial_frame(hole.position + slope * height, hole.horiz_angle))


def finger_pad_meshes(hole: ToneHole, inner: Profile, outer: Profile,
                      config: Optional[BuildConfig] = None):
    """``(pad, dish)``: a collar added around the hole and the shallow dish
    cut into its top."""
    config = resolve(config)
    height = outer(hole.position) * 0.5
    pad_height = height * 0.5 + 0.5 * math.sqrt(height * height - (hole.diameter * 0.5) ** 2)
    pad_depth = pad_height - inner(hole.position) * 0.5
    pad_mid = pad_depth / 4.0
    pad_diam = hole.corrected_diameter * PAD_WIDENING

    def section(diameters):
        return hole.cross_section(diameters[0], config.quality)

    pad = extrude_profile([Profile([-pad_depth, -pad_mid, 0.0],
                                   [pad_diam + pad_mid * 2.0, pad_diam + pad_mid * 2.0, pad_diam])],
                          cross_section=section, config=config)
    dish = extrude_profile([Profile([0.0, pad_mid, pad_depth],
                                    [pad_diam, pad_diam + pad_mid * 8.0, pad_diam + pad_mid * 8.0])],
                           cross_section=section, config=config)

    # tilt to follow the taper of the outside under the pad
    tilt = math.atan2(0.5 * (outer(hole.position + pad_diam * 0.5)
                             - outer(hole.position - pad_diam * 0.5)), pad_diam)
    tf = trimesh.transformations
    local = tf.translation_matrix((0.0, 0.0, pad_height)) @ tf.rotation_matrix(tilt, (1, 0, 0))
    frame = radial_frame(hole.position, hole.horiz_angle) @ local
    return pad.transformed(frame), dish.transformed(frame)


def make_instrument(inner: Profile, outer: Profile, holes: Sequence[ToneHole] = (),
                    dilate: float = 0.0, generate_pads: bool = True,
                    outside_extras: Sequence = (), bore_extras: Sequence = (),
                    config: Optional[BuildConfig] = None) -> InstrumentBody:
    """Build a printable body from its profiles and holes.

    ``dilate`` widens the bore, for printers that print concave curves
    small.  ``outside_extras`` and ``bore_extras`` are extra solids
    (meshes or trimesh) joined to the outside or the bore.
    """
    config = resolve(config)
    engine = get_engine(config.engine)

    def combine(parts, operation):
        return engine.boolean(parts, operation, backend=config.backend,
                              digits=config.vertex_digits)

    outside = extrude_profile([outer], config=config).to_trimesh(config.vertex_digits)
    body = outside
    bore_parts = [extrude_profile([inner + dilate], config=config)]
    for hole in holes:
        spoke = hole_mesh(hole, inner, outer, config)
        if hole.finger_pad and generate_pads:
            pad, dish = finger_pad_meshes(hole, inner, outer, config)
            outside = combine([combine([outside, pad], "union"), dish], "difference")
            body = combine([combine([body, pad], "union"), dish], "difference")
        bore_parts.append(spoke)
        if hole.vert_angle != 0.0 or hole.horiz_angle != 0.0:
            outside = combine([outside, spoke], "difference")
        logger.debug("hole cut", position=hole.position, diameter=hole.diameter,
                     vert_angle=hole.vert_angle, horiz_angle=hole.horiz_angle,
                     pad=hole.finger_pad and generate_pads)

    if outside_extras:
        outside = combine([outside, *outside_extras], "union")
        body = combine([body, *outside_extras], "union")
    bore = combine([*bore_parts, *bore_extras], "union")
    body = combine([body, bore], "difference")
    top = float(np.max(body.vertices[:, 2])) if len(body.vertices) else 0.0
    logger.info("instrument built", holes=len(holes), top=top,
                watertight=bool(body.is_watertight))
    return InstrumentBody(solid=body, outside=outside, bore=bore,
                          inner=inner, outer=outer, top=top)


__all__ = ['ToneHole', 'InstrumentBody', 'hole_mesh', 'finger_pad_meshes', 'make_instrument']
