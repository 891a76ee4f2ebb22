"""Transverse flute body synthesis.

:class:`FluteModel` turns a solved design (bore and body profiles plus
hole placements) into a composition tree:

* bore and body *stacks*, one cone frustum per pair of neighbouring kinks,
  extended past the top to leave room for the cork;
* a reinforcing ring around every tone hole and a cylinder cutting the
  hole itself;
* an embouchure plate, made by intersecting a hollow tube that fits over
  the body with an oval cylinder across it, then cutting the aperture;
* a cork plug above the embouchure.

All holes open towards ``-x``.  The tree renders to OpenSCAD source or to
a mesh through :mod:`borecad.render`.

:func:`make_flute` builds the printable body instead, through
:func:`borecad.instrument.make_instrument`, with finger pads, a squared
embouchure and optional decorative bands.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from .config import BuildConfig, resolve
from .csg import (
    Cylinder,
    Difference,
    Intersection,
    Labelled,
    Node,
    Rotate,
    Scale,
    Translate,
    Union,
)
from .errors import GeometryError
from .instrument import InstrumentBody, ToneHole, make_instrument
from .log import get_logger
from .mesh import Mesh, extrude_profile
from .profile import Profile, ProfileLike
from .render import native, scad

logger = get_logger(__name__)

# tilts a cylinder from +z onto -x
_TO_SIDE = (0.0, -90.0, 0.0)

APERTURE_DEPTH = 100.0
PLATE_OVAL_STRETCH = 1.6


@dataclass(frozen=True)
class Hole:
    """A hole at ``elevation`` along the body axis."""

    elevation: float
    diameter: float

    def __post_init__(self):
        if self.diameter <= 0:
            raise GeometryError(f"hole diameter must be positive, got {self.diameter}")


class FluteModel:
    """Composition tree for a flute body.

    Args:
        inner: bore profile (diameter against elevation)
        outer: outside body profile
        length: body length; the stacks run from 0 to just past it
        holes: tone holes, bottom to top
        embouchure: blowing hole, or None for a plain tube
        facets: polygon count of the outside surface; None or 0 for smooth
        ring_width: how far hole rings reach past the hole and the body
        eccentricity: aperture length along the axis over its width
        plate_thickness: embouchure plate thickness over the body
        inner_kinks: bore stack positions, by default the profile's kinks
        outer_kinks: body stack positions, by default the profile's kinks
        name: header comment of the script
    """

    def __init__(self, inner: ProfileLike, outer: ProfileLike, length: float,
                 holes: Sequence[Hole] = (), embouchure: Optional[Hole] = None,
                 facets: Optional[int] = None, ring_width: float = 2.0,
                 eccentricity: float = 1.2, plate_thickness: float = 2.0,
                 inner_kinks: Optional[Sequence[float]] = None,
                 outer_kinks: Optional[Sequence[float]] = None,
                 name: str = "flute"):
        if length <= 0:
            raise GeometryError(f"body length must be positive, got {length}")
        if eccentricity <= 0:
            raise GeometryError(f"eccentricity must be positive, got {eccentricity}")
        self.inner = inner
        self.outer = outer
        self.length = length
        self.holes = list(holes)
        self.embouchure = embouchure
        self.facets = facets or 0
        self.ring_width = ring_width
        self.eccentricity = eccentricity
        self.plate_thickness = plate_thickness
        self.inner_kinks = list(inner.kinks if inner_kinks is None else inner_kinks)
        self.outer_kinks = list(outer.kinks if outer_kinks is None else outer_kinks)
        self.name = name

    @classmethod
    def from_holes(cls, inner: ProfileLike, outer: ProfileLike, length: float,
                   holes: Sequence[Hole], **kwargs) -> "FluteModel":
        """Model whose last (highest) hole is the embouchure."""
        holes = list(holes)
        if not holes:
            return cls(inner, outer, length, **kwargs)
        return cls(inner, outer, length, holes[:-1], holes[-1], **kwargs)

    @property
    def top(self) -> float:
        """Upper end of the stacks."""
        if self.embouchure is None:
            return self.length
        return self.length + self.embouchure.diameter * 0.5

    def diameters_at(self, elevation: float):
        return self.inner(elevation), self.outer(elevation)

    def make_stack(self, name: str, kinks: Sequence[float], profile: ProfileLike,
                   facets: int = 0) -> Node:
        top = self.top
        positions = [0.0] + sorted(k for k in set(kinks) if 0.0 < k < top) + [top]
        stack = Union()
        for lower, upper in zip(positions, positions[1:]):
            cylinder = Cylinder(upper - lower, profile(lower, True) / 2.0,
                                profile(upper) / 2.0, facets)
            if lower != 0.0:
                stack.add(Translate((0.0, 0.0, lower), [cylinder]))
            else:
                stack.add(cylinder)
        return Labelled(f"{name} stack", stack)

    def hole_ring(self, hole: Hole) -> Node:
        inner, outer = self.diameters_at(hole.elevation)
        wall = (outer - inner) / 2.0
        height = wall + self.ring_width
        washer = Difference([
            Cylinder(height, hole.diameter / 2.0 + self.ring_width),
            Translate((0.0, 0.0, -1.0), [Cylinder(height + 2.0, hole.diameter / 2.0)]),
        ])
        return Labelled("hole ring", Rotate(_TO_SIDE, [
            Translate((hole.elevation, 0.0, inner / 2.0), [washer]),
        ]))

    def tone_hole(self, hole: Hole) -> Node:
        body = self.outer(hole.elevation)
        return Rotate(_TO_SIDE, [
            Translate((hole.elevation, 0.0, 0.0), [Cylinder(body, hole.diameter / 2.0)]),
        ])

    def _require_embouchure(self) -> Hole:
        if self.embouchure is None:
            raise GeometryError("model has no embouchure hole")
        return self.embouchure

    def embouchure_hole(self) -> Node:
        emb = self._require_embouchure()
        return Translate((0.0, 0.0, emb.elevation), [
            Rotate(_TO_SIDE, [
                Scale((self.eccentricity, 1.0, 1.0), [
                    Cylinder(self.outer(emb.elevation), emb.diameter / 2.0),
                ]),
            ]),
        ])

    def embouchure_aperture(self) -> Node:
        """The aperture cut through the plate, in plate coordinates."""
        d = self._require_embouchure().diameter
        return Translate((0.0, 0.0, d * 2.0), [
            Rotate(_TO_SIDE, [
                Scale((self.eccentricity, 1.0, 1.0), [Cylinder(APERTURE_DEPTH, d / 2.0)]),
            ]),
        ])

    def embouchure_plate(self) -> Node:
        emb = self._require_embouchure()
        d = emb.diameter
        inner, outer = self.diameters_at(emb.elevation)

        hollow = Difference([
            Cylinder(d * 8.0, outer / 2.0 + self.plate_thickness),
            Cylinder(d * 8.0, inner / 2.0),
        ])
        oval = Translate((0.0, 0.0, d * 2.0), [
            Rotate((90.0, 0.0, 0.0), [
                Scale((1.0, PLATE_OVAL_STRETCH, 1.0), [Cylinder(outer * 3.0 * d, d)]),
            ]),
        ])
        plate = Labelled("plate", Rotate((0.0, 0.0, -90.0), [Intersection([hollow, oval])]))
        with_hole = Labelled("plate with hole", Difference([plate, self.embouchure_aperture()]))
        return Translate((0.0, 0.0, emb.elevation - d * 2.0), [with_hole])

    def cork(self) -> Node:
        emb = self._require_embouchure()
        position = emb.elevation + 1.75 * emb.diameter
        radius = self.inner(self.inner.end()) / 2.0 + 1.0
        return Labelled("cork", Translate((0.0, 0.0, position), [
            Cylinder(position - emb.elevation, radius),
        ]))

    def body(self) -> Node:
        rotation = 360.0 / self.facets / 2.0 if self.facets else 0.0
        outside = Union([Rotate((0.0, 0.0, rotation), [
            self.make_stack("body", self.outer_kinks, self.outer, self.facets),
        ])])
        for hole in self.holes:
            outside.add(self.hole_ring(hole))

        body = Difference([
            Labelled("body + hole rings", outside),
            self.make_stack("bore", self.inner_kinks, self.inner),
        ])
        if self.embouchure is not None:
            body.add(self.embouchure_hole())
        for hole in self.holes:
            body.add(self.tone_hole(hole))
        return body

    def model(self) -> Node:
        """Composition tree of the whole instrument; built fresh on each call."""
        logger.debug("building model", name=self.name, holes=len(self.holes),
                     embouchure=self.embouchure is not None, facets=self.facets)
        if self.embouchure is None:
            return self.body()
        return Union([self.body(), self.embouchure_plate(), self.cork()])

    def render_scad(self, config: Optional[BuildConfig] = None) -> str:
        return scad.document(self.model(), self.name, config)

    def build(self, config: Optional[BuildConfig] = None):
        """Realize the model as a ``trimesh.Trimesh``."""
        config = resolve(config)
        logger.info("realizing model", name=self.name, quality=config.quality,
                    engine=config.engine, backend=config.backend)
        return native.realize(self.model(), config)


def make_cork(length: float = 10.0, diameter: float = 10.0, taper_in: float = 0.25,
              taper_out: float = 0.125, config: Optional[BuildConfig] = None) -> Mesh:
    """Printable tapered cork plug standing on ``z=0``.

    The bottom is ``diameter - taper_out`` across and the top
    ``diameter - taper_in``.
    """
    d1 = diameter - taper_out
    d2 = diameter - taper_in
    if length <= 0 or d1 <= 0 or d2 <= 0:
        raise GeometryError(f"cork dimensions must be positive (length={length}, "
                            f"diameters={d1}, {d2})")
    return extrude_profile([Profile([0.0, length], [d1, d2])], config=config)


# (offset from the top in embouchure distances, alignment) per band
_BANDS = ((-2.0, 1.0), (0.0, -1.0))
BAND_HEIGHT = 0.1
CORK_ALLOWANCE = 1.05


def decorate_outer(outer: Profile, embouchure: float, length: float) -> Profile:
    """Add two flat-topped bands to the outside.

    One band is flush with the top end and the other lies below the
    embouchure, as far below it as the embouchure is below the top.
    Each band stands ``BAND_HEIGHT`` of the local diameter proud.
    """
    emb_fraction = 1.0 - embouchure / length
    for scale, align in _BANDS:
        pos = length * (1.0 + emb_fraction * scale)
        amount = outer(pos) * BAND_HEIGHT
        pos += amount * align
        band = Profile([pos + amount * i for i in (-1.0, -1.0 / 3.0, 1.0 / 3.0, 1.0)],
                       [0.0, amount, amount, 0.0])
        outer = outer + band
    return outer


def embouchure_pads(aspect: float = 1.5, squareness: float = 0.0):
    """``(x_pad, y_pad)`` of a squared-circle embouchure of the given
    aspect ratio (length along the body over width)."""
    if aspect <= 0:
        raise GeometryError(f"embouchure aspect must be positive, got {aspect}")
    if aspect > 1.0:
        return squareness, (squareness + 1.0) * aspect - 1.0
    return (squareness + 1.0) / aspect - 1.0, squareness


def make_flute(inner: Profile, outer: Profile, length: float,
               holes: Sequence[ToneHole], embouchure: ToneHole,
               decorate: bool = False, open_both_ends: bool = False,
               finger_pads: bool = True, emb_aspect: float = 1.5,
               emb_squareness: float = 0.0,
               config: Optional[BuildConfig] = None) -> InstrumentBody:
    """Printable flute body from a design.

    The body is built a little longer than ``length`` to leave room for a
    cork above the embouchure.  With ``open_both_ends`` the bore runs out
    of the top too and a separate cork plugs it.  Tone holes get finger
    pads when ``finger_pads``; the embouchure is a squared oval shaped by
    ``emb_aspect`` and ``emb_squareness``.
    """
    config = resolve(config)
    if length <= 0:
        raise GeometryError(f"body length must be positive, got {length}")
    build_length = length * CORK_ALLOWANCE
    if open_both_ends:
        logger.info("cork needed", length=build_length - length, diameter=inner(length))
        inner = inner.clipped(-50.0, build_length + 50.0)
    else:
        inner = inner.clipped(-50.0, build_length)
    outer = outer.clipped(0.0, build_length)
    if decorate:
        outer = decorate_outer(outer, embouchure.position, build_length)

    x_pad, y_pad = embouchure_pads(emb_aspect, emb_squareness)
    placed = [replace(hole, finger_pad=finger_pads) for hole in holes]
    placed.append(replace(embouchure, x_pad=x_pad, y_pad=y_pad, finger_pad=False))
    logger.info("building flute", length=build_length, holes=len(holes),
                decorate=decorate, open_both_ends=open_both_ends)
    return make_instrument(inner, outer, placed, config=config)


__all__ = ['Hole', 'FluteModel', 'make_cork', 'decorate_outer', 'embouchure_pads', 'make_flute',
           'APERTURE_DEPTH']
