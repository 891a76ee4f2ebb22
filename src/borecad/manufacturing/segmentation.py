"""Cutting a finished body into printable segments.

A segment is the part of the body inside an axis-aligned clip block.  With
``clip_half`` the block covers only one side of the ``y=0`` plane, so a
body is split lengthwise into a top and a bottom half, each of which
prints flat side down.

:func:`segment_instrument` instead cuts a body across at a list of
elevations and gives each piece a joint (see :mod:`.joints`) so that the
pieces fit back together.
"""

from typing import Optional, Sequence

import numpy as np
import trimesh

from ..boolean import get_engine
from ..config import BuildConfig, resolve
from ..csg import Node
from ..errors import GeometryError, InsufficientPaddingError
from ..log import get_logger
from ..mesh import block, extrude_profile
from ..profile import Profile
from ..render.native import realize
from .data import Segment, SegmentationResult
from .joints import get_join, join_name

logger = get_logger(__name__)


def _as_solid(solid, config: BuildConfig, engine) -> "trimesh.Trimesh":
    if isinstance(solid, Node):
        return realize(solid, config)
    return engine.as_trimesh(solid, config.vertex_digits)


def orientation_matrix(low: float, high: float, top: bool) -> np.ndarray:
    """Transform laying a clipped piece flat with its axis along +x.

    The piece is moved to start at ``z=0``, the top half is turned over
    so that both halves have their cut face down, and the body axis is
    swung onto the x axis with ``high`` at ``x=0`` and ``low`` at
    ``x=high-low``.
    """
    tf = trimesh.transformations
    matrix = tf.translation_matrix((0.0, 0.0, -low))
    if top:
        matrix = tf.rotation_matrix(np.pi, (0, 0, 1)) @ matrix
    matrix = tf.rotation_matrix(-np.pi / 2, (1, 0, 0)) @ matrix
    matrix = tf.rotation_matrix(np.pi / 2, (0, 0, 1)) @ matrix
    return tf.translation_matrix((high - low, 0.0, 0.0)) @ matrix


def position_nicely(solid: "trimesh.Trimesh") -> "trimesh.Trimesh":
    """Copy of ``solid`` centred on the z axis and resting on ``z=0``."""
    (x0, y0, z0), (x1, y1, _) = solid.bounds
    moved = solid.copy()
    moved.apply_translation((-0.5 * (x0 + x1), -0.5 * (y0 + y1), -z0))
    return moved


def make_segment(solid, top: bool, low: float, high: float, radius: float,
                 pad: float = 0.0, clip_half: bool = True,
                 config: Optional[BuildConfig] = None) -> Segment:
    """Clip ``solid`` to ``[low, high]`` along z and lay the piece flat.

    The laid-out piece starts at ``x=0``; with padding the padded ends
    are part of the piece.

    Args:
        solid: composition tree, :class:`~borecad.mesh.Mesh` or trimesh
        top: keep the ``y >= 0`` half (else ``y <= 0``) when ``clip_half``
        low: lower axial bound
        high: upper axial bound
        radius: half-width of the clip block, larger than the body
        pad: extra length kept beyond each bound
        clip_half: clip to one side of the ``y=0`` plane

    Raises:
        InsufficientPaddingError: the clip cut into the body sideways, or
            the axial extent of the piece is not the one requested
        GeometryError: nothing of the body lies within the bounds
    """
    config = resolve(config)
    engine = get_engine(config.engine)
    body = _as_solid(solid, config, engine)

    if not clip_half:
        y1, y2 = -radius, radius
    elif top:
        y1, y2 = 0.0, radius
    else:
        y1, y2 = -radius, 0.0
    clip = block((-radius, y1, low - pad), (radius, y2, high + pad))
    piece = engine.boolean([body, clip], "intersection",
                           backend=config.backend, digits=config.vertex_digits)
    if piece.faces.size == 0:
        raise GeometryError(f"no material between {low} and {high}")

    tol = config.segment_tolerance
    (bx0, by0, bz0), (bx1, by1, bz1) = piece.bounds
    body_z0, body_z1 = body.bounds[:, 2]
    expected = min(high + pad, body_z1) - max(low - pad, body_z0)
    actual = bz1 - bz0
    if abs(actual - expected) > tol:
        logger.error("segment extent mismatch", low=low, high=high, expected=expected, actual=actual)
        raise InsufficientPaddingError("axial", expected, actual)
    reach = max(abs(bx0), abs(bx1), abs(by0), abs(by1))
    if reach >= radius - tol:
        logger.error("segment clipped sideways", low=low, high=high, radius=radius, reach=reach)
        raise InsufficientPaddingError("radial", radius, reach)

    piece = piece.copy()
    piece.apply_transform(orientation_matrix(low, high, top))
    piece.apply_translation((-piece.bounds[0][0], 0.0, 0.0))
    logger.debug("segment cut", low=low, high=high, top=top, extents=piece.extents.tolist())
    return Segment(solid=piece, low=low, high=high, top=top, bounds=piece.bounds.tolist())


def make_segments(solid, length: float, radius: float,
                  top_fractions: Sequence[float], bottom_fractions: Sequence[float] = (),
                  pad: float = 0.0, clip_half: bool = True,
                  config: Optional[BuildConfig] = None) -> SegmentationResult:
    """Cut ``solid`` at fractions of ``length``.

    Consecutive entries of ``top_fractions`` bound the top pieces and
    consecutive entries of ``bottom_fractions`` the bottom pieces, so
    ``[0, 0.5, 1]`` cuts the body in two at mid-length.
    """
    config = resolve(config)
    body = _as_solid(solid, config, get_engine(config.engine))
    segments = []
    warnings = []
    for top, fractions in ((True, top_fractions), (False, bottom_fractions)):
        zs = [f * length for f in fractions]
        for low, high in zip(zs, zs[1:]):
            segments.append(make_segment(body, top, low, high, radius, pad, clip_half, config))
    if not clip_half and top_fractions and bottom_fractions:
        warnings.append("whole-section clips with both top and bottom cuts duplicate material")
    return SegmentationResult(segments=segments, warnings=warnings)


def division_cuts(divisions, hole_positions: Sequence[float],
                  hole_diameters: Sequence[float], top: float):
    """Turn divisions into cut elevations.

    Each division is a list of ``(hole, above)`` pairs.  A pair places
    its cut between hole ``hole`` and the next one up, ``above`` being
    the fraction of the clear space between them (two diameters of the
    lower hole are kept clear on each side).  Hole ``-1`` is the bottom of the body and
    the last hole reaches to ``top``.
    """
    n_holes = len(hole_positions)
    result = []
    for division in divisions:
        cuts = []
        for hole, above in division:
            clear = 2.0 * hole_diameters[max(hole, 0)]
            lower = hole_positions[hole] + clear if hole >= 0 else 0.0
            if hole < n_holes - 1:
                upper = hole_positions[hole + 1] - clear
            else:
                upper = top
            cuts.append(lower + (upper - lower) * above)
        result.append(cuts)
    return result


def _flip_end_for_end(length: float) -> np.ndarray:
    tf = trimesh.transformations
    return tf.translation_matrix((0.0, 0.0, length)) @ tf.rotation_matrix(np.pi, (0, 1, 0))


def segment_instrument(instrument, cuts: Sequence[float], join: str = "straight",
                       gap: float = 0.2, thick_sockets: bool = False,
                       up: bool = False, flip_top: bool = False,
                       config: Optional[BuildConfig] = None) -> SegmentationResult:
    """Cut a body across at ``cuts`` and joint the pieces together.

    ``instrument`` is an :class:`~borecad.instrument.InstrumentBody`.
    Cuts are worked from the bottom up; each one takes the material below
    it off the remainder, shaped by the joint masks.  With ``up`` the
    body is worked from the top down instead, which puts the spigots on
    the lower pieces.  ``thick_sockets`` thickens the wall around each
    socket.

    Pieces come back in reverse cutting order (top piece first unless
    ``up``), each turned upside down (except the top piece when
    ``flip_top``) and standing on ``z=0``.  A piece's
    ``low`` and ``high`` are its nominal cuts in body coordinates; the
    spigot reaches past them.
    """
    config = resolve(config)
    engine = get_engine(config.engine)
    kind = join_name(join)
    joiner = get_join(kind)

    def combine(parts, operation):
        return engine.boolean(parts, operation, backend=config.backend,
                              digits=config.vertex_digits)

    length = instrument.top
    remainder = engine.as_trimesh(instrument.solid, config.vertex_digits).copy()
    bore = instrument.bore
    inner: Profile = instrument.inner
    outer: Profile = instrument.outer
    cuts = sorted(cuts)
    if up:
        flip = _flip_end_for_end(length)
        cuts = [length - c for c in reversed(cuts)]
        remainder.apply_transform(flip)
        if thick_sockets:
            bore = engine.as_trimesh(bore, config.vertex_digits).copy()
            bore.apply_transform(flip)
        inner = inner.reversed().moved(length)
        outer = outer.reversed().moved(length)
    bottom, ceiling = (float(z) for z in remainder.bounds[:, 2])

    pieces = []
    for cut in cuts:
        d1 = inner(cut)
        d4 = outer(cut)
        d5 = outer.maximum() * 2.0
        sock_length = d4 * 0.8
        p1 = cut - sock_length
        p3 = cut
        if not up and kind != "weld":
            p1 += sock_length
            p3 += sock_length
        if thick_sockets:
            d4_orig = d4
            d4 += min(d4 * 0.2, (d4 - d1) * 0.5)
            collar = Profile([p1 - (d4 - d4_orig), p1, p3], [(d1 + d4) * 0.5, d4, d4])
            thicker = combine([extrude_profile([collar], config=config), bore], "difference")
            remainder = combine([remainder, thicker], "union")
        inside, outside = joiner(p1, p3, length, d1, d4, d5, gap, config)
        pieces.append(combine([remainder, outside], "difference"))
        remainder = combine([remainder, inside], "intersection")
        logger.debug("joint cut", cut=cut, join=kind, socket=(p1, p3))
    pieces.append(remainder)
    pieces.reverse()

    edges = [bottom, *cuts, ceiling]
    spans = list(zip(edges, edges[1:]))
    spans.reverse()
    if up:
        spans = [(length - high, length - low) for low, high in spans]

    segments = []
    turn = trimesh.transformations.rotation_matrix(np.pi, (0, 1, 0))
    top_index = len(pieces) - 1 if up else 0
    for i, (piece, (low, high)) in enumerate(zip(pieces, spans)):
        if not flip_top or i != top_index:
            piece = piece.copy()
            piece.apply_transform(turn)
        piece = position_nicely(piece)
        segments.append(Segment(solid=piece, low=low, high=high, top=None,
                                bounds=piece.bounds.tolist()))
    logger.info("instrument segmented", pieces=len(segments), join=kind, up=up)
    return SegmentationResult(segments=segments)
