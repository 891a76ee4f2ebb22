"""Triangle meshes and the lofting (extrusion) builder.

An extrusion stacks cross-section loops along the z axis and joins
corresponding points of neighbouring levels with pairs of triangles.
Loops must be counter-clockwise; faces are then wound so that their
normals point out of the solid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
import trimesh

from .config import BuildConfig, resolve
from .errors import GeometryError, TopologyMismatchError
from .log import get_logger
from .loop import Loop
from .profile import Profile, ProfileLike
from .shapes import circle

logger = get_logger(__name__)

CrossSection = Callable[[Sequence[float]], Loop]

CAP_STYLES = ("fan", "centroid")


@dataclass(frozen=True)
class Mesh:
    """Indexed triangle mesh.

    Attributes:
        vertices: ``(n, 3)`` float array of coordinates
        faces: ``(m, 3)`` int array of vertex indices, counter-clockwise
            seen from outside
    """

    vertices: np.ndarray
    faces: np.ndarray

    def __post_init__(self):
        vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3)
        faces = np.asarray(self.faces, dtype=np.int64).reshape(-1, 3)
        if faces.size and (faces.min() < 0 or faces.max() >= len(vertices)):
            raise GeometryError("mesh face refers to a vertex that does not exist")
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "faces", faces)

    @property
    def is_empty(self) -> bool:
        return len(self.faces) == 0

    def bounds(self) -> np.ndarray:
        """``[[xmin, ymin, zmin], [xmax, ymax, zmax]]`` of the vertices."""
        if len(self.vertices) == 0:
            return np.zeros((2, 3))
        return np.array([self.vertices.min(axis=0), self.vertices.max(axis=0)])

    def to_trimesh(self, digits: Optional[int] = 9) -> "trimesh.Trimesh":
        """Convert to :class:`trimesh.Trimesh`, welding coincident vertices.

        Welding rounds coordinates to ``digits`` decimals; faces that
        collapse (a cone apex built from a zero-radius loop) are dropped.
        """
        mesh = trimesh.Trimesh(vertices=self.vertices, faces=self.faces, process=False)
        if digits is not None and len(self.faces):
            mesh.merge_vertices(digits_vertex=digits)
            mesh.update_faces(mesh.nondegenerate_faces())
            mesh.remove_unreferenced_vertices()
        return mesh

    def transformed(self, matrix: np.ndarray) -> "Mesh":
        """Copy with a 4x4 homogeneous transform applied.

        Faces are reversed when the transform mirrors, so they stay
        outward-facing.
        """
        matrix = np.asarray(matrix, dtype=float)
        vertices = self.vertices @ matrix[:3, :3].T + matrix[:3, 3]
        faces = self.faces
        if np.linalg.det(matrix[:3, :3]) < 0:
            faces = faces[:, ::-1]
        return Mesh(vertices, faces)

    @classmethod
    def from_trimesh(cls, mesh: "trimesh.Trimesh") -> "Mesh":
        return cls(np.array(mesh.vertices), np.array(mesh.faces))

    @classmethod
    def empty(cls) -> "Mesh":
        return cls(np.zeros((0, 3)), np.zeros((0, 3), dtype=np.int64))


def extrusion(zs: Sequence[float], loops: Sequence[Loop], cap: str = "fan") -> Mesh:
    """Loft ``loops`` placed at heights ``zs`` into a closed mesh.

    Args:
        zs: non-decreasing axial positions, one per loop; a repeated
            position gives a flat shoulder
        loops: counter-clockwise cross-sections, all with the same number
            of points
        cap: ``"fan"`` closes each end with ``n-2`` triangles fanned from
            the first point of the end loop, which needs a convex end
            loop (every generator in :mod:`borecad.shapes` makes one);
            ``"centroid"`` adds a vertex at each
            end loop's centroid and fans ``n`` triangles from it

    Raises:
        GeometryError: fewer than two levels, mismatched lengths or
            decreasing positions
        TopologyMismatchError: loops differ in point count
    """
    if cap not in CAP_STYLES:
        raise GeometryError(f"unknown cap style {cap!r}, expected one of {CAP_STYLES}")
    if len(zs) != len(loops):
        raise GeometryError(f"got {len(zs)} positions for {len(loops)} loops")
    if len(zs) < 2:
        raise GeometryError("an extrusion needs at least two levels")
    for a, b in zip(zs, zs[1:]):
        if b < a:
            raise GeometryError(f"extrusion positions must be non-decreasing ({a} > {b})")

    n_z = len(zs)
    n = len(loops[0])
    for level, loop in enumerate(loops):
        if len(loop) != n:
            raise TopologyMismatchError(level, n, len(loop))

    vertices = [p.at(z) for z, loop in zip(zs, loops) for p in loop]
    faces: List[Tuple[int, int, int]] = []
    for i in range(n_z - 1):
        lower = i * n
        upper = (i + 1) * n
        for j in range(n):
            k = (j + 1) % n
            faces.append((upper + j, lower + j, lower + k))
            faces.append((upper + j, lower + k, upper + k))

    top = (n_z - 1) * n
    if cap == "centroid":
        end0 = len(vertices)
        vertices.append(loops[0].centroid().at(zs[0]))
        end1 = len(vertices)
        vertices.append(loops[-1].centroid().at(zs[-1]))
        for j in range(n):
            k = (j + 1) % n
            faces.append((k, j, end0))
            faces.append((top + j, top + k, end1))
    else:
        for j in range(1, n - 1):
            faces.append((0, j + 1, j))
            faces.append((top, top + j, top + j + 1))

    logger.debug("extrusion built", levels=n_z, points=n, faces=len(faces), cap=cap)
    return Mesh(np.array(vertices, dtype=float), np.array(faces, dtype=np.int64))


def extrude_profile(profiles: Sequence[ProfileLike],
                    cross_section: Optional[CrossSection] = None,
                    config: Optional[BuildConfig] = None,
                    cap: str = "fan") -> Mesh:
    """Extrude one or more profiles sampled at all of their control points.

    ``cross_section`` receives the diameters of every profile at a level
    and returns the loop for that level; the default is a circle of the
    first diameter.  Where a profile steps (``low != high``) two loops are
    placed at the same height.
    """
    config = resolve(config)
    if cross_section is None:
        quality = config.quality

        def cross_section(diameters: Sequence[float]) -> Loop:
            return circle(diameters[0], quality)

    positions = sorted({z for profile in profiles for z in profile.kinks})
    zs: List[float] = []
    loops: List[Loop] = []
    for i, z in enumerate(positions):
        lows = [profile(z) for profile in profiles]
        highs = [profile(z, True) for profile in profiles]
        if i != 0:
            zs.append(z)
            loops.append(cross_section(lows))
        if i == 0 or (i < len(positions) - 1 and lows != highs):
            zs.append(z)
            loops.append(cross_section(highs))
    return extrusion(zs, loops, cap=cap)


def prism(height: float, diameter: float,
          cross_section: Optional[CrossSection] = None,
          config: Optional[BuildConfig] = None) -> Mesh:
    """Straight extrusion of ``cross_section`` from ``z=0`` to ``z=height``."""
    span = Profile([0.0, height], [diameter, diameter])
    return extrude_profile([span], cross_section=cross_section, config=config)


# local x -> -y, local y -> +z (along the body), local z -> -x (outward)
_RADIAL = np.array([
    [0.0, 0.0, -1.0, 0.0],
    [-1.0, 0.0, 0.0, 0.0],
    [0.0, 1.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 1.0],
])


def radial_frame(elevation: float, azimuth: float = 0.0) -> np.ndarray:
    """Transform from a radial working frame into body coordinates.

    In the working frame ``z`` points out through the wall and ``y`` runs
    up the body axis, so a shape extruded along ``z`` becomes a radial
    spoke.  With ``azimuth`` 0 the spoke points along ``-x`` (the side
    holes open on); ``azimuth`` turns it about the body axis, in degrees.
    The origin lands on the axis at ``elevation``.
    """
    tf = trimesh.transformations
    return (tf.translation_matrix((0.0, 0.0, elevation))
            @ tf.rotation_matrix(np.radians(azimuth), (0, 0, 1))
            @ _RADIAL)


def block(p1: Sequence[float], p2: Sequence[float], ramp: float = 0.0) -> Mesh:
    """Box from corner ``p1`` to corner ``p2``.

    A non-zero ``ramp`` widens the top face by ``ramp`` on every side,
    making a frustum.
    """
    vertices = []
    for x in (p1[0], p2[0]):
        for y in (p1[1], p2[1]):
            vertices.append((x, y, p1[2]))
    for x in (p1[0] - ramp, p2[0] + ramp):
        for y in (p1[1] - ramp, p2[1] + ramp):
            vertices.append((x, y, p2[2]))

    # vertex index bits: 4 = top, 2 = x high, 1 = y high
    faces = []

    def quad(a, b, c, d):
        faces.append((a, b, c))
        faces.append((a, c, d))

    for a, b, c in ((1, 2, 4), (4, 1, 2), (2, 4, 1)):
        quad(0, a, a + b, b)
        quad(c + b, c + a + b, c + a, c)
    return Mesh(np.array(vertices, dtype=float), np.array(faces, dtype=np.int64))
