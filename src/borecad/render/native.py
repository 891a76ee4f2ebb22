"""Native back end: realize a composition tree as a triangle mesh.

Primitives are lofted with :func:`borecad.mesh.extrusion`, transforms are
applied as 4x4 matrices and booleans are folded through the engine named
by the build configuration.  The build is strictly bottom-up: a node is
realized only after all of its children are.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import trimesh

from ..boolean import get_engine
from ..config import BuildConfig, resolve
from ..csg import BOOLEAN_KINDS, Node
from ..errors import GeometryNotImplementedError
from ..log import get_logger
from ..mesh import Mesh, extrusion
from ..shapes import circle

logger = get_logger(__name__)


def cylinder_mesh(height: float, r1: float, r2: float, facets: int,
                  config: Optional[BuildConfig] = None) -> Mesh:
    """Mesh of an OpenSCAD-style cylinder (first vertex on the +x axis)."""
    config = resolve(config)
    if height <= 0 or (r1 <= 0 and r2 <= 0):
        return Mesh.empty()
    n = max(3, facets) if facets else config.quality
    return extrusion(
        [0.0, height],
        [circle(r1 * 2.0, n, phase=0.0), circle(r2 * 2.0, n, phase=0.0)],
    )


def transform_matrix(kind: str, param) -> np.ndarray:
    """4x4 homogeneous matrix for a transform node parameter."""
    if kind == "translate":
        return trimesh.transformations.translation_matrix(param)
    if kind == "rotate":
        rx, ry, rz = (math.radians(a) for a in param)
        return trimesh.transformations.euler_matrix(rx, ry, rz, 'sxyz')
    if kind == "scale":
        return np.diag([param[0], param[1], param[2], 1.0])
    raise GeometryNotImplementedError(f"unknown transform {kind!r}")


def realize(node: Node, config: Optional[BuildConfig] = None) -> "trimesh.Trimesh":
    """Build the solid described by ``node``."""
    config = resolve(config)
    engine = get_engine(config.engine)
    return _realize(node, config, engine)


def _realize(node: Node, config: BuildConfig, engine) -> "trimesh.Trimesh":
    kind = node.kind
    if kind == "cylinder":
        mesh = cylinder_mesh(node.height, node.r1, node.r2, node.facets, config)
        return engine.as_trimesh(mesh, config.vertex_digits)
    if kind == "polyhedron":
        return engine.as_trimesh(node.mesh, config.vertex_digits)
    if kind == "labelled":
        logger.debug("building", label=node.label)
        return _realize(node.child, config, engine)

    parts = [_realize(child, config, engine) for child in node.children]
    if kind in BOOLEAN_KINDS:
        return engine.boolean(parts, kind, backend=config.backend, digits=config.vertex_digits)

    matrix = transform_matrix(kind, node.param)
    solid = engine.boolean(parts, "union", backend=config.backend, digits=config.vertex_digits)
    if solid.faces.size == 0:
        return solid
    solid = solid.copy()
    solid.apply_transform(matrix)
    return solid


__all__ = ['realize', 'cylinder_mesh', 'transform_matrix']
