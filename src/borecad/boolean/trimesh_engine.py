"""Trimesh-backed boolean engine.

Meshes are handed to :mod:`trimesh.boolean`, which dispatches to one of
its backends; the default is ``manifold`` (the ``manifold3d`` package).
Inputs may be :class:`borecad.mesh.Mesh` or :class:`trimesh.Trimesh`;
results are always ``trimesh.Trimesh``.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import trimesh

from ..errors import EngineError
from ..log import get_logger
from ..mesh import Mesh

ENGINE_NAME = "trimesh"
OPERATIONS = ("union", "difference", "intersection")

logger = get_logger(__name__)


def engines_available() -> set[str]:
    """Return the set of trimesh boolean backends that are operational."""

    return set(trimesh.boolean.engines_available)


def is_available(backend: str | None = None) -> bool:
    """Check whether the engine can run (trimesh + backend present)."""

    available = engines_available()
    if not available:
        return False
    if backend is None:
        return True
    return backend in available


def empty_mesh() -> "trimesh.Trimesh":
    return trimesh.Trimesh(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=np.int64),
                           process=False)


def as_trimesh(obj, digits: int | None = 9) -> "trimesh.Trimesh":
    """Coerce ``obj`` to a ``trimesh.Trimesh``."""

    if isinstance(obj, trimesh.Trimesh):
        return obj
    if isinstance(obj, Mesh):
        return obj.to_trimesh(digits)
    raise EngineError(f"cannot convert {type(obj).__name__} to a mesh")


def _check_backend(backend: str | None) -> None:
    available = engines_available()
    if backend is not None and backend not in available:
        raise EngineError(
            f"trimesh backend '{backend}' is not available; install the appropriate "
            f"package (available: {available})"
        )
    if backend is None and not available:
        raise EngineError(
            "no trimesh boolean backends are available; install manifold3d"
        )


def boolean(meshes: Sequence, operation: str, *, backend: str | None = "manifold",
            digits: int | None = 9) -> "trimesh.Trimesh":
    """Apply ``operation`` left to right over ``meshes``.

    ``difference`` subtracts every later mesh from the first.  Empty meshes
    are handled here rather than by the backend: they vanish from unions
    and subtractions and empty an intersection.
    """

    op = operation.lower()
    if op not in OPERATIONS:
        raise EngineError(f"unsupported boolean operation '{operation}' for trimesh engine")

    parts = [as_trimesh(m, digits) for m in meshes]
    if not parts:
        return empty_mesh()
    if op == 'intersection':
        if any(p.faces.size == 0 for p in parts):
            return empty_mesh()
    elif op == 'difference':
        if parts[0].faces.size == 0:
            return empty_mesh()
        parts = parts[:1] + [p for p in parts[1:] if p.faces.size]
    else:
        parts = [p for p in parts if p.faces.size]
        if not parts:
            return empty_mesh()
    if len(parts) == 1:
        return parts[0]

    _check_backend(backend)
    logger.debug("boolean", operation=op, operands=len(parts), engine=ENGINE_NAME, backend=backend)
    try:
        if op == 'union':
            result = trimesh.boolean.union(parts, engine=backend, check_volume=False)
        elif op == 'intersection':
            result = trimesh.boolean.intersection(parts, engine=backend, check_volume=False)
        else:
            result = trimesh.boolean.difference(parts, engine=backend, check_volume=False)
    except Exception as exc:
        raise EngineError(f"trimesh boolean operation failed: {exc}") from exc

    if result is None or result.faces.size == 0:
        return empty_mesh()
    return result


def solid_boolean(a, b, operation: str, *, backend: str | None = "manifold") -> "trimesh.Trimesh":
    """Perform a boolean between ``a`` and ``b`` using trimesh."""

    return boolean([a, b], operation, backend=backend)


__all__ = ['ENGINE_NAME', 'OPERATIONS', 'is_available', 'engines_available', 'boolean',
           'solid_boolean', 'as_trimesh', 'empty_mesh']
