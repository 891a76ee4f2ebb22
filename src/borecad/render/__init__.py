"""Back ends that consume a composition tree.

``scad`` returns OpenSCAD source text; ``native`` returns a
``trimesh.Trimesh`` built through the configured boolean engine.
"""

from typing import Optional

from ..config import BuildConfig
from ..csg import Node
from ..errors import GeometryNotImplementedError
from . import native, scad

BACKENDS = ('native', 'scad')


def render(node: Node, backend: str = 'native', config: Optional[BuildConfig] = None,
           title: Optional[str] = None):
    """Render ``node`` with the named back end."""
    if backend == 'native':
        return native.realize(node, config)
    if backend == 'scad':
        return scad.document(node, title, config)
    raise GeometryNotImplementedError(f"unknown render back end {backend!r} (known: {BACKENDS})")


__all__ = ['BACKENDS', 'render', 'native', 'scad']
