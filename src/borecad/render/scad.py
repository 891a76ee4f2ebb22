"""OpenSCAD script back end.

Purely structural: each node becomes one statement, group nodes wrap
their children in an indented block and labels become comment lines.
Nothing is validated here; whether the script builds is up to OpenSCAD.
Cylinders with no facet count of their own get ``$fn`` from the build
configuration's ``quality``, as in the native back end.
"""

from __future__ import annotations

from typing import List, Optional

from ..config import BuildConfig, resolve
from ..csg import BOOLEAN_KINDS, TRANSFORM_KINDS, Node
from ..errors import GeometryNotImplementedError

INDENT = "    "


def _num(value: float) -> str:
    return repr(float(value))


def _vector(values) -> str:
    return "[" + ", ".join(_num(v) for v in values) + "]"


def _emit(node: Node, depth: int, out: List[str], config: BuildConfig) -> None:
    pad = INDENT * depth
    kind = node.kind
    if kind == "cylinder":
        facets = node.facets or config.quality
        out.append(
            f"{pad}cylinder(h={_num(node.height)}, r1={_num(node.r1)}, "
            f"r2={_num(node.r2)}, $fn={facets});"
        )
    elif kind == "polyhedron":
        points = ", ".join(_vector(v) for v in node.mesh.vertices)
        # OpenSCAD wants faces clockwise seen from outside
        faces = ", ".join(
            "[" + ", ".join(str(int(i)) for i in reversed(face)) + "]"
            for face in node.mesh.faces
        )
        out.append(f"{pad}polyhedron(points=[{points}], faces=[{faces}]);")
    elif kind == "labelled":
        out.append(f"{pad}// {node.label}")
        _emit(node.child, depth, out, config)
    elif kind in BOOLEAN_KINDS or kind in TRANSFORM_KINDS:
        params = _vector(node.param) if kind in TRANSFORM_KINDS else ""
        out.append(f"{pad}{kind}({params}) {{")
        for child in node.children:
            _emit(child, depth + 1, out, config)
        out.append(f"{pad}}}")
    else:
        raise GeometryNotImplementedError(f"no script form for {kind!r} nodes")


def to_scad(node: Node, depth: int = 0, config: Optional[BuildConfig] = None) -> str:
    """Return the OpenSCAD statements for ``node`` and its subtree."""
    out: List[str] = []
    _emit(node, depth, out, resolve(config))
    return "\n".join(out) + "\n"


def document(node: Node, title: Optional[str] = None,
             config: Optional[BuildConfig] = None) -> str:
    """A complete script, optionally headed by a ``// title`` comment."""
    body = to_scad(node, config=config)
    if title is None:
        return body
    return f"// {title}\n\n{body}"


__all__ = ['to_scad', 'document']
