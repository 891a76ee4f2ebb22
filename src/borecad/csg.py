"""Solid composition tree.

A model is described once as a tree of nodes and handed to one of the
back ends in :mod:`borecad.render`: the script emitter writes OpenSCAD
source, the native realizer folds the tree through a boolean engine into
a mesh.  Nodes carry no behaviour of their own; each has a ``kind`` tag
that the back ends dispatch on.

The tree is a tree: a node may have at most one parent, so reusing a
node in two places raises :class:`~borecad.errors.CompositionError`.

Example::

    >>> from borecad.csg import Cylinder, Difference, Translate
    >>> tube = Difference([Cylinder(10, 5), Translate((0, 0, -1), [Cylinder(12, 4)])])
    >>> tube.kind, len(tube.children)
    ('difference', 2)
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence, Union as _Union

from .errors import CompositionError, GeometryError
from .geom import Vec3
from .mesh import Mesh

BOOLEAN_KINDS = ("union", "difference", "intersection")
TRANSFORM_KINDS = ("translate", "rotate", "scale")


def _vec3(value: _Union[float, Sequence[float]], name: str) -> Vec3:
    if isinstance(value, (int, float)):
        return (float(value), float(value), float(value))
    if len(value) != 3:
        raise GeometryError(f"{name} needs three components, got {len(value)}")
    return (float(value[0]), float(value[1]), float(value[2]))


class Node:
    """Base class of every composition node."""

    kind = "node"

    def __init__(self):
        self.parent: Optional[Node] = None

    @property
    def children(self) -> List["Node"]:
        return []

    def walk(self) -> Iterator["Node"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def _adopt(self, child: "Node") -> "Node":
        if not isinstance(child, Node):
            raise CompositionError(f"cannot add {type(child).__name__} to a composition tree")
        if child.parent is not None:
            raise CompositionError(
                f"{child.kind} node already belongs to a {child.parent.kind} node"
            )
        ancestor: Optional[Node] = self
        while ancestor is not None:
            if ancestor is child:
                raise CompositionError("a node cannot contain itself")
            ancestor = ancestor.parent
        child.parent = self
        return child


class Cylinder(Node):
    """Truncated cone standing on the xy plane, from ``z=0`` to ``z=height``.

    ``facets`` of 0 means "use the build quality".
    """

    kind = "cylinder"

    def __init__(self, height: float, r1: float, r2: Optional[float] = None, facets: int = 0):
        super().__init__()
        if r2 is None:
            r2 = r1
        if height < 0 or r1 < 0 or r2 < 0:
            raise GeometryError(
                f"cylinder dimensions must not be negative (h={height}, r1={r1}, r2={r2})"
            )
        if facets < 0:
            raise GeometryError(f"facet count must not be negative, got {facets}")
        self.height = float(height)
        self.r1 = float(r1)
        self.r2 = float(r2)
        self.facets = int(facets)

    def __repr__(self):
        return f"Cylinder(h={self.height}, r1={self.r1}, r2={self.r2}, facets={self.facets})"


class Polyhedron(Node):
    """Leaf wrapping an already built :class:`~borecad.mesh.Mesh`."""

    kind = "polyhedron"

    def __init__(self, mesh: Mesh):
        super().__init__()
        self.mesh = mesh

    def __repr__(self):
        return f"Polyhedron({len(self.mesh.vertices)} vertices, {len(self.mesh.faces)} faces)"


class Labelled(Node):
    """Names a subtree; rendered as a comment by the script emitter."""

    kind = "labelled"

    def __init__(self, label: str, child: Node):
        super().__init__()
        self.label = label
        self.child = self._adopt(child)

    @property
    def children(self) -> List[Node]:
        return [self.child]

    def __repr__(self):
        return f"Labelled({self.label!r}, {self.child!r})"


class Group(Node):
    """Node with an ordered list of children that may still grow."""

    def __init__(self, children: Iterable[Node] = ()):
        super().__init__()
        self._children: List[Node] = []
        for child in children:
            self.add(child)

    @property
    def children(self) -> List[Node]:
        return list(self._children)

    def add(self, child: Node) -> "Group":
        self._children.append(self._adopt(child))
        return self

    def __len__(self):
        return len(self._children)

    def __repr__(self):
        return f"{type(self).__name__}({self._children!r})"


class Union(Group):
    kind = "union"


class Difference(Group):
    """First child minus every later child."""

    kind = "difference"


class Intersection(Group):
    kind = "intersection"


class Translate(Group):
    kind = "translate"

    def __init__(self, offset: Sequence[float], children: Iterable[Node] = ()):
        self.offset = _vec3(offset, "offset")
        super().__init__(children)

    @property
    def param(self) -> Vec3:
        return self.offset

    def __repr__(self):
        return f"Translate({self.offset!r}, {self._children!r})"


class Rotate(Group):
    """Rotation by Euler angles in degrees, about x, then y, then z."""

    kind = "rotate"

    def __init__(self, angles: Sequence[float], children: Iterable[Node] = ()):
        self.angles = _vec3(angles, "angles")
        super().__init__(children)

    @property
    def param(self) -> Vec3:
        return self.angles

    def __repr__(self):
        return f"Rotate({self.angles!r}, {self._children!r})"


class Scale(Group):
    kind = "scale"

    def __init__(self, factors: _Union[float, Sequence[float]], children: Iterable[Node] = ()):
        self.factors = _vec3(factors, "factors")
        super().__init__(children)

    @property
    def param(self) -> Vec3:
        return self.factors

    def __repr__(self):
        return f"Scale({self.factors!r}, {self._children!r})"


__all__ = [
    'BOOLEAN_KINDS',
    'TRANSFORM_KINDS',
    'Node',
    'Cylinder',
    'Polyhedron',
    'Labelled',
    'Group',
    'Union',
    'Difference',
    'Intersection',
    'Translate',
    'Rotate',
    'Scale',
]
