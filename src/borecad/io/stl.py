"""STL import and export for borecad meshes and engine solids."""

from __future__ import annotations

import re
import struct
from typing import Tuple

import numpy as np
import trimesh

from ..csg import Node
from ..errors import GeometryError
from ..mesh import Mesh
from ..render.native import realize

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')
_TRIANGLE_SIZE = _STRUCT_TRIANGLE.size


def _triangles(obj, config=None) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(normals, corners)`` arrays of shape ``(m, 3)`` and ``(m, 3, 3)``."""
    if isinstance(obj, Node):
        obj = realize(obj, config)
    if isinstance(obj, trimesh.Trimesh):
        return np.asarray(obj.face_normals), np.asarray(obj.triangles)
    if isinstance(obj, Mesh):
        corners = obj.vertices[obj.faces]
        if len(corners) == 0:
            return np.zeros((0, 3)), corners.reshape(0, 3, 3)
        normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
        lengths = np.linalg.norm(normals, axis=1)
        lengths[lengths == 0.0] = 1.0
        return normals / lengths[:, None], corners
    raise GeometryError(f"cannot write {type(obj).__name__} as STL")


def write_stl(obj, path_or_file, *, binary: bool = True, name: str = 'borecad',
              config=None) -> None:
    """Write ``obj`` (mesh, engine solid or composition tree) to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    """

    normals, corners = _triangles(obj, config)

    if binary:
        _write_binary(normals, corners, path_or_file, name)
    else:
        _write_ascii(normals, corners, path_or_file, name)


def _write_binary(normals, corners, path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'wb')
        close_when_done = True

    try:
        header = (name[:_HEADER_SIZE]).encode('ascii', errors='replace')
        header = header.ljust(_HEADER_SIZE, b' ')
        stream.write(header)
        stream.write(struct.pack('<I', len(corners)))

        for normal, tri in zip(normals, corners):
            stream.write(_STRUCT_TRIANGLE.pack(*normal, *tri[0], *tri[1], *tri[2], 0))
    finally:
        if close_when_done:
            stream.close()


def _write_ascii(normals, corners, path_or_file, name: str) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='ascii')
        close_when_done = True

    try:
        print(f"solid {name}", file=stream)
        for n, tri in zip(normals, corners):
            print(f"  facet normal {n[0]:.6e} {n[1]:.6e} {n[2]:.6e}", file=stream)
            print("    outer loop", file=stream)
            for v in tri:
                print(f"      vertex {v[0]:.6e} {v[1]:.6e} {v[2]:.6e}", file=stream)
            print("    endloop", file=stream)
            print("  endfacet", file=stream)
        print(f"endsolid {name}", file=stream)
    finally:
        if close_when_done:
            stream.close()


# ---------------------------------------------------------------------------
# STL Import
# ---------------------------------------------------------------------------

_FLOAT = r'([eE\d.+-]+)'
_FACET = re.compile(
    r'facet\s+normal\s+' + r'\s+'.join([_FLOAT] * 3) + r'\s+outer\s+loop\s+'
    + r'\s+'.join([r'vertex\s+' + r'\s+'.join([_FLOAT] * 3)] * 3)
    + r'\s+endloop\s+endfacet',
    re.IGNORECASE,
)


def _is_binary_stl(data: bytes) -> bool:
    """Binary STL is an 80-byte header, a count, then 50 bytes per triangle."""
    if len(data) < _HEADER_SIZE + 4:
        return False
    count = struct.unpack('<I', data[_HEADER_SIZE:_HEADER_SIZE + 4])[0]
    if len(data) == _HEADER_SIZE + 4 + count * _TRIANGLE_SIZE:
        return True
    return not data.lstrip()[:5].lower().startswith(b'solid')


def read_stl(path_or_file, *, digits: int | None = 9) -> Mesh:
    """Read an STL file into a :class:`~borecad.mesh.Mesh`.

    Coincident corners are merged by rounding to ``digits`` decimals.
    """
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()

    if _is_binary_stl(data):
        count = struct.unpack('<I', data[_HEADER_SIZE:_HEADER_SIZE + 4])[0]
        rows = [
            _STRUCT_TRIANGLE.unpack_from(data, _HEADER_SIZE + 4 + i * _TRIANGLE_SIZE)
            for i in range(count)
            if _HEADER_SIZE + 4 + (i + 1) * _TRIANGLE_SIZE <= len(data)
        ]
        corners = np.array([row[3:12] for row in rows], dtype=float).reshape(-1, 3)
    else:
        text = data.decode('utf-8', errors='replace')
        corners = np.array(
            [[float(v) for v in m.groups()[3:]] for m in _FACET.finditer(text)],
            dtype=float,
        ).reshape(-1, 3)

    if len(corners) == 0:
        return Mesh.empty()
    keys = np.round(corners, digits) if digits is not None else corners
    vertices, inverse = np.unique(keys, axis=0, return_inverse=True)
    return Mesh(vertices, np.asarray(inverse).reshape(-1, 3))


__all__ = ['write_stl', 'read_stl']
