"""OpenSCAD script export."""

from __future__ import annotations

from typing import Optional

from ..config import BuildConfig
from ..csg import Node
from ..render.scad import document


def write_scad(node_or_text, path_or_file, *, title: Optional[str] = None,
               config: Optional[BuildConfig] = None) -> None:
    """Write a composition tree (or already rendered script text) to a file.

    ``path_or_file`` can be a filesystem path or an open text stream.
    """

    if isinstance(node_or_text, Node):
        text = document(node_or_text, title, config)
    elif title is not None:
        text = f"// {title}\n\n{node_or_text}"
    else:
        text = node_or_text

    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='utf-8')
        close_when_done = True

    try:
        stream.write(text)
    finally:
        if close_when_done:
            stream.close()


__all__ = ['write_scad']
