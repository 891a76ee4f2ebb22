"""I/O utilities for borecad."""

from .scad import write_scad
from .stl import read_stl, write_stl

__all__ = ['write_stl', 'read_stl', 'write_scad']
