"""Data structures for fabrication segmentation."""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class Segment:
    """One printable piece cut from a finished solid.

    Attributes:
        solid: ``trimesh.Trimesh`` laid flat for printing.  Pieces cut by
            :func:`~borecad.manufacturing.make_segment` lie with the body
            axis along +x, the whole piece (padding included) starting at
            ``x=0``; jointed pieces stand upright on ``z=0``
        low: axial position of the lower cut (mm)
        high: axial position of the upper cut (mm)
        top: True for the upper half of a split body, False for the lower,
            None for a whole-section piece
        bounds: ``[[xmin, ymin, zmin], [xmax, ymax, zmax]]`` after reorientation
    """
    solid: Any  # trimesh.Trimesh
    low: float
    high: float
    top: Optional[bool] = True
    bounds: Optional[List[List[float]]] = None

    def __post_init__(self):
        if self.high < self.low:
            raise ValueError(f"segment bounds out of order: [{self.low}, {self.high}]")

    @property
    def length(self) -> float:
        """Nominal axial length between the cuts; pads and spigots are extra."""
        return self.high - self.low


@dataclass
class SegmentationResult:
    """Complete result of a segmentation operation.

    Attributes:
        segments: Resulting pieces, top pieces first, each in axial order
        warnings: Any issues detected during segmentation
    """
    segments: List[Segment]
    warnings: List[str] = field(default_factory=list)

    @property
    def segment_count(self) -> int:
        """Number of segments produced."""
        return len(self.segments)

    @property
    def lengths(self) -> List[float]:
        return [seg.length for seg in self.segments]

    @property
    def solids(self) -> List[Any]:
        return [seg.solid for seg in self.segments]

    def top_segments(self) -> List[Segment]:
        return [seg for seg in self.segments if seg.top is True]

    def bottom_segments(self) -> List[Segment]:
        return [seg for seg in self.segments if seg.top is False]
