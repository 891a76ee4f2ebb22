"""Fabrication post-processing for borecad.

Bodies longer than a print bed are cut into segments along the body
axis; each segment is re-oriented to print flat.  Bodies can also be cut
across into jointed pieces that socket or weld back together.

Example Usage
-------------
>>> from borecad.manufacturing import make_segments
>>> result = make_segments(body, length=600.0, radius=30.0,
...                        top_fractions=[0.0, 0.5, 1.0],
...                        bottom_fractions=[0.0, 0.5, 1.0], pad=1.0)
>>> print(f"Created {result.segment_count} segments")

>>> from borecad.manufacturing import segment_instrument
>>> pieces = segment_instrument(instrument, cuts=[200.0, 400.0], join="tapered")
"""

# Data structures
from .data import (
    Segment,
    SegmentationResult,
)

# Joints
from .joints import (
    JOINS,
    get_join,
    join_name,
    straight_socket,
    tapered_socket,
    weld_join,
)

# Segmentation operations
from .segmentation import (
    division_cuts,
    make_segment,
    make_segments,
    orientation_matrix,
    position_nicely,
    segment_instrument,
)

__all__ = [
    # Data structures
    "Segment",
    "SegmentationResult",
    # Joints
    "JOINS",
    "get_join",
    "join_name",
    "straight_socket",
    "tapered_socket",
    "weld_join",
    # Segmentation operations
    "division_cuts",
    "make_segment",
    "make_segments",
    "orientation_matrix",
    "position_nicely",
    "segment_instrument",
]
