"""Set-intersection aggregation and upset rendering."""

from sets.aggregate import (
    IntersectionCount,
    aggregate,
    intersections_to_frame,
    set_sizes,
)

__all__ = [
    "IntersectionCount",
    "aggregate",
    "intersections_to_frame",
    "set_sizes",
]
