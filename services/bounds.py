"""
Bounds calculator for the placed diagram.
"""
from typing import List

from models import Bounds, LayoutOptions, PlacedNode


def compute_bounds(nodes: List[PlacedNode], options: LayoutOptions = None) -> Bounds:
    """Return the canvas extent and the x offset that makes it non-negative."""
    options = options or LayoutOptions()
    margin = options.margin

    if not nodes:
        return Bounds(center_offset=margin)

    # Rows are centered on x = 0, so the origin is always inside the extent
    min_x = min(0.0, min(n.x for n in nodes))
    max_x = max(0.0, max(n.right for n in nodes))
    max_y = max(0.0, max(n.bottom for n in nodes))

    return Bounds(
        min_x=min_x,
        max_x=max_x,
        max_y=max_y,
        width=max_x - min_x + 2 * margin,
        height=max_y + margin,
        center_offset=-min_x + margin,
    )
