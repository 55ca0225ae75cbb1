"""Clipping of the Voronoi diagram to a finite box."""

from typing import Iterable, List

import structlog

from .delaunay import VoronoiEdge
from .geometry import BoundingBox, Segment, clip_to_box

logger = structlog.get_logger()


def clip_voronoi_edges(edges: Iterable[VoronoiEdge], box: BoundingBox) -> List[Segment]:
    """
    Clip every Voronoi edge to a box, dropping the ones that miss it.

    Args:
        edges: Voronoi edges (segments, rays or lines)
        box: Box strictly containing all sites

    Returns:
        Finite segments in the order of the input edges
    """
    clipped = []
    dropped = 0
    for edge in edges:
        segment = clip_to_box(edge.primitive, box)
        if segment is None:
            dropped += 1
            continue
        clipped.append(segment)

    logger.debug("Voronoi edges clipped", kept=len(clipped), dropped=dropped, box=tuple(box))
    return clipped
