"""
Candidate centres for the largest empty circle.

The distance to the nearest site, restricted to a convex region, has its
local maxima at Voronoi vertices inside the region, at points where a
Voronoi edge crosses the region boundary, and at the region's corners.
For the sites' own hull the corners are sites, so only the first two kinds
matter there.
"""

from typing import Iterable, List, Sequence

import numpy as np
import structlog
from scipy.spatial import cKDTree

from .geometry import IntersectionKind, Point, Segment, point_in_polygon, segment_intersection
from .hull import hull_edges

logger = structlog.get_logger()


def deduplicate(points: Sequence[Point], tolerance: float) -> List[Point]:
    """
    Drop points within tolerance of an earlier point, keeping input order.

    Args:
        points: Points to filter
        tolerance: Merge radius; zero merges only identical coordinates

    Returns:
        First occurrences, in their original order
    """
    if not points:
        return []
    if tolerance <= 0.0:
        return list(dict.fromkeys(points))

    tree = cKDTree(np.asarray(points, dtype=float))
    keep = np.ones(len(points), dtype=bool)
    for i, p in enumerate(points):
        if not keep[i]:
            continue
        for j in tree.query_ball_point(p, r=tolerance):
            if j > i:
                keep[j] = False
    return [p for p, kept in zip(points, keep) if kept]


def _near_region(clipped_edges: Sequence[Segment], region: Sequence[Point]) -> List[Segment]:
    """Edges whose bounding box touches the region's bounding box."""
    if not clipped_edges:
        return []
    coords = np.asarray(clipped_edges, dtype=float)
    lo = coords.min(axis=1)
    hi = coords.max(axis=1)
    poly = np.asarray(region, dtype=float)
    # Inclusive so edges touching the box at a single point survive
    mask = np.all((hi >= poly.min(axis=0)) & (lo <= poly.max(axis=0)), axis=1)
    return [segment for segment, kept in zip(clipped_edges, mask) if kept]


def generate_candidates(clipped_edges: Sequence[Segment],
                        region: Sequence[Point],
                        tolerance: float = 0.0,
                        corners: Iterable[Point] = ()) -> List[Point]:
    """
    Build the finite candidate set.

    Args:
        clipped_edges: Voronoi edges clipped to a box containing the region
        region: Convex region polygon, counter-clockwise
        tolerance: Distance under which points are merged and within which
            a point outside an edge still counts as on the boundary
        corners: Extra candidates, the region's corners when it is not the
            sites' own hull

    Returns:
        Candidates in generation order: Voronoi vertices in the region,
        then boundary crossings, then corners
    """
    endpoints = [p for segment in clipped_edges for p in segment]
    vertices = deduplicate(endpoints, tolerance)
    inside = [p for p in vertices if point_in_polygon(p, region, tolerance)]

    near = _near_region(clipped_edges, region)
    crossings = []
    overlaps = 0
    for boundary_edge in hull_edges(region):
        for segment in near:
            hit = segment_intersection(boundary_edge, segment)
            if hit.kind is IntersectionKind.POINT:
                crossings.append(hit.point)
            elif hit.kind in (IntersectionKind.SEGMENT, IntersectionKind.OVERLAP):
                overlaps += 1

    candidates = deduplicate(inside + crossings + list(corners), tolerance)
    logger.info("Candidates generated",
                voronoi_vertices=len(vertices),
                inside_region=len(inside),
                edges_near_region=len(near),
                crossings=len(crossings),
                overlaps_ignored=overlaps,
                candidates=len(candidates))
    return candidates
