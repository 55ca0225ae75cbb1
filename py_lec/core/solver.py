"""
Largest empty circle search.

The pipeline: triangulate the sites, clip the dual Voronoi diagram to a
box, take the convex hull (or a caller-supplied convex boundary) as the
region, generate candidate centres and keep the one farthest from its
nearest site.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import structlog

from .candidates import generate_candidates
from .clipping import clip_voronoi_edges
from .delaunay import DelaunayTriangulation
from .errors import EmptyCandidateSetError
from .geometry import BoundingBox, Point, Segment, as_site_list, bounding_box
from .hull import convex_boundary, convex_hull, hull_edges

logger = structlog.get_logger()

# Merge/boundary tolerance relative to the size of the clipping box
RELATIVE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float


@dataclass
class LargestEmptyCircleResult:
    """The circle plus the artifacts used to find it."""
    circle: Circle
    nearest_site: int
    region: Tuple[Point, ...]
    voronoi_edges: List[Segment] = field(default_factory=list)
    candidates: List[Point] = field(default_factory=list)
    box: Optional[BoundingBox] = None

    @property
    def hull_edges(self) -> List[Segment]:
        return list(hull_edges(self.region))


def _scan(candidates: Sequence[Point], start: int, stop: int,
          triangulation: DelaunayTriangulation) -> Tuple[float, int, int]:
    """Best (squared distance, candidate index, site) in candidates[start:stop]."""
    best = (-1.0, -1, -1)
    for index in range(start, stop):
        site, dist = triangulation.nearest_site_distance(candidates[index])
        if dist > best[0]:
            best = (dist, index, site)
    return best


def find_largest_circle(candidates: Sequence[Point],
                        triangulation: DelaunayTriangulation,
                        workers: int = 1) -> Tuple[Circle, int]:
    """
    Candidate farthest from its nearest site.

    Ties go to the earliest candidate. With several workers the candidates
    are scanned in chunks on a thread pool and the chunk winners reduced by
    (distance, -index), which selects the same candidate as a single scan.

    Args:
        candidates: Candidate centres in generation order
        triangulation: Triangulation of the sites
        workers: Number of threads to evaluate candidates on

    Returns:
        The circle and the index of the site on its boundary

    Raises:
        EmptyCandidateSetError: if there are no candidates
    """
    if not candidates:
        logger.error("No candidate centres generated", sites=len(triangulation.sites))
        raise EmptyCandidateSetError("candidate set is empty")

    total = len(candidates)
    if workers <= 1 or total < 2 * workers:
        dist, index, site = _scan(candidates, 0, total, triangulation)
    else:
        chunk = math.ceil(total / workers)
        bounds = [(start, min(start + chunk, total)) for start in range(0, total, chunk)]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_scan, candidates, start, stop, triangulation)
                       for start, stop in bounds]
            results = [future.result() for future in futures]
        dist, index, site = max(results, key=lambda r: (r[0], -r[1]))

    return Circle(center=candidates[index], radius=math.sqrt(dist)), site


def largest_empty_circle(sites,
                         boundary=None,
                         margin_factor: float = 1.0,
                         workers: int = 1) -> LargestEmptyCircleResult:
    """
    Largest circle centred in the region whose interior holds no site.

    Args:
        sites: Array-like of (x, y) coordinates
        boundary: Optional convex polygon to use instead of the sites'
            convex hull
        margin_factor: Clipping box margin relative to the sites' extent
        workers: Threads used to evaluate candidates

    Returns:
        LargestEmptyCircleResult with the circle and diagnostic artifacts

    Raises:
        DegenerateInputError: fewer than three distinct or collinear sites
        InvalidSiteError: malformed coordinates
        InvalidBoundaryError: boundary is not a convex polygon
    """
    points = as_site_list(sites)
    triangulation = DelaunayTriangulation(points)

    if boundary is None:
        region = convex_hull(points)
        corners: Tuple[Point, ...] = ()
    else:
        region = convex_boundary(boundary)
        corners = region

    box = bounding_box(points + list(region), margin_factor)
    tolerance = RELATIVE_TOLERANCE * max(box.xmax - box.xmin, box.ymax - box.ymin)

    edges = clip_voronoi_edges(triangulation.dual_edges(), box)
    candidates = generate_candidates(edges, region, tolerance, corners)
    circle, nearest = find_largest_circle(candidates, triangulation, workers)

    logger.info("Largest empty circle found",
                center=circle.center,
                radius=circle.radius,
                nearest_site=nearest,
                candidates=len(candidates))

    return LargestEmptyCircleResult(
        circle=circle,
        nearest_site=nearest,
        region=region,
        voronoi_edges=edges,
        candidates=candidates,
        box=box,
    )
