"""Convex hull by Andrew's monotone chain."""

import math
from typing import Iterator, List, Sequence, Tuple

import numpy as np
import structlog

from .errors import DegenerateInputError, InvalidBoundaryError, InvalidSiteError
from .geometry import Orientation, Point, Segment, as_site_list, orientation

logger = structlog.get_logger()


def _chain(points: Sequence[Point]) -> List[Point]:
    chain: List[Point] = []
    for p in points:
        # Strict left turns only: collinear boundary points are dropped
        while len(chain) >= 2 and orientation(chain[-2], chain[-1], p) != Orientation.LEFT:
            chain.pop()
        chain.append(p)
    return chain


def convex_hull(sites) -> Tuple[Point, ...]:
    """
    Convex hull of a site set.

    Sites are sorted by x, then y; the lower chain is built left to right
    and the upper chain right to left. Points on a hull edge but not at a
    corner are excluded.

    Args:
        sites: Array-like of (x, y) coordinates

    Returns:
        Hull corners in counter-clockwise order, starting at the
        lexicographically smallest site

    Raises:
        DegenerateInputError: with fewer than three distinct sites or when
            all sites are collinear
    """
    points = as_site_list(sites)
    if len(points) < 3:
        raise DegenerateInputError("fewer than three distinct sites")

    coords = np.asarray(points)
    order = np.lexsort((coords[:, 1], coords[:, 0]))
    ordered = [points[i] for i in order]

    lower = _chain(ordered)
    upper = _chain(reversed(ordered))
    hull = tuple(lower[:-1] + upper[:-1])

    if len(hull) < 3:
        if len(set(points)) < 3:
            raise DegenerateInputError("fewer than three distinct sites")
        raise DegenerateInputError("all sites are collinear")

    logger.debug("Convex hull computed", sites=len(points), corners=len(hull))
    return hull


def hull_edges(polygon: Sequence[Point]) -> Iterator[Segment]:
    """Consecutive edges of a closed polygon, wrapping around."""
    n = len(polygon)
    for i in range(n):
        yield Segment(polygon[i], polygon[(i + 1) % n])


def convex_boundary(polygon) -> Tuple[Point, ...]:
    """
    Validate a caller-supplied convex boundary polygon.

    Accepts either orientation and an optional closing vertex equal to the
    first one. Collinear vertices are allowed.

    Args:
        polygon: Array-like of (x, y) vertices

    Returns:
        The polygon's vertices in counter-clockwise order

    Raises:
        InvalidBoundaryError: if the polygon is degenerate, not convex or
            winds around more than once
    """
    try:
        vertices = as_site_list(polygon)
    except InvalidSiteError as e:
        raise InvalidBoundaryError(str(e)) from e

    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    vertices = [p for i, p in enumerate(vertices) if i == 0 or p != vertices[i - 1]]
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    if len(vertices) < 3:
        raise InvalidBoundaryError("boundary needs at least three distinct vertices")

    n = len(vertices)
    turns = {orientation(vertices[i - 1], vertices[i], vertices[(i + 1) % n]) for i in range(n)}
    turns.discard(Orientation.COLLINEAR)
    if not turns:
        raise InvalidBoundaryError("boundary vertices are collinear")
    if len(turns) > 1:
        raise InvalidBoundaryError("boundary polygon is not convex")
    if turns == {Orientation.RIGHT}:
        vertices.reverse()

    # A star polygon turns left everywhere but winds more than once
    winding = 0.0
    for i in range(n):
        ax, ay = vertices[i - 1]
        bx, by = vertices[i]
        cx, cy = vertices[(i + 1) % n]
        ux, uy, vx, vy = bx - ax, by - ay, cx - bx, cy - by
        winding += math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)
    if abs(winding - 2.0 * math.pi) > 1e-6:
        raise InvalidBoundaryError("boundary polygon is not simple")

    return tuple(vertices)
