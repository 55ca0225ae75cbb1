"""
Robust 2D geometry primitives.

The predicates (orientation, in-circle) are evaluated in floating point
first and checked against a static error bound. When the float result is
too close to zero to trust, the determinant is recomputed exactly with
rational arithmetic, so the sign returned is always the true sign for the
given float coordinates. Constructions (circumcenters, clip points,
intersection points) stay in plain floating point.
"""

import math
import sys
from enum import Enum, IntEnum
from fractions import Fraction
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import structlog

from .errors import DegenerateInputError, DegenerateTriangleError, InvalidSiteError

logger = structlog.get_logger()

Point = Tuple[float, float]

# Static filter bounds for double precision, eps = 2**-53
ORIENT_ERROR_BOUND = 3.3306690738754716e-16
INCIRCLE_ERROR_BOUND = 1.1102230246251577e-15


class Orientation(IntEnum):
    """Turn direction of an ordered point triple."""
    RIGHT = -1
    COLLINEAR = 0
    LEFT = 1


class Segment(NamedTuple):
    source: Point
    target: Point


class Ray(NamedTuple):
    origin: Point
    direction: Point


class Line(NamedTuple):
    point: Point
    direction: Point


class BoundingBox(NamedTuple):
    """Axis-aligned rectangle."""
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def contains(self, p: Point) -> bool:
        return self.xmin <= p[0] <= self.xmax and self.ymin <= p[1] <= self.ymax

    def strictly_contains(self, p: Point) -> bool:
        return self.xmin < p[0] < self.xmax and self.ymin < p[1] < self.ymax


class IntersectionKind(Enum):
    """Tag of an intersection result.

    SEGMENT means one segment lies wholly inside the other; OVERLAP means
    the two share a stretch but each sticks out beyond it.
    """
    NONE = "none"
    POINT = "point"
    SEGMENT = "segment"
    OVERLAP = "overlap"


class Intersection(NamedTuple):
    """Tagged intersection result.

    ``point`` is set for POINT results, ``segment`` for SEGMENT and OVERLAP.
    """
    kind: IntersectionKind
    point: Optional[Point] = None
    segment: Optional[Segment] = None


NO_INTERSECTION = Intersection(IntersectionKind.NONE)

Primitive = Union[Segment, Ray, Line]


def _sign(value) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _orientation_exact(a: Point, b: Point, c: Point) -> int:
    ax, ay = Fraction(a[0]), Fraction(a[1])
    bx, by = Fraction(b[0]), Fraction(b[1])
    cx, cy = Fraction(c[0]), Fraction(c[1])
    return _sign((bx - ax) * (cy - ay) - (by - ay) * (cx - ax))


def orientation(a: Point, b: Point, c: Point) -> Orientation:
    """
    Classify the turn a -> b -> c.

    Args:
        a, b, c: Points as (x, y) pairs

    Returns:
        LEFT for a counter-clockwise turn, RIGHT for clockwise,
        COLLINEAR when the three points lie on one line
    """
    left = (b[0] - a[0]) * (c[1] - a[1])
    right = (b[1] - a[1]) * (c[0] - a[0])
    det = left - right
    if abs(det) > ORIENT_ERROR_BOUND * (abs(left) + abs(right)):
        return Orientation(_sign(det))
    return Orientation(_orientation_exact(a, b, c))


def _in_circle_exact(a: Point, b: Point, c: Point, d: Point) -> int:
    dx, dy = Fraction(d[0]), Fraction(d[1])
    adx, ady = Fraction(a[0]) - dx, Fraction(a[1]) - dy
    bdx, bdy = Fraction(b[0]) - dx, Fraction(b[1]) - dy
    cdx, cdy = Fraction(c[0]) - dx, Fraction(c[1]) - dy
    alift = adx * adx + ady * ady
    blift = bdx * bdx + bdy * bdy
    clift = cdx * cdx + cdy * cdy
    det = (alift * (bdx * cdy - cdx * bdy)
           + blift * (cdx * ady - adx * cdy)
           + clift * (adx * bdy - bdx * ady))
    return _sign(det)


def in_circle(a: Point, b: Point, c: Point, d: Point) -> int:
    """
    Position of d relative to the circle through the CCW triangle abc.

    Returns:
        +1 if d is strictly inside, 0 if on the circle, -1 if outside
    """
    adx, ady = a[0] - d[0], a[1] - d[1]
    bdx, bdy = b[0] - d[0], b[1] - d[1]
    cdx, cdy = c[0] - d[0], c[1] - d[1]

    bdxcdy, cdxbdy = bdx * cdy, cdx * bdy
    cdxady, adxcdy = cdx * ady, adx * cdy
    adxbdy, bdxady = adx * bdy, bdx * ady

    alift = adx * adx + ady * ady
    blift = bdx * bdx + bdy * bdy
    clift = cdx * cdx + cdy * cdy

    det = (alift * (bdxcdy - cdxbdy)
           + blift * (cdxady - adxcdy)
           + clift * (adxbdy - bdxady))
    permanent = ((abs(bdxcdy) + abs(cdxbdy)) * alift
                 + (abs(cdxady) + abs(adxcdy)) * blift
                 + (abs(adxbdy) + abs(bdxady)) * clift)
    if abs(det) > INCIRCLE_ERROR_BOUND * permanent:
        return _sign(det)
    return _in_circle_exact(a, b, c, d)


def squared_distance(p: Point, q: Point) -> float:
    dx = p[0] - q[0]
    dy = p[1] - q[1]
    return dx * dx + dy * dy


def circumcenter(a: Point, b: Point, c: Point) -> Point:
    """
    Centre of the circle through three points.

    Raises:
        DegenerateTriangleError: if the points are collinear, or the centre
            cannot be represented in floating point
    """
    if orientation(a, b, c) == Orientation.COLLINEAR:
        logger.error("Circumcenter requested for collinear points", a=a, b=b, c=c)
        raise DegenerateTriangleError(f"collinear triple {a}, {b}, {c}")

    bx, by = b[0] - a[0], b[1] - a[1]
    cx, cy = c[0] - a[0], c[1] - a[1]
    b_len = bx * bx + by * by
    c_len = cx * cx + cy * cy
    d = 2.0 * (bx * cy - by * cx)
    if d == 0.0:
        # Exactly non-collinear, but the determinant underflowed
        logger.error("Circumcenter determinant underflow", a=a, b=b, c=c)
        raise DegenerateTriangleError(f"circumcenter of {a}, {b}, {c} underflows")

    ux = (cy * b_len - by * c_len) / d
    uy = (bx * c_len - cx * b_len) / d
    center = (a[0] + ux, a[1] + uy)
    if not (math.isfinite(center[0]) and math.isfinite(center[1])):
        logger.error("Circumcenter overflow", a=a, b=b, c=c)
        raise DegenerateTriangleError(f"circumcenter of {a}, {b}, {c} overflows")
    return center


def _parametric(primitive: Primitive) -> Tuple[Point, Point, float, float]:
    """Return origin, direction and parameter range of a primitive."""
    if isinstance(primitive, Segment):
        (sx, sy), (tx, ty) = primitive
        return (sx, sy), (tx - sx, ty - sy), 0.0, 1.0
    if isinstance(primitive, Ray):
        return primitive.origin, primitive.direction, 0.0, math.inf
    if isinstance(primitive, Line):
        return primitive.point, primitive.direction, -math.inf, math.inf
    raise TypeError(f"cannot clip {type(primitive).__name__}")


def clip_to_box(primitive: Primitive, box: BoundingBox) -> Optional[Segment]:
    """
    Clip a segment, ray or line against an axis-aligned box.

    Liang-Barsky: the primitive is written as origin + t * direction and
    each of the box's four half-planes narrows the admissible interval
    of t. Whatever survives is the clipped segment.

    Args:
        primitive: Segment, Ray or Line
        box: Clipping rectangle

    Returns:
        The clipped Segment, or None when the primitive misses the box or
        only touches it in a single point
    """
    (ox, oy), (dx, dy), t0, t1 = _parametric(primitive)
    zero_direction = dx == 0 and dy == 0

    for p, q in ((-dx, ox - box.xmin), (dx, box.xmax - ox),
                 (-dy, oy - box.ymin), (dy, box.ymax - oy)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            t0 = max(t0, r)
        else:
            t1 = min(t1, r)
        if t0 > t1:
            return None

    if math.isinf(t0) or math.isinf(t1):
        # rays and lines without a direction
        return None
    if t0 == t1 and not zero_direction:
        return None

    if isinstance(primitive, Segment) and t0 == 0.0:
        start = primitive.source
    elif isinstance(primitive, Ray) and t0 == 0.0:
        start = primitive.origin
    else:
        start = (ox + t0 * dx, oy + t0 * dy)
    if isinstance(primitive, Segment) and t1 == 1.0:
        end = primitive.target
    else:
        end = (ox + t1 * dx, oy + t1 * dy)
    return Segment(start, end)


def _on_segment(p: Point, segment: Segment) -> bool:
    """True if p lies on the closed segment (p assumed collinear with it)."""
    (ax, ay), (bx, by) = segment
    return (min(ax, bx) <= p[0] <= max(ax, bx)
            and min(ay, by) <= p[1] <= max(ay, by))


def _collinear_overlap(s1: Segment, s2: Segment) -> Intersection:
    """Intersect two segments known to lie on one line."""
    (px, py), (qx, qy) = s1
    # Along the dominant axis the coordinate is monotone on the line
    axis = 0 if abs(qx - px) >= abs(qy - py) else 1

    a1, b1 = sorted(s1, key=lambda p: p[axis])
    a2, b2 = sorted(s2, key=lambda p: p[axis])
    start = a1 if a1[axis] >= a2[axis] else a2
    end = b1 if b1[axis] <= b2[axis] else b2

    if start[axis] > end[axis]:
        return NO_INTERSECTION
    if start[axis] == end[axis]:
        return Intersection(IntersectionKind.POINT, point=start)
    if (start, end) in ((a1, b1), (a2, b2)):
        return Intersection(IntersectionKind.SEGMENT, segment=Segment(start, end))
    return Intersection(IntersectionKind.OVERLAP, segment=Segment(start, end))


def segment_intersection(s1: Segment, s2: Segment) -> Intersection:
    """
    Intersect two closed segments.

    Args:
        s1, s2: Segments to intersect

    Returns:
        Intersection tagged NONE, POINT (single crossing or touching
        point), SEGMENT (one collinear segment contained in the other) or
        OVERLAP (collinear segments sharing part of their length)
    """
    p, q = s1
    r, s = s2

    if p == q and r == s:
        if p == r:
            return Intersection(IntersectionKind.POINT, point=p)
        return NO_INTERSECTION
    if p == q:
        if orientation(r, s, p) == Orientation.COLLINEAR and _on_segment(p, s2):
            return Intersection(IntersectionKind.POINT, point=p)
        return NO_INTERSECTION
    if r == s:
        if orientation(p, q, r) == Orientation.COLLINEAR and _on_segment(r, s1):
            return Intersection(IntersectionKind.POINT, point=r)
        return NO_INTERSECTION

    o1 = orientation(p, q, r)
    o2 = orientation(p, q, s)
    if o1 == Orientation.COLLINEAR and o2 == Orientation.COLLINEAR:
        return _collinear_overlap(s1, s2)

    o3 = orientation(r, s, p)
    o4 = orientation(r, s, q)
    if o1 == o2 or o3 == o4:
        return NO_INTERSECTION

    # Touching at an endpoint: report the input coordinate unchanged
    if o1 == Orientation.COLLINEAR:
        return Intersection(IntersectionKind.POINT, point=r)
    if o2 == Orientation.COLLINEAR:
        return Intersection(IntersectionKind.POINT, point=s)
    if o3 == Orientation.COLLINEAR:
        return Intersection(IntersectionKind.POINT, point=p)
    if o4 == Orientation.COLLINEAR:
        return Intersection(IntersectionKind.POINT, point=q)

    dx1, dy1 = q[0] - p[0], q[1] - p[1]
    dx2, dy2 = s[0] - r[0], s[1] - r[1]
    denom = dx1 * dy2 - dy1 * dx2
    t = ((r[0] - p[0]) * dy2 - (r[1] - p[1]) * dx2) / denom
    t = min(max(t, 0.0), 1.0)
    return Intersection(IntersectionKind.POINT, point=(p[0] + t * dx1, p[1] + t * dy1))


def point_in_polygon(p: Point, polygon: Sequence[Point], tolerance: float = 0.0) -> bool:
    """
    Test whether p lies inside or on the boundary of a convex CCW polygon.

    Args:
        p: Query point
        polygon: Convex polygon vertices in counter-clockwise order
        tolerance: Distance outside an edge still counted as on it. Zero
            means the exact orientation predicate decides.

    Returns:
        True if p is inside or on the boundary
    """
    n = len(polygon)
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        if tolerance <= 0.0:
            if orientation(a, b, p) == Orientation.RIGHT:
                return False
            continue
        ex, ey = b[0] - a[0], b[1] - a[1]
        cross = ex * (p[1] - a[1]) - ey * (p[0] - a[0])
        if cross < -tolerance * math.hypot(ex, ey):
            return False
    return True


def bounding_box(points, margin_factor: float = 1.0) -> BoundingBox:
    """
    Axis-aligned box strictly containing all points.

    The box is the points' extent grown on every side by margin_factor
    times the extent's diagonal (or by 1.0 when the points coincide).

    Args:
        points: Array-like of shape (n, 2)
        margin_factor: Relative margin, must be positive

    Returns:
        BoundingBox enclosing the points
    """
    if margin_factor <= 0:
        raise ValueError("margin_factor must be positive")
    coords = np.asarray(points, dtype=float)
    mins = coords.min(axis=0)
    maxs = coords.max(axis=0)
    diagonal = float(np.hypot(*(maxs - mins)))
    margin = margin_factor * diagonal if diagonal > 0 else 1.0
    return BoundingBox(float(mins[0]) - margin, float(mins[1]) - margin,
                       float(maxs[0]) + margin, float(maxs[1]) + margin)


def as_site_list(sites) -> list:
    """
    Convert an array-like of sites into a list of (x, y) float tuples.

    The extent of the sites must leave room for the circumcircle
    arithmetic: its cube has to be a finite, normal double.

    Raises:
        InvalidSiteError: if the input is not a sequence of finite 2D points,
            or its extent is too large or too small to compute with
    """
    try:
        coords = np.asarray(sites, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidSiteError(f"sites are not numeric 2D coordinates: {e}") from e

    if coords.size == 0:
        return []
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidSiteError(f"expected an (n, 2) array of sites, got shape {coords.shape}")
    if not np.all(np.isfinite(coords)):
        raise InvalidSiteError("sites must have finite coordinates")

    with np.errstate(over="ignore"):
        extent = float((coords.max(axis=0) - coords.min(axis=0)).max())
    if extent > 0.0:
        cube = extent * extent * extent
        if not sys.float_info.min <= cube < math.inf:
            raise InvalidSiteError(f"site extent {extent:g} is outside the computable range")
    return [(x, y) for x, y in coords.tolist()]


def find_seed_triangle(points: Sequence[Point]) -> Tuple[int, int, int]:
    """
    Indices of the first non-collinear triple in input order.

    Raises:
        DegenerateInputError: with fewer than three distinct points or
            when all points are collinear
    """
    if not points:
        raise DegenerateInputError("no sites given")

    first = points[0]
    second = next((j for j in range(1, len(points)) if points[j] != first), None)
    if second is None:
        raise DegenerateInputError("fewer than three distinct sites")

    for k in range(second + 1, len(points)):
        if orientation(first, points[second], points[k]) != Orientation.COLLINEAR:
            return 0, second, k

    if len(set(points)) < 3:
        raise DegenerateInputError("fewer than three distinct sites")
    raise DegenerateInputError("all sites are collinear")
