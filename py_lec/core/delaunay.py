"""
Incremental Delaunay triangulation and its dual Voronoi diagram.

The mesh is an arena: triangles are rows of three vertex indices and three
neighbour triangle indices, where neighbour ``i`` lies across the edge
opposite vertex ``i``. Finite triangles are counter-clockwise. A sentinel
infinite vertex (index ``INFINITE``) closes the convex hull, so every hull
edge has an infinite triangle on its outer side and every finite vertex has
a closed ring of incident triangles. Insertion is split-then-flip (Lawson);
the same flip handles growing the hull when a site lands outside it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple, Union

import structlog

from .geometry import (
    Line, Orientation, Point, Ray, Segment,
    as_site_list, circumcenter, find_seed_triangle, in_circle, orientation,
    squared_distance,
)

logger = structlog.get_logger()

INFINITE = -1


class VoronoiEdgeKind(Enum):
    SEGMENT = "segment"
    RAY = "ray"
    LINE = "line"


@dataclass(frozen=True)
class VoronoiEdge:
    """A Voronoi edge and the pair of sites whose bisector it lies on."""
    kind: VoronoiEdgeKind
    primitive: Union[Segment, Ray, Line]
    sites: Tuple[int, int]


class DelaunayTriangulation:
    """
    Delaunay triangulation of a planar site set.

    Sites keep their input index as identity. Sites with identical
    coordinates share one mesh vertex; queries report the first of them.
    """

    def __init__(self, sites: Sequence[Point]):
        """
        Build the triangulation, inserting sites in input order.

        Args:
            sites: Array-like of (x, y) coordinates

        Raises:
            InvalidSiteError: on malformed or non-finite coordinates
            DegenerateInputError: with fewer than three distinct sites or
                when all sites are collinear
        """
        self.sites: List[Point] = as_site_list(sites)
        seed = find_seed_triangle(self.sites)

        self.site_vertex: List[int] = []
        self._vertex_points: List[Point] = []
        self._vertex_site: List[int] = []
        self._vertex_triangle: List[int] = []
        self._tri_vertices: List[List[int]] = []
        self._tri_neighbors: List[List[int]] = []
        self._last = 0
        self._duplicates = 0

        ordered = self._build_seed(seed)
        vertex_of = dict(zip(ordered, range(3)))
        for index in range(len(self.sites)):
            if index in vertex_of:
                self.site_vertex.append(vertex_of[index])
            else:
                self.site_vertex.append(self._insert_point(self.sites[index], index))

        logger.info("Triangulation built",
                    sites=len(self.sites),
                    vertices=len(self._vertex_points),
                    triangles=self.triangle_count,
                    duplicates=self._duplicates)

    # -- mesh construction -------------------------------------------------

    def _new_vertex(self, point: Point, site: int) -> int:
        self._vertex_points.append(point)
        self._vertex_site.append(site)
        self._vertex_triangle.append(-1)
        return len(self._vertex_points) - 1

    def _new_triangle(self, a: int, b: int, c: int) -> int:
        self._tri_vertices.append([a, b, c])
        self._tri_neighbors.append([-1, -1, -1])
        t = len(self._tri_vertices) - 1
        for v in (a, b, c):
            if v != INFINITE:
                self._vertex_triangle[v] = t
        return t

    def _build_seed(self, seed: Tuple[int, int, int]) -> Tuple[int, int, int]:
        """Create the first triangle and the three infinite triangles around it.

        Returns the seed site indices in counter-clockwise order.
        """
        i, j, k = seed
        if orientation(self.sites[i], self.sites[j], self.sites[k]) == Orientation.RIGHT:
            j, k = k, j
        v0 = self._new_vertex(self.sites[i], i)
        v1 = self._new_vertex(self.sites[j], j)
        v2 = self._new_vertex(self.sites[k], k)

        self._new_triangle(v0, v1, v2)
        self._new_triangle(INFINITE, v2, v1)
        self._new_triangle(INFINITE, v0, v2)
        self._new_triangle(INFINITE, v1, v0)

        # Glue triangles along opposite directed edges
        directed: Dict[Tuple[int, int], Tuple[int, int]] = {}
        for t, verts in enumerate(self._tri_vertices):
            for e in range(3):
                directed[(verts[(e + 1) % 3], verts[(e + 2) % 3])] = (t, e)
        for (a, b), (t, e) in directed.items():
            self._tri_neighbors[t][e] = directed[(b, a)][0]
        self._last = 0
        return i, j, k

    def _is_infinite(self, t: int) -> bool:
        return INFINITE in self._tri_vertices[t]

    def _replace_neighbor(self, t: int, old: int, new: int) -> None:
        if t < 0:
            return
        neighbors = self._tri_neighbors[t]
        for e in range(3):
            if neighbors[e] == old:
                neighbors[e] = new
                return

    def _split(self, t: int, v: int) -> Tuple[int, int, int]:
        """Split triangle t into three around vertex v."""
        a, b, c = self._tri_vertices[t]
        na, nb, nc = self._tri_neighbors[t]

        t1 = self._new_triangle(a, v, c)
        t2 = self._new_triangle(a, b, v)
        self._tri_vertices[t] = [v, b, c]

        self._tri_neighbors[t] = [na, t1, t2]
        self._tri_neighbors[t1] = [t, nb, t2]
        self._tri_neighbors[t2] = [t, t1, nc]
        self._replace_neighbor(nb, t, t1)
        self._replace_neighbor(nc, t, t2)

        for vertex, tri in ((a, t1), (b, t), (c, t), (v, t)):
            if vertex != INFINITE:
                self._vertex_triangle[vertex] = tri
        return t, t1, t2

    def _flip(self, t: int, i: int) -> int:
        """
        Flip the edge opposite vertex i of triangle t.

        With t = (x, a, b) and its neighbour n = (y, b, a), the pair becomes
        t = (x, a, y) and n = (x, y, b). Returns n.
        """
        tv = self._tri_vertices[t]
        x, a, b = tv[i], tv[(i + 1) % 3], tv[(i + 2) % 3]
        n = self._tri_neighbors[t][i]
        j = self._tri_neighbors[n].index(t)
        y = self._tri_vertices[n][j]

        t_bx = self._tri_neighbors[t][(i + 1) % 3]
        t_xa = self._tri_neighbors[t][(i + 2) % 3]
        n_ay = self._tri_neighbors[n][(j + 1) % 3]
        n_yb = self._tri_neighbors[n][(j + 2) % 3]

        self._tri_vertices[t] = [x, a, y]
        self._tri_neighbors[t] = [n_ay, n, t_xa]
        self._tri_vertices[n] = [x, y, b]
        self._tri_neighbors[n] = [n_yb, t_bx, t]
        self._replace_neighbor(n_ay, n, t)
        self._replace_neighbor(t_bx, t, n)

        for vertex, tri in ((x, t), (a, t), (y, t), (b, n)):
            if vertex != INFINITE:
                self._vertex_triangle[vertex] = tri
        return n

    def _conflicts(self, n: int, v: int) -> bool:
        """True if vertex v lies inside the circumcircle of triangle n.

        For an infinite triangle the circumcircle degenerates to the open
        half-plane beyond its hull edge.
        """
        nv = self._tri_vertices[n]
        p = self._vertex_points[v]
        if INFINITE in nv:
            k = nv.index(INFINITE)
            a = self._vertex_points[nv[(k + 1) % 3]]
            b = self._vertex_points[nv[(k + 2) % 3]]
            return orientation(a, b, p) == Orientation.LEFT
        a, b, c = (self._vertex_points[u] for u in nv)
        return in_circle(a, b, c, p) > 0

    def _legalize(self, stack: List[int], v: int) -> None:
        """Flip edges opposite v until every triangle around v is Delaunay."""
        while stack:
            t = stack.pop()
            i = self._tri_vertices[t].index(v)
            n = self._tri_neighbors[t][i]
            if self._conflicts(n, v):
                stack.append(t)
                stack.append(self._flip(t, i))

    # -- point location ----------------------------------------------------

    def _locate(self, p: Point) -> int:
        """
        Visibility walk from the last touched triangle toward p.

        Returns a finite triangle whose closed area contains p, or the
        infinite triangle whose hull edge has p strictly on its outer side.
        """
        t = self._last
        if self._is_infinite(t):
            k = self._tri_vertices[t].index(INFINITE)
            t = self._tri_neighbors[t][k]

        while True:
            tv = self._tri_vertices[t]
            if INFINITE in tv:
                return t
            for e in range(3):
                a = self._vertex_points[tv[(e + 1) % 3]]
                b = self._vertex_points[tv[(e + 2) % 3]]
                if orientation(a, b, p) == Orientation.RIGHT:
                    t = self._tri_neighbors[t][e]
                    break
            else:
                return t

    def _insert_point(self, p: Point, site: int) -> int:
        t = self._locate(p)
        tv = self._tri_vertices[t]

        for u in tv:
            if u != INFINITE and self._vertex_points[u] == p:
                self._duplicates += 1
                return u

        v = self._new_vertex(p, site)
        on_edge = None
        if INFINITE not in tv:
            for e in range(3):
                a = self._vertex_points[tv[(e + 1) % 3]]
                b = self._vertex_points[tv[(e + 2) % 3]]
                if orientation(a, b, p) == Orientation.COLLINEAR:
                    on_edge = e
                    break

        parts = list(self._split(t, v))
        if on_edge is not None:
            # The part facing the split edge has zero area; flipping that
            # edge leaves four proper triangles around v.
            flat = parts[on_edge]
            parts.append(self._flip(flat, self._tri_vertices[flat].index(v)))

        self._legalize(parts, v)
        self._last = self._vertex_triangle[v]
        return v

    def insert(self, site: Point) -> int:
        """
        Insert one more site.

        Args:
            site: (x, y) coordinates

        Returns:
            Index assigned to the new site
        """
        (point,) = as_site_list([site])
        index = len(self.sites)
        self.sites.append(point)
        self.site_vertex.append(self._insert_point(point, index))
        return index

    # -- queries -----------------------------------------------------------

    @property
    def triangle_count(self) -> int:
        return sum(1 for verts in self._tri_vertices if INFINITE not in verts)

    def _vertex_neighbors(self, v: int) -> List[int]:
        """Finite vertices adjacent to v, counter-clockwise around it."""
        start = self._vertex_triangle[v]
        t = start
        neighbors = []
        while True:
            tv = self._tri_vertices[t]
            i = tv.index(v)
            u = tv[(i + 1) % 3]
            if u != INFINITE:
                neighbors.append(u)
            t = self._tri_neighbors[t][(i + 2) % 3]
            if t == start:
                return neighbors

    def nearest_vertex(self, p: Point) -> int:
        """
        Mesh vertex closest to p.

        Jumps to the best of about n^(1/3) evenly spaced vertices, then
        walks greedily along Delaunay edges. A vertex with no strictly
        closer neighbour is a nearest vertex, so the walk is exact for
        any query point, including points outside the hull.
        """
        count = len(self._vertex_points)
        sample = max(1, round(count ** (1.0 / 3.0)))
        step = max(1, count // sample)
        best = min(range(0, count, step),
                   key=lambda u: squared_distance(self._vertex_points[u], p))
        best_dist = squared_distance(self._vertex_points[best], p)

        while True:
            current = best
            for u in self._vertex_neighbors(current):
                d = squared_distance(self._vertex_points[u], p)
                if d < best_dist:
                    best, best_dist = u, d
            if best == current:
                return best

    def nearest_site(self, p: Point) -> int:
        """Index of the input site closest to p."""
        return self._vertex_site[self.nearest_vertex(p)]

    def triangles(self) -> List[Tuple[int, int, int]]:
        """Finite triangles as counter-clockwise triples of site indices."""
        return [tuple(self._vertex_site[u] for u in verts)
                for verts in self._tri_vertices if INFINITE not in verts]

    def edges(self) -> List[Tuple[int, int]]:
        """Delaunay edges as pairs of site indices."""
        result = []
        for t, verts in enumerate(self._tri_vertices):
            if INFINITE in verts:
                continue
            for e in range(3):
                a, b = verts[(e + 1) % 3], verts[(e + 2) % 3]
                n = self._tri_neighbors[t][e]
                if t < n or self._is_infinite(n):
                    result.append((self._vertex_site[a], self._vertex_site[b]))
        return result

    def hull_vertices(self) -> List[int]:
        """Site indices around the hull, counter-clockwise.

        Sites lying on a hull edge are mesh vertices too, so unlike
        ``convex_hull`` this keeps collinear boundary sites.
        """
        successor = {}
        for verts in self._tri_vertices:
            if INFINITE in verts:
                k = verts.index(INFINITE)
                successor[verts[(k + 2) % 3]] = verts[(k + 1) % 3]

        start = min(successor)
        ring = [start]
        v = successor[start]
        while v != start:
            ring.append(v)
            v = successor[v]
        return [self._vertex_site[u] for u in ring]

    def is_delaunay(self) -> bool:
        """Brute-force check of the empty-circumcircle property."""
        for verts in self._tri_vertices:
            if INFINITE in verts:
                continue
            a, b, c = (self._vertex_points[u] for u in verts)
            for u, p in enumerate(self._vertex_points):
                if u not in verts and in_circle(a, b, c, p) > 0:
                    return False
        return True

    def dual_edges(self) -> List[VoronoiEdge]:
        """
        Voronoi edges dual to the Delaunay edges.

        An interior Delaunay edge gives the segment joining the
        circumcenters of its two triangles. A hull edge gives a ray from
        its triangle's circumcenter, perpendicular to the edge and pointing
        away from the hull.
        """
        centers: Dict[int, Point] = {}

        def center(t: int) -> Point:
            if t not in centers:
                a, b, c = (self._vertex_points[u] for u in self._tri_vertices[t])
                centers[t] = circumcenter(a, b, c)
            return centers[t]

        result = []
        for t, verts in enumerate(self._tri_vertices):
            if INFINITE in verts:
                continue
            for e in range(3):
                n = self._tri_neighbors[t][e]
                a, b = verts[(e + 1) % 3], verts[(e + 2) % 3]
                sites = (self._vertex_site[a], self._vertex_site[b])
                if self._is_infinite(n):
                    (ax, ay), (bx, by) = self._vertex_points[a], self._vertex_points[b]
                    ray = Ray(center(t), (by - ay, ax - bx))
                    result.append(VoronoiEdge(VoronoiEdgeKind.RAY, ray, sites))
                elif t < n:
                    segment = Segment(center(t), center(n))
                    result.append(VoronoiEdge(VoronoiEdgeKind.SEGMENT, segment, sites))

        logger.debug("Dual edges computed", edges=len(result), vertices=len(centers))
        return result

    def nearest_site_distance(self, p: Point) -> Tuple[int, float]:
        """Nearest site index and squared distance to it."""
        v = self.nearest_vertex(p)
        return self._vertex_site[v], squared_distance(self._vertex_points[v], p)
