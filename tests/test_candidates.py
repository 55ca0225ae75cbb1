"""Tests for Voronoi clipping and candidate generation."""

import pytest

from py_lec.core.candidates import _near_region, deduplicate, generate_candidates
from py_lec.core.clipping import clip_voronoi_edges
from py_lec.core.delaunay import DelaunayTriangulation, VoronoiEdge, VoronoiEdgeKind
from py_lec.core.geometry import BoundingBox, Ray, Segment, bounding_box, point_in_polygon
from py_lec.core.hull import convex_hull

SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
REGION = ((0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0))


class TestDeduplicate:
    """Test tolerance-based merging of candidate points."""

    def test_exact(self):
        points = [(0.0, 0.0), (1e-12, 0.0), (1.0, 1.0), (0.0, 0.0)]
        assert deduplicate(points, 0.0) == [(0.0, 0.0), (1e-12, 0.0), (1.0, 1.0)]

    def test_within_tolerance(self):
        points = [(0.0, 0.0), (1e-12, 0.0), (1.0, 1.0), (0.0, 0.0)]
        assert deduplicate(points, 1e-9) == [(0.0, 0.0), (1.0, 1.0)]

    def test_first_occurrence_wins(self):
        """Test that a merged point does not absorb points further along."""
        points = [(0.0, 0.0), (0.6e-9, 0.0), (1.2e-9, 0.0)]
        assert deduplicate(points, 1e-9) == [(0.0, 0.0), (1.2e-9, 0.0)]

    def test_empty(self):
        assert deduplicate([], 1e-9) == []


class TestClipVoronoiEdges:
    """Test clipping Voronoi edges to a box."""

    def test_drops_edges_outside(self):
        box = BoundingBox(-1.0, -1.0, 1.0, 1.0)
        edges = [
            VoronoiEdge(VoronoiEdgeKind.SEGMENT, Segment((5.0, 5.0), (6.0, 6.0)), (0, 1)),
            VoronoiEdge(VoronoiEdgeKind.SEGMENT, Segment((-0.5, 0.0), (0.5, 0.0)), (1, 2)),
            VoronoiEdge(VoronoiEdgeKind.RAY, Ray((0.0, 0.0), (0.0, 1.0)), (2, 3)),
        ]
        assert clip_voronoi_edges(edges, box) == [
            Segment((-0.5, 0.0), (0.5, 0.0)),
            Segment((0.0, 0.0), (0.0, 1.0)),
        ]

    def test_rays_end_on_box(self):
        """Test that every clipped ray is finite and stays in the box."""
        tri = DelaunayTriangulation(SQUARE)
        box = bounding_box(SQUARE)
        clipped = clip_voronoi_edges(tri.dual_edges(), box)
        assert len(clipped) == 5
        slack = BoundingBox(box.xmin - 1e-12, box.ymin - 1e-12, box.xmax + 1e-12, box.ymax + 1e-12)
        for segment in clipped:
            for p in segment:
                assert slack.contains(p)


class TestGenerateCandidates:
    """Test the candidate centre set."""

    def test_vertex_and_crossing(self):
        """Test a Voronoi vertex inside the region and a boundary crossing."""
        edges = [Segment((1.0, 1.0), (1.0, -3.0)), Segment((5.0, 5.0), (6.0, 6.0))]
        assert generate_candidates(edges, REGION) == [(1.0, 1.0), (1.0, 0.0)]

    def test_corners_appended(self):
        edges = [Segment((1.0, 1.0), (1.0, -3.0))]
        candidates = generate_candidates(edges, REGION, corners=REGION)
        assert candidates == [(1.0, 1.0), (1.0, 0.0)] + list(REGION)

    def test_overlap_ignored(self):
        """Test an edge running along the boundary contributes only its crossings."""
        edges = [Segment((-1.0, 0.0), (3.0, 0.0))]
        assert generate_candidates(edges, REGION) == [(2.0, 0.0), (0.0, 0.0)]

    def test_unit_square(self):
        """Test the centre and the four edge midpoints of the unit square."""
        tri = DelaunayTriangulation(SQUARE)
        box = bounding_box(SQUARE)
        region = convex_hull(SQUARE)
        edges = clip_voronoi_edges(tri.dual_edges(), box)
        candidates = generate_candidates(edges, region, tolerance=1e-9)

        assert len(candidates) == 5
        assert candidates[0] == pytest.approx((0.5, 0.5))
        midpoints = sorted(candidates[1:])
        expected = [(0.0, 0.5), (0.5, 0.0), (0.5, 1.0), (1.0, 0.5)]
        for got, want in zip(midpoints, expected):
            assert got == pytest.approx(want)
        assert all(point_in_polygon(p, region, tolerance=1e-9) for p in candidates)

    def test_far_edges_do_not_change_result(self):
        edges = [Segment((1.0, 1.0), (1.0, -3.0))]
        far = [Segment((10.0 + i, 10.0), (11.0 + i, 12.0)) for i in range(50)]
        assert generate_candidates(far + edges + far, REGION) == generate_candidates(edges, REGION)

    def test_edge_touching_region_corner(self):
        edges = [Segment((2.0, 2.0), (3.0, 5.0)), Segment((2.5, 2.5), (4.0, 4.0))]
        assert generate_candidates(edges, REGION) == [(2.0, 2.0)]


def test_near_region_is_inclusive():
    """Test that only edges whose box misses the region's box are dropped."""
    edges = [
        Segment((2.0, 2.0), (3.0, 5.0)),
        Segment((-1.0, 1.0), (0.0, 1.0)),
        Segment((2.5, -1.0), (4.0, 3.0)),
        Segment((-5.0, -5.0), (-4.0, 5.0)),
        Segment((-1.0, 3.0), (3.0, 3.0)),
        Segment((1.0, 1.0), (1.0, -3.0)),
    ]
    assert _near_region(edges, REGION) == [edges[0], edges[1], edges[5]]
    assert _near_region([], REGION) == []
