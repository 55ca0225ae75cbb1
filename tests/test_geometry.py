"""Tests for the geometry kernel."""

import math

import numpy as np
import pytest

from py_lec.core.errors import DegenerateInputError, DegenerateTriangleError, InvalidSiteError
from py_lec.core.geometry import (
    BoundingBox, IntersectionKind, Line, Orientation, Ray, Segment,
    as_site_list, bounding_box, circumcenter, clip_to_box, find_seed_triangle,
    in_circle, orientation, point_in_polygon, segment_intersection, squared_distance,
)


class TestOrientation:
    """Test the orientation predicate."""

    def test_basic_turns(self):
        """Test left, right and collinear classification."""
        assert orientation((0, 0), (1, 0), (0, 1)) == Orientation.LEFT
        assert orientation((0, 0), (0, 1), (1, 0)) == Orientation.RIGHT
        assert orientation((0, 0), (1, 1), (2, 2)) == Orientation.COLLINEAR

    def test_nearly_collinear_uses_exact_arithmetic(self):
        """Test triples the float determinant rounds to zero."""
        above = (0.5, 0.5 + 2.0 ** -52)
        below = (0.5, 0.5 - 2.0 ** -54)
        assert orientation(above, (12.0, 12.0), (24.0, 24.0)) == Orientation.LEFT
        assert orientation(below, (12.0, 12.0), (24.0, 24.0)) == Orientation.RIGHT
        assert orientation((0.5, 0.5), (12.0, 12.0), (24.0, 24.0)) == Orientation.COLLINEAR

    def test_small_perturbations_keep_result(self):
        """Test that perturbing a clear turn does not flip it."""
        rng = np.random.default_rng(7)
        base = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        for _ in range(100):
            a, b, c = (base + rng.uniform(-1e-12, 1e-12, size=base.shape)).tolist()
            assert orientation(a, b, c) == Orientation.LEFT

    def test_antisymmetry(self):
        """Test that swapping two points flips the sign."""
        rng = np.random.default_rng(3)
        for a, b, c in rng.uniform(-10, 10, size=(50, 3, 2)).tolist():
            assert orientation(a, b, c) == -orientation(b, a, c)


class TestInCircle:
    """Test the in-circle predicate."""

    def test_positions(self):
        """Test inside, on and outside the unit square's circumcircle."""
        a, b, c = (0.0, 0.0), (1.0, 0.0), (0.0, 1.0)
        assert in_circle(a, b, c, (0.5, 0.5)) == 1
        assert in_circle(a, b, c, (1.0, 1.0)) == 0
        assert in_circle(a, b, c, (2.0, 2.0)) == -1

    def test_cocircular_regular_grid(self):
        """Test that grid squares are detected as exactly cocircular."""
        for x in range(-3, 4):
            for y in range(-3, 4):
                a, b, c, d = (x, y), (x + 1, y), (x + 1, y + 1), (x, y + 1)
                assert in_circle(a, b, c, d) == 0


class TestConstructions:
    """Test circumcenters and distances."""

    def test_circumcenter(self):
        """Test the circumcenter of a known triangle."""
        cx, cy = circumcenter((0.0, 0.0), (4.0, 0.0), (2.0, 3.0))
        assert cx == pytest.approx(2.0)
        assert cy == pytest.approx(5.0 / 6.0)

    def test_circumcenter_equidistant(self):
        """Test that the circumcenter is equidistant from the vertices."""
        a, b, c = (0.3, -1.2), (5.1, 0.7), (-2.2, 4.4)
        center = circumcenter(a, b, c)
        da = squared_distance(center, a)
        assert squared_distance(center, b) == pytest.approx(da)
        assert squared_distance(center, c) == pytest.approx(da)

    def test_circumcenter_collinear(self):
        """Test that collinear points have no circumcenter."""
        with pytest.raises(DegenerateTriangleError):
            circumcenter((0.0, 0.0), (1.0, 1.0), (3.0, 3.0))

    @pytest.mark.parametrize("scale", [1e-300, 1e200])
    def test_circumcenter_out_of_range(self, scale):
        """Test that an unrepresentable centre raises instead of dividing by zero."""
        with pytest.raises(DegenerateTriangleError):
            circumcenter((0.0, 0.0), (scale, 0.0), (0.0, scale))

    def test_squared_distance(self):
        assert squared_distance((0, 0), (3, 4)) == 25


class TestClipToBox:
    """Test parametric clipping against a box."""

    box = BoundingBox(0.0, 0.0, 10.0, 10.0)

    def test_segment_crossing(self):
        """Test a segment crossing the whole box."""
        clipped = clip_to_box(Segment((-5.0, 5.0), (15.0, 5.0)), self.box)
        assert clipped == Segment((0.0, 5.0), (10.0, 5.0))

    def test_segment_inside_unchanged(self):
        """Test that a segment inside the box keeps its exact endpoints."""
        segment = Segment((0.1, 0.2), (9.7, 3.3))
        assert clip_to_box(segment, self.box) == segment

    def test_degenerate_segment(self):
        """Test a zero-length segment inside the box."""
        assert clip_to_box(Segment((2.0, 2.0), (2.0, 2.0)), self.box) == Segment((2.0, 2.0), (2.0, 2.0))
        assert clip_to_box(Segment((20.0, 2.0), (20.0, 2.0)), self.box) is None

    def test_ray(self):
        """Test a ray leaving the box."""
        clipped = clip_to_box(Ray((5.0, 5.0), (1.0, 0.0)), self.box)
        assert clipped == Segment((5.0, 5.0), (10.0, 5.0))

    def test_ray_from_outside(self):
        """Test a ray entering the box from outside."""
        clipped = clip_to_box(Ray((-5.0, 5.0), (1.0, 0.0)), self.box)
        assert clipped == Segment((0.0, 5.0), (10.0, 5.0))

    def test_ray_pointing_away(self):
        """Test a ray that misses the box."""
        assert clip_to_box(Ray((20.0, 5.0), (1.0, 0.0)), self.box) is None

    def test_ray_touching_corner(self):
        """Test that touching the box in one point gives nothing."""
        assert clip_to_box(Ray((-1.0, 1.0), (1.0, -1.0)), self.box) is None

    def test_line(self):
        """Test a vertical line."""
        clipped = clip_to_box(Line((5.0, 5.0), (0.0, 1.0)), self.box)
        assert clipped == Segment((5.0, 0.0), (5.0, 10.0))

    def test_line_outside(self):
        """Test a line that misses the box."""
        assert clip_to_box(Line((-1.0, 0.0), (0.0, 1.0)), self.box) is None

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            clip_to_box(((0.0, 0.0), (1.0, 1.0)), self.box)


class TestSegmentIntersection:
    """Test the tagged segment intersection."""

    def test_crossing(self):
        """Test two crossing diagonals."""
        hit = segment_intersection(Segment((0.0, 0.0), (2.0, 2.0)), Segment((0.0, 2.0), (2.0, 0.0)))
        assert hit.kind is IntersectionKind.POINT
        assert hit.point == pytest.approx((1.0, 1.0))

    def test_disjoint(self):
        """Test parallel and skew segments that do not meet."""
        assert segment_intersection(Segment((0, 0), (1, 0)), Segment((0, 1), (1, 1))).kind is IntersectionKind.NONE
        assert segment_intersection(Segment((0, 0), (1, 0)), Segment((2, -1), (2, 1))).kind is IntersectionKind.NONE

    def test_touching_endpoint(self):
        """Test a T junction returning the exact endpoint."""
        hit = segment_intersection(Segment((0.0, 0.0), (2.0, 0.0)), Segment((1.0, 0.0), (1.0, 1.0)))
        assert hit.kind is IntersectionKind.POINT
        assert hit.point == (1.0, 0.0)

    def test_collinear_overlap(self):
        """Test that collinear overlaps are reported distinctly."""
        hit = segment_intersection(Segment((0.0, 0.0), (2.0, 0.0)), Segment((1.0, 0.0), (3.0, 0.0)))
        assert hit.kind is IntersectionKind.OVERLAP
        assert hit.segment == Segment((1.0, 0.0), (2.0, 0.0))

    def test_collinear_containment(self):
        """Test that a segment inside another is reported as SEGMENT."""
        hit = segment_intersection(Segment((0.0, 0.0), (3.0, 3.0)), Segment((2.0, 2.0), (1.0, 1.0)))
        assert hit.kind is IntersectionKind.SEGMENT
        assert hit.segment == Segment((1.0, 1.0), (2.0, 2.0))

        same = segment_intersection(Segment((0.0, 0.0), (0.0, 1.0)), Segment((0.0, 1.0), (0.0, 0.0)))
        assert same.kind is IntersectionKind.SEGMENT

    def test_collinear_touching(self):
        """Test collinear segments sharing one endpoint."""
        hit = segment_intersection(Segment((0.0, 0.0), (1.0, 0.0)), Segment((1.0, 0.0), (2.0, 0.0)))
        assert hit.kind is IntersectionKind.POINT
        assert hit.point == (1.0, 0.0)

    def test_collinear_disjoint(self):
        hit = segment_intersection(Segment((0.0, 0.0), (1.0, 0.0)), Segment((2.0, 0.0), (3.0, 0.0)))
        assert hit.kind is IntersectionKind.NONE

    def test_degenerate_segment(self):
        """Test a zero-length segment lying on another segment."""
        hit = segment_intersection(Segment((1.0, 1.0), (1.0, 1.0)), Segment((0.0, 0.0), (2.0, 2.0)))
        assert hit.kind is IntersectionKind.POINT
        assert hit.point == (1.0, 1.0)
        miss = segment_intersection(Segment((1.0, 2.0), (1.0, 2.0)), Segment((0.0, 0.0), (2.0, 2.0)))
        assert miss.kind is IntersectionKind.NONE


class TestPointInPolygon:
    """Test boundary-inclusive containment."""

    square = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))

    def test_inside_and_outside(self):
        assert point_in_polygon((0.5, 0.5), self.square)
        assert not point_in_polygon((1.5, 0.5), self.square)

    def test_boundary_included(self):
        """Test that edge and corner points count as inside."""
        assert point_in_polygon((1.0, 0.5), self.square)
        assert point_in_polygon((0.0, 0.0), self.square)

    def test_tolerance(self):
        """Test that a tolerance admits points just outside an edge."""
        p = (1.0 + 1e-12, 0.5)
        assert not point_in_polygon(p, self.square)
        assert point_in_polygon(p, self.square, tolerance=1e-9)


class TestSiteHelpers:
    """Test site validation and the seed triangle search."""

    def test_as_site_list(self):
        sites = as_site_list(np.array([[0, 0], [1, 2]]))
        assert sites == [(0.0, 0.0), (1.0, 2.0)]
        assert all(isinstance(c, float) for p in sites for c in p)

    @pytest.mark.parametrize("bad", [
        [(0.0, math.nan), (1.0, 1.0)],
        [(0.0, math.inf)],
        [(1.0, 2.0, 3.0)],
        ["a", "b"],
        [(0.0, 0.0), (1e-300, 0.0), (0.0, 1e-300)],
        [(0.0, 0.0), (1e200, 0.0), (0.0, 1e200)],
        [(-1e308, 0.0), (1e308, 0.0)],
    ])
    def test_invalid_sites(self, bad):
        with pytest.raises(InvalidSiteError):
            as_site_list(bad)

    def test_seed_triangle_skips_duplicates_and_collinear(self):
        points = [(0.0, 0.0), (0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (0.0, 1.0)]
        assert find_seed_triangle(points) == (0, 2, 4)

    @pytest.mark.parametrize("points", [
        [],
        [(1.0, 1.0)],
        [(1.0, 1.0), (1.0, 1.0), (1.0, 1.0)],
        [(0.0, 0.0), (1.0, 1.0), (0.0, 0.0)],
        [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0)],
    ])
    def test_seed_triangle_degenerate(self, points):
        with pytest.raises(DegenerateInputError):
            find_seed_triangle(points)


def test_bounding_box():
    """Test the margin grows the box by the diagonal on every side."""
    box = bounding_box([(0.0, 0.0), (3.0, 4.0)])
    assert box == BoundingBox(-5.0, -5.0, 8.0, 9.0)
    assert box.strictly_contains((0.0, 0.0))
    assert box.strictly_contains((3.0, 4.0))

    with pytest.raises(ValueError):
        bounding_box([(0.0, 0.0), (1.0, 1.0)], margin_factor=0.0)
