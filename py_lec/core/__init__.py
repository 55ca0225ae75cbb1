"""
Core largest empty circle geometry.
"""

from .errors import (
    LargestEmptyCircleError, DegenerateInputError, InvalidSiteError,
    InvalidBoundaryError, DegenerateTriangleError, EmptyCandidateSetError,
)
from .geometry import BoundingBox, Orientation, Segment, Ray, Line, IntersectionKind, Intersection
from .delaunay import DelaunayTriangulation, VoronoiEdge, VoronoiEdgeKind
from .clipping import clip_voronoi_edges
from .hull import convex_hull, convex_boundary, hull_edges
from .candidates import generate_candidates
from .solver import Circle, LargestEmptyCircleResult, find_largest_circle, largest_empty_circle

__all__ = ['LargestEmptyCircleError', 'DegenerateInputError', 'InvalidSiteError',
           'InvalidBoundaryError', 'DegenerateTriangleError', 'EmptyCandidateSetError',
           'BoundingBox', 'Orientation', 'Segment', 'Ray', 'Line', 'IntersectionKind', 'Intersection',
           'DelaunayTriangulation', 'VoronoiEdge', 'VoronoiEdgeKind',
           'clip_voronoi_edges', 'convex_hull', 'convex_boundary', 'hull_edges',
           'generate_candidates', 'Circle', 'LargestEmptyCircleResult',
           'find_largest_circle', 'largest_empty_circle']
