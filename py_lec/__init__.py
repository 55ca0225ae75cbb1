"""Largest empty circle of a planar site set."""

from .core import (
    Circle, DegenerateInputError, DelaunayTriangulation, LargestEmptyCircleError,
    LargestEmptyCircleResult, convex_hull, largest_empty_circle,
)

__version__ = "0.1.0"

__all__ = ['Circle', 'DegenerateInputError', 'DelaunayTriangulation', 'LargestEmptyCircleError',
           'LargestEmptyCircleResult', 'convex_hull', 'largest_empty_circle']
