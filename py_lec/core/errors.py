"""Exceptions raised by the largest empty circle pipeline."""


class LargestEmptyCircleError(Exception):
    """Base class for all pipeline errors."""


class DegenerateInputError(LargestEmptyCircleError):
    """Fewer than three distinct sites, or all sites are collinear."""


class InvalidSiteError(LargestEmptyCircleError, ValueError):
    """A site is malformed or has a non-finite coordinate."""


class InvalidBoundaryError(LargestEmptyCircleError, ValueError):
    """A caller-supplied boundary polygon is not a proper convex polygon."""


class DegenerateTriangleError(LargestEmptyCircleError):
    """A circumcenter was requested for a collinear triple.

    Never expected once the triangulation is built; seeing it means the
    predicates disagreed with each other somewhere.
    """


class EmptyCandidateSetError(LargestEmptyCircleError):
    """No candidate centre was generated for a valid site set."""
