"""
Geometry Errors
===============

Exception taxonomy for proximity queries.

All errors are local to a single query: callers that run queries on behalf
of a stream of pointer events catch ProximityError and treat the event as a
miss. Empty inputs are NOT errors, they simply produce no result.
"""


class ProximityError(Exception):
    """Base class for every error raised by a proximity query."""
    pass


class DegenerateInputError(ProximityError, ValueError):
    """Raised when a computation needs a non-zero vector and gets none
    (e.g. closest point on a circle queried from its exact center)."""
    pass


class UnsupportedShapeError(ProximityError, TypeError):
    """Raised when a shape cannot be decomposed into points."""
    pass


class MalformedShapeError(ProximityError, ValueError):
    """Raised when shape input is missing coordinates or holds non-finite values."""
    pass
