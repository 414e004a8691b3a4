"""
Planar Primitives
=================

Pure functions over 2D points - NO projection, NO shapes.

Design:
- Clamped projection onto segments (t in [0, 1])
- Degenerate segments (a == b) collapse to point distance
- numpy vectors for the arithmetic, supervision Points at the boundary
"""

import numpy as np
import supervision as sv

from almostover_geometry.errors import DegenerateInputError
from almostover_geometry.shapes import GeoPoint


def _as_vector(point: sv.Point) -> np.ndarray:
    return np.array([point.x, point.y], dtype=float)


def euclidean_distance(p: sv.Point, q: sv.Point) -> float:
    """Straight-line distance between two planar points."""
    return float(np.hypot(p.x - q.x, p.y - q.y))


def _clamped_projection(p: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Project p onto segment a-b, clamped to the endpoints.

    Returns:
        The point of the segment closest to p
    """
    ab = b - a
    length_sq = float(np.dot(ab, ab))
    if length_sq == 0.0:
        return a
    t = float(np.dot(p - a, ab)) / length_sq
    t = min(max(t, 0.0), 1.0)
    return a + t * ab


def point_to_segment_distance(p: sv.Point, a: sv.Point, b: sv.Point) -> float:
    """
    Distance from p to segment a-b.

    Args:
        p: Query point
        a: Segment start
        b: Segment end

    Returns:
        Perpendicular distance when the projection of p falls inside [a, b],
        distance to the nearest endpoint otherwise. For a == b this is the
        distance from p to a.
    """
    pv = _as_vector(p)
    closest = _clamped_projection(pv, _as_vector(a), _as_vector(b))
    return float(np.linalg.norm(pv - closest))


def closest_point_on_segment(p: sv.Point, a: sv.Point, b: sv.Point) -> sv.Point:
    """Point of segment a-b closest to p (same clamped projection)."""
    closest = _clamped_projection(_as_vector(p), _as_vector(a), _as_vector(b))
    return sv.Point(x=float(closest[0]), y=float(closest[1]))


def closest_point_on_circle(center: GeoPoint, radius: float, latlng: GeoPoint) -> GeoPoint:
    """
    Point of a circle's circumference closest to latlng.

    Works in coordinate space: the vector from the center to latlng
    (lng as x, lat as y) is normalized and scaled by the radius.

    Raises:
        DegenerateInputError: If latlng is the center (no direction to normalize)
    """
    dx = latlng.lng - center.lng
    dy = latlng.lat - center.lat
    length = float(np.hypot(dx, dy))
    if length == 0.0:
        raise DegenerateInputError(
            f"Closest point on circle is undefined at its center ({center.lat}, {center.lng})"
        )
    return GeoPoint(
        lat=center.lat + (dy / length) * radius,
        lng=center.lng + (dx / length) * radius,
    )
