"""
Snap Module
===========

Stateless search over a collection of shapes.

Design:
- Static dispatch per shape kind (circle / marker / path)
- A degenerate circle drops out of the candidates, it does not fail the query
- Pure: same inputs, same result (the registry lives elsewhere)
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from almostover_geometry.closest import closest_on_shape
from almostover_geometry.errors import DegenerateInputError
from almostover_geometry.primitives import closest_point_on_circle
from almostover_geometry.projection import Projector, pixel_distance
from almostover_geometry.shapes import CircleShape, GeoPoint, MarkerShape, PolylineShape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapResult:
    """
    Closest shape to a query location.

    Attributes:
        shape: The winning shape (identity matters, not value)
        point: Snapped geographic point on that shape
        distance: Pixel distance from the query at the current zoom
    """

    shape: Any
    point: GeoPoint
    distance: float


def closest_in_collection(
    projector: Projector,
    shapes: Iterable[Any],
    latlng: GeoPoint,
) -> Optional[SnapResult]:
    """
    Globally closest shape among leaf shapes.

    Groups are expected to be expanded by the caller. The first shape found
    wins exact ties.

    Args:
        projector: Host projection primitives
        shapes: Leaf shapes
        latlng: Query location

    Returns:
        SnapResult, or None for an empty collection / no candidate

    Raises:
        UnsupportedShapeError: If a shape cannot be decomposed into points
    """
    latlng = GeoPoint.coerce(latlng)
    result: Optional[SnapResult] = None

    for shape in shapes:
        if isinstance(shape, CircleShape):
            try:
                point = closest_point_on_circle(shape.center, shape.radius, latlng)
            except DegenerateInputError as e:
                logger.debug("Skipping circle candidate: %s", e)
                continue
            distance = pixel_distance(projector, latlng, point)
        elif isinstance(shape, MarkerShape):
            point = shape.latlng
            distance = pixel_distance(projector, latlng, point)
        else:
            closest = closest_on_shape(projector, shape, latlng)
            if closest is None:
                continue
            point, distance = closest.point, closest.distance

        if result is None or distance < result.distance:
            result = SnapResult(shape=shape, point=point, distance=distance)

    return result


def snap_to_shapes(
    projector: Projector,
    shapes: Iterable[Any],
    latlng: GeoPoint,
    tolerance: float = float("inf"),
    with_vertices: bool = True,
) -> Optional[SnapResult]:
    """
    Snap a location onto the closest shape within a pixel tolerance.

    With with_vertices, a vertex of the winning path is preferred over a
    mid-segment point when that vertex is itself within tolerance of the
    snapped point; the reported distance is then measured from the original
    query location.

    Args:
        projector: Host projection primitives
        shapes: Leaf shapes
        latlng: Query location
        tolerance: Maximum pixel distance
        with_vertices: Refine path results onto vertices

    Returns:
        SnapResult, or None when nothing lies within tolerance
    """
    latlng = GeoPoint.coerce(latlng)
    result = closest_in_collection(projector, shapes, latlng)
    if result is None or result.distance > tolerance:
        return None

    if with_vertices and isinstance(result.shape, PolylineShape):
        vertex = closest_on_shape(projector, result.shape, result.point, vertex_only=True)
        if vertex is not None and vertex.distance < tolerance:
            return SnapResult(
                shape=result.shape,
                point=vertex.point,
                distance=pixel_distance(projector, vertex.point, latlng),
            )

    return result
