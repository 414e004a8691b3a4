"""
Closest Point Module
====================

Closest point of a single shape to a query location.

Design:
- Shapes are flattened into plain rings (tuples of GeoPoint) first, then
  each ring is scanned; no recursion, groups are guarded against cycles
- Distances measured in pixels at the current zoom
- Closest points computed at the snapping zoom for maximum precision

Tie-breaking (kept for output compatibility with the Leaflet plugin):
- Segments inside one ring: last segment at the minimum distance wins (<=)
- Vertices, rings and group children: first one found wins (<)
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from almostover_geometry.errors import UnsupportedShapeError
from almostover_geometry.primitives import closest_point_on_segment, point_to_segment_distance
from almostover_geometry.projection import Projector, snapping_zoom
from almostover_geometry.shapes import (
    GeoPoint,
    MarkerShape,
    PolylineShape,
    ShapeGroup,
    is_flat,
    is_point_like,
)

logger = logging.getLogger(__name__)

Ring = Tuple[GeoPoint, ...]


@dataclass(frozen=True)
class ClosestResult:
    """
    Closest location on a shape.

    Attributes:
        point: Closest geographic point
        distance: Pixel distance from the query at the current zoom
    """

    point: GeoPoint
    distance: float


def flatten_rings(shape: Any) -> List[Ring]:
    """
    Decompose a shape into flat rings of points, in scan order.

    Polygon rings get their first point appended so the closing segment is
    scanned like any other; the shape itself is left untouched.

    Args:
        shape: ShapeGroup, PolylineShape/PolygonShape, MarkerShape, or a
               flat/nested sequence of points

    Returns:
        List of rings (possibly empty rings)

    Raises:
        UnsupportedShapeError: For shapes that have no points (e.g. circles)
        MalformedShapeError: For sequences holding something other than points
    """
    rings: List[Ring] = []
    visited = set()
    # (node, closed) pairs; reversed pushes keep depth-first child order
    stack: List[Tuple[Any, bool]] = [(shape, False)]

    while stack:
        node, closed = stack.pop()

        if isinstance(node, ShapeGroup):
            if id(node) in visited:
                continue
            visited.add(id(node))
            stack.extend((child, False) for child in reversed(list(node)))
        elif isinstance(node, PolylineShape):
            stack.append((node.latlngs, node.closed))
        elif isinstance(node, MarkerShape):
            rings.append((node.latlng,))
        elif isinstance(node, (tuple, list)) and not is_point_like(node):
            if is_flat(node):
                ring = tuple(GeoPoint.coerce(item) for item in node)
                if closed and ring:
                    ring = ring + (ring[0],)
                rings.append(ring)
            else:
                stack.extend((child, closed) for child in reversed(node))
        else:
            raise UnsupportedShapeError(
                f"Cannot decompose {type(node).__name__} into points"
            )

    return rings


def _closest_vertex(projector: Projector, ring: Ring, latlng: GeoPoint) -> Optional[ClosestResult]:
    if not ring:
        return None

    origin = projector.latlng_to_layer_point(latlng)
    points = np.array(
        [[p.x, p.y] for p in (projector.latlng_to_layer_point(v) for v in ring)],
        dtype=float,
    )
    distances = np.hypot(points[:, 0] - origin.x, points[:, 1] - origin.y)

    # argmin returns the first minimum
    idx = int(np.argmin(distances))
    return ClosestResult(point=ring[idx], distance=float(distances[idx]))


def _closest_on_segments(projector: Projector, ring: Ring, latlng: GeoPoint) -> Optional[ClosestResult]:
    if len(ring) < 2:
        return None

    origin = projector.latlng_to_layer_point(latlng)
    layer_points = [projector.latlng_to_layer_point(v) for v in ring]

    best_idx = -1
    min_distance = float("inf")
    for idx in range(len(ring) - 1):
        distance = point_to_segment_distance(origin, layer_points[idx], layer_points[idx + 1])
        if distance <= min_distance:
            min_distance = distance
            best_idx = idx

    if best_idx < 0:
        return None

    # Locate the point at the deepest zoom, report the current-zoom distance
    zoom = snapping_zoom(projector)
    closest = closest_point_on_segment(
        projector.project(latlng, zoom),
        projector.project(ring[best_idx], zoom),
        projector.project(ring[best_idx + 1], zoom),
    )
    return ClosestResult(point=projector.unproject(closest, zoom), distance=min_distance)


def closest_on_shape(
    projector: Projector,
    shape: Any,
    latlng: GeoPoint,
    vertex_only: bool = False,
) -> Optional[ClosestResult]:
    """
    Closest point of a shape to latlng.

    Args:
        projector: Host projection primitives
        shape: Polyline, polygon, marker, group, or (nested) point sequence
        latlng: Query location
        vertex_only: Restrict candidates to the shape's vertices

    Returns:
        ClosestResult, or None when the shape has too few points
        (fewer than 2 in segment mode, none in vertex mode)

    Raises:
        UnsupportedShapeError: If the shape cannot be decomposed into points
    """
    latlng = GeoPoint.coerce(latlng)
    scan = _closest_vertex if vertex_only else _closest_on_segments

    result: Optional[ClosestResult] = None
    for ring in flatten_rings(shape):
        candidate = scan(projector, ring, latlng)
        if candidate is not None and (result is None or candidate.distance < result.distance):
            result = candidate

    if result is None:
        logger.debug("No candidate on %s (vertex_only=%s)", type(shape).__name__, vertex_only)
    return result
