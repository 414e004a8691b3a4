"""
Geometry Layer
==============

Bounded Context: Pure proximity geometry for map shapes.

Responsibilities:
- Shape representation (GeoPoint, circles, markers, paths, groups)
- Planar distances (point-segment, point-circle)
- Closest point on a shape, closest shape in a collection, snapping
- NO state, NO events, NO throttling

Design Philosophy:
- Pure functions where possible
- Projection delegated to the host (Projector protocol)
- Fail-fast validation of coordinates
- Empty input is a miss, not an error
"""

from almostover_geometry.errors import (
    ProximityError,
    DegenerateInputError,
    UnsupportedShapeError,
    MalformedShapeError,
)
from almostover_geometry.shapes import (
    GeoPoint,
    CircleShape,
    MarkerShape,
    PolylineShape,
    PolygonShape,
    ShapeGroup,
    expand_leaves,
)
from almostover_geometry.primitives import (
    euclidean_distance,
    point_to_segment_distance,
    closest_point_on_segment,
    closest_point_on_circle,
)
from almostover_geometry.projection import Projector, snapping_zoom, pixel_distance
from almostover_geometry.closest import ClosestResult, closest_on_shape, flatten_rings
from almostover_geometry.snap import SnapResult, closest_in_collection, snap_to_shapes

__all__ = [
    # Errors
    "ProximityError",
    "DegenerateInputError",
    "UnsupportedShapeError",
    "MalformedShapeError",
    # Shapes
    "GeoPoint",
    "CircleShape",
    "MarkerShape",
    "PolylineShape",
    "PolygonShape",
    "ShapeGroup",
    "expand_leaves",
    # Primitives
    "euclidean_distance",
    "point_to_segment_distance",
    "closest_point_on_segment",
    "closest_point_on_circle",
    # Projection
    "Projector",
    "snapping_zoom",
    "pixel_distance",
    # Search
    "ClosestResult",
    "closest_on_shape",
    "flatten_rings",
    "SnapResult",
    "closest_in_collection",
    "snap_to_shapes",
]
