"""
Projection Boundary
===================

Bounded Context: geographic <-> planar conversion, owned by the host map.

The geometry layer never projects on its own; it talks to whatever the host
provides through the Projector protocol. Distances produced here are in
pixels at the host's current zoom.
"""

import math
from typing import Protocol

import supervision as sv

from almostover_geometry.shapes import GeoPoint
from almostover_geometry.primitives import euclidean_distance


class Projector(Protocol):
    """Protocol for the host's projection primitives (interface)."""

    def latlng_to_layer_point(self, latlng: GeoPoint) -> sv.Point:
        """Project to pixel coordinates at the current zoom."""
        ...

    def project(self, latlng: GeoPoint, zoom: float) -> sv.Point:
        """Project to pixel coordinates at an explicit zoom."""
        ...

    def unproject(self, point: sv.Point, zoom: float) -> GeoPoint:
        """Inverse of project() at the same zoom."""
        ...

    def get_zoom(self) -> float:
        ...

    def get_max_zoom(self) -> float:
        """Maximum zoom; math.inf when the map is unbounded."""
        ...


def snapping_zoom(projector: Projector) -> float:
    """
    Zoom at which closest points are computed.

    The deepest zoom gives the finest planar resolution. Falls back to the
    current zoom when the host reports no bound.
    """
    max_zoom = projector.get_max_zoom()
    if max_zoom is None or math.isinf(max_zoom):
        return projector.get_zoom()
    return max_zoom


def pixel_distance(projector: Projector, a: GeoPoint, b: GeoPoint) -> float:
    """Planar distance in pixels between two geographic points at the current zoom."""
    return euclidean_distance(
        projector.latlng_to_layer_point(a),
        projector.latlng_to_layer_point(b),
    )
