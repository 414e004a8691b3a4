"""
Geometric Shapes Module
========================

Map shapes as plain value holders - NO projection, NO state machine.

Design:
- GeoPoint is a value object (frozen, compared by value)
- Leaf shapes are frozen but compared by IDENTITY (eq=False): two circles
  with the same center are still two different shapes on the map
- ShapeGroup is the only mutable shape; iterating it yields direct children
- Fail-fast validation: malformed coordinates never reach distance math
"""

import math
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence, Tuple

from almostover_geometry.errors import MalformedShapeError


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable geographic coordinate.

    Attributes:
        lat: Latitude (or local y in flat coordinate systems)
        lng: Longitude (or local x in flat coordinate systems)
    """

    lat: float
    lng: float

    def __post_init__(self):
        """Validate coordinates are finite numbers."""
        for name in ("lat", "lng"):
            value = getattr(self, name)
            if value is None:
                raise MalformedShapeError(f"GeoPoint {name} is missing")
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise MalformedShapeError(f"GeoPoint {name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise MalformedShapeError(f"GeoPoint {name} must be finite, got {value}")
            object.__setattr__(self, name, value)

    @classmethod
    def coerce(cls, value: Any) -> "GeoPoint":
        """
        Build a GeoPoint from the loose forms hosts hand around.

        Accepts a GeoPoint, a (lat, lng) pair, or a mapping with
        'lat'/'lng' keys.

        Raises:
            MalformedShapeError: If the value has no usable coordinates
        """
        if isinstance(value, GeoPoint):
            return value
        if isinstance(value, dict):
            try:
                return cls(lat=value["lat"], lng=value["lng"])
            except KeyError as e:
                raise MalformedShapeError(f"Missing coordinate {e} in {value!r}")
        if _is_number_pair(value):
            return cls(lat=value[0], lng=value[1])
        raise MalformedShapeError(f"Cannot interpret {value!r} as a geographic point")

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dict."""
        return {"lat": self.lat, "lng": self.lng}


def _is_number_pair(value: Any) -> bool:
    return (
        isinstance(value, (tuple, list))
        and len(value) == 2
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    )


# Nested coordinate structure: a flat ring is a tuple of GeoPoint, a
# multi-ring shape is a tuple of such rings (nesting may go deeper).
LatLngs = Tuple[Any, ...]


def normalize_latlngs(latlngs: Sequence[Any]) -> LatLngs:
    """
    Normalize a flat or nested point sequence into nested tuples of GeoPoint.

    Raises:
        MalformedShapeError: If a leaf cannot be read as a point
    """
    if isinstance(latlngs, (str, bytes)) or not isinstance(latlngs, Sequence):
        raise MalformedShapeError(f"latlngs must be a sequence, got {type(latlngs).__name__}")

    normalized = []
    for item in latlngs:
        if is_point_like(item):
            normalized.append(GeoPoint.coerce(item))
        else:
            normalized.append(normalize_latlngs(item))
    return tuple(normalized)


def is_point_like(value: Any) -> bool:
    """True for anything GeoPoint.coerce understands."""
    return isinstance(value, (GeoPoint, dict)) or _is_number_pair(value)


def is_flat(latlngs: Sequence[Any]) -> bool:
    """True if the sequence holds points; False if it holds nested rings."""
    return len(latlngs) == 0 or is_point_like(latlngs[0])


@dataclass(frozen=True, eq=False)
class CircleShape:
    """
    Circle defined by a center and a radius.

    The radius is expressed in the same units as the coordinates; the
    closest-point computation works in coordinate space.
    """

    center: GeoPoint
    radius: float

    def __post_init__(self):
        object.__setattr__(self, "center", GeoPoint.coerce(self.center))
        try:
            radius = float(self.radius)
        except (TypeError, ValueError):
            raise MalformedShapeError(f"Circle radius must be a number, got {self.radius!r}")
        if not math.isfinite(radius) or radius <= 0:
            raise MalformedShapeError(f"Circle radius must be finite and > 0, got {self.radius}")
        object.__setattr__(self, "radius", radius)

    @property
    def shape_type(self) -> str:
        return "circle"


@dataclass(frozen=True, eq=False)
class MarkerShape:
    """Single-location shape (marker, circle marker)."""

    latlng: GeoPoint

    def __post_init__(self):
        object.__setattr__(self, "latlng", GeoPoint.coerce(self.latlng))

    @property
    def shape_type(self) -> str:
        return "marker"


@dataclass(frozen=True, eq=False)
class PolylineShape:
    """
    Open path, optionally split into several sub-lines.

    Attributes:
        latlngs: Flat sequence of points or nested sequences of points
    """

    latlngs: LatLngs

    def __post_init__(self):
        object.__setattr__(self, "latlngs", normalize_latlngs(self.latlngs))

    @property
    def shape_type(self) -> str:
        return "polyline"

    @property
    def closed(self) -> bool:
        """Whether each flat ring connects its last point back to its first."""
        return False


@dataclass(frozen=True, eq=False)
class PolygonShape(PolylineShape):
    """
    Polygon: every flat ring is implicitly closed.

    The closing point is never stored; the closing segment is synthesized
    at query time.
    """

    @property
    def shape_type(self) -> str:
        return "polygon"

    @property
    def closed(self) -> bool:
        return True


class ShapeGroup:
    """
    Mutable ordered container of shapes and sub-groups.

    Iterating a group yields its direct children only. Groups may contain
    other groups; expand_leaves() flattens them safely even when a group
    accidentally contains itself.
    """

    def __init__(self, children: Sequence[Any] = ()):
        self._children: List[Any] = list(children)

    def add_shape(self, shape: Any) -> None:
        self._children.append(shape)

    def remove_shape(self, shape: Any) -> None:
        for idx, child in enumerate(self._children):
            if child is shape:
                del self._children[idx]
                return

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._children))

    def __len__(self) -> int:
        return len(self._children)

    def __repr__(self) -> str:
        return f"ShapeGroup(children={len(self._children)})"

    @property
    def shape_type(self) -> str:
        return "group"


def expand_leaves(shape: Any) -> List[Any]:
    """
    Expand a shape into its leaf shapes, depth-first in child order.

    Explicit work-list guarded by an identity visited-set: deep nesting does
    not grow the stack and self-referential groups terminate.

    Args:
        shape: A leaf shape or a ShapeGroup

    Returns:
        Leaf shapes (a leaf reachable twice is listed twice)
    """
    leaves: List[Any] = []
    visited = set()
    stack = [shape]
    while stack:
        current = stack.pop()
        if isinstance(current, ShapeGroup):
            if id(current) in visited:
                continue
            visited.add(id(current))
            stack.extend(reversed(list(current)))
        else:
            leaves.append(current)
    return leaves
