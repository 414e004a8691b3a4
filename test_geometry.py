"""
Test Proximity Geometry
=======================

Planar primitives, closest point on shapes, collection search and snapping,
measured through the flat PlanarMap host (x = lng, y = lat at zoom 0).

Usage:
    pytest test_geometry.py
"""

import math

import pytest
import supervision as sv

from almostover_geometry import (
    CircleShape,
    DegenerateInputError,
    GeoPoint,
    MalformedShapeError,
    MarkerShape,
    PolygonShape,
    PolylineShape,
    ShapeGroup,
    UnsupportedShapeError,
    closest_in_collection,
    closest_on_shape,
    closest_point_on_circle,
    closest_point_on_segment,
    euclidean_distance,
    expand_leaves,
    point_to_segment_distance,
    snap_to_shapes,
    snapping_zoom,
)
from almostover_handler import PlanarMap


def xy(x, y):
    """Geographic point from flat (x, y) coordinates."""
    return GeoPoint(lat=y, lng=x)


def path(*points):
    return [xy(x, y) for x, y in points]


SQUARE = path((0, 0), (10, 0), (10, 10), (0, 10))


# ---------- Primitives ----------

def test_degenerate_segment_distance_is_point_distance():
    """a == b collapses to the distance from p to a."""
    a = sv.Point(x=3, y=4)
    for p in (sv.Point(x=0, y=0), sv.Point(x=3, y=4), sv.Point(x=-7.5, y=12)):
        assert point_to_segment_distance(p, a, a) == pytest.approx(euclidean_distance(p, a))


def test_segment_distance_perpendicular_and_clamped():
    a, b = sv.Point(x=0, y=0), sv.Point(x=10, y=0)
    assert point_to_segment_distance(sv.Point(x=5, y=3), a, b) == pytest.approx(3)
    # beyond b: distance to the endpoint, not to the infinite line
    assert point_to_segment_distance(sv.Point(x=13, y=4), a, b) == pytest.approx(5)
    assert point_to_segment_distance(sv.Point(x=-3, y=-4), a, b) == pytest.approx(5)


def test_closest_point_on_segment_clamps():
    a, b = sv.Point(x=0, y=0), sv.Point(x=10, y=0)
    inside = closest_point_on_segment(sv.Point(x=4, y=-2), a, b)
    assert (inside.x, inside.y) == pytest.approx((4, 0))
    outside = closest_point_on_segment(sv.Point(x=20, y=5), a, b)
    assert (outside.x, outside.y) == pytest.approx((10, 0))


def test_closest_point_on_circle():
    point = closest_point_on_circle(xy(0, 0), 5, xy(10, 0))
    assert (point.lng, point.lat) == pytest.approx((5, 0))
    inside = closest_point_on_circle(xy(1, 1), 2, xy(1, 2))
    assert (inside.lng, inside.lat) == pytest.approx((1, 3))


def test_closest_point_on_circle_center_is_degenerate():
    with pytest.raises(DegenerateInputError):
        closest_point_on_circle(xy(2, 2), 1, xy(2, 2))


# ---------- Shapes ----------

def test_geopoint_fails_fast_on_bad_coordinates():
    with pytest.raises(MalformedShapeError):
        GeoPoint(lat=None, lng=1)
    with pytest.raises(MalformedShapeError):
        GeoPoint(lat=float("nan"), lng=1)
    with pytest.raises(MalformedShapeError):
        GeoPoint.coerce({"lat": 1})
    with pytest.raises(MalformedShapeError):
        PolylineShape([(0, 0), (1, "east")])


def test_geopoint_coerce_forms():
    assert GeoPoint.coerce((1, 2)) == GeoPoint(lat=1, lng=2)
    assert GeoPoint.coerce({"lat": 1, "lng": 2}) == GeoPoint(lat=1, lng=2)


def test_circle_radius_validated():
    with pytest.raises(MalformedShapeError):
        CircleShape(center=xy(0, 0), radius=0)


def test_shapes_compare_by_identity():
    a = MarkerShape(xy(1, 1))
    b = MarkerShape(xy(1, 1))
    assert a != b
    assert a == a


def test_expand_leaves_keeps_child_order():
    a, b, c, d = (MarkerShape(xy(i, i)) for i in range(4))
    group = ShapeGroup([a, ShapeGroup([b, ShapeGroup([c])]), d])
    assert expand_leaves(group) == [a, b, c, d]
    group.remove_shape(d)
    assert expand_leaves(group) == [a, b, c]
    assert expand_leaves(a) == [a]


def test_expand_leaves_survives_cycles_and_depth():
    leaf = MarkerShape(xy(0, 0))
    group = ShapeGroup([leaf])
    group.add_shape(group)
    assert expand_leaves(group) == [leaf]

    deep = ShapeGroup([leaf])
    for _ in range(5000):
        deep = ShapeGroup([deep])
    assert expand_leaves(deep) == [leaf]


# ---------- Closest on shape ----------

def test_line_scenario():
    """Line (0,0)-(10,0) queried at (5,1): point (5,0), distance 1."""
    host = PlanarMap()
    line = PolylineShape(path((0, 0), (10, 0)))

    result = closest_on_shape(host, line, xy(5, 1))
    assert result.distance == pytest.approx(1)
    assert (result.point.lng, result.point.lat) == pytest.approx((5, 0))

    snapped = snap_to_shapes(host, [line], xy(5, 1), tolerance=2, with_vertices=False)
    assert snapped.shape is line
    assert snapped.distance == pytest.approx(1)
    assert (snapped.point.lng, snapped.point.lat) == pytest.approx((5, 0))


def test_polygon_scenario():
    """Square queried at (10.5, 5) with tolerance 1: point (10,5), distance 0.5."""
    host = PlanarMap()
    square = PolygonShape(SQUARE)

    for with_vertices in (False, True):
        result = snap_to_shapes(host, [square], xy(10.5, 5), tolerance=1, with_vertices=with_vertices)
        assert result.distance == pytest.approx(0.5)
        assert (result.point.lng, result.point.lat) == pytest.approx((10, 5))


def test_polygon_closing_segment_is_scanned():
    host = PlanarMap()
    square = PolygonShape(SQUARE)

    result = closest_on_shape(host, square, xy(0.5, 5))
    assert result.distance == pytest.approx(0.5)
    # on the edge (0,10)-(0,0)
    assert result.point.lng == pytest.approx(0)
    assert 0 <= result.point.lat <= 10

    # the same points as an open line miss that edge
    open_line = PolylineShape(SQUARE)
    assert closest_on_shape(host, open_line, xy(0.5, 5)).distance == pytest.approx(5)
    assert len(square.latlngs) == 4


def test_closest_point_lies_on_edge():
    host = PlanarMap()
    square = PolygonShape(SQUARE)
    for query in (xy(3, -0.7), xy(10.2, 7.5), xy(6, 10.9), xy(-0.1, 2)):
        result = closest_on_shape(host, square, query)
        assert result.distance <= 1
        x, y = result.point.lng, result.point.lat
        on_horizontal = min(abs(y), abs(y - 10)) < 1e-9 and -1e-9 <= x <= 10 + 1e-9
        on_vertical = min(abs(x), abs(x - 10)) < 1e-9 and -1e-9 <= y <= 10 + 1e-9
        assert on_horizontal or on_vertical


def test_equal_segments_resolve_to_last():
    host = PlanarMap()
    # (5,1) is 1 away from the first and the last segment
    line = PolylineShape(path((0, 0), (10, 0), (10, 2), (0, 2)))
    result = closest_on_shape(host, line, xy(5, 1))
    assert result.distance == pytest.approx(1)
    assert (result.point.lng, result.point.lat) == pytest.approx((5, 2))


def test_equal_vertices_resolve_to_first():
    host = PlanarMap()
    line = PolylineShape(path((4, 0), (6, 0)))
    result = closest_on_shape(host, line, xy(5, 0), vertex_only=True)
    assert result.point == xy(4, 0)
    assert result.distance == pytest.approx(1)


def test_equal_group_children_resolve_to_first():
    host = PlanarMap()
    below = PolylineShape(path((0, 0), (10, 0)))
    above = PolylineShape(path((0, 2), (10, 2)))
    result = closest_on_shape(host, ShapeGroup([below, above]), xy(5, 1))
    assert result.point.lat == pytest.approx(0)


def test_nested_rings():
    host = PlanarMap()
    multi = PolylineShape([path((0, 0), (0, 10)), path((5, 0), (5, 10))])
    result = closest_on_shape(host, multi, xy(4, 5))
    assert result.distance == pytest.approx(1)
    assert (result.point.lng, result.point.lat) == pytest.approx((5, 5))


def test_polygon_with_hole_closes_each_ring():
    host = PlanarMap()
    hole = path((4, 4), (6, 4), (6, 6), (4, 6))
    donut = PolygonShape([SQUARE, hole])
    # near the hole's closing edge (4,6)-(4,4)
    result = closest_on_shape(host, donut, xy(4.25, 5))
    assert result.distance == pytest.approx(0.25)
    assert (result.point.lng, result.point.lat) == pytest.approx((4, 5))


def test_raw_point_sequences():
    host = PlanarMap()
    result = closest_on_shape(host, [(0, 0), (0, 10)], xy(5, 1))
    assert result.distance == pytest.approx(1)


def test_too_few_points():
    host = PlanarMap()
    single = PolylineShape([xy(1, 1)])
    assert closest_on_shape(host, single, xy(0, 0)) is None
    assert closest_on_shape(host, single, xy(0, 0), vertex_only=True).point == xy(1, 1)
    assert closest_on_shape(host, PolylineShape([]), xy(0, 0), vertex_only=True) is None


def test_unsupported_shapes():
    host = PlanarMap()
    with pytest.raises(UnsupportedShapeError):
        closest_on_shape(host, CircleShape(center=xy(0, 0), radius=1), xy(5, 5))
    with pytest.raises(UnsupportedShapeError):
        closest_on_shape(host, object(), xy(5, 5))


def test_self_referential_group_terminates():
    host = PlanarMap()
    group = ShapeGroup([PolylineShape(path((0, 0), (10, 0)))])
    group.add_shape(group)
    assert closest_on_shape(host, group, xy(5, 1)).distance == pytest.approx(1)


def test_distances_follow_zoom():
    host = PlanarMap(zoom=1)
    line = PolylineShape(path((0, 0), (10, 0)))
    result = closest_on_shape(host, line, xy(5, 1))
    assert result.distance == pytest.approx(2)
    assert (result.point.lng, result.point.lat) == pytest.approx((5, 0))


# ---------- Collection & snap ----------

def test_empty_collection_is_a_miss():
    host = PlanarMap()
    assert closest_in_collection(host, [], xy(0, 0)) is None
    assert snap_to_shapes(host, [], xy(0, 0)) is None


def test_circle_and_marker_candidates():
    host = PlanarMap()
    circle = CircleShape(center=xy(0, 0), radius=2)
    marker = MarkerShape(xy(20, 0))

    result = closest_in_collection(host, [marker, circle], xy(5, 0))
    assert result.shape is circle
    assert result.distance == pytest.approx(3)
    assert (result.point.lng, result.point.lat) == pytest.approx((2, 0))

    result = closest_in_collection(host, [circle, marker], xy(19, 0))
    assert result.shape is marker
    assert result.distance == pytest.approx(1)


def test_circle_centered_on_query_is_skipped():
    host = PlanarMap()
    circle = CircleShape(center=xy(0, 0), radius=1)
    marker = MarkerShape(xy(0, 3))

    result = closest_in_collection(host, [circle, marker], xy(0, 0))
    assert result.shape is marker
    assert result.distance == pytest.approx(3)
    assert closest_in_collection(host, [circle], xy(0, 0)) is None


def test_collection_ties_resolve_to_first():
    host = PlanarMap()
    left, right = MarkerShape(xy(-1, 0)), MarkerShape(xy(1, 0))
    assert closest_in_collection(host, [left, right], xy(0, 0)).shape is left
    assert closest_in_collection(host, [right, left], xy(0, 0)).shape is right


def test_snap_tolerance_cutoff():
    host = PlanarMap()
    line = PolylineShape(path((0, 0), (10, 0)))
    assert snap_to_shapes(host, [line], xy(5, 3), tolerance=2) is None
    assert snap_to_shapes(host, [line], xy(5, 2), tolerance=2, with_vertices=False).distance == pytest.approx(2)


def test_snap_prefers_vertex_within_tolerance():
    host = PlanarMap()
    line = PolylineShape(path((0, 0), (10, 0)))

    result = snap_to_shapes(host, [line], xy(1, 1), tolerance=3, with_vertices=True)
    assert result.point == xy(0, 0)
    assert result.distance == pytest.approx(math.sqrt(2))

    # far from any vertex: segment point kept
    result = snap_to_shapes(host, [line], xy(5, 1), tolerance=2, with_vertices=True)
    assert (result.point.lng, result.point.lat) == pytest.approx((5, 0))
    assert result.distance == pytest.approx(1)


def test_snap_is_idempotent():
    host = PlanarMap()
    shapes = [
        PolygonShape(SQUARE),
        CircleShape(center=xy(30, 0), radius=4),
        MarkerShape(xy(15, 15)),
    ]
    first = snap_to_shapes(host, shapes, xy(12, 11), tolerance=10)
    second = snap_to_shapes(host, shapes, xy(12, 11), tolerance=10)
    assert first == second
    assert first is not None


# ---------- Projection ----------

def test_project_unproject_round_trip():
    host = PlanarMap(zoom=3, max_zoom=18)
    for latlng in (xy(0, 0), xy(-122.4194, 37.7749), xy(2.3522, 48.8566), xy(1e-9, -1e-9)):
        for zoom in (0, 3, 7.5, 18):
            back = host.unproject(host.project(latlng, zoom), zoom)
            assert back.lat == pytest.approx(latlng.lat, abs=1e-12)
            assert back.lng == pytest.approx(latlng.lng, abs=1e-12)


def test_snapping_zoom_falls_back_to_current_zoom():
    assert snapping_zoom(PlanarMap(zoom=4)) == 4
    assert snapping_zoom(PlanarMap(zoom=4, max_zoom=18)) == 18
