"""Unit tests for the geometry kernel."""

import math

import pytest

from conflict_engine.models import GeometryType, NormalizedGeometry
from conflict_engine.spatial.kernel import (
    METRES_PER_DEGREE,
    LocalProjection,
    bounds_overlap,
    expand_bounds,
    haversine_m,
    intersects,
    min_distance_m,
    path_length_m,
    planar_area_m2,
)


def _point(lon, lat):
    return NormalizedGeometry(type=GeometryType.POINT, coordinates=((lon, lat),))


def _line(*coords):
    return NormalizedGeometry(type=GeometryType.LINESTRING, coordinates=tuple(coords))


def _square(lon, lat, size):
    ring = ((lon, lat), (lon + size, lat), (lon + size, lat + size), (lon, lat + size), (lon, lat))
    return NormalizedGeometry(type=GeometryType.POLYGON, coordinates=ring)


def test_haversine_one_degree_of_latitude():
    """Test that one degree along a meridian is R * pi / 180."""
    assert haversine_m((0.0, 0.0), (0.0, 1.0)) == pytest.approx(METRES_PER_DEGREE)
    assert METRES_PER_DEGREE == pytest.approx(111_194.93, abs=0.01)


def test_haversine_is_zero_for_identical_points():
    assert haversine_m((14.4378, 50.0755), (14.4378, 50.0755)) == 0.0


def test_haversine_is_symmetric():
    a, b = (14.4378, 50.0755), (16.6068, 49.1951)
    assert haversine_m(a, b) == haversine_m(b, a)


def test_path_length_sums_segments():
    coords = [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0)]
    assert path_length_m(coords) == pytest.approx(2 * METRES_PER_DEGREE)


def test_local_projection_centres_on_mean_coordinate():
    projection = LocalProjection.centred_on([_point(14.0, 50.0), _point(14.2, 50.2)])

    assert projection.lon0 == pytest.approx(14.1)
    assert projection.lat0 == pytest.approx(50.1)


def test_local_projection_requires_coordinates():
    with pytest.raises(ValueError, match="no coordinates"):
        LocalProjection.centred_on([])


def test_planar_area_of_small_square():
    """Test shoelace area in the local projection against the analytic value."""
    square = _square(14.0, 50.0, 0.001)
    lat0 = (50.0 * 3 + 50.001 * 2) / 5
    expected = (0.001 * METRES_PER_DEGREE * math.cos(math.radians(lat0))) * (
        0.001 * METRES_PER_DEGREE
    )

    assert planar_area_m2(square) == pytest.approx(expected, rel=1e-9)


def test_min_distance_point_to_segment_interior():
    """Test that the distance to a segment interior is found, not only to its vertices."""
    segment = _line((14.000, 50.0), (14.002, 50.0))
    point = _point(14.001, 50.0001)

    assert min_distance_m(point, segment) == pytest.approx(0.0001 * METRES_PER_DEGREE, abs=0.01)


def test_min_distance_is_zero_for_crossing_segments():
    a = _line((14.00, 50.00), (14.01, 50.01))
    b = _line((14.00, 50.01), (14.01, 50.00))

    assert min_distance_m(a, b) == 0.0


def test_min_distance_is_zero_for_contained_line():
    """Test ring containment: a line inside a polygon has distance 0."""
    polygon = _square(14.4375, 50.0750, 0.001)
    line = _line((14.4378, 50.0755), (14.4380, 50.0757))

    assert min_distance_m(line, polygon) == 0.0


def test_min_distance_point_pair_uses_haversine():
    a, b = _point(14.4378, 50.0755), _point(14.4378, 50.0756)

    assert min_distance_m(a, b) == haversine_m((14.4378, 50.0755), (14.4378, 50.0756))


def test_intersects_touching_boundaries():
    left = _square(14.0, 50.0, 0.5)
    right = _square(14.5, 50.0, 0.5)

    assert intersects(left, right)


def test_intersects_false_for_disjoint_geometries():
    assert not intersects(_square(14.0, 50.0, 0.01), _square(14.1, 50.0, 0.01))


def test_bounds_overlap():
    assert bounds_overlap((0, 0, 1, 1), (1, 1, 2, 2))
    assert not bounds_overlap((0, 0, 1, 1), (1.1, 0, 2, 1))


def test_expand_bounds_contains_points_within_distance():
    """Test that the expanded box covers a point 20 m away in every direction."""
    bounds = (14.4378, 50.0755, 14.4380, 50.0757)
    expanded = expand_bounds(bounds, 20.0)

    dlat = 20.0 / METRES_PER_DEGREE
    dlon = 20.0 / (METRES_PER_DEGREE * math.cos(math.radians(50.0757)))
    assert expanded[0] <= bounds[0] - dlon
    assert expanded[1] <= bounds[1] - dlat
    assert expanded[2] >= bounds[2] + dlon
    assert expanded[3] >= bounds[3] + dlat


def test_expand_bounds_by_zero_is_identity():
    bounds = (14.0, 50.0, 14.1, 50.1)
    assert expand_bounds(bounds, 0) == bounds
