"""Geometry kernel for short-distance calculations on WGS84 coordinates.

This module provides the low-level primitives used by validation and
proximity testing:
- Great-circle (haversine) distances between coordinates
- A local equirectangular projection to planar metres
- Planar minimum distance and intersection via shapely (GEOS)
- Bounding box expansion by a distance in metres

The planar approximation is accurate for distances up to a few kilometres,
which covers every threshold the engine works with.
"""

import math
from collections.abc import Iterable, Sequence

import numpy as np
import shapely
from shapely.geometry.base import BaseGeometry

from conflict_engine.config import CONSTANTS
from conflict_engine.models.geometry import Bounds, Coordinate, NormalizedGeometry

METRES_PER_DEGREE = math.pi * CONSTANTS.EARTH_RADIUS_M / 180.0


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Compute great-circle distance in metres between two (lon, lat) coordinates."""
    lon1, lat1 = math.radians(a[0]), math.radians(a[1])
    lon2, lat2 = math.radians(b[0]), math.radians(b[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * CONSTANTS.EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, h)))


def path_length_m(coordinates: Sequence[Coordinate]) -> float:
    """Sum haversine distances over consecutive coordinate pairs."""
    return sum(haversine_m(coordinates[i - 1], coordinates[i]) for i in range(1, len(coordinates)))


class LocalProjection:
    """Equirectangular projection centred on (lon0, lat0), in metres.

    x = R * (lon - lon0) * cos(lat0), y = R * (lat - lat0), angles in radians.
    """

    def __init__(self, lon0: float, lat0: float):
        self.lon0 = lon0
        self.lat0 = lat0
        self._x_scale = METRES_PER_DEGREE * math.cos(math.radians(lat0))

    @classmethod
    def centred_on(cls, geometries: Iterable[NormalizedGeometry]) -> "LocalProjection":
        """Centre the projection on the mean coordinate of all given geometries."""
        coords = [c for geometry in geometries for c in geometry.coordinates]
        if not coords:
            msg = "Cannot centre a projection on no coordinates"
            raise ValueError(msg)
        lon0 = sum(c[0] for c in coords) / len(coords)
        lat0 = sum(c[1] for c in coords) / len(coords)
        return cls(lon0, lat0)

    def _transform(self, coords: np.ndarray) -> np.ndarray:
        x = (coords[:, 0] - self.lon0) * self._x_scale
        y = (coords[:, 1] - self.lat0) * METRES_PER_DEGREE
        return np.column_stack([x, y])

    def project(self, geometry: NormalizedGeometry) -> BaseGeometry:
        """Return the geometry as a shapely object in local planar metres."""
        return shapely.transform(geometry.to_shapely(), self._transform)


def planar_area_m2(geometry: NormalizedGeometry) -> float:
    """Area in square metres of a polygon, via the shoelace formula in local metres."""
    projection = LocalProjection.centred_on([geometry])
    return projection.project(geometry).area


def min_distance_m(a: NormalizedGeometry, b: NormalizedGeometry) -> float:
    """Minimum distance in metres between two geometries (0 if they intersect).

    Covers point-point, point-segment, segment-segment and polygon containment.
    Point/Point pairs use the haversine distance directly.
    """
    if len(a.coordinates) == 1 and len(b.coordinates) == 1:
        return haversine_m(a.coordinates[0], b.coordinates[0])

    projection = LocalProjection.centred_on([a, b])
    pa = projection.project(a)
    pb = projection.project(b)
    if pa.intersects(pb):
        return 0.0
    return pa.distance(pb)


def intersects(a: NormalizedGeometry, b: NormalizedGeometry) -> bool:
    """Return True if the two geometries share at least one point."""
    if not bounds_overlap(a.bounds, b.bounds):
        return False
    # Intersection is invariant under the per-axis linear projection, so degree space is enough
    return a.to_shapely().intersects(b.to_shapely())


def bounds_overlap(a: Bounds, b: Bounds) -> bool:
    """Return True if two (min_lon, min_lat, max_lon, max_lat) boxes overlap or touch."""
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]


def expand_bounds(bounds: Bounds, distance_m: float) -> Bounds:
    """Grow a bounding box by ``distance_m`` metres on every side.

    The longitude margin uses the latitude furthest from the equator so the
    expanded box always contains every point within ``distance_m``.
    """
    if distance_m <= 0:
        return bounds
    min_lon, min_lat, max_lon, max_lat = bounds
    dlat = distance_m / METRES_PER_DEGREE
    widest_lat = min(89.0, max(abs(min_lat), abs(max_lat)) + dlat)
    dlon = distance_m / (METRES_PER_DEGREE * math.cos(math.radians(widest_lat)))
    return (min_lon - dlon, min_lat - dlat, max_lon + dlon, max_lat + dlat)
