"""Spatial primitives for conflict detection.

This package provides:
- Geometry kernel (haversine, local projection, planar distance/intersection)
- ProximityEngine: spatial conflict predicate
- SpatialIndex capability and its STRtree implementation
- General utilities (CRS handling for GeoDataFrame inputs)
"""

from conflict_engine.spatial.index import SpatialIndex, STRtreeSpatialIndex
from conflict_engine.spatial.kernel import (
    LocalProjection,
    expand_bounds,
    haversine_m,
    intersects,
    min_distance_m,
    path_length_m,
    planar_area_m2,
)
from conflict_engine.spatial.proximity import ProximityEngine
from conflict_engine.spatial.utils import ensure_crs

__all__ = [
    "ProximityEngine",
    "SpatialIndex",
    "STRtreeSpatialIndex",
    "LocalProjection",
    "haversine_m",
    "path_length_m",
    "planar_area_m2",
    "min_distance_m",
    "intersects",
    "expand_bounds",
    "ensure_crs",
]
