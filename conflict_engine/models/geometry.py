"""Geometry domain models.

Coordinates are (longitude, latitude) pairs in WGS84. A NormalizedGeometry is
only produced by the GeometryValidator; the model re-checks the structural
invariants so that a hand-built instance cannot violate them either.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from conflict_engine.models.enums import GeometryType

Coordinate = tuple[float, float]
Bounds = tuple[float, float, float, float]


class NormalizedGeometry(BaseModel):
    """A validated, de-duplicated geometry.

    Attributes:
        type: Geometry type
        coordinates: Vertices in order. A Point has exactly one; a LineString
            at least two; a Polygon holds its closed exterior ring (first and
            last vertex identical, at least four entries).
        warnings: Advisory messages raised during validation
    """

    model_config = ConfigDict(frozen=True)

    type: GeometryType = Field(description="Geometry type")
    coordinates: tuple[Coordinate, ...] = Field(description="Vertices (lon, lat)")
    warnings: tuple[str, ...] = Field(default=(), description="Validation warnings")

    @model_validator(mode="after")
    def _check_invariants(self) -> "NormalizedGeometry":
        coords = self.coordinates
        if any(not (math.isfinite(c[0]) and math.isfinite(c[1])) for c in coords):
            msg = "Coordinates must be finite"
            raise ValueError(msg)
        if any(coords[i] == coords[i + 1] for i in range(len(coords) - 1)):
            msg = "Consecutive coordinates must differ"
            raise ValueError(msg)

        if self.type == GeometryType.POINT and len(coords) != 1:
            msg = "Point must have exactly one coordinate"
            raise ValueError(msg)
        if self.type == GeometryType.LINESTRING and len(coords) < 2:
            msg = "LineString must have at least two coordinates"
            raise ValueError(msg)
        if self.type == GeometryType.POLYGON:
            if len(coords) < 4:
                msg = "Polygon ring must have at least four coordinates"
                raise ValueError(msg)
            if coords[0] != coords[-1]:
                msg = "Polygon ring must be closed"
                raise ValueError(msg)
        return self

    @property
    def bounds(self) -> Bounds:
        """Bounding box as (min_lon, min_lat, max_lon, max_lat)."""
        lons = [c[0] for c in self.coordinates]
        lats = [c[1] for c in self.coordinates]
        return (min(lons), min(lats), max(lons), max(lats))

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return self.to_geojson()

    def to_shapely(self) -> BaseGeometry:
        """Build the equivalent shapely geometry in degree space."""
        if self.type == GeometryType.POINT:
            return Point(self.coordinates[0])
        if self.type == GeometryType.LINESTRING:
            return LineString(self.coordinates)
        return Polygon(self.coordinates)

    def to_geojson(self) -> dict[str, Any]:
        """Serialize to a GeoJSON geometry mapping."""
        if self.type == GeometryType.POINT:
            coordinates: Any = list(self.coordinates[0])
        elif self.type == GeometryType.LINESTRING:
            coordinates = [list(c) for c in self.coordinates]
        else:
            coordinates = [[list(c) for c in self.coordinates]]
        return {"type": self.type.value, "coordinates": coordinates}
