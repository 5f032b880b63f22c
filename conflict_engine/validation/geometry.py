"""Geometry validation and normalization for submitted project geometries."""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Real
from typing import Any

import shapely

from conflict_engine.config import DEFAULT_VALIDATION_CONFIG, ValidationConfig
from conflict_engine.models.enums import GeometryType
from conflict_engine.models.geometry import Coordinate, NormalizedGeometry
from conflict_engine.spatial.kernel import path_length_m, planar_area_m2
from conflict_engine.validation.errors import InputValidationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of validating one raw geometry."""

    geometry: NormalizedGeometry | None = None
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.geometry is not None


class GeometryValidator:
    """Validates and normalizes raw GeoJSON-like geometries.

    This is the only consumer of raw user geometry. Every geometry the engine
    computes with has passed through here.

    Checks:
    - Supported type (Point, LineString, Polygon)
    - Coordinate arity and finiteness (structural - stops further checks)
    - Point: outside operating area (warning)
    - LineString: consecutive duplicates removed (warning), >= 2 distinct points,
      short length (warning), self-crossing (warning)
    - Polygon: outer ring only, >= 4 points, closed, >= 3 distinct vertices,
      duplicates removed (warning), small area (warning), self-intersection (warning)
    """

    def __init__(self, config: ValidationConfig = DEFAULT_VALIDATION_CONFIG):
        self.config = config

    def validate(self, raw: Any) -> ValidationResult:
        """Validate a raw geometry.

        Args:
            raw: GeoJSON-like mapping with "type" and "coordinates", or any
                object exposing ``__geo_interface__`` (e.g. shapely geometries)

        Returns:
            ValidationResult with the normalized geometry, or errors if invalid
        """
        if hasattr(raw, "__geo_interface__"):
            raw = raw.__geo_interface__

        if not isinstance(raw, Mapping) or not raw.get("type"):
            return _failed("Geometry is not defined", "geometry_missing")

        geometry_type = raw["type"]
        coordinates = raw.get("coordinates")

        if geometry_type == GeometryType.POINT:
            result = self._validate_point(coordinates)
        elif geometry_type == GeometryType.LINESTRING:
            result = self._validate_linestring(coordinates)
        elif geometry_type == GeometryType.POLYGON:
            result = self._validate_polygon(coordinates)
        else:
            return _failed(f"Unsupported geometry type: {geometry_type}", "unsupported_type")

        if result.errors:
            logger.debug(f"{geometry_type} rejected: {[e.message for e in result.errors]}")
        return result

    def normalize(self, raw: Any) -> NormalizedGeometry:
        """Validate a raw geometry and return it normalized.

        Raises:
            InputValidationError: If the geometry is invalid
        """
        result = self.validate(raw)
        if not result.is_valid:
            raise InputValidationError(result.errors)
        return result.geometry

    def _validate_point(self, coordinates: Any) -> ValidationResult:
        if not _is_sequence(coordinates) or len(coordinates) != 2:
            return _failed("Point must have exactly 2 coordinates", "point_arity")

        coord = _parse_coordinate(coordinates)
        if coord is None:
            return _failed("Coordinates must be finite numbers", "coordinate_invalid")

        warnings = []
        min_lon, min_lat, max_lon, max_lat = self.config.operating_bounds
        if not (min_lon <= coord[0] <= max_lon and min_lat <= coord[1] <= max_lat):
            warnings.append("Point lies outside the operating area")

        return _succeeded(GeometryType.POINT, (coord,), warnings)

    def _validate_linestring(self, coordinates: Any) -> ValidationResult:
        if not _is_sequence(coordinates) or len(coordinates) < 2:
            return _failed("LineString must have at least 2 points", "line_too_few_points")

        coords, error = _parse_coordinates(coordinates)
        if error:
            return ValidationResult(errors=[error])

        warnings = []
        simplified = _remove_consecutive_duplicates(coords)
        removed = len(coords) - len(simplified)
        if removed:
            warnings.append(f"Removed {removed} duplicate points")

        if len(simplified) < 2:
            return ValidationResult(
                errors=[
                    ValidationError(
                        message="LineString must have at least 2 distinct points",
                        code="line_too_few_distinct",
                    )
                ],
                warnings=warnings,
            )

        if path_length_m(simplified) < self.config.min_line_length_m:
            warnings.append(
                f"LineString is very short (less than {self.config.min_line_length_m:g} m)"
            )

        if not shapely.LineString(simplified).is_simple:
            warnings.append("LineString crosses itself")

        return _succeeded(GeometryType.LINESTRING, tuple(simplified), warnings)

    def _validate_polygon(self, coordinates: Any) -> ValidationResult:
        if not _is_sequence(coordinates) or len(coordinates) == 0:
            return _failed("Polygon must have at least one ring", "polygon_no_ring")

        warnings = []
        # A bare ring (list of coordinate pairs) is accepted in place of [ring]
        if _is_sequence(coordinates[0]) and len(coordinates[0]) > 0 and _is_number(
            coordinates[0][0]
        ):
            ring = coordinates
        else:
            ring = coordinates[0]
            if len(coordinates) > 1:
                warnings.append(
                    f"Ignored {len(coordinates) - 1} inner ring(s); "
                    "only the outer ring is supported"
                )

        if not _is_sequence(ring) or len(ring) < 4:
            return _failed(
                "Polygon must have at least 4 points (including the closing point)",
                "polygon_too_few_points",
            )

        coords, error = _parse_coordinates(ring)
        if error:
            return ValidationResult(errors=[error])

        errors = []
        closed = coords[0] == coords[-1]
        if not closed:
            errors.append(
                ValidationError(
                    message="Polygon must be closed (first and last point must be identical)",
                    code="polygon_not_closed",
                )
            )

        vertices = _remove_consecutive_duplicates(coords[:-1] if closed else coords)
        while len(vertices) > 1 and vertices[-1] == vertices[0]:
            vertices.pop()

        if len(set(vertices)) < 3:
            errors.append(
                ValidationError(
                    message="Polygon must have at least 3 distinct vertices",
                    code="polygon_too_few_distinct",
                )
            )

        if errors:
            return ValidationResult(errors=errors, warnings=warnings)

        normalized = (*vertices, vertices[0])
        removed = len(coords) - len(normalized)
        if removed:
            warnings.append(f"Removed {removed} duplicate points")

        geometry = NormalizedGeometry(type=GeometryType.POLYGON, coordinates=normalized)
        if planar_area_m2(geometry) < self.config.min_polygon_area_m2:
            warnings.append(
                f"Polygon area is very small (less than {self.config.min_polygon_area_m2:g} m²)"
            )

        polygon = shapely.Polygon(normalized)
        if not polygon.is_valid:
            warnings.append(f"Polygon may intersect itself ({shapely.is_valid_reason(polygon)})")

        return _succeeded(GeometryType.POLYGON, normalized, warnings)


def _failed(message: str, code: str) -> ValidationResult:
    return ValidationResult(errors=[ValidationError(message=message, code=code)])


def _succeeded(
    geometry_type: GeometryType, coordinates: Sequence[Coordinate], warnings: list[str]
) -> ValidationResult:
    geometry = NormalizedGeometry(
        type=geometry_type, coordinates=tuple(coordinates), warnings=tuple(warnings)
    )
    return ValidationResult(geometry=geometry, warnings=list(warnings))


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _parse_coordinate(value: Any) -> Coordinate | None:
    """Return (lon, lat) as floats, or None if not a pair of finite numbers."""
    if not _is_sequence(value) or len(value) != 2:
        return None
    lon, lat = value
    if not (_is_number(lon) and _is_number(lat)):
        return None
    lon, lat = float(lon), float(lat)
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return None
    return (lon, lat)


def _parse_coordinates(values: Sequence[Any]) -> tuple[list[Coordinate], ValidationError | None]:
    """Parse every coordinate, stopping at the first invalid one."""
    coords = []
    for i, value in enumerate(values):
        coord = _parse_coordinate(value)
        if coord is None:
            return [], ValidationError(
                message=f"Invalid coordinate at position {i + 1}", code="coordinate_invalid"
            )
        coords.append(coord)
    return coords, None


def _remove_consecutive_duplicates(coords: Sequence[Coordinate]) -> list[Coordinate]:
    simplified: list[Coordinate] = []
    for coord in coords:
        if not simplified or coord != simplified[-1]:
            simplified.append(coord)
    return simplified
