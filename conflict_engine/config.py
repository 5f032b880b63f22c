"""Configuration and constants for the excavation conflict engine.

This module defines the business rules and tunable thresholds used when
validating project geometries and classifying conflicts.

Includes configuration for:
- Geometry validation (ValidationConfig with GEOM_ prefix)
- Conflict detection (ConflictConfig with CONFLICT_ prefix)

Configuration can be overridden via:
1. Environment variables (e.g., CONFLICT_PROXIMITY_THRESHOLD_M=50, GEOM_MIN_LINE_LENGTH_M=5)
2. .env file in the current directory
3. Default values in code
"""

from dataclasses import dataclass

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from conflict_engine.models.enums import ProjectState


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical and geodetic constants used in distance and area calculations.

    These are NOT configurable - they are fixed conversion factors and the
    coordinate reference system all inputs are assumed to be in.

    All attributes are immutable (frozen=True prevents modification).
    """

    # Geographic coordinate reference system (longitude/latitude)
    CRS_WGS84: str = "EPSG:4326"

    # Mean Earth radius used by haversine and the local equirectangular projection
    EARTH_RADIUS_M: float = 6_371_000.0


# Module-level singleton for physical constants
CONSTANTS = PhysicalConstants()


class ValidationConfig(BaseSettings):
    """Configuration for geometry validation warnings.

    Can be overridden via environment variables with GEOM_ prefix:
    - GEOM_MIN_LON, GEOM_MIN_LAT, GEOM_MAX_LON, GEOM_MAX_LAT
    - GEOM_MIN_LINE_LENGTH_M
    - GEOM_MIN_POLYGON_AREA_M2

    Attributes:
        min_lon: Western edge of the operating area (degrees)
        min_lat: Southern edge of the operating area (degrees)
        max_lon: Eastern edge of the operating area (degrees)
        max_lat: Northern edge of the operating area (degrees)
        min_line_length_m: Lines shorter than this produce a warning
        min_polygon_area_m2: Polygons smaller than this produce a warning
    """

    model_config = SettingsConfigDict(
        env_prefix="GEOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Default operating area is the Czech Republic (approximate)
    min_lon: float = Field(default=12.0, ge=-180, le=180, description="Operating area west edge")
    min_lat: float = Field(default=48.5, ge=-90, le=90, description="Operating area south edge")
    max_lon: float = Field(default=18.9, ge=-180, le=180, description="Operating area east edge")
    max_lat: float = Field(default=51.1, ge=-90, le=90, description="Operating area north edge")

    min_line_length_m: float = Field(
        default=10.0, ge=0, description="Minimum line length before warning (metres)"
    )
    min_polygon_area_m2: float = Field(
        default=100.0, ge=0, description="Minimum polygon area before warning (square metres)"
    )

    @model_validator(mode="after")
    def _check_bounds_order(self) -> "ValidationConfig":
        if self.min_lon > self.max_lon or self.min_lat > self.max_lat:
            msg = "Operating bounding box minimums must not exceed maximums"
            raise ValueError(msg)
        return self

    @property
    def operating_bounds(self) -> tuple[float, float, float, float]:
        """Operating area as (min_lon, min_lat, max_lon, max_lat)."""
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)


DEFAULT_VALIDATION_CONFIG = ValidationConfig()


class ConflictConfig(BaseSettings):
    """Configuration for spatial/temporal conflict detection.

    Can be overridden via environment variables with CONFLICT_ prefix:
    - CONFLICT_PROXIMITY_THRESHOLD_M
    - CONFLICT_FETCH_TIMEOUT_SECONDS
    - CONFLICT_CANDIDATE_STATES (JSON list, e.g. '["approved", "in_progress"]')
    - CONFLICT_MAX_BATCH_WORKERS

    Attributes:
        proximity_threshold_m: Projects closer than this are spatial conflicts
        fetch_timeout_seconds: Deadline for fetching candidates, moratoria and exceptions
        candidate_states: Lifecycle states of existing projects that can conflict
        max_batch_workers: Concurrent checks when running batch detection
    """

    model_config = SettingsConfigDict(
        env_prefix="CONFLICT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    proximity_threshold_m: float = Field(
        default=20.0, ge=0, description="Spatial conflict distance threshold (metres)"
    )
    fetch_timeout_seconds: float = Field(
        default=1.0, gt=0, description="Deadline for the candidate fetch step (seconds)"
    )
    candidate_states: tuple[ProjectState, ...] = Field(
        default=(
            ProjectState.APPROVED,
            ProjectState.IN_PROGRESS,
            ProjectState.PENDING_APPROVAL,
        ),
        description="States of existing projects considered as conflict candidates",
    )
    max_batch_workers: int = Field(
        default=3, ge=1, le=32, description="Concurrent checks in batch detection"
    )

    @field_validator("candidate_states")
    @classmethod
    def must_not_be_empty(cls, v: tuple[ProjectState, ...]) -> tuple[ProjectState, ...]:
        if not v:
            msg = "At least one candidate state is required"
            raise ValueError(msg)
        return v


DEFAULT_CONFLICT_CONFIG = ConflictConfig()
