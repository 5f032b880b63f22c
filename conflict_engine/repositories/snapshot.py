"""Immutable in-memory snapshots of projects and moratoria.

Snapshots are built once from a consistent read of the data source (for
example a GeoDataFrame loaded from PostGIS or a GeoJSON export) and can then
be shared by concurrent checks without locking.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

import geopandas as gpd
import pandas as pd

from conflict_engine.config import DEFAULT_CONFLICT_CONFIG, ConflictConfig
from conflict_engine.conflicts.moratoriums import filter_active_in_area
from conflict_engine.models.domain import (
    Moratorium,
    MoratoriumException,
    Project,
    TimeWindow,
)
from conflict_engine.models.geometry import NormalizedGeometry
from conflict_engine.spatial.index import STRtreeSpatialIndex
from conflict_engine.spatial.kernel import expand_bounds
from conflict_engine.spatial.proximity import ProximityEngine
from conflict_engine.spatial.utils import ensure_crs
from conflict_engine.validation.errors import InputValidationError
from conflict_engine.validation.geometry import GeometryValidator

logger = logging.getLogger(__name__)

PROJECT_COLUMNS = ["id", "name", "state", "start_date", "end_date", "work_category", "geometry"]
MORATORIUM_COLUMNS = ["id", "name", "valid_from", "valid_to", "reason", "geometry"]


class ProjectSnapshot:
    """Read-only project set with an STRtree candidate index.

    Only projects in ``config.candidate_states`` are kept. Candidates are
    looked up by the query geometry's bounding box grown by
    ``search_radius_m``, which is taken from this snapshot's own config. A
    service built with a larger ``proximity_threshold_m`` would miss projects
    beyond the snapshot's radius, so ConflictDetectionService warns when the
    radius is the smaller of the two.
    """

    def __init__(
        self, projects: Iterable[Project], config: ConflictConfig = DEFAULT_CONFLICT_CONFIG
    ):
        states = set(config.candidate_states)
        self._projects = tuple(p for p in projects if p.state in states)
        self._by_id = _index_by_id(self._projects, "project")
        self._index = STRtreeSpatialIndex([(p.id, p.geometry) for p in self._projects])
        self.search_radius_m = config.proximity_threshold_m

    def __len__(self) -> int:
        return len(self._projects)

    def find_candidates_near(self, geometry: NormalizedGeometry) -> list[Project]:
        bounds = expand_bounds(geometry.bounds, self.search_radius_m)
        return [self._by_id[project_id] for project_id in self._index.query(bounds)]

    @classmethod
    def from_geodataframe(
        cls,
        gdf: gpd.GeoDataFrame,
        config: ConflictConfig = DEFAULT_CONFLICT_CONFIG,
        validator: GeometryValidator | None = None,
    ) -> "ProjectSnapshot":
        """Build a snapshot from a GeoDataFrame of projects.

        Expects columns: id, name, state, start_date, end_date, work_category,
        geometry; optional work_type.

        Raises:
            ValueError: If required columns are missing or a row is invalid
        """
        return cls(projects_from_geodataframe(gdf, validator), config)


class MoratoriumSnapshot:
    """Read-only moratorium registry with recorded exceptions."""

    def __init__(
        self,
        moratoriums: Iterable[Moratorium],
        exceptions: Iterable[MoratoriumException] = (),
        engine: ProximityEngine | None = None,
    ):
        self._moratoriums = tuple(moratoriums)
        self._by_id = _index_by_id(self._moratoriums, "moratorium")
        self._exceptions = tuple(exceptions)
        self._index = STRtreeSpatialIndex([(m.id, m.geometry) for m in self._moratoriums])
        self.engine = engine or ProximityEngine()

    def __len__(self) -> int:
        return len(self._moratoriums)

    def find_active_in_area(
        self, geometry: NormalizedGeometry, window: TimeWindow
    ) -> list[Moratorium]:
        candidates = [self._by_id[m_id] for m_id in self._index.query(geometry.bounds)]
        return filter_active_in_area(candidates, geometry, window, self.engine)

    def find_exceptions(self, project_id: str) -> list[MoratoriumException]:
        return [e for e in self._exceptions if e.project_id == project_id]

    @classmethod
    def from_geodataframe(
        cls,
        gdf: gpd.GeoDataFrame,
        exceptions: Iterable[MoratoriumException] = (),
        validator: GeometryValidator | None = None,
    ) -> "MoratoriumSnapshot":
        """Build a registry from a GeoDataFrame of moratoria.

        Expects columns: id, name, valid_from, valid_to, reason, geometry;
        optional reason_detail and exceptions.

        Raises:
            ValueError: If required columns are missing or a row is invalid
        """
        return cls(moratoriums_from_geodataframe(gdf, validator), exceptions)


def projects_from_geodataframe(
    gdf: gpd.GeoDataFrame, validator: GeometryValidator | None = None
) -> list[Project]:
    """Convert GeoDataFrame rows into Project models (geometry validated)."""
    gdf = _prepare(gdf, PROJECT_COLUMNS)
    validator = validator or GeometryValidator()

    projects = []
    for _, row in gdf.iterrows():
        projects.append(
            Project(
                id=str(row["id"]),
                name=str(row["name"]),
                geometry=_normalize_row_geometry(validator, row),
                window=TimeWindow(start=_to_date(row["start_date"]), end=_to_date(row["end_date"])),
                state=row["state"],
                work_category=str(row["work_category"]),
                work_type=_optional_str(row.get("work_type")),
            )
        )

    logger.info(f"Loaded {len(projects)} projects into snapshot")
    return projects


def moratoriums_from_geodataframe(
    gdf: gpd.GeoDataFrame, validator: GeometryValidator | None = None
) -> list[Moratorium]:
    """Convert GeoDataFrame rows into Moratorium models (geometry validated)."""
    gdf = _prepare(gdf, MORATORIUM_COLUMNS)
    validator = validator or GeometryValidator()

    moratoriums = []
    for _, row in gdf.iterrows():
        moratoriums.append(
            Moratorium(
                id=str(row["id"]),
                name=str(row["name"]),
                geometry=_normalize_row_geometry(validator, row),
                window=TimeWindow(start=_to_date(row["valid_from"]), end=_to_date(row["valid_to"])),
                reason=str(row["reason"]),
                reason_detail=_optional_str(row.get("reason_detail")),
                exceptions=_optional_str(row.get("exceptions")),
            )
        )

    logger.info(f"Loaded {len(moratoriums)} moratoria into snapshot")
    return moratoriums


def _prepare(gdf: gpd.GeoDataFrame, required: list[str]) -> gpd.GeoDataFrame:
    missing = [col for col in required if col not in gdf.columns]
    if missing:
        msg = f"Missing required columns: {', '.join(missing)}"
        raise ValueError(msg)
    return ensure_crs(gdf)


def _normalize_row_geometry(validator: GeometryValidator, row: pd.Series) -> NormalizedGeometry:
    try:
        return validator.normalize(row.geometry)
    except InputValidationError as e:
        msg = f"Invalid geometry for id {row['id']}: {e}"
        raise ValueError(msg) from e


def _to_date(value: Any) -> date:
    return pd.Timestamp(value).date()


def _optional_str(value: Any) -> str | None:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value)


def _index_by_id(entities: Sequence[Any], kind: str) -> dict[str, Any]:
    by_id: dict[str, Any] = {}
    for entity in entities:
        if entity.id in by_id:
            msg = f"Duplicate {kind} id in snapshot: {entity.id}"
            raise ValueError(msg)
        by_id[entity.id] = entity
    return by_id
