"""Core domain models for excavation conflict detection.

These models represent the entities the engine reads (projects, moratoria,
exception records) and the request/result values it computes with, as
immutable value objects.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

from conflict_engine.models.enums import ProjectState
from conflict_engine.models.geometry import NormalizedGeometry


class TimeWindow(BaseModel):
    """Closed calendar-date interval [start, end].

    Attributes:
        start: First day of the window
        end: Last day of the window (inclusive)
    """

    model_config = ConfigDict(frozen=True)

    start: date = Field(description="First day (inclusive)")
    end: date = Field(description="Last day (inclusive)")

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.start > self.end:
            msg = f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            raise ValueError(msg)
        return self


class Project(BaseModel):
    """An existing excavation project, read-only to the engine.

    Attributes:
        id: Project identifier
        name: Project name
        geometry: Validated project geometry
        window: Planned works period
        state: Lifecycle state
        work_category: Category of work (water, gas, road_infrastructure, ...)
        work_type: Optional finer work type
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Project ID")
    name: str = Field(description="Project name")
    geometry: NormalizedGeometry = Field(description="Validated project geometry")
    window: TimeWindow = Field(description="Planned works period")
    state: ProjectState = Field(description="Lifecycle state")
    work_category: str = Field(description="Category of work")
    work_type: str | None = Field(default=None, description="Type of work")


class Moratorium(BaseModel):
    """A no-dig zone with a validity period.

    Attributes:
        id: Moratorium identifier
        name: Moratorium name
        geometry: Validated restricted area
        window: Validity period (valid_from..valid_to)
        reason: Reason code (e.g., road_reconstruction)
        reason_detail: Free-text explanation
        exceptions: Free-text description of exceptions already granted
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Moratorium ID")
    name: str = Field(description="Moratorium name")
    geometry: NormalizedGeometry = Field(description="Restricted area")
    window: TimeWindow = Field(description="Validity period")
    reason: str = Field(description="Reason code")
    reason_detail: str | None = Field(default=None, description="Reason detail")
    exceptions: str | None = Field(default=None, description="Recorded exceptions text")


class MoratoriumException(BaseModel):
    """A coordinator override allowing one project to proceed despite a moratorium.

    Attributes:
        moratorium_id: Moratorium being overridden
        project_id: Project allowed to proceed
        approver_id: Coordinator who approved the exception
        justification: Reason given for the exception
        expires_on: Last day the exception applies (None = no expiry)
        revoked: True once the exception has been withdrawn
    """

    model_config = ConfigDict(frozen=True)

    moratorium_id: str = Field(description="Moratorium ID")
    project_id: str = Field(description="Project ID")
    approver_id: str = Field(description="Approving coordinator ID")
    justification: str = Field(description="Justification text")
    expires_on: date | None = Field(default=None, description="Expiry date (inclusive)")
    revoked: bool = Field(default=False, description="Exception has been revoked")

    def covers(self, moratorium_id: str, project_id: str | None, window: TimeWindow) -> bool:
        """Return True if this exception exempts ``project_id`` for the whole ``window``."""
        if project_id is None or self.revoked:
            return False
        if self.moratorium_id != moratorium_id or self.project_id != project_id:
            return False
        return self.expires_on is None or self.expires_on >= window.end


class ConflictDetectionRequest(BaseModel):
    """A validated conflict check request.

    Attributes:
        geometry: Validated proposed geometry
        window: Proposed works period
        exclude_project_id: Project to leave out of the candidates (self on update)
        project_id: Requesting project, used to match moratorium exceptions.
            Defaults to ``exclude_project_id`` when not given.
    """

    model_config = ConfigDict(frozen=True)

    geometry: NormalizedGeometry = Field(description="Proposed geometry")
    window: TimeWindow = Field(description="Proposed works period")
    exclude_project_id: str | None = Field(default=None, description="Project to exclude")
    project_id: str | None = Field(default=None, description="Requesting project ID")

    @property
    def requesting_project_id(self) -> str | None:
        return self.project_id or self.exclude_project_id


class ProjectRef(BaseModel):
    """Conflicting project as reported in a result."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    start_date: date
    end_date: date
    work_category: str

    @classmethod
    def from_project(cls, project: Project) -> "ProjectRef":
        return cls(
            id=project.id,
            name=project.name,
            start_date=project.window.start,
            end_date=project.window.end,
            work_category=project.work_category,
        )


class MoratoriumRef(BaseModel):
    """Violated moratorium as reported in a result."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    valid_to: date
    reason: str
    reason_detail: str | None = None
    exceptions: str | None = None

    @classmethod
    def from_moratorium(cls, moratorium: Moratorium) -> "MoratoriumRef":
        return cls(
            id=moratorium.id,
            name=moratorium.name,
            valid_to=moratorium.window.end,
            reason=moratorium.reason,
            reason_detail=moratorium.reason_detail,
            exceptions=moratorium.exceptions,
        )


class ConflictSummary(BaseModel):
    """Conflict counts derived from a result."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_conflicts: int = Field(ge=0)
    critical_conflicts: int = Field(ge=0)
    warnings: int = Field(ge=0)


class ConflictDetectionResult(BaseModel):
    """Outcome of one conflict check.

    Only the three conflict lists are stored; ``has_conflict`` and ``summary``
    are always derived from them.

    Attributes:
        spatial_conflicts: Candidate projects within the proximity threshold
        temporal_conflicts: Spatial conflicts whose windows also overlap
        moratorium_violations: Active, intersecting moratoria with no exception
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    spatial_conflicts: tuple[ProjectRef, ...] = ()
    temporal_conflicts: tuple[ProjectRef, ...] = ()
    moratorium_violations: tuple[MoratoriumRef, ...] = ()

    @model_validator(mode="after")
    def _check_temporal_subset(self) -> "ConflictDetectionResult":
        spatial_ids = {p.id for p in self.spatial_conflicts}
        if any(p.id not in spatial_ids for p in self.temporal_conflicts):
            msg = "Temporal conflicts must be a subset of spatial conflicts"
            raise ValueError(msg)
        return self

    @computed_field(alias="summary")
    @property
    def summary(self) -> ConflictSummary:
        spatial = len(self.spatial_conflicts)
        temporal = len(self.temporal_conflicts)
        moratoria = len(self.moratorium_violations)
        return ConflictSummary(
            total_conflicts=spatial + moratoria,
            critical_conflicts=temporal + moratoria,
            warnings=spatial - temporal,
        )

    @computed_field(alias="hasConflict")
    @property
    def has_conflict(self) -> bool:
        return self.summary.total_conflicts > 0

    def to_dict(self) -> dict:
        """Serialize to the camelCase output contract."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
