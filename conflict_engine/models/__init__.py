"""Domain models for excavation conflict detection."""

from conflict_engine.models.domain import (
    ConflictDetectionRequest,
    ConflictDetectionResult,
    ConflictSummary,
    Moratorium,
    MoratoriumException,
    MoratoriumRef,
    Project,
    ProjectRef,
    TimeWindow,
)
from conflict_engine.models.enums import GeometryType, ProjectState, requires_conflict_check
from conflict_engine.models.geometry import NormalizedGeometry
from conflict_engine.models.request import ConflictDetectionInput

__all__ = [
    "GeometryType",
    "ProjectState",
    "requires_conflict_check",
    "NormalizedGeometry",
    "TimeWindow",
    "Project",
    "Moratorium",
    "MoratoriumException",
    "ConflictDetectionInput",
    "ConflictDetectionRequest",
    "ConflictDetectionResult",
    "ConflictSummary",
    "ProjectRef",
    "MoratoriumRef",
]
