"""Conflict detection engine for municipal excavation coordination.

Given a proposed project's geometry and works period, decides whether it
collides in space and time with existing projects and whether it intersects an
active moratorium (no-dig zone), producing a deterministic, classified result.
"""

from conflict_engine.models import (
    ConflictDetectionInput,
    ConflictDetectionRequest,
    ConflictDetectionResult,
    Moratorium,
    MoratoriumException,
    NormalizedGeometry,
    Project,
    ProjectState,
    TimeWindow,
)
from conflict_engine.services import (
    ConflictCheckIncomplete,
    ConflictDetectionService,
    EvaluationFailure,
)
from conflict_engine.validation import GeometryValidator, InputValidationError

__all__ = [
    "ConflictDetectionService",
    "GeometryValidator",
    "ConflictDetectionInput",
    "ConflictDetectionRequest",
    "ConflictDetectionResult",
    "NormalizedGeometry",
    "TimeWindow",
    "Project",
    "ProjectState",
    "Moratorium",
    "MoratoriumException",
    "InputValidationError",
    "EvaluationFailure",
    "ConflictCheckIncomplete",
]
