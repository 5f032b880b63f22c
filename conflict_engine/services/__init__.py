"""Conflict detection service and its failure types."""

from conflict_engine.services.conflict_detection import (
    UNVERIFIED_DISCLAIMER,
    BatchDetectionReport,
    ConflictCheckOutcome,
    ConflictDetectionService,
    ConflictStatistics,
)
from conflict_engine.services.errors import ConflictCheckIncomplete, EvaluationFailure

__all__ = [
    "ConflictDetectionService",
    "ConflictCheckOutcome",
    "BatchDetectionReport",
    "ConflictStatistics",
    "UNVERIFIED_DISCLAIMER",
    "EvaluationFailure",
    "ConflictCheckIncomplete",
]
