"""Conflict classification for a single request.

Combines the spatial, temporal and moratorium signals into one
ConflictDetectionResult. Pure computation over caller-supplied snapshots:
the same request, candidates, moratoria and exceptions always yield the same
result.
"""

import logging
from collections.abc import Iterable, Sequence

from conflict_engine.config import DEFAULT_CONFLICT_CONFIG
from conflict_engine.conflicts.moratoriums import filter_active_in_area, remove_exempted
from conflict_engine.conflicts.temporal import overlaps
from conflict_engine.models.domain import (
    ConflictDetectionRequest,
    ConflictDetectionResult,
    Moratorium,
    MoratoriumException,
    MoratoriumRef,
    Project,
    ProjectRef,
)
from conflict_engine.spatial.proximity import ProximityEngine

logger = logging.getLogger(__name__)


class ConflictAggregator:
    """Classifies candidate projects and moratoria against a request.

    Classification:
    - spatial conflict: candidate within the proximity threshold (or intersecting)
    - temporal conflict: spatial conflict whose window also overlaps (critical)
    - moratorium violation: active, intersecting moratorium with no exception (critical)
    - spatial-only conflicts are counted as warnings
    """

    def __init__(
        self,
        proximity_threshold_m: float = DEFAULT_CONFLICT_CONFIG.proximity_threshold_m,
        engine: ProximityEngine | None = None,
    ):
        if proximity_threshold_m < 0:
            msg = f"Proximity threshold must be non-negative, got {proximity_threshold_m}"
            raise ValueError(msg)
        self.proximity_threshold_m = proximity_threshold_m
        self.engine = engine or ProximityEngine()

    def detect(
        self,
        request: ConflictDetectionRequest,
        candidate_projects: Iterable[Project],
        moratoriums: Iterable[Moratorium],
        exceptions: Iterable[MoratoriumException] = (),
    ) -> ConflictDetectionResult:
        """Classify conflicts for ``request``.

        Args:
            request: Validated request (geometry, window, exclusions)
            candidate_projects: Existing projects near the request geometry
            moratoriums: Moratoria to check; inactive or non-intersecting ones are ignored
            exceptions: Exception records for the requesting project

        Returns:
            ConflictDetectionResult with derived summary counts
        """
        candidates = _unique_projects(candidate_projects, request.exclude_project_id)

        spatial = [
            p
            for p in candidates
            if self.engine.is_proximal(request.geometry, p.geometry, self.proximity_threshold_m)
        ]
        temporal = [p for p in spatial if overlaps(request.window, p.window)]

        active = filter_active_in_area(moratoriums, request.geometry, request.window, self.engine)
        violations = remove_exempted(
            active, exceptions, request.requesting_project_id, request.window
        )
        if len(violations) < len(active):
            logger.info(
                f"{len(active) - len(violations)} moratorium violation(s) waived by exception"
            )

        result = ConflictDetectionResult(
            spatial_conflicts=tuple(ProjectRef.from_project(p) for p in spatial),
            temporal_conflicts=tuple(ProjectRef.from_project(p) for p in temporal),
            moratorium_violations=tuple(MoratoriumRef.from_moratorium(m) for m in violations),
        )

        summary = result.summary
        logger.info(
            f"Conflict check: {len(candidates)} candidates, {summary.total_conflicts} conflicts "
            f"({summary.critical_conflicts} critical, {summary.warnings} warnings)"
        )
        return result


def _unique_projects(projects: Iterable[Project], exclude_id: str | None) -> Sequence[Project]:
    """Drop the excluded project and repeated ids, keeping first occurrences in order."""
    seen: set[str] = set()
    unique = []
    for project in projects:
        if project.id == exclude_id or project.id in seen:
            continue
        seen.add(project.id)
        unique.append(project)
    return unique
