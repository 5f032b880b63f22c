"""Enumerations shared by the domain models."""

from enum import StrEnum


class GeometryType(StrEnum):
    """Supported GeoJSON geometry types."""

    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"


class ProjectState(StrEnum):
    """Project lifecycle states.

    The lifecycle itself is owned by the project workflow; the engine only
    needs to know which states trigger a check and which existing projects
    count as conflict candidates.
    """

    DRAFT = "draft"
    FORWARD_PLANNING = "forward_planning"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# Transitions into these states run a conflict check before they are accepted
CONFLICT_CHECK_STATES = frozenset({ProjectState.DRAFT, ProjectState.PENDING_APPROVAL})


def requires_conflict_check(state: ProjectState | str) -> bool:
    """Return True if a project moving into ``state`` must be conflict-checked."""
    return ProjectState(state) in CONFLICT_CHECK_STATES
