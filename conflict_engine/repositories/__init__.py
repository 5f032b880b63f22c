"""Read-only data sources consumed by the conflict detection service."""

from conflict_engine.repositories.protocols import MoratoriumRegistry, ProjectSource
from conflict_engine.repositories.snapshot import (
    MoratoriumSnapshot,
    ProjectSnapshot,
    moratoriums_from_geodataframe,
    projects_from_geodataframe,
)

__all__ = [
    "ProjectSource",
    "MoratoriumRegistry",
    "ProjectSnapshot",
    "MoratoriumSnapshot",
    "projects_from_geodataframe",
    "moratoriums_from_geodataframe",
]
