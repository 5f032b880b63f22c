"""Collaborator protocols consumed by the conflict detection service.

Both collaborators are read-only. Implementations are responsible for giving
each check a consistent snapshot (e.g. one read transaction or an immutable
copy); the engine never writes through them.
"""

from collections.abc import Sequence
from typing import Protocol

from conflict_engine.models.domain import Moratorium, MoratoriumException, Project, TimeWindow
from conflict_engine.models.geometry import NormalizedGeometry


class ProjectSource(Protocol):
    """Project lookup capability."""

    def find_candidates_near(self, geometry: NormalizedGeometry) -> Sequence[Project]:
        """Return existing projects that may conflict with ``geometry``.

        Implementations should pre-filter with a spatial index; exact
        proximity is decided by the engine.
        """
        ...


class MoratoriumRegistry(Protocol):
    """Read-only view of moratoria and their recorded exceptions."""

    def find_active_in_area(
        self, geometry: NormalizedGeometry, window: TimeWindow
    ) -> Sequence[Moratorium]:
        """Return moratoria active during ``window`` whose area intersects ``geometry``."""
        ...

    def find_exceptions(self, project_id: str) -> Sequence[MoratoriumException]:
        """Return exception records granted to ``project_id``."""
        ...
