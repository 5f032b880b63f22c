"""Moratorium activity and exception matching.

A moratorium is violated when it is active during the requested window and
its area actually intersects the requested geometry (nearness is not enough).
Recorded exceptions then remove individual moratoria for the requesting
project.
"""

from collections.abc import Iterable, Sequence

from conflict_engine.conflicts.temporal import overlaps
from conflict_engine.models.domain import Moratorium, MoratoriumException, TimeWindow
from conflict_engine.models.geometry import NormalizedGeometry
from conflict_engine.spatial.proximity import ProximityEngine

_DEFAULT_ENGINE = ProximityEngine()


def filter_active_in_area(
    moratoriums: Iterable[Moratorium],
    geometry: NormalizedGeometry,
    window: TimeWindow,
    engine: ProximityEngine = _DEFAULT_ENGINE,
) -> list[Moratorium]:
    """Keep moratoria whose validity overlaps ``window`` and whose area intersects ``geometry``.

    Order of the input is preserved.
    """
    return [
        m
        for m in moratoriums
        if overlaps(m.window, window) and engine.is_proximal(geometry, m.geometry, 0)
    ]


def remove_exempted(
    moratoriums: Sequence[Moratorium],
    exceptions: Iterable[MoratoriumException],
    project_id: str | None,
    window: TimeWindow,
) -> list[Moratorium]:
    """Drop moratoria covered by a valid exception for ``project_id``.

    Without a project id no exception can apply.
    """
    if project_id is None:
        return list(moratoriums)

    exceptions = list(exceptions)
    return [
        m
        for m in moratoriums
        if not any(e.covers(m.id, project_id, window) for e in exceptions)
    ]
