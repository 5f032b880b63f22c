"""Temporal overlap between date windows."""

from conflict_engine.models.domain import TimeWindow


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    """Return True if two closed date intervals share at least one day.

    Touching windows (``a.end == b.start``) overlap.
    """
    return a.start <= b.end and b.start <= a.end
