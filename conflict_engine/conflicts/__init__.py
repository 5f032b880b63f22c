"""Conflict classification: temporal overlap, moratoria and aggregation."""

from conflict_engine.conflicts.aggregator import ConflictAggregator
from conflict_engine.conflicts.moratoriums import filter_active_in_area, remove_exempted
from conflict_engine.conflicts.temporal import overlaps

__all__ = [
    "ConflictAggregator",
    "overlaps",
    "filter_active_in_area",
    "remove_exempted",
]
