"""Spatial index capability for candidate pre-filtering.

The index only answers "which entities have a bounding box overlapping this
region"; exact distance and intersection tests happen afterwards in the
ProximityEngine.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from shapely import STRtree, box

from conflict_engine.models.geometry import Bounds, NormalizedGeometry

logger = logging.getLogger(__name__)


class SpatialIndex(Protocol):
    """Protocol for bounding-box candidate lookup."""

    def query(self, bounds: Bounds) -> list[str]:
        """Return ids of entities whose bounding boxes overlap ``bounds``.

        Args:
            bounds: Region as (min_lon, min_lat, max_lon, max_lat)

        Returns:
            Entity ids in a deterministic order
        """
        ...


class STRtreeSpatialIndex:
    """Immutable shapely STRtree index over entity geometries.

    Ids are returned in the order the entries were given, regardless of tree
    traversal order.
    """

    def __init__(self, entries: Sequence[tuple[str, NormalizedGeometry]]):
        self._ids = [entity_id for entity_id, _ in entries]
        self._tree = STRtree([geometry.to_shapely() for _, geometry in entries])
        logger.debug(f"Built STRtree index over {len(self._ids)} entities")

    def __len__(self) -> int:
        return len(self._ids)

    def query(self, bounds: Bounds) -> list[str]:
        if not self._ids:
            return []
        positions = sorted(int(i) for i in self._tree.query(box(*bounds)))
        return [self._ids[i] for i in positions]
