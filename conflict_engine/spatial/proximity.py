"""Spatial conflict predicate between two normalized geometries."""

from conflict_engine.models.geometry import NormalizedGeometry
from conflict_engine.spatial.kernel import bounds_overlap, expand_bounds, intersects, min_distance_m


class ProximityEngine:
    """Decides whether two geometries are close enough to conflict.

    Uses the true minimum distance between geometries (including segment
    interiors and polygon containment), not only vertex-to-vertex distances.
    A threshold of 0 means actual intersection is required.
    """

    def is_proximal(
        self, a: NormalizedGeometry, b: NormalizedGeometry, threshold_m: float
    ) -> bool:
        """Return True if ``a`` and ``b`` intersect or lie within ``threshold_m`` metres.

        Args:
            a: First geometry
            b: Second geometry
            threshold_m: Distance threshold in metres (>= 0)

        Raises:
            ValueError: If threshold_m is negative
        """
        if threshold_m < 0:
            msg = f"Proximity threshold must be non-negative, got {threshold_m}"
            raise ValueError(msg)

        if threshold_m == 0:
            return intersects(a, b)

        # Cheap reject before projecting
        if not bounds_overlap(expand_bounds(a.bounds, threshold_m), b.bounds):
            return False

        return min_distance_m(a, b) <= threshold_m

    def intersects(self, a: NormalizedGeometry, b: NormalizedGeometry) -> bool:
        """Return True if the geometries share at least one point."""
        return intersects(a, b)
