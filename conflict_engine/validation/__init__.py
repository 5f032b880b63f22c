"""Validation module for submitted project geometries.

This module provides:
1. GeometryValidator - validates and normalizes raw GeoJSON-like geometries
2. ValidationError / InputValidationError - structured, user-displayable errors

Warnings (duplicates removed, tiny geometry, out of area, possible
self-intersection) never block a submission; errors always do.
"""

from conflict_engine.validation.errors import InputValidationError, ValidationError
from conflict_engine.validation.geometry import GeometryValidator, ValidationResult

__all__ = [
    "ValidationError",
    "InputValidationError",
    "GeometryValidator",
    "ValidationResult",
]
