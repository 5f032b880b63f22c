"""Shared fixtures for conflict engine tests.

Geometries follow the Prague test data used throughout: project X's proposed
line, and a moratorium square that fully covers it.
"""

from datetime import date

import pytest

from conflict_engine.models import (
    ConflictDetectionRequest,
    Moratorium,
    MoratoriumException,
    Project,
    ProjectState,
    TimeWindow,
)
from conflict_engine.validation import GeometryValidator

X_LINE = {"type": "LineString", "coordinates": [[14.4378, 50.0755], [14.4380, 50.0757]]}

MORATORIUM_AREA = {
    "type": "Polygon",
    "coordinates": [
        [
            [14.4375, 50.0750],
            [14.4385, 50.0750],
            [14.4385, 50.0760],
            [14.4375, 50.0760],
            [14.4375, 50.0750],
        ]
    ],
}

# Roughly 2 km east of X_LINE
FAR_LINE = {"type": "LineString", "coordinates": [[14.4650, 50.0755], [14.4652, 50.0757]]}


@pytest.fixture
def validator():
    """Create a validator with default configuration."""
    return GeometryValidator()


@pytest.fixture
def x_line():
    return dict(X_LINE)


@pytest.fixture
def moratorium_area():
    return dict(MORATORIUM_AREA)


@pytest.fixture
def far_line():
    return dict(FAR_LINE)


@pytest.fixture
def make_project(validator):
    """Factory for existing projects (approved, water works by default)."""

    def _make(
        project_id="project-y",
        geometry=X_LINE,
        start=date(2024, 3, 20),
        end=date(2024, 4, 5),
        state=ProjectState.APPROVED,
        work_category="water",
    ):
        return Project(
            id=project_id,
            name=f"Project {project_id}",
            geometry=validator.normalize(geometry),
            window=TimeWindow(start=start, end=end),
            state=state,
            work_category=work_category,
        )

    return _make


@pytest.fixture
def make_moratorium(validator):
    """Factory for moratoria (road reconstruction, whole of 2024 by default)."""

    def _make(
        moratorium_id="moratorium-1",
        geometry=MORATORIUM_AREA,
        start=date(2024, 1, 1),
        end=date(2024, 12, 31),
    ):
        return Moratorium(
            id=moratorium_id,
            name="Vinohradská road reconstruction",
            geometry=validator.normalize(geometry),
            window=TimeWindow(start=start, end=end),
            reason="road_reconstruction",
            reason_detail="Resurfaced in 2023, five year moratorium",
        )

    return _make


@pytest.fixture
def make_exception():
    """Factory for moratorium exceptions granted to project X."""

    def _make(moratorium_id="moratorium-1", project_id="project-x", **kwargs):
        return MoratoriumException(
            moratorium_id=moratorium_id,
            project_id=project_id,
            approver_id="coordinator-1",
            justification="Emergency water main repair",
            **kwargs,
        )

    return _make


@pytest.fixture
def x_request(validator):
    """Project X's request: X_LINE, 2024-03-15..2024-03-25."""
    return ConflictDetectionRequest(
        geometry=validator.normalize(X_LINE),
        window=TimeWindow(start=date(2024, 3, 15), end=date(2024, 3, 25)),
        project_id="project-x",
    )
