"""Wire-level conflict check request, as submitted by the project form."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ConflictDetectionInput(BaseModel):
    """Unvalidated conflict check request.

    Accepts camelCase (``startDate``) or snake_case (``start_date``) keys.
    The geometry stays raw here; it is validated by the GeometryValidator.

    Attributes:
        geometry: GeoJSON-like geometry mapping
        start_date: ISO-8601 start date
        end_date: ISO-8601 end date
        exclude_project_id: Project to exclude from candidates (self on update)
        project_id: Requesting project, for matching moratorium exceptions
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[14.4378, 50.0755], [14.4380, 50.0757]],
                },
                "startDate": "2024-03-15",
                "endDate": "2024-03-25",
                "excludeProjectId": "project-1",
            }
        },
    )

    geometry: Any = Field(..., description="GeoJSON-like geometry")
    start_date: date = Field(..., description="ISO-8601 start date")
    end_date: date = Field(..., description="ISO-8601 end date")
    exclude_project_id: str | None = Field(default=None, description="Project to exclude")
    project_id: str | None = Field(default=None, description="Requesting project ID")

    @model_validator(mode="after")
    def _check_order(self) -> "ConflictDetectionInput":
        if self.start_date > self.end_date:
            msg = "Start date must not be after end date"
            raise ValueError(msg)
        return self
