# gradebook/schemas/grade.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from gradebook.schemas.grading import AssignmentType

# Matches the Numeric(8, 2) point columns
_POINTS = {"max_digits": 8, "decimal_places": 2}


class GradeCreate(BaseModel):
    student_id: int
    assignment_name: str = Field(min_length=1, max_length=100)
    assignment_type: AssignmentType
    max_points: Decimal = Field(gt=0, **_POINTS)
    earned_points: Decimal = Field(ge=0, **_POINTS)
    graded_by: int | None = None
    remarks: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _earned_within_max(self):
        if self.earned_points > self.max_points:
            raise ValueError("Earned points cannot exceed maximum points")
        return self


class GradeUpdate(BaseModel):
    """
    Partial edit. earned <= max is checked against the stored row by the
    service, since either side may be left out here.
    """
    assignment_name: str | None = Field(default=None, min_length=1, max_length=100)
    assignment_type: AssignmentType | None = None
    max_points: Decimal | None = Field(default=None, gt=0, **_POINTS)
    earned_points: Decimal | None = Field(default=None, ge=0, **_POINTS)
    graded_by: int | None = None
    remarks: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _earned_within_max(self):
        if (
            self.earned_points is not None
            and self.max_points is not None
            and self.earned_points > self.max_points
        ):
            raise ValueError("Earned points cannot exceed maximum points")
        return self


class GradePublic(BaseModel):
    id: int
    student_id: int
    course_id: int
    graded_by: int | None = None
    assignment_name: str
    assignment_type: AssignmentType
    max_points: Decimal
    earned_points: Decimal
    remarks: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
