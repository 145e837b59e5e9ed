# gradebook/schemas/course.py
from pydantic import BaseModel, Field, model_validator


class CourseWeightsUpdate(BaseModel):
    """Course weight configuration, must add up to 100"""
    assignments: int = Field(ge=0, le=100)
    attendance: int = Field(ge=0, le=100)
    exams: int = Field(ge=0, le=100)

    @model_validator(mode="after")
    def _sum_to_hundred(self):
        total = self.assignments + self.attendance + self.exams
        if total != 100:
            raise ValueError(f"Evaluation weights must sum to 100, got {total}")
        return self


class CourseWeightsPublic(BaseModel):
    course_id: int
    assignments: int
    attendance: int
    exams: int
    recalculation_job_id: str | None = None
