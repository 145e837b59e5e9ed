# gradebook/schemas/evaluation.py
from datetime import datetime

from pydantic import BaseModel, Field

from gradebook.schemas.grading import (
    AttendanceComponentScore,
    ComponentScore,
    EvaluationStatus,
    FinalGrade,
    Semester,
)


class Feedback(BaseModel):
    """Teacher comments, stored as-is"""
    strengths: str | None = Field(default=None, max_length=1000)
    areas_for_improvement: str | None = Field(default=None, max_length=1000)
    overall_comments: str | None = Field(default=None, max_length=2000)
    recommendations: str | None = Field(default=None, max_length=1000)


class EvaluationCreate(BaseModel):
    student_id: int
    course_id: int
    evaluated_by: int
    feedback: Feedback | None = None


class EvaluationUpdate(BaseModel):
    feedback: Feedback | None = None
    status: EvaluationStatus | None = None


class EvaluationComponents(BaseModel):
    assignments: ComponentScore
    attendance: AttendanceComponentScore
    exams: ComponentScore


class EvaluationPublic(BaseModel):
    id: int
    student_id: int
    course_id: int
    evaluated_by: int
    semester: Semester
    year: int

    components: EvaluationComponents
    final_grade: FinalGrade
    feedback: Feedback

    status: EvaluationStatus
    is_published: bool
    published_at: datetime | None = None
    last_calculated: datetime | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None


class EvaluationPreview(BaseModel):
    """Computed on the fly, nothing is saved"""
    student_id: int
    course_id: int
    components: EvaluationComponents
    final_grade: FinalGrade
