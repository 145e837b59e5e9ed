# gradebook/schemas/grading.py
"""
Value objects consumed and produced by the evaluation engine.

They are plain, frozen pydantic models with no database dependency so the
engine in ``gradebook.services.grading`` stays a pure function of its inputs.
"""
import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AssignmentType(str, Enum):
    EXAM = "exam"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"
    PROJECT = "project"
    PARTICIPATION = "participation"
    FINAL = "final"


class Category(str, Enum):
    ASSIGNMENTS = "assignments"
    EXAMS = "exams"
    EXCLUDED = "excluded"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class Semester(str, Enum):
    FALL = "Fall"
    SPRING = "Spring"
    SUMMER = "Summer"


class EvaluationStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PUBLISHED = "published"


class GradeRecord(BaseModel):
    """One scored item for one student in one course."""
    model_config = ConfigDict(frozen=True)

    student_id: int
    course_id: int
    assignment_type: AssignmentType
    max_points: Decimal = Field(gt=0)
    earned_points: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def _earned_within_max(self):
        if self.earned_points > self.max_points:
            raise ValueError("earned_points cannot exceed max_points")
        return self

    @property
    def percentage(self) -> Decimal:
        return self.earned_points / self.max_points * 100


class AttendanceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    student_id: int
    date: datetime.date
    status: AttendanceStatus


class EvaluationWeights(BaseModel):
    """
    Per-course weights. Each weight is checked on its own; the sum-to-100 rule
    belongs to course configuration, so other totals pass through unchanged.
    """
    model_config = ConfigDict(frozen=True)

    assignments: int = Field(default=40, ge=0, le=100)
    attendance: int = Field(default=20, ge=0, le=100)
    exams: int = Field(default=40, ge=0, le=100)

    @property
    def total(self) -> int:
        return self.assignments + self.attendance + self.exams

    @property
    def is_complete(self) -> bool:
        return self.total == 100


class GradeCategorySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_possible: Decimal = Decimal("0")
    total_earned: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")


class GradeBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    assignments: GradeCategorySummary = GradeCategorySummary()
    exams: GradeCategorySummary = GradeCategorySummary()


class AttendanceSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_classes: int = 0
    attended_classes: int = 0
    percentage: Decimal = Decimal("0")


class ComponentScore(GradeCategorySummary):
    weight: int
    weighted_score: Decimal


class AttendanceComponentScore(AttendanceSummary):
    weight: int
    weighted_score: Decimal


class FinalGrade(BaseModel):
    model_config = ConfigDict(frozen=True)

    percentage: Decimal
    letter_grade: str
    gpa: Decimal


class EvaluationResult(BaseModel):
    """Everything the engine computes for one student in one course."""
    model_config = ConfigDict(frozen=True)

    assignments: ComponentScore
    attendance: AttendanceComponentScore
    exams: ComponentScore
    final_grade: FinalGrade
