# gradebook/services/grading.py
"""
Weighted evaluation engine.

Pure functions only: given a student's grade and attendance records for one
course plus the course weights, build the component breakdown, the final
percentage, the letter grade and the GPA. Nothing here touches the database;
``evaluation_service`` loads the records and persists the result.

Rounding rules:
  - grade category percentages: 2 decimals, round-half-up
  - attendance percentage: whole percent, round-half-up
  - weighted scores and the final percentage: 2 decimals, round-half-up
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from gradebook.schemas.grading import (
    AssignmentType,
    AttendanceComponentScore,
    AttendanceRecord,
    AttendanceStatus,
    AttendanceSummary,
    Category,
    ComponentScore,
    EvaluationResult,
    EvaluationWeights,
    FinalGrade,
    GradeBreakdown,
    GradeCategorySummary,
    GradeRecord,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_CENTS = Decimal("0.01")
_WHOLE = Decimal("1")

_CATEGORY_BY_TYPE: dict[AssignmentType, Category] = {
    AssignmentType.ASSIGNMENT: Category.ASSIGNMENTS,
    AssignmentType.PROJECT: Category.ASSIGNMENTS,
    AssignmentType.QUIZ: Category.ASSIGNMENTS,
    AssignmentType.EXAM: Category.EXAMS,
    AssignmentType.FINAL: Category.EXAMS,
    AssignmentType.PARTICIPATION: Category.EXCLUDED,
}

_ATTENDED = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})

# (inclusive lower bound, value), checked top-down
LETTER_GRADE_TABLE: tuple[tuple[Decimal, str], ...] = (
    (Decimal("97"), "A+"),
    (Decimal("93"), "A"),
    (Decimal("90"), "A-"),
    (Decimal("87"), "B+"),
    (Decimal("83"), "B"),
    (Decimal("80"), "B-"),
    (Decimal("77"), "C+"),
    (Decimal("73"), "C"),
    (Decimal("70"), "C-"),
    (Decimal("67"), "D+"),
    (Decimal("60"), "D"),
)

# 97+ deliberately shares 4.0 with 93-96.99
GPA_TABLE: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("93"), Decimal("4.0")),
    (Decimal("90"), Decimal("3.7")),
    (Decimal("87"), Decimal("3.3")),
    (Decimal("83"), Decimal("3.0")),
    (Decimal("80"), Decimal("2.7")),
    (Decimal("77"), Decimal("2.3")),
    (Decimal("73"), Decimal("2.0")),
    (Decimal("70"), Decimal("1.7")),
    (Decimal("67"), Decimal("1.3")),
    (Decimal("60"), Decimal("1.0")),
)


def _round2(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def _ratio(part: Decimal, whole: Decimal) -> Decimal:
    if whole <= 0:
        return _ZERO
    return part / whole * _HUNDRED


def category_of(assignment_type: AssignmentType | str) -> Category:
    return _CATEGORY_BY_TYPE[AssignmentType(assignment_type)]


def summarize_category(records: Iterable[GradeRecord]) -> GradeCategorySummary:
    total_possible = _ZERO
    total_earned = _ZERO
    for record in records:
        total_possible += record.max_points
        total_earned += record.earned_points

    return GradeCategorySummary(
        total_possible=total_possible,
        total_earned=total_earned,
        percentage=_round2(_ratio(total_earned, total_possible)),
    )


def aggregate_grades(records: Iterable[GradeRecord]) -> GradeBreakdown:
    """
    Split grade records into the assignments and exams categories and total each.

    Participation entries fall in neither category and are ignored. An empty
    category comes back as all zeros.
    """
    by_category: dict[Category, list[GradeRecord]] = {
        Category.ASSIGNMENTS: [],
        Category.EXAMS: [],
        Category.EXCLUDED: [],
    }
    for record in records:
        by_category[category_of(record.assignment_type)].append(record)

    return GradeBreakdown(
        assignments=summarize_category(by_category[Category.ASSIGNMENTS]),
        exams=summarize_category(by_category[Category.EXAMS]),
    )


def aggregate_attendance(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    """Late counts as attended. The percentage is a whole number."""
    total = 0
    attended = 0
    for record in records:
        total += 1
        if record.status in _ATTENDED:
            attended += 1

    percentage = _ratio(Decimal(attended), Decimal(total))
    return AttendanceSummary(
        total_classes=total,
        attended_classes=attended,
        percentage=percentage.quantize(_WHOLE, rounding=ROUND_HALF_UP),
    )


def letter_grade_for(percentage: Decimal) -> str:
    for lower_bound, letter in LETTER_GRADE_TABLE:
        if percentage >= lower_bound:
            return letter
    return "F"


def gpa_for(percentage: Decimal) -> Decimal:
    for lower_bound, gpa in GPA_TABLE:
        if percentage >= lower_bound:
            return gpa
    return Decimal("0.0")


def _weighted(percentage: Decimal, weight: int) -> Decimal:
    return _round2(percentage * weight / _HUNDRED)


def _grade_component(summary: GradeCategorySummary, weight: int) -> ComponentScore:
    # weight the exact ratio, not the already rounded percentage
    exact = _ratio(summary.total_earned, summary.total_possible)
    return ComponentScore(
        total_possible=summary.total_possible,
        total_earned=summary.total_earned,
        percentage=summary.percentage,
        weight=weight,
        weighted_score=_weighted(exact, weight),
    )


def compose(
    assignments: GradeCategorySummary,
    attendance: AttendanceSummary,
    exams: GradeCategorySummary,
    weights: EvaluationWeights,
) -> EvaluationResult:
    """
    Combine the three category results with the course weights.

    Weights are used exactly as given. If they do not add up to 100 the final
    percentage may leave the 0-100 range; it is returned unclamped and the
    grade tables fall through to their lowest band or stay at the top one.
    """
    assignments_score = _grade_component(assignments, weights.assignments)
    exams_score = _grade_component(exams, weights.exams)
    attendance_score = AttendanceComponentScore(
        total_classes=attendance.total_classes,
        attended_classes=attendance.attended_classes,
        percentage=attendance.percentage,
        weight=weights.attendance,
        weighted_score=_weighted(attendance.percentage, weights.attendance),
    )

    final_percentage = _round2(
        assignments_score.weighted_score
        + attendance_score.weighted_score
        + exams_score.weighted_score
    )

    return EvaluationResult(
        assignments=assignments_score,
        attendance=attendance_score,
        exams=exams_score,
        final_grade=FinalGrade(
            percentage=final_percentage,
            letter_grade=letter_grade_for(final_percentage),
            gpa=gpa_for(final_percentage),
        ),
    )


def compose_evaluation(
    grade_records: Iterable[GradeRecord],
    attendance_records: Iterable[AttendanceRecord],
    weights: EvaluationWeights,
) -> EvaluationResult:
    breakdown = aggregate_grades(grade_records)
    attendance = aggregate_attendance(attendance_records)
    return compose(breakdown.assignments, attendance, breakdown.exams, weights)
