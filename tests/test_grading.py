"""
Tests for the pure evaluation engine: category mapping, aggregation,
rounding, grade tables and weighted composition.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from gradebook.schemas.grading import (
    AssignmentType,
    AttendanceRecord,
    AttendanceSummary,
    Category,
    EvaluationWeights,
    GradeCategorySummary,
    GradeRecord,
)
from gradebook.services.grading import (
    aggregate_attendance,
    aggregate_grades,
    category_of,
    compose,
    compose_evaluation,
    gpa_for,
    letter_grade_for,
)


def grade(assignment_type, max_points, earned_points):
    return GradeRecord(
        student_id=1,
        course_id=1,
        assignment_type=assignment_type,
        max_points=max_points,
        earned_points=earned_points,
    )


def attendance(*statuses):
    return [
        AttendanceRecord(student_id=1, date=date(2024, 9, day + 1), status=status)
        for day, status in enumerate(statuses)
    ]


def scenario_grades():
    return [
        grade("assignment", 100, 95),
        grade("project", 60, 50),
        grade("quiz", 40, 35),
        grade("exam", 40, 35),
        grade("final", 60, 50),
    ]


DEFAULT_WEIGHTS = EvaluationWeights(assignments=40, attendance=20, exams=40)


class TestValueObjects:
    """Validation performed when records are constructed."""

    def test_earned_points_cannot_exceed_max(self):
        with pytest.raises(ValidationError):
            grade("exam", 50, 51)

    def test_max_points_must_be_positive(self):
        with pytest.raises(ValidationError):
            grade("exam", 0, 0)

    def test_earned_points_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            grade("quiz", 10, -1)

    def test_unknown_assignment_type_rejected(self):
        with pytest.raises(ValidationError):
            grade("homework", 10, 5)

    def test_grade_percentage(self):
        assert grade("quiz", 20, 15).percentage == Decimal("75")

    def test_weight_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            EvaluationWeights(assignments=120, attendance=0, exams=0)

    def test_weights_not_summing_to_100_are_accepted(self):
        weights = EvaluationWeights(assignments=50, attendance=20, exams=40)
        assert weights.total == 110
        assert not weights.is_complete
        assert DEFAULT_WEIGHTS.is_complete


class TestCategoryOf:
    @pytest.mark.parametrize(
        "assignment_type, expected",
        [
            ("assignment", Category.ASSIGNMENTS),
            ("project", Category.ASSIGNMENTS),
            ("quiz", Category.ASSIGNMENTS),
            ("exam", Category.EXAMS),
            ("final", Category.EXAMS),
            ("participation", Category.EXCLUDED),
        ],
    )
    def test_mapping(self, assignment_type, expected):
        assert category_of(assignment_type) == expected
        assert category_of(AssignmentType(assignment_type)) == expected


class TestGradeAggregator:
    def test_empty_input_gives_zero_categories(self):
        breakdown = aggregate_grades([])
        for summary in (breakdown.assignments, breakdown.exams):
            assert summary.total_possible == 0
            assert summary.total_earned == 0
            assert summary.percentage == 0

    def test_totals_per_category(self):
        breakdown = aggregate_grades(scenario_grades())
        assert breakdown.assignments.total_possible == Decimal("200")
        assert breakdown.assignments.total_earned == Decimal("180")
        assert breakdown.assignments.percentage == Decimal("90.00")
        assert breakdown.exams.total_possible == Decimal("100")
        assert breakdown.exams.total_earned == Decimal("85")
        assert breakdown.exams.percentage == Decimal("85.00")

    def test_participation_is_ignored(self):
        breakdown = aggregate_grades([grade("participation", 10, 10)])
        assert breakdown.assignments.total_possible == 0
        assert breakdown.exams.total_possible == 0

    def test_only_exams_leaves_assignments_at_zero(self):
        breakdown = aggregate_grades([grade("final", 100, 70)])
        assert breakdown.assignments.percentage == 0
        assert breakdown.exams.percentage == Decimal("70.00")

    def test_percentage_rounded_to_two_decimals(self):
        breakdown = aggregate_grades([grade("quiz", 3, 2)])
        assert breakdown.assignments.percentage == Decimal("66.67")

    def test_percentage_rounds_half_up(self):
        # 1/800 = 0.125%
        breakdown = aggregate_grades([grade("assignment", 800, 1)])
        assert breakdown.assignments.percentage == Decimal("0.13")

    def test_fractional_points(self):
        breakdown = aggregate_grades([grade("exam", "12.5", "10.25")])
        assert breakdown.exams.total_earned == Decimal("10.25")
        assert breakdown.exams.percentage == Decimal("82.00")


class TestAttendanceAggregator:
    def test_no_records_is_zero_percent(self):
        summary = aggregate_attendance([])
        assert summary.total_classes == 0
        assert summary.attended_classes == 0
        assert summary.percentage == 0

    def test_two_of_three_rounds_to_67(self):
        summary = aggregate_attendance(attendance("Present", "Present", "Absent"))
        assert summary.percentage == Decimal("67")

    def test_late_counts_as_attended(self):
        summary = aggregate_attendance(attendance("Late", "Absent"))
        assert summary.total_classes == 2
        assert summary.attended_classes == 1
        assert summary.percentage == Decimal("50")

    def test_whole_percent_rounds_half_up(self):
        # 1/8 = 12.5%
        summary = aggregate_attendance(attendance("Present", *["Absent"] * 7))
        assert summary.percentage == Decimal("13")

    def test_all_absent(self):
        summary = aggregate_attendance(attendance("Absent", "Absent"))
        assert summary.percentage == 0


class TestGradeTables:
    @pytest.mark.parametrize(
        "percentage, letter",
        [
            ("100", "A+"),
            ("97", "A+"),
            ("96.99", "A"),
            ("93", "A"),
            ("90.00", "A-"),
            ("89.99", "B+"),
            ("87", "B+"),
            ("83", "B"),
            ("80", "B-"),
            ("77", "C+"),
            ("73", "C"),
            ("70", "C-"),
            ("67", "D+"),
            ("60", "D"),
            ("59.99", "F"),
            ("0", "F"),
            ("-5", "F"),
        ],
    )
    def test_letter_grade_lower_bounds_inclusive(self, percentage, letter):
        assert letter_grade_for(Decimal(percentage)) == letter

    @pytest.mark.parametrize(
        "percentage, gpa",
        [
            ("98", "4.0"),
            ("94", "4.0"),
            ("93", "4.0"),
            ("92.99", "3.7"),
            ("90", "3.7"),
            ("87", "3.3"),
            ("83", "3.0"),
            ("80", "2.7"),
            ("77", "2.3"),
            ("73", "2.0"),
            ("70", "1.7"),
            ("67", "1.3"),
            ("60", "1.0"),
            ("59.99", "0.0"),
        ],
    )
    def test_gpa_table(self, percentage, gpa):
        assert gpa_for(Decimal(percentage)) == Decimal(gpa)

    def test_gpa_collapses_top_band(self):
        assert gpa_for(Decimal("98")) == gpa_for(Decimal("94"))
        assert letter_grade_for(Decimal("98")) != letter_grade_for(Decimal("94"))


class TestComposer:
    def test_end_to_end_scenario(self):
        records = attendance(*["Present"] * 17, "Late", "Absent", "Absent")
        result = compose_evaluation(scenario_grades(), records, DEFAULT_WEIGHTS)

        assert result.assignments.weighted_score == Decimal("36.00")
        assert result.attendance.total_classes == 20
        assert result.attendance.attended_classes == 18
        assert result.attendance.percentage == Decimal("90")
        assert result.attendance.weighted_score == Decimal("18.00")
        assert result.exams.weighted_score == Decimal("34.00")
        assert result.final_grade.percentage == Decimal("88.00")
        assert result.final_grade.letter_grade == "B+"
        assert result.final_grade.gpa == Decimal("3.3")

    def test_no_data_yet(self):
        result = compose_evaluation([], [], DEFAULT_WEIGHTS)

        assert result.assignments.percentage == 0
        assert result.attendance.percentage == 0
        assert result.exams.percentage == 0
        assert result.final_grade.percentage == Decimal("0.00")
        assert result.final_grade.letter_grade == "F"
        assert result.final_grade.gpa == Decimal("0.0")

    def test_weights_copied_onto_components(self):
        result = compose_evaluation([], [], DEFAULT_WEIGHTS)
        assert result.assignments.weight == 40
        assert result.attendance.weight == 20
        assert result.exams.weight == 40

    def test_attendance_weighted_from_whole_percent(self):
        result = compose(
            GradeCategorySummary(),
            AttendanceSummary(total_classes=3, attended_classes=2, percentage=Decimal("67")),
            GradeCategorySummary(),
            DEFAULT_WEIGHTS,
        )
        assert result.attendance.weighted_score == Decimal("13.40")

    def test_weight_shift_is_linear(self):
        records = attendance(*["Present"] * 18, "Absent", "Absent")
        before = compose_evaluation(scenario_grades(), records, DEFAULT_WEIGHTS)
        after = compose_evaluation(
            scenario_grades(),
            records,
            EvaluationWeights(assignments=50, attendance=20, exams=30),
        )
        # +10 on assignments (90%), -10 on exams (85%)
        expected_delta = Decimal(10) * (Decimal(90) - Decimal(85)) / 100
        assert (
            after.final_grade.percentage - before.final_grade.percentage
            == expected_delta
        )
        assert after.final_grade.percentage == Decimal("88.50")

    def test_over_100_weights_are_not_clamped(self):
        perfect = [grade("assignment", 10, 10), grade("exam", 10, 10)]
        weights = EvaluationWeights(assignments=60, attendance=60, exams=60)
        result = compose_evaluation(perfect, attendance("Present"), weights)

        assert result.final_grade.percentage == Decimal("180.00")
        assert result.final_grade.letter_grade == "A+"
        assert result.final_grade.gpa == Decimal("4.0")

    def test_under_100_weights_are_not_renormalized(self):
        perfect = [grade("assignment", 10, 10), grade("exam", 10, 10)]
        weights = EvaluationWeights(assignments=10, attendance=10, exams=10)
        result = compose_evaluation(perfect, attendance("Present"), weights)

        assert result.final_grade.percentage == Decimal("30.00")
        assert result.final_grade.letter_grade == "F"
        assert result.final_grade.gpa == Decimal("0.0")

    def test_boundary_final_percentage(self):
        # 90% everywhere lands exactly on the A- boundary
        result = compose_evaluation(
            [grade("quiz", 10, 9), grade("exam", 10, 9)],
            attendance(*["Present"] * 9, "Absent"),
            DEFAULT_WEIGHTS,
        )
        assert result.final_grade.percentage == Decimal("90.00")
        assert result.final_grade.letter_grade == "A-"
        assert result.final_grade.gpa == Decimal("3.7")

    def test_recomputation_is_stable(self):
        records = attendance("Present", "Late", "Absent")
        grades = [grade("quiz", 3, 2), grade("exam", 7, 5), grade("project", 9, 4)]

        first = compose_evaluation(grades, records, DEFAULT_WEIGHTS)
        second = compose_evaluation(grades, records, DEFAULT_WEIGHTS)
        assert first == second
