# gradebook/services/evaluation_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradebook.models.attendance import AttendanceRecord as AttendanceRow
from gradebook.models.course import Course
from gradebook.models.evaluation import Evaluation
from gradebook.models.grade import Grade
from gradebook.models.user import User
from gradebook.schemas.evaluation import EvaluationCreate, EvaluationUpdate, Feedback
from gradebook.schemas.grading import (
    AttendanceRecord,
    EvaluationResult,
    EvaluationStatus,
    EvaluationWeights,
    GradeRecord,
    Semester,
)
from gradebook.services.errors import InvalidRequest, PermissionDenied, RecordNotFound
from gradebook.services.grade_service import get_student
from gradebook.services.grading import compose_evaluation

logger = logging.getLogger(__name__)

# order of the editable statuses; 'published' only via publish_evaluation()
_STATUS_ORDER = [
    EvaluationStatus.DRAFT,
    EvaluationStatus.IN_PROGRESS,
    EvaluationStatus.COMPLETED,
]


def get_course(db: Session, course_id: int) -> Course:
    course: Optional[Course] = db.get(Course, course_id)
    if course is None:
        raise RecordNotFound(f"course {course_id} not found")
    return course


def weights_for(course: Course) -> EvaluationWeights:
    return EvaluationWeights(
        assignments=course.weight_assignments,
        attendance=course.weight_attendance,
        exams=course.weight_exams,
    )


def calculate_for_student(
    db: Session,
    *,
    student_id: int,
    course: Course,
) -> EvaluationResult:
    """
    Load the student's records for the course and run the engine on them.
    Nothing is written.
    """
    grades = (
        db.query(Grade)
        .filter(Grade.student_id == student_id, Grade.course_id == course.id)
        .all()
    )
    attendance = (
        db.query(AttendanceRow)
        .filter(AttendanceRow.student_id == student_id, AttendanceRow.course_id == course.id)
        .all()
    )

    grade_records = [
        GradeRecord(
            student_id=g.student_id,
            course_id=g.course_id,
            assignment_type=g.assignment_type,
            max_points=g.max_points,
            earned_points=g.earned_points,
        )
        for g in grades
    ]
    attendance_records = [
        AttendanceRecord(student_id=a.student_id, date=a.date, status=a.status)
        for a in attendance
    ]

    weights = weights_for(course)
    if not weights.is_complete:
        logger.warning(
            f"Course {course.id} weights sum to {weights.total}, using them as given"
        )

    return compose_evaluation(grade_records, attendance_records, weights)


def apply_result(evaluation: Evaluation, result: EvaluationResult) -> Evaluation:
    """Copy a computed result onto the evaluation row and stamp last_calculated."""
    for name in ("assignments", "exams"):
        component = getattr(result, name)
        setattr(evaluation, f"{name}_total_possible", component.total_possible)
        setattr(evaluation, f"{name}_total_earned", component.total_earned)
        setattr(evaluation, f"{name}_percentage", component.percentage)
        setattr(evaluation, f"{name}_weight", component.weight)
        setattr(evaluation, f"{name}_weighted_score", component.weighted_score)

    attendance = result.attendance
    evaluation.attendance_total_classes = attendance.total_classes
    evaluation.attendance_attended_classes = attendance.attended_classes
    evaluation.attendance_percentage = attendance.percentage
    evaluation.attendance_weight = attendance.weight
    evaluation.attendance_weighted_score = attendance.weighted_score

    evaluation.final_percentage = result.final_grade.percentage
    evaluation.letter_grade = result.final_grade.letter_grade
    evaluation.gpa = result.final_grade.gpa

    evaluation.last_calculated = datetime.now(timezone.utc)
    return evaluation


def recalculate(db: Session, evaluation: Evaluation) -> Evaluation:
    course = get_course(db, evaluation.course_id)
    result = calculate_for_student(db, student_id=evaluation.student_id, course=course)
    return apply_result(evaluation, result)


def _merge_feedback(evaluation: Evaluation, feedback: Feedback | None) -> None:
    if feedback is None:
        return
    for field, value in feedback.model_dump(exclude_unset=True).items():
        setattr(evaluation, field, value)


def _check_evaluator(db: Session, course: Course, evaluator_id: int) -> None:
    evaluator: Optional[User] = db.get(User, evaluator_id)
    if evaluator is None:
        raise RecordNotFound(f"evaluator {evaluator_id} not found")
    if evaluator.role == "admin":
        return
    if evaluator.role != "teacher" or course.teacher_id != evaluator.id:
        raise PermissionDenied(
            "Only the assigned teacher can evaluate students in this course"
        )


def _check_term(course: Course) -> None:
    try:
        Semester(course.semester)
    except ValueError:
        raise InvalidRequest(
            f"Course {course.id} has an unknown semester '{course.semester}'"
        )


def create_or_update_evaluation(
    db: Session,
    *,
    obj_in: EvaluationCreate,
) -> tuple[Evaluation, bool]:
    """
    Create the student's evaluation for the course's current term, or refresh the
    existing one. Returns (evaluation, created).
    """
    course = get_course(db, obj_in.course_id)
    _check_term(course)
    get_student(db, obj_in.student_id)
    _check_evaluator(db, course, obj_in.evaluated_by)

    evaluation = (
        db.query(Evaluation)
        .filter(
            Evaluation.student_id == obj_in.student_id,
            Evaluation.course_id == course.id,
            Evaluation.semester == course.semester,
            Evaluation.year == course.year,
        )
        .first()
    )
    created = evaluation is None
    if created:
        evaluation = Evaluation(
            student_id=obj_in.student_id,
            course_id=course.id,
            semester=course.semester,
            year=course.year,
            status=EvaluationStatus.DRAFT.value,
            is_published=False,
        )

    evaluation.evaluated_by = obj_in.evaluated_by
    _merge_feedback(evaluation, obj_in.feedback)
    apply_result(
        evaluation,
        calculate_for_student(db, student_id=obj_in.student_id, course=course),
    )

    db.add(evaluation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not created:
            raise
        # another request created the same term's evaluation first
        logger.info(
            f"Evaluation for student {obj_in.student_id} in course {course.id} "
            f"already exists, refreshing it instead"
        )
        return create_or_update_evaluation(db, obj_in=obj_in)
    db.refresh(evaluation)

    logger.info(
        f"{'Created' if created else 'Recalculated'} evaluation {evaluation.id} "
        f"for student {evaluation.student_id} in course {course.id}: "
        f"{evaluation.final_percentage} ({evaluation.letter_grade})"
    )
    return evaluation, created


def _transition(evaluation: Evaluation, target: EvaluationStatus) -> None:
    current = EvaluationStatus(evaluation.status)
    if target == current:
        return
    if target == EvaluationStatus.PUBLISHED:
        raise InvalidRequest("Use the publish action to publish an evaluation")
    if current == EvaluationStatus.PUBLISHED:
        raise InvalidRequest("A published evaluation cannot change status")
    if _STATUS_ORDER.index(target) < _STATUS_ORDER.index(current):
        raise InvalidRequest(
            f"Cannot move evaluation from '{current.value}' back to '{target.value}'"
        )
    evaluation.status = target.value


def update_evaluation(
    db: Session,
    *,
    db_obj: Evaluation,
    obj_in: EvaluationUpdate,
) -> Evaluation:
    """
    Edit feedback and/or status. Scores are recalculated on every edit.
    """
    if obj_in.status is not None:
        _transition(db_obj, obj_in.status)
    _merge_feedback(db_obj, obj_in.feedback)
    recalculate(db, db_obj)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def publish_evaluation(db: Session, *, db_obj: Evaluation) -> Evaluation:
    """
    Recalculate, then make the evaluation visible to the student.
    """
    recalculate(db, db_obj)
    db_obj.status = EvaluationStatus.PUBLISHED.value
    db_obj.is_published = True
    db_obj.published_at = datetime.now(timezone.utc)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)

    logger.info(
        f"Published evaluation {db_obj.id} for student {db_obj.student_id}: "
        f"{db_obj.final_percentage} ({db_obj.letter_grade})"
    )
    return db_obj


def recalculate_course(db: Session, course_id: int) -> int:
    """
    Refresh every evaluation of a course, published ones included.
    Returns how many were updated.
    """
    course = get_course(db, course_id)
    evaluations = db.query(Evaluation).filter(Evaluation.course_id == course.id).all()
    for evaluation in evaluations:
        apply_result(
            evaluation,
            calculate_for_student(db, student_id=evaluation.student_id, course=course),
        )
        db.add(evaluation)
    db.commit()
    return len(evaluations)


def get_evaluation(db: Session, evaluation_id: int) -> Optional[Evaluation]:
    return db.get(Evaluation, evaluation_id)


def list_evaluations(
    db: Session,
    *,
    course_id: int | None = None,
    evaluated_by: int | None = None,
    semester: str | None = None,
    year: int | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Evaluation]:
    query = db.query(Evaluation)
    if course_id is not None:
        query = query.filter(Evaluation.course_id == course_id)
    if evaluated_by is not None:
        query = query.filter(Evaluation.evaluated_by == evaluated_by)
    if semester is not None:
        query = query.filter(Evaluation.semester == semester)
    if year is not None:
        query = query.filter(Evaluation.year == year)
    return (
        query.order_by(Evaluation.final_percentage.desc(), Evaluation.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def list_published_for_student(
    db: Session,
    *,
    student_id: int,
    course_id: int | None = None,
) -> List[Evaluation]:
    """
    What a student is allowed to see: their own published evaluations.
    """
    query = db.query(Evaluation).filter(
        Evaluation.student_id == student_id,
        Evaluation.is_published.is_(True),
    )
    if course_id is not None:
        query = query.filter(Evaluation.course_id == course_id)
    return query.order_by(Evaluation.year.desc(), Evaluation.semester.desc()).all()
