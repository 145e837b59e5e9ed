# gradebook/api/v1/endpoints/evaluations.py
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from gradebook.api.deps import get_evaluation_or_404, to_http_exception
from gradebook.db.session import get_db
from gradebook.models.evaluation import Evaluation
from gradebook.schemas.evaluation import (
    EvaluationComponents,
    EvaluationCreate,
    EvaluationPublic,
    EvaluationUpdate,
    Feedback,
)
from gradebook.schemas.grading import (
    AttendanceComponentScore,
    ComponentScore,
    FinalGrade,
    Semester,
)
from gradebook.services import evaluation_service
from gradebook.services.errors import GradebookError

router = APIRouter(tags=["evaluations"])


def _component(ev: Evaluation, name: str) -> ComponentScore:
    return ComponentScore(
        total_possible=getattr(ev, f"{name}_total_possible"),
        total_earned=getattr(ev, f"{name}_total_earned"),
        percentage=getattr(ev, f"{name}_percentage"),
        weight=getattr(ev, f"{name}_weight"),
        weighted_score=getattr(ev, f"{name}_weighted_score"),
    )


def _evaluation_to_public(ev: Evaluation) -> EvaluationPublic:
    return EvaluationPublic(
        id=ev.id,
        student_id=ev.student_id,
        course_id=ev.course_id,
        evaluated_by=ev.evaluated_by,
        semester=ev.semester,
        year=ev.year,
        components=EvaluationComponents(
            assignments=_component(ev, "assignments"),
            attendance=AttendanceComponentScore(
                total_classes=ev.attendance_total_classes,
                attended_classes=ev.attendance_attended_classes,
                percentage=ev.attendance_percentage,
                weight=ev.attendance_weight,
                weighted_score=ev.attendance_weighted_score,
            ),
            exams=_component(ev, "exams"),
        ),
        final_grade=FinalGrade(
            percentage=ev.final_percentage,
            letter_grade=ev.letter_grade,
            gpa=ev.gpa,
        ),
        feedback=Feedback(
            strengths=ev.strengths,
            areas_for_improvement=ev.areas_for_improvement,
            overall_comments=ev.overall_comments,
            recommendations=ev.recommendations,
        ),
        status=ev.status,
        is_published=ev.is_published,
        published_at=ev.published_at,
        last_calculated=ev.last_calculated,
        created_at=ev.created_at,
        updated_at=ev.updated_at,
    )


@router.post("/evaluations", response_model=EvaluationPublic)
def create_or_update_evaluation(
    evaluation_in: EvaluationCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Create the student's evaluation for the course term (201), or recalculate
    and update the existing one (200).
    """
    try:
        ev, created = evaluation_service.create_or_update_evaluation(
            db, obj_in=evaluation_in
        )
    except GradebookError as e:
        raise to_http_exception(e)

    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return _evaluation_to_public(ev)


@router.get("/evaluations", response_model=List[EvaluationPublic])
def list_evaluations(
    db: Session = Depends(get_db),
    course_id: int | None = None,
    evaluated_by: int | None = None,
    semester: Semester | None = None,
    year: int | None = None,
    skip: int = 0,
    limit: int = 100,
):
    evaluations = evaluation_service.list_evaluations(
        db,
        course_id=course_id,
        evaluated_by=evaluated_by,
        semester=semester.value if semester else None,
        year=year,
        skip=skip,
        limit=limit,
    )
    return [_evaluation_to_public(ev) for ev in evaluations]


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationPublic)
def get_evaluation(ev: Evaluation = Depends(get_evaluation_or_404)):
    return _evaluation_to_public(ev)


@router.put("/evaluations/{evaluation_id}", response_model=EvaluationPublic)
def update_evaluation(
    evaluation_in: EvaluationUpdate,
    ev: Evaluation = Depends(get_evaluation_or_404),
    db: Session = Depends(get_db),
):
    """
    Update feedback and/or move the status forward; scores are recalculated.
    """
    try:
        ev = evaluation_service.update_evaluation(db, db_obj=ev, obj_in=evaluation_in)
    except GradebookError as e:
        raise to_http_exception(e)
    return _evaluation_to_public(ev)


@router.put("/evaluations/{evaluation_id}/publish", response_model=EvaluationPublic)
def publish_evaluation(
    ev: Evaluation = Depends(get_evaluation_or_404),
    db: Session = Depends(get_db),
):
    try:
        ev = evaluation_service.publish_evaluation(db, db_obj=ev)
    except GradebookError as e:
        raise to_http_exception(e)
    return _evaluation_to_public(ev)


@router.get("/students/{student_id}/evaluations", response_model=List[EvaluationPublic])
def list_student_evaluations(
    student_id: int,
    db: Session = Depends(get_db),
    course_id: int | None = None,
):
    """
    Student view: only published evaluations are returned.
    """
    evaluations = evaluation_service.list_published_for_student(
        db, student_id=student_id, course_id=course_id
    )
    return [_evaluation_to_public(ev) for ev in evaluations]
