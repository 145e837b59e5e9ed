# gradebook/api/v1/endpoints/courses.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradebook.api.deps import get_course_or_404, to_http_exception
from gradebook.db.session import get_db
from gradebook.models.course import Course
from gradebook.schemas.course import CourseWeightsPublic, CourseWeightsUpdate
from gradebook.schemas.evaluation import EvaluationComponents, EvaluationPreview
from gradebook.services import course_service, evaluation_service
from gradebook.services.errors import GradebookError
from gradebook.services.grade_service import get_student

router = APIRouter(prefix="/courses", tags=["courses"])


def _weights_public(course: Course, job_id: str | None = None) -> CourseWeightsPublic:
    return CourseWeightsPublic(
        course_id=course.id,
        assignments=course.weight_assignments,
        attendance=course.weight_attendance,
        exams=course.weight_exams,
        recalculation_job_id=job_id,
    )


@router.get("/{course_id}/weights", response_model=CourseWeightsPublic)
def get_weights(course: Course = Depends(get_course_or_404)):
    return _weights_public(course)


@router.put("/{course_id}/weights", response_model=CourseWeightsPublic)
def update_weights(
    weights_in: CourseWeightsUpdate,
    course: Course = Depends(get_course_or_404),
    db: Session = Depends(get_db),
):
    """
    Replace the evaluation weights (must sum to 100) and refresh the course's
    evaluations.
    """
    course, job_id = course_service.update_course_weights(
        db, course=course, obj_in=weights_in
    )
    return _weights_public(course, job_id)


@router.get(
    "/{course_id}/students/{student_id}/evaluation-preview",
    response_model=EvaluationPreview,
)
def preview_evaluation(
    student_id: int,
    course: Course = Depends(get_course_or_404),
    db: Session = Depends(get_db),
):
    """
    Compute the student's current standing in the course without saving it.
    """
    try:
        get_student(db, student_id)
    except GradebookError as e:
        raise to_http_exception(e)

    result = evaluation_service.calculate_for_student(
        db, student_id=student_id, course=course
    )
    return EvaluationPreview(
        student_id=student_id,
        course_id=course.id,
        components=EvaluationComponents(
            assignments=result.assignments,
            attendance=result.attendance,
            exams=result.exams,
        ),
        final_grade=result.final_grade,
    )
