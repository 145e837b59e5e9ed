# gradebook/api/deps.py
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from gradebook.db.session import get_db
from gradebook.models.course import Course
from gradebook.models.evaluation import Evaluation
from gradebook.services import evaluation_service
from gradebook.services.errors import (
    GradebookError,
    InvalidRequest,
    PermissionDenied,
    RecordNotFound,
)

_STATUS_BY_ERROR = {
    RecordNotFound: status.HTTP_404_NOT_FOUND,
    InvalidRequest: status.HTTP_400_BAD_REQUEST,
    PermissionDenied: status.HTTP_403_FORBIDDEN,
}


def to_http_exception(exc: GradebookError) -> HTTPException:
    code = _STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=str(exc))


def get_course_or_404(course_id: int, db: Session = Depends(get_db)) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def get_evaluation_or_404(evaluation_id: int, db: Session = Depends(get_db)) -> Evaluation:
    evaluation = evaluation_service.get_evaluation(db, evaluation_id)
    if evaluation is None:
        raise HTTPException(status_code=404, detail="Evaluation not found")
    return evaluation
