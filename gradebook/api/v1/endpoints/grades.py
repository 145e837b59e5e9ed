# gradebook/api/v1/endpoints/grades.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from gradebook.api.deps import get_course_or_404, to_http_exception
from gradebook.db.session import get_db
from gradebook.models.course import Course
from gradebook.models.grade import Grade
from gradebook.schemas.grade import GradeCreate, GradePublic, GradeUpdate
from gradebook.services import grade_service
from gradebook.services.errors import GradebookError

router = APIRouter(tags=["grades"])


@router.post(
    "/courses/{course_id}/grades",
    response_model=GradePublic,
    status_code=status.HTTP_201_CREATED,
)
def create_grade(
    grade_in: GradeCreate,
    course: Course = Depends(get_course_or_404),
    db: Session = Depends(get_db),
):
    try:
        return grade_service.create_grade(db, course=course, obj_in=grade_in)
    except GradebookError as e:
        raise to_http_exception(e)


@router.get("/courses/{course_id}/grades", response_model=List[GradePublic])
def list_grades(
    course: Course = Depends(get_course_or_404),
    db: Session = Depends(get_db),
    student_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
):
    return grade_service.list_grades_for_course(
        db, course_id=course.id, student_id=student_id, skip=skip, limit=limit
    )


def _get_grade_or_404(grade_id: int, db: Session) -> Grade:
    grade = grade_service.get_grade(db, grade_id)
    if grade is None:
        raise HTTPException(status_code=404, detail="Grade not found")
    return grade


@router.get("/grades/{grade_id}", response_model=GradePublic)
def read_grade(grade_id: int, db: Session = Depends(get_db)):
    return _get_grade_or_404(grade_id, db)


@router.put("/grades/{grade_id}", response_model=GradePublic)
def update_grade(
    grade_id: int,
    grade_in: GradeUpdate,
    db: Session = Depends(get_db),
):
    grade = _get_grade_or_404(grade_id, db)
    try:
        return grade_service.update_grade(db, db_obj=grade, obj_in=grade_in)
    except GradebookError as e:
        raise to_http_exception(e)


@router.delete("/grades/{grade_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_grade(grade_id: int, db: Session = Depends(get_db)):
    grade = _get_grade_or_404(grade_id, db)
    grade_service.delete_grade(db, db_obj=grade)
