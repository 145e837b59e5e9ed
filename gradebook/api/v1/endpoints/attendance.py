# gradebook/api/v1/endpoints/attendance.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradebook.api.deps import get_course_or_404, to_http_exception
from gradebook.db.session import get_db
from gradebook.models.course import Course
from gradebook.schemas.attendance import AttendanceMark, AttendancePublic
from gradebook.services import attendance_service
from gradebook.services.errors import GradebookError

router = APIRouter(prefix="/courses/{course_id}/attendance", tags=["attendance"])


@router.post("", response_model=AttendancePublic)
def mark_attendance(
    mark_in: AttendanceMark,
    course: Course = Depends(get_course_or_404),
    db: Session = Depends(get_db),
):
    """
    Mark one student for one day. Marking the same day again replaces the status.
    """
    try:
        return attendance_service.mark_attendance(db, course=course, obj_in=mark_in)
    except GradebookError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[AttendancePublic])
def list_attendance(
    course: Course = Depends(get_course_or_404),
    db: Session = Depends(get_db),
    student_id: int | None = None,
):
    return attendance_service.list_attendance_for_course(
        db, course_id=course.id, student_id=student_id
    )
