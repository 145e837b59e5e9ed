# gradebook/services/attendance_service.py
from typing import List

from sqlalchemy.orm import Session

from gradebook.models.attendance import AttendanceRecord
from gradebook.models.course import Course
from gradebook.schemas.attendance import AttendanceMark
from gradebook.services.grade_service import get_student


def mark_attendance(
    db: Session,
    *,
    course: Course,
    obj_in: AttendanceMark,
) -> AttendanceRecord:
    """
    Upsert by (student, course, day): marking a day twice overwrites the status.
    """
    get_student(db, obj_in.student_id)

    record = (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.student_id == obj_in.student_id,
            AttendanceRecord.course_id == course.id,
            AttendanceRecord.date == obj_in.date,
        )
        .first()
    )
    if record is None:
        record = AttendanceRecord(
            student_id=obj_in.student_id,
            course_id=course.id,
            date=obj_in.date,
        )
    record.status = obj_in.status.value

    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def list_attendance_for_course(
    db: Session,
    *,
    course_id: int,
    student_id: int | None = None,
) -> List[AttendanceRecord]:
    query = db.query(AttendanceRecord).filter(AttendanceRecord.course_id == course_id)
    if student_id is not None:
        query = query.filter(AttendanceRecord.student_id == student_id)
    return query.order_by(AttendanceRecord.date.asc(), AttendanceRecord.student_id.asc()).all()
