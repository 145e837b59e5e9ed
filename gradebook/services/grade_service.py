# gradebook/services/grade_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from gradebook.models.course import Course
from gradebook.models.grade import Grade
from gradebook.models.user import User
from gradebook.schemas.grade import GradeCreate, GradeUpdate
from gradebook.services.errors import InvalidRequest, RecordNotFound

logger = logging.getLogger(__name__)

# nullable columns an update may reset to None
_CLEARABLE = {"remarks", "graded_by"}


def get_student(db: Session, student_id: int) -> User:
    student: Optional[User] = db.get(User, student_id)
    if student is None:
        raise RecordNotFound(f"student {student_id} not found")
    if student.role != "student":
        raise InvalidRequest(f"user {student_id} is not a student")
    return student


def create_grade(
    db: Session,
    *,
    course: Course,
    obj_in: GradeCreate,
) -> Grade:
    """
    Record one scored item. earned <= max is already checked by GradeCreate.
    """
    get_student(db, obj_in.student_id)

    existing = (
        db.query(Grade)
        .filter(
            Grade.student_id == obj_in.student_id,
            Grade.course_id == course.id,
            Grade.assignment_name == obj_in.assignment_name,
        )
        .first()
    )
    if existing is not None:
        raise InvalidRequest(
            f"'{obj_in.assignment_name}' is already graded for student {obj_in.student_id}"
        )

    grade = Grade(
        student_id=obj_in.student_id,
        course_id=course.id,
        graded_by=obj_in.graded_by,
        assignment_name=obj_in.assignment_name,
        assignment_type=obj_in.assignment_type.value,
        max_points=obj_in.max_points,
        earned_points=obj_in.earned_points,
        remarks=obj_in.remarks,
    )
    db.add(grade)
    db.commit()
    db.refresh(grade)

    logger.info(
        f"Recorded grade {grade.id} ({grade.assignment_type}) "
        f"for student {grade.student_id} in course {course.id}"
    )
    return grade


def get_grade(db: Session, grade_id: int) -> Optional[Grade]:
    return db.get(Grade, grade_id)


def update_grade(db: Session, *, db_obj: Grade, obj_in: GradeUpdate) -> Grade:
    """
    Apply a partial edit. earned <= max is re-checked on the merged values.
    """
    changes = {
        field: value
        for field, value in obj_in.model_dump(exclude_unset=True).items()
        if value is not None or field in _CLEARABLE
    }

    max_points = changes.get("max_points", db_obj.max_points)
    earned_points = changes.get("earned_points", db_obj.earned_points)
    if earned_points > max_points:
        raise InvalidRequest("Earned points cannot exceed maximum points")

    new_name = changes.get("assignment_name")
    if new_name is not None and new_name != db_obj.assignment_name:
        clash = (
            db.query(Grade)
            .filter(
                Grade.student_id == db_obj.student_id,
                Grade.course_id == db_obj.course_id,
                Grade.assignment_name == new_name,
            )
            .first()
        )
        if clash is not None:
            raise InvalidRequest(
                f"'{new_name}' is already graded for student {db_obj.student_id}"
            )

    for field, value in changes.items():
        if field == "assignment_type":
            value = value.value
        setattr(db_obj, field, value)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)

    logger.info(f"Updated grade {db_obj.id} for student {db_obj.student_id}")
    return db_obj


def list_grades_for_course(
    db: Session,
    *,
    course_id: int,
    student_id: int | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Grade]:
    query = db.query(Grade).filter(Grade.course_id == course_id)
    if student_id is not None:
        query = query.filter(Grade.student_id == student_id)
    return (
        query.order_by(Grade.student_id.asc(), Grade.assignment_type.asc(), Grade.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def delete_grade(db: Session, *, db_obj: Grade) -> None:
    db.delete(db_obj)
    db.commit()
