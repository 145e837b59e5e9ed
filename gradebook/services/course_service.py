# gradebook/services/course_service.py
import logging

from sqlalchemy.orm import Session

from gradebook.core.config import settings
from gradebook.models.course import Course
from gradebook.schemas.course import CourseWeightsUpdate
from gradebook.services import evaluation_service
from gradebook.workers.queue import enqueue_recalculation_task

logger = logging.getLogger(__name__)


def update_course_weights(
    db: Session,
    *,
    course: Course,
    obj_in: CourseWeightsUpdate,
) -> tuple[Course, str | None]:
    """
    Replace the course weights and refresh the course's evaluations.

    With RECALCULATE_ASYNC the refresh is handed to the worker and the job id is
    returned; otherwise it runs here and the job id is None.
    """
    course.weight_assignments = obj_in.assignments
    course.weight_attendance = obj_in.attendance
    course.weight_exams = obj_in.exams

    db.add(course)
    db.commit()
    db.refresh(course)

    if settings.RECALCULATE_ASYNC:
        job_id = enqueue_recalculation_task(course.id)
        logger.info(f"Queued recalculation job {job_id} for course {course.id}")
        return course, job_id

    count = evaluation_service.recalculate_course(db, course.id)
    logger.info(f"Recalculated {count} evaluations for course {course.id}")
    return course, None
