"""
Recalculation tasks for the worker.
Executed by RQ workers after a course's evaluation weights change.
"""

import logging
from gradebook.db.session import SessionLocal
from gradebook.services.errors import GradebookError
from gradebook.services.evaluation_service import recalculate_course

logger = logging.getLogger(__name__)


def recalculate_course_task(course_id: int) -> dict:
    """
    Refresh every evaluation of a course with the current weights and records.

    Args:
        course_id: course whose evaluations are recalculated

    Returns:
        Dictionary with the outcome; expected failures are reported here
        rather than raised into the worker.
    """
    db = SessionLocal()
    try:
        logger.info(f"Starting recalculation for course {course_id}")

        count = recalculate_course(db, course_id)

        logger.info(f"Recalculated {count} evaluations for course {course_id}")
        return {
            "status": "success",
            "course_id": course_id,
            "recalculated": count,
        }

    except GradebookError as e:
        logger.error(f"Recalculation failed for course {course_id}: {e}")
        return {
            "status": "error",
            "course_id": course_id,
            "error": str(e),
        }

    except Exception as e:
        db.rollback()
        logger.error(
            f"Unexpected error recalculating course {course_id}: {e}",
            exc_info=True,
        )
        return {
            "status": "error",
            "course_id": course_id,
            "error": str(e),
        }

    finally:
        db.close()
