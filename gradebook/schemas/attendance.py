# gradebook/schemas/attendance.py
import datetime

from pydantic import BaseModel, field_validator

from gradebook.schemas.grading import AttendanceStatus


class AttendanceMark(BaseModel):
    student_id: int
    date: datetime.date
    status: AttendanceStatus

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value):
        # a timestamp marks the day it falls on
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


class AttendancePublic(BaseModel):
    id: int
    student_id: int
    course_id: int
    date: datetime.date
    status: AttendanceStatus

    model_config = {"from_attributes": True}
