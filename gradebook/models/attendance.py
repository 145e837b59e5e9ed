# gradebook/models/attendance.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from gradebook.db.base import Base

class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    # one mark per student per course per calendar day
    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_id", "date", name="uq_attendance_student_day"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)

    date = Column(Date, nullable=False)
    status = Column(String(10), nullable=False)  # Present / Absent / Late

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
