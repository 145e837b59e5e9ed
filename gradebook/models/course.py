# gradebook/models/course.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from gradebook.db.base import Base

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    subject_code = Column(String(10), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    semester = Column(String(10), nullable=False)  # Fall / Spring / Summer
    year = Column(Integer, nullable=False)

    # Evaluation weights, percentages that sum to 100
    weight_assignments = Column(Integer, nullable=False, default=40)
    weight_attendance = Column(Integer, nullable=False, default=20)
    weight_exams = Column(Integer, nullable=False, default=40)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
