# gradebook/models/grade.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    Numeric,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from gradebook.db.base import Base

class Grade(Base):
    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_id", "assignment_name", name="uq_grade_assignment"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    graded_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    assignment_name = Column(String(100), nullable=False)
    # exam / quiz / assignment / project / participation / final
    assignment_type = Column(String(20), nullable=False, index=True)

    max_points = Column(Numeric(8, 2), nullable=False)
    earned_points = Column(Numeric(8, 2), nullable=False)

    remarks = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
