# gradebook/models/evaluation.py
from sqlalchemy import (
    Boolean,
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

class Evaluation(Base):
    __tablename__ = "evaluations"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_id", "semester", "year", name="uq_evaluation_term"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    evaluated_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    semester = Column(String(10), nullable=False)
    year = Column(Integer, nullable=False)

    # Assignments component
    assignments_total_possible = Column(Numeric(10, 2), nullable=False, default=0)
    assignments_total_earned = Column(Numeric(10, 2), nullable=False, default=0)
    assignments_percentage = Column(Numeric(6, 2), nullable=False, default=0)
    assignments_weight = Column(Integer, nullable=False, default=40)
    assignments_weighted_score = Column(Numeric(6, 2), nullable=False, default=0)

    # Attendance component
    attendance_total_classes = Column(Integer, nullable=False, default=0)
    attendance_attended_classes = Column(Integer, nullable=False, default=0)
    attendance_percentage = Column(Numeric(6, 2), nullable=False, default=0)
    attendance_weight = Column(Integer, nullable=False, default=20)
    attendance_weighted_score = Column(Numeric(6, 2), nullable=False, default=0)

    # Exams component
    exams_total_possible = Column(Numeric(10, 2), nullable=False, default=0)
    exams_total_earned = Column(Numeric(10, 2), nullable=False, default=0)
    exams_percentage = Column(Numeric(6, 2), nullable=False, default=0)
    exams_weight = Column(Integer, nullable=False, default=40)
    exams_weighted_score = Column(Numeric(6, 2), nullable=False, default=0)

    # Final grade
    final_percentage = Column(Numeric(6, 2), nullable=False, default=0)
    letter_grade = Column(String(2), nullable=False, default="F")
    gpa = Column(Numeric(2, 1), nullable=False, default=0)

    # Teacher feedback, opaque to the calculation
    strengths = Column(Text, nullable=True)
    areas_for_improvement = Column(Text, nullable=True)
    overall_comments = Column(Text, nullable=True)
    recommendations = Column(Text, nullable=True)

    # draft / in_progress / completed / published
    status = Column(String(20), nullable=False, default="draft", index=True)
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    last_calculated = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
