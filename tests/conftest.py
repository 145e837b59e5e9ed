"""
Shared fixtures: in-memory SQLite database, users, a course and helpers
for recording grades and attendance.
"""

import os
from datetime import date
from decimal import Decimal

# Must be set before gradebook.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RECALCULATE_ASYNC"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradebook import models  # noqa
from gradebook.db.base import Base
from gradebook.db.session import get_db
from gradebook.main import app
from gradebook.models.attendance import AttendanceRecord
from gradebook.models.course import Course
from gradebook.models.grade import Grade
from gradebook.models.user import User

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """API client whose requests share the test session."""
    def _get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_test_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _add_user(db, email, name, role):
    user = User(email=email, name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def teacher(db_session):
    return _add_user(db_session, "teacher@test.com", "Test Teacher", "teacher")


@pytest.fixture
def other_teacher(db_session):
    return _add_user(db_session, "other@test.com", "Other Teacher", "teacher")


@pytest.fixture
def admin(db_session):
    return _add_user(db_session, "admin@test.com", "Test Admin", "admin")


@pytest.fixture
def student(db_session):
    return _add_user(db_session, "student@test.com", "Test Student", "student")


@pytest.fixture
def second_student(db_session):
    return _add_user(db_session, "student2@test.com", "Second Student", "student")


@pytest.fixture
def course(db_session, teacher):
    """Fall 2024 course with the default 40/20/40 weights."""
    course = Course(
        teacher_id=teacher.id,
        name="Data Structures",
        subject_code="CS201",
        semester="Fall",
        year=2024,
        weight_assignments=40,
        weight_attendance=20,
        weight_exams=40,
    )
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


@pytest.fixture
def add_grade(db_session):
    """Insert a grade row directly, bypassing the service layer."""
    def _add(student, course, assignment_type, max_points, earned_points, name=None):
        grade = Grade(
            student_id=student.id,
            course_id=course.id,
            assignment_name=name or f"{assignment_type}-{max_points}-{earned_points}",
            assignment_type=assignment_type,
            max_points=Decimal(str(max_points)),
            earned_points=Decimal(str(earned_points)),
        )
        db_session.add(grade)
        db_session.commit()
        return grade

    return _add


@pytest.fixture
def add_attendance(db_session):
    """Insert attendance rows, one per consecutive day starting 2024-09-01."""
    def _add(student, course, statuses, start_day=1):
        for offset, status in enumerate(statuses):
            db_session.add(
                AttendanceRecord(
                    student_id=student.id,
                    course_id=course.id,
                    date=date(2024, 9, start_day + offset),
                    status=status,
                )
            )
        db_session.commit()

    return _add


@pytest.fixture
def graded_student(student, course, add_grade, add_attendance):
    """
    Student with assignments 180/200, attendance 18/20 and exams 85/100,
    which composes to 88.00 / B+ / 3.3 under 40/20/40.
    """
    add_grade(student, course, "assignment", 100, 95, name="HW1")
    add_grade(student, course, "project", 60, 50, name="Project")
    add_grade(student, course, "quiz", 40, 35, name="Quiz 1")
    add_grade(student, course, "participation", 10, 2, name="Participation")
    add_grade(student, course, "exam", 40, 35, name="Midterm")
    add_grade(student, course, "final", 60, 50, name="Final")
    add_attendance(
        student,
        course,
        ["Present"] * 16 + ["Late"] * 2 + ["Absent"] * 2,
    )
    return student
