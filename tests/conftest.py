"""
Shared fixtures for the Classroom Bot tests.
Every test runs against a fresh in-memory SQLite database.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AGENT_MEMORY_URL"] = "memory://"

import pytest

from database import init_db, get_engine, get_db_context, Base, Group, Student


@pytest.fixture(autouse=True)
def database():
    """Create all tables before each test and drop them afterwards."""
    init_db()
    yield
    Base.metadata.drop_all(bind=get_engine())


@pytest.fixture
def groups():
    """Groups 1-3, matching the bundled roster."""
    with get_db_context() as db:
        db.add_all([
            Group(id=1, group_name="Group 1"),
            Group(id=2, group_name="Group 2"),
            Group(id=3, group_name="Group 3"),
        ])
    return {1: "Group 1", 2: "Group 2", 3: "Group 3"}


@pytest.fixture
def make_student(groups):
    """Factory inserting a student directly, bypassing registration."""

    def _make_student(
        telegram_user_id,
        student_id,
        access_level="student",
        group_id=1,
        is_active=True,
        first_name=None,
        last_name=None,
        telegram_username=None
    ):
        with get_db_context() as db:
            student = Student(
                telegram_user_id=telegram_user_id,
                telegram_username=telegram_username,
                student_id=student_id,
                first_name=first_name,
                last_name=last_name,
                group_id=group_id,
                access_level=access_level,
                is_active=is_active,
            )
            db.add(student)
            db.flush()
            return student.id

    return _make_student
