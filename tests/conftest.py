"""Pytest fixtures and configuration for studyplanner tests."""

import os

# Keep the app's module-level engine off the developer's local database file
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
import uuid
from datetime import datetime, date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from studyplanner.database.database import Base, get_db
from studyplanner.database import models  # noqa: F401
from studyplanner.database.repository import AssignmentRepository
from studyplanner.database.schedule_template_repository import ScheduleTemplateRepository
from studyplanner.models.assignment import Assignment
from studyplanner.models.schedule_block import ScheduleBlock


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def assignment_repository(db_session: Session):
    """Create an AssignmentRepository instance for testing."""
    return AssignmentRepository(db_session)


@pytest.fixture
def schedule_repository(db_session: Session):
    """Create a ScheduleTemplateRepository instance for testing."""
    return ScheduleTemplateRepository(db_session)


@pytest.fixture
def test_student():
    return "Abigail"


@pytest.fixture
def sample_assignment_base(test_student):
    """Base assignment data for creating test assignments.

    Returns a dict with default assignment attributes that can be overridden.
    """
    now = datetime.utcnow()
    return {
        "id": str(uuid.uuid4()),
        "user_id": test_student,
        "title": "Test Assignment",
        "subject": "Math",
        "course_name": "Algebra 1",
        "due_date": None,
        "scheduled_date": None,
        "scheduled_block": None,
        "completion_status": "pending",
        "detected_family": None,
        "actual_estimated_minutes": 30,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def make_assignment(sample_assignment_base):
    """Factory for Assignment objects; keyword arguments override the base."""
    def _make(**overrides):
        data = {**sample_assignment_base, "id": str(uuid.uuid4()), **overrides}
        return Assignment(**data)
    return _make


@pytest.fixture
def make_block(test_student):
    """Factory for ScheduleBlock objects; keyword arguments override the defaults."""
    def _make(start_time: str, block_type: str = "assignment", **overrides):
        data = {
            "id": str(uuid.uuid4()),
            "student_name": test_student,
            "weekday": "Monday",
            "block_number": None,
            "start_time": start_time,
            "end_time": start_time,
            "subject": "",
            "block_name": None,
            "block_type": block_type,
            **overrides,
        }
        return ScheduleBlock(**data)
    return _make


@pytest.fixture
def monday():
    """A Monday (2025-01-06)."""
    return date(2025, 1, 6)


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from studyplanner.api.app import app, schedule_cache

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db
    schedule_cache.clear()

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
    schedule_cache.clear()
