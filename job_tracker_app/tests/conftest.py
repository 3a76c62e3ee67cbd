"""
Pytest configuration and shared fixtures for the Job Application Tracker tests.
"""
import os
import sys

# Settings are cached on first import, so the environment must be in place first
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-tokens-12345678901234567890")
os.environ.setdefault("ENCRYPTION_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import patch

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.main import app
from backend.models.db.database import get_db, Base
from backend.services.gemini_service import GeminiClient
from backend.services.reminder_scheduler import NotificationFeed, ReminderScheduler


class FakeTimer:
    """Stands in for threading.Timer; fire() runs the callback synchronously."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args, **self.kwargs)


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """A fresh in-memory SQLite database per test, shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def reminder_scheduler():
    """Scheduler backed by FakeTimer so no real threads are started."""
    return ReminderScheduler(NotificationFeed(), timer_factory=FakeTimer)


@pytest.fixture(scope="function")
def test_client(test_db_session, reminder_scheduler):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    original_scheduler = app.state.reminder_scheduler
    app.state.reminder_scheduler = reminder_scheduler
    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
    app.state.reminder_scheduler = original_scheduler


# User Fixtures
@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "email": "test@example.com",
        "password": "testpassword123",
    }


def register_and_login(client, user_data):
    response = client.post("/api/auth/register", json=user_data)
    assert response.status_code == 200
    user_id = response.json()["id"]

    response = client.post(
        "/api/auth/login",
        data={"username": user_data["email"], "password": user_data["password"]},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    return user_id, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def registered_user(test_client, test_user_data):
    """(user id, auth headers) of a freshly registered user."""
    return register_and_login(test_client, test_user_data)


@pytest.fixture
def auth_headers(registered_user):
    """Get authentication headers for API requests."""
    return registered_user[1]


@pytest.fixture
def other_user(test_client):
    """A second, unrelated user."""
    return register_and_login(test_client, {"email": "other@example.com", "password": "otherpassword123"})


# Application Test Data
@pytest.fixture
def sample_application():
    return {
        "company_name": "Tech Innovations Inc",
        "job_title": "Senior Python Developer",
        "status": "applied",
        "location": "Remote",
        "salary_min": 120000,
        "salary_max": 150000,
        "application_url": "https://example.com/job/123",
        "date_applied": "2025-01-15",
        "notes": "Applied through company website",
    }


@pytest.fixture
def sample_resume_text():
    return (
        "Jane Doe - Backend Engineer\n"
        "5 years building Python services with FastAPI and PostgreSQL.\n"
        "Led the migration of a payments platform to event-driven architecture."
    )


@pytest.fixture
def sample_job_description():
    return (
        "We are looking for a Backend Engineer to design and run high-throughput "
        "Python APIs. Experience with FastAPI, SQL and cloud infrastructure required."
    )


# Gemini Mock
@pytest.fixture
def mock_gemini():
    """Replaces the network call of every GeminiClient; configure return_value or side_effect."""
    with patch.object(GeminiClient, "generate") as mock_generate:
        mock_generate.return_value = "Generated text"
        yield mock_generate
