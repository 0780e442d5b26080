"""
Shared pytest fixtures for the resource API test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure
test isolation by providing fresh data for each test.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Fixture dependencies
- Test data factories for users and tasks
- Database setup/teardown
- Test client creation
"""

import os
import pytest
from typing import Any
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"

from app import create_app, db
from app.models import Task, TaskStatus, User


# Initialize Faker for generating test data
fake = Faker()


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    """
    Create application instance for the test session.

    The 'session' scope means the same app instance is reused
    for all tests, improving performance.

    Yields:
        Flask application instance configured for testing.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for making HTTP requests.

    Args:
        app: Flask application fixture.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Create a fresh database for each test.

    1. Creating all tables before the test
    2. Providing a clean database session
    3. Dropping all tables after the test

    Args:
        app: Flask application fixture.

    Yields:
        Flask-SQLAlchemy extension bound to the app context.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def user_factory(db_session):
    """
    Factory fixture for creating User rows directly in the database.

    Example:
        def test_something(user_factory):
            user = user_factory(username="alice")
            assert user.id is not None
    """

    def _create_user(username: str | None = None, email: str | None = None) -> User:
        user = User(
            username=username or fake.unique.user_name(),
            email=email or fake.unique.email()
        )
        db_session.session.add(user)
        db_session.session.commit()
        return user

    return _create_user


@pytest.fixture
def sample_user(user_factory) -> User:
    """A single user that owns the tasks built by ``task_factory``."""
    return user_factory(username="testuser", email="test@example.com")


@pytest.fixture
def task_factory(db_session, sample_user):
    """
    Factory fixture for creating Task rows directly in the database.

    Tasks belong to ``sample_user`` unless an ``owner`` is given.
    """

    def _create_task(
        title: str | None = None,
        description: str | None = None,
        status: str = TaskStatus.PENDING.value,
        owner: User | None = None
    ) -> Task:
        task = Task(
            title=title or fake.sentence(nb_words=4),
            description=description,
            status=status,
            user_id=(owner or sample_user).id
        )
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task


@pytest.fixture
def sample_task(task_factory) -> Task:
    """Create a single sample task for tests that need one task."""
    return task_factory(
        title="Sample Task",
        description="This is a sample task for testing",
        status=TaskStatus.PENDING.value
    )


@pytest.fixture
def multiple_tasks(task_factory, user_factory) -> list[Task]:
    """
    Create tasks spread across two owners and all statuses.

    Returns:
        Three tasks for ``sample_user`` followed by one task for another user.
    """
    other_user = user_factory(username="otheruser", email="other@example.com")
    return [
        task_factory(title="Pending Task", status=TaskStatus.PENDING.value),
        task_factory(title="In Progress Task", status=TaskStatus.IN_PROGRESS.value),
        task_factory(title="Completed Task", status=TaskStatus.COMPLETED.value),
        task_factory(title="Other User Task", owner=other_user),
    ]


# -----------------------------------------------------------------------------
# Test Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def valid_user_data() -> dict[str, str]:
    """Provide valid user data for POST requests."""
    return {"username": "newuser", "email": "newuser@example.com"}


@pytest.fixture
def valid_task_data(sample_user) -> dict[str, Any]:
    """Provide valid task data with every field for POST requests."""
    return {
        "title": "Test Task",
        "description": "Test Description",
        "status": TaskStatus.PENDING.value,
        "userId": sample_user.id,
    }


@pytest.fixture
def minimal_task_data(sample_user) -> dict[str, Any]:
    """Provide minimal valid task data (only required fields)."""
    return {"title": "Minimal Task", "userId": sample_user.id}


# -----------------------------------------------------------------------------
# API Helper Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def api_headers() -> dict[str, str]:
    """
    Provide common headers for API requests.

    Returns:
        Dictionary of HTTP headers.
    """
    return {
        "Content-Type": "application/json",
        "Accept": "application/json"
    }
