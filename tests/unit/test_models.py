"""
Unit tests for User and Task model logic.
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import Task, TaskStatus, User


pytestmark = pytest.mark.unit


def test_user_to_dict(db_session):
    user = User(username="alice", email="alice@example.com")
    db_session.session.add(user)
    db_session.session.commit()

    data = user.to_dict()

    assert set(data) == {"id", "username", "email", "created_at"}
    assert data["username"] == "alice"
    assert data["email"] == "alice@example.com"
    assert datetime.fromisoformat(data["created_at"]).utcoffset().total_seconds() == 0


def test_task_defaults_and_to_dict(db_session, sample_user):
    task = Task(title="Test Task", user_id=sample_user.id)
    db_session.session.add(task)
    db_session.session.commit()

    data = task.to_dict(include_user=False)

    assert data["title"] == "Test Task"
    assert data["description"] is None
    assert data["status"] == TaskStatus.PENDING.value
    assert data["user_id"] == sample_user.id
    assert data["created_at"] is not None
    assert data["updated_at"] is not None
    assert "user" not in data


def test_status_values_are_hyphenated():
    assert TaskStatus.values() == ["pending", "in-progress", "completed"]


def test_duplicate_username_violates_constraint(db_session, sample_user):
    db_session.session.add(User(username=sample_user.username, email="another@example.com"))

    with pytest.raises(IntegrityError):
        db_session.session.commit()


def test_task_requires_existing_user(db_session):
    """Foreign keys are enforced by the database itself."""
    db_session.session.add(Task(title="Orphan", user_id=999))

    with pytest.raises(IntegrityError):
        db_session.session.commit()
