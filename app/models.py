"""
Database models for the resource API.

This module defines SQLAlchemy models representing the data structure
of the application. Each model maps to a database table: ``users`` and
``tasks``, where ``tasks.user_id`` is a foreign key into ``users.id``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from app import db


class TaskStatus(str, Enum):
    """Enumeration of possible task statuses."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


USERNAME_MAX_LENGTH = 80
EMAIL_MAX_LENGTH = 120
TITLE_MAX_LENGTH = 255

# Largest value an INTEGER primary key column can hold.
MAX_ROW_ID = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_utc_iso(value: datetime | None) -> str | None:
    """
    Convert datetime to an ISO-8601 UTC string.

    SQLite commonly returns naive datetime values even when timezone-aware
    columns are declared. For API contracts, always normalize to UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


class User(db.Model):
    """
    User model referenced by tasks.

    Attributes:
        id: Unique identifier assigned by the database.
        username: Unique display name, case-sensitive.
        email: Unique email address.
        created_at: Timestamp when the user was created.
    """

    __tablename__ = "users"

    id: int = db.Column(db.Integer, primary_key=True, autoincrement=True)
    username: str = db.Column(
        db.String(USERNAME_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    email: str = db.Column(
        db.String(EMAIL_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the user to a dictionary representation.

        Returns:
            Dictionary containing all user fields.
        """
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "created_at": _to_utc_iso(self.created_at),
        }

    def __repr__(self) -> str:
        """Return string representation of the user."""
        return f"<User {self.id}: {self.username}>"


class Task(db.Model):
    """
    Task model owned by exactly one user.

    Attributes:
        id: Unique identifier for the task.
        title: Short title describing the task.
        description: Optional longer text.
        status: Current status (pending, in-progress, completed).
        user_id: Owning user, enforced by a foreign key.
        created_at: Timestamp when the task was created.
        updated_at: Timestamp when the task was last modified.
    """

    __tablename__ = "tasks"

    id: int = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title: str = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    description: str | None = db.Column(db.Text, nullable=True)
    status: str = db.Column(
        db.String(20),
        nullable=False,
        default=TaskStatus.PENDING.value
    )
    user_id: int = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True
    )
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow
    )

    # Loaded explicitly by the task service; never fetched implicitly.
    user = db.relationship("User", lazy="raise")

    def to_dict(self, include_user: bool = True) -> dict[str, Any]:
        """
        Convert the task to a dictionary representation.

        Args:
            include_user: Attach the serialized owner under ``user``. The
                owner must already be loaded on the instance.

        Returns:
            Dictionary containing all task fields.
        """
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "user_id": self.user_id,
            "created_at": _to_utc_iso(self.created_at),
            "updated_at": _to_utc_iso(self.updated_at),
        }
        if include_user:
            data["user"] = self.user.to_dict() if self.user is not None else None
        return data

    def __repr__(self) -> str:
        """Return string representation of the task."""
        return f"<Task {self.id}: {self.title}>"
