"""
Input validation for write operations.

Each ``validate_*`` function takes the decoded JSON body and returns a
normalized dictionary ready to be written, or raises ``ValidationFailed``
listing every violated field (not just the first one). Checks that need
storage (uniqueness, owner existence) are passed in as callables so the
rules stay independent of the database session.

Normalization: string values are stripped of surrounding whitespace and an
empty ``description`` is stored as ``None``.
"""

from typing import Any, Callable

from email_validator import EmailNotValidError, validate_email

from app.errors import ValidationFailed
from app.models import (
    EMAIL_MAX_LENGTH,
    MAX_ROW_ID,
    TITLE_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    TaskStatus,
)

TASK_UPDATABLE_FIELDS = ("title", "description", "status")


class FieldErrors:
    """Collects error messages per field."""

    def __init__(self) -> None:
        self._errors: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def raise_if_any(self) -> None:
        if self._errors:
            raise ValidationFailed(dict(self._errors))


def parse_int(value: Any) -> int | None:
    """Return *value* as an int when it is an int or a string of ASCII digits."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return None


def is_row_id(value: int) -> bool:
    """True when *value* fits an INTEGER primary key."""
    return 0 < value <= MAX_ROW_ID


def as_payload(data: Any) -> dict[str, Any]:
    """Treat a missing body as empty; reject anything that is not an object."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed({"body": ["The request body must be a JSON object."]})
    return data


# -----------------------------------------------------------------------------
# Field Rules
# -----------------------------------------------------------------------------

def _required_string(
    data: dict[str, Any], field: str, errors: FieldErrors, max_length: int
) -> str | None:
    value = data.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.add(field, f"The {field} field is required.")
        return None
    if not isinstance(value, str):
        errors.add(field, f"The {field} field must be a string.")
        return None
    value = value.strip()
    if len(value) > max_length:
        errors.add(field, f"The {field} field must not be greater than {max_length} characters.")
        return None
    return value


def _optional_text(data: dict[str, Any], field: str, errors: FieldErrors) -> str | None:
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        errors.add(field, f"The {field} field must be a string.")
        return None
    return value.strip() or None


def _status(data: dict[str, Any], errors: FieldErrors) -> str | None:
    value = data.get("status")
    if value not in TaskStatus.values():
        errors.add("status", f"The selected status is invalid. Must be one of: {TaskStatus.values()}")
        return None
    return value


def _email(data: dict[str, Any], errors: FieldErrors) -> str | None:
    value = _required_string(data, "email", errors, EMAIL_MAX_LENGTH)
    if value is None:
        return None
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        errors.add("email", "The email field must be a valid email address.")
        return None
    return value


def _user_reference(data: dict[str, Any], errors: FieldErrors) -> int | None:
    value = data.get("userId")
    if value is None or value == "":
        errors.add("userId", "The userId field is required.")
        return None
    user_id = parse_int(value)
    if user_id is None:
        errors.add("userId", "The userId field must be an integer.")
        return None
    if not is_row_id(user_id):
        errors.add("userId", "The selected userId is invalid.")
        return None
    return user_id


# -----------------------------------------------------------------------------
# Operation Validators
# -----------------------------------------------------------------------------

def validate_user_create(
    data: Any,
    *,
    username_taken: Callable[[str], bool],
    email_taken: Callable[[str], bool],
) -> dict[str, Any]:
    """
    Validate a user creation payload.

    Args:
        data: Decoded JSON body.
        username_taken: Returns True when a user already has the username.
        email_taken: Returns True when a user already has the email.

    Returns:
        Dictionary with ``username`` and ``email``.

    Raises:
        ValidationFailed: If any field is missing, malformed or taken.
    """
    data = as_payload(data)
    errors = FieldErrors()

    username = _required_string(data, "username", errors, USERNAME_MAX_LENGTH)
    email = _email(data, errors)

    if username is not None and username_taken(username):
        errors.add("username", "The username has already been taken.")
    if email is not None and email_taken(email):
        errors.add("email", "The email has already been taken.")

    errors.raise_if_any()
    return {"username": username, "email": email}


def validate_task_create(data: Any, *, user_exists: Callable[[int], bool]) -> dict[str, Any]:
    """
    Validate a task creation payload.

    ``status`` may be omitted and defaults to pending; ``description`` may be
    omitted or null.

    Args:
        data: Decoded JSON body.
        user_exists: Returns True when a user with the given id exists.

    Returns:
        Dictionary with ``title``, ``description``, ``status`` and ``user_id``.

    Raises:
        ValidationFailed: If any field is missing, malformed, or the
            referenced user does not exist.
    """
    data = as_payload(data)
    errors = FieldErrors()

    title = _required_string(data, "title", errors, TITLE_MAX_LENGTH)
    description = _optional_text(data, "description", errors)
    status = TaskStatus.PENDING.value
    if "status" in data:
        status = _status(data, errors)
    user_id = _user_reference(data, errors)
    if user_id is not None and not user_exists(user_id):
        errors.add("userId", "The selected userId is invalid.")

    errors.raise_if_any()
    return {
        "title": title,
        "description": description,
        "status": status,
        "user_id": user_id,
    }


def validate_task_update(data: Any) -> dict[str, Any]:
    """
    Validate a partial task update.

    Only the supplied fields among title, description and status are
    checked and returned; ``userId`` and unknown keys are ignored.

    Raises:
        ValidationFailed: If any supplied field is invalid.
    """
    data = as_payload(data)
    errors = FieldErrors()
    changes: dict[str, Any] = {}

    if "title" in data:
        changes["title"] = _required_string(data, "title", errors, TITLE_MAX_LENGTH)
    if "description" in data:
        changes["description"] = _optional_text(data, "description", errors)
    if "status" in data:
        changes["status"] = _status(data, errors)

    errors.raise_if_any()
    return changes
