"""User lifecycle: create, list and fetch by id."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.errors import InternalFailure, NotFound, ValidationFailed
from app.models import User
from app.pagination import Page, PageRequest
from app.repository import Repository
from app.validation import is_row_id, validate_user_create

logger = logging.getLogger(__name__)

UNIQUE_USER_FIELDS = ("username", "email")


class UserService:
    """Operations on users. Users are never updated or deleted."""

    def __init__(self, repository: Repository[User] | None = None) -> None:
        self.repository = repository or Repository(User)

    def create(self, data: Any) -> User:
        """
        Validate and insert a new user.

        Raises:
            ValidationFailed: On any rule violation, including a duplicate
                username or email that only the database caught.
            InternalFailure: On any other storage error.
        """
        try:
            values = validate_user_create(
                data,
                username_taken=lambda username: self.repository.exists_where(username=username),
                email_taken=lambda email: self.repository.exists_where(email=email),
            )
            user = self.repository.insert(**values)
        except IntegrityError as exc:
            logger.warning("User insert rejected by constraint: %s", exc.orig)
            raise _duplicate_user_failure(exc) from exc
        except SQLAlchemyError as exc:
            logger.exception("Error creating user")
            raise InternalFailure("Failed to create user") from exc

        logger.info("Created user with ID: %s", user.id)
        return user

    def list(self, page_request: PageRequest) -> Page[User]:
        try:
            total = self.repository.count_where()
            users = self.repository.find_page({}, page_request.offset, page_request.limit)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching users")
            raise InternalFailure("Failed to fetch users") from exc
        return Page(items=users, total=total, request=page_request)

    def get_by_id(self, user_id: int) -> User:
        if not is_row_id(user_id):
            raise NotFound("User not found")
        try:
            user = self.repository.find_by_id(user_id)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching user %s", user_id)
            raise InternalFailure("Failed to fetch user") from exc
        if user is None:
            raise NotFound("User not found")
        return user

    def exists(self, user_id: int) -> bool:
        """Referential check used when a task names its owner."""
        if not is_row_id(user_id):
            return False
        return self.repository.exists_where(id=user_id)


def _duplicate_user_failure(exc: IntegrityError) -> ValidationFailed:
    """Map a unique-constraint violation onto the colliding field(s)."""
    detail = str(exc.orig)
    fields = [name for name in UNIQUE_USER_FIELDS if name in detail] or list(UNIQUE_USER_FIELDS)
    return ValidationFailed({name: [f"The {name} has already been taken."] for name in fields})
