"""
Task lifecycle: create, list, fetch, partial update and delete.

Every task returned by this service carries its owning user, joined in the
same query that loads the task.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.errors import InternalFailure, NotFound, ValidationFailed
from app.models import Task, utcnow
from app.pagination import Page, PageRequest
from app.repository import Repository
from app.services.users import UserService
from app.validation import (
    is_row_id,
    parse_int,
    validate_task_create,
    validate_task_update,
)

logger = logging.getLogger(__name__)


def parse_owner_filter(value: Any) -> int | None:
    """Return the owner id from a raw ``userId`` filter, or None if it names no possible row."""
    owner_id = parse_int(value)
    if owner_id is None or not is_row_id(owner_id):
        return None
    return owner_id


class TaskService:
    """Operations on tasks. Depends on UserService only to check owners exist."""

    def __init__(
        self,
        users: UserService | None = None,
        repository: Repository[Task] | None = None,
    ) -> None:
        self.users = users or UserService()
        self.repository = repository or Repository(Task, eager=(Task.user,))

    def create(self, data: Any) -> Task:
        """
        Validate and insert a new task owned by an existing user.

        Raises:
            ValidationFailed: On any rule violation, including an owner that
                disappeared between the check and the insert.
            InternalFailure: On any other storage error.
        """
        try:
            values = validate_task_create(data, user_exists=self.users.exists)
            task = self.repository.insert(**values)
        except IntegrityError as exc:
            logger.warning("Task insert rejected by constraint: %s", exc.orig)
            raise ValidationFailed({"userId": ["The selected userId is invalid."]}) from exc
        except SQLAlchemyError as exc:
            logger.exception("Error creating task")
            raise InternalFailure("Failed to create task") from exc

        logger.info("Created task with ID: %s", task.id)
        return task

    def list(self, page_request: PageRequest, user_id: Any = None) -> Page[Task]:
        """
        List tasks newest-first, optionally only those owned by ``user_id``.

        The owner filter applies to both the window and the total. A filter
        value that is not an integer matches no tasks.
        """
        filters: dict[str, Any] = {}
        if user_id is not None and user_id != "":
            owner_id = parse_owner_filter(user_id)
            if owner_id is None:
                return Page(items=[], total=0, request=page_request)
            filters["user_id"] = owner_id

        try:
            total = self.repository.count_where(**filters)
            tasks = self.repository.find_page(filters, page_request.offset, page_request.limit)
        except SQLAlchemyError as exc:
            logger.exception("Error fetching tasks")
            raise InternalFailure("Failed to fetch tasks") from exc
        return Page(items=tasks, total=total, request=page_request)

    def get_by_id(self, task_id: int) -> Task:
        return self._find(task_id, "Failed to fetch task")

    def update(self, task_id: int, data: Any) -> Task:
        """
        Apply a partial update.

        The task must exist before the payload is validated. Either every
        supplied field is applied or none is.

        Raises:
            NotFound: If the task does not exist.
            ValidationFailed: If any supplied field is invalid.
            InternalFailure: On storage errors.
        """
        task = self._find(task_id, "Failed to update task")
        changes = validate_task_update(data)
        if not changes:
            return task

        changes["updated_at"] = utcnow()
        try:
            task = self.repository.update(task, changes)
        except SQLAlchemyError as exc:
            logger.exception("Error updating task %s", task_id)
            raise InternalFailure("Failed to update task") from exc

        logger.info("Updated task %s", task_id)
        return task

    def delete(self, task_id: int) -> None:
        task = self._find(task_id, "Failed to delete task")
        try:
            self.repository.delete(task)
        except SQLAlchemyError as exc:
            logger.exception("Error deleting task %s", task_id)
            raise InternalFailure("Failed to delete task") from exc
        logger.info("Deleted task %s", task_id)

    def _find(self, task_id: int, failure_message: str) -> Task:
        if not is_row_id(task_id):
            raise NotFound("Task not found")
        try:
            task = self.repository.find_by_id(task_id)
        except SQLAlchemyError as exc:
            logger.exception("Error loading task %s", task_id)
            raise InternalFailure(failure_message) from exc
        if task is None:
            raise NotFound("Task not found")
        return task
