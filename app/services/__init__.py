"""
Service layer for the resource API.

- users: UserService (create, list, get by id)
- tasks: TaskService (create, list, get by id, partial update, delete)

Services raise the exceptions from ``app.errors``; they never build HTTP
responses.
"""

from app.services.tasks import TaskService
from app.services.users import UserService

__all__ = ["TaskService", "UserService"]
