"""
REST API endpoints for Users and Tasks.

This module translates HTTP requests into service calls and service
results or errors into JSON responses. All endpoints return JSON.

Endpoints:
    GET    /api/health          - Health check
    GET    /api/users           - List users (paginated)
    POST   /api/users           - Create a user
    GET    /api/users/<id>      - Get a single user by ID
    GET    /api/tasks           - List tasks (paginated, optional userId filter)
    POST   /api/tasks           - Create a task
    GET    /api/tasks/<id>      - Get a single task by ID
    PUT    /api/tasks/<id>      - Partially update a task
    DELETE /api/tasks/<id>      - Delete a task
"""

import logging
import os

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from app.errors import ServiceError, ValidationFailed
from app.pagination import Page, PageRequest
from app.services import TaskService, UserService

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def page_request_from_args() -> PageRequest:
    """Read ``page`` and ``limit`` from the query string, defaulting invalid values."""
    return PageRequest.from_params(
        request.args.get("page"),
        request.args.get("limit"),
        default_limit=current_app.config.get("PAGINATION_DEFAULT_LIMIT", 10),
        max_limit=current_app.config.get("PAGINATION_MAX_LIMIT"),
    )


def request_payload():
    """
    Decoded JSON body, or None when the body is absent or not JSON.

    Unparseable JSON is handled like a missing body: create reports the
    required fields and update changes nothing.
    """
    return request.get_json(silent=True)


def paginated_response(page: Page, serialize) -> tuple[Response, int]:
    return jsonify({
        "data": [serialize(item) for item in page.items],
        "pagination": page.metadata(),
    }), 200


def _user_service() -> UserService:
    return UserService()


def _task_service() -> TaskService:
    return TaskService(users=_user_service())


# -----------------------------------------------------------------------------
# API Endpoints
# -----------------------------------------------------------------------------

@api_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Health check endpoint for deployment verification."""
    return jsonify({
        "status": "healthy",
        "service": "resources",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
        "version": os.getenv("APP_VERSION", "unknown")
    }), 200


@api_bp.route("/users", methods=["GET"])
def list_users() -> tuple[Response, int]:
    """
    List users newest-first.

    Query Parameters:
        page: 1-based page number (default 1)
        limit: Page size (default 10)

    Returns:
        JSON response with ``data`` and ``pagination`` and 200 status code.
    """
    page_request = page_request_from_args()
    logger.info("GET /api/users - page=%s limit=%s", page_request.page, page_request.limit)

    page = _user_service().list(page_request)
    return paginated_response(page, lambda user: user.to_dict())


@api_bp.route("/users", methods=["POST"])
def create_user() -> tuple[Response, int]:
    """
    Create a new user.

    Request Body (JSON):
        username: Unique username (required)
        email: Unique, valid email address (required)

    Returns:
        JSON response with created user and 201 status code,
        or field errors and 422 if validation fails.
    """
    logger.info("POST /api/users - Creating new user")

    user = _user_service().create(request_payload())
    return jsonify(user.to_dict()), 201


@api_bp.route("/users/<int:user_id>", methods=["GET"])
def get_user(user_id: int) -> tuple[Response, int]:
    """Get a single user by ID, or 404 if it does not exist."""
    logger.info("GET /api/users/%s - Fetching user", user_id)

    user = _user_service().get_by_id(user_id)
    return jsonify(user.to_dict()), 200


@api_bp.route("/tasks", methods=["GET"])
def list_tasks() -> tuple[Response, int]:
    """
    List tasks newest-first, each with its owning user attached.

    Query Parameters:
        page: 1-based page number (default 1)
        limit: Page size (default 10)
        userId: Only tasks owned by this user (optional)

    Returns:
        JSON response with ``data`` and ``pagination`` and 200 status code.
    """
    page_request = page_request_from_args()
    user_id = request.args.get("userId")
    logger.info(
        "GET /api/tasks - page=%s limit=%s userId=%s",
        page_request.page, page_request.limit, user_id
    )

    page = _task_service().list(page_request, user_id=user_id)
    return paginated_response(page, lambda task: task.to_dict())


@api_bp.route("/tasks", methods=["POST"])
def create_task() -> tuple[Response, int]:
    """
    Create a new task.

    Request Body (JSON):
        title: Task title (required)
        description: Task description (optional)
        status: pending, in-progress or completed (optional, default: pending)
        userId: ID of an existing user (required)

    Returns:
        JSON response with created task and 201 status code,
        or field errors and 422 if validation fails.
    """
    logger.info("POST /api/tasks - Creating new task")

    task = _task_service().create(request_payload())
    return jsonify(task.to_dict()), 201


@api_bp.route("/tasks/<int:task_id>", methods=["GET"])
def get_task(task_id: int) -> tuple[Response, int]:
    """Get a single task by ID, or 404 if it does not exist."""
    logger.info("GET /api/tasks/%s - Fetching task", task_id)

    task = _task_service().get_by_id(task_id)
    return jsonify(task.to_dict()), 200


@api_bp.route("/tasks/<int:task_id>", methods=["PUT"])
def update_task(task_id: int) -> tuple[Response, int]:
    """
    Partially update an existing task.

    Request Body (JSON), any subset of:
        title: Task title
        description: Task description
        status: Task status

    Returns:
        JSON response with updated task and 200 status code,
        404 if the task does not exist, or 422 if validation fails.
    """
    logger.info("PUT /api/tasks/%s - Updating task", task_id)

    task = _task_service().update(task_id, request_payload())
    return jsonify(task.to_dict()), 200


@api_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
def delete_task(task_id: int) -> tuple[Response, int]:
    """Delete a task, or 404 if it does not exist."""
    logger.info("DELETE /api/tasks/%s - Deleting task", task_id)

    _task_service().delete(task_id)
    return jsonify({"message": "Task deleted successfully"}), 200


# -----------------------------------------------------------------------------
# Error Handlers
# -----------------------------------------------------------------------------

@api_bp.errorhandler(ServiceError)
def service_error(error: ServiceError) -> tuple[Response, int]:
    """Map the service error taxonomy onto status codes."""
    if isinstance(error, ValidationFailed):
        logger.warning("Validation failed: %s", error.errors)
    elif error.status_code < 500:
        logger.warning("%s %s - %s", request.method, request.path, error.message)
    return jsonify(error.to_dict()), error.status_code


@api_bp.app_errorhandler(404)
def not_found(error: Exception) -> tuple[Response, int]:
    """Handle 404 Not Found errors."""
    return jsonify({"error": "Resource not found"}), 404


@api_bp.app_errorhandler(405)
def method_not_allowed(error: Exception) -> tuple[Response, int]:
    """Handle 405 Method Not Allowed errors."""
    return jsonify({"error": "Method not allowed"}), 405


@api_bp.app_errorhandler(HTTPException)
def http_error(error: HTTPException) -> tuple[Response, int]:
    """Handle any other HTTP error raised by Flask or Werkzeug."""
    return jsonify({"error": error.description}), error.code or 500


@api_bp.app_errorhandler(Exception)
def internal_error(error: Exception) -> tuple[Response, int]:
    """Handle unexpected errors that escaped the service layer."""
    logger.exception("Internal server error: %s", error)
    return jsonify({"error": "Internal server error"}), 500
