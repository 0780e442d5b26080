"""
Error taxonomy shared by the services and the HTTP adapter.

Every failure a service reports belongs to exactly one of three kinds:

- ``ValidationFailed``: malformed or constraint-violating input. Carries a
  map of field name to messages listing every violated field.
- ``NotFound``: the addressed resource does not exist.
- ``InternalFailure``: unexpected storage or infrastructure error. The
  message is safe to show to callers; the cause is chained, not exposed.

The adapter maps ``status_code`` straight onto the HTTP response.
"""

from typing import Any


class ServiceError(Exception):
    """Base class for all errors raised by the service layer."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationFailed(ServiceError):
    """Input rejected before any storage mutation committed."""

    status_code = 422

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("The given data was invalid.")
        self.errors = errors

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class NotFound(ServiceError):
    """Requested resource id does not exist."""

    status_code = 404


class InternalFailure(ServiceError):
    """Storage or infrastructure failure."""

    status_code = 500
