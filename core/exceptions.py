"""Custom exception classes for the application.

Every error the API reports to a client is an `AppException` subclass
carrying its HTTP status code. The record store never raises these; the
API layer does, after inspecting what the store returned.
"""

from typing import Optional, Any, Dict, List


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input fails validation.

    `fields` enumerates the offending field names so clients can point at
    them.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        fields: Optional[List[str]] = None,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        names = list(fields or [])
        if field and field not in names:
            names.insert(0, field)
        details: Dict[str, Any] = {"fields": names} if names else {}
        if errors:
            details["validation_errors"] = errors
        super().__init__(message, status_code=400, details=details)


class DuplicateError(ValidationError):
    """Raised when a unique user attribute (username, email) is already taken."""

    def __init__(self, message: str, field: str):
        super().__init__(message, field=field)


class AuthenticationError(AppException):
    """Raised when a request has no valid session or credentials are wrong."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, status_code=401)


class AuthorizationError(AppException):
    """Raised when the session user does not own the target record."""

    def __init__(self, resource: str, action: str):
        message = f"Not authorized to {action} this {resource.lower()}"
        super().__init__(message, status_code=403, details={"resource": resource, "action": action})


class NotFoundError(AppException):
    """Exception raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class UpstreamError(AppException):
    """Raised by meal generators when the external provider fails.

    `MealPlanService` absorbs it and falls back to a sample recipe, so it
    should never reach the exception handlers.
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        details = {"provider": provider} if provider else {}
        super().__init__(message, status_code=502, details=details)


class DatabaseError(AppException):
    """Exception raised when database operations fail."""

    def __init__(self, message: str, operation: Optional[str] = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, status_code=500, details=details)


class ConfigurationError(AppException):
    """Exception raised when application configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, status_code=500, details=details)
