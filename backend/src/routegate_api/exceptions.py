"""Domain-specific exceptions for the route access API.

These exceptions provide a clean separation between store/service-layer
errors and HTTP responses. Access decisions never raise them to callers:
the access service converts every failure into a negative decision.
"""

from typing import Any


class RouteGateError(Exception):
    """Base exception for all route access errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Data Access Errors (503)
# =============================================================================


class DataAccessError(RouteGateError):
    """Raised when a store is unreachable, a query fails or a read times out."""

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        message = "Data access failed"
        details: dict[str, Any] = {"operation": operation}
        if cause is not None:
            details["cause"] = type(cause).__name__
        super().__init__(message, details)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(RouteGateError):
    """Base class for resource not found errors."""

    pass


class RouteNotFoundError(NotFoundError):
    """Raised when a route cannot be found."""

    def __init__(self, route_id: str | None = None, pathname: str | None = None) -> None:
        message = "Route not found"
        details: dict[str, Any] = {}
        if route_id:
            details["route_id"] = str(route_id)
        if pathname:
            details["pathname"] = pathname
        super().__init__(message, details)


class RoleNotFoundError(NotFoundError):
    """Raised when a role cannot be found."""

    def __init__(self, role_id: str | None = None, role_name: str | None = None) -> None:
        message = "Role not found"
        details: dict[str, Any] = {}
        if role_id:
            details["role_id"] = str(role_id)
        if role_name:
            details["role_name"] = role_name
        super().__init__(message, details)


class AssignmentNotFoundError(NotFoundError):
    """Raised when a user-role assignment cannot be found."""

    def __init__(self, assignment_id: str | None = None) -> None:
        details = {"assignment_id": str(assignment_id)} if assignment_id else {}
        super().__init__("Role assignment not found", details)


class OverrideNotFoundError(NotFoundError):
    """Raised when an individual route permission cannot be found."""

    def __init__(self, override_id: str | None = None) -> None:
        details = {"override_id": str(override_id)} if override_id else {}
        super().__init__("Route permission not found", details)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(RouteGateError):
    """Base class for resource conflict errors."""

    pass


class CannotModifySystemRoleError(ConflictError):
    """Raised when trying to modify a system role."""

    def __init__(self, role_name: str | None = None) -> None:
        message = "Cannot modify system role"
        details = {"role_name": role_name} if role_name else {}
        super().__init__(message, details)


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(RouteGateError):
    """Base class for validation errors."""

    pass


class UnsupportedLanguageError(ValidationError):
    """Raised when a language code is missing or not supported."""

    def __init__(self, language_code: str | None = None) -> None:
        message = "Unsupported language code"
        details = {"language_code": language_code} if language_code is not None else {}
        super().__init__(message, details)
