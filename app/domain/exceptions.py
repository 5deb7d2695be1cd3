"""Domain exceptions for the agency platform.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class AgencyPlatformException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API exception handler."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(AgencyPlatformException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AgencyPlatformException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(AgencyPlatformException):
    """Raised when the caller's role lacks the required action."""

    def __init__(self, action: str | None = None, message: str = "Permission denied") -> None:
        """Initialize with optional action and message.

        Args:
            action: Action that was attempted (e.g. 'packages:create').
            message: Human-readable message; default used when action omitted.
        """
        details: dict[str, Any] = {}
        if action:
            message = f"Permission denied: {action}"
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(AgencyPlatformException):
    """Raised when a requested resource is not found.

    Also raised when the record exists but belongs to another agency, so
    callers cannot probe for records outside their tenant.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'invoice', 'package').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(AgencyPlatformException):
    """Raised when a state precondition is violated (e.g. deletion already scheduled)."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, "CONFLICT", details)


class ExternalProviderException(AgencyPlatformException):
    """Raised when the payment provider call fails.

    The message is always generic; the provider's own error is logged where
    it is caught and never copied into the response.
    """

    def __init__(self, message: str = "Payment provider request failed") -> None:
        super().__init__(message, "EXTERNAL_PROVIDER_ERROR")


class SqlNotConfiguredException(AgencyPlatformException):
    """Raised when an operation requires Postgres but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
