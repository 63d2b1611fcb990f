"""Domain exceptions for the portfolio gateway.

Defines domain-level exceptions that represent business rule violations and
upstream failures. These exceptions are independent of the HTTP layer; the
presentation layer maps them to responses in app.core.exception_handlers.
"""

from typing import Any


class GatewayException(Exception):
    """Base exception for all gateway errors.

    Presentation layer maps these to HTTP responses using error_code. Only
    message is returned to the client; details are for logs.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. resource_id).
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


class UnauthorizedException(GatewayException):
    """Raised when a bearer credential is missing, malformed or invalid.

    The message is always the same so callers cannot tell which check failed.
    """

    def __init__(self) -> None:
        super().__init__("Unauthorized", "UNAUTHORIZED")


class ForbiddenException(GatewayException):
    """Raised when an authenticated caller touches another account's data."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, "FORBIDDEN")


class ValidationException(GatewayException):
    """Raised when a required request part is missing or out of range."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or form part that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(GatewayException):
    """Raised when a requested document or collection does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Kind of resource (e.g. 'user', 'project').
            resource_id: Identifier that was looked up.
            message: Client-facing message; defaults to '<Type> not found'.
        """
        super().__init__(
            message or f"{resource_type.capitalize()} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UpstreamException(GatewayException):
    """Raised when the identity provider, document store or blob store fails."""

    def __init__(
        self,
        message: str = "Upstream service failure",
        error_code: str = "UPSTREAM_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, details)


class RegistrationFailedException(GatewayException):
    """Raised when account provisioning fails at any step.

    Compensations for completed steps have already been attempted; which step
    failed is in details, never in the client message.
    """

    def __init__(self, step: str | None = None) -> None:
        details = {"step": step} if step else {}
        super().__init__("Error creating new user", "REGISTRATION_FAILED", details)


class InvalidTokenError(Exception):
    """ID token is malformed, expired, or fails signature/audience checks.

    Raised by identity providers; IdentityVerifier turns it into
    UnauthorizedException.
    """


class InvalidCredentialsException(GatewayException):
    """Raised when an email/password sign-in is rejected."""

    def __init__(self, reason: str | None = None) -> None:
        details = {"reason": reason} if reason else {}
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS", details)
