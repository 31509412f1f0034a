"""Domain exceptions for the identity service.

Defines domain-level exceptions that represent business rule violations
or upstream failures. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.

Messages are short titles; never put signing keys, SMS codes or identity
card numbers in message or details.
"""

from typing import Any


class IdentityServiceException(Exception):
    """Base exception for all identity service errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable short title.
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
            message: Human-readable short title.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Structured error payload for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(IdentityServiceException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(IdentityServiceException):
    """Raised when authentication fails (e.g. invalid or expired access token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(IdentityServiceException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str | int) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class PhoneAlreadyBoundException(IdentityServiceException):
    """Raised when a phone number is already bound to a different user."""

    def __init__(self) -> None:
        super().__init__(
            "Phone number is already bound to another user",
            "PHONE_ALREADY_BOUND",
        )


class PhoneNotVerifiedException(IdentityServiceException):
    """Raised when registration is completed before the phone number was verified."""

    def __init__(self) -> None:
        super().__init__(
            "Phone number has not been verified for this user",
            "PHONE_NOT_VERIFIED",
        )


class UpstreamServiceException(IdentityServiceException):
    """Raised when an external provider (WeChat, SMS, Redis) fails or returns an error."""

    def __init__(
        self,
        service: str,
        message: str = "Upstream service error",
        error_code: str = "UPSTREAM_ERROR",
    ) -> None:
        """Initialize with the failing service name.

        Args:
            service: Upstream name (e.g. 'wechat', 'sms', 'cache').
            message: Short title for the failure.
            error_code: Machine-readable code.
        """
        super().__init__(message, error_code, {"service": service})


class SmsDeliveryFailedException(UpstreamServiceException):
    """Raised when the SMS provider did not accept the verification code."""

    def __init__(self) -> None:
        super().__init__("sms", "SMS service error", "SMS_DELIVERY_FAILED")


class SqlNotConfiguredException(IdentityServiceException):
    """Raised when an operation requires the database but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
