"""Domain exceptions for the real-estate core.

Defines domain-level exceptions that represent business rule violations and
collaborator failures. Services catch them at the facade boundary and turn
them into ServiceResult envelopes; ConfigurationException is the exception
to that rule and is always fatal.
"""

from typing import Any


class RealEstateException(Exception):
    """Base exception for all real-estate core errors.

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
        """Return a serializable representation (error, message, details)."""
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(RealEstateException):
    """Raised when input validation fails (field errors or a single bad field)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        """Initialize with message, optional field name and field-level errors.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            errors: Optional list of "<field>: <message>" strings.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = list(errors)
        super().__init__(message, "VALIDATION_ERROR", details)

    @property
    def errors(self) -> list[str]:
        if "errors" in self.details:
            return list(self.details["errors"])
        if "field" in self.details:
            return [f"{self.details['field']}: {self.message}"]
        return [self.message]


class AuthenticationException(RealEstateException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(RealEstateException):
    """Raised when the requester lacks the role required for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'user').
            action: Optional action that was attempted (e.g. 'change_role').
            message: Human-readable message; used as-is when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(RealEstateException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Display name of the resource (e.g. 'Owner').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateEmailException(RealEstateException):
    """Raised when creating or updating a user to an email already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(
            "Email is already registered",
            "DUPLICATE_EMAIL",
            {"email": email},
        )


class ConfigurationException(RealEstateException):
    """Raised at construction time when required configuration is missing.

    Never converted into a ServiceResult: it is a startup failure.
    """

    def __init__(self, setting: str) -> None:
        super().__init__(
            f"Missing required configuration: {setting}",
            "CONFIGURATION_ERROR",
            {"setting": setting},
        )


class StoreException(RealEstateException):
    """Raised when the persistence store fails or does not acknowledge a write."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Store operation '{operation}' failed",
            "STORE_ERROR",
            {"operation": operation, "reason": reason},
        )
