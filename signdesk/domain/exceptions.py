"""Domain exceptions for signdesk.

Defines domain-level exceptions that represent business rule violations,
including the signature taxonomy (authentication, payload, permission,
ordering, store failures). Presentation layer maps them to HTTP responses
in exception handlers.
"""

from typing import Any


class SignDeskException(Exception):
    """Base exception for all signdesk errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging. Presentation layer maps these to HTTP
    responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, role).
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
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(SignDeskException):
    """Raised when input validation fails (e.g. unknown document type)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(SignDeskException):
    """Raised when a bearer token is invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthenticationRequired(SignDeskException):
    """Raised when an operation needs a signed-in session and none is present."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, "AUTHENTICATION_REQUIRED")


class ResourceNotFoundException(SignDeskException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'document').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidSignaturePayload(SignDeskException):
    """Raised when signature image data is empty or not a valid embedded image."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Invalid signature format: {reason}",
            "INVALID_SIGNATURE_PAYLOAD",
            {"reason": reason},
        )


class SignaturePermissionException(SignDeskException):
    """Base for refusals produced by the signature permission check."""

    def __init__(self, message: str, error_code: str, role: str) -> None:
        super().__init__(message, error_code, {"role": role})


class SignaturesNotLoaded(SignaturePermissionException):
    """Raised when signing is attempted before existing signatures are known."""

    def __init__(self, role: str, message: str = "Loading signatures...") -> None:
        super().__init__(message, "SIGNATURES_NOT_LOADED", role)


class NotPermittedForRole(SignaturePermissionException):
    """Raised when the role is neither required nor optional for the document type."""

    def __init__(self, role: str, document_type: str) -> None:
        super().__init__(
            "Your signature is not required for this document",
            "NOT_PERMITTED_FOR_ROLE",
            role,
        )
        self.details["document_type"] = document_type


class AlreadySigned(SignaturePermissionException):
    """Raised when a non-trainer role tries to sign a second time."""

    def __init__(self, role: str) -> None:
        super().__init__(
            "You have already signed this document", "ALREADY_SIGNED", role
        )


class OutOfOrder(SignaturePermissionException):
    """Raised when an earlier role in the signing order has not signed yet."""

    def __init__(self, role: str, message: str, waiting_for: list[str]) -> None:
        super().__init__(message, "OUT_OF_ORDER", role)
        self.details["waiting_for"] = waiting_for


class StoreException(SignDeskException):
    """Base for failures of the remote store (tables or object storage)."""


class StoreWriteFailed(StoreException):
    """Raised when uploading an image or inserting a record fails."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Store write failed during {operation}",
            "STORE_WRITE_FAILED",
            {"operation": operation, "reason": reason},
        )


class StoreReadFailed(StoreException):
    """Raised by repositories when a read fails; background loads treat it as absent."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Store read failed during {operation}",
            "STORE_READ_FAILED",
            {"operation": operation, "reason": reason},
        )


class CoordinatorClosed(SignDeskException):
    """Raised when a destroyed signature coordinator is used to save."""

    def __init__(self) -> None:
        super().__init__(
            "Signature session has been closed", "COORDINATOR_CLOSED"
        )


class LLMResponseFormatError(SignDeskException):
    """Raised when a generated questionnaire response has no usable question list."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Unrecognized questionnaire response: {reason}",
            "LLM_RESPONSE_FORMAT_ERROR",
            {"reason": reason},
        )
