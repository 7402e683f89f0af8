"""Infrastructure exceptions for storage and remote backend operations.

Storage errors extend the domain StoreException so the application layer
can handle them without importing infrastructure, and presentation can map
them to HTTP responses consistently.
"""

from signdesk.domain.exceptions import SignDeskException, StoreException


class StorageException(StoreException):
    """Base exception for storage operations."""


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageListError(StorageException):
    """Listing a bucket failed."""

    def __init__(self, bucket: str, reason: str) -> None:
        super().__init__(
            f"Failed to list bucket: {bucket}",
            "STORAGE_LIST_ERROR",
            {"bucket": bucket, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Insufficient permissions for storage operation (or path escapes the root)."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class SupabaseRequestError(StorageException):
    """A REST call to the backend returned a non-success status or failed in transport."""

    def __init__(self, method: str, path: str, status_code: int | None, reason: str) -> None:
        super().__init__(
            f"{method} {path} failed",
            "BACKEND_REQUEST_ERROR",
            {"method": method, "path": path, "status_code": status_code, "reason": reason},
        )
        self.status_code = status_code


class LLMRequestError(SignDeskException):
    """A chat completion call failed in transport or returned a non-success status."""

    def __init__(self, url: str, status_code: int | None, reason: str) -> None:
        super().__init__(
            "Questionnaire generation service unavailable",
            "LLM_REQUEST_ERROR",
            {"url": url, "status_code": status_code, "reason": reason},
        )
        self.status_code = status_code
