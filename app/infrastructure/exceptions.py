"""Infrastructure exceptions for the document store, blob store and identity provider.

Upstream errors extend UpstreamException and not-found errors extend
ResourceNotFoundException so presentation can map them to HTTP responses
consistently.
"""

from app.domain.exceptions import ResourceNotFoundException, UpstreamException


# ---- Document store ----


class DocumentStoreError(UpstreamException):
    """Document store call failed (transport error or unexpected status)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            "Document store request failed",
            "DOCUMENT_STORE_ERROR",
            {"path": path, "reason": reason},
        )


class DocumentNotFoundError(ResourceNotFoundException):
    """update_document target does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__("document", path, f"Document not found: {path}")


class DocumentExistsError(DocumentStoreError):
    """Create with an explicit id returned 409 (document ID already exists)."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "Document already exists")


# ---- Blob store ----


class StorageException(UpstreamException):
    """Base exception for blob storage operations."""


class StorageNotFoundError(ResourceNotFoundException):
    """Object not found in storage."""

    def __init__(self, file_path: str) -> None:
        super().__init__("file", file_path, f"File not found: {file_path}")


class StorageUploadError(StorageException):
    """Object upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """Object download failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to download file: {file_path}",
            "STORAGE_DOWNLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Object deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePolicyError(StorageException):
    """Access policy could not be written or read."""

    def __init__(self, namespace: str, reason: str) -> None:
        super().__init__(
            f"Failed to apply access policy for: {namespace}",
            "STORAGE_POLICY_ERROR",
            {"namespace": namespace, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


# ---- Identity provider ----


class IdentityProviderError(UpstreamException):
    """Identity provider call failed (e.g. EMAIL_EXISTS, transport error)."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Identity provider {operation} failed",
            "IDENTITY_PROVIDER_ERROR",
            {"operation": operation, "reason": reason},
        )


