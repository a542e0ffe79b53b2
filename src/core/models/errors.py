"""Custom exception classes for the image pipeline."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_AUTH_REQUIRED,
    ERROR_CODE_BUCKET_NOT_FOUND,
    ERROR_CODE_IMAGE_DECODE_FAILED,
    ERROR_CODE_IMAGE_ENCODE_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    ERROR_CODE_OBJECT_STORE,
    ERROR_CODE_PERMISSION_DENIED,
    ERROR_CODE_PUBLIC_URL_UNAVAILABLE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image pipeline errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when caller-supplied configuration is invalid."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class DecodeError(ImageServiceError):
    """Raised when a source image cannot be decoded."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_DECODE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class EncodeError(ImageServiceError):
    """Raised when a rasterized image cannot be encoded."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_ENCODE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class AuthRequiredError(ImageServiceError):
    """Raised when no authenticated identity is available for an upload."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_AUTH_REQUIRED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class BucketNotFoundError(ImageServiceError):
    """Raised when the target bucket does not exist in the object store."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_BUCKET_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class PermissionDeniedError(ImageServiceError):
    """Raised when the object store refuses the write."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PERMISSION_DENIED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UploadFailedError(ImageServiceError):
    """Raised for any other object store upload failure."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IMAGE_UPLOAD_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UrlUnavailableError(ImageServiceError):
    """Raised when the store accepted a write but returned no public URL."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PUBLIC_URL_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ObjectStoreError(ImageServiceError):
    """Raised by object store implementations when a store call fails.

    `status_code` carries the HTTP status reported by the store, when known.
    """

    status_code: int | None

    def __init__(
        self,
        *,
        message: str,
        status_code: int | None = None,
        error_code: str = ERROR_CODE_OBJECT_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
