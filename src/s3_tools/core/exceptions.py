"""Exception hierarchy for s3-tools."""

from typing import Optional


class S3ToolsError(Exception):
    """Base exception for all s3-tools errors."""

    pass


class ValidationError(S3ToolsError):
    """Raised when configuration or arguments are invalid."""

    pass


class SerializationError(S3ToolsError):
    """Base class for value <-> bytes conversion failures."""

    pass


class EncodeError(SerializationError):
    """Raised when a value cannot be converted to bytes.

    Always raised before any request is sent to the storage service.
    """

    pass


class DecodeError(SerializationError):
    """Raised when fetched bytes cannot be converted into the target type."""

    pass


class StorageError(S3ToolsError):
    """Raised when the storage service rejects or fails a request.

    The botocore exception that caused it is available as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        bucket: Optional[str] = None,
        key: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.code = code
