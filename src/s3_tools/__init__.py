"""Convenience layer over S3-compatible object storage.

This package wraps a boto3 S3 client with bucket-scoped helpers and
pluggable value serialization (JSON by default, MessagePack optionally)
on top of raw byte uploads and downloads.

Key Features:
    - Byte-level and value-level put/read operations
    - Idempotent bucket creation
    - Bucket-scoped handles sharing one client
    - Per-call serializer overrides

Recommended Usage:
    >>> from s3_tools import new_bucket_client, new_options
    >>> reports = new_bucket_client(
    ...     "localhost:9000", "reports", new_options("key", "secret", secure=False)
    ... )
    >>> reports.ensure_bucket()
    >>> reports.put("summary", {"total": 3})
    >>> reports.read("summary")
    {'total': 3}
"""

__version__ = "0.1.0"

from .core.exceptions import (
    DecodeError,
    EncodeError,
    S3ToolsError,
    SerializationError,
    StorageError,
    ValidationError,
)
from .objectstorage import (
    BucketClient,
    Client,
    GetObjectOptions,
    ListObjectsOptions,
    MakeBucketOptions,
    ObjectInfo,
    PutObjectOptions,
    RemoveObjectOptions,
    S3ClientConfig,
    UploadInfo,
    new_bucket_client,
    new_client,
    new_options,
)
from .serializers import JSONSerializer, MsgPackSerializer, Serializer, get_serializer

__all__ = [
    # Clients
    "BucketClient",
    "Client",
    "S3ClientConfig",
    "new_bucket_client",
    "new_client",
    "new_options",
    # Options and results
    "GetObjectOptions",
    "ListObjectsOptions",
    "MakeBucketOptions",
    "ObjectInfo",
    "PutObjectOptions",
    "RemoveObjectOptions",
    "UploadInfo",
    # Serializers
    "JSONSerializer",
    "MsgPackSerializer",
    "Serializer",
    "get_serializer",
    # Errors
    "DecodeError",
    "EncodeError",
    "S3ToolsError",
    "SerializationError",
    "StorageError",
    "ValidationError",
]
