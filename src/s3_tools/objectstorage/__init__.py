"""Object storage operations for S3-compatible services."""

from .bucket import BucketClient
from .client import Client, new_bucket_client, new_client
from .clients import S3ClientConfig, S3ClientManager, new_options
from .options import (
    GetObjectOptions,
    ListObjectsOptions,
    MakeBucketOptions,
    PutObjectOptions,
    RemoveObjectOptions,
)
from .types import ObjectInfo, UploadInfo

__all__ = [
    "BucketClient",
    "Client",
    "GetObjectOptions",
    "ListObjectsOptions",
    "MakeBucketOptions",
    "ObjectInfo",
    "PutObjectOptions",
    "RemoveObjectOptions",
    "S3ClientConfig",
    "S3ClientManager",
    "UploadInfo",
    "new_bucket_client",
    "new_client",
    "new_options",
]
