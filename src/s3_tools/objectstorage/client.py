"""Object storage client with pluggable value serialization.

The :class:`Client` wraps a boto3 S3 client. It forwards a fixed set of
bucket and object operations and adds byte-level and value-level put/read
helpers. Values are converted with the client's serializer (JSON unless
configured otherwise) or with a per-call override.

Example:
    >>> client = new_client("localhost:9000", new_options("key", "secret", secure=False))
    >>> client.ensure_bucket("reports")
    >>> client.put("reports", "2024/summary", Summary(total=3))
    >>> client.read("reports", "2024/summary", Summary)
    Summary(total=3)
"""

import io
from contextlib import closing, contextmanager
from typing import Any, BinaryIO, Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError
from botocore.response import StreamingBody

from s3_tools.core import get_logger, get_tracer
from s3_tools.core.exceptions import StorageError
from s3_tools.serializers import Serializer, get_serializer
from s3_tools.serializers.base import T

from .bucket import BucketClient
from .clients import S3ClientConfig, S3ClientManager
from .options import (
    GetObjectOptions,
    ListObjectsOptions,
    MakeBucketOptions,
    PutObjectOptions,
    RemoveObjectOptions,
)
from .types import ObjectInfo, UploadInfo

logger = get_logger(__name__)
tracer = get_tracer(__name__)

_CHUNK_SIZE = 64 * 1024
_MISSING_BUCKET_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})


def _error_code(error: Exception) -> Optional[str]:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def _storage_error(
    error: Exception,
    operation: str,
    bucket: Optional[str] = None,
    key: Optional[str] = None,
) -> StorageError:
    location = f"{bucket}/{key}" if key else (bucket or "")
    code = _error_code(error)
    error_msg = f"S3 {operation} failed for '{location}': {error}"
    logger.error(error_msg, operation=operation, bucket=bucket, key=key, code=code)
    return StorageError(error_msg, operation, bucket=bucket, key=key, code=code)


@contextmanager
def _storage_errors(
    operation: str, bucket: Optional[str] = None, key: Optional[str] = None
) -> Iterator[None]:
    """Re-raise botocore failures as StorageError."""
    try:
        yield
    except (ClientError, BotoCoreError) as e:
        raise _storage_error(e, operation, bucket, key) from e


class Client:
    """S3 client with bucket helpers and value serialization.

    Attributes:
        s3: The underlying boto3 S3 client
        serializer: Default serializer for ``put`` and ``read``
    """

    def __init__(self, s3: Any, serializer: Optional[Serializer] = None):
        self.s3 = s3
        self.serializer = serializer if serializer is not None else get_serializer()

    def __repr__(self) -> str:
        return f"Client(endpoint={self.s3.meta.endpoint_url!r}, serializer={self.serializer!r})"

    # Bucket operations

    def bucket_exists(self, bucket: str) -> bool:
        """Return True if ``bucket`` exists and is accessible."""
        try:
            self.s3.head_bucket(Bucket=bucket)
        except ClientError as e:
            if _error_code(e) in _MISSING_BUCKET_CODES:
                return False
            raise _storage_error(e, "bucket_exists", bucket) from e
        except BotoCoreError as e:
            raise _storage_error(e, "bucket_exists", bucket) from e
        return True

    def make_bucket(self, bucket: str, opts: Optional[MakeBucketOptions] = None) -> None:
        """Create ``bucket``; the region defaults to the client's region."""
        opts = opts or MakeBucketOptions()
        if opts.region is None:
            opts = opts.model_copy(update={"region": self.s3.meta.region_name})
        with _storage_errors("make_bucket", bucket):
            self.s3.create_bucket(Bucket=bucket, **opts.to_params())
        logger.info("Bucket created", bucket=bucket, region=opts.region)

    def ensure_bucket(self, bucket: str, opts: Optional[MakeBucketOptions] = None) -> None:
        """Create ``bucket`` unless it already exists.

        Losing a creation race against another caller of the same account is
        treated as success.

        Raises:
            StorageError: On connectivity or permission failures
        """
        if self.bucket_exists(bucket):
            logger.debug("Bucket already exists", bucket=bucket)
            return

        try:
            self.make_bucket(bucket, opts)
        except StorageError as e:
            if e.code != "BucketAlreadyOwnedByYou":
                raise
            logger.info("Bucket created concurrently", bucket=bucket)

    def remove_bucket(self, bucket: str) -> None:
        """Remove an empty bucket."""
        with _storage_errors("remove_bucket", bucket):
            self.s3.delete_bucket(Bucket=bucket)
        logger.info("Bucket removed", bucket=bucket)

    # Object operations

    def list_objects(
        self, bucket: str, opts: Optional[ListObjectsOptions] = None
    ) -> Iterator[ObjectInfo]:
        """Lazily list objects in ``bucket``.

        Pages are fetched as the iterator is consumed. Non-recursive listings
        also yield common prefixes (``is_prefix=True``). Each call starts a
        new listing.
        """
        opts = opts or ListObjectsOptions()
        with _storage_errors("list_objects", bucket):
            paginator = self.s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket, **opts.to_params()):
                entries = [ObjectInfo.from_prefix(p) for p in page.get("CommonPrefixes", [])]
                entries.extend(ObjectInfo.from_listing(o) for o in page.get("Contents", []))
                entries.sort(key=lambda info: info.key)
                yield from entries

    def stat_object(
        self, bucket: str, key: str, opts: Optional[GetObjectOptions] = None
    ) -> ObjectInfo:
        """Return metadata for an object without fetching its body."""
        opts = opts or GetObjectOptions()
        with _storage_errors("stat_object", bucket, key):
            response = self.s3.head_object(Bucket=bucket, Key=key, **opts.to_params())
        return ObjectInfo.from_head(key, response)

    def get_object(
        self, bucket: str, key: str, opts: Optional[GetObjectOptions] = None
    ) -> StreamingBody:
        """Return the streaming body of an object.

        The caller owns the returned stream and must close it.
        """
        opts = opts or GetObjectOptions()
        with _storage_errors("get_object", bucket, key):
            response = self.s3.get_object(Bucket=bucket, Key=key, **opts.to_params())
        return response["Body"]

    def remove_object(
        self, bucket: str, key: str, opts: Optional[RemoveObjectOptions] = None
    ) -> None:
        opts = opts or RemoveObjectOptions()
        with _storage_errors("remove_object", bucket, key):
            self.s3.delete_object(Bucket=bucket, Key=key, **opts.to_params())
        logger.debug("Object removed", bucket=bucket, key=key)

    # Byte and value helpers

    def put_bytes(
        self,
        bucket: str,
        key: str,
        data: bytes,
        opts: Optional[PutObjectOptions] = None,
    ) -> UploadInfo:
        """Upload ``data`` unchanged as ``bucket/key``."""
        opts = opts or PutObjectOptions()
        with tracer.start_as_current_span(
            "s3.put_bytes", attributes={"s3.bucket": bucket, "s3.key": key}
        ):
            with _storage_errors("put_bytes", bucket, key):
                response = self.s3.put_object(
                    Bucket=bucket,
                    Key=key,
                    Body=data,
                    ContentLength=len(data),
                    **opts.to_params(),
                )
        logger.debug("Object uploaded", bucket=bucket, key=key, size=len(data))
        return UploadInfo.from_response(bucket, key, len(data), response)

    def put(
        self,
        bucket: str,
        key: str,
        value: Any,
        opts: Optional[PutObjectOptions] = None,
        *,
        serializer: Optional[Serializer] = None,
    ) -> UploadInfo:
        """Encode ``value`` and upload it.

        Args:
            bucket: Bucket name
            key: Object key
            value: Any value supported by the effective serializer
            opts: Upload options
            serializer: Override for this call only

        Raises:
            EncodeError: If encoding fails; nothing is sent in that case
            StorageError: If the upload fails
        """
        ser = serializer if serializer is not None else self.serializer
        data = ser.serialize(value)
        return self.put_bytes(bucket, key, data, opts)

    def read_bytes(
        self,
        bucket: str,
        key: str,
        dst: BinaryIO,
        opts: Optional[GetObjectOptions] = None,
    ) -> None:
        """Stream the object body into ``dst``.

        The body is closed once the copy ends, whether or not it succeeded.
        """
        with tracer.start_as_current_span(
            "s3.read_bytes", attributes={"s3.bucket": bucket, "s3.key": key}
        ):
            body = self.get_object(bucket, key, opts)
            with closing(body), _storage_errors("read_bytes", bucket, key):
                for chunk in body.iter_chunks(_CHUNK_SIZE):
                    dst.write(chunk)

    def read(
        self,
        bucket: str,
        key: str,
        target: Optional[type[T]] = None,
        opts: Optional[GetObjectOptions] = None,
        *,
        serializer: Optional[Serializer] = None,
    ) -> T:
        """Fetch an object and decode it into ``target``.

        Args:
            bucket: Bucket name
            key: Object key
            target: Type to decode into; plain builtins when omitted
            opts: Download options
            serializer: Override for this call only

        Raises:
            StorageError: If the download fails
            DecodeError: If the payload does not decode into ``target``
        """
        buf = io.BytesIO()
        self.read_bytes(bucket, key, buf, opts)
        ser = serializer if serializer is not None else self.serializer
        return ser.deserialize(buf.getvalue(), target)

    def bucket(
        self, bucket_name: str, serializer: Optional[Serializer] = None
    ) -> BucketClient:
        """Return a handle bound to ``bucket_name``.

        The handle uses this client's serializer unless one is given.
        """
        return BucketClient(self, bucket_name, serializer)


def new_client(
    endpoint: Optional[str] = None,
    config: Optional[S3ClientConfig] = None,
    serializer: Optional[Serializer] = None,
) -> Client:
    """Create a client for ``endpoint``.

    Args:
        endpoint: URL or ``host:port``; ``None`` keeps ``config.endpoint_url``
            or the SDK default
        config: Connection configuration, see :func:`new_options`
        serializer: Default serializer; JSON unless configured otherwise
    """
    config = config or S3ClientConfig()
    if endpoint:
        config = config.model_copy(update={"endpoint_url": endpoint})
    manager = S3ClientManager(config)
    return Client(manager.client, serializer)


def new_bucket_client(
    endpoint: Optional[str],
    bucket_name: str,
    config: Optional[S3ClientConfig] = None,
    serializer: Optional[Serializer] = None,
) -> BucketClient:
    """Create a client and return a handle bound to ``bucket_name``."""
    return new_client(endpoint, config, serializer).bucket(bucket_name, serializer)
