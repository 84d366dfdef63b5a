"""Bucket-scoped handle over a shared :class:`~s3_tools.objectstorage.client.Client`."""

from typing import TYPE_CHECKING, Any, BinaryIO, Iterator, Optional

from botocore.response import StreamingBody

from s3_tools.serializers import Serializer
from s3_tools.serializers.base import T

from .options import (
    GetObjectOptions,
    ListObjectsOptions,
    MakeBucketOptions,
    PutObjectOptions,
    RemoveObjectOptions,
)
from .types import ObjectInfo, UploadInfo

if TYPE_CHECKING:
    from .client import Client


class BucketClient:
    """Client operations bound to one bucket.

    Every call forwards to the owning client with the bucket name filled in.
    Handles are cheap; several may share one client.

    Attributes:
        client: The owning client
        serializer: Default serializer for ``put`` and ``read``
    """

    def __init__(
        self,
        client: "Client",
        bucket_name: str,
        serializer: Optional[Serializer] = None,
    ):
        self.client = client
        self._bucket_name = bucket_name
        self.serializer = serializer if serializer is not None else client.serializer

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def __repr__(self) -> str:
        return f"BucketClient(bucket_name={self._bucket_name!r}, serializer={self.serializer!r})"

    def ensure_bucket(self, opts: Optional[MakeBucketOptions] = None) -> None:
        self.client.ensure_bucket(self._bucket_name, opts)

    def bucket_exists(self) -> bool:
        return self.client.bucket_exists(self._bucket_name)

    def remove_bucket(self) -> None:
        self.client.remove_bucket(self._bucket_name)

    def list_objects(self, opts: Optional[ListObjectsOptions] = None) -> Iterator[ObjectInfo]:
        return self.client.list_objects(self._bucket_name, opts)

    def stat_object(self, key: str, opts: Optional[GetObjectOptions] = None) -> ObjectInfo:
        return self.client.stat_object(self._bucket_name, key, opts)

    def get_object(
        self, key: str, opts: Optional[GetObjectOptions] = None
    ) -> StreamingBody:
        return self.client.get_object(self._bucket_name, key, opts)

    def remove_object(self, key: str, opts: Optional[RemoveObjectOptions] = None) -> None:
        self.client.remove_object(self._bucket_name, key, opts)

    def put_bytes(
        self, key: str, data: bytes, opts: Optional[PutObjectOptions] = None
    ) -> UploadInfo:
        return self.client.put_bytes(self._bucket_name, key, data, opts)

    def put(
        self,
        key: str,
        value: Any,
        opts: Optional[PutObjectOptions] = None,
        *,
        serializer: Optional[Serializer] = None,
    ) -> UploadInfo:
        ser = serializer if serializer is not None else self.serializer
        return self.client.put(self._bucket_name, key, value, opts, serializer=ser)

    def read_bytes(
        self, key: str, dst: BinaryIO, opts: Optional[GetObjectOptions] = None
    ) -> None:
        self.client.read_bytes(self._bucket_name, key, dst, opts)

    def read(
        self,
        key: str,
        target: Optional[type[T]] = None,
        opts: Optional[GetObjectOptions] = None,
        *,
        serializer: Optional[Serializer] = None,
    ) -> T:
        ser = serializer if serializer is not None else self.serializer
        return self.client.read(self._bucket_name, key, target, opts, serializer=ser)
