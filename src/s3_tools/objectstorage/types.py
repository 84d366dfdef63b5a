"""Result records returned by storage operations."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional


def _strip_etag(etag: Optional[str]) -> Optional[str]:
    return etag.strip('"') if etag else etag


@dataclass(frozen=True)
class UploadInfo:
    """Result of an object upload."""

    bucket: str
    key: str
    etag: Optional[str]
    size: int
    version_id: Optional[str] = None

    @classmethod
    def from_response(
        cls, bucket: str, key: str, size: int, response: Mapping[str, Any]
    ) -> "UploadInfo":
        return cls(
            bucket=bucket,
            key=key,
            etag=_strip_etag(response.get("ETag")),
            size=size,
            version_id=response.get("VersionId"),
        )


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata about a stored object or, for grouped listings, a common prefix.

    Attributes:
        key: Object key (or the prefix itself when ``is_prefix`` is set)
        size: Object size in bytes
        etag: Entity tag without surrounding quotes
        last_modified: Last modification timestamp
        content_type: Content type, only known for stat calls
        version_id: Version ID if versioning is enabled
        storage_class: Storage class reported by the service
        metadata: User metadata, only known for stat calls
        is_prefix: True for common-prefix entries of non-recursive listings
    """

    key: str
    size: int = 0
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
    version_id: Optional[str] = None
    storage_class: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    is_prefix: bool = False

    @classmethod
    def from_listing(cls, entry: Mapping[str, Any]) -> "ObjectInfo":
        """Build from a ``Contents`` entry of a ``list_objects_v2`` page."""
        return cls(
            key=entry["Key"],
            size=entry.get("Size", 0),
            etag=_strip_etag(entry.get("ETag")),
            last_modified=entry.get("LastModified"),
            storage_class=entry.get("StorageClass"),
        )

    @classmethod
    def from_prefix(cls, entry: Mapping[str, Any]) -> "ObjectInfo":
        """Build from a ``CommonPrefixes`` entry."""
        return cls(key=entry["Prefix"], is_prefix=True)

    @classmethod
    def from_head(cls, key: str, response: Mapping[str, Any]) -> "ObjectInfo":
        """Build from a ``head_object`` response."""
        return cls(
            key=key,
            size=response.get("ContentLength", 0),
            etag=_strip_etag(response.get("ETag")),
            last_modified=response.get("LastModified"),
            content_type=response.get("ContentType"),
            version_id=response.get("VersionId"),
            storage_class=response.get("StorageClass"),
            metadata=dict(response.get("Metadata", {})),
        )
