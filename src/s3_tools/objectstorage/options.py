"""Per-operation options mapped onto boto3 request parameters."""

from abc import abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @abstractmethod
    def to_params(self) -> Dict[str, Any]:
        """Return the boto3 keyword arguments for these options."""


class MakeBucketOptions(_Options):
    """Options for bucket creation."""

    region: Optional[str] = Field(
        None, description="Bucket region; us-east-1 needs no location constraint"
    )
    object_locking: bool = Field(False, description="Enable S3 object lock")

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.region and self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        if self.object_locking:
            params["ObjectLockEnabledForBucket"] = True
        return params


class PutObjectOptions(_Options):
    """Options for object uploads."""

    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    content_disposition: Optional[str] = None
    cache_control: Optional[str] = None
    storage_class: Optional[str] = None
    metadata: Dict[str, str] = Field(
        default_factory=dict, description="User metadata (x-amz-meta-*)"
    )

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for field, param in (
            ("content_type", "ContentType"),
            ("content_encoding", "ContentEncoding"),
            ("content_disposition", "ContentDisposition"),
            ("cache_control", "CacheControl"),
            ("storage_class", "StorageClass"),
        ):
            value = getattr(self, field)
            if value is not None:
                params[param] = value
        if self.metadata:
            params["Metadata"] = dict(self.metadata)
        return params


class GetObjectOptions(_Options):
    """Options for object downloads and stat calls."""

    version_id: Optional[str] = None
    byte_range: Optional[tuple[int, int]] = Field(
        None, description="Inclusive (start, end) byte range"
    )
    if_match: Optional[str] = None
    if_none_match: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.version_id:
            params["VersionId"] = self.version_id
        if self.byte_range is not None:
            start, end = self.byte_range
            params["Range"] = f"bytes={start}-{end}"
        if self.if_match:
            params["IfMatch"] = self.if_match
        if self.if_none_match:
            params["IfNoneMatch"] = self.if_none_match
        return params


class RemoveObjectOptions(_Options):
    """Options for object removal."""

    version_id: Optional[str] = None
    bypass_governance_mode: bool = False

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.version_id:
            params["VersionId"] = self.version_id
        if self.bypass_governance_mode:
            params["BypassGovernanceRetention"] = True
        return params


class ListObjectsOptions(_Options):
    """Options for object listing."""

    prefix: str = ""
    recursive: bool = Field(
        False, description="List every key instead of grouping by '/'"
    )
    start_after: Optional[str] = None
    max_keys: int = Field(0, ge=0, description="Maximum entries to yield; 0 = all")
    page_size: Optional[int] = Field(None, gt=0, le=1000)

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.prefix:
            params["Prefix"] = self.prefix
        if not self.recursive:
            params["Delimiter"] = "/"
        if self.start_after:
            params["StartAfter"] = self.start_after
        pagination: Dict[str, int] = {}
        if self.max_keys:
            pagination["MaxItems"] = self.max_keys
        if self.page_size:
            pagination["PageSize"] = self.page_size
        if pagination:
            params["PaginationConfig"] = pagination
        return params
